"""
Upserts de un registro remoto sobre la base local.

Cada funcion decide INSERT vs UPDATE segun exista (o no) el registro local
ya consultado. Regla de conflicto: el remoto siempre gana.

- Los ids numericos los asigna la base local: nunca se copian.
- Las claves de correlacion (uuid, title_id) nunca se sobreescriben en UPDATE.
- source_assets.asset_id siempre apunta al id LOCAL del asset.
"""
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import insert, update
from sqlalchemy.ext.asyncio import AsyncConnection

from local_sync.infrastructure.database.models import AssetModel, SourceAssetModel, TitleModel
from local_sync.shared.exceptions.sync import RecordUpsertError


Record = Dict[str, Any]


def _without(record: Record, excluded: Iterable[str]) -> Record:
    """Copia del registro sin las columnas excluidas."""
    excluded = set(excluded)
    return {column: value for column, value in record.items() if column not in excluded}


async def upsert_asset(asset: Record, existing_local_asset: Optional[Record], conn: AsyncConnection) -> int:
    """
    Inserta o actualiza un asset y retorna su id local.

    Raises:
        RecordUpsertError: si la base no retorna la fila escrita
    """
    if existing_local_asset:
        # Actualiza todo salvo 'id' y 'uuid'
        statement = (
            update(AssetModel)
            .where(AssetModel.id == existing_local_asset["id"])
            .values(**_without(asset, ("id", "uuid")))
            .returning(AssetModel.id)
        )
    else:
        # Inserta todo salvo 'id': lo asigna la base
        statement = insert(AssetModel).values(**_without(asset, ("id",))).returning(AssetModel.id)

    result = await conn.execute(statement)
    row = result.first()
    if row is None:
        raise RecordUpsertError("asset", asset.get("uuid"))

    return row[0]


async def upsert_source_asset(
    source_asset: Record,
    existing_local_source_asset: Optional[Record],
    local_asset_id: int,
    conn: AsyncConnection,
) -> None:
    """
    Inserta o actualiza un source asset colgando del asset local.

    asset_id, source_system y source_id se re-asignan de forma explicita
    tambien en UPDATE.
    """
    values = {
        **_without(source_asset, ("id", "asset_id", "source_system", "source_id")),
        "asset_id": local_asset_id,
        "source_system": source_asset["source_system"],
        "source_id": source_asset["source_id"],
    }

    if existing_local_source_asset:
        statement = (
            update(SourceAssetModel)
            .where(SourceAssetModel.id == existing_local_source_asset["id"])
            .values(**values)
        )
    else:
        statement = insert(SourceAssetModel).values(**values)

    await conn.execute(statement)


async def upsert_title(title: Record, existing_local_title: Optional[Record], conn: AsyncConnection) -> None:
    """Inserta o actualiza un title por su clave de negocio (title_id)."""
    if existing_local_title:
        statement = (
            update(TitleModel)
            .where(TitleModel.title_id == existing_local_title["title_id"])
            .values(**_without(title, ("id", "title_id")))
        )
    else:
        statement = insert(TitleModel).values(**_without(title, ("id",)))

    await conn.execute(statement)
