"""
Repositorio de lectura de assets, source assets y titles.

Cada consulta abre su propia conexion del pool, de modo que dos lecturas
independientes pueden correr en paralelo (asyncio.gather).
"""
from typing import Any, Dict, List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from local_sync.infrastructure.database.models import AssetModel, SourceAssetModel, TitleModel


Record = Dict[str, Any]


class RecordRepository:
    """Lecturas "valor en conjunto" sobre las tablas sincronizadas."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def _fetch_where_in(self, model, column, values: Sequence[Any]) -> List[Record]:
        if not values:
            return []

        query = select(model.__table__).where(column.in_(list(values))).order_by(model.id)
        async with self.engine.connect() as conn:
            result = await conn.execute(query)
            return [dict(row) for row in result.mappings().all()]

    async def get_assets_by_uuid(self, uuids: Sequence[str]) -> List[Record]:
        """Obtiene los assets cuyo uuid esta en la lista."""
        return await self._fetch_where_in(AssetModel, AssetModel.uuid, uuids)

    async def get_source_assets_by_asset_id(self, asset_ids: Sequence[int]) -> List[Record]:
        """Obtiene los source assets de los assets indicados (ids propios de esta base)."""
        return await self._fetch_where_in(SourceAssetModel, SourceAssetModel.asset_id, asset_ids)

    async def get_titles_by_title_id(self, title_ids: Sequence[str]) -> List[Record]:
        """Obtiene los titles por su clave de negocio."""
        return await self._fetch_where_in(TitleModel, TitleModel.title_id, title_ids)
