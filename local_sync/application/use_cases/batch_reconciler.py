"""
Reconciliacion de un batch de assets: remoto -> local.

Relaciones:
- assets.id -> source_assets.asset_id (uno a muchos)
- titles.title_id <- assets.data.title.title_id (un title, muchos assets)

Flujo por batch:
1. Trae los assets remotos del batch (si no hay ninguno, el batch se omite)
2. Trae en paralelo source assets y titles remotos
3. Trae en paralelo assets y titles locales existentes
4. Trae los source assets locales de los assets LOCALES (ids locales)
5. Por cada asset: una transaccion con el asset y sus source assets
6. Titles fuera de las transacciones de assets (son compartidos)
7. Reporta UUIDs y titles faltantes (solo diagnostico)
"""
import asyncio
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from local_sync.application.dto.sync_dto import AssetSyncResult, BatchOutcome, RecordFailure
from local_sync.application.events import SyncEventSink
from local_sync.infrastructure.repositories.record_repository import RecordRepository
from local_sync.infrastructure.repositories.record_upserts import (
    upsert_asset,
    upsert_source_asset,
    upsert_title,
)
from local_sync.shared.constants.sync_constants import (
    TITLE_REFERENCE_FIELD,
    TITLE_REFERENCE_KEY,
    SyncEvent,
)
from local_sync.shared.exceptions.sync import RecordUpsertError
from local_sync.shared.utils.collections import build_lookup, build_multi_lookup, find_duplicate_keys


Record = Dict[str, Any]


def get_title_reference(asset: Record) -> Optional[str]:
    """Retorna el title_id referenciado por assets.data, si existe."""
    data = asset.get("data")
    if not isinstance(data, dict):
        return None
    title = data.get(TITLE_REFERENCE_KEY)
    if not isinstance(title, dict):
        return None
    title_id = title.get(TITLE_REFERENCE_FIELD)
    # El JSON remoto puede traer el id como numero
    return str(title_id) if title_id else None


def get_ids_from_assets(assets: List[Record]) -> Tuple[List[int], List[str], List[str]]:
    """
    Extrae de los assets remotos:
    - ids remotos
    - uuids encontrados
    - title_ids referenciados (sin duplicados, en orden de aparicion)
    """
    asset_ids: List[int] = []
    asset_uuids: List[str] = []
    title_ids: Dict[str, None] = {}

    for asset in assets:
        asset_ids.append(asset["id"])
        asset_uuids.append(asset["uuid"])

        title_id = get_title_reference(asset)
        if title_id:
            title_ids[title_id] = None

    return asset_ids, asset_uuids, list(title_ids)


def _source_key(source_asset: Record) -> str:
    return f"{source_asset['source_system']}:{source_asset['source_id']}"


class BatchReconciler:
    """
    Orquestador de un batch.

    `remote_engine` solo se lee; `local_engine` se lee y escribe.
    """

    def __init__(self, remote_engine: AsyncEngine, local_engine: AsyncEngine, events: SyncEventSink):
        self.local_engine = local_engine
        self.remote = RecordRepository(remote_engine)
        self.local = RecordRepository(local_engine)
        self.events = events

    async def reconcile(self, uuids_batch: List[str], batch_number: int = 1) -> BatchOutcome:
        """
        Sincroniza un batch de UUIDs.

        Los fallos por asset o por title quedan en `BatchOutcome.failures`;
        los errores de lectura se propagan al driver.
        """
        outcome = BatchOutcome(batch_number=batch_number, requested=list(uuids_batch))

        assets = await self.remote.get_assets_by_uuid(uuids_batch)
        outcome.found = len(assets)

        if not assets:
            self.events.error(SyncEvent.BATCH_EMPTY, batch=uuids_batch)
            outcome.skipped = True
            outcome.missing_asset_uuids = list(uuids_batch)
            return outcome

        asset_ids, asset_uuids, title_ids = get_ids_from_assets(assets)

        source_assets, titles = await asyncio.gather(
            self.remote.get_source_assets_by_asset_id(asset_ids),
            self.remote.get_titles_by_title_id(title_ids),
        )

        local_assets, local_titles = await asyncio.gather(
            self.local.get_assets_by_uuid(asset_uuids),
            self.local.get_titles_by_title_id(title_ids),
        )

        # Traduccion de ids: los source assets locales cuelgan de ids LOCALES
        local_asset_ids = [asset["id"] for asset in local_assets]
        local_source_assets = await self.local.get_source_assets_by_asset_id(local_asset_ids)

        self._report_duplicates("asset", assets, lambda asset: asset["uuid"])
        self._report_duplicates("title", titles, lambda title: title["title_id"])

        assets_by_uuid = build_lookup(assets, lambda asset: asset["uuid"])
        local_assets_by_uuid = build_lookup(local_assets, lambda asset: asset["uuid"])
        source_assets_by_asset_id = build_multi_lookup(source_assets, lambda sa: str(sa["asset_id"]))
        local_source_assets_by_asset_id = build_multi_lookup(local_source_assets, lambda sa: str(sa["asset_id"]))

        # Una escritura por clave: con duplicados gana la ultima fila
        for asset in assets_by_uuid.values():
            result = await self._sync_asset(
                asset,
                existing_local_asset=local_assets_by_uuid.get(asset["uuid"]),
                source_assets=source_assets_by_asset_id.get(str(asset["id"]), []),
                local_source_assets_by_asset_id=local_source_assets_by_asset_id,
            )
            if result.ok:
                outcome.assets_upserted += 1
                outcome.source_assets_upserted += result.source_assets_upserted
            else:
                self.events.error(SyncEvent.ASSET_UPSERT_FAILED, error=result.error, asset=asset)
                outcome.failures.append(
                    RecordFailure(entity="asset", key=asset["uuid"], error=result.error, record=asset)
                )

        titles_by_title_id = build_lookup(titles, lambda title: title["title_id"])
        local_titles_by_title_id = build_lookup(local_titles, lambda title: title["title_id"])

        for title in titles_by_title_id.values():
            failure = await self._sync_title(title, local_titles_by_title_id.get(title["title_id"]))
            if failure:
                outcome.failures.append(failure)
            else:
                outcome.titles_upserted += 1

        found_uuids = set(asset_uuids)
        outcome.missing_asset_uuids = [uuid for uuid in uuids_batch if uuid not in found_uuids]
        if outcome.missing_asset_uuids:
            self.events.info(SyncEvent.MISSING_ASSETS, missing_assets=outcome.missing_asset_uuids)

        outcome.missing_title_ids = [title_id for title_id in title_ids if title_id not in titles_by_title_id]
        if outcome.missing_title_ids:
            self.events.info(SyncEvent.MISSING_TITLES, missing_titles=outcome.missing_title_ids)

        return outcome

    async def _sync_asset(
        self,
        asset: Record,
        *,
        existing_local_asset: Optional[Record],
        source_assets: List[Record],
        local_source_assets_by_asset_id: Dict[str, List[Record]],
    ) -> AssetSyncResult:
        """
        Upsert atomico de un asset y sus source assets.

        Retorna el resultado o el error; nunca propaga errores de escritura.
        """
        existing_local_source_assets = (
            local_source_assets_by_asset_id.get(str(existing_local_asset["id"]), [])
            if existing_local_asset
            else []
        )
        existing_by_source = build_lookup(existing_local_source_assets, _source_key)

        try:
            async with self.local_engine.begin() as conn:
                local_id = await upsert_asset(asset, existing_local_asset, conn)

                for source_asset in source_assets:
                    await upsert_source_asset(
                        source_asset,
                        existing_by_source.get(_source_key(source_asset)),
                        local_id,
                        conn,
                    )
        except (SQLAlchemyError, RecordUpsertError) as e:
            return AssetSyncResult(uuid=asset["uuid"], error=str(e))

        return AssetSyncResult(uuid=asset["uuid"], local_id=local_id, source_assets_upserted=len(source_assets))

    async def _sync_title(self, title: Record, existing_local_title: Optional[Record]) -> Optional[RecordFailure]:
        """Upsert de un title, independiente de las transacciones de assets."""
        try:
            async with self.local_engine.begin() as conn:
                await upsert_title(title, existing_local_title, conn)
        except SQLAlchemyError as e:
            self.events.error(SyncEvent.TITLE_UPSERT_FAILED, error=str(e), title=title)
            return RecordFailure(entity="title", key=title["title_id"], error=str(e), record=title)
        return None

    def _report_duplicates(self, entity: str, records: List[Record], key_getter) -> None:
        duplicates = find_duplicate_keys(records, key_getter)
        if duplicates:
            self.events.warning(SyncEvent.DUPLICATE_KEYS, entity=entity, keys=duplicates)
