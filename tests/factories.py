"""
Helpers de datos para los tests del sync.
"""
from datetime import datetime
from typing import Any, Dict, List, Tuple

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncEngine

from local_sync.infrastructure.database.models import AssetModel, SourceAssetModel, TitleModel
from local_sync.shared.constants.sync_constants import SyncEvent


CREATED_AT = datetime(2024, 5, 1, 12, 0, 0)
UPDATED_AT = datetime(2024, 6, 1, 8, 30, 0)


class RecordingEventSink:
    """Sink de eventos que guarda (nivel, evento, campos) en memoria."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, SyncEvent, Dict[str, Any]]] = []

    def info(self, event: SyncEvent, **fields: Any) -> None:
        self.events.append(("info", event, fields))

    def warning(self, event: SyncEvent, **fields: Any) -> None:
        self.events.append(("warning", event, fields))

    def error(self, event: SyncEvent, **fields: Any) -> None:
        self.events.append(("error", event, fields))

    def of(self, event: SyncEvent) -> List[Tuple[str, Dict[str, Any]]]:
        return [(level, fields) for level, name, fields in self.events if name == event]

    @property
    def names(self) -> List[SyncEvent]:
        return [name for _, name, _ in self.events]


def make_asset(id: int, uuid: str, title_id: str | None = None, status: str = "active") -> Dict[str, Any]:
    data = {"title": {"title_id": title_id}} if title_id else {"tags": ["sin-title"]}
    return {
        "id": id,
        "uuid": uuid,
        "data": data,
        "status": status,
        "created_at": CREATED_AT,
        "updated_at": UPDATED_AT,
        "soft_deleted_at": None,
    }


def make_source_asset(id: int, asset_id: int, source_system: str, source_id: str, **data: Any) -> Dict[str, Any]:
    return {
        "id": id,
        "asset_id": asset_id,
        "source_system": source_system,
        "source_id": source_id,
        "data": data or None,
        "status": "active",
        "created_at": CREATED_AT,
        "updated_at": UPDATED_AT,
        "soft_deleted_at": None,
    }


def make_title(id: int, title_id: str, name: str) -> Dict[str, Any]:
    return {
        "id": id,
        "title_id": title_id,
        "name": name,
        "data": {"genre": "drama"},
        "created_at": CREATED_AT,
        "updated_at": UPDATED_AT,
        "soft_deleted_at": None,
    }


async def seed(engine: AsyncEngine, assets=(), source_assets=(), titles=()) -> None:
    """Inserta filas tal cual (ids incluidos)."""
    async with engine.begin() as conn:
        if assets:
            await conn.execute(insert(AssetModel), list(assets))
        if source_assets:
            await conn.execute(insert(SourceAssetModel), list(source_assets))
        if titles:
            await conn.execute(insert(TitleModel), list(titles))


async def fetch_all(engine: AsyncEngine, model) -> List[Dict[str, Any]]:
    """Todas las filas de una tabla, ordenadas por id."""
    async with engine.connect() as conn:
        result = await conn.execute(select(model.__table__).order_by(model.id))
        return [dict(row) for row in result.mappings().all()]


async def count_rows(engine: AsyncEngine, model) -> int:
    async with engine.connect() as conn:
        return (await conn.execute(select(func.count()).select_from(model))).scalar_one()


def sqlite_url(path) -> str:
    return f"sqlite+aiosqlite:///{path}"
