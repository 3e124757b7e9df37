"""
DTOs del sync de registros.
Definen la solicitud de sync y los resultados explicitos por asset, batch y corrida.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from local_sync.shared.constants.sync_constants import Environment


class SyncRecordsRequest(BaseModel):
    """
    Solicitud de sync.

    La validacion de negocio (lista vacia, batch_size < 1) la hace el caso de
    uso, para reportarla como error de configuracion.
    """
    environment: Environment = Field(..., description="Entorno remoto desde el que se sincroniza")
    uuids: List[str] = Field(default_factory=list, description="UUIDs de los assets a sincronizar")
    batch_size: int = Field(..., description="Cantidad de assets por batch")


@dataclass(frozen=True)
class RecordFailure:
    """Fallo aislado de un registro (asset o title)."""

    entity: str
    key: str
    error: str
    record: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class AssetSyncResult:
    """Resultado (o error) del upsert transaccional de un asset y sus source assets."""

    uuid: str
    local_id: Optional[int] = None
    source_assets_upserted: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchOutcome:
    """Resultado de un batch de UUIDs."""

    batch_number: int
    requested: List[str]
    found: int = 0
    assets_upserted: int = 0
    source_assets_upserted: int = 0
    titles_upserted: int = 0
    failures: List[RecordFailure] = field(default_factory=list)
    missing_asset_uuids: List[str] = field(default_factory=list)
    missing_title_ids: List[str] = field(default_factory=list)
    skipped: bool = False
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        """True si el batch no tuvo fallos de escritura ni de lectura."""
        return self.error is None and not self.failures


@dataclass
class SyncReport:
    """Resultado agregado de una corrida."""

    environment: str
    requested: int
    batches: List[BatchOutcome] = field(default_factory=list)

    @property
    def assets_upserted(self) -> int:
        return sum(batch.assets_upserted for batch in self.batches)

    @property
    def source_assets_upserted(self) -> int:
        return sum(batch.source_assets_upserted for batch in self.batches)

    @property
    def titles_upserted(self) -> int:
        return sum(batch.titles_upserted for batch in self.batches)

    @property
    def failures(self) -> List[RecordFailure]:
        return [failure for batch in self.batches for failure in batch.failures]

    @property
    def has_failures(self) -> bool:
        return any(not batch.succeeded for batch in self.batches)
