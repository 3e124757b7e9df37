"""
Constantes del pipeline de sincronizacion remoto -> local.
"""
from enum import Enum


class Environment(str, Enum):
    """Entornos remotos desde los que se puede sincronizar (solo lectura)."""
    INT = "int"
    STG = "stg"
    PRD = "prd"


# Tag del entorno local (lectura/escritura). No es un origen valido.
LOCAL_ENVIRONMENT = "local"


class SyncEvent(str, Enum):
    """Eventos estructurados emitidos por el pipeline."""
    SYNC_STARTED = "sync_started"
    SYNC_COMPLETED = "sync_completed"
    BATCH_STARTED = "batch_started"
    BATCH_COMPLETED = "batch_completed"
    BATCH_EMPTY = "batch_empty"
    BATCH_FAILED = "batch_failed"
    ASSET_UPSERT_FAILED = "asset_upsert_failed"
    TITLE_UPSERT_FAILED = "title_upsert_failed"
    MISSING_ASSETS = "missing_assets"
    MISSING_TITLES = "missing_titles"
    DUPLICATE_KEYS = "duplicate_keys"
    DUPLICATE_INPUT_KEYS = "duplicate_input_keys"
    CONNECTIONS_CLOSED = "connections_closed"


# Ruta dentro de assets.data donde vive la referencia al title
TITLE_REFERENCE_KEY = "title"
TITLE_REFERENCE_FIELD = "title_id"

# Pool de conexiones por defecto
DEFAULT_POOL_MIN_SIZE = 2
DEFAULT_POOL_MAX_SIZE = 10
