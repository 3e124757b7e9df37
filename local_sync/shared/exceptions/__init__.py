"""
Excepciones de la aplicacion.
"""
from local_sync.shared.exceptions.base import AppException
from local_sync.shared.exceptions.sync import RecordUpsertError, SyncConfigurationError

__all__ = [
    "AppException",
    "RecordUpsertError",
    "SyncConfigurationError",
]
