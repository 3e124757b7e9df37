"""
Excepciones relacionadas con la sincronización de registros.
"""
from typing import Any, Dict, Optional

from local_sync.shared.exceptions.base import AppException


class SyncConfigurationError(AppException):
    """
    Error de configuración del pipeline.

    Siempre se levanta antes de cualquier I/O y aborta la ejecucion.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details
        )


class RecordUpsertError(AppException):
    """Excepción cuando la base de datos no retorna la fila escrita."""

    def __init__(self, entity_name: str, key: Any):
        super().__init__(
            message=f"No se pudo hacer upsert de {entity_name} con clave {key}",
            error_code="UPSERT_ERROR",
            details={"entity": entity_name, "key": str(key)}
        )
