"""
Sink de eventos estructurados del pipeline.

El pipeline no llama al logger directamente: recibe un sink y emite
eventos (nombre + campos). La implementacion por defecto usa loguru.
"""
from typing import Any, Protocol

from loguru import logger

from local_sync.shared.constants.sync_constants import SyncEvent


class SyncEventSink(Protocol):
    """Capacidad de emitir eventos estructurados."""

    def info(self, event: SyncEvent, **fields: Any) -> None: ...

    def warning(self, event: SyncEvent, **fields: Any) -> None: ...

    def error(self, event: SyncEvent, **fields: Any) -> None: ...


class LoguruEventSink:
    """
    Emite los eventos via loguru.

    Los campos quedan en `extra` (visibles con LOG_JSON=true) y ademas se
    renderizan en el mensaje para el formato de texto.
    """

    def __init__(self, component: str = "local_sync"):
        self._logger = logger.bind(component=component)

    @staticmethod
    def _render(event: SyncEvent, fields: dict) -> str:
        if not fields:
            return event.value
        details = ", ".join(f"{key}={value!r}" for key, value in fields.items())
        return f"{event.value} | {details}"

    def _emit(self, level: str, event: SyncEvent, fields: dict) -> None:
        # opt(depth=2) reporta la linea del pipeline, no la del sink
        self._logger.bind(event=event.value, **fields).opt(depth=2).log(level, self._render(event, fields))

    def info(self, event: SyncEvent, **fields: Any) -> None:
        self._emit("INFO", event, fields)

    def warning(self, event: SyncEvent, **fields: Any) -> None:
        self._emit("WARNING", event, fields)

    def error(self, event: SyncEvent, **fields: Any) -> None:
        self._emit("ERROR", event, fields)
