"""
Configuracion de loguru para el CLI.
"""
import sys

from loguru import logger


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {message}"


def configure_logging(level: str = "INFO", log_file: str = "", json_logs: bool = False) -> None:
    """
    Reemplaza los handlers por defecto de loguru.

    Args:
        level: Nivel minimo de log
        log_file: Archivo de log opcional (con rotacion)
        json_logs: Si True, cada registro se serializa como JSON (incluye extra)
    """
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level, serialize=json_logs)

    if log_file:
        logger.add(
            log_file,
            format=LOG_FORMAT,
            rotation="50 MB",
            retention="10 days",
            level=level,
            serialize=json_logs,
        )
