"""
CLI: entorno remoto -> base local (one-way sync de assets).

Variables de entorno requeridas:
  - APP_ENV=local
  - LOCAL_DB_CONNECTION_STRING
  - <ENV>_READ_ONLY_DB_CONNECTION_STRING del entorno elegido (INT / STG / PRD)

Ejecucion:
  local-sync --env stg 0b3c... 4f2a...
  local-sync --env prd --uuids-file uuids.txt --batch-size 50
  local-sync --env int --create-tables 0b3c...
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from local_sync.application.dto.sync_dto import SyncRecordsRequest, SyncReport
from local_sync.application.events import LoguruEventSink
from local_sync.application.use_cases.sync_records_use_cases import SyncRecordsUseCase
from local_sync.core.config import Settings, ensure_local_context, load_settings
from local_sync.core.logging import configure_logging
from local_sync.infrastructure.database.session import DatabaseConnectionFactory
from local_sync.shared.constants.sync_constants import Environment
from local_sync.shared.exceptions.sync import SyncConfigurationError


EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIGURATION_ERROR = 2


def _read_uuids_file(path: Path) -> List[str]:
    """Lee un UUID por linea; ignora lineas vacias y comentarios (#)."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.strip().startswith("#")]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="local-sync",
        description="Sincroniza assets de un entorno remoto hacia la base de datos local.",
    )
    parser.add_argument(
        "--env",
        required=True,
        choices=[env.value for env in Environment],
        help="Entorno remoto desde el que se sincroniza.",
    )
    parser.add_argument("uuids", nargs="*", help="UUIDs de los assets a sincronizar.")
    parser.add_argument("--uuids-file", type=Path, help="Archivo con un UUID por linea.")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Assets por batch (default: SYNC_BATCH_SIZE).",
    )
    parser.add_argument("--env-file", type=Path, default=Path(".env"), help="Archivo .env a cargar.")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Crea las tablas en la base local si no existen antes de sincronizar.",
    )
    return parser


async def run_sync(request: SyncRecordsRequest, settings: Settings, create_local_tables: bool = False) -> SyncReport:
    """
    Compone y ejecuta el sync con la configuracion dada.

    Raises:
        SyncConfigurationError: contexto o configuracion invalidos
    """
    ensure_local_context(settings)
    connection_factory = DatabaseConnectionFactory(settings.database_config())

    use_case = SyncRecordsUseCase(connection_factory, LoguruEventSink())
    return await use_case.execute(request, create_local_tables=create_local_tables)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Cargar variables desde .env si existe (sin pisar las del entorno)
    load_dotenv(args.env_file, override=False)

    try:
        settings = load_settings()
    except SyncConfigurationError as e:
        logger.error(f"Error de configuracion: {e.message}")
        return EXIT_CONFIGURATION_ERROR

    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE, settings.LOG_JSON)

    uuids = list(args.uuids)
    if args.uuids_file:
        uuids.extend(_read_uuids_file(args.uuids_file))

    request = SyncRecordsRequest(
        environment=Environment(args.env),
        uuids=uuids,
        batch_size=args.batch_size if args.batch_size is not None else settings.SYNC_BATCH_SIZE,
    )

    try:
        report = asyncio.run(run_sync(request, settings, create_local_tables=args.create_tables))
    except SyncConfigurationError as e:
        logger.error(f"Error de configuracion: {e.message}")
        return EXIT_CONFIGURATION_ERROR

    logger.info(
        f"Sync {report.environment}: assets={report.assets_upserted}, "
        f"source_assets={report.source_assets_upserted}, titles={report.titles_upserted}, "
        f"fallos={len(report.failures)}"
    )
    return EXIT_FAILURES if report.has_failures else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
