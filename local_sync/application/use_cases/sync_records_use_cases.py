"""
Caso de uso: sincronizar assets (y sus registros relacionados) desde un
entorno remoto hacia la base de datos local.

Permite a los desarrolladores trabajar con datos reales en local para
testing y debugging.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from local_sync.application.dto.sync_dto import BatchOutcome, SyncRecordsRequest, SyncReport
from local_sync.application.events import SyncEventSink
from local_sync.application.use_cases.batch_reconciler import BatchReconciler
from local_sync.infrastructure.database.session import DatabaseConnectionFactory, create_tables
from local_sync.shared.constants.sync_constants import LOCAL_ENVIRONMENT, SyncEvent
from local_sync.shared.exceptions.sync import SyncConfigurationError
from local_sync.shared.utils.collections import chunk, unique_in_order


@asynccontextmanager
async def open_databases(
    connection_factory: DatabaseConnectionFactory,
    environment: str,
    events: SyncEventSink,
) -> AsyncIterator[Tuple[AsyncEngine, AsyncEngine]]:
    """
    Abre (remoto, local) y garantiza el cierre de ambos en cualquier salida.

    Los engines se crean antes del `try`: un error de configuracion no deja
    nada abierto.
    """
    remote_engine = connection_factory.create_engine(environment)
    try:
        local_engine = connection_factory.create_engine(LOCAL_ENVIRONMENT)
    except SyncConfigurationError:
        await remote_engine.dispose()
        raise

    try:
        yield remote_engine, local_engine
    finally:
        await remote_engine.dispose()
        await local_engine.dispose()
        events.info(SyncEvent.CONNECTIONS_CLOSED)


class SyncRecordsUseCase:
    """
    Driver del sync: divide los UUIDs en batches y los procesa en secuencia.

    Los batches no corren en paralelo para no generar picos de carga en la
    base remota y mantener el orden de los logs.
    """

    def __init__(self, connection_factory: DatabaseConnectionFactory, events: SyncEventSink):
        self.connection_factory = connection_factory
        self.events = events

    def _validate(self, request: SyncRecordsRequest) -> List[str]:
        """
        Valida la solicitud y retorna los UUIDs sin duplicados.

        Raises:
            SyncConfigurationError: lista vacia o batch_size < 1
        """
        if not request.uuids:
            raise SyncConfigurationError("No hay registros para sincronizar")

        if request.batch_size < 1:
            raise SyncConfigurationError(
                f"batch_size debe ser >= 1 (recibido: {request.batch_size})",
                details={"batch_size": request.batch_size},
            )

        uuids = unique_in_order(request.uuids)
        if len(uuids) != len(request.uuids):
            self.events.warning(
                SyncEvent.DUPLICATE_INPUT_KEYS,
                requested=len(request.uuids),
                unique=len(uuids),
            )
        return uuids

    async def execute(self, request: SyncRecordsRequest, create_local_tables: bool = False) -> SyncReport:
        """
        Ejecuta el sync completo.

        Con `create_local_tables` crea las tablas locales faltantes, siempre
        despues de validar la solicitud.

        Returns:
            SyncReport con el resultado de cada batch
        """
        uuids = self._validate(request)
        environment = request.environment.value
        report = SyncReport(environment=environment, requested=len(uuids))

        self.events.info(SyncEvent.SYNC_STARTED, environment=environment, records=len(uuids))

        async with open_databases(self.connection_factory, environment, self.events) as (remote_engine, local_engine):
            if create_local_tables:
                await create_tables(local_engine)

            reconciler = BatchReconciler(remote_engine, local_engine, self.events)

            for batch_number, uuids_batch in enumerate(chunk(uuids, request.batch_size), start=1):
                self.events.info(SyncEvent.BATCH_STARTED, batch_number=batch_number, batch=uuids_batch)

                try:
                    outcome = await reconciler.reconcile(uuids_batch, batch_number=batch_number)
                except SQLAlchemyError as e:
                    self.events.error(SyncEvent.BATCH_FAILED, batch_number=batch_number, batch=uuids_batch, error=str(e))
                    outcome = BatchOutcome(batch_number=batch_number, requested=uuids_batch, error=str(e))

                report.batches.append(outcome)
                self.events.info(
                    SyncEvent.BATCH_COMPLETED,
                    batch_number=batch_number,
                    assets=outcome.assets_upserted,
                    source_assets=outcome.source_assets_upserted,
                    titles=outcome.titles_upserted,
                    failures=len(outcome.failures),
                )

        self.events.info(
            SyncEvent.SYNC_COMPLETED,
            environment=environment,
            assets=report.assets_upserted,
            source_assets=report.source_assets_upserted,
            titles=report.titles_upserted,
            failures=len(report.failures),
        )
        return report
