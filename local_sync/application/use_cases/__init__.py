"""
Casos de uso de la aplicacion.
"""
from local_sync.application.use_cases.batch_reconciler import BatchReconciler
from local_sync.application.use_cases.sync_records_use_cases import SyncRecordsUseCase, open_databases

__all__ = ["BatchReconciler", "SyncRecordsUseCase", "open_databases"]
