"""
Servicios de la aplicación
"""
from .archive_service import ArchiveService, add_path_to_archive
from .backup_service import BackupOrchestrator
from .cleanup_service import CleanupService
from .dump_service import DumpService
from .job_service import BackupJob
from .lock_service import RunLock, RunLockError
from .notification_service import TelegramNotifier
from .scheduler_service import SchedulerService
from .tenant_service import TenantArchiveService

__all__ = [
    'ArchiveService',
    'add_path_to_archive',
    'BackupOrchestrator',
    'CleanupService',
    'DumpService',
    'BackupJob',
    'RunLock',
    'RunLockError',
    'TelegramNotifier',
    'SchedulerService',
    'TenantArchiveService'
]
