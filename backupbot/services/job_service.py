"""
Ejecución completa: inquilinos + base de datos principal
"""
from pathlib import Path
from typing import Callable, Optional
from ..config import Config
from ..logger import LoggerService
from ..models import DatabaseConfig, ErrorKind, JobReport
from ..repositories.connection import ConnectionFactory, ConnectionUnavailable
from ..repositories.record_store import RecordStore
from .archive_service import ArchiveService
from .backup_service import BackupOrchestrator
from .cleanup_service import CleanupService
from .dump_service import DumpService
from .lock_service import RunLock, RunLockError
from .notification_service import TelegramNotifier
from .tenant_service import TenantArchiveService


class BackupJob:
    """Arma el pipeline de una ejecución y lo ejecuta bajo un bloqueo"""

    def __init__(
        self,
        db_config: Optional[DatabaseConfig] = None,
        connection_factory: Optional[ConnectionFactory] = None,
        notifier: Optional[TelegramNotifier] = None,
        archive_service: Optional[ArchiveService] = None,
        work_dir: Optional[Path] = None,
        tenants_root: Optional[Path] = None,
        store_factory: Callable = RecordStore
    ):
        self.db_config = db_config or Config.database_config()
        self.connection_factory = connection_factory or ConnectionFactory()
        self.notifier = notifier or TelegramNotifier()
        self.archive_service = archive_service or ArchiveService()
        self.work_dir = Path(work_dir or Config.WORK_DIR)
        self.tenants_root = Path(tenants_root or Config.TENANTS_ROOT)
        self.store_factory = store_factory
        self.logger = LoggerService.get_logger("BackupJob")

    def run(self, include_tenants: bool = True, include_database: bool = True) -> JobReport:
        """
        Ejecuta el backup de inquilinos y el de la base de datos

        Args:
            include_tenants: Archivar los directorios de los inquilinos
            include_database: Respaldar la base de datos principal

        Returns:
            Resumen de la ejecución; nunca propaga excepciones
        """
        self.work_dir.mkdir(parents=True, exist_ok=True)
        lock = RunLock(self.work_dir / Config.LOCK_FILE_NAME)

        try:
            lock.acquire()
        except RunLockError as e:
            self.logger.warning(f"Se omite la ejecución: {e}")
            return JobReport(skipped=True)

        try:
            return self._run_locked(include_tenants, include_database)
        except ConnectionUnavailable as e:
            self.logger.critical(f"Sin conexión a la base de datos: {e}")
            return JobReport(error_kind=ErrorKind.CONNECTION_UNAVAILABLE, error=str(e))
        except Exception as e:
            self.logger.critical(f"Error crítico durante la ejecución: {e}", exc_info=True)
            return JobReport(error=str(e))
        finally:
            lock.release()

    def _run_locked(self, include_tenants: bool, include_database: bool) -> JobReport:
        report = JobReport()
        connection = self.connection_factory.connect(self.db_config)

        try:
            store = self.store_factory(connection)
            try:
                target = store.get_delivery_target()
            except ValueError as e:
                self.logger.critical(f"Configuración incompleta: {e}")
                report.error_kind = ErrorKind.CONFIGURATION_MISSING
                return report

            cleanup_service = CleanupService()

            if include_tenants:
                try:
                    tenants = store.get_tenants()
                    report.tenants = TenantArchiveService(
                        archive_service=self.archive_service,
                        notifier=self.notifier,
                        target=target,
                        cleanup_service=cleanup_service,
                        tenants_root=self.tenants_root,
                        work_dir=self.work_dir
                    ).archive_all(tenants)
                except Exception as e:
                    # El backup principal se ejecuta igualmente
                    self.logger.error(f"Error archivando inquilinos: {e}", exc_info=True)
                    report.error_kind = ErrorKind.TENANT_STEP_FAILED
                    report.error = str(e)

            if include_database:
                report.backup = BackupOrchestrator(
                    connection=connection,
                    database_name=self.db_config.database,
                    dump_service=DumpService(self.db_config),
                    archive_service=self.archive_service,
                    notifier=self.notifier,
                    target=target,
                    cleanup_service=cleanup_service,
                    work_dir=self.work_dir
                ).run()
        finally:
            connection.close()

        self._print_summary(report)
        return report

    def _print_summary(self, report: JobReport):
        self.logger.info("=" * 70)
        self.logger.info("RESUMEN DE LA EJECUCIÓN")
        self.logger.info("=" * 70)
        for tenant_result in report.tenants:
            self.logger.info(str(tenant_result))
        if report.backup is not None:
            self.logger.info(str(report.backup))
        self.logger.info(f"Errores: {report.failed_count}")
        self.logger.info("=" * 70)
