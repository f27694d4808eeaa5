"""
Servicio que archiva y envía los datos de cada inquilino
"""
import zipfile
from pathlib import Path
from typing import Iterable, List, Optional
from ..config import Config
from ..logger import LoggerService
from ..models import BackupTarget, DeliveryTarget, ErrorKind, TenantRecord, TenantResult
from .archive_service import ArchiveService
from .cleanup_service import CleanupService
from .notification_service import TelegramNotifier


class TenantArchiveService:
    """
    Crea un ZIP por inquilino con sus datos y lo envía al canal de reportes

    El fallo de un inquilino nunca detiene el procesamiento de los demás.
    """

    def __init__(
        self,
        archive_service: ArchiveService,
        notifier: TelegramNotifier,
        target: DeliveryTarget,
        cleanup_service: Optional[CleanupService] = None,
        tenants_root: Optional[Path] = None,
        work_dir: Optional[Path] = None
    ):
        self.archive_service = archive_service
        self.notifier = notifier
        self.target = target
        self.cleanup_service = cleanup_service or CleanupService()
        self.tenants_root = Path(tenants_root or Config.TENANTS_ROOT)
        self.work_dir = Path(work_dir or Config.WORK_DIR)
        self.logger = LoggerService.get_logger("TenantArchiveService")

    def tenant_root(self, tenant: TenantRecord) -> Path:
        return self.tenants_root / tenant.folder_name

    def archive_path(self, tenant: TenantRecord) -> Path:
        return self.work_dir / f"file_{tenant.folder_name}.zip"

    def backup_targets(self, tenant: TenantRecord) -> List[BackupTarget]:
        """Rutas candidatas del inquilino que existen en disco"""
        root = self.tenant_root(tenant)
        targets = [BackupTarget(path=root / name, base_path=root) for name in Config.TENANT_BACKUP_PATHS]
        return [t for t in targets if t.exists()]

    def archive_all(self, tenants: Iterable[TenantRecord]) -> List[TenantResult]:
        """
        Archiva y envía cada inquilino

        Args:
            tenants: Inquilinos a procesar

        Returns:
            Un TenantResult por inquilino
        """
        tenants = list(tenants)
        self.logger.info(f"Archivando {len(tenants)} inquilino(s)")

        results = []
        for tenant in tenants:
            results.append(self.archive_tenant(tenant))

        failed = sum(1 for r in results if not r.success)
        if failed:
            self.logger.warning(f"{failed} inquilino(s) con errores")
        return results

    def archive_tenant(self, tenant: TenantRecord) -> TenantResult:
        zip_path = self.archive_path(tenant)

        try:
            try:
                archive = self.archive_service.open_archive(zip_path)
            except (OSError, zipfile.BadZipFile) as e:
                self.logger.error(
                    f"No se pudo crear el archivo para @{tenant.username} "
                    f"({self.tenant_root(tenant)}): {e}"
                )
                return TenantResult(
                    tenant=tenant,
                    success=False,
                    error_kind=ErrorKind.TENANT_STEP_FAILED,
                    error=str(e)
                )

            with archive:
                targets = self.backup_targets(tenant)
                if not targets:
                    self.logger.warning(f"@{tenant.username} no tiene datos en {self.tenant_root(tenant)}")
                for target in targets:
                    self.archive_service.add_path(archive, target.path, target.base_path)

            delivered = self.notifier.send_document(
                self.target.channel_id,
                self.target.thread_id,
                zip_path,
                caption=f"@{tenant.username} | {tenant.tenant_id}"
            )
            if not delivered:
                self.logger.error(f"No se pudo enviar el archivo de @{tenant.username}")

            return TenantResult(
                tenant=tenant,
                success=True,
                delivered=delivered,
                archive_file=str(zip_path),
                error_kind=None if delivered else ErrorKind.DELIVERY_FAILED
            )
        except Exception as e:
            self.logger.error(f"Error archivando @{tenant.username} | {tenant.tenant_id}: {e}", exc_info=True)
            return TenantResult(
                tenant=tenant,
                success=False,
                error_kind=ErrorKind.TENANT_STEP_FAILED,
                error=str(e)
            )
        finally:
            self.cleanup_service.remove(zip_path)
