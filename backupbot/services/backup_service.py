"""
Servicio principal que orquesta el backup de la base de datos
"""
import time
import zipfile
from datetime import date
from pathlib import Path
from typing import Callable, Optional
try:
    import zlib
except ImportError:  # sin zlib, ArchiveService.is_supported() devuelve False
    zlib = None
from ..config import Config
from ..logger import LoggerService
from ..models import BackupResult, BackupStage, DeliveryTarget, ErrorKind, StageResult
from .archive_service import ArchiveService
from .cleanup_service import CleanupService
from .dump_service import DumpService
from .notification_service import TelegramNotifier


FAILURE_MESSAGES = {
    ErrorKind.DUMP_FAILED: "❌ Error al generar el backup de la base de datos. Por favor, informe al soporte.",
    ErrorKind.DUMP_INVALID: "❌ El archivo de backup generado está vacío. Por favor, revíselo.",
    ErrorKind.ARCHIVE_UNSUPPORTED: (
        "❌ El módulo de compresión no está disponible en el servidor "
        "y no es posible enviar el backup."
    ),
    ErrorKind.ARCHIVE_FAILED: "❌ No se pudo crear el archivo comprimido del backup.",
    ErrorKind.ARCHIVE_INVALID: "❌ El archivo comprimido del backup no se creó o está vacío.",
}

ARCHIVE_ERRORS = (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) + ((zlib.error,) if zlib else ())

UNEXPECTED_FAILURE_MESSAGE = "❌ Error inesperado durante el backup. Revise los logs del servidor."

BACKUP_CAPTION = (
    "<b>📦 Backup de la base de datos principal</b>\n\n"
    "Base de datos: <code>{database}</code>\n"
    "Fecha: <code>{day}</code>"
)


def is_valid_artifact(path: Path) -> bool:
    """Un artefacto es válido si existe y no está vacío"""
    return path.exists() and path.is_file() and path.stat().st_size > 0


class BackupOrchestrator:
    """
    Ejecuta volcado -> validación -> compresión -> validación -> envío -> limpieza

    Cada compuerta de validación aborta el proceso, notifica al operador con un
    mensaje distinto por tipo de fallo y elimina los artefactos temporales.
    """

    def __init__(
        self,
        connection,
        database_name: str,
        dump_service: DumpService,
        archive_service: ArchiveService,
        notifier: TelegramNotifier,
        target: DeliveryTarget,
        cleanup_service: Optional[CleanupService] = None,
        work_dir: Optional[Path] = None,
        today: Callable[[], date] = date.today
    ):
        """
        Args:
            connection: Conexión abierta a la base de datos
            database_name: Nombre de la base de datos a respaldar
            dump_service: Motor de volcado
            archive_service: Constructor de archivos ZIP
            notifier: Canal de notificaciones
            target: Canal y tema de destino
            cleanup_service: Eliminación de artefactos
            work_dir: Directorio donde se escriben los artefactos
            today: Fecha usada para nombrar los artefactos
        """
        self.connection = connection
        self.database_name = database_name
        self.dump_service = dump_service
        self.archive_service = archive_service
        self.notifier = notifier
        self.target = target
        self.cleanup_service = cleanup_service or CleanupService()
        self.work_dir = Path(work_dir or Config.WORK_DIR)
        self.logger = LoggerService.get_logger("BackupOrchestrator")

        day = today().isoformat()
        self.dump_path = self.work_dir / f"backup_{day}.sql"
        self.archive_path = self.work_dir / f"backup_{day}.zip"
        self.day = day
        self.stage = BackupStage.START

    def run(self) -> BackupResult:
        """
        Ejecuta el backup completo

        Returns:
            Resultado del backup; nunca propaga excepciones
        """
        self.logger.info("=" * 70)
        self.logger.info(f"INICIANDO BACKUP DE {self.database_name}")
        self.logger.info("=" * 70)
        start_time = time.time()
        self.stage = BackupStage.START

        try:
            result = self._run_stages()
        except Exception as e:
            self.logger.error(f"Error inesperado en la etapa {self.stage.value}: {e}", exc_info=True)
            self._notify_text(UNEXPECTED_FAILURE_MESSAGE)
            self.cleanup_service.remove(self.archive_path, self.dump_path)
            result = BackupResult(
                database_name=self.database_name,
                success=False,
                stage=self.stage
            )

        result.duration_seconds = time.time() - start_time
        self.logger.info(str(result))
        return result

    def _run_stages(self) -> BackupResult:
        stages = [
            (self._dump, BackupStage.DUMPED),
            (self._validate_dump, BackupStage.DUMP_VALIDATED),
            (self._archive, BackupStage.ARCHIVED),
            (self._validate_archive, BackupStage.ARCHIVE_VALIDATED),
        ]
        for stage_fn, next_stage in stages:
            outcome = stage_fn()
            if not outcome.success:
                return self._abort(outcome)
            self.stage = next_stage

        delivered = self._deliver()
        self.stage = BackupStage.DELIVERED

        self.cleanup_service.remove(self.archive_path, self.dump_path)
        self.stage = BackupStage.CLEANED

        return BackupResult(
            database_name=self.database_name,
            success=True,
            stage=self.stage,
            error_kind=None if delivered else ErrorKind.DELIVERY_FAILED,
            output_file=str(self.archive_path),
            delivered=delivered
        )

    def _dump(self) -> StageResult:
        if self.dump_service.produce_dump(self.connection, self.database_name, self.dump_path):
            return StageResult.ok()
        return StageResult.fail(ErrorKind.DUMP_FAILED)

    def _validate_dump(self) -> StageResult:
        if is_valid_artifact(self.dump_path):
            return StageResult.ok()
        return StageResult.fail(ErrorKind.DUMP_INVALID, f"{self.dump_path.name} vacío o inexistente")

    def _archive(self) -> StageResult:
        if not self.archive_service.is_supported():
            return StageResult.fail(ErrorKind.ARCHIVE_UNSUPPORTED, "zlib no disponible")
        try:
            self.archive_service.create_single_file_archive(self.dump_path, self.archive_path)
        except ARCHIVE_ERRORS as e:
            return StageResult.fail(ErrorKind.ARCHIVE_FAILED, str(e))
        return StageResult.ok()

    def _validate_archive(self) -> StageResult:
        if is_valid_artifact(self.archive_path):
            return StageResult.ok()
        return StageResult.fail(ErrorKind.ARCHIVE_INVALID, f"{self.archive_path.name} vacío o inexistente")

    def _deliver(self) -> bool:
        caption = BACKUP_CAPTION.format(database=self.database_name, day=self.day)
        delivered = self.notifier.send_document(
            self.target.channel_id,
            self.target.thread_id,
            self.archive_path,
            caption=caption,
            parse_mode="HTML"
        )
        if delivered:
            self.logger.info(f"Backup enviado: {self.archive_path.name}")
        else:
            self.logger.error(f"No se pudo enviar el backup {self.archive_path.name}")
        return delivered

    def _abort(self, outcome: StageResult) -> BackupResult:
        """Notifica el fallo, elimina los artefactos y termina en FAILED_NOTIFIED"""
        failed_stage = self.stage
        self.logger.error(
            f"Backup abortado en {failed_stage.value}: {outcome.error_kind.value}"
            + (f" ({outcome.detail})" if outcome.detail else "")
        )

        self._notify_text(FAILURE_MESSAGES[outcome.error_kind])
        self.cleanup_service.remove(self.archive_path, self.dump_path)
        self.stage = BackupStage.FAILED_NOTIFIED

        return BackupResult(
            database_name=self.database_name,
            success=False,
            stage=self.stage,
            error_kind=outcome.error_kind
        )

    def _notify_text(self, text: str) -> None:
        try:
            if not self.notifier.send_text(self.target.channel_id, self.target.thread_id, text):
                self.logger.error("No se pudo enviar la notificación de fallo")
        except Exception as e:
            self.logger.error(f"Error enviando la notificación de fallo: {e}")
