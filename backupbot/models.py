"""
Modelos de datos del sistema
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class ErrorKind(Enum):
    """Tipos de fallo del proceso de backup"""
    CONNECTION_UNAVAILABLE = "connection_unavailable"
    CONFIGURATION_MISSING = "configuration_missing"
    DUMP_FAILED = "dump_failed"
    DUMP_INVALID = "dump_invalid"
    ARCHIVE_UNSUPPORTED = "archive_unsupported"
    ARCHIVE_FAILED = "archive_failed"
    ARCHIVE_INVALID = "archive_invalid"
    TENANT_STEP_FAILED = "tenant_step_failed"
    DELIVERY_FAILED = "delivery_failed"


class BackupStage(Enum):
    """Estados del backup principal"""
    START = "start"
    DUMPED = "dumped"
    DUMP_VALIDATED = "dump_validated"
    ARCHIVED = "archived"
    ARCHIVE_VALIDATED = "archive_validated"
    DELIVERED = "delivered"
    CLEANED = "cleaned"
    FAILED_NOTIFIED = "failed_notified"


@dataclass
class DatabaseConfig:
    """Configuración de la base de datos principal"""
    host: str
    port: int
    user: str
    password: str
    database: str
    charset: str = "utf8mb4"

    def __post_init__(self):
        """Validación después de inicialización"""
        if not self.database:
            raise ValueError("El nombre de la base de datos es obligatorio")
        if not self.user:
            raise ValueError("El usuario de la base de datos es obligatorio")


@dataclass
class TenantRecord:
    """Inquilino cuyo directorio de datos se respalda"""
    tenant_id: str
    username: str

    def __post_init__(self):
        """Validación después de inicialización"""
        self.tenant_id = str(self.tenant_id).strip() if self.tenant_id is not None else ""
        self.username = str(self.username).strip() if self.username is not None else ""
        if not self.tenant_id:
            raise ValueError("El id del inquilino es obligatorio")
        if not self.username:
            raise ValueError("El username del inquilino es obligatorio")

    @property
    def folder_name(self) -> str:
        return f"{self.tenant_id}{self.username}"


@dataclass(frozen=True)
class DeliveryTarget:
    """Canal y tema de Telegram donde se envían los backups"""
    channel_id: str
    thread_id: Optional[str] = None

    def __post_init__(self):
        if not self.channel_id:
            raise ValueError("El canal de reportes es obligatorio")


@dataclass
class BackupTarget:
    """Ruta a incluir en un archivo y la base para calcular rutas relativas"""
    path: Path
    base_path: Path

    def exists(self) -> bool:
        return self.path.exists()


@dataclass
class StageResult:
    """Resultado de una etapa del proceso"""
    success: bool
    error_kind: Optional[ErrorKind] = None
    detail: Optional[str] = None

    @classmethod
    def ok(cls) -> "StageResult":
        return cls(success=True)

    @classmethod
    def fail(cls, error_kind: ErrorKind, detail: Optional[str] = None) -> "StageResult":
        return cls(success=False, error_kind=error_kind, detail=detail)


@dataclass
class BackupResult:
    """Resultado del backup de la base de datos principal"""
    database_name: str
    success: bool
    stage: BackupStage = BackupStage.START
    error_kind: Optional[ErrorKind] = None
    output_file: Optional[str] = None
    delivered: bool = False
    duration_seconds: float = 0.0

    def __str__(self):
        if self.success:
            return f"✓ {self.database_name}: {self.output_file} ({self.duration_seconds:.2f}s)"
        else:
            kind = self.error_kind.value if self.error_kind else "desconocido"
            return f"✗ {self.database_name}: {kind} ({self.stage.value})"


@dataclass
class TenantResult:
    """Resultado del archivo de un inquilino"""
    tenant: TenantRecord
    success: bool
    delivered: bool = False
    archive_file: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    def __str__(self):
        if self.success:
            return f"✓ @{self.tenant.username} | {self.tenant.tenant_id}"
        return f"✗ @{self.tenant.username} | {self.tenant.tenant_id}: {self.error}"


@dataclass
class JobReport:
    """Resumen de una ejecución completa"""
    backup: Optional[BackupResult] = None
    tenants: List[TenantResult] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    skipped: bool = False

    @property
    def failed_count(self) -> int:
        failed = sum(1 for t in self.tenants if not t.success)
        if self.error_kind is not None or self.error is not None or self.skipped:
            failed += 1
        if self.backup is not None and not self.backup.success:
            failed += 1
        return failed

    @property
    def success(self) -> bool:
        return self.failed_count == 0
