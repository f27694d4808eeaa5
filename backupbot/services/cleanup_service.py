"""
Servicio para eliminar los artefactos temporales (Single Responsibility)
"""
from pathlib import Path
from ..logger import LoggerService


class CleanupService:
    """Elimina volcados y archivos comprimidos al terminar cada etapa"""

    def __init__(self):
        self.logger = LoggerService.get_logger("CleanupService")

    def remove(self, *paths) -> int:
        """
        Elimina los archivos indicados si existen

        Args:
            paths: Rutas a eliminar (se ignoran las que no existen o son None)

        Returns:
            Cantidad de archivos eliminados
        """
        deleted_count = 0
        for path in paths:
            if path is None:
                continue
            path = Path(path)
            try:
                if path.exists():
                    size_mb = path.stat().st_size / (1024 * 1024)
                    path.unlink()
                    deleted_count += 1
                    self.logger.info(f"Eliminado: {path.name} ({size_mb:.2f} MB)")
            except OSError as e:
                self.logger.error(f"Error al eliminar {path.name}: {e}")
        return deleted_count
