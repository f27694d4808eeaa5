"""
Estrategia base para volcados (Strategy Pattern)
"""
from abc import ABC, abstractmethod
from pathlib import Path
import time
from typing import Optional
from ..logger import LoggerService
from ..models import DatabaseConfig


class DumpStrategy(ABC):
    """Interfaz abstracta para estrategias de volcado (Open/Closed Principle)"""

    name = "base"

    def __init__(self, db_config: Optional[DatabaseConfig] = None):
        """
        Inicializa la estrategia

        Args:
            db_config: Configuración de la base de datos (si la estrategia la necesita)
        """
        self.db_config = db_config
        self.logger = LoggerService.get_logger(self.__class__.__name__)

    def is_available(self) -> bool:
        """Indica si la estrategia puede ejecutarse en este entorno"""
        return True

    @abstractmethod
    def dump(self, connection, database_name: str, output_file: Path) -> bool:
        """
        Escribe el volcado de la base de datos en output_file

        Args:
            connection: Conexión abierta a la base de datos
            database_name: Nombre de la base de datos
            output_file: Archivo de salida

        Returns:
            True si el volcado se generó
        """
        pass

    def execute_dump(self, connection, database_name: str, output_file: Path) -> bool:
        """
        Template method para ejecutar el volcado con medición de tiempo

        Args:
            connection: Conexión abierta a la base de datos
            database_name: Nombre de la base de datos
            output_file: Archivo de salida

        Returns:
            True si el volcado se generó; nunca propaga excepciones
        """
        self.logger.info(f"Iniciando volcado de {database_name} ({self.name})...")
        start_time = time.time()

        try:
            success = self.dump(connection, database_name, output_file)
        except Exception as e:
            self.logger.error(f"Error al ejecutar volcado: {e}", exc_info=True)
            return False

        duration = time.time() - start_time
        if success:
            file_size = output_file.stat().st_size / (1024 * 1024) if output_file.exists() else 0
            self.logger.info(
                f"Volcado generado: {output_file.name} "
                f"({file_size:.2f} MB, {duration:.2f}s)"
            )
        else:
            self.logger.error(f"Volcado fallido con {self.name} ({duration:.2f}s)")
        return success
