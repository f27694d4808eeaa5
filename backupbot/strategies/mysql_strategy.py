"""
Estrategia de volcado para MySQL/MariaDB usando mysqldump
"""
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional
from .base_strategy import DumpStrategy
from ..config import Config
from ..models import DatabaseConfig


def parse_disabled_functions(raw: str) -> set:
    """Convierte la lista de funciones deshabilitadas "a, b,c" en un conjunto"""
    return {item.strip() for item in (raw or "").split(",") if item.strip()}


class MySQLDumpStrategy(DumpStrategy):
    """Camino rápido: invoca la herramienta mysqldump"""

    name = "mysqldump"
    TOOL = "mysqldump"

    def __init__(self, db_config: DatabaseConfig, disabled_functions: Optional[str] = None,
                 timeout: Optional[int] = None):
        """
        Args:
            db_config: Credenciales de la base de datos
            disabled_functions: Lista separada por comas de funciones deshabilitadas
            timeout: Segundos máximos de espera para mysqldump
        """
        super().__init__(db_config)
        self.disabled_functions = (
            Config.DISABLED_FUNCTIONS if disabled_functions is None else disabled_functions
        )
        self.timeout = timeout or Config.DUMP_TIMEOUT
        self._can_exec = None

    def is_available(self) -> bool:
        """
        Comprueba una sola vez si se puede ejecutar mysqldump

        Returns:
            True si la herramienta existe y no está deshabilitada
        """
        if self._can_exec is not None:
            return self._can_exec

        disabled = parse_disabled_functions(self.disabled_functions)
        if "exec" in disabled or self.TOOL in disabled:
            self.logger.info(f"Ejecución de {self.TOOL} deshabilitada por configuración")
            self._can_exec = False
        elif not shutil.which(self.TOOL):
            self.logger.info(f"La herramienta {self.TOOL} no está instalada")
            self._can_exec = False
        else:
            self._can_exec = True
        return self._can_exec

    def build_command(self, database_name: str) -> list:
        return [
            self.TOOL,
            f'--host={self.db_config.host}',
            f'--port={self.db_config.port}',
            f'--user={self.db_config.user}',
            '--no-tablespaces',
            database_name
        ]

    def dump(self, connection, database_name: str, output_file: Path) -> bool:
        """
        Ejecuta mysqldump redirigiendo la salida a output_file

        La contraseña se pasa en MYSQL_PWD para no exponerla en la lista de procesos.
        """
        if not self.is_available():
            return False

        env = os.environ.copy()
        env['MYSQL_PWD'] = self.db_config.password

        try:
            with open(output_file, 'w', encoding='utf-8') as f:
                result = subprocess.run(
                    self.build_command(database_name),
                    stdout=f,
                    stderr=subprocess.PIPE,
                    text=True,
                    env=env,
                    timeout=self.timeout
                )
        except subprocess.TimeoutExpired:
            self.logger.error(f"Timeout: mysqldump tardó más de {self.timeout}s")
            return False
        except OSError as e:
            self.logger.error(f"No se pudo ejecutar mysqldump: {e}")
            return False

        if result.returncode != 0:
            self.logger.error(
                f"mysqldump terminó con código {result.returncode}: {result.stderr.strip()}"
            )
            return False

        return output_file.exists()
