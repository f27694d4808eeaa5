"""
Conexión a la base de datos principal (MySQL/MariaDB)
"""
import pymysql

from ..logger import LoggerService
from ..models import DatabaseConfig


class ConnectionUnavailable(Exception):
    """No hay una conexión utilizable a la base de datos"""


class ConnectionFactory:
    """Crea conexiones PyMySQL a partir de un DatabaseConfig"""

    CONNECT_TIMEOUT = 10

    def __init__(self):
        self.logger = LoggerService.get_logger("ConnectionFactory")

    def connect(self, db_config: DatabaseConfig) -> pymysql.connections.Connection:
        """
        Abre una conexión a la base de datos

        Args:
            db_config: Configuración de la base de datos

        Returns:
            Conexión abierta

        Raises:
            ConnectionUnavailable: si no se puede conectar
        """
        try:
            connection = pymysql.connect(
                host=db_config.host,
                port=db_config.port,
                user=db_config.user,
                password=db_config.password,
                database=db_config.database,
                charset=db_config.charset,
                connect_timeout=self.CONNECT_TIMEOUT,
                autocommit=True
            )
        except pymysql.MySQLError as e:
            self.logger.error(f"No se pudo conectar a {db_config.host}/{db_config.database}: {e}")
            raise ConnectionUnavailable(str(e)) from e

        self.logger.info(f"Conectado a {db_config.host}:{db_config.port}/{db_config.database}")
        return connection
