"""
Servicio que produce el volcado SQL de la base de datos principal
"""
from pathlib import Path
from typing import List, Optional
from ..logger import LoggerService
from ..models import DatabaseConfig
from ..factories.strategy_factory import DumpStrategyFactory
from ..strategies.base_strategy import DumpStrategy


class DumpService:
    """
    Intenta las estrategias de volcado en orden hasta que una funcione

    Se crea una instancia por ejecución: la comprobación de herramientas que
    hacen las estrategias queda cacheada solo durante esa ejecución.
    """

    def __init__(self, db_config: DatabaseConfig, strategies: Optional[List[DumpStrategy]] = None):
        """
        Args:
            db_config: Configuración de la base de datos
            strategies: Estrategias en orden de preferencia (por defecto la cadena configurada)
        """
        self.db_config = db_config
        self.logger = LoggerService.get_logger("DumpService")
        self.strategies = strategies if strategies is not None else DumpStrategyFactory.create_chain(db_config)

    def produce_dump(self, connection, database_name: str, output_path: Path) -> bool:
        """
        Genera el volcado en output_path

        Args:
            connection: Conexión abierta a la base de datos
            database_name: Nombre de la base de datos
            output_path: Archivo de salida

        Returns:
            True si alguna estrategia generó el volcado
        """
        output_path = Path(output_path)

        for strategy in self.strategies:
            if not strategy.is_available():
                self.logger.info(f"Estrategia {strategy.name} no disponible, se intenta la siguiente")
                continue

            if strategy.execute_dump(connection, database_name, output_path):
                return True

            self.logger.warning(f"La estrategia {strategy.name} falló")

        self.logger.critical("No se pudo generar el backup de la base de datos con ningún método")
        return False
