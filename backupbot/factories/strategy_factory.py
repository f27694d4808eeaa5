"""
Factory para crear estrategias de volcado
"""
from typing import List, Optional
from ..config import Config
from ..models import DatabaseConfig
from ..strategies.base_strategy import DumpStrategy
from ..strategies.mysql_strategy import MySQLDumpStrategy
from ..strategies.table_export_strategy import TableExportStrategy


class DumpStrategyFactory:
    """Factory para crear estrategias de volcado (Factory Pattern)"""

    # Mapeo de nombres a estrategias
    _strategies = {
        'mysqldump': MySQLDumpStrategy,
        'table_export': TableExportStrategy,
    }

    @classmethod
    def create(cls, name: str, db_config: DatabaseConfig) -> Optional[DumpStrategy]:
        """
        Crea una estrategia de volcado según su nombre

        Args:
            name: Nombre de la estrategia (mysqldump, table_export)
            db_config: Configuración de la base de datos

        Returns:
            Instancia de DumpStrategy o None si el nombre no es soportado
        """
        strategy_class = cls._strategies.get(name.lower())
        if strategy_class is None:
            return None
        return strategy_class(db_config)

    @classmethod
    def create_chain(cls, db_config: DatabaseConfig, names: Optional[List[str]] = None) -> List[DumpStrategy]:
        """
        Crea las estrategias en el orden en que deben intentarse

        Args:
            db_config: Configuración de la base de datos
            names: Orden de estrategias (por defecto Config.DUMP_STRATEGIES)

        Raises:
            ValueError: si algún nombre no corresponde a una estrategia
        """
        chain = []
        for name in names or Config.DUMP_STRATEGIES:
            strategy = cls.create(name, db_config)
            if strategy is None:
                raise ValueError(f"Estrategia de volcado no soportada: {name}")
            chain.append(strategy)
        return chain

    @classmethod
    def register_strategy(cls, name: str, strategy_class: type):
        """
        Registra una nueva estrategia (permite extender sin modificar - Open/Closed)
        """
        cls._strategies[name.lower()] = strategy_class

    @classmethod
    def get_supported_types(cls) -> list:
        return list(cls._strategies.keys())
