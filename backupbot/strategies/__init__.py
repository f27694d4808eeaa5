"""
Estrategias de volcado de la base de datos
"""
from .base_strategy import DumpStrategy
from .mysql_strategy import MySQLDumpStrategy
from .table_export_strategy import TableExportStrategy

__all__ = [
    'DumpStrategy',
    'MySQLDumpStrategy',
    'TableExportStrategy'
]
