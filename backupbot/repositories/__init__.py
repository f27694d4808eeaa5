"""
Acceso a la base de datos y a los registros de configuración
"""
from .connection import ConnectionFactory, ConnectionUnavailable
from .record_store import RecordStore

__all__ = ['ConnectionFactory', 'ConnectionUnavailable', 'RecordStore']
