"""
Bot de backup: base de datos principal y datos de inquilinos a Telegram
"""
__version__ = "1.0.0"

from .config import Config
from .logger import LoggerService

__all__ = ['Config', 'LoggerService']
