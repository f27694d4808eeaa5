"""
Configuración centralizada del sistema de backup
"""
import logging
import os
from pathlib import Path
from typing import List
from dotenv import load_dotenv, find_dotenv

from .models import DatabaseConfig


def _env_list(name: str, default: str) -> List[str]:
    """Lee una variable de entorno separada por comas"""
    raw = os.getenv(name, default) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    """Configuración centralizada del sistema"""

    ENV_FILE = find_dotenv(usecwd=True)

    # Cargar variables de entorno desde la raíz real del proyecto
    load_dotenv(ENV_FILE)

    # BASE_DIR es la raíz donde está main.py
    BASE_DIR = Path(ENV_FILE).parent if ENV_FILE else Path(__file__).resolve().parents[1]

    # Los artefactos temporales se escriben en el directorio de trabajo
    WORK_DIR = Path(os.getenv("BACKUP_WORK_DIR")) if os.getenv("BACKUP_WORK_DIR") else Path.cwd()
    LOG_DIR = Path(os.getenv("LOG_DIR")) if os.getenv("LOG_DIR") else (BASE_DIR / "logs")
    TENANTS_ROOT = Path(os.getenv("TENANTS_ROOT")) if os.getenv("TENANTS_ROOT") else (BASE_DIR.parent / "vpnbot")
    ENV_EXAMPLE_FILE = BASE_DIR / ".env.example"
    LOCK_FILE_NAME = "backupbot.lock"

    # Base de datos principal
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = int(os.getenv("DB_PORT", "3306"))
    DB_USER = os.getenv("DB_USER", "")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "")
    DB_NAME = os.getenv("DB_NAME", "")
    DB_CHARSET = "utf8mb4"

    # Volcado
    DUMP_STRATEGIES = _env_list("DUMP_STRATEGIES", "mysqldump,table_export")
    DUMP_TIMEOUT = int(os.getenv("DUMP_TIMEOUT", "3600"))
    DISABLED_FUNCTIONS = os.getenv("BACKUPBOT_DISABLED_FUNCTIONS", "")

    # Telegram
    TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_API_URL = os.getenv("TELEGRAM_API_URL", "https://api.telegram.org")
    TELEGRAM_TIMEOUT = int(os.getenv("TELEGRAM_TIMEOUT", "10"))

    # Tablas del almacén de registros
    SETTINGS_TABLE = "setting"
    REPORT_TOPICS_TABLE = "topicid"
    TENANTS_TABLE = "botsaz"
    BACKUP_REPORT_KEY = "backupfile"

    # Subrutas respaldadas de cada inquilino
    TENANT_BACKUP_PATHS = ["data", "product.json", "product_name.json"]

    BACKUP_SCHEDULE = _env_list("BACKUP_SCHEDULE", "02:00")

    LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    ENV_EXAMPLE = """# Variables de entorno del bot de backup
# Copia este archivo como .env y completa con tus credenciales

# MySQL/MariaDB
DB_HOST=localhost
DB_PORT=3306
DB_USER=backup_user
DB_PASSWORD=tu_password_seguro
DB_NAME=nombre_base

# Telegram
TELEGRAM_BOT_TOKEN=123456:ABC-DEF

# Rutas (opcionales)
# BACKUP_WORK_DIR=/var/lib/backupbot
# TENANTS_ROOT=/var/www/vpnbot
# LOG_DIR=/var/log/backupbot

# Horarios diarios HH:MM separados por comas
BACKUP_SCHEDULE=02:00

# Funciones deshabilitadas por el administrador (ej: exec,mysqldump)
# BACKUPBOT_DISABLED_FUNCTIONS=
"""

    @classmethod
    def ensure_directories(cls):
        """Crea los directorios necesarios si no existen"""
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
        cls.WORK_DIR.mkdir(parents=True, exist_ok=True)

    @classmethod
    def database_config(cls) -> DatabaseConfig:
        """
        Construye la configuración de la base de datos principal

        Returns:
            DatabaseConfig validado

        Raises:
            ValueError: si faltan datos obligatorios
        """
        return DatabaseConfig(
            host=cls.DB_HOST,
            port=cls.DB_PORT,
            user=cls.DB_USER,
            password=cls.DB_PASSWORD,
            database=cls.DB_NAME,
            charset=cls.DB_CHARSET
        )

    @classmethod
    def schedule_times(cls) -> List[str]:
        """
        Devuelve los horarios diarios configurados

        Raises:
            ValueError: si algún horario no tiene formato HH:MM
        """
        for schedule_time in cls.BACKUP_SCHEDULE:
            if not validate_time_format(schedule_time):
                raise ValueError(f"Horario inválido (se espera HH:MM): {schedule_time}")
        return list(cls.BACKUP_SCHEDULE)


def validate_time_format(time_str: str) -> bool:
    """Valida formato de hora HH:MM"""
    try:
        parts = time_str.split(":")
        if len(parts) != 2 or len(parts[0]) != 2 or len(parts[1]) != 2:
            return False
        hours, minutes = int(parts[0]), int(parts[1])
        return 0 <= hours <= 23 and 0 <= minutes <= 59
    except (ValueError, AttributeError):
        return False
