#!/usr/bin/env python3
"""
Bot de backup: base de datos principal y datos de inquilinos a Telegram
Punto de entrada principal

Uso:
    python main.py                  # Modo scheduler (automático)
    python main.py once             # Ejecutar backup una vez
    python main.py once --db-only   # Solo la base de datos principal
    python main.py --help           # Ayuda
"""
import sys
import argparse

from backupbot.config import Config
from backupbot.logger import LoggerService
from backupbot.services.job_service import BackupJob
from backupbot.services.scheduler_service import SchedulerService


def parse_arguments(argv=None):
    """
    Parsea argumentos de línea de comandos

    Returns:
        Namespace con los argumentos parseados
    """
    parser = argparse.ArgumentParser(
        description='Backup de la base de datos y de los inquilinos a Telegram',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos:
  python main.py                    # Iniciar servicio automático
  python main.py once               # Ejecutar backup una sola vez
  python main.py once --tenants-only
  python main.py --init             # Crear .env.example
        """
    )

    parser.add_argument(
        'mode',
        nargs='?',
        choices=['once', 'scheduler'],
        default='scheduler',
        help='Modo de ejecución (default: scheduler)'
    )

    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        '--db-only',
        action='store_true',
        help='Respaldar solo la base de datos principal'
    )
    scope.add_argument(
        '--tenants-only',
        action='store_true',
        help='Archivar solo los directorios de los inquilinos'
    )

    parser.add_argument(
        '--init',
        action='store_true',
        help='Crear archivo .env.example'
    )

    parser.add_argument(
        '--now',
        action='store_true',
        help='Ejecutar backup inmediatamente al iniciar scheduler'
    )

    return parser.parse_args(argv)


def initialize_config() -> bool:
    """
    Crea .env.example si no existe

    Returns:
        True si se creó el archivo
    """
    logger = LoggerService.get_logger("Init")
    env_example = Config.ENV_EXAMPLE_FILE
    if env_example.exists():
        logger.info(f"Ya existe: {env_example}")
        return False

    try:
        with open(env_example, 'w', encoding='utf-8') as f:
            f.write(Config.ENV_EXAMPLE)
    except OSError as e:
        logger.error(f"Error creando .env.example: {e}")
        return False

    logger.info("=" * 70)
    logger.info(f"Creado: {env_example}")
    logger.info("1. Copia .env.example como .env")
    logger.info("2. Edita .env con tus credenciales y el token del bot")
    logger.info("3. Ejecuta nuevamente este script")
    logger.info("=" * 70)
    return True


def main(argv=None) -> int:
    """Función principal"""
    args = parse_arguments(argv)

    if args.init:
        initialize_config()
        return 0

    Config.ensure_directories()
    logger = LoggerService.get_logger("Main")

    try:
        job = BackupJob()
    except ValueError as e:
        logger.error(f"Configuración inválida: {e}")
        logger.error("Ejecuta: python main.py --init")
        return 1

    include_tenants = not args.db_only
    include_database = not args.tenants_only

    if args.mode == 'once':
        logger.info("Modo: Ejecución única")
        report = job.run(include_tenants=include_tenants, include_database=include_database)
        return 1 if report.failed_count > 0 else 0

    scheduler = SchedulerService(
        job,
        include_tenants=include_tenants,
        include_database=include_database
    )
    scheduler.start(run_immediately=args.now)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nPrograma interrumpido por el usuario")
        sys.exit(0)
    except Exception as e:
        print(f"Error crítico: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
