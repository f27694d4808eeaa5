"""
Servicio de programación de tareas de backup
"""
import schedule
import time
import signal
import sys
from typing import List, Optional
from ..config import Config
from ..logger import LoggerService
from .job_service import BackupJob


class SchedulerService:
    """Servicio para programar y ejecutar backups automáticos"""

    def __init__(self, job: BackupJob, schedule_times: Optional[List[str]] = None,
                 include_tenants: bool = True, include_database: bool = True):
        """
        Inicializa el servicio de programación

        Args:
            job: Ejecución de backup a programar
            schedule_times: Horarios diarios HH:MM (por defecto Config.BACKUP_SCHEDULE)
            include_tenants: Archivar los inquilinos en cada ejecución
            include_database: Respaldar la base de datos en cada ejecución
        """
        self.job = job
        self.schedule_times = schedule_times or Config.schedule_times()
        self.include_tenants = include_tenants
        self.include_database = include_database
        self.logger = LoggerService.get_logger("SchedulerService")
        self.running = False

        # Registrar manejadores de señales para shutdown graceful
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def register_jobs(self):
        """Programa una ejecución diaria por cada horario configurado"""
        for schedule_time in self.schedule_times:
            schedule.every().day.at(schedule_time).do(self._run_backup_job)

    def start(self, run_immediately: bool = False):
        """
        Inicia el programador de tareas

        Args:
            run_immediately: Si es True, ejecuta un backup inmediatamente al iniciar
        """
        self.register_jobs()

        self.logger.info("=" * 70)
        self.logger.info("SERVICIO DE BACKUP AUTOMÁTICO INICIADO")
        self.logger.info("=" * 70)
        self.logger.info(f"Backups diarios programados: {len(self.schedule_times)}")
        for schedule_time in self.schedule_times:
            self.logger.info(f"  - A las {schedule_time}")
        self.logger.info(f"Base de datos: {self.job.db_config.database} ({'sí' if self.include_database else 'no'})")
        self.logger.info(f"Inquilinos: {'sí' if self.include_tenants else 'no'}")
        self.logger.info("-" * 70)
        self.logger.info(f"Próxima ejecución: {self.get_next_run()}")
        self.logger.info("Presiona Ctrl+C para detener el servicio")
        self.logger.info("=" * 70)

        if run_immediately:
            self.logger.info("Ejecutando backup inicial...")
            self._run_backup_job()

        # Loop principal
        self.running = True
        try:
            while self.running:
                schedule.run_pending()
                time.sleep(60)  # Revisar cada minuto
        except KeyboardInterrupt:
            self._shutdown()

    def _run_backup_job(self):
        """Ejecuta el trabajo de backup programado"""
        try:
            self.logger.info(f"Ejecutando backup programado a las {time.strftime('%Y-%m-%d %H:%M:%S')}")
            report = self.job.run(
                include_tenants=self.include_tenants,
                include_database=self.include_database
            )

            if report.failed_count:
                self.logger.warning(
                    f"Backup completado con {report.failed_count} error(es). "
                    "Revisa los logs para más detalles."
                )
            else:
                self.logger.info("Backup completado exitosamente")

        except Exception as e:
            self.logger.error(f"Error crítico durante backup: {e}", exc_info=True)

    def _signal_handler(self, signum, frame):
        """
        Manejador de señales para shutdown graceful

        Args:
            signum: Número de señal
            frame: Frame actual
        """
        try:
            signal_name = signal.Signals(signum).name
        except ValueError:
            signal_name = str(signum)

        self.logger.info(f"Señal recibida: {signal_name}")
        self._shutdown()

    def _shutdown(self):
        """Detiene el servicio de forma ordenada"""
        self.logger.info("Deteniendo servicio de backup...")
        self.running = False
        schedule.clear()
        self.logger.info("Servicio detenido correctamente")
        sys.exit(0)

    def get_next_run(self) -> str:
        """
        Obtiene la fecha de la próxima ejecución

        Returns:
            String con la próxima ejecución
        """
        next_run = schedule.next_run()
        if next_run:
            return next_run.strftime('%Y-%m-%d %H:%M:%S')
        return "No hay ejecuciones programadas"
