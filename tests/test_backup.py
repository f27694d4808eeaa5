"""
Tests unitarios de modelos, configuración, factory de estrategias y scheduler
"""
import unittest
from pathlib import Path
from unittest import mock
import sys

import schedule

# Agregar la raíz del proyecto al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from backupbot.config import Config, validate_time_format
from backupbot.factories.strategy_factory import DumpStrategyFactory
from backupbot.models import (
    BackupResult, BackupStage, DatabaseConfig, DeliveryTarget, ErrorKind,
    JobReport, StageResult, TenantRecord, TenantResult
)
from backupbot.services.scheduler_service import SchedulerService


def make_db_config(**overrides):
    values = dict(host="localhost", port=3306, user="root", password="secret", database="app")
    values.update(overrides)
    return DatabaseConfig(**values)


class TestModels(unittest.TestCase):
    """Tests para modelos de datos"""

    def test_database_config_creation(self):
        """Test creación de DatabaseConfig"""
        db = make_db_config()
        self.assertEqual(db.database, "app")
        self.assertEqual(db.charset, "utf8mb4")

    def test_database_config_validation(self):
        """Test validación de DatabaseConfig"""
        with self.assertRaises(ValueError):
            make_db_config(database="")
        with self.assertRaises(ValueError):
            make_db_config(user="")

    def test_tenant_record_folder_name(self):
        tenant = TenantRecord(tenant_id=42, username=" alice ")
        self.assertEqual(tenant.tenant_id, "42")
        self.assertEqual(tenant.username, "alice")
        self.assertEqual(tenant.folder_name, "42alice")

    def test_tenant_record_requires_fields(self):
        with self.assertRaises(ValueError):
            TenantRecord(tenant_id=None, username="alice")
        with self.assertRaises(ValueError):
            TenantRecord(tenant_id="1", username="")

    def test_delivery_target_requires_channel(self):
        with self.assertRaises(ValueError):
            DeliveryTarget(channel_id="")
        target = DeliveryTarget(channel_id="-100123", thread_id="7")
        self.assertEqual(target.thread_id, "7")

    def test_stage_result_helpers(self):
        self.assertTrue(StageResult.ok().success)
        failed = StageResult.fail(ErrorKind.DUMP_FAILED, "detalle")
        self.assertFalse(failed.success)
        self.assertEqual(failed.error_kind, ErrorKind.DUMP_FAILED)

    def test_backup_result_str(self):
        """Test representación de BackupResult"""
        ok = BackupResult(database_name="app", success=True, output_file="backup.zip",
                          stage=BackupStage.CLEANED, duration_seconds=1.5)
        self.assertIn("app", str(ok))
        failed = BackupResult(database_name="app", success=False,
                              stage=BackupStage.FAILED_NOTIFIED, error_kind=ErrorKind.DUMP_FAILED)
        self.assertIn("dump_failed", str(failed))

    def test_job_report_failed_count(self):
        tenant = TenantRecord("1", "alice")
        report = JobReport(
            backup=BackupResult(database_name="app", success=False),
            tenants=[TenantResult(tenant=tenant, success=True), TenantResult(tenant=tenant, success=False)]
        )
        self.assertEqual(report.failed_count, 2)
        self.assertFalse(report.success)
        self.assertTrue(JobReport().success)
        self.assertEqual(JobReport(skipped=True).failed_count, 1)


class TestConfig(unittest.TestCase):
    """Tests para Config"""

    def test_validate_time_format(self):
        self.assertTrue(validate_time_format("02:00"))
        self.assertTrue(validate_time_format("23:59"))
        self.assertFalse(validate_time_format("24:00"))
        self.assertFalse(validate_time_format("2:00"))
        self.assertFalse(validate_time_format("dos"))

    def test_schedule_times_rejects_invalid(self):
        with mock.patch.object(Config, "BACKUP_SCHEDULE", ["02:00", "25:00"]):
            with self.assertRaises(ValueError):
                Config.schedule_times()

    def test_schedule_times(self):
        with mock.patch.object(Config, "BACKUP_SCHEDULE", ["02:00", "14:30"]):
            self.assertEqual(Config.schedule_times(), ["02:00", "14:30"])

    def test_database_config_from_environment(self):
        with mock.patch.multiple(Config, DB_USER="backup", DB_NAME="app", DB_PASSWORD="pw"):
            db = Config.database_config()
        self.assertEqual(db.user, "backup")
        self.assertEqual(db.database, "app")


class TestDumpStrategyFactory(unittest.TestCase):
    """Tests para DumpStrategyFactory"""

    def test_create_mysqldump_strategy(self):
        strategy = DumpStrategyFactory.create('mysqldump', make_db_config())
        self.assertEqual(strategy.__class__.__name__, 'MySQLDumpStrategy')

    def test_create_table_export_strategy(self):
        strategy = DumpStrategyFactory.create('TABLE_EXPORT', make_db_config())
        self.assertEqual(strategy.__class__.__name__, 'TableExportStrategy')

    def test_create_unsupported_strategy(self):
        self.assertIsNone(DumpStrategyFactory.create('oracle', make_db_config()))

    def test_create_chain_keeps_order(self):
        chain = DumpStrategyFactory.create_chain(make_db_config(), ['mysqldump', 'table_export'])
        self.assertEqual([s.name for s in chain], ['mysqldump', 'table_export'])

    def test_create_chain_rejects_unknown(self):
        with self.assertRaises(ValueError):
            DumpStrategyFactory.create_chain(make_db_config(), ['pg_dump'])

    def test_get_supported_types(self):
        types = DumpStrategyFactory.get_supported_types()
        self.assertIn('mysqldump', types)
        self.assertIn('table_export', types)


class TestSchedulerService(unittest.TestCase):
    """Tests para SchedulerService"""

    def setUp(self):
        patcher = mock.patch("backupbot.services.scheduler_service.signal.signal")
        patcher.start()
        self.addCleanup(patcher.stop)
        self.job = mock.Mock()
        self.job.db_config = make_db_config()

    def tearDown(self):
        schedule.clear()

    def test_register_one_job_per_time(self):
        service = SchedulerService(self.job, schedule_times=["02:00", "14:30"])
        service.register_jobs()
        self.assertEqual(len(schedule.get_jobs()), 2)
        self.assertNotEqual(service.get_next_run(), "No hay ejecuciones programadas")

    def test_run_passes_scope(self):
        self.job.run.return_value = JobReport()
        service = SchedulerService(self.job, schedule_times=["02:00"], include_tenants=False)
        service._run_backup_job()
        self.job.run.assert_called_once_with(include_tenants=False, include_database=True)

    def test_run_errors_do_not_stop_scheduler(self):
        self.job.run.side_effect = RuntimeError("boom")
        service = SchedulerService(self.job, schedule_times=["02:00"])
        service._run_backup_job()
        self.job.run.assert_called_once()


if __name__ == '__main__':
    unittest.main(verbosity=2)
