"""
Tests de la ejecución completa
"""
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import pymysql

sys.path.insert(0, str(Path(__file__).parent.parent))

from backupbot.config import Config
from backupbot.models import DatabaseConfig, DeliveryTarget, ErrorKind, TenantRecord
from backupbot.repositories.connection import ConnectionUnavailable
from backupbot.services.job_service import BackupJob
from tests.fakes import FakeNotifier


class FakeStore:
    """RecordStore con datos fijos"""

    def __init__(self, connection, target=None, tenants=(), error=None):
        self.connection = connection
        self.target = target or DeliveryTarget(channel_id="-100200", thread_id="15")
        self.tenants = list(tenants)
        self.error = error

    def get_delivery_target(self):
        if self.error:
            raise self.error
        return self.target

    def get_tenants(self):
        return self.tenants


class WritingDumpService:
    """Sustituye a DumpService escribiendo un volcado mínimo"""

    def __init__(self, db_config):
        self.db_config = db_config

    def produce_dump(self, connection, database_name, output_path):
        Path(output_path).write_text(f"-- Database: `{database_name}`\n", encoding="utf-8")
        return True


class TestBackupJob(unittest.TestCase):
    """Tests para BackupJob"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.work_dir = self.temp_dir / "work"
        self.tenants_root = self.temp_dir / "vpnbot"
        (self.tenants_root / "1alice" / "data").mkdir(parents=True)
        (self.tenants_root / "1alice" / "data" / "a.json").write_text("{}", encoding="utf-8")

        self.db_config = DatabaseConfig(
            host="localhost", port=3306, user="bot", password="secret", database="app"
        )
        self.connection = mock.MagicMock()
        self.connection_factory = mock.Mock()
        self.connection_factory.connect.return_value = self.connection
        self.notifier = FakeNotifier()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _job(self, store_factory=None):
        return BackupJob(
            db_config=self.db_config,
            connection_factory=self.connection_factory,
            notifier=self.notifier,
            work_dir=self.work_dir,
            tenants_root=self.tenants_root,
            store_factory=store_factory or (lambda c: FakeStore(c, tenants=[TenantRecord("1", "alice")]))
        )

    @mock.patch("backupbot.services.job_service.DumpService", WritingDumpService)
    def test_full_run(self):
        report = self._job().run()

        self.assertTrue(report.success)
        self.assertEqual(report.failed_count, 0)
        self.assertEqual(len(report.tenants), 1)
        self.assertTrue(report.backup.success)
        self.assertTrue(report.backup.delivered)

        names = [d["file"].name for d in self.notifier.documents]
        self.assertEqual(names[0], "file_1alice.zip")
        self.assertTrue(names[1].startswith("backup_"))
        self.connection.close.assert_called_once()
        self.assertEqual(sorted(os.listdir(self.work_dir)), [])

    @mock.patch("backupbot.services.job_service.DumpService", WritingDumpService)
    def test_database_only(self):
        report = self._job().run(include_tenants=False)

        self.assertEqual(report.tenants, [])
        self.assertTrue(report.backup.success)
        self.assertEqual(len(self.notifier.documents), 1)

    @mock.patch("backupbot.services.job_service.DumpService", WritingDumpService)
    def test_tenant_lookup_error_does_not_stop_database_backup(self):
        def broken_store(connection):
            store = FakeStore(connection)
            store.get_tenants = mock.Mock(side_effect=pymysql.err.ProgrammingError(
                1146, "Table 'app.botsaz' doesn't exist"
            ))
            return store

        report = self._job(store_factory=broken_store).run()

        self.assertIsNotNone(report.backup)
        self.assertTrue(report.backup.success)
        self.assertTrue(report.backup.delivered)
        self.assertEqual(report.error_kind, ErrorKind.TENANT_STEP_FAILED)
        self.assertFalse(report.success)
        self.assertEqual(len(self.notifier.documents), 1)
        self.connection.close.assert_called_once()

    def test_tenants_only(self):
        report = self._job().run(include_database=False)

        self.assertIsNone(report.backup)
        self.assertEqual(len(report.tenants), 1)
        self.assertTrue(report.success)

    def test_connection_unavailable(self):
        self.connection_factory.connect.side_effect = ConnectionUnavailable("Connection refused")
        report = self._job().run()

        self.assertFalse(report.success)
        self.assertEqual(report.error_kind, ErrorKind.CONNECTION_UNAVAILABLE)
        self.assertEqual(self.notifier.texts, [])
        self.assertEqual(self.notifier.documents, [])
        self.assertFalse((self.work_dir / Config.LOCK_FILE_NAME).exists())

    def test_missing_delivery_target(self):
        job = self._job(store_factory=lambda c: FakeStore(c, error=ValueError("Channel_Report vacío")))
        report = job.run()

        self.assertEqual(report.error_kind, ErrorKind.CONFIGURATION_MISSING)
        self.assertIsNone(report.backup)
        self.assertEqual(self.notifier.documents, [])
        self.connection.close.assert_called_once()

    def test_unexpected_error_is_reported(self):
        def exploding_store(connection):
            raise RuntimeError("boom")

        report = self._job(store_factory=exploding_store).run()

        self.assertFalse(report.success)
        self.assertEqual(report.error, "boom")
        self.connection.close.assert_called_once()

    def test_skipped_when_lock_is_held(self):
        self.work_dir.mkdir(parents=True)
        lock_file = self.work_dir / Config.LOCK_FILE_NAME
        lock_file.write_text(str(os.getpid()), encoding="utf-8")

        report = self._job().run()

        self.assertTrue(report.skipped)
        self.assertFalse(report.success)
        self.connection_factory.connect.assert_not_called()
        self.assertTrue(lock_file.exists())


if __name__ == '__main__':
    unittest.main(verbosity=2)
