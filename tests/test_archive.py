"""
Tests del constructor de archivos ZIP
"""
import os
import shutil
import sys
import tempfile
import unittest
import zipfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from backupbot.services.archive_service import (
    ArchiveService, add_path_to_archive, relative_archive_path
)


class TestRelativeArchivePath(unittest.TestCase):

    def test_strips_base_prefix(self):
        base = os.path.join(os.sep, "srv", "bots", "1alice")
        path = os.path.join(base, "data", "a.txt")
        self.assertEqual(relative_archive_path(path, base), os.path.join("data", "a.txt"))

    def test_base_with_trailing_separator(self):
        base = os.path.join(os.sep, "srv", "bots", "1alice") + os.sep
        path = os.path.join(os.sep, "srv", "bots", "1alice", "product.json")
        self.assertEqual(relative_archive_path(path, base), "product.json")

    def test_path_outside_base_keeps_path_without_leading_separator(self):
        path = os.path.join(os.sep, "tmp", "x.txt")
        self.assertEqual(relative_archive_path(path, os.path.join(os.sep, "srv")), os.path.join("tmp", "x.txt"))


class TestAddPathToArchive(unittest.TestCase):
    """Tests para add_path_to_archive"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.root = self.temp_dir / "1alice"
        (self.root / "data" / "sub").mkdir(parents=True)
        (self.root / "data" / "empty").mkdir()
        (self.root / "data" / "a.txt").write_text("a", encoding="utf-8")
        (self.root / "data" / "sub" / "b.txt").write_text("b", encoding="utf-8")
        (self.root / "product.json").write_text("{}", encoding="utf-8")
        self.zip_path = self.temp_dir / "out.zip"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _build(self, *paths):
        with zipfile.ZipFile(self.zip_path, "w") as archive:
            for path in paths:
                add_path_to_archive(archive, path, self.root)
        with zipfile.ZipFile(self.zip_path) as archive:
            return archive.namelist(), {n: archive.read(n) for n in archive.namelist()}

    def test_directory_tree_preserves_relative_paths(self):
        names, _ = self._build(self.root / "data", self.root / "product.json")
        self.assertEqual(names, [
            "data/",
            "data/a.txt",
            "data/empty/",
            "data/sub/",
            "data/sub/b.txt",
            "product.json",
        ])

    def test_every_file_appears_exactly_once(self):
        names, contents = self._build(self.root / "data")
        files = [n for n in names if not n.endswith("/")]
        self.assertEqual(len(files), len(set(files)))
        self.assertEqual(contents["data/a.txt"], b"a")
        self.assertEqual(contents["data/sub/b.txt"], b"b")

    def test_directories_precede_their_contents(self):
        names, _ = self._build(self.root / "data")
        for name in names:
            parent = name.rstrip("/").rpartition("/")[0]
            if parent:
                self.assertLess(names.index(parent + "/"), names.index(name))

    def test_empty_directory_is_directory_entry(self):
        self._build(self.root / "data")
        with zipfile.ZipFile(self.zip_path) as archive:
            self.assertTrue(archive.getinfo("data/empty/").is_dir())

    @unittest.skipUnless(hasattr(os, "symlink"), "requiere enlaces simbólicos")
    def test_symlink_loop_is_not_followed(self):
        os.symlink(self.root / "data", self.root / "data" / "sub" / "loop", target_is_directory=True)
        names, _ = self._build(self.root / "data")
        self.assertEqual(names, [
            "data/",
            "data/a.txt",
            "data/empty/",
            "data/sub/",
            "data/sub/b.txt",
        ])

    def test_single_file(self):
        names, contents = self._build(self.root / "product.json")
        self.assertEqual(names, ["product.json"])
        self.assertEqual(contents["product.json"], b"{}")


class TestArchiveService(unittest.TestCase):
    """Tests para ArchiveService"""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.service = ArchiveService()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_is_supported(self):
        self.assertTrue(self.service.is_supported())

    def test_missing_path_is_skipped(self):
        zip_path = self.temp_dir / "out.zip"
        with self.service.open_archive(zip_path) as archive:
            self.service.add_path(archive, self.temp_dir / "no_existe", self.temp_dir)
        with zipfile.ZipFile(zip_path) as archive:
            self.assertEqual(archive.namelist(), [])
        self.assertGreater(zip_path.stat().st_size, 0)

    def test_create_single_file_archive(self):
        dump = self.temp_dir / "backup_2026-10-19.sql"
        dump.write_text("SET FOREIGN_KEY_CHECKS=0;\n", encoding="utf-8")
        zip_path = self.temp_dir / "backup_2026-10-19.zip"

        self.service.create_single_file_archive(dump, zip_path)

        with zipfile.ZipFile(zip_path) as archive:
            self.assertEqual(archive.namelist(), ["backup_2026-10-19.sql"])
            self.assertEqual(archive.read("backup_2026-10-19.sql"), b"SET FOREIGN_KEY_CHECKS=0;\n")

    def test_open_archive_overwrites(self):
        zip_path = self.temp_dir / "out.zip"
        zip_path.write_bytes(b"basura")
        with self.service.open_archive(zip_path) as archive:
            archive.writestr("x.txt", "x")
        with zipfile.ZipFile(zip_path) as archive:
            self.assertEqual(archive.namelist(), ["x.txt"])

    def test_open_archive_in_missing_directory_raises(self):
        with self.assertRaises(OSError):
            self.service.open_archive(self.temp_dir / "no_existe" / "out.zip")


if __name__ == '__main__':
    unittest.main(verbosity=2)
