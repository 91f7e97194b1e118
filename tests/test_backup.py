"""
Tests for the timestamped backup
"""

from datetime import datetime

from studien_verwaltung.backup import BackupService
from studien_verwaltung.config import AppConfig
from studien_verwaltung.persistence import CsvRecordRepository
from studien_verwaltung.result import ErrorKind


class TestBackup:
    """Copies the persisted files into backup_<YYYYMMDD>_<HHmmss>"""

    def test_backup_copies_files(self, config, populated):
        CsvRecordRepository(config).save(populated)

        result = BackupService(config).create_backup(datetime(2024, 3, 5, 14, 7, 9))

        assert result.ok
        target = result.value
        assert target == config.data_dir / "backup_20240305_140709"
        assert sorted(p.name for p in target.iterdir()) == ["courses.csv", "enrollment.csv", "students.csv"]
        assert (target / "students.csv").read_text(encoding="utf-8") == config.students_path.read_text(
            encoding="utf-8"
        )

    def test_missing_sources_skipped(self, config):
        config.ensure_data_dir()
        config.students_path.write_text("id,regNo,fullName,email\n", encoding="utf-8")

        result = BackupService(config).create_backup(datetime(2024, 1, 1, 0, 0, 0))

        assert result.ok
        assert [p.name for p in result.value.iterdir()] == ["students.csv"]

    def test_failure_reported(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        result = BackupService(AppConfig(data_dir=blocker)).create_backup()
        assert result.kind is ErrorKind.IO_FAILURE
