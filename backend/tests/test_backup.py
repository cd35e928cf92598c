"""Tests for database backups."""

import asyncio
import logging
import sqlite3
from unittest.mock import MagicMock

import pytest

from tracker.services.backup import BackupScheduler, backup_filename, create_backup
from tracker.services.clicks import insert_click

from conftest import at


class TestCreateBackup:
    """create_backup"""

    def test_copies_rows(self, database, db, tmp_path):
        insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(19))
        insert_click(db, "203.0.113.2", "UA", "direct", "Peru", now=at(19))
        db.commit()

        target = create_backup(database, str(tmp_path / "backups"), now=at(19, 3, 0, 0))

        assert target.name == "clicks_auto_2026-10-19T03-00-00-000000.db"
        conn = sqlite3.connect(str(target))
        try:
            assert conn.execute("SELECT COUNT(*) FROM clicks").fetchone()[0] == 2
        finally:
            conn.close()

    def test_non_sqlite_rejected(self, tmp_path):
        database = MagicMock(is_sqlite=False)
        database.engine.dialect.name = "postgresql"
        with pytest.raises(RuntimeError):
            create_backup(database, str(tmp_path))

    def test_filename_is_timestamped(self):
        assert backup_filename(at(5, 14, 30, 1)) == "clicks_auto_2026-10-05T14-30-01-000000.db"


class TestBackupScheduler:
    """BackupScheduler"""

    def test_run_once(self, database, tmp_path):
        scheduler = BackupScheduler(database, str(tmp_path / "backups"), interval_seconds=3600)

        target = asyncio.run(scheduler.run_once())

        assert target is not None
        assert target.exists()

    def test_failure_is_logged(self, database, tmp_path, caplog):
        not_a_dir = tmp_path / "occupied"
        not_a_dir.write_text("file in the way")
        scheduler = BackupScheduler(database, str(not_a_dir), interval_seconds=3600)

        with caplog.at_level(logging.ERROR, logger="tracker.services.backup"):
            result = asyncio.run(scheduler.run_once())

        assert result is None
        assert "Automatic backup failed" in caplog.text

    def test_periodic_loop(self, database, tmp_path):
        backup_dir = tmp_path / "backups"

        async def run():
            scheduler = BackupScheduler(database, str(backup_dir), interval_seconds=0.05)
            scheduler.start()
            await asyncio.sleep(0.5)
            await scheduler.stop()

        asyncio.run(run())

        assert len(list(backup_dir.glob("clicks_auto_*.db"))) >= 1

    def test_stop_without_start(self, database, tmp_path):
        scheduler = BackupScheduler(database, str(tmp_path), interval_seconds=3600)
        asyncio.run(scheduler.stop())
