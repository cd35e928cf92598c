"""Tests for the database maintenance commands."""

from sqlalchemy import text

from manage_db import backup_database, check_database, init_database
from tracker.database import Database
from tracker.migrations import LATEST_VERSION
from tracker.services.clicks import insert_click

from conftest import at


class TestManageDb:
    """manage_db commands"""

    def test_init(self, tmp_path, capsys):
        database = Database(f"sqlite:///{tmp_path / 'clicks.db'}")
        try:
            assert init_database(database) == 0
            assert init_database(database) == 0
        finally:
            database.close()

        assert f"Schema version: {LATEST_VERSION}" in capsys.readouterr().out

    def test_check_without_table(self, tmp_path, capsys):
        database = Database(f"sqlite:///{tmp_path / 'empty.db'}")
        try:
            assert check_database(database) == 1
        finally:
            database.close()

        assert "does not exist" in capsys.readouterr().out

    def test_check_lists_records(self, database, db, capsys):
        insert_click(db, "203.0.113.1", "UA", "direct", "Chile", now=at(19))
        insert_click(db, "203.0.113.2", "UA", "direct", "Peru", now=at(19))
        db.commit()

        assert check_database(database) == 0

        out = capsys.readouterr().out
        assert "- clicks" in out
        assert "- click_count" in out
        assert "Total records: 2" in out
        assert "IP: 203.0.113.2" in out

    def test_backup(self, database, tmp_path, capsys):
        with database.engine.begin() as conn:
            conn.execute(text("INSERT INTO clicks (ip_address, click_count) VALUES ('203.0.113.9', 1)"))

        assert backup_database(database, str(tmp_path / "backups")) == 0

        assert "Backup created" in capsys.readouterr().out
        assert len(list((tmp_path / "backups").glob("*.db"))) == 1
