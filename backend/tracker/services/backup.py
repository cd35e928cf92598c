import asyncio
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..database import Database
from ..models.click import utcnow

logger = logging.getLogger(__name__)


def backup_filename(now: Optional[datetime] = None) -> str:
    now = now or utcnow()
    return f"clicks_auto_{now.strftime('%Y-%m-%dT%H-%M-%S-%f')}.db"


def create_backup(database: Database, backup_dir: str, now: Optional[datetime] = None) -> Path:
    """
    Copy the SQLite database to a timestamped file in backup_dir.

    Uses the SQLite online backup API, so writers are not blocked for the
    duration of the copy.
    """
    if not database.is_sqlite:
        raise RuntimeError(f"Backups are only supported for SQLite databases, not {database.engine.dialect.name}")

    target_dir = Path(backup_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / backup_filename(now)

    raw_conn = database.engine.raw_connection()
    try:
        dest = sqlite3.connect(str(target))
        try:
            raw_conn.driver_connection.backup(dest)
        finally:
            dest.close()
    finally:
        raw_conn.close()

    logger.info("Backup written to %s", target)
    return target


class BackupScheduler:
    """Runs create_backup on a fixed interval inside the event loop"""

    def __init__(self, database: Database, backup_dir: str, interval_seconds: float):
        self.database = database
        self.backup_dir = backup_dir
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    async def run_once(self) -> Optional[Path]:
        try:
            return await asyncio.to_thread(create_backup, self.database, self.backup_dir)
        except Exception:
            logger.exception("Automatic backup failed")
            return None

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.run_once()

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop())
            logger.info("Backup scheduler started (every %.0f s, dir=%s)", self.interval_seconds, self.backup_dir)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Backup scheduler stopped")
