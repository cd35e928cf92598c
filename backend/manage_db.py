"""
Database maintenance for the link tracker.

Commands:
    python manage_db.py init     Create tables and apply migrations
    python manage_db.py check    Show tables, columns and the latest records
    python manage_db.py backup   Write a one-off backup to BACKUP_DIR
"""

import argparse
import logging
import sys

from sqlalchemy import inspect

from tracker.config import get_settings
from tracker.core.logging_config import setup_logging
from tracker.database import Database
from tracker.migrations import LATEST_VERSION, get_schema_version, migrate
from tracker.models import Click
from tracker.services.backup import create_backup

logger = logging.getLogger("manage_db")


def init_database(database: Database) -> int:
    """Create all database tables and bring the schema up to date"""
    version = migrate(database.engine)
    print(f"Schema version: {version} (latest {LATEST_VERSION})")
    return 0


def check_database(database: Database) -> int:
    """Print tables, clicks columns, row count and the last 3 records"""
    inspector = inspect(database.engine)
    tables = inspector.get_table_names()

    print("Tables:")
    if not tables:
        print("  (none)")
    for table in tables:
        print(f"  - {table}")

    if "clicks" not in tables:
        print("\nTable 'clicks' does not exist. Run: python manage_db.py init")
        return 1

    print("\nColumns of 'clicks':")
    for col in inspector.get_columns("clicks"):
        print(f"  - {col['name']} ({col['type']})")

    with database.engine.connect() as conn:
        if "schema_version" in tables:
            print(f"\nSchema version: {get_schema_version(conn)} (latest {LATEST_VERSION})")

    db = database.session_factory()
    try:
        total = db.query(Click).count()
        print(f"\nTotal records: {total}")

        if total:
            print("\nLast 3 records:")
            for click in db.query(Click).order_by(Click.id.desc()).limit(3):
                print(f"  ID: {click.id} | IP: {click.ip_address} | Country: {click.country} "
                      f"| Clicks: {click.click_count} | Date: {click.timestamp}")
    finally:
        db.close()

    return 0


def backup_database(database: Database, backup_dir: str) -> int:
    """Write a backup now"""
    target = create_backup(database, backup_dir)
    print(f"Backup created: {target}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Link tracker database maintenance")
    parser.add_argument("command", choices=["init", "check", "backup"])
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    database = Database(settings.DATABASE_URL)
    try:
        if args.command == "init":
            return init_database(database)
        if args.command == "check":
            return check_database(database)
        return backup_database(database, settings.BACKUP_DIR)
    except Exception as e:
        logger.error("%s failed: %s", args.command, e, exc_info=True)
        return 1
    finally:
        database.close()


if __name__ == "__main__":
    sys.exit(main())
