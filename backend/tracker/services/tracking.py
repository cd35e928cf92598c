import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..models import UNKNOWN_COUNTRY
from ..utils.geo import is_ip_address, normalize_ip
from ..utils.validators import clean_header
from .clicks import find_todays_click, increment_click_count, insert_click

logger = logging.getLogger(__name__)

# Serializes find-then-write so one process never stores two rows for the same IP and day
_write_lock = threading.Lock()


def record_click(
    session_factory: Callable[[], Session],
    raw_ip: Optional[str],
    user_agent: Optional[str],
    referer: Optional[str],
    resolve_country: Callable[[str], str],
    now: Optional[datetime] = None
) -> Optional[int]:
    """
    Record one hit on the tracking link.

    A repeat visit from the same IP on the same day increments the existing
    record; otherwise a new record is inserted with the resolved country.
    Errors are logged and swallowed.

    Returns:
        Id of the inserted or updated record, None on failure
    """
    ip_address = normalize_ip(raw_ip) or "unknown"
    user_agent = clean_header(user_agent, "unknown")
    referer = clean_header(referer, "direct")

    country = UNKNOWN_COUNTRY
    if is_ip_address(ip_address):
        try:
            country = resolve_country(ip_address)
        except Exception:
            logger.exception("Country lookup failed for %s", ip_address)
    else:
        logger.debug("Skipping country lookup for non-IP address %r", ip_address)

    try:
        with _write_lock:
            db = session_factory()
            try:
                existing = find_todays_click(db, ip_address, now=now)
                if existing:
                    click_id = existing.id
                    increment_click_count(db, click_id)
                    db.commit()
                    logger.info("Click updated for IP %s (id=%s)", ip_address, click_id)
                else:
                    click_id = insert_click(db, ip_address, user_agent, referer, country, now=now)
                    db.commit()
                    logger.info("New click stored id=%s ip=%s country=%s", click_id, ip_address, country)
                return click_id
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()
    except Exception:
        logger.exception("Failed to record click from %s", ip_address)
        return None
