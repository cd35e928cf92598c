from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models import Click
from ..models.click import utcnow


def get_day_bounds(now: Optional[datetime] = None):
    """Start and end of the UTC calendar day containing now"""
    now = now or utcnow()
    start = datetime(now.year, now.month, now.day)
    return start, start + timedelta(days=1)


def find_todays_click(db: Session, ip_address: str, now: Optional[datetime] = None) -> Optional[Click]:
    """Get the record for this IP created on the current day, if any"""
    day_start, day_end = get_day_bounds(now)

    return db.query(Click).filter(
        Click.ip_address == ip_address,
        Click.timestamp >= day_start,
        Click.timestamp < day_end
    ).order_by(Click.id).first()


def increment_click_count(db: Session, click_id: int) -> None:
    """Increment click_count in SQL; timestamp is left untouched"""
    db.query(Click).filter(Click.id == click_id).update(
        {Click.click_count: Click.click_count + 1},
        synchronize_session=False
    )


def insert_click(
    db: Session,
    ip_address: str,
    user_agent: str,
    referer: str,
    country: str,
    now: Optional[datetime] = None
) -> int:
    """Create a new record with click_count = 1 and return its id"""
    click = Click(
        ip_address=ip_address,
        user_agent=user_agent,
        referer=referer,
        country=country,
        click_count=1,
        timestamp=now or utcnow()
    )
    db.add(click)
    db.flush()
    return click.id


def list_recent_clicks(db: Session, limit: int = 100) -> List[Click]:
    """Most recent records first"""
    return db.query(Click).order_by(
        Click.timestamp.desc(),
        Click.id.desc()
    ).limit(limit).all()


def get_advanced_stats(db: Session) -> dict:
    """Aggregate statistics over the whole table"""
    totals = db.query(
        func.count(Click.id).label('total_clicks'),
        func.count(func.distinct(Click.ip_address)).label('unique_ips'),
        func.coalesce(func.sum(Click.click_count), 0).label('click_sum')
    ).one()

    countries = [
        row.country for row in db.query(Click.country).filter(
            Click.country.isnot(None)
        ).distinct().order_by(Click.country).all()
    ]

    return {
        "total_clicks": totals.total_clicks,
        "unique_ips": totals.unique_ips,
        "repeated_clicks": int(totals.click_sum) - totals.total_clicks,
        "countries": countries,
        "unique_countries": len(countries)
    }
