from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Index, func
from ..database import Base

UNKNOWN_COUNTRY = "unknown"
LOCAL_COUNTRY = "local"


def utcnow() -> datetime:
    """Naive UTC now, matching SQLite's CURRENT_TIMESTAMP"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Click(Base):
    """Visit record, one row per IP per day"""
    __tablename__ = "clicks"

    id = Column(Integer, primary_key=True, index=True)
    ip_address = Column(String(45), nullable=True)  # IPv4 or IPv6
    user_agent = Column(String(512), nullable=True)
    referer = Column(String(512), nullable=True)
    country = Column(String(100), default=UNKNOWN_COUNTRY, server_default=UNKNOWN_COUNTRY)
    click_count = Column(Integer, default=1, server_default="1", nullable=False)
    timestamp = Column(DateTime, default=utcnow, server_default=func.now())

    # Lookup of today's record for an IP
    __table_args__ = (
        Index('idx_clicks_ip_time', 'ip_address', 'timestamp'),
    )

    def __repr__(self):
        return f"<Click {self.id} from {self.ip_address} x{self.click_count}>"
