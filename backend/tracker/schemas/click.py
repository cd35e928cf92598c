from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel


class ClickResponse(BaseModel):
    """Schema for a stored click record"""
    id: int
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    referer: Optional[str] = None
    country: Optional[str] = None
    click_count: int
    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdvancedStats(BaseModel):
    """Aggregate statistics over all click records"""
    total_clicks: int
    unique_ips: int
    repeated_clicks: int  # sum(click_count) - number of records
    countries: List[str]
    unique_countries: int
