import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.click import AdvancedStats, ClickResponse
from ..services.clicks import get_advanced_stats, list_recent_clicks

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_RECENT_CLICKS = 100


def _server_error() -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.get("/clicks", response_model=List[ClickResponse])
async def get_recent_clicks(
    limit: int = Query(MAX_RECENT_CLICKS, ge=1, le=MAX_RECENT_CLICKS),
    db: Session = Depends(get_db)
):
    """
    Get the most recent click records, newest first.
    """
    try:
        return list_recent_clicks(db, limit=limit)
    except SQLAlchemyError:
        logger.exception("Error reading clicks")
        return _server_error()


@router.get("/advanced-stats", response_model=AdvancedStats)
@router.get("/stats", response_model=AdvancedStats)
async def get_stats(db: Session = Depends(get_db)):
    """
    Get aggregate statistics over all click records.
    """
    try:
        return get_advanced_stats(db)
    except SQLAlchemyError:
        logger.exception("Error computing advanced stats")
        return _server_error()
