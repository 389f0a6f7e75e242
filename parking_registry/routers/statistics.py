# parking_registry/routers/statistics.py
"""Admin: deposit/retrieve statistics and dashboard counters."""

from zoneinfo import ZoneInfo
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_registry.config import Settings
from parking_registry.database import get_db
from parking_registry.services import statistics_service
from parking_registry.services.auth_service import get_settings, require_admin

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/statistics", summary="Daily / weekly / monthly deposit and retrieve counts")
def get_statistics(startDate: str = None, endDate: str = None, period: str = None,
                   db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    """
    Explicit startDate/endDate (YYYY-MM-DD, inclusive) take precedence over period
    (day | week | month | year, default month). totalParked is always the live count.
    """
    return statistics_service.compute_statistics(
        db, ZoneInfo(settings.TIMEZONE), start_date=startDate, end_date=endDate, period=period,
    )


@router.get("/dashboard-stats", summary="Headline counters for the dashboard")
def get_dashboard_stats(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return statistics_service.dashboard_stats(db, ZoneInfo(settings.TIMEZONE))
