# parking_registry/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + live parked count.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from parking_registry.database import get_db
from parking_registry.services.statistics_service import count_parked
from datetime import datetime, timezone

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "backend": "ok",
        "database": "unknown",
        "parked": None,
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
        result["parked"] = count_parked(db)
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
