# parking_registry/services/statistics_service.py
"""
Deposit/retrieve statistics.

Range: explicit startDate/endDate (inclusive local calendar days) or a period
keyword (day | week | month | year) anchored at now, default month.
All day boundaries and bucket keys use one configured timezone.

Every bucket has the same shape:
    {"period": "2025-07-01", "count": 3, "actions": {"deposit": 2, "retrieve": 1}}
"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy import func
from sqlalchemy.orm import Session

from parking_registry.errors import ValidationError
from parking_registry.models.person import Person
from parking_registry.models.transaction import Transaction, ACTIONS, DEPOSIT, RETRIEVE
from parking_registry.models.vehicle import Vehicle, PARKED
from parking_registry.utils.logger import get_logger
from parking_registry.utils.timestamps import to_utc_naive

logger = get_logger(__name__)

PERIODS = ("day", "week", "month", "year")
DEFAULT_PERIOD = "month"


def _parse_day(value: str, field: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Ngày không hợp lệ ({field}): {value}")


def _day_start(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _day_end(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)


def resolve_range(tz: ZoneInfo, start_date: str = None, end_date: str = None,
                  period: str = None, now: datetime = None) -> tuple[datetime, datetime]:
    """Return the (start, end) instants, timezone-aware in tz."""
    if start_date or end_date:
        if not (start_date and end_date):
            raise ValidationError("Cần cung cấp cả startDate và endDate")
        start_day = _parse_day(start_date, "startDate")
        end_day = _parse_day(end_date, "endDate")
        if start_day > end_day:
            raise ValidationError("startDate phải trước hoặc bằng endDate")
        return _day_start(start_day, tz), _day_end(end_day, tz)

    period = period or DEFAULT_PERIOD
    if period not in PERIODS:
        raise ValidationError(f"Khoảng thời gian không hợp lệ: {period}")

    today = (now or datetime.now(timezone.utc)).astimezone(tz).date()
    if period == "day":
        first, last = today, today
    elif period == "week":
        first = today - timedelta(days=today.weekday())   # ISO week starts Monday
        last = first + timedelta(days=6)
    elif period == "month":
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        last = next_month - timedelta(days=1)
    else:
        first, last = date(today.year, 1, 1), date(today.year, 12, 31)
    return _day_start(first, tz), _day_end(last, tz)


def _to_local(stored: datetime, tz: ZoneInfo) -> datetime:
    return stored.replace(tzinfo=timezone.utc).astimezone(tz)


def _day_key(local: datetime) -> str:
    return local.strftime("%Y-%m-%d")


def _week_key(local: datetime) -> str:
    year, week, _ = local.isocalendar()
    return f"{year}-W{week:02d}"


def _month_key(local: datetime) -> str:
    return local.strftime("%Y-%m")


def bucket_transactions(rows, tz: ZoneInfo) -> dict:
    """Group (action, timestamp) pairs into daily/weekly/monthly buckets, sorted by key."""
    grouped = {name: defaultdict(lambda: dict.fromkeys(ACTIONS, 0))
               for name in ("daily", "weekly", "monthly")}

    for action, timestamp in rows:
        local = _to_local(timestamp, tz)
        grouped["daily"][_day_key(local)][action] += 1
        grouped["weekly"][_week_key(local)][action] += 1
        grouped["monthly"][_month_key(local)][action] += 1

    return {
        name: [
            {"period": key, "count": sum(actions.values()), "actions": actions}
            for key, actions in sorted(buckets.items())
        ]
        for name, buckets in grouped.items()
    }


def count_parked(db: Session) -> int:
    """Live number of vehicles currently in the lot (from the registry, not the log)."""
    return db.query(func.count(Vehicle.id)).filter(Vehicle.status == PARKED).scalar() or 0


def compute_statistics(db: Session, tz: ZoneInfo, start_date: str = None, end_date: str = None,
                       period: Optional[str] = None, now: datetime = None) -> dict:
    start, end = resolve_range(tz, start_date, end_date, period, now)

    rows = (
        db.query(Transaction.action, Transaction.timestamp)
        .filter(
            Transaction.timestamp >= to_utc_naive(start),
            Transaction.timestamp <= to_utc_naive(end),
        )
        .order_by(Transaction.timestamp)
        .all()
    )
    buckets = bucket_transactions(rows, tz)
    total_in = sum(1 for action, _ in rows if action == DEPOSIT)
    total_out = sum(1 for action, _ in rows if action == RETRIEVE)
    total_parked = count_parked(db)

    logger.debug(
        f"[Stats] {start.isoformat()} → {end.isoformat()} | in={total_in} out={total_out} "
        f"parked={total_parked}"
    )
    return {
        **buckets,
        "totalParked": total_parked,
        "totalIn": total_in,
        "totalOut": total_out,
        "period": "custom" if start_date else (period or DEFAULT_PERIOD),
        "dateRange": {"start": start.isoformat(), "end": end.isoformat()},
    }


def dashboard_stats(db: Session, tz: ZoneInfo, now: datetime = None) -> dict:
    """Headline numbers for the admin dashboard."""
    today_start, _ = resolve_range(tz, period="day", now=now)
    month_start, _ = resolve_range(tz, period="month", now=now)

    def transactions_since(moment: datetime) -> int:
        return db.query(func.count(Transaction.id)).filter(
            Transaction.timestamp >= to_utc_naive(moment)
        ).scalar() or 0

    return {
        "totalUsers": db.query(func.count(Person.id)).scalar() or 0,
        "totalVehicles": db.query(func.count(Vehicle.id)).scalar() or 0,
        "parkedVehicles": count_parked(db),
        "todayTransactions": transactions_since(today_start),
        "monthlyTransactions": transactions_since(month_start),
    }
