# parking_registry/services/inventory_service.py
"""
Physical inventory reconciliation.

Session lifecycle: active → completed (terminal). Each scan upserts one
record per (session, plate). Ending a session compares the plates the
registry says are parked *at end time* with the plates recorded in the
session; plates scanned but not parked are not counted as discrepancies.
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from parking_registry.errors import InvalidStateError, NotFoundError, StoreError, ValidationError
from parking_registry.models.inventory import (
    InventoryRecord, InventorySession, SESSION_ACTIVE, SESSION_COMPLETED,
)
from parking_registry.models.vehicle import Vehicle, PARKED
from parking_registry.schemas.inventory import InventoryRecordOut, InventorySessionOut
from parking_registry.utils.plates import normalize
from parking_registry.utils.logger import get_logger
from parking_registry.utils.timestamps import as_utc, utcnow

logger = get_logger(__name__)

INVALID_SESSION = "Phiên kiểm kê không hợp lệ hoặc đã kết thúc"


def _commit(db: Session, what: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Inventory] {what} failed: {e}", exc_info=True)
        raise StoreError("Lỗi cơ sở dữ liệu")


def session_to_dict(session: InventorySession) -> dict:
    return InventorySessionOut.model_validate(session).model_dump(by_alias=True)


def record_to_dict(record: InventoryRecord) -> dict:
    return InventoryRecordOut.model_validate(record).model_dump(by_alias=True)


def require_session(db: Session, session_id: int) -> InventorySession:
    session = db.get(InventorySession, session_id)
    if not session:
        raise NotFoundError("Không tìm thấy phiên kiểm kê")
    return session


def start_session(db: Session, name: str, description: str, actor: str) -> InventorySession:
    now = utcnow()
    session = InventorySession(
        name=(name or "").strip() or f"Kiểm kê {now.strftime('%d/%m/%Y')}",
        description=description or "",
        started_by=actor,
        started_at=now,
        status=SESSION_ACTIVE,
    )
    db.add(session)
    _commit(db, "start session")
    db.refresh(session)
    logger.info(f"[Inventory] Session {session.id} '{session.name}' started by {actor}")
    return session


def _find_record(db: Session, session_id: int, plate: str):
    return (
        db.query(InventoryRecord)
        .filter(InventoryRecord.session_id == session_id, InventoryRecord.plate == plate)
        .first()
    )


def _stamp(record: InventoryRecord, status: str, notes: str, actor: str):
    record.status = status or "checked"
    record.notes = notes or ""
    record.checked_by = actor
    record.checked_at = utcnow()


def check_plate(db: Session, session_id: int, plate: str, status: str, notes: str,
                actor: str) -> InventoryRecord:
    plate = normalize(plate)
    if not plate:
        raise ValidationError("Thiếu thông tin session hoặc biển số xe")

    session = require_session(db, session_id)
    if session.status != SESSION_ACTIVE:
        raise InvalidStateError(INVALID_SESSION)

    record = _find_record(db, session_id, plate)
    if record is None:
        record = InventoryRecord(session_id=session_id, plate=plate)
        _stamp(record, status, notes, actor)
        db.add(record)
        try:
            db.commit()
        except IntegrityError:
            # Another scan inserted the same plate first: overwrite it instead
            db.rollback()
            logger.info(f"[Inventory] Session {session_id} | Plate={plate} inserted concurrently, updating")
            record = _find_record(db, session_id, plate)
            _stamp(record, status, notes, actor)
            _commit(db, f"check {plate} in session {session_id}")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"[Inventory] check {plate} in session {session_id} failed: {e}", exc_info=True)
            raise StoreError("Lỗi cơ sở dữ liệu")
    else:
        _stamp(record, status, notes, actor)
        _commit(db, f"check {plate} in session {session_id}")

    db.refresh(record)
    logger.info(f"[Inventory] Session {session_id} | Plate={plate} | {record.status} by {actor}")
    return record


def parked_plates(db: Session) -> list[str]:
    rows = db.query(Vehicle.plate).filter(Vehicle.status == PARKED).order_by(Vehicle.plate).all()
    return [plate for (plate,) in rows]


def end_session(db: Session, session_id: int, actor: str) -> dict:
    session = require_session(db, session_id)
    if session.status != SESSION_ACTIVE:
        raise InvalidStateError(INVALID_SESSION)

    session.status = SESSION_COMPLETED
    session.ended_at = utcnow()
    session.ended_by = actor
    _commit(db, f"end session {session_id}")

    # Snapshot taken now, not at session start
    parked = parked_plates(db)
    records = (
        db.query(InventoryRecord)
        .filter(InventoryRecord.session_id == session_id)
        .order_by(InventoryRecord.checked_at)
        .all()
    )
    checked = {r.plate for r in records}
    unchecked = [plate for plate in parked if plate not in checked]

    logger.info(
        f"[Inventory] Session {session_id} ended by {actor} | parked={len(parked)} "
        f"checked={len(checked)} unchecked={len(unchecked)}"
    )
    if unchecked:
        logger.warning(f"[Inventory] Session {session_id} unchecked plates: {unchecked}")

    return {
        "sessionId": session.id,
        "sessionName": session.name,
        "totalVehicles": len(parked),
        "checkedVehicles": len(checked),
        "uncheckedVehicles": len(unchecked),
        "uncheckedList": unchecked,
        "checkedRecords": [record_to_dict(r) for r in records],
        "startedAt": as_utc(session.started_at),
        "endedAt": as_utc(session.ended_at),
    }


def list_sessions(db: Session, limit: int = 50) -> list[InventorySession]:
    return (
        db.query(InventorySession)
        .order_by(InventorySession.started_at.desc(), InventorySession.id.desc())
        .limit(limit)
        .all()
    )


def get_session(db: Session, session_id: int) -> dict:
    session = require_session(db, session_id)
    return {
        "session": session_to_dict(session),
        "records": [record_to_dict(r) for r in session.records],
    }
