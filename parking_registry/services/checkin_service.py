# parking_registry/services/checkin_service.py
"""
Deposit ("Gửi") / retrieve ("Lấy") of a registered vehicle.

How it works:
  - Resolve the person by national ID and the vehicle by plate
  - deposit → parked, retrieve → retrieved; the last-transaction snapshot is stamped
  - A Transaction row is appended to the log
  - Both writes go out in one commit; if it fails neither is kept
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from parking_registry.errors import NotFoundError, StoreError, ValidationError
from parking_registry.models.transaction import Transaction, ACTION_ALIASES, DEPOSIT
from parking_registry.models.vehicle import PARKED, RETRIEVED
from parking_registry.services.registry_service import require_person
from parking_registry.utils.plates import classify, normalize
from parking_registry.utils.logger import get_logger
from parking_registry.utils.timestamps import as_utc, utcnow

logger = get_logger(__name__)

NOT_REGISTERED = "Chưa đăng ký"


def record_action(db: Session, national_id: str, plate: str, action: str) -> dict:
    if action not in ACTION_ALIASES:
        raise ValidationError(f"Hành động không hợp lệ: {action}")
    action = ACTION_ALIASES[action]

    plate = normalize(plate)
    if not plate:
        raise ValidationError("Biển số xe không hợp lệ.")

    person = require_person(db, national_id, NOT_REGISTERED)
    vehicle = next((v for v in person.vehicles if v.plate == plate), None)
    if vehicle is None:
        raise NotFoundError("Biển số xe không được đăng ký cho người dùng này.")

    # Re-depositing a parked vehicle is accepted; the log records it as-is
    new_status = PARKED if action == DEPOSIT else RETRIEVED
    timestamp = utcnow()

    vehicle.status = new_status
    vehicle.vehicle_class = vehicle.vehicle_class or classify(plate)
    vehicle.last_action = action
    vehicle.last_transaction_at = timestamp
    db.add(Transaction(
        national_id=person.national_id,
        plate=plate,
        action=action,
        status=new_status,
        timestamp=timestamp,
    ))

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Action] {action} {plate} for {national_id} failed: {e}", exc_info=True)
        raise StoreError("Lỗi cơ sở dữ liệu")

    logger.info(f"[Action] {action} | Plate={plate} | CCCD={national_id} → {new_status}")
    return {
        "plate": plate,
        "status": new_status,
        "timestamp": as_utc(timestamp),
        "vehicleClass": vehicle.vehicle_class,
        "color": vehicle.color or "",
        "brand": vehicle.brand or "",
    }
