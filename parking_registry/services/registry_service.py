# parking_registry/services/registry_service.py
"""
Person + vehicle registry.
Registration and updates check plate format and cross-person plate
uniqueness explicitly; the unique index on vehicles.plate backs this up.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from parking_registry.errors import ConflictError, NotFoundError, StoreError, ValidationError
from parking_registry.models.person import Person
from parking_registry.models.vehicle import Vehicle, PARKED, RETRIEVED, STATUS_ALIASES
from parking_registry.schemas.person import PersonCreate, PersonUpdate, VehicleIn
from parking_registry.utils.plates import classify, is_valid, normalize
from parking_registry.utils.logger import get_logger
from parking_registry.utils.timestamps import as_utc, utcnow

logger = get_logger(__name__)

SUFFIX_MIN, SUFFIX_MAX = 4, 5


def get_person(db: Session, national_id: str) -> Optional[Person]:
    return db.query(Person).filter(Person.national_id == national_id).first()


def require_person(db: Session, national_id: str, message: str = "Không tìm thấy người dùng") -> Person:
    person = get_person(db, national_id)
    if not person:
        raise NotFoundError(message)
    return person


def check_plates(db: Session, vehicles: list[VehicleIn], owner_national_id: str) -> list[str]:
    """
    Validate the submitted plates for one owner. Returns them normalized.
    Raises ValidationError on empty list, malformed plate, repeated plate,
    or a plate already registered to another person.
    """
    if not vehicles or all(not v.plate for v in vehicles):
        raise ValidationError("Cần ít nhất một biển số xe hợp lệ")

    plates = []
    for vehicle in vehicles:
        if not is_valid(vehicle.plate):
            raise ValidationError(f"Biển số xe không hợp lệ: {vehicle.plate}")
        plate = normalize(vehicle.plate)
        if plate in plates:
            raise ValidationError(f"Biển số xe {plate} bị trùng lặp")

        owner = (
            db.query(Person)
            .join(Vehicle)
            .filter(Vehicle.plate == plate, Person.national_id != owner_national_id)
            .first()
        )
        if owner:
            raise ValidationError(f"Biển số xe {plate} đã được đăng ký cho CCCD {owner.national_id}")
        plates.append(plate)
    return plates


def _build_vehicle(data: VehicleIn, plate: str, position: int, existing: Optional[Vehicle] = None) -> Vehicle:
    """Submitted values win; otherwise keep what the same plate already had."""
    color = (data.color or "").strip() or (existing.color if existing else "")
    brand = (data.brand or "").strip() or (existing.brand if existing else "")
    status = data.status or (existing.status if existing else RETRIEVED)

    if data.last_transaction:
        last_action = data.last_transaction.action
        last_at = data.last_transaction.timestamp
    elif existing:
        last_action = existing.last_action
        last_at = existing.last_transaction_at
    else:
        last_action, last_at = None, None

    return Vehicle(
        plate=plate,
        position=position,
        vehicle_class=data.vehicle_class or classify(plate),
        color=color,
        brand=brand,
        status=status,
        last_action=last_action,
        last_transaction_at=last_at,
    )


def _commit(db: Session, what: str):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"[Registry] {what} rejected by constraint: {e.orig}")
        raise ValidationError("Biển số xe hoặc CCCD đã tồn tại")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Registry] {what} failed: {e}", exc_info=True)
        raise StoreError("Lỗi cơ sở dữ liệu")


def create_person(db: Session, payload: PersonCreate) -> Person:
    plates = check_plates(db, payload.vehicles, payload.national_id)
    if get_person(db, payload.national_id):
        raise ValidationError(f"CCCD {payload.national_id} đã được đăng ký")

    person = Person(
        national_id=payload.national_id,
        old_id=payload.old_id or "",
        full_name=payload.full_name.strip(),
        date_of_birth=payload.date_of_birth,
        gender=payload.gender,
        hometown=payload.hometown.strip(),
        id_issue_date=payload.id_issue_date,
        created_at=utcnow(),
    )
    person.vehicles = [
        _build_vehicle(v, plate, i) for i, (v, plate) in enumerate(zip(payload.vehicles, plates))
    ]
    db.add(person)
    _commit(db, f"create {payload.national_id}")
    db.refresh(person)
    logger.info(f"[Registry] Registered {person.national_id} with plates {plates}")
    return person


def update_person(db: Session, national_id: str, payload: PersonUpdate) -> Person:
    plates = check_plates(db, payload.vehicles, national_id)
    person = require_person(db, national_id)

    for field in ("old_id", "full_name", "date_of_birth", "gender", "hometown", "id_issue_date"):
        value = getattr(payload, field)
        if value is not None:
            setattr(person, field, value)

    existing = {v.plate: v for v in person.vehicles}
    new_vehicles = [
        _build_vehicle(v, plate, i, existing.get(plate))
        for i, (v, plate) in enumerate(zip(payload.vehicles, plates))
    ]
    # Flush removals first so a kept plate can be re-inserted without tripping the unique index
    person.vehicles = []
    db.flush()
    person.vehicles = new_vehicles
    _commit(db, f"update {national_id}")
    db.refresh(person)
    logger.info(f"[Registry] Updated {national_id}, plates now {plates}")
    return person


def delete_person(db: Session, national_id: str):
    person = require_person(db, national_id)
    if any(v.status == PARKED for v in person.vehicles):
        raise ConflictError("Không thể xóa người dùng có xe đang gửi")
    db.delete(person)
    _commit(db, f"delete {national_id}")
    logger.info(f"[Registry] Deleted {national_id}")


def list_persons(db: Session) -> list[Person]:
    return db.query(Person).order_by(Person.created_at.desc(), Person.id.desc()).all()


def vehicle_row(person: Person, vehicle: Vehicle) -> dict:
    """Flattened vehicle + owner view used by the admin vehicle list."""
    return {
        "nationalId": person.national_id,
        "plate": vehicle.plate,
        "vehicleClass": vehicle.vehicle_class or classify(vehicle.plate),
        "color": vehicle.color or "",
        "brand": vehicle.brand or "",
        "status": vehicle.status,
        "timestamp": as_utc(vehicle.last_transaction_at),
        "fullName": person.full_name,
        "hometown": person.hometown,
        "dateOfBirth": person.date_of_birth,
        "idIssueDate": person.id_issue_date,
    }


def list_vehicles(db: Session, status: str = None, national_id: str = None) -> list[dict]:
    q = db.query(Vehicle).join(Person)
    if national_id:
        q = q.filter(Person.national_id == national_id)
    if status:
        if status not in STATUS_ALIASES:
            raise ValidationError(f"Trạng thái xe không hợp lệ: {status}")
        q = q.filter(Vehicle.status == STATUS_ALIASES[status])
    vehicles = q.order_by(Person.id, Vehicle.position).all()
    return [vehicle_row(v.owner, v) for v in vehicles]


def find_person(db: Session, query: str) -> Person:
    """All-digit query → national ID lookup; anything else → case-insensitive name match."""
    query = (query or "").strip()
    if not query:
        raise ValidationError("Vui lòng cung cấp thông tin tìm kiếm.")

    if query.isdigit():
        person = get_person(db, query)
    else:
        person = (
            db.query(Person)
            .filter(Person.full_name.icontains(query, autoescape=True))
            .order_by(Person.full_name)
            .first()
        )
    if not person:
        raise NotFoundError("Không tìm thấy người dùng phù hợp.")
    return person


def search_by_plate_suffix(db: Session, digits: str) -> list[dict]:
    digits = normalize(digits)
    if not (SUFFIX_MIN <= len(digits) <= SUFFIX_MAX):
        raise ValidationError("Vui lòng nhập 4-5 số cuối của biển số xe")

    vehicles = (
        db.query(Vehicle)
        .filter(Vehicle.plate.endswith(digits, autoescape=True))
        .order_by(Vehicle.plate)
        .all()
    )
    return [
        {
            "id": v.id,
            "plate": v.plate,
            "vehicleClass": v.vehicle_class or classify(v.plate),
            "color": v.color or "",
            "brand": v.brand or "",
            "status": v.status,
            "ownerName": v.owner.full_name,
            "ownerNationalId": v.owner.national_id,
        }
        for v in vehicles
    ]
