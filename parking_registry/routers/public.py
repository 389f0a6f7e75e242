# parking_registry/routers/public.py
"""
Staff-facing endpoints (no admin token):
POST /scan  : decode a CCCD QR payload and look up the person
POST /action: deposit / retrieve a vehicle
GET  /search, /search-by-plate-suffix: lookup by ID, name or plate suffix
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_registry.database import get_db
from parking_registry.errors import NotFoundError, ValidationError
from parking_registry.schemas.action import ActionRequest, ScanRequest
from parking_registry.schemas.person import person_to_dict
from parking_registry.services import checkin_service, registry_service
from parking_registry.utils.qr_parser import decode_qr
from parking_registry.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("/scan", summary="Scan a CCCD QR code")
def scan(body: ScanRequest, db: Session = Depends(get_db)):
    if not body.qr_string.strip():
        raise ValidationError("Thiếu dữ liệu QR.")
    payload = decode_qr(body.qr_string)
    logger.info(f"[Scan] QR for CCCD {payload.national_id}")

    person = registry_service.get_person(db, payload.national_id)
    if not person:
        raise NotFoundError(checkin_service.NOT_REGISTERED)
    return {"person": person_to_dict(person), "qr": payload.to_dict()}


@router.post("/action", summary="Deposit (Gửi) or retrieve (Lấy) a vehicle")
def action(body: ActionRequest, db: Session = Depends(get_db)):
    result = checkin_service.record_action(db, body.national_id, body.plate, body.action)
    return {"success": True, **result}


@router.get("/search", summary="Find a person by national ID or name")
def search(query: str = None, db: Session = Depends(get_db)):
    person = registry_service.find_person(db, query)
    return {"person": person_to_dict(person)}


@router.get("/search-by-plate-suffix", summary="Find vehicles by the last 4-5 plate characters")
def search_by_plate_suffix(digits: str = None, db: Session = Depends(get_db)):
    return {"results": registry_service.search_by_plate_suffix(db, digits)}
