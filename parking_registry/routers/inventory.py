# parking_registry/routers/inventory.py
"""Admin: physical inventory sessions: start, check plates, end with report."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from parking_registry.database import get_db
from parking_registry.schemas.inventory import InventoryCheckRequest, InventoryStartRequest
from parking_registry.services import inventory_service, registry_service
from parking_registry.services.auth_service import require_admin

router = APIRouter(prefix="/inventory")


@router.post("/start", summary="Open an inventory session")
def start(body: InventoryStartRequest, admin: dict = Depends(require_admin),
          db: Session = Depends(get_db)):
    session = inventory_service.start_session(db, body.name, body.description, admin["sub"])
    return {"message": "Bắt đầu phiên kiểm kê thành công", "sessionId": session.id}


@router.post("/check", summary="Record a plate seen in the lot")
def check(body: InventoryCheckRequest, admin: dict = Depends(require_admin),
          db: Session = Depends(get_db)):
    record = inventory_service.check_plate(
        db, body.session_id, body.plate, body.status, body.notes, admin["sub"]
    )
    return {"message": "Ghi nhận kiểm kê thành công", "record": inventory_service.record_to_dict(record)}


@router.post("/end/{session_id}", summary="Close the session and build the discrepancy report")
def end(session_id: int, admin: dict = Depends(require_admin), db: Session = Depends(get_db)):
    report = inventory_service.end_session(db, session_id, admin["sub"])
    return {"message": "Kết thúc phiên kiểm kê thành công", "report": report}


@router.get("/sessions", summary="Latest inventory sessions", dependencies=[Depends(require_admin)])
def sessions(limit: int = Query(50, ge=1, le=500), db: Session = Depends(get_db)):
    return {"sessions": [inventory_service.session_to_dict(s)
                         for s in inventory_service.list_sessions(db, limit)]}


@router.get("/session/{session_id}", summary="One session with its records",
            dependencies=[Depends(require_admin)])
def session_detail(session_id: int, db: Session = Depends(get_db)):
    return inventory_service.get_session(db, session_id)


@router.get("/search-license-plate/{last_digits}", summary="Plate-suffix lookup while counting",
            dependencies=[Depends(require_admin)])
def search_license_plate(last_digits: str, db: Session = Depends(get_db)):
    return {"results": registry_service.search_by_plate_suffix(db, last_digits)}
