# parking_registry/routers/users.py
"""Admin: person/vehicle registry management."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from parking_registry.database import get_db
from parking_registry.errors import ValidationError
from parking_registry.schemas.person import PersonCreate, PersonUpdate, person_to_dict
from parking_registry.services import registry_service
from parking_registry.services.auth_service import require_admin

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/add-user", summary="Register a person with their vehicles")
def add_user(body: PersonCreate, db: Session = Depends(get_db)):
    person = registry_service.create_person(db, body)
    return {"success": True, "person": person_to_dict(person)}


@router.put("/update-user/{national_id}", summary="Update a person and replace their vehicle list")
def update_user(national_id: str, body: PersonUpdate, db: Session = Depends(get_db)):
    """
    Vehicles are replaced by the submitted list. For a plate that was already
    registered, omitted color/brand/status/lastTransaction keep their stored values.
    """
    person = registry_service.update_person(db, national_id, body)
    return {"success": True, "person": person_to_dict(person)}


@router.get("/users", summary="List registered persons")
def list_users(db: Session = Depends(get_db)):
    return {"users": [person_to_dict(p) for p in registry_service.list_persons(db)]}


@router.delete("/users/{national_id}", summary="Delete a person (blocked while a vehicle is parked)")
def delete_user(national_id: str, db: Session = Depends(get_db)):
    registry_service.delete_person(db, national_id)
    return {"success": True, "message": "Xóa người dùng thành công"}


@router.get("/vehicles", summary="List vehicles, filterable by status and owner")
def list_vehicles(status: str = None, nationalId: str = None, db: Session = Depends(get_db)):
    vehicles = registry_service.list_vehicles(db, status=status, national_id=nationalId)
    return {"vehicles": vehicles, "total": len(vehicles)}


@router.get("/search-by-id", summary="All vehicles of one national ID")
def search_by_id(nationalId: str = None, db: Session = Depends(get_db)):
    if not nationalId:
        raise ValidationError("Vui lòng cung cấp số CCCD.")
    person = registry_service.require_person(db, nationalId, "Không tìm thấy người dùng với CCCD này.")
    vehicles = [registry_service.vehicle_row(person, v) for v in person.vehicles]
    return {"vehicles": vehicles, "total": len(vehicles)}


@router.get("/search-license-plate/{last_digits}", summary="Find vehicles by the last 4-5 plate characters")
def search_license_plate(last_digits: str, db: Session = Depends(get_db)):
    return {"results": registry_service.search_by_plate_suffix(db, last_digits)}
