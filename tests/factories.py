"""Test data builders."""

from parking_registry.schemas.person import PersonCreate, VehicleIn
from parking_registry.services import registry_service


def make_person(db, national_id="123456789", plates=("29A12345",), full_name="Nguyen Van A"):
    payload = PersonCreate(
        national_id=national_id,
        old_id="987654",
        full_name=full_name,
        date_of_birth="01-01-1990",
        gender="Nam",
        hometown="Hà Nội",
        id_issue_date="01-01-2020",
        vehicles=[VehicleIn(plate=p, color="Đen", brand="Honda") for p in plates],
    )
    return registry_service.create_person(db, payload)
