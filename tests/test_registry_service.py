"""Unit tests for the person/vehicle registry service."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from parking_registry.errors import ConflictError, NotFoundError, ValidationError
from parking_registry.models.person import Person
from parking_registry.models.vehicle import Vehicle, PARKED, RETRIEVED
from parking_registry.schemas.person import PersonUpdate, VehicleIn
from parking_registry.services import checkin_service, registry_service
from parking_registry.utils.plates import ELECTRIC_MOTORBIKE, MOTORBIKE
from factories import make_person


class TestCreatePerson:
    def test_registers_person_with_normalized_plates(self, db):
        person = make_person(db, plates=("29a-123.45", "29MĐ1-12345"))
        assert person.national_id == "123456789"
        assert person.date_of_birth == "01/01/1990"
        assert person.gender == "male"
        assert [v.plate for v in person.vehicles] == ["29A12345", "29MĐ112345"]
        assert [v.vehicle_class for v in person.vehicles] == [MOTORBIKE, ELECTRIC_MOTORBIKE]
        assert all(v.status == RETRIEVED for v in person.vehicles)

    def test_plate_owned_by_another_person_rejected(self, db):
        make_person(db, national_id="111111111", plates=("29A12345",))
        with pytest.raises(ValidationError) as exc:
            make_person(db, national_id="222222222", plates=("29A-123.45",))
        assert "111111111" in exc.value.message
        assert db.query(Person).count() == 1

    def test_invalid_plate_rejected(self, db):
        with pytest.raises(ValidationError):
            make_person(db, plates=("ABC-1234",))

    def test_needs_at_least_one_plate(self, db):
        with pytest.raises(ValidationError):
            make_person(db, plates=())

    def test_same_plate_twice_in_one_request(self, db):
        with pytest.raises(ValidationError):
            make_person(db, plates=("29A12345", "29A-12345"))

    def test_duplicate_national_id(self, db):
        make_person(db, plates=("29A12345",))
        with pytest.raises(ValidationError):
            make_person(db, plates=("30B12345",))


class TestUpdatePerson:
    def test_keeps_status_and_snapshot_of_existing_plate(self, db):
        make_person(db, plates=("29A12345",))
        checkin_service.record_action(db, "123456789", "29A12345", "deposit")

        payload = PersonUpdate(
            full_name="Nguyen Van B",
            vehicles=[VehicleIn(plate="29A-12345"), VehicleIn(plate="30B-67890", color="Đỏ")],
        )
        person = registry_service.update_person(db, "123456789", payload)

        assert person.full_name == "Nguyen Van B"
        assert person.hometown == "Hà Nội"
        kept, added = person.vehicles
        assert kept.plate == "29A12345"
        assert kept.status == PARKED
        assert kept.last_action == "deposit"
        assert kept.color == "Đen"
        assert added.status == RETRIEVED
        assert added.color == "Đỏ"

    def test_admin_status_override(self, db):
        make_person(db, plates=("29A12345",))
        payload = PersonUpdate(vehicles=[VehicleIn(plate="29A12345", status="Đang gửi")])
        person = registry_service.update_person(db, "123456789", payload)
        assert person.vehicles[0].status == PARKED

    def test_removed_plates_are_deleted(self, db):
        make_person(db, plates=("29A12345", "30B12345"))
        registry_service.update_person(db, "123456789", PersonUpdate(vehicles=[VehicleIn(plate="30B12345")]))
        assert [v.plate for v in db.query(Vehicle).all()] == ["30B12345"]

    def test_plate_of_other_person_rejected(self, db):
        make_person(db, national_id="111111111", plates=("29A12345",))
        make_person(db, national_id="222222222", plates=("30B12345",))
        payload = PersonUpdate(vehicles=[VehicleIn(plate="29A12345")])
        with pytest.raises(ValidationError):
            registry_service.update_person(db, "222222222", payload)

    def test_unknown_person(self, db):
        with pytest.raises(NotFoundError):
            registry_service.update_person(db, "999", PersonUpdate(vehicles=[VehicleIn(plate="29A12345")]))


class TestDeletePerson:
    def test_blocked_while_parked(self, db):
        make_person(db, plates=("29A12345",))
        checkin_service.record_action(db, "123456789", "29A12345", "deposit")
        with pytest.raises(ConflictError):
            registry_service.delete_person(db, "123456789")
        assert registry_service.get_person(db, "123456789") is not None

    def test_removes_person_and_vehicles(self, db):
        make_person(db, plates=("29A12345",))
        registry_service.delete_person(db, "123456789")
        assert registry_service.get_person(db, "123456789") is None
        assert db.query(Vehicle).count() == 0

    def test_unknown_person(self, db):
        with pytest.raises(NotFoundError):
            registry_service.delete_person(db, "999")


class TestLookups:
    def test_list_vehicles_filters(self, db):
        make_person(db, national_id="111111111", plates=("29A12345", "29A54321"))
        make_person(db, national_id="222222222", plates=("30B12345",))
        checkin_service.record_action(db, "111111111", "29A54321", "deposit")

        assert len(registry_service.list_vehicles(db)) == 3
        parked = registry_service.list_vehicles(db, status="parked")
        assert [v["plate"] for v in parked] == ["29A54321"]
        assert len(registry_service.list_vehicles(db, status="Đã lấy")) == 2
        assert len(registry_service.list_vehicles(db, national_id="222222222")) == 1
        with pytest.raises(ValidationError):
            registry_service.list_vehicles(db, status="lost")

    def test_find_person_by_id_or_name(self, db):
        make_person(db, national_id="111111111", full_name="Nguyen Van A")
        assert registry_service.find_person(db, "111111111").national_id == "111111111"
        assert registry_service.find_person(db, "van a").national_id == "111111111"
        with pytest.raises(NotFoundError):
            registry_service.find_person(db, "Le Thi C")
        with pytest.raises(ValidationError):
            registry_service.find_person(db, "")

    def test_find_person_by_accented_name_ignores_case(self, db):
        make_person(db, national_id="333333333", plates=("29A33333",), full_name="NGUYỄN THỊ ĐÀO")
        assert registry_service.find_person(db, "nguyễn thị").national_id == "333333333"
        assert registry_service.find_person(db, "Đào").national_id == "333333333"

    def test_search_by_plate_suffix(self, db):
        make_person(db, national_id="111111111", plates=("29A12345",))
        make_person(db, national_id="222222222", plates=("30B92345",))
        results = registry_service.search_by_plate_suffix(db, "2345")
        assert [r["plate"] for r in results] == ["29A12345", "30B92345"]
        assert results[0]["ownerNationalId"] == "111111111"
        assert registry_service.search_by_plate_suffix(db, "12345")[0]["plate"] == "29A12345"

    @pytest.mark.parametrize("digits", ["", "123", "123456", None])
    def test_search_by_plate_suffix_length(self, db, digits):
        with pytest.raises(ValidationError):
            registry_service.search_by_plate_suffix(db, digits)
