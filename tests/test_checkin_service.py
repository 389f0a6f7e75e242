"""Unit tests for the deposit/retrieve engine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError
from parking_registry.errors import NotFoundError, StoreError, ValidationError
from parking_registry.models.transaction import Transaction
from parking_registry.models.vehicle import Vehicle, PARKED, RETRIEVED
from parking_registry.services.checkin_service import record_action
from parking_registry.utils.timestamps import to_utc_naive
from factories import make_person


class TestRecordAction:
    def test_deposit_then_retrieve(self, db):
        make_person(db, plates=("29A12345",))

        first = record_action(db, "123456789", "29A-12345", "deposit")
        second = record_action(db, "123456789", "29A12345", "retrieve")

        assert first["status"] == PARKED
        assert second["status"] == RETRIEVED
        vehicle = db.query(Vehicle).filter(Vehicle.plate == "29A12345").one()
        assert vehicle.status == RETRIEVED
        assert vehicle.last_action == "retrieve"
        assert second["timestamp"].utcoffset().total_seconds() == 0
        assert vehicle.last_transaction_at == to_utc_naive(second["timestamp"])

        log = db.query(Transaction).order_by(Transaction.id).all()
        assert [t.action for t in log] == ["deposit", "retrieve"]
        assert [t.status for t in log] == [PARKED, RETRIEVED]
        assert [t.timestamp for t in log] == [to_utc_naive(first["timestamp"]), to_utc_naive(second["timestamp"])]
        assert log[0].timestamp <= log[1].timestamp

    def test_response_carries_vehicle_details(self, db):
        make_person(db, plates=("29MĐ1-12345",))
        result = record_action(db, "123456789", "29MĐ112345", "Gửi")
        assert result["vehicleClass"] == "electric-motorbike"
        assert result["color"] == "Đen"
        assert result["brand"] == "Honda"

    def test_redeposit_is_accepted(self, db):
        make_person(db, plates=("29A12345",))
        record_action(db, "123456789", "29A12345", "deposit")
        record_action(db, "123456789", "29A12345", "deposit")
        assert db.query(Transaction).count() == 2

    def test_backfills_missing_class(self, db):
        make_person(db, plates=("29A12345",))
        db.query(Vehicle).update({Vehicle.vehicle_class: None})
        db.commit()
        result = record_action(db, "123456789", "29A12345", "deposit")
        assert result["vehicleClass"] == "motorbike"
        assert db.query(Vehicle).one().vehicle_class == "motorbike"

    def test_unknown_person(self, db):
        with pytest.raises(NotFoundError) as exc:
            record_action(db, "999999999", "29A12345", "deposit")
        assert exc.value.message == "Chưa đăng ký"

    def test_plate_not_owned_by_person(self, db):
        make_person(db, plates=("29A12345",))
        with pytest.raises(NotFoundError):
            record_action(db, "123456789", "30B12345", "deposit")

    def test_unknown_action(self, db):
        make_person(db, plates=("29A12345",))
        with pytest.raises(ValidationError):
            record_action(db, "123456789", "29A12345", "park")

    def test_failed_commit_keeps_status_and_log_consistent(self, db):
        make_person(db, plates=("29A12345",))
        error = OperationalError("INSERT INTO transactions", {}, Exception("disk I/O error"))

        with patch.object(db, "commit", side_effect=error):
            with pytest.raises(StoreError):
                record_action(db, "123456789", "29A12345", "deposit")

        assert db.query(Vehicle).one().status == RETRIEVED
        assert db.query(Transaction).count() == 0
