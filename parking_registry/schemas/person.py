# parking_registry/schemas/person.py
from pydantic import BaseModel, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional
from parking_registry.models.vehicle import STATUS_ALIASES
from parking_registry.models.transaction import ACTION_ALIASES
from parking_registry.utils.plates import VEHICLE_CLASSES, classify
from parking_registry.utils.qr_parser import format_display_date, normalize_gender
from parking_registry.utils.timestamps import as_utc, to_utc_naive


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class LastTransaction(CamelModel):
    action: str
    timestamp: Optional[datetime] = None

    @field_validator("action", mode="before")
    @classmethod
    def _known_action(cls, v):
        if v not in ACTION_ALIASES:
            raise ValueError(f"Hành động không hợp lệ: {v}")
        return ACTION_ALIASES[v]

    @field_validator("timestamp")
    @classmethod
    def _stored_as_utc(cls, v):
        return to_utc_naive(v)

    @field_serializer("timestamp")
    def _emit_utc(self, v):
        return as_utc(v)


class VehicleIn(CamelModel):
    plate: Optional[str] = None
    vehicle_class: Optional[str] = None
    color: Optional[str] = None
    brand: Optional[str] = None
    status: Optional[str] = None
    last_transaction: Optional[LastTransaction] = None

    @field_validator("vehicle_class")
    @classmethod
    def _known_class(cls, v):
        if v is not None and v not in VEHICLE_CLASSES:
            raise ValueError(f"Loại xe không hợp lệ: {v}")
        return v

    @field_validator("status")
    @classmethod
    def _known_status(cls, v):
        if v is None:
            return v
        if v not in STATUS_ALIASES:
            raise ValueError(f"Trạng thái xe không hợp lệ: {v}")
        return STATUS_ALIASES[v]


class PersonBase(CamelModel):
    old_id: Optional[str] = None
    full_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    hometown: Optional[str] = None
    id_issue_date: Optional[str] = None
    vehicles: list[VehicleIn] = []

    @field_validator("date_of_birth", "id_issue_date")
    @classmethod
    def _display_date(cls, v):
        return format_display_date(v) if v else v

    @field_validator("gender")
    @classmethod
    def _gender(cls, v):
        if v is None:
            return v
        gender = normalize_gender(v)
        if gender is None:
            raise ValueError(f"Giới tính không hợp lệ: {v}")
        return gender


class PersonCreate(PersonBase):
    national_id: str
    full_name: str
    date_of_birth: str
    gender: str
    hometown: str
    id_issue_date: str


class PersonUpdate(PersonBase):
    """Fields left out keep their stored value; vehicles replace the stored list."""


class VehicleOut(CamelModel):
    plate: str
    vehicle_class: Optional[str] = None
    color: Optional[str] = ""
    brand: Optional[str] = ""
    status: str
    last_transaction: Optional[LastTransaction] = None

    @model_validator(mode="after")
    def _backfill_class(self):
        # Older rows were stored before vehicle_class existed
        if not self.vehicle_class:
            self.vehicle_class = classify(self.plate)
        return self


class PersonOut(CamelModel):
    national_id: str
    old_id: Optional[str] = ""
    full_name: str
    date_of_birth: str
    gender: str
    hometown: str
    id_issue_date: str
    vehicles: list[VehicleOut] = []


def person_to_dict(person) -> dict:
    return PersonOut.model_validate(person).model_dump(by_alias=True)
