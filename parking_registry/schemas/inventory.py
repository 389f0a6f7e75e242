# parking_registry/schemas/inventory.py
from pydantic import field_serializer, field_validator
from datetime import datetime
from typing import Optional
from parking_registry.models.inventory import RECORD_STATUSES
from parking_registry.schemas.person import CamelModel
from parking_registry.utils.timestamps import as_utc


class InventoryStartRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = ""


class InventoryCheckRequest(CamelModel):
    session_id: int
    plate: str
    status: Optional[str] = "checked"   # checked | not_found | damaged
    notes: Optional[str] = ""

    @field_validator("status")
    @classmethod
    def _known_status(cls, v):
        if v is None:
            return "checked"
        if v not in RECORD_STATUSES:
            raise ValueError(f"Trạng thái kiểm kê không hợp lệ: {v}")
        return v


class InventorySessionOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = ""
    started_by: str
    started_at: datetime
    ended_by: Optional[str] = None
    ended_at: Optional[datetime] = None
    status: str

    @field_serializer("started_at", "ended_at")
    def _emit_utc(self, v):
        return as_utc(v)


class InventoryRecordOut(CamelModel):
    id: int
    session_id: int
    plate: str
    status: str
    notes: Optional[str] = ""
    checked_by: str
    checked_at: datetime

    @field_serializer("checked_at")
    def _emit_utc(self, v):
        return as_utc(v)
