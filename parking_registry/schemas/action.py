# parking_registry/schemas/action.py
from pydantic import field_validator
from parking_registry.models.transaction import ACTION_ALIASES
from parking_registry.schemas.person import CamelModel


class ScanRequest(CamelModel):
    qr_string: str


class ActionRequest(CamelModel):
    national_id: str
    plate: str
    action: str   # deposit | retrieve (also accepts Gửi | Lấy)

    @field_validator("action")
    @classmethod
    def _known_action(cls, v):
        if v not in ACTION_ALIASES:
            raise ValueError(f"Hành động không hợp lệ: {v}")
        return ACTION_ALIASES[v]
