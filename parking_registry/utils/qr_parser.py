# parking_registry/utils/qr_parser.py
"""
Helpers for the citizen ID card QR payload and the dd/mm/yyyy display dates.
QR format: id|oldId|fullName|dateOfBirth|gender|hometown|issueDate
"""

import re
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Optional, Union

GENDER_ALIASES = {
    "nam": "male",
    "nữ": "female",
    "nu": "female",
    "khác": "other",
    "khac": "other",
    "male": "male",
    "female": "female",
    "other": "other",
}


@dataclass
class QRPayload:
    national_id: str
    old_id: str
    full_name: Optional[str]
    date_of_birth: Optional[str]
    gender: Optional[str]
    hometown: Optional[str]
    id_issue_date: Optional[str]

    def to_dict(self) -> dict:
        data = asdict(self)
        return {
            "nationalId": data["national_id"],
            "oldId": data["old_id"],
            "fullName": data["full_name"],
            "dateOfBirth": data["date_of_birth"],
            "gender": data["gender"],
            "hometown": data["hometown"],
            "idIssueDate": data["id_issue_date"],
        }


def _part(parts: list[str], index: int) -> Optional[str]:
    if index < len(parts) and parts[index].strip():
        return parts[index].strip()
    return None


def decode_qr(qr_string: str) -> QRPayload:
    """Split a pipe-delimited QR string. Missing trailing fields come back as None."""
    parts = qr_string.split("|")
    return QRPayload(
        national_id=(parts[0] or "").strip(),
        old_id=_part(parts, 1) or "",
        full_name=_part(parts, 2),
        date_of_birth=format_display_date(_part(parts, 3)) or None,
        gender=normalize_gender(_part(parts, 4)),
        hometown=_part(parts, 5),
        id_issue_date=format_display_date(_part(parts, 6)) or None,
    )


def normalize_gender(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return GENDER_ALIASES.get(value.strip().lower())


def format_display_date(value: Union[str, date, datetime, None]) -> str:
    """
    Render a date as dd/mm/yyyy.
    Accepts date objects, 'dd/mm/yyyy', 'dd-mm-yyyy', 'ddmmyyyy' (card QR) and ISO 'yyyy-mm-dd'.
    Unrecognised strings are returned unchanged.
    """
    if not value:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%d/%m/%Y")

    value = value.strip()
    match = re.fullmatch(r"(\d{2})[/-](\d{2})[/-](\d{4})", value)
    if match:
        return f"{match.group(1)}/{match.group(2)}/{match.group(3)}"
    match = re.fullmatch(r"(\d{2})(\d{2})(\d{4})", value)
    if match:
        return f"{match.group(1)}/{match.group(2)}/{match.group(3)}"
    match = re.fullmatch(r"(\d{4})-(\d{2})-(\d{2})(?:T.*)?", value)
    if match:
        return f"{match.group(3)}/{match.group(2)}/{match.group(1)}"
    return value
