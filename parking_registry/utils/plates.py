# parking_registry/utils/plates.py
"""
License plate helpers: normalize, validate, classify.

Accepted formats (after normalization):
  29A12345, 29AB12345, 29A112345, 29A1123.45 → 29A112345 (sub-suffix folded in)
  29MĐ112345 (electric motorbike)
"""

import re
from typing import Optional

ELECTRIC_MARKER = "MĐ"

MOTORBIKE = "motorbike"
ELECTRIC_MOTORBIKE = "electric-motorbike"
VEHICLE_CLASSES = (MOTORBIKE, ELECTRIC_MOTORBIKE)

_SEPARATORS = re.compile(r"[-.\s]")
_PLATE_RE = re.compile(
    r"^(?:\d{2}[A-Z]{1,2}\d?\d{3,5}(?:\d{2})?|\d{2}" + ELECTRIC_MARKER + r"\d\d{3,5})$"
)


def normalize(raw: Optional[str]) -> str:
    if not raw:
        return ""
    return _SEPARATORS.sub("", raw).upper()


def is_valid(plate: Optional[str]) -> bool:
    if not plate:
        return False
    return bool(_PLATE_RE.match(normalize(plate)))


def classify(plate: Optional[str]) -> Optional[str]:
    if not plate:
        return None
    return ELECTRIC_MOTORBIKE if ELECTRIC_MARKER in normalize(plate) else MOTORBIKE
