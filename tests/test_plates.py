"""Unit tests for plate normalization, validation and classification."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from parking_registry.utils.plates import (
    classify, is_valid, normalize, MOTORBIKE, ELECTRIC_MOTORBIKE,
)

VALID = ["29A-12345", "29A1-123.45", "30AB-1234", "59X2 678.90", "29MĐ1-12345", "29mđ1-123"]
INVALID = ["", None, "ABC-1234", "2A12345", "29-12345", "29A12", "29MĐ12", "29ABC12345"]


class TestNormalize:
    def test_strips_separators_and_uppercases(self):
        assert normalize("29a-123.45") == "29A12345"
        assert normalize(" 29 mđ1-12345 ") == "29MĐ112345"

    @pytest.mark.parametrize("raw", VALID)
    def test_idempotent(self, raw):
        once = normalize(raw)
        assert normalize(once) == once

    def test_empty(self):
        assert normalize(None) == ""
        assert normalize("") == ""


class TestIsValid:
    @pytest.mark.parametrize("plate", VALID)
    def test_accepts_known_formats(self, plate):
        assert is_valid(plate)

    @pytest.mark.parametrize("plate", INVALID)
    def test_rejects_malformed(self, plate):
        assert not is_valid(plate)

    def test_sub_suffix_accepted(self):
        assert is_valid("29A1-123.45")
        assert is_valid("29A1-12345")


class TestClassify:
    def test_standard_motorbike(self):
        assert classify("29A-12345") == MOTORBIKE

    def test_electric_marker(self):
        assert classify("29MĐ1-12345") == ELECTRIC_MOTORBIKE
        assert classify("29mđ112345") == ELECTRIC_MOTORBIKE

    def test_missing_plate(self):
        assert classify(None) is None
