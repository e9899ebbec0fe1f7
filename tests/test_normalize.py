"""
Tests for identity normalization.
"""

import pytest

from hirefunnel.normalize import clean_str, normalize_email, normalize_phone


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"

    def test_none_is_empty(self):
        assert normalize_email(None) == ""

    def test_idempotent(self):
        once = normalize_email(" A@B.Co ")
        assert normalize_email(once) == once


class TestNormalizePhone:
    @pytest.mark.parametrize("raw,expected", [
        ("(416) 555-0199", "4165550199"),
        ("+1 647.555.0101", "16475550101"),
        ("no digits", ""),
        (None, ""),
    ])
    def test_keeps_digits_only(self, raw, expected):
        assert normalize_phone(raw) == expected


class TestTextHelpers:
    def test_clean_str_trims(self):
        assert clean_str("  Toronto ") == "Toronto"
        assert clean_str(None) == ""
