import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def normalize_phone(phone: Optional[str]) -> str:
    return _NON_DIGITS.sub("", phone or "")


def clean_str(s: Optional[str]) -> str:
    """Trim free text from a form field; None becomes ''."""
    return (s or "").strip()
