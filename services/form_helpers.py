"""Helpers for normalising form input and rendering numbers and text."""

import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from core.exceptions import ValidationError
from services.date_formatter import format_time

_NON_NUMERIC = re.compile(r"[^\d.,-]")
_NON_SLUG = re.compile(r"[^a-z0-9]+")

_TR_FOLD = str.maketrans({
    "ç": "c", "Ç": "c", "ğ": "g", "Ğ": "g", "ı": "i", "İ": "i",
    "ö": "o", "Ö": "o", "ş": "s", "Ş": "s", "ü": "u", "Ü": "u",
})


def _tr_upper(text: str) -> str:
    return text.replace("i", "İ").replace("ı", "I").upper()


def _tr_lower(text: str) -> str:
    return text.replace("I", "ı").replace("İ", "i").lower()


def parse_number(text: Any, default: float = 0) -> float:
    """Read a number typed by a user (``"72,5 kg"`` -> 72.5).

    When both separators appear the dot is taken as thousands grouping.
    """
    if text is None:
        return default
    if isinstance(text, (int, float)):
        return float(text)
    cleaned = _NON_NUMERIC.sub("", str(text))
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return default


def format_currency(value: float, decimals: int = 2) -> str:
    """Turkish grouping: ``1234.5`` -> ``1.234,50``."""
    us = f"{float(value):,.{decimals}f}"
    return us.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def format_phone_number(text: Optional[str]) -> Optional[str]:
    """Format a Turkish mobile number as ``+90 5XX XXX XX XX``.

    Anything that is not a Turkish mobile is returned unchanged.
    """
    if not text:
        return text
    digits = re.sub(r"\D", "", text)
    if len(digits) == 11 and digits.startswith("05"):
        digits = "9" + digits
    elif len(digits) == 10 and digits.startswith("5"):
        digits = "90" + digits
    if len(digits) != 12 or not digits.startswith("905"):
        return text
    local = digits[2:]
    return f"+90 {local[:3]} {local[3:6]} {local[6:8]} {local[8:]}"


def capitalize_words(text: Optional[str]) -> str:
    if not text:
        return ""
    return " ".join(_tr_upper(w[:1]) + _tr_lower(w[1:]) for w in text.split())


def truncate(text: Optional[str], max_length: int = 50) -> str:
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def slugify(text: Optional[str]) -> str:
    """URL slug with Turkish letters folded to ASCII."""
    if not text:
        return ""
    folded = text.translate(_TR_FOLD).lower()
    return _NON_SLUG.sub("-", folded).strip("-")


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for an ``HH:MM`` time."""
    hhmm = format_time(value)
    if not hhmm:
        raise ValidationError(f"Invalid time: {value}", field="time")
    hours, minutes = (int(p) for p in hhmm.split(":"))
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Inverse of `time_to_minutes`; wraps past midnight."""
    minutes = int(minutes) % (24 * 60)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def clean_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``None`` values, trim strings and serialise dates to ISO strings."""
    cleaned = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
        elif isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, dict):
            value = clean_payload(value)
        cleaned[key] = value
    return cleaned
