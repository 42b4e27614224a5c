"""Shared response shapes and field validators."""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel

from services.date_formatter import parse_date, parse_datetime


class MessageResponse(BaseModel):
    message: str


class ActionResponse(BaseModel):
    success: bool
    message: str


def coerce_date(value: Any) -> Optional[date]:
    """Before-validator: accept any supported date text, reject the rest."""
    if value is None or value == "":
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Unrecognised date: {value}")
    return parsed


def coerce_datetime(value: Any) -> Optional[datetime]:
    """Before-validator: naive UTC datetime from any supported text."""
    if value is None or value == "":
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise ValueError(f"Unrecognised date-time: {value}")
    return parsed
