"""Schemas for appointments."""

from datetime import datetime
from pydantic import BaseModel, Field, model_validator
from typing import Literal, Optional

from services.date_formatter import combine_date_and_time, parse_datetime

AppointmentType = Literal["online", "in-person"]
AppointmentStatus = Literal["scheduled", "completed", "cancelled"]


def _merge_date_and_time(data):
    """Fold an optional separate ``time`` field into ``date``."""
    if not isinstance(data, dict):
        return data
    data = dict(data)
    time_value = data.pop("time", None)
    raw = data.get("date")
    if raw is None or raw == "":
        if time_value:
            raise ValueError("time requires a date")
        return data
    when = combine_date_and_time(raw, time_value) if time_value else parse_datetime(raw)
    if when is None:
        raise ValueError("Invalid appointment date or time")
    data["date"] = when
    return data


class AppointmentCreateRequest(BaseModel):
    """Request payload for booking an appointment.

    `date` may be a full date-time, or a date accompanied by ``time`` (``HH:MM``).
    """

    client_id: int = Field(..., examples=[1])
    date: datetime = Field(..., examples=["2024-03-15T14:30:00"])
    duration: int = Field(60, ge=5, le=480, examples=[45], description="Minutes")
    type: AppointmentType = "in-person"
    status: AppointmentStatus = "scheduled"
    notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _combine(cls, data):
        return _merge_date_and_time(data)


class AppointmentUpdateRequest(BaseModel):
    date: Optional[datetime] = None
    duration: Optional[int] = Field(None, ge=5, le=480)
    type: Optional[AppointmentType] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _combine(cls, data):
        return _merge_date_and_time(data)


class AppointmentResponse(BaseModel):
    id: int
    client_id: int
    client_name: Optional[str] = None
    user_id: int
    date: str
    duration: int
    type: str
    status: str
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
