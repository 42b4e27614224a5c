"""Schemas for client records."""

from datetime import date
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Literal, Optional

from .common_schema import coerce_date

Gender = Literal["male", "female"]
ClientStatus = Literal["active", "inactive"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]


class ClientCreateRequest(BaseModel):
    """Request payload for adding a client.

    `birth_date` accepts ``YYYY-MM-DD``, ``DD.MM.YYYY``, ``DD/MM/YYYY`` and ISO
    date-times; it is stored as a plain date.
    """

    name: str = Field(..., min_length=2, examples=["Mehmet Demir"])
    email: EmailStr = Field(..., examples=["mehmet@diyetim.com.tr"])
    phone: Optional[str] = Field(None, examples=["05321234567"])
    birth_date: Optional[date] = Field(None, examples=["15.03.1990"])
    gender: Optional[Gender] = Field(None, examples=["male"])
    height: Optional[float] = Field(None, gt=0, le=272, examples=[178.0], description="Height in cm")
    starting_weight: Optional[float] = Field(None, gt=0, examples=[92.5], description="Weight in kg at first visit")
    target_weight: Optional[float] = Field(None, gt=0, examples=[80.0])
    activity_level: Optional[ActivityLevel] = Field(None, examples=["moderate"])
    medical_history: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None
    profile_picture: Optional[str] = None
    status: ClientStatus = "active"

    @field_validator("birth_date", mode="before")
    @classmethod
    def _normalize_birth_date(cls, value):
        return coerce_date(value)


class ClientUpdateRequest(BaseModel):
    """Partial client update; omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[Gender] = None
    height: Optional[float] = Field(None, gt=0, le=272)
    starting_weight: Optional[float] = Field(None, gt=0)
    target_weight: Optional[float] = Field(None, gt=0)
    activity_level: Optional[ActivityLevel] = None
    medical_history: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None
    profile_picture: Optional[str] = None
    status: Optional[ClientStatus] = None

    @field_validator("birth_date", mode="before")
    @classmethod
    def _normalize_birth_date(cls, value):
        return coerce_date(value)


class ClientResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    birth_date: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    height: Optional[float] = None
    starting_weight: Optional[float] = None
    target_weight: Optional[float] = None
    activity_level: Optional[str] = None
    medical_history: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None
    profile_picture: Optional[str] = None
    status: str
    reference_code: Optional[str] = None
    telegram_linked: bool = False
    created_at: Optional[str] = None
