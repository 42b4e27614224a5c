"""Schemas for body measurements."""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from .common_schema import coerce_datetime


class MeasurementCreateRequest(BaseModel):
    """Body measurements in kg and cm. `date` defaults to now."""

    date: Optional[datetime] = Field(None, examples=["2024-03-15T09:00:00Z"])
    weight: Optional[float] = Field(None, gt=0, examples=[84.2])
    height: Optional[float] = Field(None, gt=0)
    neck: Optional[float] = Field(None, ge=0)
    arm: Optional[float] = Field(None, ge=0)
    chest: Optional[float] = Field(None, ge=0)
    waist: Optional[float] = Field(None, ge=0, examples=[91.0])
    abdomen: Optional[float] = Field(None, ge=0)
    hip: Optional[float] = Field(None, ge=0, examples=[104.0])
    thigh: Optional[float] = Field(None, ge=0)
    calf: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    body_fat_percentage: Optional[float] = Field(None, description="Computed from BMI when omitted")

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return coerce_datetime(value)


class MeasurementUpdateRequest(BaseModel):
    date: Optional[datetime] = None
    weight: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    neck: Optional[float] = Field(None, ge=0)
    arm: Optional[float] = Field(None, ge=0)
    chest: Optional[float] = Field(None, ge=0)
    waist: Optional[float] = Field(None, ge=0)
    abdomen: Optional[float] = Field(None, ge=0)
    hip: Optional[float] = Field(None, ge=0)
    thigh: Optional[float] = Field(None, ge=0)
    calf: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    images: Optional[List[str]] = None
    body_fat_percentage: Optional[float] = None

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return coerce_datetime(value)


class MeasurementResponse(BaseModel):
    id: int
    client_id: int
    date: str
    weight: Optional[float] = None
    height: Optional[float] = None
    neck: Optional[float] = None
    arm: Optional[float] = None
    chest: Optional[float] = None
    waist: Optional[float] = None
    abdomen: Optional[float] = None
    hip: Optional[float] = None
    thigh: Optional[float] = None
    calf: Optional[float] = None
    notes: Optional[str] = None
    images: List[str] = []
    body_fat_percentage: Optional[float] = None


class MeasurementSummary(BaseModel):
    """Progress overview of a client's measurements."""

    count: int
    latest: Optional[MeasurementResponse] = None
    first: Optional[MeasurementResponse] = None
    weight_change: Optional[float] = Field(None, description="Latest weight minus first weight, kg")
    remaining_to_target: Optional[float] = Field(None, description="Target weight minus latest weight, kg")
    bmi: Optional[float] = None
    bmi_classification: Optional[str] = None
