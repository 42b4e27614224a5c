"""Schemas for diet plans and their structured meals."""

from datetime import date
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Literal, Optional

from .common_schema import coerce_date

PlanStatus = Literal["active", "inactive"]


class FoodItem(BaseModel):
    name: str = Field(..., min_length=1, examples=["Yulaf ezmesi"])
    amount: str = Field("", examples=["40 g"])
    calories: float = Field(0, ge=0, examples=[150])


class Meal(BaseModel):
    name: str = Field(..., min_length=1, examples=["Kahvaltı"])
    foods: List[FoodItem] = Field(default_factory=list)


class DietPlanCreateRequest(BaseModel):
    """Request payload for a new diet plan.

    `client_id` is required when posting to ``/api/diet-plans`` and ignored
    on the client-scoped route. A `content` holding a JSON meal array is
    accepted for older callers and moved into `meals`.
    """

    client_id: Optional[int] = Field(None, examples=[1])
    title: str = Field(..., min_length=1, examples=["Nisan ayı kilo verme planı"])
    description: Optional[str] = None
    content: Optional[str] = Field("", description="Free-text notes")
    start_date: date = Field(..., examples=["2024-04-01"])
    end_date: Optional[date] = Field(None, examples=["2024-04-30"])
    status: PlanStatus = "active"
    daily_calories: float = Field(0, ge=0, examples=[1800])
    macro_protein: float = Field(0, ge=0, examples=[30])
    macro_carbs: float = Field(0, ge=0, examples=[40])
    macro_fat: float = Field(0, ge=0, examples=[30])
    meals: Optional[List[Meal]] = None
    attachments: List[str] = Field(default_factory=list)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_dates(cls, value):
        return coerce_date(value)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self


class DietPlanUpdateRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    content: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[PlanStatus] = None
    daily_calories: Optional[float] = Field(None, ge=0)
    macro_protein: Optional[float] = Field(None, ge=0)
    macro_carbs: Optional[float] = Field(None, ge=0)
    macro_fat: Optional[float] = Field(None, ge=0)
    meals: Optional[List[Meal]] = None
    attachments: Optional[List[str]] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_dates(cls, value):
        return coerce_date(value)


class DietPlanResponse(BaseModel):
    id: int
    client_id: int
    client_name: Optional[str] = None
    created_by: int
    title: str
    description: Optional[str] = None
    content: str = ""
    start_date: str
    end_date: Optional[str] = None
    status: str
    daily_calories: float
    macro_protein: float
    macro_carbs: float
    macro_fat: float
    meals: List[Meal] = []
    total_calories: float = 0
    attachments: List[str] = []
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
