"""Schemas for the health calculation endpoints."""

from pydantic import BaseModel, Field


class BMIResponse(BaseModel):
    bmi: float
    classification: str


class CaloriesRequest(BaseModel):
    weight: float = Field(..., gt=0, examples=[70], description="kg")
    height: float = Field(..., gt=0, examples=[175], description="cm")
    age: int = Field(..., gt=0, le=120, examples=[30])
    gender: str = Field(..., examples=["male"], description="male or female")
    activity_level: str = Field(..., examples=["moderate"], description="sedentary, light, moderate, active, very_active")


class CaloriesResponse(BaseModel):
    bmr: float
    calories: float


class MacrosRequest(BaseModel):
    calories: float = Field(..., gt=0, examples=[2000])
    protein_pct: float = Field(30, ge=0, le=100)
    carb_pct: float = Field(40, ge=0, le=100)
    fat_pct: float = Field(30, ge=0, le=100)


class MacrosResponse(BaseModel):
    protein: int
    carbs: int
    fat: int


class BodyFatRequest(BaseModel):
    weight: float = Field(..., gt=0, examples=[70])
    height: float = Field(..., gt=0, examples=[175])
    age: int = Field(..., gt=0, le=120, examples=[30])
    gender: str = Field(..., examples=["female"])


class BodyFatResponse(BaseModel):
    bmi: float
    body_fat_percentage: float
