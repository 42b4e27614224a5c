"""Calculations API router.

Stateless wrappers around `services.health_metrics` so the dashboard and
the mobile app share one implementation.
"""

from fastapi import APIRouter, Query

from core.logger import get_logger
from schemas import (
    BMIResponse,
    BodyFatRequest,
    BodyFatResponse,
    CaloriesRequest,
    CaloriesResponse,
    MacrosRequest,
    MacrosResponse,
)
from services.health_metrics import health_metrics, round_half_up

logger = get_logger("api.calculations")
router = APIRouter(prefix="/api/calculations", tags=["calculations"])


@router.get("/bmi", response_model=BMIResponse)
def bmi(
    weight: float = Query(..., gt=0, description="kg"),
    height: float = Query(..., gt=0, description="cm"),
):
    value = health_metrics.calculate_bmi(weight, height)
    return BMIResponse(bmi=round_half_up(value, 2), classification=health_metrics.get_bmi_classification(value))


@router.post("/calories", response_model=CaloriesResponse)
def calories(payload: CaloriesRequest):
    """Daily calorie need by Mifflin-St Jeor.

    Raises:
        ValidationError: For an unknown gender or activity level.
    """
    total = health_metrics.calculate_mifflin_st_jeor(
        payload.weight, payload.height, payload.age, payload.gender, payload.activity_level
    )
    bmr = health_metrics.calculate_bmr(payload.weight, payload.height, payload.age, payload.gender)
    return CaloriesResponse(bmr=round_half_up(bmr), calories=round_half_up(total))


@router.post("/macros", response_model=MacrosResponse)
def macros(payload: MacrosRequest):
    """Raises ValidationError when the percentages do not add up to 100."""
    return MacrosResponse(**health_metrics.calculate_macros(
        payload.calories, payload.protein_pct, payload.carb_pct, payload.fat_pct
    ))


@router.post("/body-fat", response_model=BodyFatResponse)
def body_fat(payload: BodyFatRequest):
    value = health_metrics.calculate_bmi(payload.weight, payload.height)
    fat = health_metrics.estimate_body_fat_percentage(value, payload.age, payload.gender)
    logger.debug("Body fat for bmi=%.2f age=%s: %.2f", value, payload.age, fat)
    return BodyFatResponse(bmi=round_half_up(value, 2), body_fat_percentage=round_half_up(fat, 1))
