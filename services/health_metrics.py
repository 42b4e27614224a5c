"""Health metric calculations.

Provides BMI, Mifflin-St Jeor calorie estimation, body-fat estimation and
macro allocation used by measurements, the dashboard and the calculation
endpoints.
"""

import math
from datetime import date
from typing import Dict, Optional

from core.exceptions import ValidationError
from core.logger import get_logger
from services.date_formatter import parse_date

logger = get_logger("services.health_metrics")

ACTIVITY_MULTIPLIERS = {
    'sedentary': 1.2,
    'light': 1.375,
    'moderate': 1.55,
    'active': 1.725,
    'very_active': 1.9,
}

DEFAULT_AGE = 30

# (upper bound, label); the last band has no upper bound.
BMI_BANDS = (
    (18.5, "Zayıf"),
    (25, "Normal"),
    (30, "Fazla Kilolu"),
    (35, "Obez (Sınıf 1)"),
    (40, "Obez (Sınıf 2)"),
)
BMI_TOP_BAND = "Aşırı Obez (Sınıf 3)"


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like ``Math.round`` does: halves go up, not to even."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class HealthMetrics:
    """Class-based health metric calculator used across the app."""

    def calculate_bmi(self, weight_kg: float, height_cm: float) -> float:
        """Calculate BMI from weight in kg and height in cm."""
        h_m = height_cm / 100.0
        if h_m <= 0:
            return 0.0
        return weight_kg / (h_m * h_m)

    def get_bmi_classification(self, bmi: float) -> str:
        for upper, label in BMI_BANDS:
            if bmi < upper:
                return label
        return BMI_TOP_BAND

    def calculate_bmr(self, weight_kg: float, height_cm: float, age: int, gender: str) -> float:
        """Basal metabolic rate using Mifflin-St Jeor."""
        base = 10 * weight_kg + 6.25 * height_cm - 5 * age
        g = (gender or '').lower()
        if g == 'male':
            return base + 5
        if g == 'female':
            return base - 161
        raise ValidationError(f"Unknown gender: {gender}", field="gender")

    def calculate_mifflin_st_jeor(self, weight_kg: float, height_cm: float, age: int,
                                  gender: str, activity_level: str) -> float:
        """Daily calorie need: BMR times the activity multiplier."""
        multiplier = ACTIVITY_MULTIPLIERS.get(activity_level)
        if multiplier is None:
            raise ValidationError(f"Unknown activity level: {activity_level}", field="activity_level")
        val = self.calculate_bmr(weight_kg, height_cm, age, gender) * multiplier
        logger.debug("Daily calories calculated: %s", val)
        return val

    def estimate_body_fat_percentage(self, bmi: float, age: int, gender: str) -> float:
        """Deurenberg estimate; the result is not clamped."""
        offset = 16.2 if (gender or '').lower() == 'male' else 5.4
        return 1.2 * bmi + 0.23 * age - offset

    def calculate_macros(self, calories: float, protein_pct: float = 30,
                         carb_pct: float = 40, fat_pct: float = 30) -> Dict[str, int]:
        """Split a calorie target into grams of protein, carbs and fat.

        Protein and carbs carry 4 kcal/g, fat 9 kcal/g. The three percentages
        must add up to exactly 100.
        """
        if protein_pct + carb_pct + fat_pct != 100:
            raise ValidationError("Macro percentages must add up to 100")
        macros = {
            'protein': int(round_half_up(calories * protein_pct / 100 / 4)),
            'carbs': int(round_half_up(calories * carb_pct / 100 / 4)),
            'fat': int(round_half_up(calories * fat_pct / 100 / 9)),
        }
        logger.debug("Macros calculated: %s", macros)
        return macros

    def calculate_age(self, birth_date, today: Optional[date] = None) -> int:
        """Whole-year difference between the birth year and today's year."""
        born = parse_date(birth_date) if birth_date else None
        if born is None:
            return DEFAULT_AGE
        today = today or date.today()
        return today.year - born.year


# export singleton
health_metrics = HealthMetrics()

calculate_bmi = health_metrics.calculate_bmi
get_bmi_classification = health_metrics.get_bmi_classification
calculate_mifflin_st_jeor = health_metrics.calculate_mifflin_st_jeor
estimate_body_fat_percentage = health_metrics.estimate_body_fat_percentage
calculate_macros = health_metrics.calculate_macros
calculate_age = health_metrics.calculate_age

__all__ = [
    "HealthMetrics",
    "health_metrics",
    "round_half_up",
    "calculate_bmi",
    "get_bmi_classification",
    "calculate_mifflin_st_jeor",
    "estimate_body_fat_percentage",
    "calculate_macros",
    "calculate_age",
]
