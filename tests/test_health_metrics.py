"""Tests for BMI, calorie, body-fat and macro calculations."""
from datetime import date

import pytest

from core.exceptions import ValidationError
from services.health_metrics import (
    calculate_age,
    calculate_bmi,
    calculate_macros,
    calculate_mifflin_st_jeor,
    estimate_body_fat_percentage,
    get_bmi_classification,
    health_metrics,
    round_half_up,
)


def test_bmi_value():
    assert calculate_bmi(70, 175) == pytest.approx(22.857, abs=0.01)


def test_bmi_with_zero_height_is_zero():
    assert calculate_bmi(70, 0) == 0.0
    assert calculate_bmi(70, -10) == 0.0


@pytest.mark.parametrize("bmi, label", [
    (17, "Zayıf"),
    (18.49, "Zayıf"),
    (18.5, "Normal"),
    (22, "Normal"),
    (27, "Fazla Kilolu"),
    (30, "Obez (Sınıf 1)"),
    (37.5, "Obez (Sınıf 2)"),
    (40, "Aşırı Obez (Sınıf 3)"),
])
def test_bmi_classification_bands(bmi, label):
    assert get_bmi_classification(bmi) == label


def test_mifflin_st_jeor_male_and_female():
    # 10*70 + 6.25*175 - 5*30 = 1643.75
    assert calculate_mifflin_st_jeor(70, 175, 30, "male", "sedentary") == pytest.approx(1648.75 * 1.2)
    assert calculate_mifflin_st_jeor(70, 175, 30, "female", "moderate") == pytest.approx(1482.75 * 1.55)
    assert calculate_mifflin_st_jeor(70, 175, 30, "Male", "very_active") == pytest.approx(1648.75 * 1.9)


def test_mifflin_st_jeor_rejects_unknown_inputs():
    with pytest.raises(ValidationError):
        calculate_mifflin_st_jeor(70, 175, 30, "male", "couch")
    with pytest.raises(ValidationError):
        calculate_mifflin_st_jeor(70, 175, 30, "other", "light")


def test_body_fat_estimate_is_not_clamped():
    assert estimate_body_fat_percentage(25, 40, "male") == pytest.approx(1.2 * 25 + 0.23 * 40 - 16.2)
    assert estimate_body_fat_percentage(25, 40, "female") == pytest.approx(1.2 * 25 + 0.23 * 40 - 5.4)
    assert estimate_body_fat_percentage(5, 1, "male") < 0


def test_macros_default_split():
    assert calculate_macros(2000, 30, 40, 30) == {"protein": 150, "carbs": 200, "fat": 67}
    assert calculate_macros(2000) == {"protein": 150, "carbs": 200, "fat": 67}


def test_macros_rounds_half_up():
    # 1818 * 0.25 / 4 = 113.625 -> 114 ; 1818 * 0.45 / 4 = 204.525 -> 205 ; 1818 * 0.30 / 9 = 60.6 -> 61
    assert calculate_macros(1818, 25, 45, 30) == {"protein": 114, "carbs": 205, "fat": 61}


@pytest.mark.parametrize("pcts", [(30, 40, 20), (40, 40, 30), (0, 0, 0)])
def test_macros_require_percentages_summing_to_100(pcts):
    with pytest.raises(ValidationError):
        calculate_macros(2000, *pcts)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(22.857, 2) == pytest.approx(22.86)


def test_calculate_age():
    today = date(2024, 6, 1)
    assert calculate_age("15.03.1990", today=today) == 34
    assert calculate_age(date(2000, 12, 31), today=today) == 24
    assert calculate_age(None) == 30
    assert calculate_age("bilinmiyor") == 30


def test_singleton_exposes_bmr():
    assert health_metrics.calculate_bmr(70, 175, 30, "female") == pytest.approx(1482.75)
