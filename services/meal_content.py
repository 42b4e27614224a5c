"""Structured meal handling for diet plans.

Older clients sent the meal list JSON-encoded inside the free-text
`content` field. Plans now carry meals only in `meals`; this module moves
such legacy payloads over and derives calorie totals.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from core.logger import get_logger
from services.form_helpers import parse_number

logger = get_logger("services.meal_content")


def normalize_food(food: Any) -> Optional[Dict[str, Any]]:
    """Coerce one food entry to ``{name, amount, calories}`` or None when unnamed."""
    if isinstance(food, str):
        food = {"name": food}
    if not isinstance(food, dict):
        return None
    name = str(food.get("name") or "").strip()
    if not name:
        return None
    return {
        "name": name,
        "amount": str(food.get("amount") or "").strip(),
        "calories": parse_number(food.get("calories"), default=0),
    }


def normalize_meals(meals: Any) -> List[Dict[str, Any]]:
    """Return a clean ``[{name, foods: [...]}]`` list; anything else yields ``[]``."""
    if not isinstance(meals, list):
        return []
    out = []
    for idx, meal in enumerate(meals):
        if not isinstance(meal, dict):
            logger.debug("Dropping meal #%s: not an object", idx)
            continue
        foods = [f for f in (normalize_food(x) for x in meal.get("foods") or []) if f]
        out.append({
            "name": str(meal.get("name") or f"Öğün {idx + 1}").strip(),
            "foods": foods,
        })
    return out


def migrate_legacy_content(content: Optional[str], meals: Optional[list]) -> Tuple[str, List[Dict[str, Any]]]:
    """Split a plan's `content` and `meals` into free text and structured meals.

    A `content` string holding a JSON array is treated as the meal list: it
    fills `meals` when no meals were given, and `content` becomes empty.
    Anything else in `content` is kept as free text.

    Returns:
        Tuple of (content, meals).
    """
    text = (content or "").strip()
    structured = normalize_meals(meals or [])
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            logger.debug("Content looks like JSON but does not parse; keeping as text")
            return text, structured
        if isinstance(decoded, list):
            if not structured:
                structured = normalize_meals(decoded)
            logger.info("Migrated legacy meal content (%s meals)", len(structured))
            return "", structured
    return text, structured


def meal_calories(meal: Dict[str, Any]) -> float:
    return sum(food.get("calories") or 0 for food in meal.get("foods", []))


def total_calories(meals: List[Dict[str, Any]]) -> float:
    """Sum of food calories across all meals of a day."""
    return sum(meal_calories(m) for m in meals)


def load_meals(raw: Optional[str]) -> List[Dict[str, Any]]:
    """Decode the JSON text stored on a `DietPlan` row."""
    if not raw:
        return []
    try:
        return normalize_meals(json.loads(raw))
    except json.JSONDecodeError:
        logger.warning("Stored meals are not valid JSON; ignoring")
        return []
