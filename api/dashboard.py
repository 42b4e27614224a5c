"""Dashboard API router: headline numbers for the caller's practice."""

from datetime import timedelta
from itertools import groupby
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from core.logger import get_logger
from core.security import get_current_user
from database import models
from database.deps import get_db_read
from schemas import DashboardStats

logger = get_logger("api.dashboard")
router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def goal_reached(start: Optional[float], target: Optional[float], latest: Optional[float]) -> bool:
    """True when `latest` has reached `target` moving from `start`.

    Losing weight means at or below the target, gaining means at or above.
    """
    if target is None or latest is None:
        return False
    if start is None or start == target:
        return abs(latest - target) < 0.5
    if start > target:
        return latest <= target
    return latest >= target


def count_goal_achievers(db: Session, user_id: int) -> int:
    rows = (
        db.query(models.Client, models.Measurement)
        .join(models.Measurement, models.Measurement.client_id == models.Client.id)
        .filter(models.Client.user_id == user_id, models.Client.status == "active",
                models.Client.target_weight.isnot(None), models.Measurement.weight.isnot(None))
        .order_by(models.Client.id, models.Measurement.date.asc(), models.Measurement.id.asc())
        .all()
    )
    achieved = 0
    for _, pairs in groupby(rows, key=lambda row: row[0].id):
        pairs = list(pairs)
        client = pairs[0][0]
        first, latest = pairs[0][1], pairs[-1][1]
        start = client.starting_weight if client.starting_weight is not None else first.weight
        if goal_reached(start, client.target_weight, latest.weight):
            achieved += 1
    return achieved


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    """Counts shown on the dashboard cards."""
    today = models.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    tomorrow = today + timedelta(days=1)

    active_clients = (
        db.query(models.Client)
        .filter(models.Client.user_id == current_user.id, models.Client.status == "active")
        .count()
    )
    today_appointments = (
        db.query(models.Appointment)
        .filter(
            models.Appointment.user_id == current_user.id,
            models.Appointment.date >= today,
            models.Appointment.date < tomorrow,
            models.Appointment.status != "cancelled",
        )
        .count()
    )
    active_diet_plans = (
        db.query(models.DietPlan)
        .join(models.Client, models.DietPlan.client_id == models.Client.id)
        .filter(models.Client.user_id == current_user.id, models.DietPlan.status == "active")
        .count()
    )
    telegram_messages = (
        db.query(models.Activity)
        .filter(models.Activity.user_id == current_user.id, models.Activity.type == "telegram")
        .count()
    )

    stats = DashboardStats(
        active_clients=active_clients,
        today_appointments=today_appointments,
        active_diet_plans=active_diet_plans,
        telegram_messages=telegram_messages,
        weight_goal_achieved=count_goal_achievers(db, current_user.id),
    )
    logger.info("Dashboard stats for user %s: %s", current_user.id, stats.model_dump())
    return stats
