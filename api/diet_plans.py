"""Diet plans API router.

Plans are written for a client by the dietitian who owns that client.
Structured meals live only in `meals`; a legacy `content` carrying a JSON
meal array is migrated on write by `services.meal_content`.
"""

import json
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from core.exceptions import PermissionDeniedError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository, save
from core.security import get_current_user
from database import models
from database.deps import get_db_read, get_db_write
from schemas import DietPlanCreateRequest, DietPlanResponse, DietPlanUpdateRequest, MessageResponse
from services.activity_log import record_activity
from services.meal_content import load_meals, migrate_legacy_content, total_calories
from api.clients import get_owned_client

logger = get_logger("api.diet_plans")
router = APIRouter(prefix="/api", tags=["diet-plans"])

_REQUIRED_FIELDS = ("title", "start_date", "status", "daily_calories", "macro_protein", "macro_carbs", "macro_fat")


def plan_to_response(plan: models.DietPlan) -> DietPlanResponse:
    meals = load_meals(plan.meals)
    return DietPlanResponse(
        id=plan.id,
        client_id=plan.client_id,
        client_name=plan.client.name if plan.client else None,
        created_by=plan.created_by,
        title=plan.title,
        description=plan.description,
        content=plan.content or "",
        start_date=plan.start_date.isoformat(),
        end_date=plan.end_date.isoformat() if plan.end_date else None,
        status=plan.status,
        daily_calories=plan.daily_calories,
        macro_protein=plan.macro_protein,
        macro_carbs=plan.macro_carbs,
        macro_fat=plan.macro_fat,
        meals=meals,
        total_calories=total_calories(meals),
        attachments=json.loads(plan.attachments) if plan.attachments else [],
        created_at=plan.created_at.isoformat() if plan.created_at else None,
        updated_at=plan.updated_at.isoformat() if plan.updated_at else None,
    )


def _owned_plan(db: Session, plan_id: int, user: models.User) -> models.DietPlan:
    plan = BaseRepository(models.DietPlan, db, "Diet plan").get_or_404(plan_id)
    if plan.client.user_id != user.id:
        raise PermissionDeniedError("Diet plan", plan_id)
    return plan


def _create_plan(db: Session, user: models.User, client: models.Client,
                 payload: DietPlanCreateRequest) -> models.DietPlan:
    meals_in = [m.model_dump() for m in payload.meals] if payload.meals else None
    content, meals = migrate_legacy_content(payload.content, meals_in)
    plan = models.DietPlan(
        client_id=client.id,
        created_by=user.id,
        title=payload.title.strip(),
        description=payload.description,
        content=content,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=payload.status,
        daily_calories=payload.daily_calories,
        macro_protein=payload.macro_protein,
        macro_carbs=payload.macro_carbs,
        macro_fat=payload.macro_fat,
        meals=json.dumps(meals, ensure_ascii=False),
        attachments=json.dumps(payload.attachments or []),
    )
    plan = save(db, plan)
    record_activity(
        db, user.id, "diet_plan",
        f"Yeni diyet planı oluşturuldu: {client.name} için \"{plan.title}\"",
    )
    logger.info("Diet plan %s created for client %s (%s meals)", plan.id, client.id, len(meals))
    return plan


@router.get("/diet-plans", response_model=List[DietPlanResponse])
def list_my_diet_plans(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    """Return plans created by the caller, newest first."""
    plans = (
        db.query(models.DietPlan)
        .filter(models.DietPlan.created_by == current_user.id)
        .order_by(models.DietPlan.created_at.desc(), models.DietPlan.id.desc())
        .all()
    )
    return [plan_to_response(p) for p in plans]


@router.post("/diet-plans", response_model=DietPlanResponse, status_code=201)
def create_diet_plan(
    payload: DietPlanCreateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Create a plan for the client named in the body.

    Raises:
        ValidationError: If `client_id` is missing.
    """
    if payload.client_id is None:
        raise ValidationError("client_id is required", field="client_id")
    client = get_owned_client(db, payload.client_id, current_user)
    return plan_to_response(_create_plan(db, current_user, client, payload))


@router.get("/clients/{client_id}/diet-plans", response_model=List[DietPlanResponse])
def list_client_diet_plans(
    client_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    """Return a client's plans ordered by start date, latest first."""
    client = get_owned_client(db, client_id, current_user)
    plans = (
        db.query(models.DietPlan)
        .filter(models.DietPlan.client_id == client.id)
        .order_by(models.DietPlan.start_date.desc(), models.DietPlan.id.desc())
        .all()
    )
    return [plan_to_response(p) for p in plans]


@router.post("/clients/{client_id}/diet-plans", response_model=DietPlanResponse, status_code=201)
def create_client_diet_plan(
    client_id: int,
    payload: DietPlanCreateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    client = get_owned_client(db, client_id, current_user)
    return plan_to_response(_create_plan(db, current_user, client, payload))


@router.get("/diet-plans/{plan_id}", response_model=DietPlanResponse)
def get_diet_plan(
    plan_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    return plan_to_response(_owned_plan(db, plan_id, current_user))


@router.put("/diet-plans/{plan_id}", response_model=DietPlanResponse)
def update_diet_plan(
    plan_id: int,
    payload: DietPlanUpdateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Partially update a plan.

    Sending `meals` replaces the meal list. Sending a legacy JSON `content`
    without `meals` replaces the meals with the decoded list.

    Raises:
        ValidationError: If the resulting end date precedes the start date.
    """
    plan = _owned_plan(db, plan_id, current_user)
    changes = payload.model_dump(exclude_unset=True)
    for key in _REQUIRED_FIELDS:
        if key in changes and changes[key] is None:
            changes.pop(key)

    if "content" in changes or "meals" in changes:
        meals_in = changes.pop("meals", None)
        content, meals = migrate_legacy_content(changes.get("content", plan.content), meals_in)
        if meals_in is None and not meals:
            meals = load_meals(plan.meals)
        changes["content"] = content
        changes["meals"] = json.dumps(meals, ensure_ascii=False)
    if "attachments" in changes:
        changes["attachments"] = json.dumps(changes["attachments"] or [])

    start = changes.get("start_date", plan.start_date)
    end = changes.get("end_date", plan.end_date)
    if end is not None and end < start:
        raise ValidationError("end_date cannot be before start_date", field="end_date")

    plan = BaseRepository(models.DietPlan, db, "Diet plan").update(plan, changes)
    logger.info("Diet plan %s updated: %s", plan.id, sorted(changes))
    return plan_to_response(plan)


@router.delete("/diet-plans/{plan_id}", response_model=MessageResponse)
def delete_diet_plan(
    plan_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    plan = _owned_plan(db, plan_id, current_user)
    BaseRepository(models.DietPlan, db, "Diet plan").delete(plan)
    logger.info("Diet plan %s deleted by user %s", plan_id, current_user.id)
    return MessageResponse(message="Diet plan deleted")
