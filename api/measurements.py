"""Measurements API router.

Body measurements belong to a client. When a measurement arrives without a
body-fat value it is estimated from BMI, age and gender.
"""

import json
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from core.exceptions import PermissionDeniedError
from core.logger import get_logger
from core.repository import BaseRepository, save
from core.security import get_current_user
from database import models
from database.deps import get_db_read, get_db_write
from schemas import MeasurementCreateRequest, MeasurementResponse, MeasurementSummary, MeasurementUpdateRequest
from services.activity_log import record_activity
from services.health_metrics import health_metrics, round_half_up
from api.clients import get_owned_client

logger = get_logger("api.measurements")
router = APIRouter(prefix="/api", tags=["measurements"])


def measurement_to_response(m: models.Measurement) -> MeasurementResponse:
    return MeasurementResponse(
        id=m.id,
        client_id=m.client_id,
        date=m.date.isoformat(),
        weight=m.weight,
        height=m.height,
        neck=m.neck,
        arm=m.arm,
        chest=m.chest,
        waist=m.waist,
        abdomen=m.abdomen,
        hip=m.hip,
        thigh=m.thigh,
        calf=m.calf,
        notes=m.notes,
        images=json.loads(m.images) if m.images else [],
        body_fat_percentage=m.body_fat_percentage,
    )


def estimate_body_fat(client: models.Client, weight: Optional[float], height: Optional[float]) -> Optional[float]:
    """Body-fat estimate for a measurement, or None when inputs are missing."""
    height = height or client.height
    if not (weight and height and client.gender):
        return None
    bmi = health_metrics.calculate_bmi(weight, height)
    age = health_metrics.calculate_age(client.birth_date)
    value = health_metrics.estimate_body_fat_percentage(bmi, age, client.gender)
    return round_half_up(value, 1)


def _owned_measurement(db: Session, measurement_id: int, user: models.User) -> models.Measurement:
    measurement = BaseRepository(models.Measurement, db, "Measurement").get_or_404(measurement_id)
    if measurement.client.user_id != user.id:
        raise PermissionDeniedError("Measurement", measurement_id)
    return measurement


@router.get("/clients/{client_id}/measurements", response_model=List[MeasurementResponse])
def list_measurements(
    client_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    """Return a client's measurements, newest first."""
    client = get_owned_client(db, client_id, current_user)
    rows = (
        db.query(models.Measurement)
        .filter(models.Measurement.client_id == client.id)
        .order_by(models.Measurement.date.desc(), models.Measurement.id.desc())
        .all()
    )
    return [measurement_to_response(m) for m in rows]


@router.post("/clients/{client_id}/measurements", response_model=MeasurementResponse, status_code=201)
def create_measurement(
    client_id: int,
    payload: MeasurementCreateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Record a measurement; body fat is estimated when not supplied."""
    client = get_owned_client(db, client_id, current_user)
    data = payload.model_dump()
    data["images"] = json.dumps(data.get("images") or [])
    if data.get("date") is None:
        data.pop("date")
    if data.get("body_fat_percentage") is None:
        data["body_fat_percentage"] = estimate_body_fat(client, data.get("weight"), data.get("height"))

    measurement = save(db, models.Measurement(client_id=client.id, **data))
    record_activity(db, current_user.id, "measurement", f"{client.name} için yeni ölçüm kaydedildi")
    logger.info("Measurement %s recorded for client %s", measurement.id, client.id)
    return measurement_to_response(measurement)


@router.get("/clients/{client_id}/measurements/summary", response_model=MeasurementSummary)
def measurement_summary(
    client_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    """Progress overview: first and latest entries, weight change and BMI."""
    client = get_owned_client(db, client_id, current_user)
    rows = (
        db.query(models.Measurement)
        .filter(models.Measurement.client_id == client.id)
        .order_by(models.Measurement.date.asc(), models.Measurement.id.asc())
        .all()
    )
    summary = MeasurementSummary(count=len(rows))
    if not rows:
        return summary

    summary.first = measurement_to_response(rows[0])
    summary.latest = measurement_to_response(rows[-1])

    weighed = [m for m in rows if m.weight]
    if weighed:
        first_w, latest = weighed[0], weighed[-1]
        summary.weight_change = round_half_up(latest.weight - first_w.weight, 1)
        if client.target_weight:
            summary.remaining_to_target = round_half_up(client.target_weight - latest.weight, 1)
        height = latest.height or client.height
        if height:
            bmi = health_metrics.calculate_bmi(latest.weight, height)
            summary.bmi = round_half_up(bmi, 2)
            summary.bmi_classification = health_metrics.get_bmi_classification(bmi)
    return summary


@router.put("/measurements/{measurement_id}", response_model=MeasurementResponse)
def update_measurement(
    measurement_id: int,
    payload: MeasurementUpdateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Partially update a measurement.

    A new weight or height refreshes the body-fat estimate unless the body
    supplies `body_fat_percentage` itself.
    """
    measurement = _owned_measurement(db, measurement_id, current_user)
    changes = payload.model_dump(exclude_unset=True)
    if "date" in changes and changes["date"] is None:
        changes.pop("date")
    if "images" in changes:
        changes["images"] = json.dumps(changes["images"] or [])
    if ("weight" in changes or "height" in changes) and changes.get("body_fat_percentage") is None:
        changes["body_fat_percentage"] = estimate_body_fat(
            measurement.client,
            changes.get("weight", measurement.weight),
            changes.get("height", measurement.height),
        )
    measurement = BaseRepository(models.Measurement, db, "Measurement").update(measurement, changes)
    logger.info("Measurement %s updated: %s", measurement.id, sorted(changes))
    return measurement_to_response(measurement)


@router.delete("/measurements/{measurement_id}", status_code=204)
def delete_measurement(
    measurement_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    measurement = _owned_measurement(db, measurement_id, current_user)
    BaseRepository(models.Measurement, db, "Measurement").delete(measurement)
    logger.info("Measurement %s deleted", measurement_id)
    return Response(status_code=204)
