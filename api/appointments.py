"""Appointments API router.

Upcoming and past are computed against the current time on every request;
they are never stored as a state.
"""

from datetime import datetime
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional

from core.exceptions import PermissionDeniedError
from core.logger import get_logger
from core.repository import BaseRepository, save
from core.security import get_current_user
from database import models
from database.deps import get_db_read, get_db_write
from schemas import AppointmentCreateRequest, AppointmentResponse, AppointmentUpdateRequest
from services.activity_log import record_activity
from services.date_formatter import format_date_for_display
from api.clients import get_owned_client

logger = get_logger("api.appointments")
router = APIRouter(prefix="/api", tags=["appointments"])

_REQUIRED_FIELDS = ("date", "duration", "type", "status")


def appointment_to_response(a: models.Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        client_id=a.client_id,
        client_name=a.client.name if a.client else None,
        user_id=a.user_id,
        date=a.date.isoformat(),
        duration=a.duration,
        type=a.type,
        status=a.status,
        notes=a.notes,
        created_at=a.created_at.isoformat() if a.created_at else None,
        updated_at=a.updated_at.isoformat() if a.updated_at else None,
    )


def _owned_appointment(db: Session, appointment_id: int, user: models.User) -> models.Appointment:
    appointment = BaseRepository(models.Appointment, db, "Appointment").get_or_404(appointment_id)
    if appointment.user_id != user.id:
        raise PermissionDeniedError("Appointment", appointment_id)
    return appointment


def partition_query(query, view: str, now: Optional[datetime] = None):
    """Narrow and order an appointment query for the upcoming/past/all views."""
    now = now or models.utcnow()
    if view == "upcoming":
        return query.filter(models.Appointment.date >= now).order_by(models.Appointment.date.asc())
    if view == "past":
        return query.filter(models.Appointment.date < now).order_by(models.Appointment.date.desc())
    return query.order_by(models.Appointment.date.asc())


@router.get("/appointments", response_model=List[AppointmentResponse])
def list_appointments(
    view: str = Query("all", pattern="^(upcoming|past|all)$"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    """Return the caller's appointments for the requested view."""
    query = db.query(models.Appointment).filter(models.Appointment.user_id == current_user.id)
    rows = partition_query(query, view).all()
    logger.info("Listing %s %s appointments for user %s", len(rows), view, current_user.id)
    return [appointment_to_response(a) for a in rows]


@router.get("/clients/{client_id}/appointments", response_model=List[AppointmentResponse])
def list_client_appointments(
    client_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    client = get_owned_client(db, client_id, current_user)
    rows = (
        db.query(models.Appointment)
        .filter(models.Appointment.client_id == client.id)
        .order_by(models.Appointment.date.asc())
        .all()
    )
    return [appointment_to_response(a) for a in rows]


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
def create_appointment(
    payload: AppointmentCreateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Book an appointment with one of the caller's clients."""
    client = get_owned_client(db, payload.client_id, current_user)
    appointment = models.Appointment(
        client_id=client.id,
        user_id=current_user.id,
        date=payload.date,
        duration=payload.duration,
        type=payload.type,
        status=payload.status,
        notes=payload.notes,
    )
    appointment = save(db, appointment)
    record_activity(
        db, current_user.id, "appointment",
        f"{client.name} için {format_date_for_display(appointment.date)} tarihinde yeni randevu oluşturuldu",
    )
    logger.info("Appointment %s booked for client %s", appointment.id, client.id)
    return appointment_to_response(appointment)


@router.put("/appointments/{appointment_id}", response_model=AppointmentResponse)
def update_appointment(
    appointment_id: int,
    payload: AppointmentUpdateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    appointment = _owned_appointment(db, appointment_id, current_user)
    changes = payload.model_dump(exclude_unset=True)
    for key in _REQUIRED_FIELDS:
        if key in changes and changes[key] is None:
            changes.pop(key)
    appointment = BaseRepository(models.Appointment, db, "Appointment").update(appointment, changes)
    logger.info("Appointment %s updated: %s", appointment.id, sorted(changes))
    return appointment_to_response(appointment)


@router.delete("/appointments/{appointment_id}", status_code=204)
def delete_appointment(
    appointment_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    appointment = _owned_appointment(db, appointment_id, current_user)
    BaseRepository(models.Appointment, db, "Appointment").delete(appointment)
    logger.info("Appointment %s deleted", appointment_id)
    return Response(status_code=204)
