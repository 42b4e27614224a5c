"""Clients API router.

CRUD over the calling dietitian's clients. Other routers reuse
`get_owned_client` so ownership is checked the same way everywhere:
a missing client is a 404, someone else's client a 403.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional

from core.exceptions import PermissionDeniedError
from core.logger import get_logger
from core.repository import BaseRepository, save
from core.security import get_current_user
from database import models
from database.deps import get_db_read, get_db_write
from schemas import ClientCreateRequest, ClientResponse, ClientUpdateRequest
from services.activity_log import record_activity
from services.form_helpers import format_phone_number
from services.health_metrics import health_metrics

logger = get_logger("api.clients")
router = APIRouter(prefix="/api", tags=["clients"])

_REQUIRED_FIELDS = ("name", "email", "status")


def get_owned_client(db: Session, client_id: int, user: models.User) -> models.Client:
    """Load a client and make sure it belongs to `user`.

    Raises:
        NotFoundError: If the client does not exist.
        PermissionDeniedError: If it belongs to another dietitian.
    """
    client = BaseRepository(models.Client, db, "Client").get_or_404(client_id)
    if client.user_id != user.id:
        logger.warning("User %s tried to access client %s", user.id, client_id)
        raise PermissionDeniedError("Client", client_id)
    return client


def client_to_response(client: models.Client) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        name=client.name,
        email=client.email,
        phone=client.phone,
        birth_date=client.birth_date.isoformat() if client.birth_date else None,
        age=health_metrics.calculate_age(client.birth_date) if client.birth_date else None,
        gender=client.gender,
        height=client.height,
        starting_weight=client.starting_weight,
        target_weight=client.target_weight,
        activity_level=client.activity_level,
        medical_history=client.medical_history,
        dietary_restrictions=client.dietary_restrictions,
        notes=client.notes,
        profile_picture=client.profile_picture,
        status=client.status,
        reference_code=client.reference_code,
        telegram_linked=bool(client.telegram_chat_id),
        created_at=client.created_at.isoformat() if client.created_at else None,
    )


@router.get("/clients", response_model=List[ClientResponse])
def list_clients(
    search: Optional[str] = Query(None, description="Matches name, e-mail or phone"),
    status: Optional[str] = Query(None, description="active or inactive"),
    sort: str = Query("name", pattern="^(name|created_at|-created_at)$"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_read),
):
    """Return the caller's clients, optionally filtered and sorted."""
    query = db.query(models.Client).filter(models.Client.user_id == current_user.id)
    if status:
        query = query.filter(models.Client.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            models.Client.name.ilike(pattern),
            models.Client.email.ilike(pattern),
            models.Client.phone.ilike(pattern),
        ))

    if sort == "created_at":
        query = query.order_by(models.Client.created_at.asc(), models.Client.id.asc())
    elif sort == "-created_at":
        query = query.order_by(models.Client.created_at.desc(), models.Client.id.desc())
    else:
        query = query.order_by(models.Client.name.asc())

    clients = query.all()
    logger.info("Listing %s clients for user %s", len(clients), current_user.id)
    return [client_to_response(c) for c in clients]


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(
    client_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    return client_to_response(get_owned_client(db, client_id, current_user))


@router.post("/clients", response_model=ClientResponse, status_code=201)
def create_client(
    payload: ClientCreateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Add a client for the caller and record it in the activity feed."""
    data = payload.model_dump()
    data["email"] = data["email"].lower()
    data["phone"] = format_phone_number(data.get("phone"))
    client = save(db, models.Client(user_id=current_user.id, **data))
    record_activity(db, current_user.id, "client", f"Yeni danışan eklendi: {client.name}")
    logger.info("Client %s created for user %s", client.id, current_user.id)
    return client_to_response(client)


@router.put("/clients/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    payload: ClientUpdateRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Partially update a client; only the fields sent are changed."""
    client = get_owned_client(db, client_id, current_user)
    changes = payload.model_dump(exclude_unset=True)
    for key in _REQUIRED_FIELDS:
        if key in changes and changes[key] is None:
            changes.pop(key)
    if changes.get("email"):
        changes["email"] = changes["email"].lower()
    if "phone" in changes:
        changes["phone"] = format_phone_number(changes["phone"])

    client = BaseRepository(models.Client, db, "Client").update(client, changes)
    logger.info("Client %s updated: %s", client.id, sorted(changes))
    return client_to_response(client)


@router.delete("/clients/{client_id}", status_code=204)
def delete_client(
    client_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Delete a client together with its measurements, plans and appointments."""
    client = get_owned_client(db, client_id, current_user)
    BaseRepository(models.Client, db, "Client").delete(client)
    logger.info("Client %s deleted by user %s", client_id, current_user.id)
    return Response(status_code=204)
