"""Telegram API router.

Configures the caller's bot, sends broadcast messages to linked clients and
issues the reference codes clients use to pair their chat.
"""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import List

from core.config import TELEGRAM_BOT_NAME
from core.exceptions import ConfigurationError, ValidationError
from core.logger import get_logger
from core.repository import save
from core.security import get_current_user
from database import models
from database.deps import get_db_write
from schemas import (
    ActionResponse,
    ReferenceCodeResponse,
    SendMessageRequest,
    SendMessageResponse,
    TelegramInitRequest,
    TelegramStatusResponse,
)
from services.activity_log import record_activity
from services.telegram_service import TelegramService, generate_reference_code, telegram_service
from api.clients import get_owned_client

logger = get_logger("api.telegram")
router = APIRouter(prefix="/api", tags=["telegram"])

NO_BOT_NAME = "Henüz bot oluşturulmadı"


def get_telegram_service() -> TelegramService:
    """Dependency returning the process-wide bot manager."""
    return telegram_service


def _bot_name(user: models.User) -> str:
    return TELEGRAM_BOT_NAME if user.telegram_token else NO_BOT_NAME


def _selected_clients(db: Session, user_id: int, client_ids: List[int]) -> List[models.Client]:
    return (
        db.query(models.Client)
        .filter(models.Client.user_id == user_id, models.Client.id.in_(client_ids))
        .all()
    )


@router.post("/telegram/initialize", response_model=ActionResponse)
async def initialize_bot(
    payload: TelegramInitRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
    service: TelegramService = Depends(get_telegram_service),
):
    """Store the caller's bot token and start polling with it.

    Raises:
        ExternalServiceError: If Telegram rejects the token.
    """
    current_user.telegram_token = payload.token.strip()
    await run_in_threadpool(save, db, current_user)
    await service.start_bot(current_user.id, current_user.telegram_token)
    await run_in_threadpool(record_activity, db, current_user.id, "telegram", "Telegram botu başlatıldı")
    return ActionResponse(success=True, message="Telegram botu başlatıldı")


@router.post("/telegram/stop", response_model=ActionResponse)
async def stop_bot(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
    service: TelegramService = Depends(get_telegram_service),
):
    stopped = await service.stop_bot(current_user.id)
    if not stopped:
        return ActionResponse(success=True, message="Telegram botu zaten çalışmıyor")
    await run_in_threadpool(record_activity, db, current_user.id, "telegram", "Telegram botu durduruldu")
    return ActionResponse(success=True, message="Telegram botu durduruldu")


@router.get("/telegram/status", response_model=TelegramStatusResponse)
def bot_status(
    current_user: models.User = Depends(get_current_user),
    service: TelegramService = Depends(get_telegram_service),
):
    return TelegramStatusResponse(
        configured=bool(current_user.telegram_token),
        running=service.is_running(current_user.id),
        bot_name=_bot_name(current_user),
    )


@router.post("/telegram/send-message", response_model=SendMessageResponse)
async def send_message(
    payload: SendMessageRequest,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
    service: TelegramService = Depends(get_telegram_service),
):
    """Send a message to the selected clients.

    Clients that are unknown, belong to someone else, have no linked chat or
    whose delivery fails are reported in `failed`.

    Raises:
        ValidationError: If the client list or the message is empty.
        ConfigurationError: If the caller has no bot token yet.
    """
    if not payload.client_ids:
        raise ValidationError("Client list is missing or empty", field="client_ids")
    message = payload.message.strip()
    if not message:
        raise ValidationError("Message content is missing", field="message")
    if not current_user.telegram_token:
        raise ConfigurationError("Telegram bot is not configured yet. Enter a bot token first.",
                                 config_key="telegram_token")

    clients = await run_in_threadpool(_selected_clients, db, current_user.id, payload.client_ids)
    await run_in_threadpool(record_activity, db, current_user.id, "telegram",
                            f"{len(payload.client_ids)} danışana Telegram mesajı gönderildi")

    result = await service.send_to_clients(current_user, clients, message)
    found = {c.id for c in clients}
    missing = [cid for cid in payload.client_ids if cid not in found]
    logger.info("Telegram broadcast by user %s: %s sent, %s failed",
                current_user.id, len(result["success"]), len(result["failed"]) + len(missing))
    return SendMessageResponse(success=result["success"], failed=result["failed"] + missing)


@router.post("/clients/{client_id}/telegram-reference", response_model=ReferenceCodeResponse)
def create_reference_code(
    client_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db_write),
):
    """Issue a fresh pairing code for a client (unique among the caller's clients)."""
    client = get_owned_client(db, client_id, current_user)
    while True:
        code = generate_reference_code()
        clash = (
            db.query(models.Client)
            .filter(models.Client.user_id == current_user.id, models.Client.reference_code == code)
            .first()
        )
        if clash is None:
            break
    client.reference_code = code
    save(db, client)
    logger.info("Reference code issued for client %s", client.id)
    return ReferenceCodeResponse(success=True, reference_code=code, bot_name=_bot_name(current_user))
