"""Telegram bot integration.

Each dietitian runs their own bot (their own BotFather token). The bot pairs
a client's chat with the client record through a short reference code
(``/start ABC123``) and afterwards only relays messages sent from the
dashboard. Bots poll inside the API's event loop and are tracked per user.
"""

import secrets
import string
from typing import Callable, Dict, Iterable, List, Optional

from sqlalchemy.orm import Session
from telegram import Bot, Update
from telegram.error import TelegramError
from telegram.ext import Application, ApplicationBuilder, CommandHandler, ContextTypes, MessageHandler, filters

from core.exceptions import ConfigurationError, ExternalServiceError
from core.logger import get_logger
from database import models
from database.database import WriteSessionLocal

logger = get_logger("services.telegram_service")

REFERENCE_CODE_LENGTH = 6
REFERENCE_ALPHABET = string.ascii_uppercase + string.digits

GREETING = (
    "Merhaba! Diyetim botuna hoş geldiniz. "
    "Diyetisyeninizden aldığınız bağlantı kodunu \"/start KODUNUZ\" şeklinde gönderiniz."
)
LINKED = "Bağlantınız başarıyla kuruldu! Artık diyetisyeninizden mesaj alabilirsiniz."
INVALID_CODE = "Referans kodunuz geçersiz. Lütfen diyetisyeninizden doğru kodu isteyin."
LINK_FAILED = "Bir hata oluştu. Lütfen tekrar deneyin veya diyetisyeninize başvurun."
RELAY_ONLY = (
    "Bu bot şu anda sadece diyetisyeninizden gelen mesajları iletmek için kullanılmaktadır. "
    "Lütfen diyetisyeninizle telefon veya e-posta üzerinden iletişime geçin."
)


def _mask(token: str) -> str:
    if not token or len(token) < 12:
        return "***"
    return f"{token[:5]}...{token[-5:]}"


def generate_reference_code(length: int = REFERENCE_CODE_LENGTH) -> str:
    """Random upper-case alphanumeric pairing code."""
    return "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(length))


def link_chat(db: Session, owner_id: int, reference_code: str, chat_id) -> Optional[models.Client]:
    """Attach `chat_id` to the owner's client holding `reference_code`.

    Returns:
        The linked client, or None when no client of that dietitian has the code.
    """
    code = (reference_code or "").strip().upper()
    if not code:
        return None
    client = (
        db.query(models.Client)
        .filter(models.Client.user_id == owner_id, models.Client.reference_code == code)
        .first()
    )
    if client is None:
        logger.info("No client of user %s has reference code %s", owner_id, code)
        return None
    client.telegram_chat_id = str(chat_id)
    db.commit()
    logger.info("Linked chat %s to client %s", chat_id, client.id)
    return client


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle ``/start`` and ``/start <CODE>``."""
    args = context.args or []
    if not args:
        await update.message.reply_text(GREETING)
        return
    if len(args) != 1 or not args[0].isalnum():
        await update.message.reply_text(INVALID_CODE)
        return

    owner_id = context.bot_data["owner_id"]
    session_factory = context.bot_data.get("session_factory", WriteSessionLocal)
    db = session_factory()
    try:
        client = link_chat(db, owner_id, args[0], update.effective_chat.id)
    except Exception:
        logger.exception("Linking chat %s failed", update.effective_chat.id)
        await update.message.reply_text(LINK_FAILED)
        return
    finally:
        db.close()

    await update.message.reply_text(LINKED if client else INVALID_CODE)


async def relay_only_reply(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Anything other than /start gets a fixed explanation."""
    if update.message is None:
        return
    logger.debug("Non-start message from chat %s", update.effective_chat.id)
    await update.message.reply_text(RELAY_ONLY)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE):
    logger.error("Telegram bot error: %s", context.error, exc_info=context.error)


def build_application(token: str, owner_id: int, session_factory: Callable[[], Session]) -> Application:
    """Create the python-telegram-bot application for one dietitian."""
    application = ApplicationBuilder().token(token).build()
    application.bot_data["owner_id"] = owner_id
    application.bot_data["session_factory"] = session_factory
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(MessageHandler(filters.ALL, relay_only_reply))
    application.add_error_handler(error_handler)
    return application


class TelegramService:
    """Keeps one polling bot per dietitian and sends messages to clients."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = WriteSessionLocal,
        application_factory: Callable[..., Application] = build_application,
        bot_factory: Callable[[str], Bot] = Bot,
    ):
        self.session_factory = session_factory
        self.application_factory = application_factory
        self.bot_factory = bot_factory
        self._applications: Dict[int, Application] = {}

    def is_running(self, user_id: int) -> bool:
        return user_id in self._applications

    async def start_bot(self, user_id: int, token: str) -> None:
        """Start (or restart) polling for `user_id` with `token`.

        Raises:
            ExternalServiceError: If Telegram rejects the token or cannot be reached.
        """
        await self.stop_bot(user_id)
        logger.info("Starting Telegram bot for user %s (token %s)", user_id, _mask(token))
        application = self.application_factory(token, user_id, self.session_factory)
        try:
            await application.initialize()
            await application.start()
            await application.updater.start_polling(drop_pending_updates=True)
        except TelegramError as exc:
            logger.exception("Telegram bot for user %s failed to start", user_id)
            await self._discard(application)
            raise ExternalServiceError("telegram", f"Bot could not be started: {exc}") from exc
        self._applications[user_id] = application
        logger.info("Telegram bot for user %s is polling", user_id)

    async def stop_bot(self, user_id: int) -> bool:
        """Stop the user's bot. Returns False when none was running."""
        application = self._applications.pop(user_id, None)
        if application is None:
            return False
        await self._discard(application)
        logger.info("Telegram bot for user %s stopped", user_id)
        return True

    async def _discard(self, application: Application) -> None:
        """Undo whatever part of the start sequence `application` went through."""
        if application.updater is not None and application.updater.running:
            await application.updater.stop()
        if application.running:
            await application.stop()
        try:
            await application.shutdown()
        except TelegramError:
            logger.warning("Telegram application shutdown failed", exc_info=True)

    async def stop_all(self) -> None:
        for user_id in list(self._applications):
            await self.stop_bot(user_id)

    async def _send_all(self, bot, clients: Iterable[models.Client], message: str) -> Dict[str, List[int]]:
        result = {"success": [], "failed": []}
        for client in clients:
            if not client.telegram_chat_id:
                logger.info("Client %s has no linked Telegram chat", client.id)
                result["failed"].append(client.id)
                continue
            try:
                await bot.send_message(chat_id=int(client.telegram_chat_id), text=message)
            except (TelegramError, ValueError) as exc:
                logger.warning("Sending to client %s failed: %s", client.id, exc)
                result["failed"].append(client.id)
                continue
            result["success"].append(client.id)
        return result

    async def send_to_clients(self, user: models.User, clients: Iterable[models.Client],
                              message: str) -> Dict[str, List[int]]:
        """Send `message` to every client with a linked chat.

        Uses the running bot when there is one, otherwise a short-lived `Bot`
        built from the stored token.

        Raises:
            ConfigurationError: If the user has not configured a bot token.
        """
        if not user.telegram_token:
            raise ConfigurationError("Telegram bot is not configured yet", config_key="telegram_token")

        application = self._applications.get(user.id)
        if application is not None:
            return await self._send_all(application.bot, clients, message)

        try:
            async with self.bot_factory(user.telegram_token) as bot:
                return await self._send_all(bot, clients, message)
        except TelegramError as exc:
            logger.exception("Could not open Telegram bot for user %s", user.id)
            raise ExternalServiceError("telegram", f"Telegram is unreachable: {exc}") from exc


# export singleton
telegram_service = TelegramService()
__all__ = [
    "TelegramService",
    "telegram_service",
    "build_application",
    "generate_reference_code",
    "link_chat",
]
