"""Tests for the Telegram bot manager, its handlers and the Telegram API routes.

Real network access is replaced by small fakes passed to `TelegramService`.
"""
import asyncio
from types import SimpleNamespace

import pytest
from telegram.error import TelegramError

from conftest import make_client
from core.config import TELEGRAM_BOT_NAME
from core.exceptions import ConfigurationError, ExternalServiceError
from database import models
from services import telegram_service as tg
from services.telegram_service import TelegramService, generate_reference_code, link_chat
from api.telegram import NO_BOT_NAME, get_telegram_service

BLOCKED_CHAT = 666


class FakeBot:
    def __init__(self, token=None):
        self.token = token
        self.sent = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def send_message(self, chat_id, text):
        if chat_id == BLOCKED_CHAT:
            raise TelegramError("Forbidden: bot was blocked by the user")
        self.sent.append((chat_id, text))


class FakeUpdater:
    def __init__(self, fail=False):
        self.running = False
        self.fail = fail

    async def start_polling(self, **kwargs):
        if self.fail:
            raise TelegramError("Conflict: terminated by other getUpdates request")
        self.running = True

    async def stop(self):
        self.running = False


class FakeApplication:
    def __init__(self, token, owner_id, session_factory, fail=False):
        self.token = token
        self.owner_id = owner_id
        self.fail = fail
        self.running = False
        self.shut_down = False
        self.updater = FakeUpdater()
        self.bot = FakeBot(token)

    async def initialize(self):
        if self.fail:
            raise TelegramError("Unauthorized")

    async def start(self):
        self.running = True

    async def stop(self):
        self.running = False

    async def shutdown(self):
        self.shut_down = True


class Recorder:
    """Collects the applications and bots the service creates."""

    def __init__(self, fail=False):
        self.fail = fail
        self.applications = []
        self.bots = []

    def application(self, token, owner_id, session_factory):
        app = FakeApplication(token, owner_id, session_factory, fail=self.fail)
        self.applications.append(app)
        return app

    def bot(self, token):
        bot = FakeBot(token)
        self.bots.append(bot)
        return bot


@pytest.fixture()
def recorder():
    return Recorder()


@pytest.fixture()
def service(session_factory, recorder):
    return TelegramService(session_factory=session_factory,
                           application_factory=recorder.application,
                           bot_factory=recorder.bot)


@pytest.fixture()
def tg_api(api, service):
    from main import app

    app.dependency_overrides[get_telegram_service] = lambda: service
    return api


def _fake_update(chat_id=555):
    replies = []

    async def reply_text(text):
        replies.append(text)

    update = SimpleNamespace(
        message=SimpleNamespace(reply_text=reply_text),
        effective_chat=SimpleNamespace(id=chat_id),
    )
    return update, replies


def _context(args, owner_id, session_factory):
    return SimpleNamespace(args=args, bot_data={"owner_id": owner_id, "session_factory": session_factory})


def test_reference_code_shape():
    code = generate_reference_code()
    assert len(code) == 6
    assert code.isalnum() and code == code.upper()


def test_link_chat_matches_only_owner_clients(db, user, other_user):
    client = make_client(db, user, reference_code="ABC123")
    assert link_chat(db, other_user.id, "ABC123", 555) is None
    linked = link_chat(db, user.id, " abc123 ", 555)
    assert linked.id == client.id
    assert linked.telegram_chat_id == "555"
    assert link_chat(db, user.id, "", 555) is None


def test_start_command_replies(db, user, session_factory):
    make_client(db, user, reference_code="KOD777")

    update, replies = _fake_update()
    asyncio.run(tg.start_command(update, _context([], user.id, session_factory)))
    asyncio.run(tg.start_command(update, _context(["yanlış-kod"], user.id, session_factory)))
    asyncio.run(tg.start_command(update, _context(["NOPE00"], user.id, session_factory)))
    asyncio.run(tg.start_command(update, _context(["KOD777"], user.id, session_factory)))
    assert replies == [tg.GREETING, tg.INVALID_CODE, tg.INVALID_CODE, tg.LINKED]

    db.expire_all()
    assert db.query(models.Client).filter_by(reference_code="KOD777").one().telegram_chat_id == "555"


def test_other_messages_get_relay_notice():
    update, replies = _fake_update()
    asyncio.run(tg.relay_only_reply(update, SimpleNamespace()))
    assert replies == [tg.RELAY_ONLY]


def test_service_start_restart_and_stop(service, recorder):
    async def scenario():
        await service.start_bot(1, "111:first-token-value")
        await service.start_bot(1, "111:second-token-value")
        assert service.is_running(1)
        assert await service.stop_bot(1) is True
        assert await service.stop_bot(1) is False

    asyncio.run(scenario())
    first, second = recorder.applications
    assert first.shut_down and not first.running and not first.updater.running
    assert second.shut_down
    assert not service.is_running(1)


def test_service_start_failure_is_external_error(session_factory):
    failing = Recorder(fail=True)
    service = TelegramService(session_factory=session_factory, application_factory=failing.application)
    with pytest.raises(ExternalServiceError):
        asyncio.run(service.start_bot(1, "bad"))
    assert not service.is_running(1)


def test_failed_polling_shuts_the_application_down(session_factory):
    apps = []

    def application_factory(token, owner_id, factory):
        app = FakeApplication(token, owner_id, factory)
        app.updater = FakeUpdater(fail=True)
        apps.append(app)
        return app

    service = TelegramService(session_factory=session_factory, application_factory=application_factory)
    with pytest.raises(ExternalServiceError):
        asyncio.run(service.start_bot(1, "111:token-value"))

    app = apps[0]
    assert not app.running
    assert app.shut_down
    assert not service.is_running(1)


def test_send_requires_token(service, db, user):
    with pytest.raises(ConfigurationError):
        asyncio.run(service.send_to_clients(user, [], "Merhaba"))


def test_send_uses_running_bot(service, recorder, db, user):
    user.telegram_token = "111:token"
    linked = make_client(db, user, telegram_chat_id="1001")

    async def scenario():
        await service.start_bot(user.id, user.telegram_token)
        return await service.send_to_clients(user, [linked], "Merhaba")

    result = asyncio.run(scenario())
    assert result == {"success": [linked.id], "failed": []}
    assert recorder.applications[0].bot.sent == [(1001, "Merhaba")]
    assert recorder.bots == []


def test_status_and_reference_code(tg_api, headers, db, client_record, other_headers):
    status = tg_api.get("/api/telegram/status", headers=headers).json()
    assert status == {"configured": False, "running": False, "bot_name": NO_BOT_NAME}

    res = tg_api.post(f"/api/clients/{client_record.id}/telegram-reference", headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["bot_name"] == NO_BOT_NAME
    db.expire_all()
    assert db.get(models.Client, client_record.id).reference_code == body["reference_code"]

    assert tg_api.post(f"/api/clients/{client_record.id}/telegram-reference",
                       headers=other_headers).status_code == 403


def test_initialize_and_stop(tg_api, headers, db, user, recorder):
    res = tg_api.post("/api/telegram/initialize", headers=headers, json={"token": " 111:abcdefghijkl "})
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Telegram botu başlatıldı"}
    assert recorder.applications[0].token == "111:abcdefghijkl"

    status = tg_api.get("/api/telegram/status", headers=headers).json()
    assert status == {"configured": True, "running": True, "bot_name": TELEGRAM_BOT_NAME}

    assert tg_api.post("/api/telegram/stop", headers=headers).json()["message"] == "Telegram botu durduruldu"
    assert tg_api.post("/api/telegram/stop", headers=headers).json()["message"] == "Telegram botu zaten çalışmıyor"

    db.expire_all()
    descriptions = [a.description for a in db.query(models.Activity).filter_by(user_id=user.id)
                    .order_by(models.Activity.id)]
    assert descriptions == ["Telegram botu başlatıldı", "Telegram botu durduruldu"]


def test_initialize_with_rejected_token(api, headers, session_factory):
    from main import app

    failing = Recorder(fail=True)
    app.dependency_overrides[get_telegram_service] = lambda: TelegramService(
        session_factory=session_factory, application_factory=failing.application)
    res = api.post("/api/telegram/initialize", headers=headers, json={"token": "bad"})
    assert res.status_code == 502
    assert res.json()["details"]["service"] == "telegram"


def test_send_message(tg_api, headers, db, user, other_user, recorder):
    user.telegram_token = "111:token"
    db.commit()
    linked = make_client(db, user, telegram_chat_id="1001")
    unlinked = make_client(db, user, name="Elif Şahin", email="elif@diyetim.com.tr")
    blocked = make_client(db, user, name="Ali Veli", email="ali@diyetim.com.tr",
                          telegram_chat_id=str(BLOCKED_CHAT))
    foreign = make_client(db, other_user, name="Başka", email="baska@diyetim.com.tr", telegram_chat_id="2002")

    ids = [linked.id, unlinked.id, blocked.id, foreign.id, 9999]
    res = tg_api.post("/api/telegram/send-message", headers=headers, json={"client_ids": ids, "message": " Merhaba "})
    assert res.status_code == 200
    body = res.json()
    assert body["success"] == [linked.id]
    assert set(body["failed"]) == {unlinked.id, blocked.id, foreign.id, 9999}
    assert recorder.bots[0].sent == [(1001, "Merhaba")]

    activity = db.query(models.Activity).filter_by(type="telegram").one()
    assert activity.description == "5 danışana Telegram mesajı gönderildi"


def test_send_message_validation(tg_api, headers, db, user, client_record):
    empty_list = tg_api.post("/api/telegram/send-message", headers=headers, json={"message": "Merhaba"})
    assert empty_list.status_code == 400
    assert empty_list.json()["details"]["field"] == "client_ids"

    blank = tg_api.post("/api/telegram/send-message", headers=headers,
                        json={"client_ids": [client_record.id], "message": "   "})
    assert blank.json()["details"]["field"] == "message"

    unconfigured = tg_api.post("/api/telegram/send-message", headers=headers,
                               json={"client_ids": [client_record.id], "message": "Merhaba"})
    assert unconfigured.status_code == 400
    assert unconfigured.json()["details"]["config_key"] == "telegram_token"
