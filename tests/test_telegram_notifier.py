"""
TelegramChatNotifier tests against a fake HTTP session. No network.
"""

import pytest

from src.communication.ports import CallbackEvent, ChatMessage, InlineButton
from src.communication.telegram_notifier import TelegramApiError, TelegramChatNotifier


class FakeResponse:

    def __init__(self, body: dict):
        self._body = body

    def raise_for_status(self):
        pass

    def json(self):
        return self._body


class FakeSession:
    """Replays queued bodies and records every POST."""

    def __init__(self, *bodies: dict):
        self._bodies = list(bodies)
        self.posts: list[tuple[str, dict]] = []

    def post(self, url, json=None, timeout=None):
        self.posts.append((url, json))
        return FakeResponse(self._bodies.pop(0))


def _notifier(*bodies: dict) -> tuple[TelegramChatNotifier, FakeSession]:
    notifier = TelegramChatNotifier("TOKEN", poll_timeout=1, base_url="http://tg.test")
    session = FakeSession(*bodies)
    notifier.session = session
    return notifier, session


MESSAGE_UPDATE = {
    "update_id": 10,
    "message": {"from": {"id": 42}, "chat": {"id": 42}, "text": "/shutdown"},
}
CALLBACK_UPDATE = {
    "update_id": 11,
    "callback_query": {
        "id": "cbq-1",
        "from": {"id": 42},
        "message": {"chat": {"id": -100}},
        "data": "confirm:abc",
    },
}


def test_parse_message_update():
    event = TelegramChatNotifier._parse_update(MESSAGE_UPDATE)
    assert event == ChatMessage(sender_id=42, chat_id=42, text="/shutdown")


def test_parse_callback_update():
    event = TelegramChatNotifier._parse_update(CALLBACK_UPDATE)
    assert event == CallbackEvent(sender_id=42, chat_id=-100, data="confirm:abc", callback_id="cbq-1")


def test_parse_ignores_other_updates():
    assert TelegramChatNotifier._parse_update({"update_id": 1, "edited_message": {}}) is None
    assert TelegramChatNotifier._parse_update({"update_id": 2, "message": {"chat": {"id": 1}}}) is None
    assert TelegramChatNotifier._parse_update(
        {"update_id": 3, "callback_query": {"id": "x", "from": {"id": 1}, "data": "confirm:a"}}
    ) is None


@pytest.mark.asyncio
async def test_poll_advances_offset():
    notifier, session = _notifier(
        {"ok": True, "result": [MESSAGE_UPDATE, CALLBACK_UPDATE]},
        {"ok": True, "result": []},
    )

    events = await notifier.poll_events()
    assert [type(e) for e in events] == [ChatMessage, CallbackEvent]

    await notifier.poll_events()
    url, payload = session.posts[-1]
    assert url == "http://tg.test/botTOKEN/getUpdates"
    assert payload["offset"] == 12


@pytest.mark.asyncio
async def test_buttons_sent_as_inline_keyboard():
    notifier, session = _notifier({"ok": True, "result": {}})

    await notifier.send_with_buttons(42, "Confirm?", [
        InlineButton("✅ Yes", "confirm:abc"),
        InlineButton("❌ Cancel", "cancel:abc"),
    ])

    url, payload = session.posts[0]
    assert url.endswith("/sendMessage")
    assert payload["reply_markup"] == {"inline_keyboard": [[
        {"text": "✅ Yes", "callback_data": "confirm:abc"},
        {"text": "❌ Cancel", "callback_data": "cancel:abc"},
    ]]}


@pytest.mark.asyncio
async def test_answer_callback():
    notifier, session = _notifier({"ok": True, "result": True})
    await notifier.answer_callback("cbq-1")
    assert session.posts == [("http://tg.test/botTOKEN/answerCallbackQuery", {"callback_query_id": "cbq-1"})]


@pytest.mark.asyncio
async def test_answer_callback_without_id_is_noop():
    notifier, session = _notifier()
    await notifier.answer_callback("")
    assert session.posts == []


@pytest.mark.asyncio
async def test_not_ok_raises():
    notifier, _ = _notifier({"ok": False, "description": "Bad Request: chat not found"})
    with pytest.raises(TelegramApiError, match="chat not found"):
        await notifier.send_message(1, "hello")
