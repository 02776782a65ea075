import asyncio
import logging

import requests

from .ports import CallbackEvent, ChatEvent, ChatMessage, ChatNotifier, InlineButton

log = logging.getLogger(__name__)

BASE_URL = "https://api.telegram.org"


class TelegramApiError(RuntimeError):
    """Telegram answered ok=false."""


class TelegramChatNotifier(ChatNotifier):
    """
    Adapter: real Telegram Bot API client.

    Uses long polling (getUpdates) rather than a webhook.  The blocking
    requests calls run in a worker thread so the event loop keeps serving
    other updates meanwhile.
    """

    def __init__(self, bot_token: str, poll_timeout: int = 30, base_url: str = BASE_URL):
        self._url = f"{base_url}/bot{bot_token}"
        self._poll_timeout = poll_timeout
        self._offset = 0
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    async def send_message(self, chat_id: int, text: str) -> None:
        await self._call("sendMessage", {"chat_id": chat_id, "text": text})

    async def send_with_buttons(
        self, chat_id: int, text: str, buttons: list[InlineButton]
    ) -> None:
        markup = {
            "inline_keyboard": [
                [{"text": b.label, "callback_data": b.callback_data} for b in buttons]
            ]
        }
        await self._call(
            "sendMessage",
            {"chat_id": chat_id, "text": text, "reply_markup": markup},
        )

    async def answer_callback(self, callback_id: str, text: str = "") -> None:
        if not callback_id:
            return
        payload: dict = {"callback_query_id": callback_id}
        if text:
            payload["text"] = text
        await self._call("answerCallbackQuery", payload)

    async def poll_events(self) -> list[ChatEvent]:
        updates = await self._call(
            "getUpdates",
            {
                "offset": self._offset,
                "timeout": self._poll_timeout,
                "allowed_updates": ["message", "callback_query"],
            },
            http_timeout=self._poll_timeout + 10,
        )

        events: list[ChatEvent] = []
        for update in updates or []:
            self._offset = max(self._offset, update.get("update_id", 0) + 1)
            event = self._parse_update(update)
            if event is not None:
                events.append(event)
        return events

    async def _call(self, method: str, payload: dict, http_timeout: float = 30):
        return await asyncio.to_thread(self._post, method, payload, http_timeout)

    def _post(self, method: str, payload: dict, http_timeout: float):
        resp = self.session.post(f"{self._url}/{method}", json=payload, timeout=http_timeout)
        resp.raise_for_status()
        data = resp.json()
        if not data.get("ok", False):
            raise TelegramApiError(f"{method} failed: {data.get('description', 'unknown error')}")
        return data.get("result")

    @staticmethod
    def _parse_update(update: dict) -> ChatEvent | None:
        callback = update.get("callback_query")
        if isinstance(callback, dict):
            message = callback.get("message") or {}
            chat_id = message.get("chat", {}).get("id")
            if chat_id is None:
                log.warning("update=%s: callback without originating chat — dropped",
                            update.get("update_id"))
                return None
            return CallbackEvent(
                sender_id=callback.get("from", {}).get("id", 0),
                chat_id=chat_id,
                data=callback.get("data") or "",
                callback_id=str(callback.get("id", "")),
            )

        message = update.get("message")
        if isinstance(message, dict):
            sender = message.get("from")
            if not isinstance(sender, dict):
                log.debug("update=%s: message without sender — dropped", update.get("update_id"))
                return None
            return ChatMessage(
                sender_id=sender.get("id", 0),
                chat_id=message.get("chat", {}).get("id", sender.get("id", 0)),
                text=message.get("text") or "",
            )

        return None
