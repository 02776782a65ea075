"""
assess_guest — judge a guest from the messages that mention them.

Flow:
  1. Code: find the most recent messages containing the guest's name
  2. AI: classify the combined text → GuestAssessment
  3. Code: format the verdict; optionally push a copy to another chat
"""

import logging

from src.background import spawn_detached
from src.communication.ports import ChatNotifier
from src.domain.actions import ActionExecutor
from src.domain.guest import GuestClassifier, GuestMessageStore

log = logging.getLogger(__name__)

MAX_MESSAGES = 20
MAX_COMBINED_CHARS = 20000


class AssessGuestExecutor(ActionExecutor):

    name = "assess_guest"

    def __init__(
        self,
        messages: GuestMessageStore,
        classifier: GuestClassifier,
        chat: ChatNotifier | None = None,
    ):
        self._messages = messages
        self._classifier = classifier
        self._chat = chat

    async def execute(self, parameters: dict[str, str]) -> str:
        name = (parameters.get("name") or "").strip()
        if not name:
            raise ValueError("parameter 'name' is required, e.g. {\"name\": \"John\"}")

        matches = await self._messages.search(name, limit=MAX_MESSAGES)
        if not matches:
            return f"No messages found containing '{name}'."

        combined = "\n---\n".join(m.body for m in matches)[:MAX_COMBINED_CHARS]
        assessment = await self._classifier.classify(combined)

        log.info(
            "assess_guest name=%r messages=%d → %s score=%.2f",
            name, len(matches), assessment.label, assessment.score,
        )

        text = (
            f"Assessment: {assessment.label.upper()} (score: {assessment.score:.2f})\n"
            f"Reason: {assessment.reason}"
        )

        forward_to = parameters.get("chat_id") or parameters.get("chatId")
        if self._chat is not None and forward_to:
            try:
                chat_id = int(forward_to)
            except ValueError:
                log.warning("assess_guest: ignoring non-numeric chat id %r", forward_to)
            else:
                spawn_detached(
                    self._chat.send_message(chat_id, text),
                    f"assess_guest forward to chat {chat_id}",
                )

        return text
