from .ports import CallbackEvent, ChatEvent, ChatMessage, ChatNotifier, InlineButton


class ConsoleChatNotifier(ChatNotifier):
    """
    Adapter: print to console, buffer inbound events in memory. For dev/testing.

    Test helpers:
        simulate_message()   — queue a direct message for the next poll
        simulate_callback()  — queue a button tap for the next poll
        sent                 — list of (chat_id, text, buttons) tuples
        answered             — callback ids acknowledged via answer_callback()
    """

    def __init__(self, echo: bool = True):
        self._echo = echo
        self._pending: list[ChatEvent] = []
        self._next_callback_id = 1
        self.sent: list[tuple[int, str, list[InlineButton]]] = []
        self.answered: list[str] = []

    async def send_message(self, chat_id: int, text: str) -> None:
        self.sent.append((chat_id, text, []))
        self._print(chat_id, text)

    async def send_with_buttons(
        self, chat_id: int, text: str, buttons: list[InlineButton]
    ) -> None:
        self.sent.append((chat_id, text, list(buttons)))
        self._print(chat_id, text)
        if self._echo:
            for b in buttons:
                print(f"  [{b.label}]  → {b.callback_data}")

    async def answer_callback(self, callback_id: str, text: str = "") -> None:
        self.answered.append(callback_id)

    async def poll_events(self) -> list[ChatEvent]:
        events = self._pending.copy()
        self._pending.clear()
        return events

    def simulate_message(self, sender_id: int, text: str, chat_id: int | None = None) -> ChatMessage:
        event = ChatMessage(
            sender_id=sender_id,
            chat_id=chat_id if chat_id is not None else sender_id,
            text=text,
        )
        self._pending.append(event)
        return event

    def simulate_callback(self, sender_id: int, data: str, chat_id: int | None = None) -> CallbackEvent:
        event = CallbackEvent(
            sender_id=sender_id,
            chat_id=chat_id if chat_id is not None else sender_id,
            data=data,
            callback_id=f"console-cb-{self._next_callback_id}",
        )
        self._next_callback_id += 1
        self._pending.append(event)
        return event

    def texts(self) -> list[str]:
        """Convenience: just the text of every message sent so far."""
        return [text for _, text, _ in self.sent]

    def _print(self, chat_id: int, text: str) -> None:
        if not self._echo:
            return
        print(f"\n{'=' * 60}")
        print(f"  TO CHAT: {chat_id}")
        print(f"{'=' * 60}")
        print(text)
        print(f"{'=' * 60}\n")
