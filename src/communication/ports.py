from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ChatMessage:
    """A direct message: free text or a /command."""

    sender_id: int
    chat_id: int
    text: str


@dataclass
class CallbackEvent:
    """A tap on an inline button of a message we sent earlier."""

    sender_id: int
    chat_id: int
    data: str            # opaque payload, e.g. "confirm:<id>"
    callback_id: str = ""  # platform id used to acknowledge the tap


ChatEvent = ChatMessage | CallbackEvent


@dataclass
class InlineButton:
    label: str
    callback_data: str


class ChatNotifier(ABC):
    """
    Port: how we talk with the operator.

    The dispatcher depends ONLY on this interface.
    It doesn't know or care whether messages go through the Telegram
    Bot API or get printed to a console.
    """

    @abstractmethod
    async def send_message(self, chat_id: int, text: str) -> None:
        ...

    @abstractmethod
    async def send_with_buttons(
        self, chat_id: int, text: str, buttons: list[InlineButton]
    ) -> None:
        """Send text with a single row of inline buttons."""
        ...

    @abstractmethod
    async def answer_callback(self, callback_id: str, text: str = "") -> None:
        """Acknowledge a button tap so the client stops its loading spinner."""
        ...

    @abstractmethod
    async def poll_events(self) -> list[ChatEvent]:
        """
        Return inbound events received since the last poll.
        Events are returned at most once.
        """
        ...
