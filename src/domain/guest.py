"""
GuestMessageStore and GuestClassifier ports, used by the assess_guest action.

The store holds raw guest messages; the classifier reads a batch of them
and decides whether the guest looks like a good one.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Literal


@dataclass
class GuestMessage:
    message_id: int
    body: str
    created_at: datetime


@dataclass
class GuestAssessment:
    """Structured verdict on a guest, derived from their messages."""
    label: Literal["good", "bad", "uncertain"]
    is_good: bool
    score: float       # 0.0–1.0
    reason: str


class GuestMessageStore(ABC):

    @abstractmethod
    async def add_message(self, body: str) -> int:
        """Store a guest message. Returns its id."""
        ...

    @abstractmethod
    async def search(self, term: str, limit: int = 20) -> list[GuestMessage]:
        """Messages whose body contains term (case-insensitive), newest first."""
        ...


class GuestClassifier(ABC):
    """
    Port: assess a guest from their combined messages.

    Fails soft: when classification is impossible the result is
    label="uncertain", score=0.5.
    """

    @abstractmethod
    async def classify(self, combined_messages: str) -> GuestAssessment:
        ...
