"""
PendingActionStore and MutexStore ports.

An id present in the PendingActionStore is an action awaiting
confirmation.  Absence means it was confirmed, cancelled, or never
existed — the dispatcher cannot tell which, and does not need to.

The MutexStore hands out one lock per id so that Confirm/Cancel taps on
the same id are handled one at a time.
"""

import asyncio
from abc import ABC, abstractmethod

from src.domain.actions import PendingAction


class PendingActionStore(ABC):
    """
    Port: keyed storage of actions awaiting confirmation.

    Every operation is atomic with respect to concurrent callers.
    """

    @abstractmethod
    def try_add(self, pending_id: str, action: PendingAction) -> bool:
        """Store the action. False if the id is already taken; never overwrites."""
        ...

    @abstractmethod
    def try_get(self, pending_id: str) -> PendingAction | None:
        """Look up without removing."""
        ...

    @abstractmethod
    def try_remove(self, pending_id: str) -> PendingAction | None:
        """Remove and return the action. Only one caller ever gets it back."""
        ...


class MutexStore(ABC):
    """
    Port: one asyncio.Lock per pending-action id, created on first use.

    release() disposes of the lock once its holder is done with the id.
    A fresh get_lock() racing with that disposal may create a second lock
    for the same id; that caller then finds nothing pending and answers
    "expired", so the race is harmless.
    """

    @abstractmethod
    def get_lock(self, pending_id: str) -> asyncio.Lock:
        ...

    @abstractmethod
    def release(self, pending_id: str) -> bool:
        """Forget the lock for this id. True if one was stored."""
        ...
