"""
In-memory adapters for PendingActionStore and MutexStore.

Both are process-wide and not persisted: a restart drops every pending
action, which is fine since the Confirm buttons that referenced them are
stale by then anyway.
"""

import asyncio
import threading

from src.domain.actions import PendingAction
from src.domain.pending import MutexStore, PendingActionStore


class InMemoryPendingActionStore(PendingActionStore):

    def __init__(self):
        self._actions: dict[str, PendingAction] = {}
        self._guard = threading.Lock()

    def try_add(self, pending_id: str, action: PendingAction) -> bool:
        key = pending_id.lower()
        with self._guard:
            if key in self._actions:
                return False
            self._actions[key] = action
            return True

    def try_get(self, pending_id: str) -> PendingAction | None:
        with self._guard:
            return self._actions.get(pending_id.lower())

    def try_remove(self, pending_id: str) -> PendingAction | None:
        with self._guard:
            return self._actions.pop(pending_id.lower(), None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._actions)


class InMemoryMutexStore(MutexStore):

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._guard = threading.Lock()

    def get_lock(self, pending_id: str) -> asyncio.Lock:
        key = pending_id.lower()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = asyncio.Lock()
                self._locks[key] = lock
            return lock

    def release(self, pending_id: str) -> bool:
        # Waiters already holding a reference keep using the old lock.
        with self._guard:
            return self._locks.pop(pending_id.lower(), None) is not None

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
