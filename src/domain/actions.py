"""
Actions — named, parameterized operations the bot can run.

An ActionExecutor is the capability; the ActionRegistry maps an action
name to it.  A PendingAction is a request to run one, waiting for the
requester to tap Confirm.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingAction:
    """A requested but not yet confirmed action. Never mutated once stored."""

    action_name: str
    parameters: dict[str, str]
    requested_by: int          # chat user id; 0 means anyone may confirm
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def may_be_confirmed_by(self, sender_id: int) -> bool:
        return self.requested_by == 0 or self.requested_by == sender_id


class ActionExecutor(ABC):
    """
    Port: one side-effecting operation, addressed by name.

    execute() returns a human-readable result.  It raises on invalid
    parameters or downstream failure; "nothing to do" is a normal result
    string, not an exception.  Cancellation arrives as asyncio task
    cancellation.
    """

    name: str = ""

    @abstractmethod
    async def execute(self, parameters: dict[str, str]) -> str:
        ...


class ActionRegistry:
    """
    Case-insensitive name → executor map, built once at startup.

    The first executor registered under a name wins; later duplicates are
    a configuration mistake and are only logged.
    """

    def __init__(self, executors: Iterable[ActionExecutor] = ()):
        self._executors: dict[str, ActionExecutor] = {}
        for executor in executors:
            self.register(executor)

    def register(self, executor: ActionExecutor) -> None:
        name = (executor.name or "").strip()
        if not name:
            log.warning("Ignoring executor %r without a name", executor)
            return
        key = name.lower()
        if key in self._executors:
            log.warning("Executor %r already registered — ignoring duplicate", name)
            return
        self._executors[key] = executor

    def lookup(self, name: str) -> ActionExecutor | None:
        return self._executors.get((name or "").lower())

    def list_actions(self) -> list[str]:
        return [e.name for e in self._executors.values()]
