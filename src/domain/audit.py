"""
AuditLog port — who proposed, confirmed, cancelled or ran which action.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

AuditEvent = Literal["proposed", "confirmed", "cancelled", "executed"]


@dataclass
class AuditEntry:
    created_at: datetime
    actor_id: int
    action_name: str
    event: AuditEvent
    pending_id: str = ""   # empty for actions run without confirmation


class AuditLog(ABC):

    @abstractmethod
    async def record(
        self,
        actor_id: int,
        action_name: str,
        event: AuditEvent,
        pending_id: str = "",
    ) -> None:
        ...

    @abstractmethod
    async def entries(self, limit: int = 50) -> list[AuditEntry]:
        """Most recent entries, oldest first."""
        ...
