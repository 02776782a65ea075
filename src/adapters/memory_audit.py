"""In-memory adapter for AuditLog — for tests and local development."""

from datetime import datetime, timezone

from src.domain.audit import AuditEntry, AuditEvent, AuditLog


class InMemoryAuditLog(AuditLog):

    def __init__(self):
        self._entries: list[AuditEntry] = []

    async def record(
        self,
        actor_id: int,
        action_name: str,
        event: AuditEvent,
        pending_id: str = "",
    ) -> None:
        self._entries.append(
            AuditEntry(
                created_at=datetime.now(timezone.utc),
                actor_id=actor_id,
                action_name=action_name,
                event=event,
                pending_id=pending_id,
            )
        )

    async def entries(self, limit: int = 50) -> list[AuditEntry]:
        return list(self._entries[-limit:]) if limit > 0 else []
