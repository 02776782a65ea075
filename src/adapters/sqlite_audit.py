"""
SQLite adapter for AuditLog.

Use ":memory:" for tests, a file path for production.
"""

import sqlite3
from datetime import datetime, timezone

from src.domain.audit import AuditEntry, AuditEvent, AuditLog

_SCHEMA = """
CREATE TABLE IF NOT EXISTS action_audit (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at  TEXT NOT NULL,
    actor_id    INTEGER NOT NULL,
    action_name TEXT NOT NULL,
    event       TEXT NOT NULL,
    pending_id  TEXT NOT NULL DEFAULT ''
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SqliteAuditLog(AuditLog):

    def __init__(self, db_path: str = "hub.db"):
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)

    async def record(
        self,
        actor_id: int,
        action_name: str,
        event: AuditEvent,
        pending_id: str = "",
    ) -> None:
        self._conn.execute(
            "INSERT INTO action_audit (created_at, actor_id, action_name, event, pending_id)"
            " VALUES (?, ?, ?, ?, ?)",
            (_now(), actor_id, action_name, event, pending_id),
        )
        self._conn.commit()

    async def entries(self, limit: int = 50) -> list[AuditEntry]:
        if limit <= 0:
            return []
        rows = self._conn.execute(
            "SELECT * FROM (SELECT * FROM action_audit ORDER BY id DESC LIMIT ?)"
            " ORDER BY id",
            (limit,),
        ).fetchall()
        return [
            AuditEntry(
                created_at=datetime.fromisoformat(row["created_at"]),
                actor_id=row["actor_id"],
                action_name=row["action_name"],
                event=row["event"],
                pending_id=row["pending_id"],
            )
            for row in rows
        ]
