"""
SQLite adapter for GuestMessageStore.

Use ":memory:" for tests, a file path for production.
"""

import sqlite3
from datetime import datetime, timezone

from src.domain.guest import GuestMessage, GuestMessageStore

_SCHEMA = """
CREATE TABLE IF NOT EXISTS guest_messages (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    body        TEXT NOT NULL,
    created_at  TEXT NOT NULL
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqliteGuestMessageStore(GuestMessageStore):

    def __init__(self, db_path: str = "hub.db"):
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)

    async def add_message(self, body: str) -> int:
        cur = self._conn.execute(
            "INSERT INTO guest_messages (body, created_at) VALUES (?, ?)",
            (body, _now()),
        )
        self._conn.commit()
        assert cur.lastrowid is not None
        return cur.lastrowid

    async def search(self, term: str, limit: int = 20) -> list[GuestMessage]:
        # LIKE is case-insensitive for ASCII in SQLite
        rows = self._conn.execute(
            "SELECT * FROM guest_messages WHERE body LIKE ? ESCAPE '\\'"
            " ORDER BY id DESC LIMIT ?",
            (f"%{_escape_like(term)}%", limit),
        ).fetchall()
        return [
            GuestMessage(
                message_id=row["id"],
                body=row["body"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]
