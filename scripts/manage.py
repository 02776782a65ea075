#!/usr/bin/env python3
"""
Operator CLI — inspect the audit trail and the guest messages assess_guest reads.

Usage (from project root):
    python scripts/manage.py                         # last 20 audit entries
    python scripts/manage.py audit 50                # last 50 audit entries
    python scripts/manage.py add-message "text..."   # store a guest message
    python scripts/manage.py search "John Doe"       # messages mentioning a name
"""

import asyncio
import os
import sys
import textwrap

# Allow running as `python scripts/manage.py` from project root.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.adapters.sqlite_audit import SqliteAuditLog
from src.adapters.sqlite_guest_messages import SqliteGuestMessageStore

DB_PATH = os.environ.get("DB_PATH", "data/hub.db")


def _wrap(text: str, width: int = 72, indent: str = "    ") -> str:
    return textwrap.fill(text, width=width, initial_indent=indent, subsequent_indent=indent)


async def list_audit(audit: SqliteAuditLog, limit: int) -> None:
    entries = await audit.entries(limit)
    if not entries:
        print("No audit entries.")
        return

    print(f"\n{'When':<20}  {'User':>12}  {'Event':<10}  {'Action':<16}  Id")
    print("-" * 80)
    for e in entries:
        when = e.created_at.strftime("%Y-%m-%d %H:%M:%S")
        print(f"{when:<20}  {e.actor_id:>12}  {e.event:<10}  {e.action_name:<16}  {e.pending_id[:8]}")
    print()


async def add_message(store: SqliteGuestMessageStore, body: str) -> None:
    message_id = await store.add_message(body)
    print(f"Stored guest message #{message_id}.")


async def search(store: SqliteGuestMessageStore, term: str) -> None:
    matches = await store.search(term)
    if not matches:
        print(f"No messages found containing {term!r}.")
        return
    for m in matches:
        print(f"#{m.message_id}  {m.created_at:%Y-%m-%d %H:%M}")
        print(_wrap(m.body))
        print()


async def main() -> None:
    os.makedirs(os.path.dirname(DB_PATH) or ".", exist_ok=True)
    args = sys.argv[1:]

    if not args or args[0] == "audit":
        limit = int(args[1]) if len(args) >= 2 else 20
        await list_audit(SqliteAuditLog(DB_PATH), limit)
    elif args[0] == "add-message" and len(args) >= 2:
        await add_message(SqliteGuestMessageStore(DB_PATH), " ".join(args[1:]))
    elif args[0] == "search" and len(args) >= 2:
        await search(SqliteGuestMessageStore(DB_PATH), " ".join(args[1:]))
    else:
        print(__doc__)


if __name__ == "__main__":
    asyncio.run(main())
