"""
Local process runner for the integration hub bot.

Long-polls Telegram for messages and button taps and hands each one to
the dispatcher, which runs actions right away or asks for confirmation.

Usage:
    source .env && python scripts/run.py

Environment variables (all required unless noted):
    TELEGRAM_BOT_TOKEN        - bot token (only when CHAT_CHANNEL=telegram)
    TELEGRAM_ALLOWED_USER_ID  - only this user may send commands (default: 0 = anyone)
    CHAT_CHANNEL              - "telegram" or "console" (default: console)
    ANTHROPIC_API_KEY         - Anthropic/Claude API key (only when INTENT_PARSER=claude)
    INTENT_PARSER             - "claude" or "simulator" (default: claude)
    DB_PATH                   - SQLite database path (default: data/hub.db)
    POLL_TIMEOUT              - Telegram long-poll timeout in seconds (default: 30)
    ACTION_TIMEOUT            - seconds before an action is abandoned (default: none)
"""

import asyncio
import logging
import os
import sys

# Make sure project root is on sys.path when run as a script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.actions.assess_guest import AssessGuestExecutor
from src.actions.lights_off import LightsOffExecutor
from src.actions.shutdown import ShutdownExecutor
from src.adapters.memory_pending import InMemoryMutexStore, InMemoryPendingActionStore
from src.adapters.sqlite_audit import SqliteAuditLog
from src.adapters.sqlite_guest_messages import SqliteGuestMessageStore
from src.communication.factory import create_chat_notifier
from src.communication.ports import ChatNotifier
from src.daemon import poll_once
from src.dispatcher import Dispatcher, DispatcherConfig
from src.domain.actions import ActionRegistry
from src.domain.guest import GuestClassifier
from src.domain.intent import IntentParser

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
log = logging.getLogger(__name__)

CONSOLE_IDLE_SECONDS = 1.0


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        print(f"ERROR: environment variable {name!r} is not set.", file=sys.stderr)
        sys.exit(1)
    return value


def _build_ai() -> tuple[IntentParser, GuestClassifier]:
    kind = os.environ.get("INTENT_PARSER", "claude")
    if kind == "simulator":
        from src.adapters.simulator_guest import SimulatorGuestClassifier
        from src.adapters.simulator_intent import SimulatorIntentParser

        return SimulatorIntentParser(), SimulatorGuestClassifier()

    from src.adapters.claude_guest import ClaudeGuestClassifier
    from src.adapters.claude_intent import ClaudeIntentParser

    api_key = _require_env("ANTHROPIC_API_KEY")
    return ClaudeIntentParser(api_key=api_key), ClaudeGuestClassifier(api_key=api_key)


def build_dispatcher(chat: ChatNotifier) -> Dispatcher:
    db_path = os.environ.get("DB_PATH", "data/hub.db")
    os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)

    parser, guest_classifier = _build_ai()
    timeout = os.environ.get("ACTION_TIMEOUT")

    registry = ActionRegistry([
        ShutdownExecutor(),
        LightsOffExecutor(),
        AssessGuestExecutor(
            messages=SqliteGuestMessageStore(db_path=db_path),
            classifier=guest_classifier,
            chat=chat,
        ),
    ])

    config = DispatcherConfig(
        registry=registry,
        pending=InMemoryPendingActionStore(),
        locks=InMemoryMutexStore(),
        parser=parser,
        chat=chat,
        audit=SqliteAuditLog(db_path=db_path),
        allowed_user_id=int(os.environ.get("TELEGRAM_ALLOWED_USER_ID", "0") or 0),
        execute_timeout=float(timeout) if timeout else None,
    )
    return Dispatcher(config)


async def main() -> None:
    channel = os.environ.get("CHAT_CHANNEL", "console")
    if channel == "telegram":
        _require_env("TELEGRAM_BOT_TOKEN")

    chat = create_chat_notifier(channel)
    dispatcher = build_dispatcher(chat)

    log.info(
        "Daemon started — channel=%s  allowed_user=%s",
        channel,
        os.environ.get("TELEGRAM_ALLOWED_USER_ID") or "anyone",
    )

    while True:
        await poll_once(dispatcher, chat, wait=False)
        if channel != "telegram":
            # Telegram long-polls; the console adapter returns immediately
            await asyncio.sleep(CONSOLE_IDLE_SECONDS)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Daemon stopped.")
