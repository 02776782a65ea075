"""
Core polling logic for the hub daemon.

Extracted from scripts/run.py so it can be imported and tested
without pulling in Claude or Telegram adapter dependencies.
"""

import asyncio
import logging

from src.background import spawn_detached
from src.communication.ports import CallbackEvent, ChatEvent, ChatNotifier
from src.dispatcher import Dispatcher, DispatchResult

log = logging.getLogger(__name__)


async def poll_once(
    dispatcher: Dispatcher,
    chat: ChatNotifier,
    wait: bool = True,
) -> list["asyncio.Task[DispatchResult]"]:
    """
    One poll cycle.

    1. Fetch inbound events from the chat platform.
    2. Dispatch each one in its own task — events never queue behind
       each other, so a Cancel tap is handled while a slow action runs.
    3. Optionally wait for those tasks (tests do; the daemon loop doesn't).

    Returns the dispatch tasks, in event order.
    """
    try:
        events = await chat.poll_events()
    except Exception as exc:
        log.error("Failed to fetch chat updates: %s", exc)
        return []

    if not events:
        return []

    log.debug("Fetched %d event(s)", len(events))

    tasks = [
        spawn_detached(_handle(dispatcher, chat, event), _describe(event))
        for event in events
    ]
    if wait:
        await asyncio.gather(*tasks, return_exceptions=True)
    return tasks


async def _handle(dispatcher: Dispatcher, chat: ChatNotifier, event: ChatEvent) -> DispatchResult:
    if isinstance(event, CallbackEvent) and event.callback_id:
        spawn_detached(
            chat.answer_callback(event.callback_id),
            f"answer callback {event.callback_id}",
        )

    result = await dispatcher.dispatch(event)
    if result.action != "ignored":
        log.debug("chat=%d action=%s: %s", event.chat_id, result.action, result.details[:60])
    return result


def _describe(event: ChatEvent) -> str:
    kind = "callback" if isinstance(event, CallbackEvent) else "message"
    return f"dispatch {kind} chat={event.chat_id} user={event.sender_id}"
