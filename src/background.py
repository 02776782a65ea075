"""
Detached asyncio tasks.

Used for side effects nobody waits on (e.g. pushing a copy of a result to
another chat).  Their failure is logged and goes no further; ordering
relative to whatever the caller does next is not guaranteed.
"""

import asyncio
import logging
from typing import Any, Coroutine

log = logging.getLogger(__name__)

# The event loop only keeps weak references to tasks
_running: set[asyncio.Task] = set()


def spawn_detached(coro: Coroutine[Any, Any, Any], description: str) -> asyncio.Task:
    """Schedule coro on the running loop and forget about it."""
    task = asyncio.create_task(coro, name=description)
    _running.add(task)
    task.add_done_callback(_finished)
    return task


def _finished(task: asyncio.Task) -> None:
    _running.discard(task)
    if task.cancelled():
        log.debug("Detached task %r cancelled", task.get_name())
        return
    exc = task.exception()
    if exc is not None:
        log.warning("Detached task %r failed: %s", task.get_name(), exc)
