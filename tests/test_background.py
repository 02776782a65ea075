import asyncio
import logging

import pytest

from src import background
from src.background import spawn_detached


async def _boom():
    raise RuntimeError("chat unreachable")


async def _ok():
    return "done"


@pytest.mark.asyncio
async def test_failure_is_logged_not_raised(caplog):
    with caplog.at_level(logging.WARNING, logger="src.background"):
        task = spawn_detached(_boom(), "forward result")
        await asyncio.gather(task, return_exceptions=True)
        await asyncio.sleep(0)

    assert "forward result" in caplog.text
    assert "chat unreachable" in caplog.text


@pytest.mark.asyncio
async def test_finished_tasks_are_dropped():
    task = spawn_detached(_ok(), "noop")
    assert await task == "done"
    await asyncio.sleep(0)
    assert task not in background._running
