import asyncio

from src.domain.actions import ActionExecutor


class ShutdownExecutor(ActionExecutor):
    """Shut down a server environment. Destructive: always proposed for confirmation."""

    name = "shutdown_server"

    def __init__(self, delay: float = 0.5):
        self._delay = delay

    async def execute(self, parameters: dict[str, str]) -> str:
        environment = parameters.get("environment") or "unknown"
        await asyncio.sleep(self._delay)
        return f"Server {environment} shutdown executed."
