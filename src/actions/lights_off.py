import asyncio

from src.domain.actions import ActionExecutor


class LightsOffExecutor(ActionExecutor):
    name = "lights_off"

    def __init__(self, delay: float = 0.2):
        self._delay = delay

    async def execute(self, parameters: dict[str, str]) -> str:
        await asyncio.sleep(self._delay)
        return "Lights turned off."
