"""ActionRegistry and PendingAction behaviour."""

from src.actions.lights_off import LightsOffExecutor
from src.actions.shutdown import ShutdownExecutor
from src.domain.actions import ActionExecutor, ActionRegistry, PendingAction


class _Named(ActionExecutor):

    def __init__(self, name: str, result: str = ""):
        self.name = name
        self.result = result

    async def execute(self, parameters: dict[str, str]) -> str:
        return self.result


def test_lookup_is_case_insensitive():
    registry = ActionRegistry([ShutdownExecutor(delay=0)])
    assert isinstance(registry.lookup("SHUTDOWN_SERVER"), ShutdownExecutor)
    assert isinstance(registry.lookup("shutdown_server"), ShutdownExecutor)


def test_unknown_name_returns_none():
    registry = ActionRegistry([LightsOffExecutor(delay=0)])
    assert registry.lookup("reboot_router") is None
    assert registry.lookup("") is None


def test_first_registration_wins():
    first = _Named("lights_off", "first")
    registry = ActionRegistry([first, _Named("LIGHTS_OFF", "second")])
    assert registry.lookup("lights_off") is first
    assert registry.list_actions() == ["lights_off"]


def test_blank_names_are_skipped():
    registry = ActionRegistry([_Named(""), _Named("   ")])
    assert registry.list_actions() == []


def test_register_after_construction():
    registry = ActionRegistry()
    registry.register(ShutdownExecutor(delay=0))
    registry.register(LightsOffExecutor(delay=0))
    assert sorted(registry.list_actions()) == ["lights_off", "shutdown_server"]


def test_pending_action_requester_rules():
    mine = PendingAction("shutdown_server", {}, requested_by=42)
    anyone = PendingAction("shutdown_server", {}, requested_by=0)
    assert mine.may_be_confirmed_by(42)
    assert not mine.may_be_confirmed_by(99)
    assert anyone.may_be_confirmed_by(99)
    assert mine.created_at.tzinfo is not None
