"""
IntentParser contract tests.

Runs the shared contract against:
  - SimulatorIntentParser  (always, no API key needed)
  - ClaudeIntentParser     (skipped without ANTHROPIC_API_KEY)

Plus fail-soft checks for the Claude adapter that need no network.
"""

import os
from dataclasses import FrozenInstanceError

import pytest

from src.adapters.claude_intent import ClaudeIntentParser, _to_result
from src.adapters.simulator_intent import SimulatorIntentParser
from src.domain.intent import NO_INTENT
from tests.contracts.intent_parser_contract import IntentParserContract
from tests.fakes import BrokenClient


class TestSimulatorIntentParser(IntentParserContract):

    def create_parser(self):
        return SimulatorIntentParser()

    @pytest.mark.asyncio
    async def test_staging_environment_detected(self):
        result = await SimulatorIntentParser().parse("please shut down the staging box")
        assert result.action == "shutdown_server"
        assert result.parameters == {"environment": "staging"}


@pytest.mark.skipif(
    not os.environ.get("ANTHROPIC_API_KEY"),
    reason="ANTHROPIC_API_KEY not set",
)
class TestClaudeIntentParser(IntentParserContract):

    def create_parser(self):
        return ClaudeIntentParser()


class TestClaudeIntentParserFailSoft:

    @pytest.mark.asyncio
    async def test_missing_api_key_means_no_intent(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        parser = ClaudeIntentParser(api_key="")
        result = await parser.parse("shutdown production server")
        assert result.action is None

    def test_result_mapping(self):
        result = _to_result({
            "action": "shutdown_server",
            "parameters": {"environment": "prod", "force": True},
            "requireConfirm": True,
        })
        assert result.action == "shutdown_server"
        assert result.parameters == {"environment": "prod", "force": "True"}
        assert result.require_confirm is True

    def test_null_action_mapping(self):
        result = _to_result({"action": None, "parameters": {}, "requireConfirm": False})
        assert result.action is None
        assert result.parameters == {}

    def test_garbage_parameters_dropped(self):
        result = _to_result({"action": "lights_off", "parameters": ["x"], "requireConfirm": "yes"})
        assert result.action == "lights_off"
        assert result.parameters == {}
        assert result.require_confirm is True

    def test_string_confirm_flag_still_asks_first(self):
        result = _to_result({
            "action": "shutdown_server",
            "parameters": {"environment": "prod"},
            "requireConfirm": "true",
        })
        assert result.action == "shutdown_server"
        assert result.require_confirm is True

    def test_explicit_false_runs_immediately(self):
        result = _to_result({"action": "lights_off", "parameters": {}, "requireConfirm": False})
        assert result.require_confirm is False

    @pytest.mark.asyncio
    async def test_client_error_means_no_intent(self):
        parser = ClaudeIntentParser(api_key="test-key")
        parser._client = BrokenClient()
        result = await parser.parse("shutdown production server")
        assert result == NO_INTENT


def test_no_intent_is_immutable():
    with pytest.raises(FrozenInstanceError):
        NO_INTENT.action = "lights_off"
