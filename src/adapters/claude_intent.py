"""
ClaudeIntentParser — uses Claude API to turn operator text into an action.

The system prompt (src/prompts/intent_parser.txt) is the source of truth
for which actions exist and which need confirmation.  The prompt returns
JSON that maps directly to IntentResult.

Every failure path — no key, API error, unparsable output — degrades to
"no actionable intent" so the bot never crashes on a bad completion.
"""

import logging
import os

import anthropic

from src.adapters.llm_json import extract_json
from src.domain.intent import NO_INTENT, IntentParser, IntentResult
from src.prompts import load_prompt

log = logging.getLogger(__name__)


class ClaudeIntentParser(IntentParser):
    """Intent parser backed by Claude claude-haiku-4-5-20251001 (fast + cheap)."""

    def __init__(self, api_key: str | None = None, model: str = "claude-haiku-4-5-20251001"):
        api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        self._client = anthropic.AsyncAnthropic(api_key=api_key) if api_key else None
        self._model = model
        self._system = load_prompt("intent_parser")

    async def parse(self, text: str) -> IntentResult:
        if not text or not text.strip():
            return NO_INTENT

        if self._client is None:
            log.warning("ANTHROPIC_API_KEY not configured — falling back to no intent")
            return NO_INTENT

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=300,
                system=self._system,
                messages=[{"role": "user", "content": text}],
            )
        except Exception as exc:
            log.error("Intent parser API call failed: %s", exc)
            return NO_INTENT

        raw = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        data = extract_json(raw)
        if data is None:
            log.warning("Failed to extract JSON from intent parser output: %.120r", raw)
            return NO_INTENT

        return _to_result(data)


def _to_result(data: dict) -> IntentResult:
    action = data.get("action")
    if not isinstance(action, str) or not action.strip():
        return NO_INTENT

    raw_params = data.get("parameters") or {}
    parameters = (
        {str(k): str(v) for k, v in raw_params.items() if v is not None}
        if isinstance(raw_params, dict)
        else {}
    )
    require_confirm = data.get("requireConfirm", data.get("require_confirm", False))
    if not isinstance(require_confirm, bool):
        # Anything but a real false asks first
        log.warning("Non-boolean requireConfirm %r for %s — asking for confirmation",
                    require_confirm, action)
        require_confirm = True
    return IntentResult(
        action=action.strip(),
        parameters=parameters,
        require_confirm=require_confirm,
    )
