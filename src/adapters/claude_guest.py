"""
Claude-powered adapter for GuestClassifier.
"""

import logging
import os

import anthropic

from src.adapters.llm_json import extract_json
from src.domain.guest import GuestAssessment, GuestClassifier
from src.prompts import load_prompt

log = logging.getLogger(__name__)


def _uncertain(reason: str) -> GuestAssessment:
    return GuestAssessment(label="uncertain", is_good=True, score=0.5, reason=reason)


class ClaudeGuestClassifier(GuestClassifier):

    def __init__(self, api_key: str | None = None, model: str = "claude-haiku-4-5-20251001"):
        api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        self._client = anthropic.AsyncAnthropic(api_key=api_key) if api_key else None
        self._model = model
        self._system = load_prompt("guest_classifier")

    async def classify(self, combined_messages: str) -> GuestAssessment:
        if self._client is None:
            log.warning("ANTHROPIC_API_KEY not configured — returning uncertain assessment")
            return _uncertain("API key not configured")

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=200,
                system=self._system,
                messages=[{"role": "user", "content": f"### MESSAGES:\n{combined_messages}"}],
            )
        except Exception as exc:
            log.error("Guest classifier API call failed: %s", exc)
            return _uncertain("API error")

        raw = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        data = extract_json(raw)
        if data is None:
            log.warning("Failed to extract JSON from guest classifier output: %.120r", raw)
            return _uncertain("Unparsable model output")

        label = str(data.get("label", "uncertain")).lower()
        if label not in ("good", "bad", "uncertain"):
            label = "uncertain"
        try:
            score = min(max(float(data.get("score", 0.5)), 0.0), 1.0)
        except (TypeError, ValueError):
            score = 0.5

        return GuestAssessment(
            label=label,
            is_good=bool(data.get("isGood", data.get("is_good", label != "bad"))),
            score=score,
            reason=str(data.get("reason") or ""),
        )
