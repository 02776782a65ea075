"""
SimulatorIntentParser — deterministic keyword-based parser for tests.

No LLM calls, no network. Recognises the handful of phrasings the
operator actually uses for the three known actions.
"""

import re

from src.domain.intent import NO_INTENT, IntentParser, IntentResult

_LIGHTS_OFF = re.compile(
    r"\blights?\s+off\b|\b(?:turn|switch|shut)\s+off\s+(?:the\s+|all\s+(?:the\s+)?)?lights?\b",
    re.IGNORECASE,
)

_SHUTDOWN = re.compile(
    r"\bshut\s*down\b|\bpower\s+(?:off|down)\b|\bturn\s+off\s+(?:the\s+)?server\b",
    re.IGNORECASE,
)

_ENVIRONMENTS = [
    (re.compile(r"\bprod(?:uction)?\b", re.IGNORECASE), "prod"),
    (re.compile(r"\bstag(?:e|ing)\b", re.IGNORECASE), "staging"),
    (re.compile(r"\bdev(?:elopment)?\b", re.IGNORECASE), "dev"),
]

# A guest name is one or more capitalised words
_NAME = r"([A-Z][\w'-]*(?:\s+[A-Z][\w'-]*)*)"

_ASSESS_PATTERNS = [
    re.compile(r"\b[Ii]s\s+" + _NAME + r"\s+a\s+(?:good|bad|nice|decent)\s+guest\b"),
    re.compile(r"\b[Aa]ssess\s+(?:the\s+)?(?:[Gg]uest\s+)?" + _NAME),
    re.compile(r"\b[Ww]hat\s+about\s+(?:the\s+)?[Gg]uest\s+" + _NAME),
]


def _environment(text: str) -> str:
    for pattern, env in _ENVIRONMENTS:
        if pattern.search(text):
            return env
    return "prod"


def _guest_name(text: str) -> str | None:
    for pattern in _ASSESS_PATTERNS:
        m = pattern.search(text)
        if m:
            return m.group(1).strip()
    return None


class SimulatorIntentParser(IntentParser):
    """
    Keyword-based intent parser for tests and offline runs.
    Shutdown always requires confirmation; the other actions never do.
    """

    async def parse(self, text: str) -> IntentResult:
        if not text or not text.strip():
            return NO_INTENT

        if _LIGHTS_OFF.search(text):
            return IntentResult(action="lights_off", parameters={}, require_confirm=False)

        if _SHUTDOWN.search(text):
            return IntentResult(
                action="shutdown_server",
                parameters={"environment": _environment(text)},
                require_confirm=True,
            )

        name = _guest_name(text)
        if name:
            return IntentResult(
                action="assess_guest",
                parameters={"name": name},
                require_confirm=False,
            )

        return NO_INTENT
