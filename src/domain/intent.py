"""
IntentParser port — understands what the operator is asking for.

AI is used here: the parser reads free text and returns structured data
(an action name, its parameters, and whether it must be confirmed).  The
dispatcher then operates on that data.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class IntentResult:
    """Structured output of intent parsing — no raw text, only data."""
    action: str | None                                   # None = nothing actionable
    parameters: dict[str, str] = field(default_factory=dict)
    require_confirm: bool = False


NO_INTENT = IntentResult(action=None)


class IntentParser(ABC):
    """
    Port: parse a free-text chat message into an action request.

    Implementations may use an LLM (ClaudeIntentParser) or deterministic
    keyword matching (SimulatorIntentParser).  Both fail soft: empty text
    or a failed classification yields an IntentResult with action=None,
    never an exception.
    """

    @abstractmethod
    async def parse(self, text: str) -> IntentResult:
        ...
