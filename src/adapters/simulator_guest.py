"""
SimulatorGuestClassifier — deterministic keyword scoring for tests.

No LLM calls, no network. Counts friendly versus troublesome words across
the guest's messages.
"""

import re

from src.domain.guest import GuestAssessment, GuestClassifier

_POSITIVE = [
    r"\bthank(?:s| you)\b", r"\bmerci\b", r"\bplease\b", r"\bs'il vous pla[iî]t\b",
    r"\blovely\b", r"\bgreat\b", r"\bclean\b", r"\bwonderful\b", r"\bparfait\b",
]

_NEGATIVE = [
    r"\bparty\b", r"\bf[eê]te\b", r"\brefund\b", r"\brembours", r"\bdirty\b",
    r"\bbroke(?:n)?\b", r"\bcomplain", r"\bnoise\b", r"\bsmok(?:e|ing)\b",
    r"\bdamage", r"\bextra guests?\b",
]


def _count(text: str, patterns: list[str]) -> int:
    lower = text.lower()
    return sum(len(re.findall(p, lower)) for p in patterns)


class SimulatorGuestClassifier(GuestClassifier):

    async def classify(self, combined_messages: str) -> GuestAssessment:
        good = _count(combined_messages, _POSITIVE)
        bad = _count(combined_messages, _NEGATIVE)

        if good == bad:
            return GuestAssessment(
                label="uncertain", is_good=True, score=0.5,
                reason="No clear signal in the messages",
            )

        score = round(good / (good + bad), 2)
        if bad > good:
            return GuestAssessment(
                label="bad", is_good=False, score=score,
                reason=f"{bad} troublesome mention(s) against {good} friendly one(s)",
            )
        return GuestAssessment(
            label="good", is_good=True, score=score,
            reason=f"{good} friendly mention(s) against {bad} troublesome one(s)",
        )
