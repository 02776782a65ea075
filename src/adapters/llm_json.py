"""Pull a JSON object out of an LLM completion."""

import json


def extract_json(raw: str) -> dict | None:
    """
    Parse the model output as a JSON object.

    Tolerates markdown code fences and prose around the object.
    Returns None when no JSON object can be recovered.
    """
    text = raw.strip()
    # Strip markdown code fences if the model wraps the JSON
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()

    for candidate in (text, _outer_braces(text)):
        if not candidate:
            continue
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return None


def _outer_braces(text: str) -> str | None:
    first = text.find("{")
    last = text.rfind("}")
    if first >= 0 and last > first:
        return text[first:last + 1]
    return None
