"""System prompts for the Claude adapters, one .txt file per prompt."""

from functools import lru_cache
from pathlib import Path

_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    """Return the prompt `name`.txt, stripped. Raises FileNotFoundError if absent."""
    return (_DIR / f"{name}.txt").read_text(encoding="utf-8").strip()
