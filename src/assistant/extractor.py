"""
Recover a JSON object from raw model output.

Models in JSON mode usually return a bare object; plain completion models wrap
it in markdown fences or prose. Strategies are tried in order and the first
that yields a JSON object wins:

1. the whole text parsed directly
2. the interior of a ``` fenced block (optionally tagged `json`)
3. the greedy substring from the first `{` to the last `}`
"""

import json
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..shared.logger import get_logger
from .errors import ParseError

logger = get_logger("assistant", __name__)

_FENCE_RE = re.compile(r"```[ \t]*(?:json)?[ \t]*\r?\n?([\s\S]*?)```", re.IGNORECASE)


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(candidate)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def _direct(text: str) -> Iterator[str]:
    yield text.strip()


def _fenced(text: str) -> Iterator[str]:
    for match in _FENCE_RE.finditer(text):
        yield match.group(1).strip()


def _outer_braces(text: str) -> Iterator[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        yield text[start:end + 1]


STRATEGIES: List[Tuple[str, Callable[[str], Iterator[str]]]] = [
    ("direct", _direct),
    ("fenced_block", _fenced),
    ("outer_braces", _outer_braces),
]


def extract_json_with_strategy(raw_text: Optional[str]) -> Tuple[Dict[str, Any], str]:
    """Like extract_json, but also report which strategy succeeded."""
    if raw_text is None or not str(raw_text).strip():
        raise ParseError("Model returned empty output", raw_text=raw_text)

    text = str(raw_text)
    for name, strategy in STRATEGIES:
        for candidate in strategy(text):
            parsed = _loads_object(candidate)
            if parsed is not None:
                if name != "direct":
                    logger.debug(f"Recovered JSON via {name} strategy")
                return parsed, name

    raise ParseError("Failed to parse JSON from model response", raw_text=text)


def extract_json(raw_text: Optional[str]) -> Dict[str, Any]:
    """Return the first JSON object recoverable from raw_text.

    Raises:
        ParseError: if no strategy yields a JSON object. The exception keeps the
            full raw text on `raw_text` for diagnostics.
    """
    parsed, _ = extract_json_with_strategy(raw_text)
    return parsed
