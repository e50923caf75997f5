"""
Flowlab assistant: AI-mediated flowchart mutation and comment clustering.
"""

from .errors import (
    AssistantError,
    InputValidationError,
    UpstreamError,
    ParseError,
    InvariantViolationError,
)
from .extractor import extract_json
from .response_cache import ResponseCache, CacheEntry

__all__ = [
    "AssistantError",
    "InputValidationError",
    "UpstreamError",
    "ParseError",
    "InvariantViolationError",
    "extract_json",
    "ResponseCache",
    "CacheEntry",
]
