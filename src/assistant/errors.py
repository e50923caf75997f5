"""
Error taxonomy for the assistant handlers.

Every failure a handler can surface is an AssistantError subclass carrying a
stable `code` and the HTTP status the API layer maps it to.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..shared.utils import truncate


class AssistantError(Exception):
    """Base class for handler-level failures."""

    code = "ASSISTANT_ERROR"
    http_status = 500

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self, include_code: bool = False) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        if include_code:
            body["code"] = self.code
        return body


class InputValidationError(AssistantError):
    """Missing or malformed request fields. No upstream call is made."""

    code = "INVALID_INPUT"
    http_status = 400


class UpstreamError(AssistantError):
    """The model provider call failed (network, auth, rate limit, bad shape)."""

    code = "UPSTREAM_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details)
        self.model = model
        self.status_code = status_code


class ParseError(AssistantError):
    """No extraction strategy recovered a JSON object from the model text."""

    code = "PARSE_ERROR"

    def __init__(self, message: str, raw_text: Optional[str] = None) -> None:
        super().__init__(message, details=f"raw model output: {truncate(raw_text or '', 300)}")
        self.raw_text = raw_text


class InvariantViolationError(AssistantError):
    """Parsed model output failed a postcondition check."""

    code = "INVARIANT_VIOLATION"

    def __init__(self, message: str, violations: Optional[Dict[str, List[str]]] = None) -> None:
        self.violations = {k: v for k, v in (violations or {}).items() if v}
        details = "; ".join(f"{kind}: {', '.join(ids)}" for kind, ids in sorted(self.violations.items()))
        super().__init__(message, details=details or None)


def format_validation_error(exc: ValidationError, limit: int = 5) -> str:
    """Compact `loc: msg; ...` summary of a pydantic ValidationError."""
    problems = []
    for err in exc.errors()[:limit]:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        problems.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(problems)
