"""
Centralized LLM client for the Flowlab assistant.

Provides a unified interface for calling an OpenAI-compatible chat-completion
provider with an explicit timeout and optional debug logging when
DEBUG_PROMPTS=true.

The provider's reply is validated here, at the adapter boundary: callers get a
tagged ProviderResponse (ProviderSuccess or ProviderFailure) and never touch the
raw `choices[0].message.content` shape themselves.
"""

import json
import os
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests
from requests import Timeout as RequestsTimeout

from .logger import get_logger
from .config import get_llm_api_key, get_llm_base_url, get_llm_timeout, DEBUG_LOG_DIR

logger = get_logger("llm_client", __name__)

# Sensitive keys to redact from debug logs
SENSITIVE_KEYS = {
    "api_key",
    "apikey",
    "authorization",
    "password",
    "token",
    "secret",
    "credentials",
}


@dataclass(frozen=True)
class ProviderSuccess:
    """Provider returned a well-formed completion."""

    content: str
    model: str
    duration_ms: float
    usage: Dict[str, Any] = field(default_factory=dict)
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ProviderFailure:
    """Transport, HTTP or response-shape failure."""

    error: str
    model: str
    duration_ms: float
    status_code: Optional[int] = None
    error_code: str = "PROVIDER_ERROR"
    ok: bool = field(default=False, init=False)


ProviderResponse = Union[ProviderSuccess, ProviderFailure]


def _redact_sensitive(data: Dict[str, Any]) -> Dict[str, Any]:
    """Redact sensitive keys from a dictionary.

    Args:
        data: Dictionary that may contain sensitive keys.

    Returns:
        New dictionary with sensitive values replaced with "[REDACTED]".
    """
    redacted = {}
    for key, value in data.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            redacted[key] = "[REDACTED]"
        elif isinstance(value, dict):
            redacted[key] = _redact_sensitive(value)
        elif isinstance(value, list):
            redacted[key] = [
                _redact_sensitive(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            redacted[key] = value
    return redacted


def _write_debug_log(
    url: str,
    request_data: Dict[str, Any],
    response_data: Optional[Dict[str, Any]] = None,
) -> None:
    """Write debug log file for an LLM request/response pair.

    Only active when DEBUG_PROMPTS=true; files land in logs/debug/ by default.
    """
    if os.getenv("DEBUG_PROMPTS", "false").lower() != "true":
        return

    debug_dir = Path(DEBUG_LOG_DIR)
    debug_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    unique_id = str(uuid.uuid4())[:8]
    filename = debug_dir / f"req_{timestamp}_{unique_id}.json"

    log_entry: Dict[str, Any] = {
        "url": url,
        "request": _redact_sensitive(request_data),
        "timestamp": datetime.now().isoformat(),
    }
    if response_data:
        log_entry["response"] = response_data

    try:
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(log_entry, f, indent=2, ensure_ascii=False)
        logger.debug(f"Debug log written: {filename}")
    except OSError as e:
        logger.warning(f"Failed to write debug log: {e}")


def extract_message_content(data: Any) -> Optional[str]:
    """Return choices[0].message.content if the response has that shape, else None."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        return None
    return content


def chat_completion(
    *,
    model: str,
    messages: List[Dict[str, str]],
    temperature: float,
    response_format: Optional[str] = None,
    timeout: Optional[int] = None,
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
) -> ProviderResponse:
    """Call the chat-completion endpoint once.

    Args:
        model: Provider model identifier.
        messages: Chat messages ([{role, content}, ...]).
        temperature: Sampling temperature.
        response_format: "json_object" to request structured output, None for plain text.
        timeout: Request timeout in seconds (defaults to TIMEOUT_MATRIX["LLM_CALL"]).
        base_url: Override for the provider base URL.
        api_key: Override for the provider API key.

    Returns:
        ProviderSuccess with the message content, or ProviderFailure describing
        what went wrong. This function does not raise for provider problems.
    """
    url = f"{(base_url or get_llm_base_url()).rstrip('/')}/chat/completions"
    payload: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
    }
    if response_format:
        payload["response_format"] = {"type": response_format}

    headers = {"Content-Type": "application/json"}
    key = api_key or get_llm_api_key()
    if key:
        headers["Authorization"] = f"Bearer {key}"

    request_data: Dict[str, Any] = {"payload": payload, "headers": _redact_sensitive(headers)}
    _write_debug_log(url, request_data)

    start = time.monotonic()
    try:
        response = requests.post(
            url,
            json=payload,
            headers=headers,
            timeout=timeout or get_llm_timeout(),
        )
        response.raise_for_status()
    except RequestsTimeout as exc:
        duration_ms = (time.monotonic() - start) * 1000
        logger.warning(
            "LLM request timed out",
            extra={"payload": {"model": model, "url": url, "duration_ms": duration_ms}},
        )
        return ProviderFailure(
            error=f"Request timed out: {exc}",
            model=model,
            duration_ms=duration_ms,
            error_code="TIMEOUT_EXCEEDED",
        )
    except requests.RequestException as exc:
        duration_ms = (time.monotonic() - start) * 1000
        status_code = getattr(getattr(exc, "response", None), "status_code", None)
        error_text = str(exc)
        if getattr(exc, "response", None) is not None:
            _write_debug_log(url, request_data, {"error": exc.response.text, "status_code": status_code})
        logger.error(
            f"LLM request failed: {url}",
            extra={"payload": {"error": error_text, "model": model, "status_code": status_code}},
            exc_info=True,
        )
        return ProviderFailure(
            error=error_text,
            model=model,
            duration_ms=duration_ms,
            status_code=status_code,
        )

    try:
        data = response.json()
    except ValueError as exc:
        duration_ms = (time.monotonic() - start) * 1000
        logger.error("LLM response body is not JSON", extra={"payload": {"model": model, "error": str(exc)}})
        return ProviderFailure(
            error=f"Provider returned a non-JSON body: {exc}",
            model=model,
            duration_ms=duration_ms,
            error_code="MALFORMED_RESPONSE",
        )

    duration_ms = (time.monotonic() - start) * 1000
    _write_debug_log(url, request_data, data if isinstance(data, dict) else {"body": data})

    content = extract_message_content(data)
    if content is None:
        logger.warning(
            "LLM response missing choices[0].message.content",
            extra={"payload": {"model": model, "duration_ms": duration_ms}},
        )
        return ProviderFailure(
            error="Provider response did not contain choices[0].message.content",
            model=model,
            duration_ms=duration_ms,
            error_code="MALFORMED_RESPONSE",
        )

    usage = data.get("usage") if isinstance(data.get("usage"), dict) else {}
    logger.debug(
        "LLM call completed",
        extra={"payload": {"model": model, "duration_ms": duration_ms, "usage": usage}},
    )
    return ProviderSuccess(
        content=content,
        model=str(data.get("model") or model),
        duration_ms=duration_ms,
        usage=usage,
    )
