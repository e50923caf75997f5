"""Helpers shared by the assistant blueprints."""

from typing import Any, Dict

from flask import current_app, request

from ..services import AssistantServices


def get_services() -> AssistantServices:
    return current_app.extensions["assistant"]


def json_body() -> Dict[str, Any]:
    """Request JSON as a dict; anything else (missing, malformed, non-object) reads as {}."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}
