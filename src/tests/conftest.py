"""
Pytest configuration and shared fixtures for the Flowlab assistant tests.

A network firewall is applied to every test: `requests.post` raises unless a
test patches it explicitly. Model calls are normally replaced by a scripted
transport handed to ModelInvocationPipeline.
"""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest
import requests

from src.assistant.pipeline import ModelInvocationPipeline
from src.assistant.response_cache import ResponseCache
from src.assistant.server import create_app
from src.shared.llm_client import ProviderFailure, ProviderSuccess


class ScriptedTransport:
    """Stands in for llm_client.chat_completion.

    Each call pops the next scripted reply: a str becomes a ProviderSuccess with
    that content, a ProviderFailure is returned as-is, and a callable is invoked
    with the call kwargs.
    """

    def __init__(self, replies: Optional[List[Any]] = None) -> None:
        self.replies = list(replies or [])
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *replies: Any) -> "ScriptedTransport":
        self.replies.extend(replies)
        return self

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if not self.replies:
            raise AssertionError("ScriptedTransport called more times than scripted")
        reply = self.replies.pop(0)
        if callable(reply):
            reply = reply(**kwargs)
        if isinstance(reply, str):
            return ProviderSuccess(content=reply, model=kwargs["model"], duration_ms=1.0)
        return reply

    @property
    def models(self) -> List[str]:
        return [call["model"] for call in self.calls]


class FakeClock:
    """Manually advanced clock for cache TTL tests."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def provider_failure(error: str = "503 Server Error", status_code: Optional[int] = 503) -> ProviderFailure:
    return ProviderFailure(error=error, model="test-model", duration_ms=1.0, status_code=status_code)


@pytest.fixture(autouse=True)
def network_firewall(monkeypatch):
    """Block real HTTP calls; tests that need requests.post patch it themselves."""
    def _blocked(*args, **kwargs):
        raise RuntimeError(f"Network access blocked in tests: {args[0] if args else kwargs.get('url')}")

    monkeypatch.setattr(requests, "post", _blocked)


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def failure():
    """Factory for ProviderFailure replies."""
    return provider_failure


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ResponseCache:
    return ResponseCache(ttl_seconds=3600, sweep_interval_seconds=1800, clock=clock)


@pytest.fixture
def pipeline(transport) -> ModelInvocationPipeline:
    return ModelInvocationPipeline(transport=transport)


@pytest.fixture
def app(cache, pipeline):
    flask_app = create_app(cache=cache, pipeline=pipeline, start_sweeper=False)
    flask_app.config["TESTING"] = True
    yield flask_app
    flask_app.extensions["assistant"].stop()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def single_node_flow() -> Dict[str, Any]:
    """One node, no edges: the editor's minimal flowchart."""
    return {
        "nodes": [
            {
                "id": "test-node",
                "type": "customNode",
                "position": {"x": 100, "y": 100},
                "data": {
                    "elements": {
                        "label": {"visible": True, "text": "Test Node"},
                    },
                    "bgColor": "#ffffff",
                },
            }
        ],
        "edges": [],
    }


@pytest.fixture
def three_node_flow() -> Dict[str, Any]:
    """Linear flow a -> b -> c."""
    def node(node_id: str, label: str, y: int) -> Dict[str, Any]:
        return {
            "id": node_id,
            "type": "customNode",
            "position": {"x": 0, "y": y},
            "data": {"elements": {"label": {"visible": True, "text": label}}},
        }

    return {
        "nodes": [node("a", "Recruit", 0), node("b", "Randomize", 100), node("c", "Measure", 200)],
        "edges": [
            {"id": "ea-b", "source": "a", "target": "b", "sourceHandle": None, "targetHandle": None},
            {"id": "eb-c", "source": "b", "target": "c"},
        ],
    }


@pytest.fixture
def comments() -> List[Dict[str, Any]]:
    """Five comments as the comment store sends them."""
    return [
        {"id": "c1", "text": "Participants were all recruited from one university.", "commentType": "BIAS", "nodeLabels": ["Recruitment"]},
        {"id": "c2", "text": "No blinding of the assessors measuring outcomes.", "commentType": "BIAS", "nodeLabels": ["Measurement"]},
        {"id": "c3", "text": "Sample size of 20 is too small to detect the effect.", "commentType": "POWER", "nodeLabels": ["Recruitment"]},
        {"id": "c4", "text": "Prior exercise habits were not controlled for.", "commentType": "CONFOUND", "nodeLabels": ["Randomization"]},
        {"id": "c5", "text": "Survey responses were self-reported.", "commentType": "MEASUREMENT", "nodeLabels": ["Measurement"]},
    ]


@pytest.fixture
def themes_reply():
    """Build a model clustering reply from {theme name: [ids]}."""
    def _build(groups: Dict[str, List[str]]) -> str:
        return json.dumps({
            "themes": [
                {"name": name, "items": [{"id": item_id} for item_id in ids]}
                for name, ids in groups.items()
            ]
        })

    return _build


@pytest.fixture
def mock_chat_response():
    """Build a Mock standing in for requests.Response from a chat-completion call."""
    def _build(body: Any, status_code: int = 200) -> Mock:
        resp = Mock()
        resp.status_code = status_code
        resp.json.return_value = body
        if status_code >= 400:
            error = requests.exceptions.HTTPError(f"{status_code} Error")
            error.response = resp
            resp.text = json.dumps(body)
            resp.raise_for_status = Mock(side_effect=error)
        else:
            resp.raise_for_status = Mock()
        return resp

    return _build
