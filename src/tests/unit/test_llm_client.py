"""
Unit tests for the chat-completion adapter (src/shared/llm_client.py).

requests.post is replaced per test; the adapter must turn every provider
problem into a ProviderFailure instead of raising.
"""

import pytest
import requests

from src.shared import llm_client
from src.shared.llm_client import (
    ProviderFailure,
    ProviderSuccess,
    _redact_sensitive,
    chat_completion,
    extract_message_content,
)

MESSAGES = [{"role": "user", "content": "hi"}]


def _ok_body(content='{"nodes": []}', model="gpt-4-turbo-2024-04-09"):
    return {
        "model": model,
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5},
    }


def test_success_returns_content(monkeypatch, mock_chat_response):
    captured = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        captured.update(url=url, json=json, headers=headers, timeout=timeout)
        return mock_chat_response(_ok_body())

    monkeypatch.setattr(llm_client.requests, "post", fake_post)

    result = chat_completion(
        model="gpt-4-turbo",
        messages=MESSAGES,
        temperature=0.2,
        response_format="json_object",
        timeout=7,
        base_url="http://provider.test/v1/",
        api_key="sk-test",
    )

    assert isinstance(result, ProviderSuccess)
    assert result.ok
    assert result.content == '{"nodes": []}'
    assert result.model == "gpt-4-turbo-2024-04-09"
    assert result.usage["prompt_tokens"] == 10

    assert captured["url"] == "http://provider.test/v1/chat/completions"
    assert captured["timeout"] == 7
    assert captured["headers"]["Authorization"] == "Bearer sk-test"
    assert captured["json"]["response_format"] == {"type": "json_object"}
    assert captured["json"]["temperature"] == 0.2


def test_plain_mode_omits_response_format(monkeypatch, mock_chat_response):
    captured = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        captured["json"] = json
        return mock_chat_response(_ok_body("plain text"))

    monkeypatch.setattr(llm_client.requests, "post", fake_post)

    result = chat_completion(model="gpt-3.5-turbo", messages=MESSAGES, temperature=0.2, base_url="http://p")

    assert result.ok
    assert "response_format" not in captured["json"]


def test_timeout_becomes_failure(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.Timeout("read timed out")

    monkeypatch.setattr(llm_client.requests, "post", fake_post)

    result = chat_completion(model="m", messages=MESSAGES, temperature=0.0, base_url="http://p")

    assert isinstance(result, ProviderFailure)
    assert not result.ok
    assert result.error_code == "TIMEOUT_EXCEEDED"


def test_http_error_keeps_status_code(monkeypatch, mock_chat_response):
    monkeypatch.setattr(
        llm_client.requests,
        "post",
        lambda *a, **kw: mock_chat_response({"error": {"message": "rate limited"}}, status_code=429),
    )

    result = chat_completion(model="m", messages=MESSAGES, temperature=0.0, base_url="http://p")

    assert isinstance(result, ProviderFailure)
    assert result.status_code == 429
    assert result.error_code == "PROVIDER_ERROR"


def test_connection_error_becomes_failure(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(llm_client.requests, "post", fake_post)

    result = chat_completion(model="m", messages=MESSAGES, temperature=0.0, base_url="http://p")

    assert not result.ok
    assert "refused" in result.error


def test_non_json_body_is_malformed(monkeypatch, mock_chat_response):
    resp = mock_chat_response(None)
    resp.json.side_effect = ValueError("Expecting value")
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **kw: resp)

    result = chat_completion(model="m", messages=MESSAGES, temperature=0.0, base_url="http://p")

    assert not result.ok
    assert result.error_code == "MALFORMED_RESPONSE"


@pytest.mark.parametrize("body", [
    {},
    {"choices": []},
    {"choices": [{"message": {}}]},
    {"choices": [{"message": {"content": "   "}}]},
    {"choices": [{"message": {"content": 42}}]},
])
def test_missing_content_is_malformed(monkeypatch, mock_chat_response, body):
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **kw: mock_chat_response(body))

    result = chat_completion(model="m", messages=MESSAGES, temperature=0.0, base_url="http://p")

    assert isinstance(result, ProviderFailure)
    assert result.error_code == "MALFORMED_RESPONSE"


def test_extract_message_content_rejects_non_dict():
    assert extract_message_content(["choices"]) is None
    assert extract_message_content({"choices": ["x"]}) is None


def test_redact_sensitive_nested():
    redacted = _redact_sensitive({
        "headers": {"Authorization": "Bearer sk-live", "Content-Type": "application/json"},
        "items": [{"api_key": "k"}, "plain"],
    })

    assert redacted["headers"]["Authorization"] == "[REDACTED]"
    assert redacted["headers"]["Content-Type"] == "application/json"
    assert redacted["items"] == [{"api_key": "[REDACTED]"}, "plain"]


def test_debug_log_written_when_enabled(monkeypatch, mock_chat_response, tmp_path):
    monkeypatch.setenv("DEBUG_PROMPTS", "true")
    monkeypatch.setattr(llm_client, "DEBUG_LOG_DIR", str(tmp_path))
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **kw: mock_chat_response(_ok_body()))

    chat_completion(model="m", messages=MESSAGES, temperature=0.0, base_url="http://p", api_key="sk-secret")

    files = list(tmp_path.glob("req_*.json"))
    assert files
    assert all("sk-secret" not in f.read_text(encoding="utf-8") for f in files)


def test_debug_log_follows_environment_per_call(monkeypatch, mock_chat_response, tmp_path):
    monkeypatch.delenv("DEBUG_PROMPTS", raising=False)
    monkeypatch.setattr(llm_client, "DEBUG_LOG_DIR", str(tmp_path))
    monkeypatch.setattr(llm_client.requests, "post", lambda *a, **kw: mock_chat_response(_ok_body()))

    chat_completion(model="m", messages=MESSAGES, temperature=0.0, base_url="http://p")
    assert list(tmp_path.glob("req_*.json")) == []

    monkeypatch.setenv("DEBUG_PROMPTS", "true")
    chat_completion(model="m", messages=MESSAGES, temperature=0.0, base_url="http://p")
    assert list(tmp_path.glob("req_*.json"))
