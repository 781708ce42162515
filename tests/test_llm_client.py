"""Tests for the Vertex REST client's request shaping and error handling."""
import pytest
import requests

from mockinterview.infrastructure.llm import client as client_module
from mockinterview.infrastructure.llm import LLMClientError, VertexRestClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


@pytest.fixture
def client():
    vertex = VertexRestClient(project="demo-project", timeout=5)
    vertex._token = "test-token"
    return vertex


def test_build_request_body_maps_roles_and_system_prompt():
    body = VertexRestClient.build_request_body(
        [
            {"role": "system", "content": "Extra rule."},
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Hi there"},
            {"role": "user", "content": "Part one"},
            {"role": "user", "content": "Part two"},
        ],
        system_prompt="You are an interviewer.",
        max_tokens=300,
        temperature=0.7,
    )

    assert body["systemInstruction"]["parts"][0]["text"] == "You are an interviewer.\n\nExtra rule."
    assert [c["role"] for c in body["contents"]] == ["user", "model", "user"]
    assert body["contents"][2]["parts"] == [{"text": "Part one"}, {"text": "Part two"}]
    assert body["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 300}


def test_build_request_body_rejects_unknown_role():
    with pytest.raises(ValueError):
        VertexRestClient.build_request_body([{"role": "tool", "content": "x"}], None, 10, 0.0)


def test_complete_returns_joined_text(client, monkeypatch):
    captured = {}

    def fake_post(url, headers, json, timeout):
        captured.update(url=url, headers=headers, json=json, timeout=timeout)
        return FakeResponse(payload={"candidates": [{"content": {"parts": [{"text": "YE"}, {"text": "S"}]}}]})

    monkeypatch.setattr(client_module.requests, "post", fake_post)
    text = client.complete([{"role": "user", "content": "Q?"}], max_tokens=5)

    assert text == "YES"
    assert captured["url"].endswith("/models/gemini-2.5-flash-lite:generateContent")
    assert captured["headers"]["Authorization"] == "Bearer test-token"
    assert captured["timeout"] == 5
    assert "systemInstruction" not in captured["json"]


def test_complete_raises_on_error_status(client, monkeypatch):
    monkeypatch.setattr(client_module.requests, "post",
                        lambda *args, **kwargs: FakeResponse(status_code=429, text="quota"))
    with pytest.raises(LLMClientError, match="429"):
        client.complete([{"role": "user", "content": "Q?"}])


def test_complete_wraps_transport_errors(client, monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(client_module.requests, "post", fake_post)
    with pytest.raises(LLMClientError):
        client.complete([{"role": "user", "content": "Q?"}])
