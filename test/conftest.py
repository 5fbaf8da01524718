"""Shared fixtures: a TestClient and a recording stand-in for the AI provider"""

import json

import pytest
from fastapi.testclient import TestClient

from xeriscape_api.main import app
import xeriscape_api.services.ai_service as ai_service_module


class FakeResponse:
    """Minimal requests.Response look-alike"""

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeUpstream:
    """Replaces requests.post; records every call and replays queued responses"""

    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, *responses):
        self.responses.extend(responses)
        return self

    @property
    def called(self):
        return bool(self.calls)

    def __call__(self, url, json=None, headers=None, timeout=None, data=None, files=None):
        self.calls.append(
            {"url": url, "json": json, "data": data, "files": files, "headers": headers, "timeout": timeout}
        )
        if not self.responses:
            raise AssertionError(f"Unexpected upstream call to {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def chat_response(content):
    return FakeResponse(200, {"choices": [{"message": {"role": "assistant", "content": content}}]})


def image_response(*urls):
    return FakeResponse(200, {"data": [{"url": url} for url in urls]})


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_upstream(monkeypatch):
    upstream = FakeUpstream()
    monkeypatch.setattr(ai_service_module.requests, "post", upstream)
    return upstream


@pytest.fixture
def xai_key(monkeypatch):
    monkeypatch.setenv("XAI_API_KEY", "test-key")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("AI_CHAT_MODEL", raising=False)
    monkeypatch.delenv("AI_IMAGE_MODEL", raising=False)


@pytest.fixture
def no_credentials(monkeypatch):
    monkeypatch.delenv("XAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def openai_key(monkeypatch):
    monkeypatch.delenv("XAI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("AI_CHAT_MODEL", raising=False)
    monkeypatch.delenv("AI_IMAGE_MODEL", raising=False)
