"""
Pytest configuration for the ai_chat_agent test suite.

Provides an ``http`` fixture: an ``httpx.Client`` backed by
``httpx.MockTransport`` that replays queued responses and records every
outbound request, so tests never touch the network.
"""

from __future__ import annotations

import json
import os
from typing import Any

import httpx
import pytest

_PROVIDER_ENV_VARS = (
    "FILAMENT_AI_CHAT_AGENT_PROVIDER",
    "OPENAI_API_KEY",
    "OPENAI_ORGANIZATION",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_REGION",
    "AZURE_OPENAI_DEPLOYMENT_NAME",
    "AZURE_OPENAI_API_VERSION",
)


class RecordingHTTP:
    """Queue canned responses and record the requests that consume them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[Any] = []
        self.client = httpx.Client(transport=httpx.MockTransport(self._handle))

    def queue(self, status: int = 200, json_body: Any = None, text: str | None = None) -> None:
        if text is not None:
            self._responses.append(httpx.Response(status, text=text))
        else:
            self._responses.append(httpx.Response(status, json=json_body))

    def queue_exception(self, exc_factory) -> None:
        """Queue a callable ``(request) -> Exception`` to be raised."""
        self._responses.append(exc_factory)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request to {request.url}")
        response = self._responses.pop(0)
        if callable(response):
            raise response(request)
        return response

    def body(self, index: int = -1) -> dict[str, Any]:
        """Decoded JSON body of a recorded request."""
        return json.loads(self.requests[index].content)


@pytest.fixture
def http():
    recorder = RecordingHTTP()
    yield recorder
    recorder.client.close()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep developer environment variables out of settings-based tests."""
    for name in _PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("AI_CHAT_AGENT_"):
            monkeypatch.delenv(name, raising=False)

