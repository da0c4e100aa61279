"""
Pytest configuration and fixtures for the TechTalk backend tests.
"""

from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from techtalk.core.config import Settings

SLACK_URL = "https://hooks.slack.com/services/T000/B000/secret-token"


class RecordingAsyncClient:
    """Stands in for httpx.AsyncClient and records every request."""

    def __init__(self, response: Optional[httpx.Response] = None, error: Optional[BaseException] = None):
        self.response = response if response is not None else httpx.Response(200, text="ok")
        self.error = error
        self.posts: List[Tuple[str, Dict[str, Any]]] = []
        self.gets: List[Tuple[str, Dict[str, Any]]] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def post(self, url: str, **kwargs: Any):
        self.posts.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    async def get(self, url: str, **kwargs: Any):
        self.gets.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def recording_client(monkeypatch):
    """Install a RecordingAsyncClient; call the fixture to configure it."""

    def install(response: Optional[httpx.Response] = None, error: Optional[BaseException] = None):
        client = RecordingAsyncClient(response=response, error=error)
        monkeypatch.setattr("httpx.AsyncClient", lambda *args, **kwargs: client)
        return client

    return install


@pytest.fixture
def settings():
    return Settings(_env_file=None, slack_webhook=SLACK_URL)


@pytest.fixture
def taro_form():
    return {
        "name": "Taro",
        "company": "",
        "phone": "",
        "email": "taro@example.com",
        "message": "hello",
        "locale": "ja",
    }
