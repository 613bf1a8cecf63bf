"""
Shared fakes for the test suite. No test touches the network: Gemini is
replaced by FakeGeminiClient and outbound HTTP by httpx.MockTransport.
"""

from types import SimpleNamespace
from typing import Optional

import httpx
import pytest
from google.genai import errors as genai_errors

import main
from cache import ResponseCache
from classification import CLASSIFIER_VERSION
from config import Settings, get_settings
from dependencies import get_http_client, get_image_cache
from gemini.client import get_gemini_client
from store import MemoryStore


def http_error(status: int, url: str = "https://upstream.test/") -> httpx.HTTPStatusError:
    request = httpx.Request("POST", url)
    return httpx.HTTPStatusError(
        f"HTTP {status}", request=request, response=httpx.Response(status, request=request),
    )


def gemini_error(code: int, message: str = "upstream error", status: str = "ERROR") -> genai_errors.APIError:
    return genai_errors.APIError(code, {"error": {"code": code, "message": message, "status": status}})


class _FakeModels:
    def __init__(self, replies: dict, available: Optional[list], default):
        self.replies = replies
        self.available = available
        self.default = default
        self.calls: list[str] = []
        self.contents: list = []

    async def list(self):
        if self.available is None:
            raise gemini_error(403, "listing disabled", "PERMISSION_DENIED")
        return _AsyncPager(self.available)

    async def generate_content(self, *, model, contents, config=None):
        self.calls.append(model)
        self.contents.append(contents)
        reply = self.replies.get(model, self.default)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


class _AsyncPager:
    def __init__(self, items):
        self.items = list(items)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self.items:
            yield item


class FakeGeminiClient:
    """
    Stands in for google.genai.Client.

    replies maps model name -> text or exception; models not in the map get
    `default`. available=None makes model listing fail (static chain is used).
    """

    def __init__(self, replies: Optional[dict] = None, available: Optional[list] = None,
                 default=None):
        if default is None:
            default = gemini_error(404, "model not found", "NOT_FOUND")
        self.models = _FakeModels(replies or {}, available, default)
        self.aio = SimpleNamespace(models=self.models)


def model_descriptor(name: str, actions=("generateContent",)):
    return SimpleNamespace(name=f"models/{name}", supported_actions=list(actions))


@pytest.fixture
def settings():
    return Settings(
        gemini_api_key="test-key",
        elevenlabs_api_key="sk_test",
        cache_dir="/nonexistent",
    )


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def app_with(settings, memory_store):
    """
    Returns a function installing fakes on the app and yielding its TestClient.
    Overrides are cleared after each test.
    """
    from fastapi.testclient import TestClient

    def install(gemini=None, transport: Optional[httpx.MockTransport] = None):
        overrides = main.app.dependency_overrides
        overrides[get_settings] = lambda: settings
        overrides[get_image_cache] = lambda: ResponseCache(memory_store, CLASSIFIER_VERSION)
        if gemini is not None:
            overrides[get_gemini_client] = lambda: gemini
        if transport is not None:
            async def _http():
                async with httpx.AsyncClient(transport=transport) as client:
                    yield client
            overrides[get_http_client] = _http
        return TestClient(main.app)

    yield install
    main.app.dependency_overrides.clear()
