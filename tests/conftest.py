"""
Shared fixtures: a fake Directus served through httpx.MockTransport and
model clients shaped like EchoDevClient.
"""

import json
import os
from typing import Callable, Dict, List, Optional
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio

from travelbot.generate import ChatGenerator, LLMError, ProviderErrorKind
from travelbot.search import DataAggregator, DirectusFetcher
from travelbot.settings import get_settings

DIRECTUS_URL = "http://directus.test"


@pytest.fixture(autouse=True)
def clean_env():
    """Keep tests hermetic from the host environment and cached settings."""
    with patch.dict(os.environ, {}, clear=True):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()


class FakeDirectus:
    """Records every request; routes[(collection, search)] -> response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[tuple, Callable[[httpx.Request], httpx.Response]] = {}
        self.default: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def add(self, collection: str, records=None, search: Optional[str] = None, status: int = 200, body=None):
        def respond(request: httpx.Request) -> httpx.Response:
            if body is not None:
                return httpx.Response(status, content=body)
            return httpx.Response(status, json={"data": records or []})

        self.routes[(collection, search)] = respond

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        collection = request.url.path.rsplit("/", 1)[-1]
        search = request.url.params.get("search")
        route = self.routes.get((collection, search)) or self.routes.get((collection, None))
        if route is None and self.default is not None:
            return self.default(request)
        if route is None:
            return httpx.Response(404, json={"errors": [{"message": "not found"}]})
        return route(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=DIRECTUS_URL,
            headers={"Authorization": "Bearer test-token"},
            transport=httpx.MockTransport(self.handler),
        )

    def searches(self) -> List[Optional[str]]:
        return [r.url.params.get("search") for r in self.requests]


@pytest.fixture
def directus():
    return FakeDirectus()


@pytest_asyncio.fixture
async def http_client(directus):
    async with directus.client() as client:
        yield client


@pytest.fixture
def make_aggregator(http_client):
    def _make(collections, include_unfiltered_context=True):
        return DataAggregator(
            DirectusFetcher(http_client),
            collections,
            include_unfiltered_context=include_unfiltered_context,
        )

    return _make


class RecordingClient:
    """Model client that remembers the prompts it was given."""

    def __init__(self, reply: str = "Jeita Grotto is open daily."):
        self.model = "recording"
        self.reply = reply
        self.prompts: List[str] = []

    def generate(self, messages, params):
        self.prompts.append(messages[-1].content)
        return self.reply, {"engine": "recording", "model": self.model}


class FailingClient:
    def __init__(self, exc: Exception):
        self.model = "failing"
        self.exc = exc
        self.calls = 0

    def generate(self, messages, params):
        self.calls += 1
        raise self.exc


@pytest.fixture
def recording_client():
    return RecordingClient()


@pytest.fixture
def generator(recording_client):
    return ChatGenerator(model_client=recording_client)


def rate_limited() -> LLMError:
    return LLMError(ProviderErrorKind.RATE_LIMITED, "rate limit exceeded")


def payload_of(prompt: str, heading: str):
    """Extract the JSON block that follows a heading in a rendered prompt."""
    block = prompt.split(heading + "\n", 1)[1].split("\n\nUSER QUESTION:", 1)[0]
    return json.loads(block)
