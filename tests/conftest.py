"""Shared test fixtures."""

import json
from contextlib import AsyncExitStack
from pathlib import Path

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from hookrelay.config import Settings
from hookrelay.main import create_app
from hookrelay.services.signature import sign

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

TEST_SECRET = "It's a Secret to Everybody"
TARGET_URL = "https://teams.example.test/webhookb2/abc"


@pytest.fixture
def pull_request_event() -> dict:
    return json.loads((FIXTURES_DIR / "pull_request_opened.json").read_text(encoding="utf-8"))


@pytest.fixture
def relayed_requests() -> list[httpx.Request]:
    """Requests that reached the fake relay target, in order."""
    return []


@pytest.fixture
def default_target_handler(relayed_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        relayed_requests.append(request)
        return httpx.Response(200, text="1", headers={"Content-Type": "text/plain"})

    return handler


@pytest.fixture
async def make_client(default_target_handler):
    """Build an app with settings overrides and return an async test client for it.

    Pass ``target_handler`` to replace the fake relay target.
    """
    async with AsyncExitStack() as stack:

        async def _make(target_handler=None, **overrides) -> AsyncClient:
            values = {
                "secret_token": TEST_SECRET,
                "target_url": TARGET_URL,
                "json_logs": False,
                **overrides,
            }
            app_settings = Settings(_env_file=None, **values)
            http_client = await stack.enter_async_context(
                httpx.AsyncClient(transport=httpx.MockTransport(target_handler or default_target_handler))
            )
            app = create_app(app_settings, http_client=http_client)
            return await stack.enter_async_context(
                AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
            )

        yield _make


@pytest.fixture
async def client(make_client):
    """Async HTTP test client with default settings."""
    return await make_client()


def delivery_headers(event: str, body: bytes, secret: str = TEST_SECRET, **extra: str) -> dict[str, str]:
    """Headers GitHub would send for a signed delivery."""
    headers = {
        "Content-Type": "application/json",
        "User-Agent": "GitHub-Hookshot/044aadd",
        "X-GitHub-Event": event,
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
        "X-Hub-Signature-256": sign(secret, body),
    }
    headers.update(extra)
    return headers


@pytest.fixture
def signed_headers():
    return delivery_headers
