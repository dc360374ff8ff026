"""Shared test fixtures."""

import json
import sys
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from withings.client import HTTPClient  # noqa: E402
from withings.oauth import Credentials  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"
API_URL = "https://wbsapi.example.test/v2"
USER_ID = "29"


def load_fixture(name: str) -> dict:
    return json.loads((FIXTURES_DIR / name).read_text())


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        consumer_key="consumer-key",
        consumer_secret="consumer-secret",
        oauth_token="access-token",
        oauth_token_secret="access-token-secret",
        user_id=USER_ID,
    )


@pytest.fixture
def sent_requests() -> list[httpx.Request]:
    """Every request the mock transport received, in order."""
    return []


@pytest.fixture
def make_client(credentials, sent_requests) -> Callable[..., HTTPClient]:
    """Build an HTTPClient whose transport answers every GET with one canned response."""

    def factory(status_code: int = 200, json_body=None, text: str | None = None) -> HTTPClient:
        def handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=json_body)

        http = httpx.Client(transport=httpx.MockTransport(handler))
        return HTTPClient(credentials, api_url=API_URL, http=http)

    return factory
