"""Client factory: returns the live or fixture client based on config.

In fixture mode, canned envelopes are loaded from the fixture directory.
In live mode, requests are signed with the given credentials and sent.
Both implement the same WithingsClient protocol.
"""

from shared.config import settings
from withings.oauth import Credentials
from withings.protocol import WithingsClient


def get_client(credentials: Credentials | None = None) -> WithingsClient:
    """Return the appropriate client for the configured client_mode.

    - fixture mode: returns a FixtureClient over settings.fixture_dir
    - live mode: returns an HTTPClient (credentials are required)
    """
    if settings.client_mode == "fixture":
        from withings.fixture import FixtureClient

        return FixtureClient.from_directory(settings.fixture_dir)

    if credentials is None:
        raise ValueError("client_mode='live' requires credentials")

    from withings.client import HTTPClient

    return HTTPClient(credentials, api_url=settings.api_url)
