"""Tests for the fixture client and the client factory."""

from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from shared.exceptions import VendorError
from tests.conftest import FIXTURES_DIR, load_fixture
from withings.client import HTTPClient
from withings.codes import SleepState, StatusCode
from withings.factory import get_client
from withings.fixture import FixtureClient
from withings.protocol import WithingsClient
from withings.request_builder import ApiRequest


class TestFixtureClient:
    def test_serves_envelopes_through_converters(self):
        client = FixtureClient({("sleep", "get"): load_fixture("sleep_get.json")})
        data = client.sleep_data(start=0, end=86400)
        assert data.series[3].state is SleepState.REM
        assert client.requests == [ApiRequest("sleep", "get", {"startdate": 0, "enddate": 86400})]

    def test_vendor_errors_behave_as_live(self):
        client = FixtureClient({("user", "getbyuserid"): {"status": 250}})
        with pytest.raises(VendorError) as exc_info:
            client.user_info()
        assert exc_info.value.status is StatusCode.NOT_AUTHORIZED

    def test_missing_fixture(self):
        with pytest.raises(KeyError, match="measure/getmeas"):
            FixtureClient({}).body_measurements()

    def test_from_directory(self):
        client = FixtureClient.from_directory(FIXTURES_DIR)
        (summary,) = client.activity_summary(date(2024, 3, 14))
        assert summary.steps == 8213
        assert len(client.user_info()) == 1

    def test_from_empty_directory(self, tmp_path: Path):
        with pytest.raises(KeyError):
            FixtureClient.from_directory(tmp_path).user_info()

    def test_satisfies_protocol(self):
        assert isinstance(FixtureClient({}), WithingsClient)


class TestClientFactory:
    def test_fixture_mode_returns_fixture_client(self):
        with patch("withings.factory.settings") as mock_settings:
            mock_settings.client_mode = "fixture"
            mock_settings.fixture_dir = str(FIXTURES_DIR)
            client = get_client()
            assert isinstance(client, FixtureClient)

    def test_live_mode_returns_http_client(self, credentials):
        with patch("withings.factory.settings") as mock_settings:
            mock_settings.client_mode = "live"
            mock_settings.api_url = "https://wbsapi.example.test/v2"
            client = get_client(credentials)
            assert isinstance(client, HTTPClient)
            assert client.api_url == "https://wbsapi.example.test/v2"
            client.close()

    def test_live_mode_requires_credentials(self):
        with patch("withings.factory.settings") as mock_settings:
            mock_settings.client_mode = "live"
            with pytest.raises(ValueError, match="requires credentials"):
                get_client()
