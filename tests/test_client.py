"""Tests for the HTTP-backed client using httpx.MockTransport."""

from datetime import UTC, date, datetime
from decimal import Decimal

import httpx
import pytest
from prometheus_client import REGISTRY
from structlog.testing import capture_logs

from shared.exceptions import InvalidOptionsError, TransportError, UnknownSymbolError, VendorError
from tests.conftest import API_URL, USER_ID, load_fixture
from withings.client import HTTPClient
from withings.codes import DeviceModel, Gender, MeasureType, SleepState, StatusCode, Unit
from withings.protocol import WithingsClient

OAUTH_KEYS = {
    "oauth_consumer_key",
    "oauth_token",
    "oauth_nonce",
    "oauth_timestamp",
    "oauth_signature_method",
    "oauth_version",
    "oauth_signature",
}


def _params(request: httpx.Request) -> dict[str, str]:
    return dict(request.url.params)


class TestExecute:
    def test_merges_action_userid_and_oauth(self, make_client, sent_requests):
        client = make_client(json_body={"status": 0, "body": {"ok": 1}})
        assert client.execute("measure", "getmeas", {"limit": 10}) == {"ok": 1}

        (request,) = sent_requests
        assert request.method == "GET"
        assert str(request.url).startswith(f"{API_URL}/measure?")
        params = _params(request)
        assert params["action"] == "getmeas"
        assert params["userid"] == USER_ID
        assert params["limit"] == "10"
        assert OAUTH_KEYS <= set(params)
        assert params["oauth_consumer_key"] == "consumer-key"
        assert params["oauth_token"] == "access-token"
        assert params["oauth_signature_method"] == "HMAC-SHA1"
        assert "authorization" not in request.headers

    def test_action_and_userid_override_caller_params(self, make_client, sent_requests):
        client = make_client(json_body={"status": 0, "body": {}})
        client.execute("user", "getbyuserid", {"action": "other", "userid": "1"})
        params = _params(sent_requests[0])
        assert params["action"] == "getbyuserid"
        assert params["userid"] == USER_ID

    def test_signer_receives_merged_query(self, credentials, sent_requests):
        seen = []

        def signer(creds, method, url, params):
            seen.append((creds, method, url, dict(params)))
            return {"oauth_signature": "sig"}

        def handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            return httpx.Response(200, json={"status": 0, "body": {}})

        http = httpx.Client(transport=httpx.MockTransport(handler))
        client = HTTPClient(credentials, api_url=API_URL, http=http, signer=signer)
        client.execute("sleep", "get", {"startdate": 1})

        assert seen == [
            (
                credentials,
                "GET",
                f"{API_URL}/sleep",
                {"startdate": "1", "action": "get", "userid": USER_ID},
            )
        ]
        assert _params(sent_requests[0])["oauth_signature"] == "sig"

    def test_vendor_error(self, make_client):
        client = make_client(json_body={"status": 247, "error": "Invalid userid"})
        with pytest.raises(VendorError) as exc_info:
            client.user_info()
        assert exc_info.value.status is StatusCode.BAD_USERID

    def test_transport_error(self, make_client):
        client = make_client(status_code=503, text="Service Unavailable")
        with pytest.raises(TransportError) as exc_info:
            client.user_info()
        assert exc_info.value.status == 503
        assert exc_info.value.body == "Service Unavailable"

    def test_undecodable_200_is_transport_error(self, make_client):
        client = make_client(text="<html>maintenance</html>")
        with pytest.raises(TransportError) as exc_info:
            client.user_info()
        assert exc_info.value.status == 200

    def test_failure_is_logged(self, make_client):
        client = make_client(json_body={"status": 601})
        with capture_logs() as logs, pytest.raises(VendorError):
            client.execute("measure", "getmeas")
        failures = [e for e in logs if e["event"] == "withings_request_failed"]
        assert failures[0]["vendor_status"] == "too-many-requests"
        assert failures[0]["resource"] == "measure"
        assert failures[0]["log_level"] == "warning"

    def test_outcomes_are_counted(self, make_client):
        labels = {"resource": "sleep", "action": "getsummary", "outcome": "vendor_error"}
        before = REGISTRY.get_sample_value("vendor_responses_total", labels) or 0.0
        client = make_client(json_body={"status": 2555})
        with pytest.raises(VendorError):
            client.execute("sleep", "getsummary")
        assert REGISTRY.get_sample_value("vendor_responses_total", labels) == before + 1


class TestOperations:
    def test_user_info(self, make_client, sent_requests):
        client = make_client(json_body=load_fixture("user_getbyuserid.json"))
        (user,) = client.user_info()
        assert user.id == 29
        assert user.gender is Gender.MALE
        assert str(sent_requests[0].url).startswith(f"{API_URL}/user?")

    def test_body_measurements(self, make_client, sent_requests):
        client = make_client(json_body=load_fixture("measure_getmeas.json"))
        result = client.body_measurements(after=datetime(2024, 1, 1, tzinfo=UTC), limit=10)

        params = _params(sent_requests[0])
        assert params["startdate"] == "1704067200"
        assert params["limit"] == "10"
        assert params["action"] == "getmeas"
        assert params["userid"] == USER_ID
        assert "enddate" not in params
        assert "lastupdate" not in params

        weight = result.measuregrps[0].measures[0]
        assert (weight.type, weight.value, weight.unit) == (
            MeasureType.WEIGHT,
            Decimal("75.00"),
            Unit.KILOGRAMS,
        )

    def test_invalid_options_never_reach_the_network(self, make_client, sent_requests):
        client = make_client(json_body={"status": 0, "body": {}})
        with pytest.raises(InvalidOptionsError):
            client.body_measurements(after=0, updated_since=0)
        with pytest.raises(UnknownSymbolError):
            client.body_measurements(measure_type="bone-mass")
        with pytest.raises(InvalidOptionsError):
            client.sleep_data(start=0)
        assert sent_requests == []

    def test_activity_summary_single_day(self, make_client, sent_requests):
        client = make_client(json_body=load_fixture("measure_getactivity.json"))
        result = client.activity_summary(date(2024, 3, 14))
        assert len(result) == 1
        assert result[0].date == date(2024, 3, 14)
        assert _params(sent_requests[0])["date"] == "2024-03-14"

    def test_activity_summary_range(self, make_client, sent_requests):
        client = make_client(json_body=load_fixture("measure_getactivity_range.json"))
        result = client.activity_summary(date(2024, 3, 14), date(2024, 3, 15))
        assert [a.steps for a in result] == [8213, 10451]
        params = _params(sent_requests[0])
        assert (params["startdateymd"], params["enddateymd"]) == ("2024-03-14", "2024-03-15")
        assert "date" not in params

    def test_activity_data(self, make_client, sent_requests):
        client = make_client(json_body=load_fixture("measure_getintradayactivity.json"))
        points = client.activity_data(1710468000, 1710470000)
        assert [p.steps for p in points] == [30, 12]
        assert _params(sent_requests[0])["action"] == "getintradayactivity"

    def test_sleep_summary(self, make_client, sent_requests):
        client = make_client(json_body=load_fixture("sleep_getsummary.json"))
        (summary,) = client.sleep_summary(date(2024, 3, 14), date(2024, 3, 15))
        assert summary.model is DeviceModel.AURA
        assert str(sent_requests[0].url).startswith(f"{API_URL}/sleep?")

    def test_sleep_data(self, make_client, sent_requests):
        client = make_client(json_body=load_fixture("sleep_get.json"))
        data = client.sleep_data(updated_since=datetime(2024, 3, 14, tzinfo=UTC))
        assert data.series[3].state is SleepState.REM
        assert data.series[4].state == 9
        params = _params(sent_requests[0])
        assert params["lastupdate"] == "1710374400"
        assert params["action"] == "get"


class TestLifecycle:
    def test_satisfies_protocol(self, make_client):
        assert isinstance(make_client(), WithingsClient)

    def test_does_not_close_borrowed_transport(self, credentials):
        http = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        with HTTPClient(credentials, http=http):
            pass
        assert not http.is_closed

    def test_closes_owned_transport(self, credentials):
        client = HTTPClient(credentials)
        client.close()
        assert client._http.is_closed

    def test_default_api_url_from_settings(self, credentials):
        with HTTPClient(credentials) as client:
            assert client.api_url == "https://wbsapi.withings.net/v2"
