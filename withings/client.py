"""Withings API clients.

BaseClient implements every public operation as
request builder → execute() → payload converter. Subclasses only decide how
execute() obtains a response envelope: HTTPClient signs and sends a GET,
FixtureClient (withings.fixture) serves canned envelopes.

No retry and no caching: each call is one signed round trip, and transport
and vendor errors propagate to the caller immediately.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

import httpx
import structlog

from shared.config import settings
from shared.exceptions import TransportError, VendorError
from shared.metrics import vendor_api_duration_seconds, vendor_responses_total
from withings import convert, request_builder
from withings.codes import MeasureCategory, MeasureType
from withings.domain.models import (
    ActivityDataPoint,
    ActivitySummary,
    BodyMeasurements,
    SleepData,
    SleepSummary,
    UserInfo,
)
from withings.oauth import Credentials, sign_request
from withings.request_builder import ApiRequest, CalendarDay, Instant
from withings.response import interpret_response

logger = structlog.get_logger()

Signer = Callable[[Credentials, str, str, Mapping[str, Any]], dict[str, str]]


class BaseClient(ABC):
    """The Withings operations, independent of how requests are carried out."""

    @abstractmethod
    def execute(
        self, resource: str, action: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Perform one request and return the unwrapped success payload."""

    def _run(self, request: ApiRequest) -> dict[str, Any]:
        return self.execute(request.resource, request.action, request.params)

    def user_info(self) -> list[UserInfo]:
        """Retrieve information about the authenticated user."""
        payload = self._run(request_builder.user_info())
        return [convert.convert_user_info(user) for user in payload.get("users", [])]

    def body_measurements(
        self,
        *,
        after: Instant | None = None,
        before: Instant | None = None,
        updated_since: Instant | None = None,
        measure_type: MeasureType | str | None = None,
        category: MeasureCategory | str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> BodyMeasurements:
        """Get one page of body measurement groups."""
        request = request_builder.body_measurements(
            after=after,
            before=before,
            updated_since=updated_since,
            measure_type=measure_type,
            category=category,
            limit=limit,
            offset=offset,
        )
        return convert.convert_body_measurements(self._run(request))

    def activity_summary(
        self, day: CalendarDay, end_day: CalendarDay | None = None
    ) -> list[ActivitySummary]:
        """Get daily activity summaries for one day or an inclusive range of days.

        A single day yields a one-element list.
        """
        payload = self._run(request_builder.activity_summary(day, end_day))
        if end_day is None:
            return [convert.convert_activity(payload)]
        return [convert.convert_activity(a) for a in payload.get("activities", [])]

    def activity_data(self, after: Instant, before: Instant) -> list[ActivityDataPoint]:
        """Get detailed time-series activity data (provisional endpoint)."""
        payload = self._run(request_builder.activity_data(after, before))
        return convert.convert_activity_data(payload)

    def sleep_summary(self, start: CalendarDay, end: CalendarDay) -> list[SleepSummary]:
        payload = self._run(request_builder.sleep_summary(start, end))
        return convert.convert_sleep_summary(payload)

    def sleep_data(
        self,
        *,
        updated_since: Instant | None = None,
        start: Instant | None = None,
        end: Instant | None = None,
    ) -> SleepData:
        """Get detailed sleep state measurements."""
        request = request_builder.sleep_data(updated_since=updated_since, start=start, end=end)
        return convert.convert_sleep_data(self._run(request))


class HTTPClient(BaseClient):
    """Client backed by signed HTTP GETs against the vendor API.

    OAuth parameters are always sent in the query string.
    """

    def __init__(
        self,
        credentials: Credentials,
        api_url: str | None = None,
        http: httpx.Client | None = None,
        signer: Signer = sign_request,
    ) -> None:
        self.credentials = credentials
        self.api_url = (api_url or settings.api_url).rstrip("/")
        self._owns_http = http is None
        if http is None:
            http = httpx.Client(timeout=settings.request_timeout_seconds)
        self._http = http
        self._signer = signer

    def execute(
        self, resource: str, action: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        url = f"{self.api_url}/{resource}"
        query = {key: str(value) for key, value in (params or {}).items()}
        query["action"] = action
        query["userid"] = self.credentials.user_id

        oauth_params = self._signer(self.credentials, "GET", url, query)
        log = logger.bind(resource=resource, action=action)
        log.debug("withings_request", params=sorted(query))

        with vendor_api_duration_seconds.labels(resource=resource, action=action).time():
            response = self._http.get(url, params={**query, **oauth_params})

        try:
            body = response.json()
        except ValueError:
            body = None

        try:
            payload = interpret_response(response.status_code, body, response.text)
        except TransportError as exc:
            vendor_responses_total.labels(
                resource=resource, action=action, outcome="transport_error"
            ).inc()
            log.warning("withings_request_failed", http_status=exc.status)
            raise
        except VendorError as exc:
            vendor_responses_total.labels(
                resource=resource, action=action, outcome="vendor_error"
            ).inc()
            log.warning(
                "withings_request_failed",
                http_status=response.status_code,
                vendor_status=str(exc.status),
                vendor_code=exc.code,
                error=exc.error,
            )
            raise

        vendor_responses_total.labels(resource=resource, action=action, outcome="success").inc()
        log.debug("withings_response", http_status=response.status_code)
        return payload

    def close(self) -> None:
        """Close the underlying transport, if this client created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
