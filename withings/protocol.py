"""Client protocol for the Withings API.

Both the HTTP-backed client and the fixture client implement this interface.
Callers depend only on the protocol, never on a concrete client.
"""

from typing import Protocol, runtime_checkable

from withings.codes import MeasureCategory, MeasureType
from withings.domain.models import (
    ActivityDataPoint,
    ActivitySummary,
    BodyMeasurements,
    SleepData,
    SleepSummary,
    UserInfo,
)
from withings.request_builder import CalendarDay, Instant


@runtime_checkable
class WithingsClient(Protocol):
    """Protocol for reading data from the Withings API."""

    def user_info(self) -> list[UserInfo]:
        """Retrieve information about the authenticated user."""
        ...

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
        """Get body measurements.

        Args:
            after: Only groups measured at or after this instant.
            before: Only groups measured at or before this instant.
            updated_since: Only groups modified since this instant. Cannot be
                combined with `after`/`before`.
            measure_type: Only this kind of measure.
            category: Real measurements or user goals.
            limit: Maximum number of groups in the page.
            offset: Number of groups to skip.
        """
        ...

    def activity_summary(
        self, day: CalendarDay, end_day: CalendarDay | None = None
    ) -> list[ActivitySummary]:
        """Get daily activity summaries on a specific day or between a range of days."""
        ...

    def activity_data(self, after: Instant, before: Instant) -> list[ActivityDataPoint]:
        """Get detailed time-series activity data."""
        ...

    def sleep_summary(self, start: CalendarDay, end: CalendarDay) -> list[SleepSummary]:
        """Get sleep summaries."""
        ...

    def sleep_data(
        self,
        *,
        updated_since: Instant | None = None,
        start: Instant | None = None,
        end: Instant | None = None,
    ) -> SleepData:
        """Get detailed sleep measurements."""
        ...
