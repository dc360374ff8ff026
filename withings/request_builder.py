"""Request builders: logical operation + options → resource, action, params.

Builders are pure and need no credentials. The vendor-required `action` and
`userid` keys are merged in by the client at send time.

Encoding policy:
- Instant filters (startdate, enddate, lastupdate) are epoch seconds
- Calendar filters (date, startdateymd, enddateymd) are YYYY-MM-DD strings
- Absent options are omitted, never sent as empty values
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from shared.exceptions import InvalidOptionsError
from withings.codes import MEASURE_CATEGORIES, MEASURE_TYPES, MeasureCategory, MeasureType
from withings.convert import to_date_string, to_epoch

Instant = datetime | date | int
CalendarDay = datetime | date | str


@dataclass(frozen=True)
class ApiRequest:
    resource: str
    action: str
    params: dict[str, Any] = field(default_factory=dict)


def user_info() -> ApiRequest:
    return ApiRequest("user", "getbyuserid")


def body_measurements(
    *,
    after: Instant | None = None,
    before: Instant | None = None,
    updated_since: Instant | None = None,
    measure_type: MeasureType | str | None = None,
    category: MeasureCategory | str | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> ApiRequest:
    """Build a measure/getmeas request.

    `after`/`before` bound the measurement date; `updated_since` selects by
    modification time instead. The two filter styles cannot be combined.
    """
    if updated_since is not None and (after is not None or before is not None):
        raise InvalidOptionsError(
            ["after", "before", "updated_since"],
            "'after'/'before' cannot be combined with 'updated_since'",
        )

    params: dict[str, Any] = {}
    if after is not None:
        params["startdate"] = to_epoch(after)
    if before is not None:
        params["enddate"] = to_epoch(before)
    if updated_since is not None:
        params["lastupdate"] = to_epoch(updated_since)
    if measure_type is not None:
        params["meastype"] = MEASURE_TYPES.code_for(measure_type)
    if category is not None:
        params["category"] = MEASURE_CATEGORIES.code_for(category)
    if limit is not None:
        params["limit"] = limit
    if offset is not None:
        params["offset"] = offset
    return ApiRequest("measure", "getmeas", params)


def activity_summary(day: CalendarDay, end_day: CalendarDay | None = None) -> ApiRequest:
    """Build a measure/getactivity request for one day, or a range of days."""
    if end_day is None:
        return ApiRequest("measure", "getactivity", {"date": to_date_string(day)})
    return ApiRequest(
        "measure",
        "getactivity",
        {"startdateymd": to_date_string(day), "enddateymd": to_date_string(end_day)},
    )


def activity_data(after: Instant, before: Instant) -> ApiRequest:
    """Build a measure/getintradayactivity request.

    Provisional: this request shape has not been checked against the live service.
    """
    return ApiRequest(
        "measure",
        "getintradayactivity",
        {"startdate": to_epoch(after), "enddate": to_epoch(before)},
    )


def sleep_summary(start: CalendarDay, end: CalendarDay) -> ApiRequest:
    return ApiRequest(
        "sleep",
        "getsummary",
        {"startdateymd": to_date_string(start), "enddateymd": to_date_string(end)},
    )


def sleep_data(
    *,
    updated_since: Instant | None = None,
    start: Instant | None = None,
    end: Instant | None = None,
) -> ApiRequest:
    """Build a sleep/get request from either `updated_since` or a `start`/`end` range."""
    if updated_since is not None:
        if start is not None or end is not None:
            raise InvalidOptionsError(
                ["updated_since", "start", "end"],
                "'updated_since' cannot be combined with 'start'/'end'",
            )
        return ApiRequest("sleep", "get", {"lastupdate": to_epoch(updated_since)})

    if start is None or end is None:
        raise InvalidOptionsError(
            ["start", "end"],
            "sleep data requires either 'updated_since' or both 'start' and 'end'",
        )
    return ApiRequest("sleep", "get", {"startdate": to_epoch(start), "enddate": to_epoch(end)})
