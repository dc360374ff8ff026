"""Withings payload → domain record converters.

Inbound anti-corruption layer: translates the vendor's epoch timestamps,
integer codes and fixed-point magnitudes into domain values.

Key wire conventions:
- Timestamps are Unix epoch seconds (not ISO 8601)
- Calendar days are "YYYY-MM-DD" strings
- Magnitudes are integer + power-of-ten exponent pairs ({value, unit})
- An optional IANA "timezone" accompanies some payloads and must be applied
  to their epoch timestamps; without one, UTC is used
"""

from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime, tzinfo
from decimal import Decimal
from functools import partial
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

from withings.codes import (
    ATTRIBUTIONS,
    DEVICE_MODELS,
    GENDERS,
    MEASURE_CATEGORIES,
    MEASURE_TYPES,
    MEASURE_UNITS,
    SLEEP_STATES,
    MeasureType,
    Unit,
)
from withings.domain.models import (
    ActivityDataPoint,
    ActivitySummary,
    BodyMeasurements,
    MeasureGroup,
    Measurement,
    SleepData,
    SleepDataPoint,
    SleepSummary,
    UserInfo,
)

logger = structlog.get_logger()


# ## Scalar converters


def epoch_to_datetime(seconds: int, tz: tzinfo | None = None) -> datetime:
    """Convert Unix timestamp to timezone-aware datetime.

    If tz is provided, the instant is expressed in that timezone, preserving
    the true local moment. Otherwise falls back to UTC.
    """
    return datetime.fromtimestamp(seconds, tz=tz or UTC)


def to_epoch(value: datetime | date | int) -> int:
    """Convert a datetime, calendar date or epoch int to epoch seconds.

    Naive datetimes are read as UTC; bare dates mean midnight UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp())
    if isinstance(value, date):
        return int(datetime(value.year, value.month, value.day, tzinfo=UTC).timestamp())
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise TypeError(f"Cannot convert {value!r} to epoch seconds")


def to_date_string(value: datetime | date | str) -> str:
    """Format a calendar day as YYYY-MM-DD.

    Datetimes use their own calendar day (in their own timezone).
    Strings are validated and passed through.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return date.fromisoformat(value).isoformat()
    raise TypeError(f"Cannot convert {value!r} to a calendar date")


def resolve_timezone(name: str | None) -> ZoneInfo | None:
    """Parse an IANA timezone name. None or unknown names mean UTC."""
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("withings_unknown_timezone", timezone=name)
        return None


def scaled_decimal(value: int, exponent: int) -> Decimal:
    """Decode a fixed-point magnitude: value × 10^exponent, exactly."""
    return Decimal(value).scaleb(exponent)


def measure_value(
    type_code: int, value: int, exponent: int
) -> tuple[MeasureType | int, Decimal, Unit | None]:
    """Decode a measure into (type, decimal, unit).

    Unknown type codes come back raw, with a bare decimal and no unit.
    """
    measure_type = MEASURE_TYPES.resolve(type_code)
    unit = MEASURE_UNITS.get(measure_type) if isinstance(measure_type, MeasureType) else None
    return measure_type, scaled_decimal(value, exponent), unit


def rewrite_fields(
    record: Mapping[str, Any], converters: Mapping[str, Callable[[Any], Any]]
) -> dict[str, Any]:
    """Apply each converter to its named field. Missing or null fields are skipped."""
    result = dict(record)
    for name, convert in converters.items():
        if result.get(name) is not None:
            result[name] = convert(result[name])
    return result


def _parse_date(value: str | date) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


# ## Payload converters


def convert_user_info(raw: Mapping[str, Any]) -> UserInfo:
    return UserInfo(
        **rewrite_fields(
            raw,
            {
                "birthdate": epoch_to_datetime,
                "gender": GENDERS.resolve,
            },
        )
    )


def convert_measurement(raw: Mapping[str, Any]) -> Measurement:
    """Decode one {value, type, unit} measure; the vendor's `unit` is the exponent."""
    measure_type, value, unit = measure_value(raw["type"], raw["value"], raw.get("unit", 0))
    return Measurement(**{**raw, "type": measure_type, "value": value, "unit": unit})


def convert_measure_group(raw: Mapping[str, Any], tz: tzinfo | None = None) -> MeasureGroup:
    record = rewrite_fields(
        raw,
        {
            "date": partial(epoch_to_datetime, tz=tz),
            "attrib": ATTRIBUTIONS.resolve,
            "category": MEASURE_CATEGORIES.resolve,
        },
    )
    record["measures"] = [convert_measurement(m) for m in raw.get("measures", [])]
    return MeasureGroup(**record)


def convert_body_measurements(body: Mapping[str, Any]) -> BodyMeasurements:
    tz = resolve_timezone(body.get("timezone"))
    record = rewrite_fields(body, {"updatetime": partial(epoch_to_datetime, tz=tz)})
    record["more"] = bool(body.get("more", False))
    record["measuregrps"] = [
        convert_measure_group(group, tz) for group in body.get("measuregrps", [])
    ]
    return BodyMeasurements(**record)


def convert_activity(raw: Mapping[str, Any]) -> ActivitySummary:
    return ActivitySummary(**rewrite_fields(raw, {"date": _parse_date}))


def convert_activity_data(body: Mapping[str, Any]) -> list[ActivityDataPoint]:
    """Flatten the intraday series, keyed by epoch string, into sorted points.

    The intraday endpoint is unverified against the live service; this
    follows the documented {"series": {"<epoch>": {...}}} shape.
    """
    tz = resolve_timezone(body.get("timezone"))
    series = body.get("series") or {}
    return [
        ActivityDataPoint(timestamp=epoch_to_datetime(int(epoch), tz), **values)
        for epoch, values in sorted(series.items(), key=lambda item: int(item[0]))
    ]


def convert_sleep_summary(body: Mapping[str, Any]) -> list[SleepSummary]:
    """Convert a sleep/getsummary body. Each entry carries its own timezone."""
    results: list[SleepSummary] = []
    for entry in body.get("series", []):
        to_datetime = partial(epoch_to_datetime, tz=resolve_timezone(entry.get("timezone")))
        record = rewrite_fields(
            entry,
            {
                "startdate": to_datetime,
                "enddate": to_datetime,
                "modified": to_datetime,
                "date": _parse_date,
                "model": DEVICE_MODELS.resolve,
            },
        )
        results.append(SleepSummary(**record))
    return results


def convert_sleep_data(body: Mapping[str, Any]) -> SleepData:
    tz = resolve_timezone(body.get("timezone"))
    to_datetime = partial(epoch_to_datetime, tz=tz)
    series = [
        SleepDataPoint(
            **rewrite_fields(
                point,
                {
                    "startdate": to_datetime,
                    "enddate": to_datetime,
                    "state": SLEEP_STATES.resolve,
                },
            )
        )
        for point in body.get("series", [])
    ]
    record = rewrite_fields(body, {"model": DEVICE_MODELS.resolve})
    record["series"] = series
    return SleepData(**record)
