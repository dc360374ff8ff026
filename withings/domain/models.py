"""Domain records returned by the Withings client.

Each record is the vendor payload with epoch timestamps replaced by
timezone-aware datetimes, integer codes replaced by StrEnum symbols, and
fixed-point magnitudes replaced by Decimals carrying a unit.

Design principles:
- Vendor field names are kept, so records read like the API documentation
- Unknown codes stay as raw integers (every coded field is `Symbol | int`)
- Fields the models do not name are kept as extras, never dropped
- Records are frozen; the caller owns them after return
"""

import datetime as dt
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from withings.codes import (
    Attribution,
    DeviceModel,
    Gender,
    MeasureCategory,
    MeasureType,
    SleepState,
    Unit,
)


class WithingsRecord(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)


class UserInfo(WithingsRecord):
    id: int
    firstname: str | None = None
    lastname: str | None = None
    shortname: str | None = None
    gender: Gender | int | None = None
    fatmethod: int | None = None
    birthdate: dt.datetime | None = None
    ispublic: int | None = None


class Measurement(WithingsRecord):
    """A single decoded measure: ``value`` already scaled, ``unit`` physical."""

    type: MeasureType | int
    value: Decimal
    unit: Unit | None = None


class MeasureGroup(WithingsRecord):
    grpid: int
    attrib: Attribution | int | None = None
    date: dt.datetime
    category: MeasureCategory | int | None = None
    measures: list[Measurement] = Field(default_factory=list)


class BodyMeasurements(WithingsRecord):
    """One page of measure groups from `measure/getmeas`."""

    updatetime: dt.datetime | None = None
    timezone: str | None = None
    more: bool = False
    offset: int | None = None
    measuregrps: list[MeasureGroup] = Field(default_factory=list)


class ActivitySummary(WithingsRecord):
    date: dt.date
    timezone: str | None = None
    steps: int | None = None
    distance: float | None = None
    calories: float | None = None
    elevation: float | None = None
    soft: int | None = None
    moderate: int | None = None
    intense: int | None = None


class ActivityDataPoint(WithingsRecord):
    timestamp: dt.datetime
    steps: int | None = None
    elevation: float | None = None
    calories: float | None = None
    distance: float | None = None
    duration: int | None = None


class SleepSummary(WithingsRecord):
    id: int | None = None
    timezone: str | None = None
    model: DeviceModel | int | None = None
    startdate: dt.datetime
    enddate: dt.datetime
    date: dt.date | None = None
    modified: dt.datetime | None = None
    data: dict[str, Any] = Field(default_factory=dict)


class SleepDataPoint(WithingsRecord):
    startdate: dt.datetime
    enddate: dt.datetime
    state: SleepState | int


class SleepData(WithingsRecord):
    model: DeviceModel | int | None = None
    series: list[SleepDataPoint] = Field(default_factory=list)
