"""Static code tables for the Withings wire format.

The vendor encodes statuses, genders, device models, measurement categories,
measurement types and sleep states as small integers. Each CodeTable maps
those integers to StrEnum members and back.

Forward lookups never fail: a code the table does not know is returned
unchanged, so new vendor codes stay observable instead of crashing decoding.
Reverse lookups (used when a caller filters by name) raise UnknownSymbolError.
"""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from shared.exceptions import UnknownSymbolError

E = TypeVar("E", bound=StrEnum)


class StatusCode(StrEnum):
    SUCCESS = "success"
    BAD_USERID = "bad-userid"
    NOT_AUTHORIZED = "not-authorized"
    BAD_OAUTH_SIGNATURE = "bad-oauth-signature"
    INVALID_PARAMS = "invalid-params"
    TOO_MANY_REQUESTS = "too-many-requests"
    BAD_ACTION = "bad-action"
    UNKNOWN_ERROR = "unknown-error"
    UNDEFINED_SERVICE = "undefined-service"


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"


class DeviceModel(StrEnum):
    USER = "user"
    BODY_SCALE = "body-scale"
    BLOOD_PRESSURE_MONITOR = "blood-pressure-monitor"
    PULSE = "pulse"
    AURA = "aura"


class MeasureCategory(StrEnum):
    REAL = "real"
    GOAL = "goal"


class MeasureType(StrEnum):
    WEIGHT = "weight"
    HEIGHT = "height"
    FAT_FREE_MASS = "fat-free-mass"
    FAT_RATIO = "fat-ratio"
    FAT_MASS_WEIGHT = "fat-mass-weight"
    BLOOD_PRESSURE_DIASTOLIC = "blood-pressure-diastolic"
    BLOOD_PRESSURE_SYSTOLIC = "blood-pressure-systolic"
    HEART_PULSE = "heart-pulse"
    SPO2 = "spo2"


class Unit(StrEnum):
    KILOGRAMS = "kg"
    METERS = "m"
    PERCENT = "%"
    MMHG = "mmHg"
    BPM = "bpm"


class SleepState(StrEnum):
    AWAKE = "awake"
    LIGHT = "light"
    DEEP = "deep"
    REM = "rem"


class Attribution(StrEnum):
    """How a measure group was captured."""

    DEVICE = "device"
    AMBIGUOUS = "ambiguous"
    MANUAL = "manual"
    MANUAL_CREATION = "manual-creation"
    AUTO = "auto"
    CONFIRMED = "confirmed"


class CodeTable(Generic[E]):
    """Immutable bidirectional mapping between vendor codes and symbols."""

    def __init__(self, name: str, codes: Mapping[int, E]):
        self.name = name
        self._by_code: Mapping[int, E] = MappingProxyType(dict(codes))
        self._by_symbol: Mapping[str, int] = MappingProxyType(
            {str(symbol): code for code, symbol in codes.items()}
        )

    def resolve(self, code: Any) -> E | Any:
        """Return the symbol for ``code``, or ``code`` itself if unknown."""
        try:
            return self._by_code.get(code, code)
        except TypeError:
            return code

    def code_for(self, symbol: E | str) -> int:
        """Return the vendor code for ``symbol`` (an enum member or its value)."""
        if isinstance(symbol, str) and str(symbol) in self._by_symbol:
            return self._by_symbol[str(symbol)]
        raise UnknownSymbolError(self.name, symbol)

    @property
    def codes(self) -> Mapping[int, E]:
        return self._by_code

    def __contains__(self, code: object) -> bool:
        return code in self._by_code


STATUS_CODES: CodeTable[StatusCode] = CodeTable(
    "status",
    {
        0: StatusCode.SUCCESS,  # Operation was successful
        247: StatusCode.BAD_USERID,  # The userid provided is absent, or incorrect
        250: StatusCode.NOT_AUTHORIZED,  # userid and/or OAuth credentials do not match
        342: StatusCode.BAD_OAUTH_SIGNATURE,  # The OAuth signature is invalid
        503: StatusCode.INVALID_PARAMS,  # Invalid or missing parameters
        601: StatusCode.TOO_MANY_REQUESTS,
        2554: StatusCode.BAD_ACTION,  # Wrong action or wrong webservice
        2555: StatusCode.UNKNOWN_ERROR,
        2556: StatusCode.UNDEFINED_SERVICE,
    },
)

GENDERS: CodeTable[Gender] = CodeTable("gender", {0: Gender.MALE, 1: Gender.FEMALE})

DEVICE_MODELS: CodeTable[DeviceModel] = CodeTable(
    "device model",
    {
        0: DeviceModel.USER,
        1: DeviceModel.BODY_SCALE,
        4: DeviceModel.BLOOD_PRESSURE_MONITOR,
        16: DeviceModel.PULSE,
        32: DeviceModel.AURA,
    },
)

MEASURE_CATEGORIES: CodeTable[MeasureCategory] = CodeTable(
    "measure category", {1: MeasureCategory.REAL, 2: MeasureCategory.GOAL}
)

MEASURE_TYPES: CodeTable[MeasureType] = CodeTable(
    "measure type",
    {
        1: MeasureType.WEIGHT,
        4: MeasureType.HEIGHT,
        5: MeasureType.FAT_FREE_MASS,
        6: MeasureType.FAT_RATIO,
        8: MeasureType.FAT_MASS_WEIGHT,
        9: MeasureType.BLOOD_PRESSURE_DIASTOLIC,
        10: MeasureType.BLOOD_PRESSURE_SYSTOLIC,
        11: MeasureType.HEART_PULSE,
        54: MeasureType.SPO2,
    },
)

MEASURE_UNITS: Mapping[MeasureType, Unit] = MappingProxyType(
    {
        MeasureType.WEIGHT: Unit.KILOGRAMS,
        MeasureType.HEIGHT: Unit.METERS,
        MeasureType.FAT_FREE_MASS: Unit.KILOGRAMS,
        MeasureType.FAT_RATIO: Unit.PERCENT,
        MeasureType.FAT_MASS_WEIGHT: Unit.KILOGRAMS,
        MeasureType.BLOOD_PRESSURE_DIASTOLIC: Unit.MMHG,
        MeasureType.BLOOD_PRESSURE_SYSTOLIC: Unit.MMHG,
        MeasureType.HEART_PULSE: Unit.BPM,
        MeasureType.SPO2: Unit.PERCENT,
    }
)

SLEEP_STATES: CodeTable[SleepState] = CodeTable(
    "sleep state",
    {
        0: SleepState.AWAKE,
        1: SleepState.LIGHT,
        2: SleepState.DEEP,
        3: SleepState.REM,
    },
)

ATTRIBUTIONS: CodeTable[Attribution] = CodeTable(
    "attribution",
    {
        0: Attribution.DEVICE,
        1: Attribution.AMBIGUOUS,
        2: Attribution.MANUAL,
        4: Attribution.MANUAL_CREATION,
        5: Attribution.AUTO,
        7: Attribution.CONFIRMED,
    },
)
