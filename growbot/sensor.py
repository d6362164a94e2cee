"""Sensors that keep a rolling history of readings at several resolutions."""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from growbot.definitions import (
    SENS_VALUES_DAY,
    SENS_VALUES_HOUR,
    SENS_VALUES_MIN,
    SENS_VALUES_MONTH,
    SENS_VALUES_YEAR,
    Interval,
    Scope,
)

logger = logging.getLogger(__name__)

NAN_MARK = "#"

_SECONDS_PER_VALUE = 60 // SENS_VALUES_MIN
_MINUTES_PER_VALUE = SENS_VALUES_HOUR // 60
_DAY_VALUES_PER_HOUR = SENS_VALUES_DAY // 24
_MONTH_VALUES_PER_DAY = SENS_VALUES_MONTH // 28

# Interval -> (history that is averaged, number of steps back from the newest value)
_INTERVAL_WINDOWS: dict[Interval, tuple[Scope, int]] = {
    Interval.TENSEC: (Scope.DATE_MINUTE, 10 // _SECONDS_PER_VALUE),
    Interval.TWENTYSEC: (Scope.DATE_MINUTE, 20 // _SECONDS_PER_VALUE),
    Interval.THIRTYSEC: (Scope.DATE_MINUTE, 30 // _SECONDS_PER_VALUE),
    Interval.ONEMIN: (Scope.DATE_MINUTE, SENS_VALUES_MIN),
    Interval.TWOMIN: (Scope.DATE_HOUR, 2 * _MINUTES_PER_VALUE),
    Interval.FIVEMIN: (Scope.DATE_HOUR, 5 * _MINUTES_PER_VALUE),
    Interval.QUARTER: (Scope.DATE_HOUR, 15 * _MINUTES_PER_VALUE),
    Interval.HALF: (Scope.DATE_HOUR, 30 * _MINUTES_PER_VALUE),
    Interval.ONE: (Scope.DATE_HOUR, SENS_VALUES_HOUR),
    Interval.TWO: (Scope.DATE_DAY, 2 * _DAY_VALUES_PER_HOUR),
    Interval.THREE: (Scope.DATE_DAY, 3 * _DAY_VALUES_PER_HOUR),
    Interval.FOUR: (Scope.DATE_DAY, 4 * _DAY_VALUES_PER_HOUR),
    Interval.SIX: (Scope.DATE_DAY, 6 * _DAY_VALUES_PER_HOUR),
    Interval.TWELVE: (Scope.DATE_DAY, 12 * _DAY_VALUES_PER_HOUR),
    Interval.DAILY: (Scope.DATE_DAY, SENS_VALUES_DAY),
    Interval.BIDAILY: (Scope.DATE_MONTH, 2 * _MONTH_VALUES_PER_DAY),
    Interval.WEEKLY: (Scope.DATE_MONTH, 7 * _MONTH_VALUES_PER_DAY),
    Interval.BIWEEKLY: (Scope.DATE_MONTH, 14 * _MONTH_VALUES_PER_DAY),
}

# (target history, source history, period in sensor cycles, steps averaged)
_AGGREGATIONS: tuple[tuple[Scope, Scope, int, int], ...] = (
    (Scope.DATE_HOUR, Scope.DATE_MINUTE,
     SENS_VALUES_MIN * 60 // SENS_VALUES_HOUR,
     SENS_VALUES_MIN * 60 // SENS_VALUES_HOUR),
    (Scope.DATE_DAY, Scope.DATE_HOUR,
     SENS_VALUES_MIN * 60 * 24 // SENS_VALUES_DAY,
     SENS_VALUES_HOUR * 24 // SENS_VALUES_DAY),
    (Scope.DATE_MONTH, Scope.DATE_DAY,
     SENS_VALUES_MIN * 60 * 24 * 28 // SENS_VALUES_MONTH,
     SENS_VALUES_DAY * 28 // SENS_VALUES_MONTH),
    (Scope.DATE_YEAR, Scope.DATE_MONTH,
     SENS_VALUES_MIN * 60 * 24 * 7 * 52 // SENS_VALUES_YEAR,
     (SENS_VALUES_MONTH // 4) * (52 // SENS_VALUES_YEAR)),
)

_HISTORY_SIZES: dict[Scope, int] = {
    Scope.DATE_MINUTE: SENS_VALUES_MIN,
    Scope.DATE_HOUR: SENS_VALUES_HOUR,
    Scope.DATE_DAY: SENS_VALUES_DAY,
    Scope.DATE_MONTH: SENS_VALUES_MONTH,
    Scope.DATE_YEAR: SENS_VALUES_YEAR,
}

# History -> (pointer key, values key) in the JSON form
_HISTORY_KEYS: dict[Scope, tuple[str, str]] = {
    Scope.DATE_MINUTE: ("min_ptr", "min_vals"),
    Scope.DATE_HOUR: ("h_ptr", "h_vals"),
    Scope.DATE_DAY: ("d_ptr", "d_vals"),
    Scope.DATE_MONTH: ("m_ptr", "m_vals"),
    Scope.DATE_YEAR: ("y_ptr", "y_vals"),
}

_SCOPE_NAMES: dict[Scope, str] = {
    Scope.HEADER: "HEADER",
    Scope.DETAILS: "DETAILS",
    Scope.AVG: "AVG",
    Scope.DATE_MINUTE: "MIN",
    Scope.DATE_HOUR: "HOUR",
    Scope.DATE_DAY: "DAY",
    Scope.DATE_MONTH: "MON",
    Scope.DATE_YEAR: "YEAR",
    Scope.DATE_ALL: "ALL",
}

_AVG_KEYS: tuple[tuple[str, Interval], ...] = (
    ("last", Interval.REALTIME),
    ("10s", Interval.TENSEC),
    ("20s", Interval.TWENTYSEC),
    ("30s", Interval.THIRTYSEC),
    ("1min", Interval.ONEMIN),
    ("2min", Interval.TWOMIN),
    ("5min", Interval.FIVEMIN),
    ("15min", Interval.QUARTER),
    ("30min", Interval.HALF),
    ("1h", Interval.ONE),
    ("2h", Interval.TWO),
    ("3h", Interval.THREE),
    ("4h", Interval.FOUR),
    ("6h", Interval.SIX),
    ("12h", Interval.TWELVE),
    ("1d", Interval.DAILY),
    ("2d", Interval.BIDAILY),
    ("1w", Interval.WEEKLY),
    ("2w", Interval.BIWEEKLY),
)


class CycleSource(Protocol):
    """Anything that counts sensor cycles, such as the real-time clock."""

    sensor_cycles: int


@dataclass
class History:
    """A ring of values with a pointer to the newest one."""

    size: int
    values: list = field(default_factory=list)
    ptr: int = 0

    def clear(self, nan_val: Any) -> None:
        """Fill with ``nan_val``; the pointer sits past the end until the first value."""
        self.values = [nan_val] * self.size
        self.ptr = self.size

    def advance(self) -> None:
        self.ptr = self.ptr + 1 if self.ptr < self.size - 1 else 0


def _trunc_div(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend >= 0) == (divisor > 0) else -quotient


def _as_mapping(data: Mapping[str, Any] | str) -> Mapping[str, Any]:
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ValueError("payload is not valid JSON") from exc
    if not isinstance(data, Mapping):
        raise ValueError("payload must be a JSON object")
    return data


def _present(value: Any) -> bool:
    return value is not None and value != ""


class BaseSensor:
    """A sensor reading that is averaged into minute, hour, day, month and year histories.

    ``integer`` selects whole-number readings, whose averages are truncated
    toward zero; otherwise readings and averages are floats.
    """

    def __init__(self, title: str = "", unit: str = "", type: int = 0,
                 nan_val: Any = -127, min_val: Any = 0, max_val: Any = 100,
                 lower_threshold: Any = None, upper_threshold: Any = None,
                 clock: CycleSource | None = None, integer: bool = True):
        self.title = title
        self.unit = unit
        self.type = type
        self.integer = integer
        self.nan_val = self._coerce(nan_val)
        self.min_val = self._coerce(min_val)
        self.max_val = self._coerce(max_val)
        self.lower_threshold = self.nan_val if lower_threshold is None else self._coerce(lower_threshold)
        self.upper_threshold = self.nan_val if upper_threshold is None else self._coerce(upper_threshold)
        self.clock = clock
        self.history: dict[Scope, History] = {
            scope: History(size) for scope, size in _HISTORY_SIZES.items()
        }
        self._clear_history()

    # -- helpers -----------------------------------------------------------

    def _coerce(self, value: Any) -> Any:
        return int(value) if self.integer else float(value)

    def _cycles(self) -> int:
        return 0 if self.clock is None else int(self.clock.sensor_cycles)

    def _clear_history(self) -> None:
        for series in self.history.values():
            series.clear(self.nan_val)

    def _format(self, value: Any) -> str:
        if self.integer or isinstance(value, int):
            return str(int(value))
        return f"{value:.2f}"

    def _to_nan(self, value: Any) -> str:
        return NAN_MARK if value == self.nan_val else self._format(value)

    def _from_nan(self, value: Any) -> Any:
        if value == NAN_MARK:
            return self.nan_val
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"not a sensor value: {value!r}") from exc
        return int(number) if self.integer else number

    # -- readings ----------------------------------------------------------

    def read_raw(self) -> Any:
        """The unprocessed reading; a plain sensor reads zero."""
        return self._coerce(0)

    def read_value(self) -> Any:
        """The processed reading; a plain sensor reads zero."""
        return self._coerce(0)

    def get_value(self) -> str:
        """The current reading with its unit."""
        return self._format(self.read_value()) + self.unit

    def get_title(self) -> str:
        return self.title

    # -- statistics --------------------------------------------------------

    def average(self, start: int, num_elements: int, values: list) -> Any:
        """Average ``values`` walking back from ``start`` over ``num_elements`` steps.

        The walk covers ``num_elements + 1`` slots, wraps around the end of the
        ring and stops at the first missing value. Without any value the
        result is the NaN marker value.
        """
        size = len(values)
        total: Any = 0
        count = 0
        ptr = start
        for _ in range(num_elements + 1):
            if not 0 <= ptr < size or values[ptr] == self.nan_val:
                break
            total += values[ptr]
            count += 1
            ptr = ptr - 1 if ptr > 0 else size - 1
        if count == 0:
            logger.debug("No values to average for %s, returning NaN value", self.title)
            return self.nan_val
        if self.integer:
            return _trunc_div(int(total), count)
        return float(total) / count

    def last_value(self) -> Any:
        """The newest minute value, or the NaN marker before the first reading."""
        series = self.history[Scope.DATE_MINUTE]
        if 0 <= series.ptr < series.size:
            return series.values[series.ptr]
        return self.nan_val

    def interval_average(self, interval: Interval) -> Any:
        """The average over ``interval``; REALTIME is the newest value."""
        interval = Interval(interval)
        if interval == Interval.REALTIME:
            return self.last_value()
        scope, count = _INTERVAL_WINDOWS[interval]
        series = self.history[scope]
        return self.average(series.ptr, count, series.values)

    def get_avg_int(self, interval: Interval) -> int:
        return int(self.interval_average(interval))

    def get_avg_float(self, interval: Interval) -> float:
        return float(self.interval_average(interval))

    def min_value(self, values: list) -> Any:
        """The smallest of ``values`` and the sensor's lower limit."""
        return min([self.min_val, *values])

    def max_value(self, values: list) -> Any:
        """The largest of ``values`` and the sensor's upper limit."""
        return max([self.max_val, *values])

    def get_max_value_int(self, scope: Scope) -> int:
        series = self.history.get(Scope(scope))
        return 0 if series is None else int(self.max_value(series.values))

    def get_min_value_int(self, scope: Scope) -> int:
        series = self.history.get(Scope(scope))
        return 0 if series is None else int(self.min_value(series.values))

    def get_element_value_int(self, scope: Scope, element: int) -> int:
        """One stored value; the NaN marker outside the history, 0 for other scopes."""
        series = self.history.get(Scope(scope))
        if series is None:
            return 0
        if 0 <= element < series.size:
            return int(series.values[element])
        return int(self.nan_val)

    # -- calibration -------------------------------------------------------

    def set_upper_threshold(self) -> None:
        """Calibrate the upper threshold; a plain sensor has nothing to calibrate."""

    def set_lower_threshold(self) -> None:
        """Calibrate the lower threshold; a plain sensor has nothing to calibrate."""

    # -- cycle -------------------------------------------------------------

    def update(self) -> None:
        """Take a reading and fold averages into the coarser histories when due."""
        cycles = self._cycles()
        minute = self.history[Scope.DATE_MINUTE]
        minute.advance()
        minute.values[minute.ptr] = self._coerce(self.read_value())

        for target_scope, source_scope, period, count in _AGGREGATIONS:
            if cycles >= period and cycles % period == 0:
                target = self.history[target_scope]
                source = self.history[source_scope]
                target.advance()
                target.values[target.ptr] = self.average(source.ptr, count, source.values)
                logger.debug("Saved new %s value for %s at %d: %s",
                             target_scope.name, self.title, target.ptr,
                             target.values[target.ptr])

    def reset(self) -> None:
        """Forget all stored values."""
        self._clear_history()

    # -- serialisation -----------------------------------------------------

    def serialize_json(self, id: int, scope: Scope) -> str:
        scope = Scope(scope)
        document: dict[str, Any] = {}

        if scope == Scope.LIST:
            document["tit"] = self.title
            document["unit"] = self.unit
            document["typ"] = self.type

        if scope in _SCOPE_NAMES:
            document["obj"] = "SENSOR"
            document["scp"] = _SCOPE_NAMES[scope]
            document["id"] = id
            document["tit"] = self.title
            document["typ"] = self.type
            document["unit"] = self.unit
            document["nan"] = self.nan_val
            document["min"] = self.min_val
            document["max"] = self.max_val
            document["low"] = self.lower_threshold
            document["high"] = self.upper_threshold

        if scope in (Scope.DETAILS, Scope.AVG):
            document["avg_vals"] = {key: self.interval_average(interval)
                                    for key, interval in _AVG_KEYS}

        for history_scope, (ptr_key, vals_key) in _HISTORY_KEYS.items():
            if scope in (Scope.DETAILS, history_scope, Scope.DATE_ALL):
                series = self.history[history_scope]
                document[ptr_key] = series.ptr
                document["frq"] = series.size
                document[vals_key] = [self._to_nan(value) for value in series.values]

        return json.dumps(document, separators=(",", ":"))

    def deserialize_json(self, data: Mapping[str, Any] | str) -> None:
        """Update thresholds and histories from a JSON object; absent fields are kept."""
        data = _as_mapping(data)
        lower = self._from_nan(data["low"]) if _present(data.get("low")) else self.lower_threshold
        upper = self._from_nan(data["high"]) if _present(data.get("high")) else self.upper_threshold

        updates: dict[Scope, tuple[int, list]] = {}
        for scope, (ptr_key, vals_key) in _HISTORY_KEYS.items():
            series = self.history[scope]
            ptr = series.ptr
            if _present(data.get(ptr_key)):
                ptr = int(data[ptr_key])
                if not 0 <= ptr <= series.size:
                    raise ValueError(f"{ptr_key} {ptr} is out of range")
            values = list(series.values)
            raw = data.get(vals_key)
            if isinstance(raw, list):
                for index, item in enumerate(raw[:series.size]):
                    if _present(item):
                        values[index] = self._from_nan(item)
            updates[scope] = (ptr, values)

        self.lower_threshold = lower
        self.upper_threshold = upper
        for scope, (ptr, values) in updates.items():
            self.history[scope].ptr = ptr
            self.history[scope].values = values
        logger.debug("Deserialized sensor %s", self.title)