"""Concrete sensors: an analog soil-moisture probe and a DHT temperature/humidity pair."""

import logging
import math
from collections.abc import Callable
from typing import Any

from growbot.definitions import Interval, RelOp
from growbot.sensor import BaseSensor, CycleSource

logger = logging.getLogger(__name__)

MOISTURE_SAMPLES = 3
TYPE_TEMPERATURE = 0
TYPE_HUMIDITY = 1
TYPE_MOISTURE = 2


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _trunc_div(dividend: int, divisor: int) -> int:
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend >= 0) == (divisor > 0) else -quotient


def _compare(relop: RelOp, current: Any, lower: Any, upper: Any) -> bool:
    """Compare a reading with the tolerance band ``lower``..``upper``."""
    relop = RelOp(relop)
    if relop == RelOp.EQUAL:
        if lower < upper and lower <= current <= upper:
            return True
        return upper <= current <= lower
    if relop == RelOp.NOTEQUAL:
        if lower < upper and lower > current > upper:
            return True
        return lower < current < upper
    if relop == RelOp.SMALLER:
        return current <= lower
    return current > upper


def _band(value: Any, tolerance: int) -> tuple[float, float]:
    low = (100.0 - tolerance) / 100.0
    high = (100.0 + tolerance) / 100.0
    return low * value, high * value


class AnalogMoistureSensor(BaseSensor):
    """A resistive probe whose raw reading is mapped onto 0..100 percent moisture.

    A raw value at or above the upper threshold is dry (0); at or below the
    lower threshold it is wet (100).
    """

    def __init__(self, reader: Callable[[], Any], title: str = "Moisture", unit: str = "%",
                 nan_val: Any = -1, min_val: Any = 0, max_val: Any = 100,
                 lower_threshold: Any = 0, upper_threshold: Any = 0,
                 clock: CycleSource | None = None, integer: bool = True):
        if not callable(reader):
            raise TypeError("reader must be callable")
        self._reader = reader
        super().__init__(title=title, unit=unit, type=TYPE_MOISTURE, nan_val=nan_val,
                         min_val=min_val, max_val=max_val,
                         lower_threshold=lower_threshold, upper_threshold=upper_threshold,
                         clock=clock, integer=integer)

    def read_raw(self) -> Any:
        """Average of a few probe readings, ignoring missing ones."""
        readings = [self._coerce(self._reader()) for _ in range(MOISTURE_SAMPLES)]
        valid = [reading for reading in readings if reading != self.nan_val]
        if not valid:
            return self.nan_val
        if self.integer:
            return _trunc_div(sum(valid), len(valid))
        return sum(valid) / len(valid)

    def read_value(self) -> Any:
        """The reading as a moisture percentage, or the NaN marker value."""
        raw = self.read_raw()
        if raw == self.nan_val:
            return raw
        if self.integer:
            if raw >= self.upper_threshold:
                return 0
            if raw <= self.lower_threshold:
                return 100
            span = float(self.upper_threshold - self.lower_threshold)
            return _round_half_away(float(self.upper_threshold - raw) / span * 100)
        if raw >= self.upper_threshold:
            return 0.0
        if raw <= self.lower_threshold:
            return 100.0
        span = float(self.upper_threshold - self.lower_threshold)
        value = float(raw - self.lower_threshold) / span * 100
        logger.debug("Moisture value %.2f%%", value)
        return value

    def get_value(self) -> str:
        """The current moisture reading followed by the unit."""
        value = self.read_value()
        if self.integer:
            return f"{value}{self.unit}"
        return f"{float(value):.2f}{self.unit}"

    def set_upper_threshold(self) -> None:
        """Calibrate the dry end from the current raw reading."""
        self.upper_threshold = self.read_raw()
        logger.debug("Set upper threshold to %s", self.upper_threshold)

    def set_lower_threshold(self) -> None:
        """Calibrate the wet end from the current raw reading."""
        self.lower_threshold = self.read_raw()
        logger.debug("Set lower threshold to %s", self.lower_threshold)

    def reset(self) -> None:
        """Clear thresholds and history."""
        self.lower_threshold = self._coerce(0)
        self.upper_threshold = self._coerce(0)
        super().reset()

    def compare_with_value(self, relop: RelOp, interval: Interval, value: Any,
                           tolerance: int) -> bool:
        """Compare the average over ``interval`` with ``value`` give or take ``tolerance`` percent."""
        low, high = _band(float(value), tolerance)
        if self.integer:
            current: Any = self.get_avg_int(interval)
            lower: Any = int(low)
            upper: Any = int(high)
        else:
            current = self.get_avg_float(interval)
            lower, upper = low, high
        if current == self.nan_val:
            return False
        return _compare(relop, current, lower, upper)


class _DHTSensor(BaseSensor):
    """One channel of a DHT sensor read through a callable."""

    def __init__(self, reader: Callable[[], float], title: str, unit: str, type: int,
                 nan_val: int, min_val: int, max_val: int, clock: CycleSource | None):
        if not callable(reader):
            raise TypeError("reader must be callable")
        self._reader = reader
        super().__init__(title=title, unit=unit, type=type, nan_val=nan_val,
                         min_val=min_val, max_val=max_val,
                         lower_threshold=nan_val, upper_threshold=nan_val,
                         clock=clock, integer=True)

    def read_raw(self) -> int:
        reading = float(self._reader())
        if math.isnan(reading):
            return self.nan_val
        return _round_half_away(reading)

    def read_value(self) -> int:
        return self.read_raw()

    def get_value(self) -> str:
        return f"{float(self._reader()):.2f}{self.unit}"

    def reset(self) -> None:
        """Clear thresholds and history."""
        self.lower_threshold = self.nan_val
        self.upper_threshold = self.nan_val
        super().reset()

    def _bounds(self, value: int, tolerance: int) -> tuple[int, int]:
        low, high = _band(float(value), tolerance)
        return int(low), int(high)

    def compare_with_value(self, relop: RelOp, interval: Interval, value: int,
                           tolerance: int) -> bool:
        """Compare the average over ``interval`` with ``value`` give or take ``tolerance``."""
        current = self.get_avg_int(interval)
        lower, upper = self._bounds(value, tolerance)
        if current == self.nan_val:
            return False
        return _compare(relop, current, lower, upper)


class DHTTemperature(_DHTSensor):
    """Temperature channel of a DHT sensor."""

    def __init__(self, reader: Callable[[], float], title: str = "Temperature",
                 unit: str = "C", nan_val: int = -127, min_val: int = 0, max_val: int = 50,
                 clock: CycleSource | None = None):
        super().__init__(reader, title, unit, TYPE_TEMPERATURE, nan_val, min_val, max_val, clock)

    def read_raw(self) -> int:
        return super().read_raw()

    def read_value(self) -> int:
        return super().read_value()

    def get_value(self) -> str:
        return super().get_value()

    def reset(self) -> None:
        super().reset()

    def compare_with_value(self, relop: RelOp, interval: Interval, value: int,
                           tolerance: int) -> bool:
        return super().compare_with_value(relop, interval, value, tolerance)


class DHTHumidity(_DHTSensor):
    """Humidity channel of a DHT sensor."""

    def __init__(self, reader: Callable[[], float], title: str = "Humidity",
                 unit: str = "%", nan_val: int = -127, min_val: int = 0, max_val: int = 100,
                 clock: CycleSource | None = None):
        super().__init__(reader, title, unit, TYPE_HUMIDITY, nan_val, min_val, max_val, clock)

    def read_raw(self) -> int:
        return super().read_raw()

    def read_value(self) -> int:
        return super().read_value()

    def get_value(self) -> str:
        return super().get_value()

    def reset(self) -> None:
        super().reset()

    def _bounds(self, value: int, tolerance: int) -> tuple[int, int]:
        # The band factor here is 100 +/- tolerance/100 rather than a percentage.
        lower = int((100.0 - tolerance / 100.0) * value)
        upper = int((100.0 + tolerance / 100.0) * value)
        return lower, upper

    def compare_with_value(self, relop: RelOp, interval: Interval, value: int,
                           tolerance: int) -> bool:
        return super().compare_with_value(relop, interval, value, tolerance)