"""A real-time clock kept as an offset from a time source."""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

from growbot.definitions import SENS_FRQ_SEC

logger = logging.getLogger(__name__)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class RealTimeClock:
    """A settable clock that also tracks the sensor cycle counter."""

    def __init__(self, timezone_offset: int = 0, now: Callable[[], float] = time.time):
        self.source = "RTC"
        self.timezone_offset = timezone_offset
        self.default_time = datetime(2018, 1, 1, 0, 0, 0)
        self.sensor_cycles = 0
        self._now = now
        self._offset = 0

    def _set_clock(self, timestamp: int) -> None:
        self._offset = int(timestamp) - int(self._now())

    def update_time(self, timestamp: int, adjust: bool = False) -> None:
        """Set the clock to ``timestamp``, shifted by the time-zone offset if ``adjust``."""
        if adjust:
            timestamp += self.timezone_offset
        self._set_clock(timestamp)
        logger.debug("Updated RTC to %s", self.print_time(timestamp))
        self.sync_sensor_cycles(timestamp)

    def set_time(self, year: int, month: int, day: int, hour: int, minute: int, second: int,
                 adjust: bool = False) -> None:
        """Set the clock from calendar fields."""
        self.update_time(self.to_epoch_time(year, month, day, hour, minute, second), adjust)

    def set_default_time(self, build_date: str | None = None, build_time: str | None = None) -> None:
        """Set the clock from a ``"Mmm dd yyyy"`` date and ``"hh:mm:ss"`` time.

        Without arguments the stored default time is used.
        """
        if build_date is not None or build_time is not None:
            self.default_time = self._parse_build_stamp(build_date or "", build_time or "")
        stamp = self.default_time
        timestamp = self.to_epoch_time(stamp.year, stamp.month, stamp.day,
                                       stamp.hour, stamp.minute, stamp.second)
        self._set_clock(timestamp)
        self.sync_sensor_cycles(timestamp)

    @staticmethod
    def _parse_build_stamp(build_date: str, build_time: str) -> datetime:
        try:
            month_name, day, year = build_date.split()
            hour, minute, second = (int(part) for part in build_time.split(":"))
        except ValueError as exc:
            raise ValueError(f"malformed build stamp {build_date!r} {build_time!r}") from exc
        if month_name not in _MONTHS:
            raise ValueError(f"unknown month {month_name!r}")
        return datetime(int(year), _MONTHS.index(month_name) + 1, int(day), hour, minute, second)

    @staticmethod
    def to_epoch_time(year: int, month: int, day: int, hour: int, minute: int, second: int) -> int:
        """Seconds since 1970-01-01 for the given UTC calendar fields."""
        moment = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
        return int(moment.timestamp())

    def get_epoch_time(self) -> int:
        """The clock's current reading in seconds since 1970."""
        return int(self._now()) + self._offset

    @staticmethod
    def print_date(timestamp: int) -> str:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        return f"{moment.day:02d}.{moment.month:02d}.{moment.year:4d}"

    @staticmethod
    def print_time(timestamp: int) -> str:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
        return f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"

    def sync_sensor_cycles(self, timestamp: int | None = None) -> int:
        """Derive the sensor cycle counter from ``timestamp`` or the clock; return it."""
        if timestamp is None:
            timestamp = self.get_epoch_time()
        self.sensor_cycles = int(timestamp) // SENS_FRQ_SEC
        logger.debug("Set new sensor cycle %d", self.sensor_cycles)
        return self.sensor_cycles