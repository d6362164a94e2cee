"""An editable calendar time that is kept in step with a real-time clock."""

import logging
from datetime import datetime, timezone

from growbot.definitions import SENS_FRQ_SEC
from growbot.realtime_clock import RealTimeClock

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60
_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_LONG_MONTHS = frozenset({1, 3, 5, 7, 8, 10, 12})
_SHORT_MONTHS = frozenset({4, 6, 9, 11})

MIN_YEAR = 2017
MAX_YEAR = 2027
SYNC_SECOND = 15


def _is_leap(years_since_2000: int) -> bool:
    y = years_since_2000
    return y > 0 and y % 4 == 0 and (y % 100 != 0 or y % 400 == 0)


class CurrentTime:
    """Calendar fields that a user can step through and push to a clock."""

    def __init__(self, year: int = MIN_YEAR, month: int = 1, day: int = 1,
                 hour: int = 0, minute: int = 0, second: int = 0):
        self.source = "RTC"
        self.year = year
        self.month = month
        self.day = day
        self.hour = hour
        self.minute = minute
        self.second = second
        self.user_update = False
        self.sensor_cycles = 0

    @staticmethod
    def epoch_seconds(year: int, month: int, day: int, hour: int, minute: int, second: int) -> int:
        """Seconds counted from the start of the year 2000 to the given moment."""
        years = year - 2000
        seconds = years * 365 * _SECONDS_PER_DAY
        seconds += sum(_SECONDS_PER_DAY for y in range(years) if _is_leap(y))
        for m in range(1, month):
            if m == 2 and _is_leap(years):
                seconds += 29 * _SECONDS_PER_DAY
            else:
                seconds += _MONTH_DAYS[m - 1] * _SECONDS_PER_DAY
        seconds += (day - 1) * _SECONDS_PER_DAY
        seconds += hour * 3600 + minute * 60 + second
        return seconds

    def epoch_time(self) -> int:
        """The stored moment as counted by :meth:`epoch_seconds`."""
        return self.epoch_seconds(self.year, self.month, self.day,
                                  self.hour, self.minute, self.second)

    def sync_time_object(self, rtc: RealTimeClock) -> None:
        """Push user edits to ``rtc``, or otherwise take the time from it."""
        if self.user_update:
            rtc.set_time(self.year, self.month, self.day, self.hour, self.minute, SYNC_SECOND)
            self.user_update = False
            logger.debug("Updating RTC from time object")
            self.sync_cycles()
        else:
            moment = datetime.fromtimestamp(rtc.get_epoch_time(), tz=timezone.utc)
            self.second = moment.second
            self.minute = moment.minute
            self.hour = moment.hour
            self.day = moment.day
            self.month = moment.month
            self.year = moment.year
            logger.debug("Updating time object from RTC")

    def sync_cycles(self) -> int:
        """Derive the sensor cycle counter from the stored minute; return it."""
        start = self.epoch_seconds(self.year, self.month, self.day, self.hour, self.minute, 0)
        self.sensor_cycles = start // SENS_FRQ_SEC
        logger.info("Synced cycles, new cycle: %d", self.sensor_cycles)
        return self.sensor_cycles

    def create_date(self) -> str:
        return f"{self.day:02d}.{self.month:02d}.{self.year:4d}"

    def create_time(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def _edited(self) -> None:
        self.user_update = True

    def inc_minute(self) -> None:
        self.minute = self.minute + 1 if self.minute < 59 else 0
        self._edited()

    def dec_minute(self) -> None:
        self.minute = self.minute - 1 if self.minute > 0 else 59
        self._edited()

    def inc_hour(self) -> None:
        self.hour = self.hour + 1 if self.hour < 23 else 0
        self._edited()

    def dec_hour(self) -> None:
        self.hour = self.hour - 1 if self.hour > 0 else 23
        self._edited()

    def inc_year(self) -> None:
        self.year = self.year + 1 if self.year < MAX_YEAR else MIN_YEAR
        self._edited()

    def dec_year(self) -> None:
        self.year = self.year - 1 if self.year > MIN_YEAR else MAX_YEAR
        self._edited()

    def inc_month(self) -> None:
        self.month = self.month + 1 if self.month < 12 else 1
        self._edited()

    def dec_month(self) -> None:
        self.month = self.month - 1 if self.month > 1 else 12
        self._edited()

    def _last_day(self) -> int:
        if self.month in _LONG_MONTHS:
            return 31
        if self.month in _SHORT_MONTHS:
            return 30
        if self.month == 2 or self.year % 4 == 0:
            return 29
        return 28

    def inc_day(self) -> None:
        self.day = self.day + 1 if self.day < self._last_day() else 1
        self._edited()

    def dec_day(self) -> None:
        self.day = self.day - 1 if self.day > 1 else self._last_day()
        self._edited()