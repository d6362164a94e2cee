"""A buffered event log kept as one JSON object per line in a file."""

import json
import logging
import time
from collections.abc import Iterable, Mapping
from pathlib import Path

from growbot.definitions import LOGBUFFER_SIZE, SENS_FRQ_SEC
from growbot.realtime_clock import RealTimeClock

logger = logging.getLogger(__name__)


class LogEntry:
    """One log event with a bounded set of key/value parameters."""

    def __init__(self, id: int, type: int, origin: str, message: str, size: int):
        self.id = id
        self.type = type
        self.origin = origin
        self.message = message
        self.size = size
        self.parameters: list[tuple[str, str]] = []

    def add_parameter(self, key: str, value: str) -> None:
        """Add a parameter; ignored once ``size`` parameters are held."""
        if len(self.parameters) < self.size:
            self.parameters.append((str(key), str(value)))

    def serialize_json(self, timestamp: int) -> str:
        """The entry as one compact JSON line."""
        document = {
            "id": self.id,
            "typ": self.type,
            "time": timestamp,
            "src": self.origin,
            "msg": self.message,
            "keys": [key for key, _ in self.parameters if key != ""],
            "vals": [value for _, value in self.parameters if value != ""],
        }
        return json.dumps(document, separators=(",", ":"))


class LogEngine:
    """Collects log entries in memory and appends them to a file in batches."""

    def __init__(self, path: str | Path = "log.json", clock: RealTimeClock | None = None,
                 buffer_size: int = LOGBUFFER_SIZE):
        if buffer_size < 1:
            raise ValueError("buffer size must be positive")
        self.path = Path(path)
        self.clock = clock
        self.buffer_size = buffer_size
        self.counter = 0
        self._buffer: list[LogEntry] = []

    def _timestamp(self) -> int:
        if self.clock is None:
            return int(time.time())
        return self.clock.sensor_cycles * SENS_FRQ_SEC - self.clock.timezone_offset

    def begin(self) -> int:
        """Continue numbering after the entries already in the file; return the count."""
        try:
            with self.path.open(encoding="utf-8") as handle:
                self.counter = sum(1 for _ in handle)
        except FileNotFoundError:
            logger.error("Could not determine length of file %s", self.path)
        return self.counter

    def add_log_entry(self, type: int, origin: str, message: str,
                      parameters: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> LogEntry:
        """Record an event; the buffer is written out first when it is full."""
        if len(self._buffer) >= self.buffer_size:
            self.flush()
        pairs = list(parameters.items() if isinstance(parameters, Mapping) else parameters)
        entry = LogEntry(self.counter, type, origin, message, len(pairs))
        for key, value in pairs:
            entry.add_parameter(key, value)
        self._buffer.append(entry)
        self.counter += 1
        return entry

    def flush(self) -> None:
        """Append all buffered entries to the file and empty the buffer."""
        if self._buffer:
            timestamp = self._timestamp()
            with self.path.open("a", encoding="utf-8") as handle:
                for entry in self._buffer:
                    handle.write(entry.serialize_json(timestamp) + "\n")
            logger.debug("Saved %d log entries to %s", len(self._buffer), self.path)
        self._buffer.clear()

    def serialize_json(self, end: int = 0, count: int = 0) -> str:
        """The ``count`` entries before line ``end`` (default: the newest) as JSON."""
        self.flush()
        if count == 0:
            count = self.buffer_size
        if end <= 0:
            end = self.counter
        start = max(end - count, 0)
        entries = []
        try:
            with self.path.open(encoding="utf-8") as handle:
                for number, line in enumerate(handle):
                    if number >= end:
                        break
                    if number >= start:
                        try:
                            entries.append(json.loads(line))
                        except json.JSONDecodeError:
                            logger.warning("Skipping malformed log line %d", number)
        except FileNotFoundError:
            logger.error("Could not read from file %s", self.path)
        return json.dumps({"num": self.counter, "list": entries}, separators=(",", ":"))

    def reset(self) -> bool:
        """Write out the buffer, delete the log file and restart numbering."""
        self.flush()
        self.counter = 0
        try:
            self.path.unlink()
        except FileNotFoundError:
            logger.error("Could not reset log file %s", self.path)
            return False
        logger.info("Reset log file %s", self.path)
        return True