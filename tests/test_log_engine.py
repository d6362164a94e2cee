import json

import pytest

from growbot.definitions import SENS_FRQ_SEC
from growbot.log_engine import LogEngine, LogEntry
from growbot.realtime_clock import RealTimeClock


@pytest.fixture
def clock():
    rtc = RealTimeClock(timezone_offset=3600, now=lambda: 0)
    rtc.sensor_cycles = 1000
    return rtc


@pytest.fixture
def engine(tmp_path, clock):
    return LogEngine(tmp_path / "log.json", clock, buffer_size=3)


def test_entry_serialization_keys():
    entry = LogEntry(7, 0, "Action", "OK: Execute Action", 1)
    entry.add_parameter("Action", "Lamp on")
    doc = json.loads(entry.serialize_json(42))
    assert doc == {"id": 7, "typ": 0, "time": 42, "src": "Action", "msg": "OK: Execute Action",
                   "keys": ["Action"], "vals": ["Lamp on"]}


def test_entry_ignores_extra_parameters():
    entry = LogEntry(0, 0, "x", "y", 1)
    entry.add_parameter("a", "1")
    entry.add_parameter("b", "2")
    assert entry.parameters == [("a", "1")]


def test_entry_drops_empty_strings():
    entry = LogEntry(0, 0, "x", "y", 2)
    entry.add_parameter("", "")
    entry.add_parameter("k", "v")
    doc = json.loads(entry.serialize_json(0))
    assert doc["keys"] == ["k"] and doc["vals"] == ["v"]


def test_counter_and_buffer_flushes_when_full(engine):
    for i in range(3):
        engine.add_log_entry(0, "src", f"msg {i}", {"n": str(i)})
    assert not engine.path.exists()
    engine.add_log_entry(0, "src", "msg 3")
    assert engine.counter == 4
    assert len(engine.path.read_text().splitlines()) == 3


def test_timestamp_from_clock(engine, clock):
    engine.add_log_entry(1, "src", "hello")
    engine.flush()
    doc = json.loads(engine.path.read_text().splitlines()[0])
    assert doc["time"] == clock.sensor_cycles * SENS_FRQ_SEC - clock.timezone_offset


def test_serialize_newest_entries(engine):
    for i in range(5):
        engine.add_log_entry(0, "src", f"msg {i}")
    doc = json.loads(engine.serialize_json())
    assert doc["num"] == 5
    assert [e["msg"] for e in doc["list"]] == ["msg 2", "msg 3", "msg 4"]
    assert [e["id"] for e in doc["list"]] == [2, 3, 4]


def test_serialize_window(engine):
    for i in range(5):
        engine.add_log_entry(0, "src", f"msg {i}")
    doc = json.loads(engine.serialize_json(end=2, count=5))
    assert [e["id"] for e in doc["list"]] == [0, 1]


def test_serialize_without_file(engine):
    doc = json.loads(engine.serialize_json())
    assert doc == {"num": 0, "list": []}


def test_begin_counts_existing_lines(tmp_path, clock):
    first = LogEngine(tmp_path / "log.json", clock)
    for i in range(4):
        first.add_log_entry(0, "src", str(i))
    first.flush()
    second = LogEngine(tmp_path / "log.json", clock)
    assert second.begin() == 4
    entry = second.add_log_entry(0, "src", "next")
    assert entry.id == 4


def test_reset(engine):
    engine.add_log_entry(0, "src", "x")
    assert engine.reset() is True
    assert not engine.path.exists()
    assert engine.counter == 0
    assert engine.reset() is False


def test_invalid_buffer_size(tmp_path):
    with pytest.raises(ValueError):
        LogEngine(tmp_path / "log.json", None, buffer_size=0)


def test_parameters_as_pairs(engine):
    entry = engine.add_log_entry(0, "src", "m", [("a", "1"), ("b", "2")])
    assert entry.parameters == [("a", "1"), ("b", "2")]