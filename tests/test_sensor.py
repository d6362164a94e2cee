import json

import pytest

from growbot.definitions import (
    SENS_VALUES_DAY,
    SENS_VALUES_HOUR,
    SENS_VALUES_MIN,
    SENS_VALUES_MONTH,
    SENS_VALUES_YEAR,
    Interval,
    Scope,
)
from growbot.realtime_clock import RealTimeClock
from growbot.sensor import BaseSensor

NAN = -127


class ScriptedSensor(BaseSensor):
    def __init__(self, clock, readings, integer=True):
        super().__init__("Test", "%", 2, nan_val=NAN, min_val=0, max_val=100,
                         clock=clock, integer=integer)
        self.readings = list(readings)

    def read_value(self):
        return self.readings.pop(0)


def make_sensor(clock, readings=(), cycles=1, integer=True):
    clock.sensor_cycles = cycles
    return ScriptedSensor(clock, readings, integer)


def test_fresh_sensor_history_is_empty():
    sensor = make_sensor(RealTimeClock())
    for series in sensor.history.values():
        assert series.values == [NAN] * series.size
        assert series.ptr == series.size
    assert sensor.last_value() == NAN
    assert sensor.get_avg_int(Interval.ONE) == NAN


def test_history_sizes():
    sensor = make_sensor(RealTimeClock())
    assert sensor.history[Scope.DATE_MINUTE].size == SENS_VALUES_MIN
    assert sensor.history[Scope.DATE_HOUR].size == SENS_VALUES_HOUR
    assert sensor.history[Scope.DATE_DAY].size == SENS_VALUES_DAY
    assert sensor.history[Scope.DATE_MONTH].size == SENS_VALUES_MONTH
    assert sensor.history[Scope.DATE_YEAR].size == SENS_VALUES_YEAR


def test_update_stores_reading():
    sensor = make_sensor(RealTimeClock(), [42])
    sensor.update()
    minute = sensor.history[Scope.DATE_MINUTE]
    assert minute.ptr == 0
    assert minute.values[0] == 42
    assert sensor.last_value() == 42
    assert sensor.get_avg_int(Interval.REALTIME) == 42


def test_ten_second_average_uses_three_latest():
    sensor = make_sensor(RealTimeClock(), [5, 10, 20, 30])
    for _ in range(4):
        sensor.update()
    assert sensor.interval_average(Interval.TENSEC) == 20


def test_constant_readings_average_to_themselves():
    sensor = make_sensor(RealTimeClock(), [7] * SENS_VALUES_MIN)
    for _ in range(SENS_VALUES_MIN):
        sensor.update()
    assert sensor.get_avg_int(Interval.ONEMIN) == 7
    assert sensor.get_avg_float(Interval.THIRTYSEC) == 7.0


def test_average_stops_at_nan():
    sensor = make_sensor(RealTimeClock())
    assert sensor.average(2, 10, [1, NAN, 4, 6]) == 4


def test_average_wraps_around_ring():
    sensor = make_sensor(RealTimeClock())
    assert sensor.average(0, 1, [4, NAN, 4]) == 4


def test_average_without_values_is_nan():
    sensor = make_sensor(RealTimeClock())
    assert sensor.average(0, 3, [NAN, NAN]) == NAN
    minute = sensor.history[Scope.DATE_MINUTE]
    assert sensor.average(minute.ptr, 2, minute.values) == NAN


def test_integer_average_truncates_toward_zero():
    sensor = make_sensor(RealTimeClock())
    assert sensor.average(1, 1, [1, 2]) == 1
    assert sensor.average(1, 1, [-1, -2]) == -1


def test_float_average_keeps_fraction():
    sensor = make_sensor(RealTimeClock(), integer=False)
    assert sensor.average(1, 1, [1.0, 2.0]) == pytest.approx(1.5)


def test_hour_value_saved_on_period():
    sensor = make_sensor(RealTimeClock(), [7], cycles=SENS_VALUES_MIN)
    sensor.update()
    hour = sensor.history[Scope.DATE_HOUR]
    assert hour.ptr == 0
    assert hour.values[0] == 7
    assert sensor.history[Scope.DATE_DAY].values == [NAN] * SENS_VALUES_DAY


def test_no_aggregation_off_period():
    sensor = make_sensor(RealTimeClock(), [7], cycles=SENS_VALUES_MIN + 1)
    sensor.update()
    assert sensor.history[Scope.DATE_HOUR].values == [NAN] * SENS_VALUES_HOUR


def test_day_value_follows_hour_value():
    sensor = make_sensor(RealTimeClock(), [9], cycles=SENS_VALUES_MIN * 15)
    sensor.update()
    assert sensor.history[Scope.DATE_HOUR].values[0] == 9
    assert sensor.history[Scope.DATE_DAY].values[0] == 9
    assert sensor.history[Scope.DATE_MONTH].values == [NAN] * SENS_VALUES_MONTH


def test_min_and_max_include_limits():
    sensor = make_sensor(RealTimeClock())
    assert sensor.min_value([5, 6]) == 0
    assert sensor.min_value([-3, 5]) == -3
    assert sensor.max_value([5, 6]) == 100
    assert sensor.max_value([150, 6]) == 150


def test_min_of_empty_history_is_nan_marker():
    sensor = make_sensor(RealTimeClock())
    assert sensor.get_min_value_int(Scope.DATE_HOUR) == NAN
    assert sensor.get_max_value_int(Scope.DATE_HOUR) == 100
    assert sensor.get_max_value_int(Scope.LIST) == 0


def test_element_value():
    sensor = make_sensor(RealTimeClock(), [33])
    sensor.update()
    assert sensor.get_element_value_int(Scope.DATE_MINUTE, 0) == 33
    assert sensor.get_element_value_int(Scope.DATE_MINUTE, SENS_VALUES_MIN) == NAN
    assert sensor.get_element_value_int(Scope.DETAILS, 0) == 0


def test_plain_sensor_value_and_title():
    sensor = BaseSensor("Plain", "%")
    assert sensor.get_value() == "0%"
    assert sensor.get_title() == "Plain"


def test_reset_clears_history():
    sensor = make_sensor(RealTimeClock(), [1, 2])
    sensor.update()
    sensor.update()
    sensor.reset()
    assert sensor.history[Scope.DATE_MINUTE].values == [NAN] * SENS_VALUES_MIN
    assert sensor.last_value() == NAN


def test_serialize_list():
    sensor = make_sensor(RealTimeClock())
    assert json.loads(sensor.serialize_json(0, Scope.LIST)) == {"tit": "Test", "unit": "%", "typ": 2}


def test_serialize_header_has_no_history():
    document = json.loads(make_sensor(RealTimeClock()).serialize_json(3, Scope.HEADER))
    assert document["obj"] == "SENSOR"
    assert document["id"] == 3
    assert document["nan"] == NAN
    assert "min_vals" not in document
    assert "avg_vals" not in document


@pytest.mark.parametrize("scope, name", [
    (Scope.HEADER, "HEADER"), (Scope.DETAILS, "DETAILS"), (Scope.AVG, "AVG"),
    (Scope.DATE_MINUTE, "MIN"), (Scope.DATE_HOUR, "HOUR"), (Scope.DATE_DAY, "DAY"),
    (Scope.DATE_MONTH, "MON"), (Scope.DATE_YEAR, "YEAR"), (Scope.DATE_ALL, "ALL"),
])
def test_scope_names(scope, name):
    assert json.loads(make_sensor(RealTimeClock()).serialize_json(0, scope))["scp"] == name


def test_serialize_details():
    sensor = make_sensor(RealTimeClock(), [12])
    sensor.update()
    document = json.loads(sensor.serialize_json(1, Scope.DETAILS))
    assert document["frq"] == SENS_VALUES_YEAR
    assert document["min_vals"][0] == "12"
    assert document["min_vals"][1:] == ["#"] * (SENS_VALUES_MIN - 1)
    assert len(document["avg_vals"]) == 19
    assert document["avg_vals"]["last"] == 12


def test_serialize_single_history_frequency():
    document = json.loads(make_sensor(RealTimeClock()).serialize_json(0, Scope.DATE_DAY))
    assert document["frq"] == SENS_VALUES_DAY
    assert len(document["d_vals"]) == SENS_VALUES_DAY
    assert "h_vals" not in document


def test_float_values_serialize_with_two_decimals():
    sensor = make_sensor(RealTimeClock(), [1.5], integer=False)
    sensor.update()
    document = json.loads(sensor.serialize_json(0, Scope.DATE_MINUTE))
    assert document["min_vals"][0] == "1.50"


def test_round_trip():
    source = make_sensor(RealTimeClock(), [4, 8, 15], cycles=SENS_VALUES_MIN)
    for _ in range(3):
        source.update()
    target = make_sensor(RealTimeClock())
    target.deserialize_json(source.serialize_json(0, Scope.DATE_ALL))
    for scope, series in source.history.items():
        assert target.history[scope].values == series.values
        assert target.history[scope].ptr == series.ptr


def test_deserialize_thresholds_and_absent_fields():
    sensor = make_sensor(RealTimeClock())
    sensor.deserialize_json({"low": 10, "high": 90})
    assert (sensor.lower_threshold, sensor.upper_threshold) == (10, 90)
    assert sensor.history[Scope.DATE_MINUTE].values == [NAN] * SENS_VALUES_MIN


def test_deserialize_invalid_json():
    sensor = make_sensor(RealTimeClock())
    with pytest.raises(ValueError):
        sensor.deserialize_json("{not json")


def test_deserialize_bad_pointer():
    sensor = make_sensor(RealTimeClock())
    with pytest.raises(ValueError):
        sensor.deserialize_json({"min_ptr": SENS_VALUES_MIN + 1})
    assert sensor.history[Scope.DATE_MINUTE].ptr == SENS_VALUES_MIN


def test_deserialize_bad_value():
    sensor = make_sensor(RealTimeClock())
    with pytest.raises(ValueError):
        sensor.deserialize_json({"h_vals": ["abc"]})


def test_avg_int_truncates_float_reading():
    sensor = make_sensor(RealTimeClock(), [2.7], integer=False)
    sensor.update()
    assert sensor.get_avg_int(Interval.REALTIME) == 2
    assert sensor.get_avg_float(Interval.REALTIME) == pytest.approx(2.7)