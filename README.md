# growbot

Controller logic for a small automated grow box, usable without any hardware
attached. Hardware access (sensor readings, the radio, the time source) is
passed in as plain Python objects or callables, so everything runs on a
desktop and can be tested.

## Modules

- `growbot.definitions`: the enumerations `RelOp`, `BoolOp`, `Interval`,
  `Scope` and `TriggerType`, and sizing constants such as `RC_SOCKETS`,
  `RC_SIGNALS`, `ACTIONS_NUM`, `ACTIONCHAIN_LENGTH`, `TRIGGER_TYPES`,
  `TRIGGER_SETS`, `SENS_FRQ_SEC` and the `SENS_VALUES_*` history sizes.
- `growbot.led`: `Led`, an on/off indicator with `switch_state`, `turn_on`,
  `turn_off` and `blink`. The pause between blinks goes through a `sleep`
  callable that defaults to `time.sleep`.
- `growbot.relais`: `RelaisBoard`, a bank of active-low relays numbered from
  1, with `all_on`, `all_off`, `toggle`, `turn_on`, `turn_off` and `status`
  (`"ON"` or `"OFF"`). An unknown relay number raises `IndexError`.
- `growbot.digital_switch`: `DigitalSwitch`, the same for output switches,
  with `turn_on`, `turn_off` and `status`.
- `growbot.realtime_clock`: `RealTimeClock`, a clock kept as an offset from a
  `now` callable. It sets the time from a timestamp (`update_time`), from
  calendar fields (`set_time`) or from a `"Mmm dd yyyy"` / `"hh:mm:ss"` build
  stamp (`set_default_time`), converts with `to_epoch_time`, formats with
  `print_date` and `print_time`, and keeps `sensor_cycles` in step through
  `sync_sensor_cycles`.
- `growbot.current_time`: `CurrentTime`, an editable date and time with
  wrap-around `inc_*`/`dec_*` controls for minute, hour, day, month and year
  (years run from 2017 to 2027), `create_date`, `create_time`, and
  `sync_time_object`, which either pushes edits to a `RealTimeClock` or
  takes the time from it. `epoch_seconds` counts seconds from the start of
  the year 2000.
- `growbot.log_engine`: `LogEntry` and `LogEngine`. Entries are buffered in
  memory and appended to a file as one JSON object per line when the buffer
  is full or on `flush`. `serialize_json(end, count)` reads a window of
  entries back as `{"num": ..., "list": [...]}`; `begin` continues the
  numbering after the lines already in the file; `reset` deletes the file.
- `growbot.action`: the abstract `Action` and its concrete forms
  `SimpleAction` (a callback without arguments), `ParameterizedSimpleAction`
  (a callback with a fixed integer; a negative one raises `ValueError`) and
  `NamedParameterizedSimpleAction` (whose title is completed by a lookup
  callable). Each can name an antagonist with `set_antagonist`, serialises
  to JSON, and logs its execution to a `LogEngine` if one is given.
- `growbot.action_chain`: `ActionChain`, four action slots with pointers and
  parameters, (de)serialised as JSON. `execute` hands the chain to a
  scheduler callable and raises `RuntimeError` if there is none.
- `growbot.ruleset`: the abstract `Trigger` and `RuleSet`, which joins up to
  three triggers left to right with AND, OR and NOT and runs its action
  chain from `execute` when the result holds. Deserialising resolves trigger
  and chain indices and raises `ValueError` for unknown ones; an unknown
  boolean operator becomes OR and deactivates the set.
- `growbot.rc_socket`: the abstract `Radio`, `RCSocketCodeSet` and
  `RCSocketController`, which learn the codes of 433 MHz remote sockets
  (`learningmode_on`, `learn_pattern`, `learningmode_off`) and replay them
  (`send_code`, `test_settings`). Sending in learning mode or to an inactive
  socket raises `RCSocketError`. `bin2tristate` and `dec2bin_wzerofill` are
  static helpers for code formats.
- `growbot.sensor`: `BaseSensor`, which keeps minute, hour, day, month and
  year histories, folds averages into the coarser ones on `update` according
  to the cycle counter of an optional clock, averages over any `Interval`,
  and serialises and deserialises its state as JSON, writing missing values
  as `"#"`.
- `growbot.sensor_devices`: `AnalogMoistureSensor` (a reader callable mapped
  onto 0..100 percent between calibrated thresholds), `DHTTemperature` and
  `DHTHumidity` (reader callables rounded to whole numbers), each with
  `compare_with_value` for rules.

## Example

```python
from growbot.definitions import Interval, Scope
from growbot.sensor_devices import DHTTemperature

readings = iter([21.4, 21.6, 22.1])
sensor = DHTTemperature(lambda: next(readings), "Temperature", "C", -128, 0, 50)

sensor.update()
sensor.update()
print(sensor.get_avg_int(Interval.REALTIME))   # 22
print(sensor.serialize_json(0, Scope.HEADER))
```

## What it does not do

The package is a library of controller parts only. It has no command to run,
no HTTP server or REST interface, no display or menu screens, and no storage
of settings. There is no scheduler for action chains and no concrete time or
sensor triggers: `ActionChain` takes a scheduler callable and `RuleSet`
works with any `Trigger` subclass you supply. It does not talk to pins, radios
or sensors itself; `Radio` and the reader callables are where real hardware
would be attached.

## Running the tests

```
pip install -e .[test]
pytest
```