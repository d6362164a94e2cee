import json

import pytest

from growbot.action import (
    NamedParameterizedSimpleAction,
    ParameterizedSimpleAction,
    SimpleAction,
)
from growbot.definitions import Scope


class RecordingLog:
    def __init__(self):
        self.entries = []

    def add_log_entry(self, type, origin, message, parameters=()):
        self.entries.append((type, origin, message, dict(parameters)))


def test_simple_action_calls_callback_and_logs():
    calls = []
    log = RecordingLog()
    action = SimpleAction("Pump on", lambda: calls.append("run"), logengine=log)
    action.execute()
    assert calls == ["run"]
    assert log.entries == [(0, "Action", "OK: Execute Action", {"Action": "Pump on"})]


def test_simple_action_requires_callable():
    with pytest.raises(TypeError):
        SimpleAction("Broken", None)


def test_simple_action_list_serialization():
    action = SimpleAction("Pump on", lambda: None, visible=True)
    assert json.loads(action.serialize_json(3, Scope.LIST)) == {
        "tit": "Pump on", "grp": "", "vis": True,
    }


def test_simple_action_details_with_antagonist():
    on = SimpleAction("Pump on", lambda: None)
    off = SimpleAction("Pump off", lambda: None)
    on.set_antagonist("Pump", off)
    document = json.loads(on.serialize_json(2, Scope.DETAILS))
    assert document["opp"] == "Pump off"
    assert document["grp"] == "Pump"
    assert document["id"] == 2
    assert document["obj"] == "ACTION"


def test_other_scopes_serialize_empty():
    action = SimpleAction("Pump on", lambda: None)
    assert json.loads(action.serialize_json(0, Scope.HEADER)) == {}


def test_parameterized_action_passes_parameter():
    received = []
    log = RecordingLog()
    action = ParameterizedSimpleAction("Socket", received.append, 4, logengine=log)
    action.execute()
    assert received == [4]
    assert log.entries[0][2] == "OK: Execute Action"


def test_parameterized_action_negative_parameter_raises():
    received = []
    log = RecordingLog()
    action = ParameterizedSimpleAction("Socket", received.append, -1, logengine=log)
    with pytest.raises(ValueError):
        action.execute()
    assert received == []
    assert log.entries == [(0, "Action", "ERROR: Argument missing", {"Action": "Socket"})]


def test_parameterized_serialization_has_parameter_and_antagonist():
    on = ParameterizedSimpleAction("On", lambda p: None, 1)
    off = ParameterizedSimpleAction("Off", lambda p: None, 1)
    on.set_antagonist("Socket", off)
    document = json.loads(on.serialize_json(5, Scope.DETAILS))
    assert document["par"] == 1
    assert document["anta"] == "Off"
    assert document["tit"] == "On"


def test_named_action_title_uses_lookup():
    names = {0: "Lamp", 1: "Fan"}
    action = NamedParameterizedSimpleAction("Turn on", lambda p: None, names.get, 1)
    assert action.get_title() == "Turn on Fan"
    assert json.loads(action.serialize_json(0, Scope.LIST))["tit"] == "Turn on Fan"


def test_named_action_log_uses_full_title():
    log = RecordingLog()
    names = {0: "Lamp"}
    action = NamedParameterizedSimpleAction("Turn on", lambda p: None, names.get, 0,
                                            logengine=log)
    action.execute()
    assert log.entries[0][3] == {"Action": "Turn on Lamp"}