"""Learning and replaying 433 MHz remote-socket codes."""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from growbot.definitions import RC_REPEAT, RC_SIGNALS, RC_SOCKETS, Scope
from growbot.log_engine import LogEngine

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "not applicable"
MAX_PROTOCOL = 6
TEST_ROUNDS = 5

_ORIGIN = "RCSocketController"


class RCSocketError(RuntimeError):
    """A code could not be sent."""


class Radio(ABC):
    """The transmitter and receiver hardware the controller drives."""

    @abstractmethod
    def enable_receive(self, pin: int) -> None:
        """Start listening on ``pin``."""

    @abstractmethod
    def disable_receive(self) -> None:
        """Stop listening."""

    @abstractmethod
    def enable_transmit(self, pin: int) -> None:
        """Prepare to transmit on ``pin``."""

    @abstractmethod
    def disable_transmit(self) -> None:
        """Release the transmitter."""

    @abstractmethod
    def send(self, value: int, bitlength: int, delay: int, protocol: int, repeat: int) -> None:
        """Transmit one code."""


@dataclass(frozen=True)
class Signal:
    """One learned radio code."""

    value: int = 0
    delay: int = 0
    bitlength: int = 0
    protocol: int = 0


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
    return value not in (None, "")


def _column(data: Mapping[str, Any], *keys: str) -> list[Any]:
    for key in keys:
        values = data.get(key)
        if isinstance(values, list):
            return values
    return []


class RCSocketCodeSet:
    """The codes that switch one remote socket."""

    def __init__(self, id: int, repeat: int = RC_REPEAT):
        self.id = id
        self.title = f"Signal {id}"
        self.active = False
        self.repeat = repeat
        self.signal_ptr = 0
        self.signals: list[Signal] = [Signal()] * RC_SIGNALS

    def inc_signal_ptr(self) -> None:
        self.signal_ptr = self.signal_ptr + 1 if self.signal_ptr < RC_SIGNALS - 1 else 0

    def dec_signal_ptr(self) -> None:
        self.signal_ptr = self.signal_ptr - 1 if self.signal_ptr > 0 else RC_SIGNALS - 1

    def current_signal(self) -> Signal:
        return self.signals[self.signal_ptr]

    def signal_at(self, index: int) -> Signal:
        """The signal in slot ``index``; an empty signal outside the slots."""
        if 0 <= index < RC_SIGNALS:
            return self.signals[index]
        return Signal()

    def set_current_signal(self, value: int, delay: int, bitlength: int, protocol: int) -> None:
        self.signals[self.signal_ptr] = Signal(value, delay, bitlength, protocol)

    def switch_current_protocol(self) -> None:
        """Cycle the protocol of the current signal through 1..6, if it holds a code."""
        current = self.current_signal()
        if current.value != 0:
            protocol = current.protocol + 1 if current.protocol < MAX_PROTOCOL else 1
            self.signals[self.signal_ptr] = replace(current, protocol=protocol)

    def switch_signal_ptr(self) -> None:
        """Step the pointer through the learned signals only."""
        self.signal_ptr = self.signal_ptr + 1 if self.signal_ptr < self.number_signals() - 1 else 0

    def is_new_signal(self, value: int) -> bool:
        return all(signal.value != value for signal in self.signals)

    def number_signals(self) -> int:
        """The number of learned signals before the first empty slot."""
        for index, signal in enumerate(self.signals):
            if signal.value == 0:
                return index
        return RC_SIGNALS

    def clear(self) -> None:
        """Forget all signals, restore the default title and deactivate."""
        self.signals = [Signal()] * RC_SIGNALS
        self.title = f"Signal {self.id}"
        self.active = False

    def serialize(self, scope: Scope) -> dict[str, Any]:
        document: dict[str, Any] = {}
        if scope in (Scope.LIST, Scope.DETAILS):
            document["id"] = self.id
            document["act"] = self.active
            document["tit"] = self.title
        if scope == Scope.DETAILS:
            document["obj"] = "RCSOCKET"
            document["rep"] = self.repeat
            document["val"] = [signal.value for signal in self.signals]
            document["del"] = [signal.delay for signal in self.signals]
            document["len"] = [signal.bitlength for signal in self.signals]
            document["pro"] = [signal.protocol for signal in self.signals]
        return document

    def deserialize_json(self, data: Mapping[str, Any] | str) -> None:
        """Update the code set from a JSON object; absent fields are kept."""
        data = _as_mapping(data)
        if _present(data.get("tit")):
            self.title = str(data["tit"])
        if _present(data.get("act")):
            self.active = bool(data["act"])
        if _present(data.get("rep")):
            self.repeat = int(data["rep"])

        columns = {
            "value": _column(data, "value", "val"),
            "delay": _column(data, "delay", "del"),
            "bitlength": _column(data, "length", "len"),
            "protocol": _column(data, "proto", "pro"),
        }
        signals = list(self.signals)
        for index in range(RC_SIGNALS):
            changes = {
                field: int(values[index])
                for field, values in columns.items()
                if index < len(values) and _present(values[index])
            }
            if changes:
                signals[index] = replace(signals[index], **changes)
        self.signals = signals
        logger.debug("Deserialized code set %s", self.id)


class RCSocketController:
    """Learns socket codes from the receiver and replays them on the transmitter."""

    def __init__(self, transmitter_pin: int, receiver_pin: int, radio: Radio,
                 logengine: LogEngine | None = None):
        self.transmitter_pin = transmitter_pin
        self.receiver_pin = receiver_pin
        self.radio = radio
        self.logengine = logengine
        self.socketcode = [RCSocketCodeSet(index, RC_REPEAT) for index in range(RC_SOCKETS)]
        self.code_set_ptr = 0
        self.learning = False
        self.haltstate = False
        logger.info("Started 433MHz controller with %d sockets", RC_SOCKETS)

    def _log(self, message: str) -> None:
        if self.logengine is not None:
            self.logengine.add_log_entry(0, _ORIGIN, message)

    def _socket(self, set: int) -> RCSocketCodeSet:
        if not 0 <= set < RC_SOCKETS:
            raise IndexError(f"no socket {set}")
        return self.socketcode[set]

    def learningmode_on(self, set: int | None = None) -> None:
        """Halt the system and listen for codes, for socket ``set`` if given."""
        if set is not None:
            self._socket(set)
            if self.learning:
                return
            self.code_set_ptr = set
        self._log("Halting System. Learning Mode On")
        self.radio.enable_receive(self.receiver_pin)
        self.learning = True
        self.haltstate = True
        logger.info("Learning mode on")

    def learningmode_off(self) -> None:
        """Stop listening and resume the system."""
        if self.learning:
            self.radio.disable_receive()
            self.learning = False
            self.haltstate = False
            logger.info("Learning mode off")
            self._log("Resuming System. Learning Mode Off")

    def learn_pattern(self, value: int, bitlength: int, delay: int, protocol: int,
                      set: int | None = None) -> bool:
        """Store a received code unless it is already known; return whether it was new."""
        codeset = self._socket(self.code_set_ptr if set is None else set)
        if not codeset.is_new_signal(value):
            logger.debug("Signal %d already known", value)
            return False
        codeset.set_current_signal(value, delay, bitlength, protocol)
        codeset.inc_signal_ptr()
        logger.debug("New signal %d", value)
        return True

    def test_settings(self) -> None:
        """Leave learning mode and send the learned codes a few times."""
        self.learningmode_off()
        codeset = self._socket(self.code_set_ptr)
        codeset.active = True
        try:
            for _ in range(TEST_ROUNDS):
                self.send_code(self.code_set_ptr)
        finally:
            codeset.active = False

    def reset_settings(self, set: int | None = None) -> None:
        """Forget the codes of socket ``set``, or of every socket."""
        self.learningmode_off()
        targets = self.socketcode if set is None else [self._socket(set)]
        for codeset in targets:
            codeset.clear()

    def send_code(self, set: int) -> None:
        """Transmit every learned code of an active socket."""
        codeset = self._socket(set)
        if self.learning:
            raise RCSocketError("system is in learning mode")
        if not codeset.active:
            raise RCSocketError(f"socket {set} is not active")
        self.radio.enable_transmit(self.transmitter_pin)
        try:
            codeset.signal_ptr = 0
            for index in range(codeset.number_signals()):
                signal = codeset.signal_at(index)
                self.radio.send(signal.value, signal.bitlength, signal.delay,
                                signal.protocol, codeset.repeat)
        finally:
            self.radio.disable_transmit()

    @staticmethod
    def bin2tristate(bits: str) -> str:
        """Convert pairs of bits to tri-state symbols: 00->0, 11->1, 01->F."""
        symbols = {"00": "0", "11": "1", "01": "F"}
        result = []
        for pos in range(0, len(bits) - 1, 2):
            symbol = symbols.get(bits[pos:pos + 2])
            if symbol is None:
                return NOT_APPLICABLE
            result.append(symbol)
        return "".join(result)

    @staticmethod
    def dec2bin_wzerofill(value: int, bit_length: int) -> str:
        """The lowest ``bit_length`` bits of ``value``, zero-filled on the left."""
        if value < 0 or bit_length < 0:
            raise ValueError("value and bit length must not be negative")
        if bit_length == 0:
            return ""
        return format(value, "b").zfill(bit_length)[-bit_length:]

    def get_title(self, set: int) -> str:
        return self._socket(set).title

    def serialize_socket(self, set: int, scope: Scope) -> str:
        return json.dumps(self._socket(set).serialize(scope), separators=(",", ":"))

    def serialize_json(self, scope: Scope) -> str:
        document = {
            "obj": "RCSOCKET",
            "list": [codeset.serialize(scope) for codeset in self.socketcode],
        }
        return json.dumps(document, separators=(",", ":"))

    def deserialize_json(self, set: int, data: Mapping[str, Any] | str) -> None:
        self._socket(set).deserialize_json(data)
        logger.debug("Deserialized remote socket %d", set)