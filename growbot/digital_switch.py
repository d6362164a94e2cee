"""Active-low digital output switches on the top panel."""

HIGH = 1
LOW = 0

_STATUS_BY_LEVEL = {HIGH: "OFF", LOW: "ON"}


class DigitalSwitch:
    """Switches numbered from 1; a switch is on while its pin is LOW."""

    def __init__(self, count: int = 4):
        if count < 1:
            raise ValueError("at least one switch is needed")
        self._levels = [HIGH] * count

    def __len__(self) -> int:
        return len(self._levels)

    def _index(self, switch: int) -> int:
        if not 1 <= switch <= len(self._levels):
            raise IndexError(f"no switch {switch} among {len(self._levels)}")
        return switch - 1

    def turn_on(self, switch: int) -> None:
        self._levels[self._index(switch)] = LOW

    def turn_off(self, switch: int) -> None:
        self._levels[self._index(switch)] = HIGH

    def status(self, switch: int) -> str:
        """Return ``"ON"`` or ``"OFF"`` for the switch."""
        level = self._levels[self._index(switch)]
        return _STATUS_BY_LEVEL[level]