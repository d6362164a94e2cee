"""A board of active-low relays."""

HIGH = 1
LOW = 0

_STATUS_BY_LEVEL = {HIGH: "OFF", LOW: "ON"}


class RelaisBoard:
    """Relays numbered from 1; a relay is on while its pin is LOW."""

    def __init__(self, count: int = 4):
        if count < 1:
            raise ValueError("a relay board needs at least one relay")
        self._levels = [HIGH] * count

    def __len__(self) -> int:
        return len(self._levels)

    def _index(self, relay: int) -> int:
        if not 1 <= relay <= len(self._levels):
            raise IndexError(f"no relay {relay} on a board of {len(self._levels)}")
        return relay - 1

    def all_off(self) -> None:
        self._levels = [HIGH] * len(self._levels)

    def all_on(self) -> None:
        self._levels = [LOW] * len(self._levels)

    def toggle(self, relay: int) -> None:
        index = self._index(relay)
        self._levels[index] = LOW if self._levels[index] == HIGH else HIGH

    def turn_on(self, relay: int) -> None:
        self._levels[self._index(relay)] = LOW

    def turn_off(self, relay: int) -> None:
        self._levels[self._index(relay)] = HIGH

    def status(self, relay: int) -> str:
        """Return ``"ON"`` or ``"OFF"`` for the relay."""
        level = self._levels[self._index(relay)]
        return _STATUS_BY_LEVEL[level]