"""A status LED on an output pin."""

import time
from collections.abc import Callable

BLINK_DELAY = 0.05


class Led:
    """An LED that can be switched, toggled and blinked."""

    def __init__(self, pin: int, state: bool = False, sleep: Callable[[float], None] = time.sleep):
        self.pin = pin
        self._state = bool(state)
        self._sleep = sleep

    @property
    def state(self) -> bool:
        """Whether the LED is lit."""
        return self._state

    def switch_state(self) -> None:
        """Toggle the LED."""
        self._state = not self._state

    def turn_on(self) -> None:
        self._state = True

    def turn_off(self) -> None:
        self._state = False

    def blink(self, amount: int) -> None:
        """Toggle the LED ``amount`` times with a short pause after each toggle."""
        for _ in range(amount):
            self.switch_state()
            self._sleep(BLINK_DELAY)