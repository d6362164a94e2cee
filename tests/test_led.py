from growbot.led import BLINK_DELAY, Led


def _recorder():
    calls = []
    return calls, calls.append


def test_initial_state_is_kept():
    assert Led(11, True, lambda _: None).state is True
    assert Led(11, False, lambda _: None).state is False


def test_turn_on_and_off():
    led = Led(12, False, lambda _: None)
    led.turn_on()
    assert led.state is True
    led.turn_on()
    assert led.state is True
    led.turn_off()
    assert led.state is False


def test_switch_state_toggles():
    led = Led(13, False, lambda _: None)
    led.switch_state()
    assert led.state is True
    led.switch_state()
    assert led.state is False


def test_blink_even_count_restores_state_and_sleeps_each_time():
    calls, sleep = _recorder()
    led = Led(11, True, sleep)
    led.blink(4)
    assert led.state is True
    assert calls == [BLINK_DELAY] * 4


def test_blink_odd_count_flips_state():
    led = Led(11, False, lambda _: None)
    led.blink(3)
    assert led.state is True