import pytest

from growbot.relais import RelaisBoard


def test_new_board_is_all_off():
    board = RelaisBoard()
    assert [board.status(n) for n in range(1, 5)] == ["OFF"] * 4


def test_turn_on_only_affects_one_relay():
    board = RelaisBoard()
    board.turn_on(2)
    assert [board.status(n) for n in range(1, 5)] == ["OFF", "ON", "OFF", "OFF"]
    board.turn_off(2)
    assert board.status(2) == "OFF"


def test_toggle_twice_restores():
    board = RelaisBoard()
    board.toggle(3)
    assert board.status(3) == "ON"
    board.toggle(3)
    assert board.status(3) == "OFF"


def test_all_on_and_all_off():
    board = RelaisBoard(4)
    board.all_on()
    assert {board.status(n) for n in range(1, 5)} == {"ON"}
    board.all_off()
    assert {board.status(n) for n in range(1, 5)} == {"OFF"}


@pytest.mark.parametrize("relay", [0, 5, -1])
def test_unknown_relay_raises(relay):
    board = RelaisBoard(4)
    with pytest.raises(IndexError):
        board.turn_on(relay)


def test_empty_board_rejected():
    with pytest.raises(ValueError):
        RelaisBoard(0)