"""Tests for the CHIP-8 keypad."""

from __future__ import annotations

import pytest

from pychip8.io import KeyIndexError, Keypad


def test_set_key_and_release() -> None:
    keypad = Keypad()
    keypad.set_key(0xA, True)
    assert keypad.is_pressed(0xA)

    keypad.set_key(0xA, False)
    assert not keypad.is_pressed(0xA)


@pytest.mark.parametrize("index", [16, -1, 0xFF])
def test_out_of_range_index_rejected(index: int) -> None:
    keypad = Keypad()
    with pytest.raises(KeyIndexError):
        keypad.set_key(index, True)


def test_first_pressed_prefers_lowest_index() -> None:
    keypad = Keypad()
    assert keypad.first_pressed() is None
    keypad.set_key(0xE, True)
    keypad.set_key(0x3, True)
    assert keypad.first_pressed() == 0x3


def test_host_layout() -> None:
    keypad = Keypad()
    assert keypad.press("X")
    assert keypad.is_pressed(0x0)
    assert keypad.press("4")
    assert keypad.is_pressed(0xC)
    assert keypad.press("V")
    assert keypad.is_pressed(0xF)

    assert keypad.release("x")
    assert not keypad.is_pressed(0x0)


def test_unmapped_key_is_ignored() -> None:
    keypad = Keypad()
    assert keypad.press("p") is False
    assert keypad.snapshot() == (False,) * 16


def test_reset_clears_keys() -> None:
    keypad = Keypad()
    keypad.press("q")
    keypad.reset()
    assert not any(keypad.snapshot())
