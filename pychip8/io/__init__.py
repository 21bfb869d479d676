"""Input helpers for the CHIP-8 interpreter."""

from .keypad import KEY_COUNT, KEYPAD_LAYOUT, KeyIndexError, Keypad

__all__ = [
    "Keypad",
    "KeyIndexError",
    "KEY_COUNT",
    "KEYPAD_LAYOUT",
]
