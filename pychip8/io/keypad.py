"""CHIP-8 hexadecimal keypad."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


# Host key name -> keypad index. The COSMAC VIP keypad
#   1 2 3 C
#   4 5 6 D
#   7 8 9 E
#   A 0 B F
# is laid over the left-hand block of a QWERTY keyboard.
KEYPAD_LAYOUT: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


class KeyIndexError(ValueError):
    """Raised when a key index outside 0x0-0xF is used."""


@dataclass
class Keypad:
    """Sixteen-key pressed/released state set by the host."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)

    def set_key(self, index: int, pressed: bool) -> None:
        self._check_index(index)
        self._keys[index] = bool(pressed)
        if debug_enabled("input"):
            debug_log("input", "key=%X pressed=%s", index, pressed)

    def is_pressed(self, index: int) -> bool:
        self._check_index(index)
        return self._keys[index]

    def first_pressed(self) -> int | None:
        """Return the lowest pressed key index, or ``None`` when idle."""

        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def press(self, key_name: str) -> bool:
        """Press the keypad key mapped to a host key name.

        Returns ``False`` when the name is not part of the layout.
        """

        index = self._lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.set_key(index, True)
        return True

    def release(self, key_name: str) -> bool:
        index = self._lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.set_key(index, False)
        return True

    def reset(self) -> None:
        self._keys[:] = [False] * KEY_COUNT

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def _lookup(self, key_name: str) -> int | None:
        return KEYPAD_LAYOUT.get(key_name.lower())

    def _check_index(self, index: int) -> None:
        if not 0 <= index < KEY_COUNT:
            raise KeyIndexError(f"key index {index} out of range (0-{KEY_COUNT - 1})")
