"""64x32 monochrome framebuffer backing the ``DRW`` instruction."""

from __future__ import annotations

WIDTH = 64
HEIGHT = 32

_ROW_MASK = (1 << WIDTH) - 1


class Framebuffer:
    """Bit-per-pixel display memory.

    Each of the 32 rows is a single integer used as a 64-bit mask; bit ``x``
    holds the pixel in column ``x``. Callers pass in-range coordinates, the CPU
    wraps sprite coordinates before drawing.
    """

    width = WIDTH
    height = HEIGHT

    def __init__(self) -> None:
        self._rows: list[int] = [0] * HEIGHT
        self._revision = 0

    @property
    def revision(self) -> int:
        """Counter bumped on every mutation, used to skip redundant redraws."""

        return self._revision

    def clear(self) -> None:
        self._rows = [0] * HEIGHT
        self._revision += 1

    def get(self, x: int, y: int) -> bool:
        return (self._rows[y] >> x) & 1 == 1

    def set(self, x: int, y: int, state: bool) -> bool:
        """XOR ``state`` into the pixel and report a collision.

        The collision is taken from the pixel as it was before the write: it is
        set when the pixel was already lit and ``state`` tries to light it.
        """

        bit = 1 << x
        collision = bool(self._rows[y] & bit) and bool(state)
        if state:
            self._rows[y] = (self._rows[y] ^ bit) & _ROW_MASK
            self._revision += 1
        return collision

    def rows(self) -> tuple[int, ...]:
        return tuple(self._rows)

    def lit_pixels(self) -> int:
        return sum(bin(row).count("1") for row in self._rows)
