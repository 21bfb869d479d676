"""Raw CHIP-8 ROM loader.

CHIP-8 programs carry no header: the file is the byte image that belongs at
``0x200``. The loader only reads and validates the image; placing it in memory
is delegated to :meth:`pychip8.bus.Memory.load_program`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MAX_PROGRAM_SIZE, PROGRAM_START, Memory, RomSizeError
from pychip8.utils import debug_enabled, debug_log


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be used at all."""


@dataclass
class RomImage:
    """A program image together with where it was read from."""

    data: bytes
    name: str = ""
    start: int = PROGRAM_START

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        return self.start + self.size - 1


def read_rom(stream: BinaryIO, name: str = "") -> RomImage:
    """Read and validate a ROM image from ``stream``."""

    # One byte past the limit is enough to tell an oversize image apart.
    data = stream.read(MAX_PROGRAM_SIZE + 1)
    if not data:
        raise RomFormatError(f"ROM {name or '<stream>'} is empty")
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomSizeError(
            f"ROM {name or '<stream>'} exceeds {MAX_PROGRAM_SIZE} bytes of program memory"
        )
    if len(data) % 2 and debug_enabled("loader"):
        debug_log("loader", "odd ROM length=%d name=%s", len(data), name)
    return RomImage(bytes(data), name)


def load_rom(stream: BinaryIO, memory: Memory, name: str = "") -> RomImage:
    """Read a ROM from ``stream`` into ``memory`` and return its metadata."""

    image = read_rom(stream, name)
    memory.load_program(image.data)
    if debug_enabled("loader"):
        debug_log("loader", "loaded %s size=%d range=%03x-%03x", image.name or "<stream>", image.size, image.start, image.end)
    return image


def load_rom_from_path(path: Path, memory: Memory) -> RomImage:
    """Load a ROM image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, memory, path.name)
