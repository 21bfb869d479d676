"""CHIP-8 interpreter.

The core lives in :mod:`pychip8.cpu` and :mod:`pychip8.video.framebuffer`;
the remaining subpackages are the host glue (loader, machine assembly and the
pygame frontend) that drive it.
"""

from __future__ import annotations

from . import utils, bus, video, io, cpu, loader, system, ui

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
