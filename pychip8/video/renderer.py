"""Convert the framebuffer into an RGB frame for the host display."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pychip8.utils import debug_enabled, debug_log

from .framebuffer import Framebuffer
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB24 pixels for one rendered frame."""

    width: int
    height: int
    pixels: bytearray

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build a surface") from exc
        return pygame.image.frombuffer(bytes(self.pixels), (self.width, self.height), "RGB")


class Renderer:
    """Scale framebuffer pixels into palette colours."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        background, foreground = validate_palette(palette)
        self._background = bytes(background)
        self._foreground = bytes(foreground)
        self._last_revision: int | None = None

    def needs_redraw(self, framebuffer: Framebuffer) -> bool:
        return framebuffer.revision != self._last_revision

    def render(self, framebuffer: Framebuffer, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        width = framebuffer.width * scale
        height = framebuffer.height * scale
        pixels = bytearray(width * height * 3)

        for y, row in enumerate(framebuffer.rows()):
            line = bytearray()
            for x in range(framebuffer.width):
                colour = self._foreground if (row >> x) & 1 else self._background
                line += colour * scale
            for dy in range(scale):
                start = ((y * scale + dy) * width) * 3
                pixels[start : start + len(line)] = line

        self._last_revision = framebuffer.revision
        if debug_enabled("video"):
            debug_log("video", "render revision=%d lit=%d", framebuffer.revision, framebuffer.lit_pixels())
        return RenderResult(width, height, pixels)
