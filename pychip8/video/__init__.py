"""Framebuffer and rendering helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .font import FONT_BASE, FONTSET, GLYPH_BYTES, glyph_address, install_font
from .framebuffer import HEIGHT, WIDTH, Framebuffer
from .palette import MONOCHROME, PALETTES, palette_by_name, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Framebuffer",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PALETTES",
    "palette_by_name",
    "validate_palette",
    "FONT_BASE",
    "FONTSET",
    "GLYPH_BYTES",
    "glyph_address",
    "install_font",
    "WIDTH",
    "HEIGHT",
]
