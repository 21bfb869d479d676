"""Tests for the built-in hexadecimal font."""

from __future__ import annotations

from pychip8.bus import Memory
from pychip8.video import FONT_BASE, FONTSET, GLYPH_BYTES, glyph_address, install_font


def test_fontset_has_sixteen_glyphs() -> None:
    assert len(FONTSET) == 16 * GLYPH_BYTES


def test_glyph_address() -> None:
    assert glyph_address(0) == FONT_BASE
    assert glyph_address(0xA) == FONT_BASE + 50
    assert glyph_address(0x1F) == glyph_address(0xF)


def test_font_fits_in_reserved_area() -> None:
    assert FONT_BASE + len(FONTSET) <= 0x200


def test_install_font() -> None:
    memory = Memory()
    install_font(memory)
    assert memory.read_block(FONT_BASE, len(FONTSET)) == FONTSET
