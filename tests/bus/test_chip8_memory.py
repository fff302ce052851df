"""Tests for the 4 KiB memory."""

from __future__ import annotations

import pytest

from pychip8.bus import FONT_SET, GLYPH_BYTES, MEMORY_SIZE, Memory, MemoryAccessError


def test_font_table_layout() -> None:
    assert len(FONT_SET) == 16 * GLYPH_BYTES == 80

    memory = Memory()
    memory.install_font()

    glyph_f = memory.snapshot(0xF * GLYPH_BYTES, GLYPH_BYTES)
    assert glyph_f == bytes([0xF0, 0x80, 0xF0, 0x80, 0x80])
    assert memory.load8(0x50) == 0


def test_addresses_wrap_to_twelve_bits() -> None:
    memory = Memory()
    memory.store8(0x1005, 0x1FF)

    assert memory.load8(0x005) == 0xFF
    assert memory.load8(MEMORY_SIZE + 5) == 0xFF


def test_word_access_is_big_endian() -> None:
    memory = Memory()
    memory.store8(0x300, 0xAB)
    memory.store8(0x301, 0xCD)

    assert memory.load16(0x300) == 0xABCD
    assert memory.load16(0xFFF) == memory.load8(0xFFF) << 8


def test_equality_compares_contents() -> None:
    first, second = Memory(), Memory()
    assert first == second

    first.store8(0x200, 0x01)
    second.store8(0x200, 0x02)
    assert first != second

    second.store8(0x200, 0x01)
    assert first == second


def test_load_image_bounds() -> None:
    memory = Memory()
    memory.load_image(0xFFE, b"\x01\x02")
    assert memory.load16(0xFFE) == 0x0102

    with pytest.raises(MemoryAccessError):
        memory.load_image(0xFFF, b"\x01\x02")


def test_size_is_fixed() -> None:
    with pytest.raises(MemoryAccessError):
        Memory(0x800)
