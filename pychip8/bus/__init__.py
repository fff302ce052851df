"""Memory bus for the CHIP-8 interpreter."""

from .memory import FONT_SET, FONT_START, GLYPH_BYTES, MEMORY_SIZE, Memory, MemoryAccessError

__all__ = [
    "FONT_SET",
    "FONT_START",
    "GLYPH_BYTES",
    "MEMORY_SIZE",
    "Memory",
    "MemoryAccessError",
]
