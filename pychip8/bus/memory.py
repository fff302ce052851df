"""4 KiB memory for the CHIP-8 interpreter.

Addresses are folded into the 12-bit space on every access, so an index
register that walks past ``0xFFF`` wraps back to the font area instead of
faulting. Only bulk image loads are bounds-checked.
"""

from __future__ import annotations

from dataclasses import dataclass

MEMORY_SIZE = 0x1000
ADDRESS_MASK = MEMORY_SIZE - 1

FONT_START = 0x000
GLYPH_BYTES = 5

FONT_SET: bytes = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)


def _mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit address space."""

    return value & ADDRESS_MASK


class MemoryAccessError(Exception):
    """Raised when a bulk load does not fit into memory."""


@dataclass(eq=False)
class Memory:
    """Byte-addressable RAM covering the whole CHIP-8 address space."""

    length: int = MEMORY_SIZE

    def __post_init__(self) -> None:
        if self.length != MEMORY_SIZE:
            raise MemoryAccessError(f"memory must be {MEMORY_SIZE} bytes, got {self.length}")
        self._data = bytearray(self.length)

    def __len__(self) -> int:
        return self.length

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Memory):
            return NotImplemented
        return self._data == other._data

    def load8(self, address: int) -> int:
        return self._data[_mask12(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[_mask12(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def load_image(self, start: int, data: bytes) -> None:
        """Copy ``data`` to ``start`` without wrapping."""

        end = start + len(data)
        if start < 0 or end > self.length:
            raise MemoryAccessError(
                f"image of {len(data)} bytes at {start:#05x} exceeds memory ({self.length} bytes)"
            )
        self._data[start:end] = data

    def install_font(self) -> None:
        self.load_image(FONT_START, FONT_SET)

    def snapshot(self, start: int = 0, length: int | None = None) -> bytes:
        if length is None:
            length = self.length - start
        return bytes(self.load8(start + offset) for offset in range(length))
