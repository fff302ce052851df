"""Program image loading for the CHIP-8 interpreter."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.bus import MEMORY_SIZE

PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


class RomTooLargeError(ValueError):
    """Raised when a program image does not fit above ``PROGRAM_START``."""

    def __init__(self, size: int, limit: int = MAX_PROGRAM_SIZE) -> None:
        super().__init__(
            f"program too large: maximum allowable size is {limit} bytes, got {size} bytes"
        )
        self.size = size
        self.limit = limit


def check_program_size(image: bytes) -> None:
    if len(image) > MAX_PROGRAM_SIZE:
        raise RomTooLargeError(len(image))


def load_program(stream: BinaryIO) -> bytes:
    """Read a raw program image from ``stream`` and validate its size."""

    image = stream.read()
    check_program_size(image)
    return bytes(image)


def load_program_from_path(path: Path) -> bytes:
    with path.open("rb") as handle:
        return load_program(handle)
