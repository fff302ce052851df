"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .program import (
    MAX_PROGRAM_SIZE,
    PROGRAM_START,
    RomTooLargeError,
    check_program_size,
    load_program,
    load_program_from_path,
)

__all__ = [
    "MAX_PROGRAM_SIZE",
    "PROGRAM_START",
    "RomTooLargeError",
    "check_program_size",
    "load_program",
    "load_program_from_path",
]
