"""Input adapters for the CHIP-8 interpreter."""

from .keyboard import KEY_MAP, Keypad

__all__ = [
    "KEY_MAP",
    "Keypad",
]
