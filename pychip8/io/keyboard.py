"""Host keyboard to CHIP-8 hex keypad mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16

# COSMAC VIP layout:   1 2 3 C      host:  1 2 3 4
#                      4 5 6 D             q w e r
#                      7 8 9 E             a s d f
#                      A 0 B F             z x c v
KEY_MAP: Mapping[str, int] = {
    "x": 0x0,
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "z": 0xA,
    "c": 0xB,
    "4": 0xC,
    "r": 0xD,
    "f": 0xE,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


@dataclass
class Keypad:
    """Sixteen-key hex keypad latched from host key events."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _active: Dict[int, int] = field(default_factory=dict)

    def press(self, key_name: str) -> bool:
        """Latch the hex key bound to ``key_name``; return ``False`` if unmapped."""

        key = self.lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.press_key(key)
        return True

    def release(self, key_name: str) -> bool:
        key = self.lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.release_key(key)
        return True

    def press_key(self, key: int) -> None:
        self._check_index(key)
        self._keys[key] = True
        self._active[key] = self._active.get(key, 0) + 1
        if debug_enabled("input"):
            debug_log("input", "keypad_press key=%X count=%d", key, self._active[key])

    def release_key(self, key: int) -> None:
        self._check_index(key)
        count = self._active.get(key, 0)
        if count <= 1:
            self._keys[key] = False
            self._active.pop(key, None)
        else:
            self._active[key] = count - 1
        if debug_enabled("input"):
            debug_log("input", "keypad_release key=%X count=%d", key, self._active.get(key, 0))

    def is_pressed(self, key: int) -> bool:
        self._check_index(key)
        return self._keys[key]

    def reset(self) -> None:
        self._keys[:] = [False] * KEY_COUNT
        self._active.clear()

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    @staticmethod
    def lookup(key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return KEY_MAP.get(name)

    @staticmethod
    def _check_index(key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"key index out of range: {key}")
