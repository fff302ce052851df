"""Lightweight execution trace buffer for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .debug import debug_print


@dataclass
class TraceEntry:
    pc: int
    word: int | None
    mnemonic: str
    registers: tuple[int, ...]
    i: int
    sp: int
    delay_timer: int
    sound_timer: int
    note: str = ""


class TraceRecorder:
    """Ring buffer that stores recent interpreter snapshots."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._entries: List[TraceEntry | None] = [None] * capacity
        self._index = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def record_step(
        self,
        state,
        word: int | None,
        *,
        pc: int | None = None,
        mnemonic: str = "",
        note: str = "",
    ) -> TraceEntry:
        entry = TraceEntry(
            pc=(state.pc if pc is None else pc) & 0xFFFF,
            word=None if word is None else word & 0xFFFF,
            mnemonic=mnemonic,
            registers=tuple(value & 0xFF for value in state.v),
            i=state.i & 0xFFFF,
            sp=state.sp,
            delay_timer=state.delay_timer & 0xFF,
            sound_timer=state.sound_timer & 0xFF,
            note=note,
        )
        self._append(entry)
        return entry

    def entries(self, limit: int | None = None) -> Iterable[TraceEntry]:
        count = self._size if limit is None else min(self._size, max(limit, 0))
        for offset in range(count):
            index = (self._index - count + offset) % self._capacity
            entry = self._entries[index]
            if entry is not None:
                yield entry

    def last_entry(self) -> TraceEntry | None:
        if self._size == 0:
            return None
        index = (self._index - 1) % self._capacity
        return self._entries[index]

    def clear(self) -> None:
        self._entries = [None] * self._capacity
        self._index = 0
        self._size = 0

    @staticmethod
    def format_entry(entry: TraceEntry) -> str:
        word = "----" if entry.word is None else f"{entry.word:04X}"
        mnemonic = entry.mnemonic or "?"
        registers = " ".join(f"{value:02X}" for value in entry.registers)
        note = entry.note or "-"
        return (
            f"pc={entry.pc:04X} op={word} {mnemonic:<16} V=[{registers}] "
            f"I={entry.i:04X} SP={entry.sp:02d} DT={entry.delay_timer:02X} "
            f"ST={entry.sound_timer:02X} note={note}"
        )

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        return [self.format_entry(entry) for entry in self.entries(limit)]

    def dump(self, category: str, limit: int | None = None) -> None:
        """Print the newest ``limit`` entries; gating is up to the caller."""

        for line in self.format_entries(limit):
            debug_print(category, line)

    def _append(self, entry: TraceEntry) -> None:
        self._entries[self._index] = entry
        self._index = (self._index + 1) % self._capacity
        if self._size < self._capacity:
            self._size += 1
