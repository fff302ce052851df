"""Opcode metadata for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, Iterable, List, Tuple

from .decoder import DecodedInstruction


@dataclass(frozen=True)
class Instruction:
    """Metadata describing one instruction pattern.

    A word matches when ``word & mask == pattern``. ``syntax`` is a format
    string over the decoded fields used for disassembly.
    """

    mask: int
    pattern: int
    mnemonic: str
    syntax: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF or not 0 <= self.pattern <= 0xFFFF:
            raise ValueError("mask and pattern must be 16-bit values")
        if self.pattern & ~self.mask:
            raise ValueError(f"pattern {self.pattern:#06x} has bits outside mask {self.mask:#06x}")

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.pattern

    def disassemble(self, decoded: DecodedInstruction) -> str:
        operands = self.syntax.format(
            x=decoded.x,
            y=decoded.y,
            n=decoded.n,
            nn=decoded.nn,
            nnn=decoded.nnn,
        )
        return f"{self.mnemonic} {operands}".rstrip()


class OpcodeTable:
    """Lookup structure keyed by mask, most specific mask first."""

    def __init__(self) -> None:
        self._by_mask: Dict[int, Dict[int, Instruction]] = {}
        self._masks: List[int] = []

    def register(self, instruction: Instruction) -> None:
        bucket = self._by_mask.setdefault(instruction.mask, {})
        existing = bucket.get(instruction.pattern)
        if existing is not None:
            raise ValueError(
                f"pattern {instruction.pattern:#06x} already registered as {existing.mnemonic}"
            )
        bucket[instruction.pattern] = instruction
        if instruction.mask not in self._masks:
            self._masks.append(instruction.mask)
            self._masks.sort(key=lambda mask: bin(mask).count("1"), reverse=True)

    def lookup(self, word: int) -> Instruction | None:
        for mask in self._masks:
            instruction = self._by_mask[mask].get(word & mask)
            if instruction is not None:
                return instruction
        return None

    def __iter__(self):
        for mask in self._masks:
            yield from self._by_mask[mask].values()

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._by_mask.values())


_DEFINITIONS: Final[Tuple[Tuple[int, int, str, str, str], ...]] = (
    (0xFFFF, 0x00E0, "CLS", "", "op_cls"),
    (0xFFFF, 0x00EE, "RET", "", "op_ret"),
    (0xF000, 0x1000, "JP", "{nnn:#05x}", "op_jp"),
    (0xF000, 0x2000, "CALL", "{nnn:#05x}", "op_call"),
    (0xF000, 0x3000, "SE", "V{x:X}, {nn:#04x}", "op_se_immediate"),
    (0xF000, 0x4000, "SNE", "V{x:X}, {nn:#04x}", "op_sne_immediate"),
    # 5XYN and 9XYN ignore the low nibble.
    (0xF000, 0x5000, "SE", "V{x:X}, V{y:X}", "op_se_register"),
    (0xF000, 0x6000, "LD", "V{x:X}, {nn:#04x}", "op_ld_immediate"),
    (0xF000, 0x7000, "ADD", "V{x:X}, {nn:#04x}", "op_add_immediate"),
    (0xF00F, 0x8000, "LD", "V{x:X}, V{y:X}", "op_ld_register"),
    (0xF00F, 0x8001, "OR", "V{x:X}, V{y:X}", "op_or"),
    (0xF00F, 0x8002, "AND", "V{x:X}, V{y:X}", "op_and"),
    (0xF00F, 0x8003, "XOR", "V{x:X}, V{y:X}", "op_xor"),
    (0xF00F, 0x8004, "ADD", "V{x:X}, V{y:X}", "op_add_register"),
    (0xF00F, 0x8005, "SUB", "V{x:X}, V{y:X}", "op_sub"),
    (0xF00F, 0x8006, "SHR", "V{x:X}, V{y:X}", "op_shr"),
    (0xF00F, 0x8007, "SUBN", "V{x:X}, V{y:X}", "op_subn"),
    (0xF00F, 0x800E, "SHL", "V{x:X}, V{y:X}", "op_shl"),
    (0xF000, 0x9000, "SNE", "V{x:X}, V{y:X}", "op_sne_register"),
    (0xF000, 0xA000, "LD", "I, {nnn:#05x}", "op_ld_index"),
    (0xF000, 0xB000, "JP", "V0, {nnn:#05x}", "op_jp_offset"),
    (0xF000, 0xC000, "RND", "V{x:X}, {nn:#04x}", "op_rnd"),
    (0xF000, 0xD000, "DRW", "V{x:X}, V{y:X}, {n}", "op_drw"),
    (0xF0FF, 0xE09E, "SKP", "V{x:X}", "op_skp"),
    (0xF0FF, 0xE0A1, "SKNP", "V{x:X}", "op_sknp"),
    (0xF0FF, 0xF007, "LD", "V{x:X}, DT", "op_ld_from_delay"),
    (0xF0FF, 0xF00A, "LD", "V{x:X}, K", "op_wait_key"),
    (0xF0FF, 0xF015, "LD", "DT, V{x:X}", "op_ld_delay"),
    (0xF0FF, 0xF018, "LD", "ST, V{x:X}", "op_ld_sound"),
    (0xF0FF, 0xF01E, "ADD", "I, V{x:X}", "op_add_index"),
    (0xF0FF, 0xF029, "LD", "F, V{x:X}", "op_ld_glyph"),
    (0xF0FF, 0xF033, "LD", "B, V{x:X}", "op_ld_bcd"),
    (0xF0FF, 0xF055, "LD", "[I], V{x:X}", "op_store_registers"),
    (0xF0FF, 0xF065, "LD", "V{x:X}, [I]", "op_load_registers"),
)


def _build_table(definitions: Iterable[Tuple[int, int, str, str, str]]) -> OpcodeTable:
    table = OpcodeTable()
    for mask, pattern, mnemonic, syntax, handler in definitions:
        table.register(Instruction(mask, pattern, mnemonic, syntax, handler))
    return table


OPCODE_TABLE: Final[OpcodeTable] = _build_table(_DEFINITIONS)


def disassemble(decoded: DecodedInstruction, table: OpcodeTable = OPCODE_TABLE) -> str:
    instruction = table.lookup(decoded.word)
    if instruction is None:
        return f"DW {decoded.word:#06x}"
    return instruction.disassemble(decoded)


__all__ = [
    "Instruction",
    "OpcodeTable",
    "OPCODE_TABLE",
    "disassemble",
]
