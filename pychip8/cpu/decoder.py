"""Instruction word decoding."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Field breakdown of a 16-bit instruction word."""

    word: int
    opcode_class: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    def __str__(self) -> str:
        return f"{self.word:04X}"


def decode(word: int) -> DecodedInstruction:
    word &= 0xFFFF
    return DecodedInstruction(
        word=word,
        opcode_class=word & 0xF000,
        x=(word >> 8) & 0x0F,
        y=(word >> 4) & 0x0F,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )
