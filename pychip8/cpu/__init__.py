"""CPU package for the CHIP-8 interpreter."""

from .core import Chip8CPU, CPUError, StackOverflowError, StackUnderflowError, seed_random
from .decoder import DecodedInstruction, decode
from .state import KeyWaitLatch, MachineState, RunState, new_state
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUError",
    "StackOverflowError",
    "StackUnderflowError",
    "seed_random",
    "DecodedInstruction",
    "decode",
    "KeyWaitLatch",
    "MachineState",
    "RunState",
    "new_state",
    "opcodes",
]
