"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .driver import (
    DEBUG_INSTRUCTIONS_PER_FRAME,
    INSTRUCTIONS_PER_FRAME,
    ChipMode,
    FrameDriver,
    FrameResult,
)
from .machine import Machine, MachineConfig, create_machine
from .timers import TIMER_RATE, TimerTicker

__all__ = [
    "ChipMode",
    "FrameDriver",
    "FrameResult",
    "INSTRUCTIONS_PER_FRAME",
    "DEBUG_INSTRUCTIONS_PER_FRAME",
    "Machine",
    "MachineConfig",
    "create_machine",
    "TIMER_RATE",
    "TimerTicker",
]
