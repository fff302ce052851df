"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.cpu import Chip8CPU, MachineState
from pychip8.io import Keypad
from pychip8.utils import TraceRecorder, debug_enabled

from .driver import AudioSink, FramebufferSink, FrameDriver, FrameResult, INSTRUCTIONS_PER_FRAME
from .timers import TimerTicker


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    program: bytes = b""
    instructions_per_frame: int = INSTRUCTIONS_PER_FRAME
    width: int = 64
    height: int = 32
    debug: bool = False
    rng: Optional[random.Random] = None
    framebuffer_sink: Optional[FramebufferSink] = None
    audio_sink: Optional[AudioSink] = None
    keypad: Keypad | None = None
    trace_capacity: int = 0


@dataclass
class Machine:
    """Aggregates the frame driver with its input adapter."""

    driver: FrameDriver
    keypad: Keypad
    trace: TraceRecorder | None = None

    @property
    def state(self) -> MachineState:
        return self.driver.state

    @property
    def cpu(self) -> Chip8CPU:
        return self.driver.cpu

    @property
    def ticker(self) -> TimerTicker:
        return self.driver.ticker

    def run_frame(self) -> FrameResult:
        return self.driver.run_frame()

    def reset(self, program: bytes | None = None) -> MachineState:
        self.keypad.reset()
        return self.driver.reset(program)


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a machine with ``config.program`` loaded at 0x200."""

    keypad = config.keypad or Keypad()

    trace: TraceRecorder | None = None
    if config.trace_capacity > 0:
        trace = TraceRecorder(config.trace_capacity)
    elif config.debug or debug_enabled("trace"):
        trace = TraceRecorder(512)

    driver = FrameDriver(
        config.program,
        width=config.width,
        height=config.height,
        instructions_per_frame=config.instructions_per_frame,
        rng=config.rng,
        framebuffer_sink=config.framebuffer_sink,
        audio_sink=config.audio_sink,
        keypad_source=keypad.snapshot,
        trace=trace,
    )
    if config.debug:
        driver.toggle_debug()

    return Machine(driver=driver, keypad=keypad, trace=trace)
