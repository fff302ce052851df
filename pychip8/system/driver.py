"""Per-frame orchestration of the interpreter."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from pychip8.cpu import Chip8CPU, CPUError, MachineState, RunState, new_state
from pychip8.cpu.opcodes import disassemble
from pychip8.utils import TraceRecorder, debug_enabled, debug_log, debug_print

from .timers import TimerTicker

INSTRUCTIONS_PER_FRAME = 600
DEBUG_INSTRUCTIONS_PER_FRAME = 1
FAULT_TRACE_LINES = 16

FramebufferSink = Callable[[MachineState], None]
AudioSink = Callable[[bool], None]
KeypadSource = Callable[[], Sequence[bool]]


class ChipMode(Enum):
    """Instruction-set variant selector. Only ``CHIP8`` changes behaviour."""

    CHIP8 = "chip-8"
    SUPERCHIP = "superchip"
    XOCHIP = "xo-chip"

    def next(self) -> "ChipMode":
        members = list(ChipMode)
        return members[(members.index(self) + 1) % len(members)]


@dataclass
class FrameResult:
    """Outcome of a single :meth:`FrameDriver.run_frame` call."""

    executed: int = 0
    redraw: bool = False
    sound: bool = False
    ran: bool = True
    errors: List[CPUError] = field(default_factory=list)
    unknown_opcodes: int = 0


class FrameDriver:
    """Runs a bounded batch of instructions per frame and ticks the timers."""

    def __init__(
        self,
        program: bytes = b"",
        *,
        width: int = 64,
        height: int = 32,
        instructions_per_frame: int = INSTRUCTIONS_PER_FRAME,
        rng: random.Random | None = None,
        framebuffer_sink: Optional[FramebufferSink] = None,
        audio_sink: Optional[AudioSink] = None,
        keypad_source: Optional[KeypadSource] = None,
        trace: TraceRecorder | None = None,
    ) -> None:
        if instructions_per_frame <= 0:
            raise ValueError("instructions_per_frame must be positive")
        self._program = bytes(program)
        self._width = width
        self._height = height
        self._nominal_rate = instructions_per_frame
        self._rng = rng
        self._framebuffer_sink = framebuffer_sink
        self._audio_sink = audio_sink
        self._keypad_source = keypad_source
        self._trace = trace
        self.mode = ChipMode.CHIP8
        self.frame_count = 0
        self._install(new_state(self._program, width=width, height=height))

    def _install(self, state: MachineState) -> None:
        self.state = state
        if self._rng is None:
            self.cpu = Chip8CPU(state)
        else:
            self.cpu = Chip8CPU(state, rng=self._rng)
        self.ticker = TimerTicker(state)

    # ------------------------------------------------------------------
    # Frame loop

    @property
    def instructions_per_frame(self) -> int:
        if self.state.debug_enabled:
            return DEBUG_INSTRUCTIONS_PER_FRAME
        return self._nominal_rate

    def run_frame(self) -> FrameResult:
        """Execute one frame's worth of instructions, flush, then tick timers."""

        state = self.state
        if self._keypad_source is not None:
            for index, pressed in enumerate(self._keypad_source()):
                if index < len(state.keypad):
                    state.set_key(index, bool(pressed))

        if state.run_state is not RunState.RUNNING:
            self._flush()
            if self._audio_sink is not None:
                self._audio_sink(False)
            return FrameResult(ran=False)

        result = FrameResult()
        budget = self.instructions_per_frame
        tracing = self._trace is not None or state.debug_enabled or debug_enabled("trace")
        unknown_before = self.cpu.unknown_opcodes
        while result.executed < budget:
            if state.run_state is RunState.HALTED:
                break
            pc_before = state.pc
            try:
                redraw = self.cpu.step()
            except CPUError as exc:
                self._report_fault(pc_before, exc)
                result.errors.append(exc)
                state.pc = (state.pc + 2) & 0xFFFF
                result.executed += 1
                continue
            result.executed += 1
            if tracing:
                self._record_trace(pc_before)
            if redraw:
                result.redraw = True
                break

        result.unknown_opcodes = self.cpu.unknown_opcodes - unknown_before
        self._flush()
        result.sound = self.ticker.tick()
        if self._audio_sink is not None:
            self._audio_sink(result.sound)
        self.frame_count += 1
        return result

    def _flush(self) -> None:
        if self._framebuffer_sink is not None:
            self._framebuffer_sink(self.state)

    def _record_trace(self, pc_before: int) -> None:
        decoded = self.cpu.last_instruction
        if decoded is None:
            return
        mnemonic = disassemble(decoded, self.cpu.instruction_table)
        if self._trace is not None:
            self._trace.record_step(self.state, decoded.word, pc=pc_before, mnemonic=mnemonic)
        if self.state.debug_enabled or debug_enabled("trace"):
            debug_print("trace", "pc=%04x op=%04x %s", pc_before, decoded.word, mnemonic)

    def _report_fault(self, pc: int, exc: CPUError) -> None:
        if not (self.state.debug_enabled or debug_enabled("cpu")):
            return
        debug_print("cpu", "fault pc=%04x: %s", pc, exc)
        if self._trace is not None:
            self._trace.dump("cpu", limit=FAULT_TRACE_LINES)

    # ------------------------------------------------------------------
    # Run controls

    @property
    def program(self) -> bytes:
        return self._program

    def toggle_pause(self) -> RunState:
        state = self.state
        if state.run_state is RunState.RUNNING:
            state.run_state = RunState.PAUSED
        elif state.run_state is RunState.PAUSED:
            state.run_state = RunState.RUNNING
        debug_log("control", "run_state=%s", state.run_state.name)
        return state.run_state

    def halt(self) -> None:
        self.state.run_state = RunState.HALTED

    @property
    def halted(self) -> bool:
        return self.state.run_state is RunState.HALTED

    def toggle_debug(self) -> bool:
        """Flip single-step tracing for this driver only."""

        state = self.state
        state.debug_enabled = not state.debug_enabled
        debug_log("control", "debug=%s instructions_per_frame=%d", state.debug_enabled, self.instructions_per_frame)
        return state.debug_enabled

    def cycle_mode(self) -> ChipMode:
        self.mode = self.mode.next()
        debug_log("control", "mode=%s", self.mode.value)
        return self.mode

    def reset(self, program: bytes | None = None) -> MachineState:
        """Replace the whole machine state with a freshly loaded one."""

        image = self._program if program is None else bytes(program)
        state = new_state(image, width=self._width, height=self._height)
        self._program = image
        self.mode = ChipMode.CHIP8
        self._install(state)
        if self._trace is not None:
            self._trace.clear()
        debug_log("control", "reset program_size=%d", len(image))
        return state


__all__ = [
    "ChipMode",
    "FrameDriver",
    "FrameResult",
    "INSTRUCTIONS_PER_FRAME",
    "DEBUG_INSTRUCTIONS_PER_FRAME",
]
