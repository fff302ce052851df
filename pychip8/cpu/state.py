"""Architectural state of the CHIP-8 machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from pychip8.bus import Memory
from pychip8.loader import PROGRAM_START, check_program_size

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
REGISTER_COUNT = 16
STACK_DEPTH = 16
KEY_COUNT = 16
FLAG_REGISTER = 0xF


class RunState(Enum):
    """Execution state checked by the frame driver."""

    RUNNING = auto()
    PAUSED = auto()
    HALTED = auto()


@dataclass
class KeyWaitLatch:
    """Sub-instruction state of ``FX0A``.

    ``key`` is ``None`` while idle and holds the captured key index until
    that key is released.
    """

    key: int | None = None

    @property
    def idle(self) -> bool:
        return self.key is None

    def capture(self, key: int) -> None:
        self.key = key & 0x0F

    def clear(self) -> None:
        self.key = None


@dataclass
class MachineState:
    """Register file, memory, stack, timers, keypad and framebuffer."""

    memory: Memory = field(default_factory=Memory)
    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x0000
    pc: int = PROGRAM_START
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    sp: int = 0
    delay_timer: int = 0
    sound_timer: int = 0
    keypad: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    width: int = DISPLAY_WIDTH
    height: int = DISPLAY_HEIGHT
    display: list[bool] = field(default_factory=list)
    key_wait: KeyWaitLatch = field(default_factory=KeyWaitLatch)
    run_state: RunState = RunState.RUNNING
    debug_enabled: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("display dimensions must be positive")
        if not self.display:
            self.display = [False] * (self.width * self.height)
        elif len(self.display) != self.width * self.height:
            raise ValueError("display buffer does not match width x height")

    # ------------------------------------------------------------------
    # Framebuffer

    def clear_display(self) -> None:
        self.display[:] = [False] * len(self.display)

    # ------------------------------------------------------------------
    # Keypad

    def set_key(self, key: int, pressed: bool) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"key index out of range: {key}")
        self.keypad[key] = pressed

    def first_pressed_key(self) -> int | None:
        for index, pressed in enumerate(self.keypad):
            if pressed:
                return index
        return None

    # ------------------------------------------------------------------
    # Timers

    @property
    def sound_active(self) -> bool:
        return self.sound_timer > 0


def new_state(
    program: bytes = b"",
    *,
    width: int = DISPLAY_WIDTH,
    height: int = DISPLAY_HEIGHT,
    debug_enabled: bool = False,
) -> MachineState:
    """Build a fresh state with the font installed and ``program`` at 0x200."""

    check_program_size(program)
    state = MachineState(width=width, height=height, debug_enabled=debug_enabled)
    state.memory.install_font()
    state.memory.load_image(PROGRAM_START, program)
    return state
