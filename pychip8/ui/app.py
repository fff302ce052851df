"""Pygame frontend for the CHIP-8 interpreter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from pychip8.audio import SquareWaveBeeper
from pychip8.cpu import MachineState, RunState, seed_random
from pychip8.loader import RomTooLargeError, load_program_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.system.driver import INSTRUCTIONS_PER_FRAME
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import GREY, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 frontend."""

    rom_path: Optional[Path] = None
    scale: int = 12
    fullscreen: bool = False
    debug: bool = False
    seed: Optional[int] = None
    instructions_per_frame: int = INSTRUCTIONS_PER_FRAME
    palette: Sequence[RGBColor] = field(default_factory=lambda: GREY)
    enable_audio: bool = True


# Host key name -> run control.
CONTROL_KEYS = {
    "escape": "quit",
    "p": "pause",
    "t": "reset",
    "b": "debug",
    "tab": "mode",
}


class Chip8App:
    """Thin wrapper around the Pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._renderer = Renderer(config.palette)
        self._beeper: SquareWaveBeeper | None = None
        self._pygame = None
        self._screen = None

    @property
    def machine(self) -> Machine | None:
        return self._machine

    @property
    def running(self) -> bool:
        return self._running

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass a ROM path")
        machine = self._create_machine(self._config.rom_path)

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame

        if self._config.enable_audio:
            self._initialise_audio(pygame)

        state = machine.state
        size = (state.width * self._config.scale, state.height * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        self._screen = pygame.display.set_mode(size, flags)

        clock = pygame.time.Clock()
        self._running = True

        while self._running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self._running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_key_event(pygame.key.name(event.key), pressed=True)
                elif event.type == pygame.KEYUP:
                    self._handle_key_event(pygame.key.name(event.key), pressed=False)

            if not self._running:
                break

            result = machine.run_frame()
            if result.unknown_opcodes:
                debug_log(
                    "cpu",
                    "frame=%d unknown_opcodes=%d",
                    machine.driver.frame_count,
                    result.unknown_opcodes,
                )
            if machine.driver.halted:
                self._running = False

            clock.tick(_DEBUG_FRAME_RATE if machine.state.debug_enabled else _FRAME_RATE)

        if self._beeper is not None:
            self._beeper.shutdown()
        pygame.quit()

    # ------------------------------------------------------------------
    # Setup

    def _initialise_audio(self, pygame) -> None:
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
                return

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            if debug_enabled("audio"):
                debug_log("audio", "mixer_unavailable")
            return
        try:
            self._beeper = SquareWaveBeeper(sample_rate=mixer_state[0])
        except RuntimeError as exc:
            self._beeper = None
            if debug_enabled("audio"):
                debug_log("audio", "beeper_init_failed=%s", exc)

    def _create_machine(self, rom_path: Path) -> Machine:
        program = self._load_program(rom_path)
        if self._config.seed is not None:
            seed_random(self._config.seed)
        machine = create_machine(
            MachineConfig(
                program=program,
                instructions_per_frame=self._config.instructions_per_frame,
                debug=self._config.debug,
                framebuffer_sink=self._present,
                audio_sink=self._handle_sound,
            )
        )
        self._machine = machine
        return machine

    def _load_program(self, rom_path: Path) -> bytes:
        try:
            return load_program_from_path(rom_path)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomTooLargeError as exc:
            raise RuntimeError(
                f"ROM {rom_path} is too large: maximum {exc.limit} bytes, got {exc.size} bytes"
            ) from exc

    # ------------------------------------------------------------------
    # Input

    def _handle_key_event(self, name: str, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        lowered = name.lower()
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", lowered, pressed)
        control = CONTROL_KEYS.get(lowered)
        if control is not None:
            if pressed:
                self._handle_control(control)
            return
        if pressed:
            machine.keypad.press(lowered)
        else:
            machine.keypad.release(lowered)

    def _handle_control(self, control: str) -> None:
        machine = self._machine
        if machine is None:
            return
        driver = machine.driver
        if control == "quit":
            driver.halt()
            self._running = False
        elif control == "pause":
            state = driver.toggle_pause()
            print("PAUSED" if state is RunState.PAUSED else "UNPAUSED")
        elif control == "reset":
            self._reset(machine)
        elif control == "debug":
            enabled = driver.toggle_debug()
            print("DEBUG MODE ACTIVATED" if enabled else "DEBUG MODE DEACTIVATED")
        elif control == "mode":
            mode = driver.cycle_mode()
            print(f"CHIP MODE: {mode.value.upper()}")
        else:
            raise ValueError(f"unknown control '{control}'")

    def _reset(self, machine: Machine) -> None:
        program = machine.driver.program
        rom_path = self._config.rom_path
        if rom_path is not None:
            try:
                program = self._load_program(rom_path)
            except RuntimeError as exc:
                print(f"Reset failed, keeping current program: {exc}")
                return
        machine.reset(program)
        if self._beeper is not None:
            self._beeper.set_state(False)

    # ------------------------------------------------------------------
    # Output sinks

    def _present(self, state: MachineState) -> None:
        screen = self._screen
        pygame = self._pygame
        if screen is None or pygame is None:
            return
        frame = self._renderer.render_state(state, scale=self._config.scale)
        screen.blit(frame.to_surface(), (0, 0))
        pygame.display.flip()

    def _handle_sound(self, active: bool) -> None:
        if self._beeper is not None:
            self._beeper.set_state(active)


_FRAME_RATE = 60
_DEBUG_FRAME_RATE = 1
