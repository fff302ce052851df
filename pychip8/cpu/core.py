"""CHIP-8 instruction executor."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from pychip8.utils import debug_enabled, debug_log

from .decoder import DecodedInstruction, decode
from .opcodes import Instruction, OpcodeTable, OPCODE_TABLE
from .state import FLAG_REGISTER, STACK_DEPTH, MachineState


class CPUError(Exception):
    """Base error for instruction-time failures."""


class StackOverflowError(CPUError):
    """Raised when ``2NNN`` is executed with a full stack."""


class StackUnderflowError(CPUError):
    """Raised when ``00EE`` is executed with an empty stack."""


# Seeded once per process; instances share it unless given their own.
_RNG = random.Random()


def seed_random(seed: int | None) -> None:
    """Reseed the process-wide generator used by ``CXNN``."""

    _RNG.seed(seed)


def _shared_rng() -> random.Random:
    return _RNG


@dataclass
class Chip8CPU:
    """Fetch/decode/execute loop over a :class:`MachineState`."""

    state: MachineState
    instruction_table: OpcodeTable = field(default=OPCODE_TABLE)
    rng: random.Random = field(default_factory=_shared_rng)

    instruction_count: int = 0
    unknown_opcodes: int = 0
    last_instruction: DecodedInstruction | None = None

    def fetch(self) -> int:
        return self.state.memory.load16(self.state.pc)

    def step(self) -> bool:
        """Execute one instruction and return ``True`` when a redraw is due.

        A :class:`CPUError` leaves the state exactly as it was before the
        call, including ``pc``.
        """

        state = self.state
        pc_before = state.pc
        decoded = decode(self.fetch())
        self.last_instruction = decoded
        state.pc = (state.pc + 2) & 0xFFFF

        instruction = self.instruction_table.lookup(decoded.word)
        if debug_enabled("cpu"):
            debug_log(
                "cpu",
                "pc=%04x op=%04x %s",
                pc_before,
                decoded.word,
                instruction.disassemble(decoded) if instruction is not None else "?",
            )
        if instruction is None:
            self.unknown_opcodes += 1
            debug_log("cpu", "unknown opcode %04x at %04x", decoded.word, pc_before)
            self.instruction_count += 1
            return False

        handler = self._resolve(instruction)
        try:
            redraw = handler(decoded)
        except CPUError:
            state.pc = pc_before
            raise
        self.instruction_count += 1
        return bool(redraw)

    def _resolve(self, instruction: Instruction):
        handler = getattr(self, instruction.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.handler}' not implemented")
        return handler

    # ------------------------------------------------------------------
    # Helpers

    def _set_flag(self, value: int) -> None:
        """Write ``V[F]``; callers do this after the result write."""

        self.state.v[FLAG_REGISTER] = value & 0x01

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.state.pc = (self.state.pc + 2) & 0xFFFF

    # ------------------------------------------------------------------
    # Flow control

    def op_cls(self, _: DecodedInstruction) -> bool:
        self.state.clear_display()
        return True

    def op_ret(self, _: DecodedInstruction) -> bool:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError(f"return with empty stack at {state.pc - 2:#05x}")
        state.sp -= 1
        state.pc = state.stack[state.sp]
        return False

    def op_jp(self, decoded: DecodedInstruction) -> bool:
        self.state.pc = decoded.nnn
        return False

    def op_call(self, decoded: DecodedInstruction) -> bool:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(
                f"call to {decoded.nnn:#05x} exceeds stack depth {STACK_DEPTH}"
            )
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = decoded.nnn
        return False

    def op_jp_offset(self, decoded: DecodedInstruction) -> bool:
        self.state.pc = (self.state.v[0] + decoded.nnn) & 0xFFFF
        return False

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_immediate(self, decoded: DecodedInstruction) -> bool:
        self._skip_if(self.state.v[decoded.x] == decoded.nn)
        return False

    def op_sne_immediate(self, decoded: DecodedInstruction) -> bool:
        self._skip_if(self.state.v[decoded.x] != decoded.nn)
        return False

    def op_se_register(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        self._skip_if(v[decoded.x] == v[decoded.y])
        return False

    def op_sne_register(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        self._skip_if(v[decoded.x] != v[decoded.y])
        return False

    def op_skp(self, decoded: DecodedInstruction) -> bool:
        state = self.state
        self._skip_if(state.keypad[state.v[decoded.x] & 0x0F])
        return False

    def op_sknp(self, decoded: DecodedInstruction) -> bool:
        state = self.state
        self._skip_if(not state.keypad[state.v[decoded.x] & 0x0F])
        return False

    # ------------------------------------------------------------------
    # Register arithmetic

    def op_ld_immediate(self, decoded: DecodedInstruction) -> bool:
        self.state.v[decoded.x] = decoded.nn
        return False

    def op_add_immediate(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        v[decoded.x] = (v[decoded.x] + decoded.nn) & 0xFF
        return False

    def op_ld_register(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        v[decoded.x] = v[decoded.y]
        return False

    def op_or(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        v[decoded.x] |= v[decoded.y]
        self._set_flag(0)
        return False

    def op_and(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        v[decoded.x] &= v[decoded.y]
        self._set_flag(0)
        return False

    def op_xor(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        v[decoded.x] ^= v[decoded.y]
        self._set_flag(0)
        return False

    def op_add_register(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        total = v[decoded.x] + v[decoded.y]
        v[decoded.x] = total & 0xFF
        self._set_flag(1 if total > 0xFF else 0)
        return False

    def op_sub(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        vx, vy = v[decoded.x], v[decoded.y]
        v[decoded.x] = (vx - vy) & 0xFF
        self._set_flag(1 if vy <= vx else 0)
        return False

    def op_subn(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        vx, vy = v[decoded.x], v[decoded.y]
        v[decoded.x] = (vy - vx) & 0xFF
        self._set_flag(1 if vx <= vy else 0)
        return False

    def op_shr(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        vy = v[decoded.y]
        v[decoded.x] = vy >> 1
        self._set_flag(vy & 0x01)
        return False

    def op_shl(self, decoded: DecodedInstruction) -> bool:
        v = self.state.v
        vy = v[decoded.y]
        v[decoded.x] = (vy << 1) & 0xFF
        self._set_flag((vy >> 7) & 0x01)
        return False

    def op_rnd(self, decoded: DecodedInstruction) -> bool:
        self.state.v[decoded.x] = self.rng.randrange(256) & decoded.nn
        return False

    # ------------------------------------------------------------------
    # Index register and memory

    def op_ld_index(self, decoded: DecodedInstruction) -> bool:
        self.state.i = decoded.nnn
        return False

    def op_add_index(self, decoded: DecodedInstruction) -> bool:
        state = self.state
        state.i = (state.i + state.v[decoded.x]) & 0xFFFF
        return False

    def op_ld_glyph(self, decoded: DecodedInstruction) -> bool:
        state = self.state
        state.i = state.v[decoded.x] * 5
        return False

    def op_ld_bcd(self, decoded: DecodedInstruction) -> bool:
        state = self.state
        value = state.v[decoded.x]
        memory = state.memory
        memory.store8(state.i, value // 100)
        memory.store8(state.i + 1, (value // 10) % 10)
        memory.store8(state.i + 2, value % 10)
        return False

    def op_store_registers(self, decoded: DecodedInstruction) -> bool:
        state = self.state
        for index in range(decoded.x + 1):
            state.memory.store8(state.i, state.v[index])
            state.i = (state.i + 1) & 0xFFFF
        return False

    def op_load_registers(self, decoded: DecodedInstruction) -> bool:
        state = self.state
        for index in range(decoded.x + 1):
            state.v[index] = state.memory.load8(state.i)
            state.i = (state.i + 1) & 0xFFFF
        return False

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_from_delay(self, decoded: DecodedInstruction) -> bool:
        self.state.v[decoded.x] = self.state.delay_timer & 0xFF
        return False

    def op_ld_delay(self, decoded: DecodedInstruction) -> bool:
        self.state.delay_timer = self.state.v[decoded.x]
        return False

    def op_ld_sound(self, decoded: DecodedInstruction) -> bool:
        self.state.sound_timer = self.state.v[decoded.x]
        return False

    def op_wait_key(self, decoded: DecodedInstruction) -> bool:
        """Wait for a full press-and-release before committing the key."""

        state = self.state
        latch = state.key_wait
        if latch.idle:
            key = state.first_pressed_key()
            if key is None:
                state.pc = (state.pc - 2) & 0xFFFF
                return False
            latch.capture(key)
            if debug_enabled("input"):
                debug_log("input", "key_wait captured=%X", key)

        if state.keypad[latch.key]:
            state.pc = (state.pc - 2) & 0xFFFF
            return False

        state.v[decoded.x] = latch.key
        if debug_enabled("input"):
            debug_log("input", "key_wait committed V%X=%X", decoded.x, latch.key)
        latch.clear()
        return False

    # ------------------------------------------------------------------
    # Display

    def op_drw(self, decoded: DecodedInstruction) -> bool:
        """XOR an 8xN sprite from ``memory[I]``; clips at the right/bottom edge."""

        state = self.state
        width, height = state.width, state.height
        origin_x = state.v[decoded.x] % width
        origin_y = state.v[decoded.y] % height
        display = state.display
        memory = state.memory
        collision = 0

        for row in range(decoded.n):
            y = origin_y + row
            if y >= height:
                break
            sprite = memory.load8(state.i + row)
            base = y * width
            for bit in range(8):
                x = origin_x + bit
                if x >= width:
                    break
                if not sprite & (0x80 >> bit):
                    continue
                index = base + x
                if display[index]:
                    collision = 1
                display[index] = not display[index]

        self._set_flag(collision)
        return True


__all__ = [
    "Chip8CPU",
    "CPUError",
    "StackOverflowError",
    "StackUnderflowError",
    "seed_random",
]
