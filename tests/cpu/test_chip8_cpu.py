"""Tests for the CHIP-8 instruction executor."""

from __future__ import annotations

import random

import pytest

from pychip8.cpu import Chip8CPU, StackOverflowError, StackUnderflowError, new_state
from pychip8.cpu.state import FLAG_REGISTER, STACK_DEPTH


def assemble(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


def make_cpu(*words: int, seed: int = 0) -> Chip8CPU:
    state = new_state(assemble(*words))
    return Chip8CPU(state, rng=random.Random(seed))


def run_at(cpu: Chip8CPU, address: int = 0x200) -> bool:
    cpu.state.pc = address
    return cpu.step()


def test_end_to_end_add_program() -> None:
    cpu = make_cpu(0x6005, 0x6103, 0x8014)

    for _ in range(3):
        cpu.step()

    assert cpu.state.v[0] == 8
    assert cpu.state.v[FLAG_REGISTER] == 0
    assert cpu.state.pc == 0x206


@pytest.mark.parametrize("first, second", [(0x05, 0x03), (0xFF, 0x01), (0x80, 0x80), (0xC8, 0x64)])
def test_add_immediate_wraps_for_every_register(first: int, second: int) -> None:
    for x in range(16):
        cpu = make_cpu(0x6000 | (x << 8) | first, 0x7000 | (x << 8) | second)
        cpu.step()
        cpu.step()
        assert cpu.state.v[x] == (first + second) % 256


def test_add_immediate_leaves_flag_untouched() -> None:
    cpu = make_cpu(0x60FF, 0x7002)
    cpu.state.v[FLAG_REGISTER] = 0x01
    cpu.step()
    cpu.step()
    assert cpu.state.v[0] == 0x01
    assert cpu.state.v[FLAG_REGISTER] == 0x01


def test_add_register_carry_for_all_pairs() -> None:
    cpu = make_cpu(0x8014)
    v = cpu.state.v
    for vx in range(256):
        for vy in range(256):
            v[0] = vx
            v[1] = vy
            run_at(cpu)
            assert v[0] == (vx + vy) & 0xFF
            assert v[FLAG_REGISTER] == (1 if vx + vy > 255 else 0)


def test_sub_no_borrow_flag_for_all_pairs() -> None:
    cpu = make_cpu(0x8015)
    v = cpu.state.v
    for vx in range(256):
        for vy in range(256):
            v[0] = vx
            v[1] = vy
            run_at(cpu)
            assert v[0] == (vx - vy) & 0xFF
            assert v[FLAG_REGISTER] == (1 if vy <= vx else 0)


@pytest.mark.parametrize(
    "vx, vy, result, flag",
    [(0x05, 0x0A, 0x05, 1), (0x0A, 0x05, 0xFB, 0), (0x42, 0x42, 0x00, 1)],
)
def test_subn(vx: int, vy: int, result: int, flag: int) -> None:
    cpu = make_cpu(0x8017)
    cpu.state.v[0] = vx
    cpu.state.v[1] = vy
    cpu.step()
    assert cpu.state.v[0] == result
    assert cpu.state.v[FLAG_REGISTER] == flag


@pytest.mark.parametrize("word, expected", [(0x8011, 0xF3), (0x8012, 0x30), (0x8013, 0xC3)])
def test_logical_ops_clobber_flag(word: int, expected: int) -> None:
    cpu = make_cpu(word)
    cpu.state.v[0] = 0xF0
    cpu.state.v[1] = 0x33
    cpu.state.v[FLAG_REGISTER] = 0x01
    cpu.step()
    assert cpu.state.v[0] == expected
    assert cpu.state.v[FLAG_REGISTER] == 0


def test_flag_write_wins_when_destination_is_flag_register() -> None:
    cpu = make_cpu(0x8F14)
    cpu.state.v[0xF] = 0xFF
    cpu.state.v[1] = 0x02
    cpu.step()
    assert cpu.state.v[0xF] == 1


def test_shift_right_reads_vy() -> None:
    cpu = make_cpu(0x8016)
    cpu.state.v[0] = 0xFF
    cpu.state.v[1] = 0b0000_0101
    cpu.step()
    assert cpu.state.v[0] == 0b0000_0010
    assert cpu.state.v[1] == 0b0000_0101
    assert cpu.state.v[FLAG_REGISTER] == 1


def test_shift_left_reads_vy_and_masks() -> None:
    cpu = make_cpu(0x801E)
    cpu.state.v[0] = 0x00
    cpu.state.v[1] = 0x81
    cpu.step()
    assert cpu.state.v[0] == 0x02
    assert cpu.state.v[FLAG_REGISTER] == 1

    cpu.state.v[1] = 0x41
    run_at(cpu)
    assert cpu.state.v[0] == 0x82
    assert cpu.state.v[FLAG_REGISTER] == 0


def test_ld_register_copies_vy() -> None:
    cpu = make_cpu(0x8AB0)
    cpu.state.v[0xB] = 0x7E
    cpu.step()
    assert cpu.state.v[0xA] == 0x7E


def test_clear_screen_requests_redraw() -> None:
    cpu = make_cpu(0x00E0)
    cpu.state.display[10] = True

    assert cpu.step() is True
    assert not any(cpu.state.display)


def test_jump_and_jump_with_offset() -> None:
    cpu = make_cpu(0x1234)
    cpu.step()
    assert cpu.state.pc == 0x234

    cpu = make_cpu(0xB300)
    cpu.state.v[0] = 0x10
    cpu.step()
    assert cpu.state.pc == 0x310


def test_call_then_return_resumes_after_call_site() -> None:
    program = bytearray(assemble(0x2300))
    program.extend(bytes(0x300 - 0x202))
    program.extend(assemble(0x00EE))
    cpu = Chip8CPU(new_state(bytes(program)))

    cpu.step()
    assert cpu.state.pc == 0x300
    assert cpu.state.sp == 1

    cpu.step()
    assert cpu.state.pc == 0x202
    assert cpu.state.sp == 0


def test_stack_holds_sixteen_calls_and_rejects_the_seventeenth() -> None:
    cpu = make_cpu(0x2200)

    for depth in range(STACK_DEPTH):
        cpu.step()
        assert cpu.state.sp == depth + 1

    stack_before = list(cpu.state.stack)
    registers_before = bytes(cpu.state.v)
    with pytest.raises(StackOverflowError):
        cpu.step()

    assert cpu.state.pc == 0x200
    assert cpu.state.sp == STACK_DEPTH
    assert cpu.state.stack == stack_before
    assert bytes(cpu.state.v) == registers_before


def test_return_with_empty_stack_raises() -> None:
    cpu = make_cpu(0x00EE)

    with pytest.raises(StackUnderflowError):
        cpu.step()

    assert cpu.state.pc == 0x200
    assert cpu.state.sp == 0


@pytest.mark.parametrize(
    "word, vx, vy, skipped",
    [
        (0x3042, 0x42, 0x00, True),
        (0x3042, 0x41, 0x00, False),
        (0x4042, 0x41, 0x00, True),
        (0x4042, 0x42, 0x00, False),
        (0x5010, 0x07, 0x07, True),
        (0x5010, 0x07, 0x08, False),
        (0x9010, 0x07, 0x08, True),
        (0x9010, 0x07, 0x07, False),
    ],
)
def test_conditional_skips(word: int, vx: int, vy: int, skipped: bool) -> None:
    cpu = make_cpu(word)
    cpu.state.v[0] = vx
    cpu.state.v[1] = vy
    cpu.step()
    assert cpu.state.pc == (0x204 if skipped else 0x202)


def test_key_skips() -> None:
    cpu = make_cpu(0xE39E)
    cpu.state.v[3] = 0x7
    cpu.step()
    assert cpu.state.pc == 0x202

    cpu.state.set_key(0x7, True)
    run_at(cpu)
    assert cpu.state.pc == 0x204

    cpu = make_cpu(0xE3A1)
    cpu.state.v[3] = 0x7
    cpu.step()
    assert cpu.state.pc == 0x204

    cpu.state.set_key(0x7, True)
    run_at(cpu)
    assert cpu.state.pc == 0x202


def test_index_register_ops() -> None:
    cpu = make_cpu(0xA123)
    cpu.step()
    assert cpu.state.i == 0x123

    cpu = make_cpu(0xF01E)
    cpu.state.i = 0xFFFF
    cpu.state.v[0] = 0x02
    cpu.step()
    assert cpu.state.i == 0x0001

    cpu = make_cpu(0xF029)
    cpu.state.v[0] = 0x0A
    cpu.step()
    assert cpu.state.i == 50


def test_bcd() -> None:
    cpu = make_cpu(0xF033)
    cpu.state.v[0] = 254
    cpu.state.i = 0x300
    cpu.step()
    assert cpu.state.memory.snapshot(0x300, 3) == bytes([2, 5, 4])
    assert cpu.state.i == 0x300


def test_store_and_load_registers_advance_index() -> None:
    cpu = make_cpu(0xF255)
    cpu.state.v[0:3] = bytes([0x11, 0x22, 0x33])
    cpu.state.i = 0x400
    cpu.step()
    assert cpu.state.memory.snapshot(0x400, 3) == bytes([0x11, 0x22, 0x33])
    assert cpu.state.i == 0x403

    cpu = make_cpu(0xF165)
    cpu.state.memory.load_image(0x500, bytes([0xAA, 0xBB, 0xCC]))
    cpu.state.i = 0x500
    cpu.step()
    assert cpu.state.v[0] == 0xAA
    assert cpu.state.v[1] == 0xBB
    assert cpu.state.v[2] == 0x00
    assert cpu.state.i == 0x502


def test_timer_transfers() -> None:
    cpu = make_cpu(0xF015, 0xF118, 0xF207)
    cpu.state.v[0] = 0x30
    cpu.state.v[1] = 0x05
    cpu.step()
    cpu.step()
    assert cpu.state.delay_timer == 0x30
    assert cpu.state.sound_timer == 0x05
    assert cpu.state.sound_active

    cpu.state.delay_timer = 0x12
    cpu.step()
    assert cpu.state.v[2] == 0x12


def test_random_uses_injected_generator_and_mask() -> None:
    cpu = make_cpu(0xC00F, seed=1234)
    expected = random.Random(1234).randrange(256) & 0x0F
    cpu.step()
    assert cpu.state.v[0] == expected


def test_key_wait_requires_press_and_release() -> None:
    cpu = make_cpu(0xF30A)
    state = cpu.state

    for _ in range(3):
        cpu.step()
        assert state.pc == 0x200
    assert state.key_wait.idle

    state.set_key(5, True)
    cpu.step()
    cpu.step()
    assert state.pc == 0x200
    assert state.v[3] == 0
    assert state.key_wait.key == 5

    state.set_key(5, False)
    cpu.step()
    assert state.pc == 0x202
    assert state.v[3] == 5
    assert state.key_wait.idle


def test_key_wait_ignores_other_keys_after_capture() -> None:
    cpu = make_cpu(0xF00A)
    state = cpu.state
    state.set_key(2, True)
    cpu.step()
    state.set_key(2, False)
    state.set_key(9, True)
    cpu.step()
    assert state.v[0] == 2
    assert state.pc == 0x202


def test_key_wait_latch_is_per_instance() -> None:
    first = make_cpu(0xF00A)
    second = make_cpu(0xF00A)
    first.state.set_key(4, True)
    first.step()

    assert first.state.key_wait.key == 4
    assert second.state.key_wait.idle


def test_unknown_opcode_only_advances_pc() -> None:
    cpu = make_cpu(0x8008)
    cpu.state.v[0] = 0x12
    registers = bytes(cpu.state.v)

    assert cpu.step() is False
    assert cpu.state.pc == 0x202
    assert bytes(cpu.state.v) == registers
    assert cpu.unknown_opcodes == 1


def test_skip_compares_ignore_low_nibble() -> None:
    cpu = make_cpu(0x5011)
    cpu.state.v[0] = 3
    cpu.state.v[1] = 3
    cpu.step()
    assert cpu.state.pc == 0x204
