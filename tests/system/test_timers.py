"""Timer ticker tests."""

from __future__ import annotations

from pychip8.cpu import MachineState
from pychip8.system import TimerTicker


def test_delay_timer_counts_down_and_holds_at_zero() -> None:
    state = MachineState()
    state.delay_timer = 3
    ticker = TimerTicker(state)

    values = []
    for _ in range(4):
        ticker.tick()
        values.append(state.delay_timer)

    assert values == [2, 1, 0, 0]
    assert ticker.ticks == 4


def test_tick_reports_tone_for_the_finished_frame() -> None:
    state = MachineState()
    state.sound_timer = 2
    ticker = TimerTicker(state)

    assert ticker.tick() is True
    assert ticker.sound_active is True
    assert ticker.tick() is True
    assert ticker.sound_active is False
    assert ticker.tick() is False
    assert state.sound_timer == 0


def test_timers_are_independent() -> None:
    state = MachineState()
    state.delay_timer = 1
    state.sound_timer = 5
    ticker = TimerTicker(state)

    ticker.tick()
    ticker.tick()

    assert state.delay_timer == 0
    assert state.sound_timer == 3
