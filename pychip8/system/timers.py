"""60 Hz delay/sound timer handling."""

from __future__ import annotations

from dataclasses import dataclass

from pychip8.cpu import MachineState

TIMER_RATE = 60  # Hz


@dataclass
class TimerTicker:
    """Decrements the delay and sound timers once per rendered frame."""

    state: MachineState
    ticks: int = 0

    def tick(self) -> bool:
        """Advance both timers by one step.

        Returns whether the tone should sound for the frame just finished,
        i.e. ``sound_timer > 0`` before the decrement, so ``ST = 1`` still
        produces one frame of tone.
        """

        state = self.state
        tone = state.sound_active
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1
        self.ticks += 1
        return tone

    @property
    def sound_active(self) -> bool:
        return self.state.sound_active
