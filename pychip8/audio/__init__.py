"""Audio output for the CHIP-8 interpreter."""

from .beeper import TONE_FREQUENCY, SquareWaveBeeper, square_wave_samples

__all__ = [
    "SquareWaveBeeper",
    "square_wave_samples",
    "TONE_FREQUENCY",
]
