"""CHIP-8 interpreter with a pygame frontend.

The interpreter core lives in :mod:`pychip8.cpu` (state, decoder, executor)
and :mod:`pychip8.system` (timers and the per-frame driver). The remaining
subpackages are thin adapters used by ``run.py``.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "system",
    "video",
    "audio",
    "io",
    "loader",
    "ui",
    "utils",
]
