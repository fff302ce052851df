"""Utility helpers for the CHIP-8 interpreter."""

from .debug import debug_enabled, debug_log, debug_print, reset_categories
from .trace import TraceEntry, TraceRecorder

__all__ = [
    "debug_enabled",
    "debug_log",
    "debug_print",
    "reset_categories",
    "TraceEntry",
    "TraceRecorder",
]
