"""Console diagnostics for the CHIP-8 interpreter.

Output is grouped into categories (``cpu``, ``input``, ``audio``, ``trace``,
``control``) selected through ``CHIP8_DEBUG``, e.g. ``CHIP8_DEBUG=cpu,input``
or ``CHIP8_DEBUG=all``. The variable is read once and cached; call
:func:`reset_categories` to pick up a changed environment.

Per-machine debug mode does not touch the category set. The frame driver
writes its trace through :func:`debug_print`, which bypasses the gate.
"""

from __future__ import annotations

import os

ENV_VARIABLE = "CHIP8_DEBUG"
ALL_CATEGORIES = "all"

_selected: frozenset[str] | None = None


def _parse(value: str) -> frozenset[str]:
    return frozenset(
        token.strip().lower() for token in value.split(",") if token.strip()
    )


def _categories() -> frozenset[str]:
    global _selected
    if _selected is None:
        _selected = _parse(os.environ.get(ENV_VARIABLE, ""))
    return _selected


def reset_categories() -> None:
    global _selected
    _selected = None


def debug_enabled(category: str | None = None) -> bool:
    """Return ``True`` when ``category`` (or any category) is selected."""

    selected = _categories()
    if not selected:
        return False
    if category is None or ALL_CATEGORIES in selected:
        return True
    return category.lower() in selected


def debug_print(category: str, message: str, *args) -> None:
    """Print ``message`` under ``category`` regardless of ``CHIP8_DEBUG``."""

    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")


def debug_log(category: str, message: str, *args) -> None:
    if debug_enabled(category):
        debug_print(category, message, *args)
