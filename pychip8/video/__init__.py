"""Video rendering helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .palette import GREY, MONOCHROME, parse_color, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Renderer",
    "RenderResult",
    "GREY",
    "MONOCHROME",
    "parse_color",
    "validate_palette",
]
