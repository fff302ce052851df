"""Palette definitions for framebuffer rendering."""

from __future__ import annotations

from typing import Sequence, Tuple

RGBColor = Tuple[int, int, int]


MONOCHROME: Tuple[RGBColor, RGBColor] = ((0, 0, 0), (0xFF, 0xFF, 0xFF))
# Background/foreground used by the original SDL frontend.
GREY: Tuple[RGBColor, RGBColor] = ((20, 20, 20), (200, 200, 200))


def validate_palette(palette: Sequence[RGBColor]) -> Tuple[RGBColor, RGBColor]:
    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (background and foreground)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    return tuple(tuple(int(channel) & 0xFF for channel in color) for color in palette)  # type: ignore[return-value]


def parse_color(text: str) -> RGBColor:
    """Parse ``#rrggbb`` or ``r,g,b`` into an RGB tuple."""

    value = text.strip()
    if value.startswith("#") and len(value) == 7:
        return (int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16))
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 3:
        raise ValueError(f"invalid colour '{text}'")
    return tuple(int(part, 10) & 0xFF for part in parts)  # type: ignore[return-value]
