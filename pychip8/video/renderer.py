"""Framebuffer to RGB conversion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from .palette import GREY, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Row-major RGB image produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: List[RGBColor]

    def get_pixel(self, x: int, y: int) -> RGBColor:
        return self.pixels[y * self.width + x]

    def to_bytes(self) -> bytes:
        buffer = bytearray(self.width * self.height * 3)
        offset = 0
        for red, green, blue in self.pixels:
            buffer[offset] = red
            buffer[offset + 1] = green
            buffer[offset + 2] = blue
            offset += 3
        return bytes(buffer)

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(self.to_bytes(), (self.width, self.height), "RGB")


class Renderer:
    """Scales a boolean framebuffer into an RGB image."""

    def __init__(self, palette: Sequence[RGBColor] = GREY) -> None:
        self._background, self._foreground = validate_palette(palette)

    def render(self, display: Sequence[bool], width: int, height: int, *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        if len(display) != width * height:
            raise ValueError("display buffer does not match width x height")

        background, foreground = self._background, self._foreground
        out_width = width * scale
        pixels: List[RGBColor] = []
        for y in range(height):
            row: List[RGBColor] = []
            base = y * width
            for x in range(width):
                color = foreground if display[base + x] else background
                row.extend([color] * scale)
            for _ in range(scale):
                pixels.extend(row)
        return RenderResult(out_width, height * scale, pixels)

    def render_state(self, state, *, scale: int = 1) -> RenderResult:
        return self.render(state.display, state.width, state.height, scale=scale)
