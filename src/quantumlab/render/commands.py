"""
Draw commands produced by the renderer.

A frame is a plain list of these immutable records, so two frames can be
compared by value and a frame can be replayed on any QPainter.
"""
from __future__ import annotations

import colorsys
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Rgba:
    """Colour with components in [0, 1]."""
    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_hex(cls, value: str, alpha: float = 1.0) -> Rgba:
        value = value.lstrip("#")
        r, g, b = (int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))
        return cls(r, g, b, alpha)

    @classmethod
    def from_hsla(cls, hue: float, saturation: float, lightness: float, alpha: float = 1.0) -> Rgba:
        """CSS-style hsla(); hue in degrees, the rest in [0, 1]."""
        r, g, b = colorsys.hls_to_rgb((hue % 360.0) / 360.0, lightness, saturation)
        return cls(r, g, b, min(max(alpha, 0.0), 1.0))

    def with_alpha(self, alpha: float) -> Rgba:
        return Rgba(self.r, self.g, self.b, min(max(alpha, 0.0), 1.0))


TRANSPARENT = Rgba(0.0, 0.0, 0.0, 0.0)

Point = tuple[float, float]


@dataclass(frozen=True)
class Clear:
    color: Rgba


@dataclass(frozen=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    color: Rgba


@dataclass(frozen=True)
class RadialGlow:
    """Radial gradient from `inner` at the centre to `outer` at `radius`, filling `rect`."""
    cx: float
    cy: float
    radius: float
    inner: Rgba
    outer: Rgba
    rect: tuple[float, float, float, float]
    opacity: float = 1.0


@dataclass(frozen=True)
class GradientRect:
    """Rectangle filled with a linear gradient from `start` to `end`."""
    x: float
    y: float
    width: float
    height: float
    start: Point
    end: Point
    stops: tuple[tuple[float, Rgba], ...]


@dataclass(frozen=True)
class Polyline:
    points: tuple[Point, ...]
    color: Rgba
    width: float = 1.0
    opacity: float = 1.0
    dash: tuple[float, ...] = ()  # on/off lengths in px; empty = solid
    dash_offset: float = 0.0


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    color: Rgba
    size: int = 12


DrawCommand = Union[Clear, FillRect, RadialGlow, GradientRect, Polyline, Text]
