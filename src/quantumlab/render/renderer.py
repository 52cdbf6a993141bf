"""
Frame Renderer
==============
A pure function from simulation state to a list of draw commands.

Nothing is kept between calls: the same inputs always produce the same frame,
and switching experiment mode removes the previous overlay on the very next
frame because every frame is rebuilt from scratch.

Layer order:
    1. background clear
    2. resonance field (+ optional particle overlay)
    3. overlay of the active experiment mode
    4. entanglement links between mutually entangled objects
    5. one standing-wave glyph per object
"""
from __future__ import annotations

import math
from typing import Callable, Iterable, Sequence, TYPE_CHECKING

import numpy as np

from quantumlab.config import CANVAS_WIDTH, CANVAS_HEIGHT, BARRIER_HEIGHT
from quantumlab.model.field import FieldGenerator, FieldState
from quantumlab.model.modes import ExperimentMode, tunneling_probability
from quantumlab.render.commands import (
    TRANSPARENT, Clear, DrawCommand, FillRect, GradientRect, Polyline, RadialGlow, Rgba, Text,
)

if TYPE_CHECKING:
    import numpy.typing as npt
    from quantumlab.model.objects import QuantumObject

# -------------------------------------------------------------------------------
# Palette
# -------------------------------------------------------------------------------

BACKGROUND = Rgba.from_hsla(220, 0.25, 0.06)
ENTANGLED_COLOR = Rgba.from_hex("#B794F6")
FREE_COLOR = Rgba.from_hex("#4FD1C7")
BARRIER_COLOR = Rgba.from_hsla(220, 0.15, 0.25)

# -------------------------------------------------------------------------------
# Geometry constants
# -------------------------------------------------------------------------------

FIELD_GLOW_RADIUS = 30.0

SLIT_Y = (200.0, 400.0)
SLIT_HALF_WIDTH = 20.0
SLIT_BARRIER_X = 300.0
SLIT_BARRIER_THICKNESS = 10.0
SCREEN_X = 600.0
SCREEN_WIDTH = 20.0
SCREEN_SAMPLE_STEP = 2

TUNNEL_X = 350.0
TUNNEL_WIDTH = 100.0
TUNNEL_PX_PER_UNIT = 4.0

ORBIT_RADIUS = 100.0
GHOST_RADIUS = 50.0
CORE_RADIUS = 30.0

LINK_AMPLITUDE = 20.0
LINK_SEGMENT = 20.0
LINK_DASH = (10.0, 5.0)

GLYPH_STEP = 2.0
GLYPH_CORE_RADIUS = 20.0


def _points(xs: npt.NDArray[np.float64], ys: npt.NDArray[np.float64]) -> tuple[tuple[float, float], ...]:
    return tuple(zip(xs.tolist(), ys.tolist()))


# -------------------------------------------------------------------------------
# Field
# -------------------------------------------------------------------------------

def field_layer(field: FieldState, time: float) -> list[DrawCommand]:
    cmds: list[DrawCommand] = []
    r = FIELD_GLOW_RADIUS
    for node in field.nodes:
        intensity = FieldGenerator.sample(node, time, field.intensity)
        cmds.append(RadialGlow(
            node.x, node.y, r,
            inner=Rgba.from_hsla(195, 1.0, 0.65, intensity * 0.1),
            outer=TRANSPARENT,
            rect=(node.x - r, node.y - r, 2 * r, 2 * r),
        ))

    if field.show_particles:
        xs, ys, sizes = FieldGenerator.particle_positions(time, field.particle_count)
        color = Rgba.from_hsla(280, 0.8, 0.7, 0.8)
        for x, y, size in zip(xs.tolist(), ys.tolist(), sizes.tolist()):
            cmds.append(RadialGlow(
                x, y, size * 2,
                inner=color,
                outer=TRANSPARENT,
                rect=(x - size, y - size, size * 2, size * 2),
            ))
    return cmds


# -------------------------------------------------------------------------------
# Mode overlays
# -------------------------------------------------------------------------------

OverlayContext = dict[str, float]


def teleportation_overlay(time: float, field: FieldState, ctx: OverlayContext) -> list[DrawCommand]:
    # Teleportation is shown through the objects themselves
    return []


def double_slit_intensity(
    ys: npt.NDArray[np.float64], time: float, field_intensity: float
) -> npt.NDArray[np.float64]:
    """cos^2 of the path-length phase difference to the two slits, per screen point."""
    dx = SCREEN_X - SLIT_BARRIER_X
    d1 = np.hypot(dx, ys - SLIT_Y[0])
    d2 = np.hypot(dx, ys - SLIT_Y[1])
    phase = (d1 - d2) * 0.02 * field_intensity
    return np.cos(phase + time * 0.1) ** 2


def interference_overlay(time: float, field: FieldState, ctx: OverlayContext) -> list[DrawCommand]:
    height = ctx["height"]
    x0 = SLIT_BARRIER_X - SLIT_BARRIER_THICKNESS / 2
    top, bottom = SLIT_Y
    w = SLIT_HALF_WIDTH
    cmds: list[DrawCommand] = [
        FillRect(x0, 0.0, SLIT_BARRIER_THICKNESS, top - w, BARRIER_COLOR),
        FillRect(x0, top + w, SLIT_BARRIER_THICKNESS, bottom - top - 2 * w, BARRIER_COLOR),
        FillRect(x0, bottom + w, SLIT_BARRIER_THICKNESS, height - bottom - w, BARRIER_COLOR),
    ]

    ys = np.arange(0, int(height), SCREEN_SAMPLE_STEP, dtype=np.float64)
    intensity = double_slit_intensity(ys, time, field.intensity)
    for y, value in zip(ys.tolist(), intensity.tolist()):
        cmds.append(FillRect(
            SCREEN_X, y, SCREEN_WIDTH, float(SCREEN_SAMPLE_STEP),
            Rgba.from_hsla(195, 1.0, 0.65, value * 0.3),
        ))
    return cmds


def tunneling_overlay(time: float, field: FieldState, ctx: OverlayContext) -> list[DrawCommand]:
    def red(alpha: float) -> Rgba:
        return Rgba.from_hsla(0, 0.75, 0.6, alpha)

    barrier_height = ctx.get("barrier_height", BARRIER_HEIGHT.default)
    cy = ctx["height"] / 2
    extent = barrier_height * TUNNEL_PX_PER_UNIT
    top = cy - extent / 2
    probability = tunneling_probability(barrier_height)
    readout_x = TUNNEL_X + TUNNEL_WIDTH + 10
    return [
        GradientRect(
            TUNNEL_X, top, TUNNEL_WIDTH, extent,
            start=(TUNNEL_X, top), end=(TUNNEL_X + TUNNEL_WIDTH, top + extent),
            stops=((0.0, red(0.3)), (0.5, red(0.6)), (1.0, red(0.3))),
        ),
        FillRect(readout_x, cy - 20, 20.0, 40.0, Rgba.from_hsla(120, 0.7, 0.5, probability)),
        Text(readout_x + 28, cy + 5, f"{probability * 100:.2f}%", Rgba.from_hsla(120, 0.7, 0.7, 0.9)),
    ]


def superposition_overlay(time: float, field: FieldState, ctx: OverlayContext) -> list[DrawCommand]:
    cx, cy = ctx["width"] / 2, ctx["height"] / 2
    cmds: list[DrawCommand] = []
    for i in range(3):
        angle = i * 2 * math.pi / 3 + time * 0.05
        x = cx + math.cos(angle) * ORBIT_RADIUS
        y = cy + math.sin(angle) * ORBIT_RADIUS
        alpha = 0.3 + 0.2 * math.sin(time * 0.1 + i)
        cmds.append(RadialGlow(
            x, y, GHOST_RADIUS,
            inner=Rgba.from_hsla(120 + i * 120, 0.8, 0.7, alpha),
            outer=TRANSPARENT,
            rect=(x - GHOST_RADIUS, y - GHOST_RADIUS, 2 * GHOST_RADIUS, 2 * GHOST_RADIUS),
        ))
    cmds.append(RadialGlow(
        cx, cy, CORE_RADIUS,
        inner=Rgba.from_hsla(60, 1.0, 0.8, 0.8),
        outer=TRANSPARENT,
        rect=(cx - CORE_RADIUS, cy - CORE_RADIUS, 2 * CORE_RADIUS, 2 * CORE_RADIUS),
    ))
    return cmds


OVERLAYS: dict[ExperimentMode, Callable[[float, FieldState, OverlayContext], list[DrawCommand]]] = {
    ExperimentMode.TELEPORTATION: teleportation_overlay,
    ExperimentMode.INTERFERENCE: interference_overlay,
    ExperimentMode.TUNNELING: tunneling_overlay,
    ExperimentMode.SUPERPOSITION: superposition_overlay,
}


# -------------------------------------------------------------------------------
# Objects
# -------------------------------------------------------------------------------

def entanglement_pairs(objects: Sequence[QuantumObject]) -> Iterable[tuple[QuantumObject, QuantumObject]]:
    for i, a in enumerate(objects):
        for b in objects[i + 1:]:
            if a.is_mutually_entangled(b):
                yield a, b


def entanglement_link(a: QuantumObject, b: QuantumObject, time: float) -> Polyline:
    """Dashed, sine-perturbed curve from `a` to `b`; the dash offset follows time."""
    dx, dy = b.x - a.x, b.y - a.y
    steps = int(math.hypot(dx, dy) // LINK_SEGMENT)
    pts: list[tuple[float, float]] = [(a.x, a.y)]
    if steps > 1:
        t = np.arange(1, steps, dtype=np.float64) / steps
        xs = a.x + dx * t
        ys = a.y + dy * t + LINK_AMPLITUDE * np.sin(t * math.pi * 3 + time * 0.1)
        pts.extend(_points(xs, ys))
    pts.append((b.x, b.y))
    return Polyline(
        points=tuple(pts),
        color=ENTANGLED_COLOR,
        width=2.0,
        opacity=0.6,
        dash=LINK_DASH,
        dash_offset=time * 0.5,
    )


def standing_wave_glyph(obj: QuantumObject, time: float) -> list[DrawCommand]:
    """Two orthogonal standing waves around the object plus a core glow."""
    color = ENTANGLED_COLOR if obj.is_entangled else FREE_COLOR
    opacity = 0.3 if obj.is_teleporting else 0.8

    i = np.arange(-obj.amplitude, obj.amplitude + 1e-9, GLYPH_STEP)
    envelope = i * np.cos(i * 0.1)
    vertical = envelope * math.sin(obj.frequency * time + obj.phase)
    horizontal = envelope * math.sin(obj.frequency * time + obj.phase + math.pi / 2)

    r = GLYPH_CORE_RADIUS
    return [
        Polyline(_points(obj.x + vertical, obj.y + i), color, width=2.0, opacity=opacity),
        Polyline(_points(obj.x + i, obj.y + horizontal), color, width=2.0, opacity=opacity),
        RadialGlow(
            obj.x, obj.y, r,
            inner=color,
            outer=TRANSPARENT,
            rect=(obj.x - r, obj.y - r, 2 * r, 2 * r),
            opacity=opacity,
        ),
    ]


# -------------------------------------------------------------------------------
# Frame
# -------------------------------------------------------------------------------

def render_frame(
    objects: Sequence[QuantumObject],
    field: FieldState,
    mode: ExperimentMode,
    time: float,
    *,
    barrier_height: float = BARRIER_HEIGHT.default,
    width: float = CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
) -> list[DrawCommand]:
    """Build one complete frame from the given state."""
    ctx: OverlayContext = {"width": float(width), "height": float(height), "barrier_height": barrier_height}

    frame: list[DrawCommand] = [Clear(BACKGROUND)]
    frame.extend(field_layer(field, time))
    frame.extend(OVERLAYS[ExperimentMode(mode)](time, field, ctx))
    frame.extend(entanglement_link(a, b, time) for a, b in entanglement_pairs(objects))
    for obj in objects:
        frame.extend(standing_wave_glyph(obj, time))
    return frame
