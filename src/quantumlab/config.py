"""
Configuration & Constants
=========================
This module serves as the central registry for the simulation constants and
the user-tunable settings consumed by the core.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (canvas size, timer delays, slider
   ranges) from being scattered throughout the renderer and the models.
2. Validation: Every value coming from a slider passes through a
   `SliderRange`, so the core never sees an out-of-range value.

Exports:
    CANVAS_WIDTH, CANVAS_HEIGHT (int): Logical canvas size.
    SliderRange: Range/step description of one configuration input.
    SimulationSettings: Plain values read by the core on every frame.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
import logging

logger = logging.getLogger(__name__)


# Canvas
CANVAS_WIDTH: int = 800
CANVAS_HEIGHT: int = 600
NODE_SPACING: int = 40

# Timing
CLOCK_BASE_INCREMENT: float = 0.02  # simulated-time units per tick at speed 1.0
FRAME_INTERVAL_MS: int = 16
TELEPORT_DELAY_MS: int = 800
FEEDBACK_MESSAGE_MS: int = 3000

# Measurements
MEASUREMENT_CADENCE: float = 10.0
MEASUREMENT_CAPACITY: int = 20


@dataclass(frozen=True)
class SliderRange:
    """Closed range with a step grid, mirroring a UI slider."""
    minimum: float
    maximum: float
    step: float
    default: float

    @property
    def is_integer(self) -> bool:
        return all(float(v).is_integer() for v in (self.minimum, self.maximum, self.step))

    def clamp(self, value: float) -> float:
        """Clamp `value` into the range and snap it onto the step grid."""
        value = min(max(float(value), self.minimum), self.maximum)
        steps = round((value - self.minimum) / self.step)
        snapped = min(self.minimum + steps * self.step, self.maximum)
        if self.is_integer:
            return int(round(snapped))
        return round(snapped, 6)

    def steps(self) -> int:
        """Number of discrete slider positions minus one."""
        return int(round((self.maximum - self.minimum) / self.step))


FIELD_INTENSITY = SliderRange(0.1, 1.0, 0.1, 0.5)
WAVE_SPEED = SliderRange(0.1, 3.0, 0.1, 1.0)
PARTICLE_COUNT = SliderRange(5, 50, 5, 20)
BARRIER_HEIGHT = SliderRange(10, 100, 5, 50)
OBJECT_FREQUENCY = SliderRange(0.5, 5.0, 0.1, 2.0)

SLIDERS: dict[str, SliderRange] = {
    "field_intensity": FIELD_INTENSITY,
    "wave_speed": WAVE_SPEED,
    "particle_count": PARTICLE_COUNT,
    "barrier_height": BARRIER_HEIGHT,
}


@dataclass
class SimulationSettings:
    """
    Configuration inputs owned by the UI and read by the core as plain values.
    """
    field_intensity: float = FIELD_INTENSITY.default
    wave_speed: float = WAVE_SPEED.default
    particle_count: int = int(PARTICLE_COUNT.default)
    barrier_height: float = BARRIER_HEIGHT.default

    show_particles: bool = True
    audio_enabled: bool = False
    measurement_mode: bool = False

    _names: frozenset[str] = field(init=False, repr=False, compare=False, default=frozenset())

    def __post_init__(self) -> None:
        self._names = frozenset(f.name for f in fields(self) if not f.name.startswith("_"))
        for name, slider in SLIDERS.items():
            setattr(self, name, slider.clamp(getattr(self, name)))

    def update(self, **values: float | bool) -> None:
        """
        Set one or more settings, clamping slider values to their range.

        Raises:
            ValueError: If a name is not a known setting.
        """
        for name, value in values.items():
            if name not in self._names:
                raise ValueError(f"Unknown setting '{name}'.")
            if name in SLIDERS:
                value = SLIDERS[name].clamp(value)
            else:
                value = bool(value)
            setattr(self, name, value)
            logger.debug("Setting %s = %s", name, value)
