"""
Simulation (Aggregate State)
============================
Wires the clock, the object registry, the field generator, the mode controller
and the measurement recorder into one object driven by the frame scheduler.

Why is this file needed?
------------------------
1. Orchestration: `tick` is the single per-frame entry point; it advances the
   clock and samples measurements, and does nothing while paused.
2. Rendering input: `render` hands the current state to the pure renderer.
3. Decoupling: Views talk to this object (and the signals of its parts) only.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from quantumlab.config import CANVAS_WIDTH, CANVAS_HEIGHT, NODE_SPACING, SimulationSettings
from quantumlab.model.clock import SimulationClock
from quantumlab.model.feedback import FeedbackDevice
from quantumlab.model.field import FieldGenerator, FieldState
from quantumlab.model.measurements import MeasurementRecorder
from quantumlab.model.modes import ModeController
from quantumlab.model.registry import ObjectRegistry
from quantumlab.render.commands import DrawCommand
from quantumlab.render.renderer import render_frame

logger = logging.getLogger(__name__)


class Simulation:
    def __init__(
        self,
        settings: Optional[SimulationSettings] = None,
        rng: Optional[np.random.Generator] = None,
        device: Optional[FeedbackDevice] = None,
        canvas_width: int = CANVAS_WIDTH,
        canvas_height: int = CANVAS_HEIGHT,
    ) -> None:
        rng = rng if rng is not None else np.random.default_rng()
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.settings = settings if settings is not None else SimulationSettings()

        self.clock = SimulationClock()
        self.field = FieldGenerator(rng)
        self.field.initialize(canvas_width, canvas_height, NODE_SPACING)
        self.registry = ObjectRegistry(rng)
        self.modes = ModeController(self.registry, self.settings, device)
        self.recorder = MeasurementRecorder(rng)
        self.recorder.set_active(self.settings.measurement_mode, self.clock.time)

    # ---- frame cycle ----

    @property
    def time(self) -> float:
        return self.clock.time

    @property
    def is_running(self) -> bool:
        return self.clock.is_running

    def tick(self) -> bool:
        """Advance one frame. Returns False (and changes nothing) while paused."""
        if not self.clock.is_running:
            return False
        self._sync_recorder()
        self.clock.tick(self.settings.wave_speed)
        if self.recorder.active:
            self.recorder.sample(self.clock.time, self.settings.field_intensity, self.modes.mode.value)
        return True

    def field_state(self) -> FieldState:
        return FieldState(
            nodes=self.field.nodes,
            intensity=self.settings.field_intensity,
            show_particles=self.settings.show_particles,
            particle_count=self.settings.particle_count,
        )

    def render(self) -> list[DrawCommand]:
        return render_frame(
            self.registry.objects(),
            self.field_state(),
            self.modes.mode,
            self.clock.time,
            barrier_height=self.settings.barrier_height,
            width=self.canvas_width,
            height=self.canvas_height,
        )

    # ---- controls ----

    def pause(self) -> None:
        self.clock.pause()

    def resume(self) -> None:
        self.clock.resume()

    def toggle_running(self) -> bool:
        return self.clock.toggle()

    def set_measurement_mode(self, enabled: bool) -> None:
        self.settings.update(measurement_mode=enabled)
        self._sync_recorder()

    def reset(self) -> None:
        """Seeded objects back, time to zero, log cleared; mode and pause state kept."""
        self.registry.reset()
        self.clock.reset()
        self.recorder.clear(self.clock.time)
        logger.info("Experiment reset.")

    @property
    def interaction_probability(self) -> float:
        return math.sin(self.clock.time * 0.1) * 0.5 + 0.5

    def _sync_recorder(self) -> None:
        if self.recorder.active != self.settings.measurement_mode:
            self.recorder.set_active(self.settings.measurement_mode, self.clock.time)
