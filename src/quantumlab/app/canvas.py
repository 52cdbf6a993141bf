"""
Simulation Canvas
=================
The drawing surface and the host frame scheduler.

The widget keeps an 800x600 logical canvas, letterboxed into whatever size it
is given. Each timer tick advances the simulation and repaints; `paintEvent`
asks the renderer for a fresh frame and replays it with QPainter.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QPointF, QSize, QTimer, Qt, Signal
from PySide6.QtGui import QColor, QMouseEvent, QPainter, QPaintEvent
from PySide6.QtWidgets import QSizePolicy, QWidget

from quantumlab.config import FRAME_INTERVAL_MS
from quantumlab.render.painter import paint_commands

if TYPE_CHECKING:
    from quantumlab.model.simulation import Simulation

logger = logging.getLogger(__name__)


class SimulationCanvas(QWidget):
    """QWidget painting the simulation and forwarding taps to the mode controller."""
    frame_advanced = Signal(float)  # simulation time after the tick

    def __init__(self, simulation: Simulation, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.simulation = simulation
        self.setMinimumSize(400, 300)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setCursor(Qt.CursorShape.CrossCursor)

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self._on_frame)

    def sizeHint(self) -> QSize:
        return QSize(self.simulation.canvas_width, self.simulation.canvas_height)

    # ---- frame scheduling ----

    def start(self) -> None:
        """Request frames; does nothing while the simulation is paused."""
        if self.simulation.is_running and not self._frame_timer.isActive():
            self._frame_timer.start()

    def stop(self) -> None:
        self._frame_timer.stop()

    @property
    def is_scheduling(self) -> bool:
        return self._frame_timer.isActive()

    def _on_frame(self) -> None:
        if not self.simulation.tick():
            # Paused between frames: stop asking for ticks
            self.stop()
            return
        self.frame_advanced.emit(self.simulation.time)
        self.update()

    # ---- geometry ----

    def view_transform(self) -> tuple[float, float, float]:
        """(scale, offset_x, offset_y) mapping logical canvas units to widget pixels."""
        cw, ch = self.simulation.canvas_width, self.simulation.canvas_height
        scale = min(self.width() / cw, self.height() / ch) if cw and ch else 1.0
        scale = max(scale, 1e-6)
        ox = (self.width() - cw * scale) / 2
        oy = (self.height() - ch * scale) / 2
        return scale, ox, oy

    def map_to_canvas(self, pos: QPointF) -> tuple[float, float]:
        scale, ox, oy = self.view_transform()
        return (pos.x() - ox) / scale, (pos.y() - oy) / scale

    # ---- Qt events ----

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), QColor(0, 0, 0))
            scale, ox, oy = self.view_transform()
            painter.translate(ox, oy)
            painter.scale(scale, scale)
            painter.setClipRect(0, 0, self.simulation.canvas_width, self.simulation.canvas_height)
            paint_commands(
                painter,
                self.simulation.render(),
                self.simulation.canvas_width,
                self.simulation.canvas_height,
            )
        finally:
            painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        x, y = self.map_to_canvas(event.position())
        if not (0 <= x <= self.simulation.canvas_width and 0 <= y <= self.simulation.canvas_height):
            return
        obj = self.simulation.modes.handle_pointer(x, y)
        if obj is not None:
            self.update()
