"""QPainter backend: replays a frame of draw commands."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QLinearGradient, QPainter, QPen, QPolygonF, QRadialGradient

from quantumlab.config import CANVAS_WIDTH, CANVAS_HEIGHT
from quantumlab.render.commands import (
    Clear, DrawCommand, FillRect, GradientRect, Polyline, RadialGlow, Rgba, Text,
)

logger = logging.getLogger(__name__)


def to_qcolor(color: Rgba) -> QColor:
    return QColor.fromRgbF(color.r, color.g, color.b, color.a)


def _clear(painter: QPainter, cmd: Clear, width: float, height: float) -> None:
    painter.fillRect(QRectF(0.0, 0.0, width, height), to_qcolor(cmd.color))


def _fill_rect(painter: QPainter, cmd: FillRect) -> None:
    painter.fillRect(QRectF(cmd.x, cmd.y, cmd.width, cmd.height), to_qcolor(cmd.color))


def _radial_glow(painter: QPainter, cmd: RadialGlow) -> None:
    if cmd.radius <= 0:
        return
    gradient = QRadialGradient(QPointF(cmd.cx, cmd.cy), cmd.radius)
    gradient.setColorAt(0.0, to_qcolor(cmd.inner))
    gradient.setColorAt(1.0, to_qcolor(cmd.outer))
    painter.setOpacity(cmd.opacity)
    painter.fillRect(QRectF(*cmd.rect), QBrush(gradient))
    painter.setOpacity(1.0)


def _gradient_rect(painter: QPainter, cmd: GradientRect) -> None:
    gradient = QLinearGradient(QPointF(*cmd.start), QPointF(*cmd.end))
    for position, color in cmd.stops:
        gradient.setColorAt(position, to_qcolor(color))
    painter.fillRect(QRectF(cmd.x, cmd.y, cmd.width, cmd.height), QBrush(gradient))


def _polyline(painter: QPainter, cmd: Polyline) -> None:
    if len(cmd.points) < 2:
        return
    pen = QPen(to_qcolor(cmd.color))
    pen.setWidthF(cmd.width)
    if cmd.dash:
        # Qt measures dashes in pen widths
        width = cmd.width or 1.0
        pen.setDashPattern([d / width for d in cmd.dash])
        pen.setDashOffset(cmd.dash_offset / width)
    painter.setPen(pen)
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.setOpacity(cmd.opacity)
    painter.drawPolyline(QPolygonF([QPointF(x, y) for x, y in cmd.points]))
    painter.setOpacity(1.0)


def _text(painter: QPainter, cmd: Text) -> None:
    font = QFont(painter.font())
    font.setPixelSize(cmd.size)
    painter.setFont(font)
    painter.setPen(to_qcolor(cmd.color))
    painter.drawText(QPointF(cmd.x, cmd.y), cmd.text)


def paint_commands(
    painter: Optional[QPainter],
    commands: Iterable[DrawCommand],
    width: float = CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
) -> bool:
    """
    Execute `commands` in order on `painter`.

    A missing or inactive painter makes the whole frame a no-op.

    Returns:
        True if the frame was painted.
    """
    if painter is None or not painter.isActive():
        logger.debug("No active painter, frame skipped.")
        return False

    painter.save()
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    try:
        for cmd in commands:
            if isinstance(cmd, Clear):
                _clear(painter, cmd, width, height)
            elif isinstance(cmd, FillRect):
                _fill_rect(painter, cmd)
            elif isinstance(cmd, RadialGlow):
                _radial_glow(painter, cmd)
            elif isinstance(cmd, GradientRect):
                _gradient_rect(painter, cmd)
            elif isinstance(cmd, Polyline):
                _polyline(painter, cmd)
            elif isinstance(cmd, Text):
                _text(painter, cmd)
            else:
                logger.warning("Unknown draw command %r skipped.", type(cmd).__name__)
    finally:
        painter.restore()
    return True
