"""
Feedback capabilities requested by the core (sound, haptics).

The core only asks for feedback; the host decides what it means. Calls are
fire-and-forget and a failing device never interrupts the simulation.
"""
from __future__ import annotations

import logging
from typing import Literal, Protocol

logger = logging.getLogger(__name__)

SoundKind = Literal["teleport", "success", "click"]


class FeedbackDevice(Protocol):
    def play_sound(self, kind: SoundKind) -> None: ...
    def trigger_haptic(self) -> None: ...


class NullFeedback:
    """Logs the requests and does nothing else."""

    def play_sound(self, kind: SoundKind) -> None:
        logger.debug("Sound requested: %s", kind)

    def trigger_haptic(self) -> None:
        logger.debug("Haptic pulse requested.")


def play_sound(device: FeedbackDevice, kind: SoundKind) -> None:
    try:
        device.play_sound(kind)
    except Exception as exc:  # noqa: BLE001 - feedback must never break a frame
        logger.debug("play_sound(%s) failed: %s", kind, exc)


def trigger_haptic(device: FeedbackDevice) -> None:
    try:
        device.trigger_haptic()
    except Exception as exc:  # noqa: BLE001
        logger.debug("trigger_haptic failed: %s", exc)
