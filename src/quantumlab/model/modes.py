"""
Experiment Mode Controller
==========================
A four-state machine selecting the active overlay and what "run experiment"
does. Switching is immediate and carries no state from one mode to the next.
"""
from __future__ import annotations

from enum import Enum
import logging
import math
from typing import Callable, Optional, TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from quantumlab.model.feedback import FeedbackDevice, NullFeedback, SoundKind, play_sound, trigger_haptic

if TYPE_CHECKING:
    from quantumlab.config import SimulationSettings
    from quantumlab.model.objects import QuantumObject
    from quantumlab.model.registry import ObjectRegistry

logger = logging.getLogger(__name__)


class ExperimentMode(str, Enum):
    TELEPORTATION = "teleportation"
    INTERFERENCE = "interference"
    TUNNELING = "tunneling"
    SUPERPOSITION = "superposition"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def tunneling_probability(barrier_height: float) -> float:
    """Stylised transmission probability, exp(-0.1 * barrier_height)."""
    return math.exp(-barrier_height * 0.1)


TELEPORT_SUCCESS_MESSAGE = "Quantum teleportation successful!"
INTERFERENCE_MESSAGE = "Double-slit interference activated!"
SUPERPOSITION_MESSAGE = "Quantum superposition states visualized!"


class ModeController(QObject):
    """Holds the active `ExperimentMode` and dispatches experiment runs."""
    mode_changed = Signal(object)  # ExperimentMode
    feedback = Signal(str)

    def __init__(
        self,
        registry: ObjectRegistry,
        settings: SimulationSettings,
        device: Optional[FeedbackDevice] = None,
        mode: ExperimentMode = ExperimentMode.TELEPORTATION,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.registry = registry
        self.settings = settings
        self.device: FeedbackDevice = device if device is not None else NullFeedback()
        self._mode = mode
        self.last_message: Optional[str] = None

        self._experiments: dict[ExperimentMode, Callable[[], Optional[str]]] = {
            ExperimentMode.TELEPORTATION: self._run_teleportation,
            ExperimentMode.INTERFERENCE: self._run_interference,
            ExperimentMode.TUNNELING: self._run_tunneling,
            ExperimentMode.SUPERPOSITION: self._run_superposition,
        }

        self.registry.teleport_committed.connect(self._on_teleport_committed)

    @property
    def mode(self) -> ExperimentMode:
        return self._mode

    def set_mode(self, mode: ExperimentMode | str) -> None:
        """
        Raises:
            ValueError: If `mode` is not one of the four experiment modes.
        """
        mode = ExperimentMode(mode)
        self._play("click")
        if mode is self._mode:
            return
        logger.info("Experiment mode: %s -> %s", self._mode.value, mode.value)
        self._mode = mode
        self.mode_changed.emit(mode)

    def run_experiment(self) -> Optional[str]:
        """Run the active mode's experiment; return the feedback message, if any."""
        message = self._experiments[self._mode]()
        if message is not None:
            self._emit(message)
        return message

    def handle_pointer(self, x: float, y: float) -> Optional[QuantumObject]:
        """Canvas tap in logical coordinates; spawns an object in teleportation mode only."""
        if self._mode is not ExperimentMode.TELEPORTATION:
            return None
        return self.registry.spawn_at(x, y)

    # ---- experiments ----

    def _run_teleportation(self) -> Optional[str]:
        # Success is reported when the deferred commit fires
        if self.registry.teleport():
            self._play("teleport")
        return None

    def _run_interference(self) -> str:
        self.settings.update(show_particles=True)
        self._play("success")
        return INTERFERENCE_MESSAGE

    def _run_tunneling(self) -> str:
        probability = tunneling_probability(self.settings.barrier_height)
        self._play("success")
        return f"Tunneling probability: {probability * 100:.1f}%"

    def _run_superposition(self) -> str:
        self._play("success")
        return SUPERPOSITION_MESSAGE

    # ---- feedback ----

    def _on_teleport_committed(self) -> None:
        self._emit(TELEPORT_SUCCESS_MESSAGE)
        self._play("success")
        trigger_haptic(self.device)

    def _emit(self, message: str) -> None:
        self.last_message = message
        logger.info(message)
        self.feedback.emit(message)

    def _play(self, kind: SoundKind) -> None:
        if self.settings.audio_enabled:
            play_sound(self.device, kind)
