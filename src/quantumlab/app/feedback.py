"""Host-side feedback device used by the desktop application."""
from __future__ import annotations

import logging

from PySide6.QtWidgets import QApplication

from quantumlab.model.feedback import SoundKind

logger = logging.getLogger(__name__)


class QtFeedback:
    """
    Sound through the platform beep; haptics are not available on desktop.

    Whether sound is wanted at all is decided by the caller (audio toggle).
    """

    def play_sound(self, kind: SoundKind) -> None:
        logger.debug("Beep for '%s'.", kind)
        QApplication.beep()

    def trigger_haptic(self) -> None:
        logger.debug("Haptic feedback not supported on this platform.")
