from __future__ import annotations

import logging

from quantumlab.config import CLOCK_BASE_INCREMENT

logger = logging.getLogger(__name__)


class SimulationClock:
    """
    Simulated time, advanced once per scheduled frame.

    The clock only counts; deciding when `tick` is called belongs to the
    frame scheduler, which stops calling it while the clock is paused.
    """

    def __init__(self, base_increment: float = CLOCK_BASE_INCREMENT) -> None:
        self.base_increment = base_increment
        self._time: float = 0.0
        self._running: bool = True

    @property
    def time(self) -> float:
        return self._time

    @property
    def is_running(self) -> bool:
        return self._running

    def tick(self, speed_factor: float = 1.0) -> float:
        """Advance by `base_increment * speed_factor` if running; return the time."""
        if self._running:
            self._time += self.base_increment * speed_factor
        return self._time

    def pause(self) -> None:
        if self._running:
            logger.debug("Clock paused at t=%.2f", self._time)
        self._running = False

    def resume(self) -> None:
        if not self._running:
            logger.debug("Clock resumed at t=%.2f", self._time)
        self._running = True

    def toggle(self) -> bool:
        """Flip between running and paused; return the new running state."""
        if self._running:
            self.pause()
        else:
            self.resume()
        return self._running

    def reset(self) -> None:
        self._time = 0.0
