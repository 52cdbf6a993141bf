from __future__ import annotations

from collections import deque
from dataclasses import dataclass
import logging
import math
from typing import Optional

import numpy as np

from quantumlab.config import MEASUREMENT_CADENCE, MEASUREMENT_CAPACITY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Measurement:
    timestamp: float
    value: float
    type: str


class MeasurementRecorder:
    """
    Bounded trailing log of samples taken while measurement mode is on.

    A sample is taken each time simulated time reaches the next multiple of
    `cadence`. Only the most recent `capacity` entries are kept, in strictly
    ascending timestamp order. Turning the recorder off empties the log.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        cadence: float = MEASUREMENT_CADENCE,
        capacity: int = MEASUREMENT_CAPACITY,
    ) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()
        self.cadence = cadence
        self._log: deque[Measurement] = deque(maxlen=capacity)
        self._active: bool = False
        self._next_sample_at: float = 0.0

    @property
    def active(self) -> bool:
        return self._active

    @property
    def capacity(self) -> int:
        return self._log.maxlen or 0

    def __len__(self) -> int:
        return len(self._log)

    def entries(self) -> list[Measurement]:
        return list(self._log)

    def set_active(self, active: bool, time: float = 0.0) -> None:
        if active == self._active:
            return
        self._active = active
        self._log.clear()
        # First sample on the next cadence boundary at or after `time`
        self._next_sample_at = math.ceil(time / self.cadence) * self.cadence
        logger.info("Measurement mode %s.", "on" if active else "off")

    def clear(self, time: float = 0.0) -> None:
        self._log.clear()
        self._next_sample_at = math.ceil(time / self.cadence) * self.cadence

    def sample(self, time: float, field_intensity: float, mode: str) -> Optional[Measurement]:
        """Record a sample if active and a cadence boundary was reached."""
        if not self._active or time < self._next_sample_at:
            return None
        if self._log and time <= self._log[-1].timestamp:
            return None

        entry = Measurement(
            timestamp=time,
            value=float(self._rng.random()) * field_intensity,
            type=mode,
        )
        self._log.append(entry)
        self._next_sample_at = (math.floor(time / self.cadence) + 1) * self.cadence
        logger.debug("Measurement t=%.2f value=%.3f (%s).", entry.timestamp, entry.value, mode)
        return entry
