"""
Field Generator
===============
Builds the background resonance lattice once and evaluates its pulsing
intensity, plus the stateless floating-particle overlay.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Optional, TYPE_CHECKING

import numpy as np

from quantumlab.config import CANVAS_WIDTH, CANVAS_HEIGHT, NODE_SPACING, PARTICLE_COUNT

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResonanceNode:
    x: float
    y: float
    intensity: float  # baseline, in [0.2, 0.5)
    phase: float


@dataclass(frozen=True)
class FieldState:
    """Everything the renderer needs to paint the background field."""
    nodes: tuple[ResonanceNode, ...] = ()
    intensity: float = 0.5
    show_particles: bool = True
    particle_count: int = 20


class FieldGenerator:
    """Owns the resonance-node grid. The grid is read-only once generated."""

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()
        self._nodes: tuple[ResonanceNode, ...] = ()

    @property
    def nodes(self) -> tuple[ResonanceNode, ...]:
        return self._nodes

    @property
    def is_initialized(self) -> bool:
        return bool(self._nodes)

    def initialize(
        self,
        canvas_width: int = CANVAS_WIDTH,
        canvas_height: int = CANVAS_HEIGHT,
        spacing: int = NODE_SPACING,
    ) -> tuple[ResonanceNode, ...]:
        """
        Generate floor(w/spacing) x floor(h/spacing) nodes, column by column.

        Only the first call generates; later calls return the existing grid.
        """
        if self._nodes:
            logger.debug("Resonance grid already initialized, keeping %d nodes.", len(self._nodes))
            return self._nodes

        xs = np.arange(canvas_width // spacing, dtype=np.float64) * spacing
        ys = np.arange(canvas_height // spacing, dtype=np.float64) * spacing
        gx, gy = np.meshgrid(xs, ys, indexing="ij")
        n = gx.size
        intensities = self._rng.random(n) * 0.3 + 0.2
        phases = self._rng.random(n) * 2.0 * math.pi

        self._nodes = tuple(
            ResonanceNode(float(x), float(y), float(i), float(p))
            for x, y, i, p in zip(gx.ravel(), gy.ravel(), intensities, phases)
        )
        logger.info("Generated %d resonance nodes (%dx%d, spacing %d).",
                    n, canvas_width, canvas_height, spacing)
        return self._nodes

    @staticmethod
    def sample(node: ResonanceNode, time: float, field_intensity: float) -> float:
        """Rendered intensity of `node` at `time`."""
        return node.intensity * field_intensity * (1.0 + 0.3 * math.sin(0.05 * time + node.phase))

    @staticmethod
    def particle_positions(
        time: float, count: int
    ) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Positions and sizes of the decorative particles at `time`.

        Each particle follows a closed Lissajous-like path picked by its index,
        so nothing has to be stored between frames.

        Returns:
            (x, y, size) arrays of length `count`.
        """
        count = int(min(max(count, 0), PARTICLE_COUNT.maximum))
        i = np.arange(count, dtype=np.float64)
        x = np.sin(time * 0.03 + i) * 200.0 + 400.0 + np.cos(time * 0.02 + i * 2.0) * 150.0
        y = np.cos(time * 0.04 + i) * 150.0 + 300.0 + np.sin(time * 0.03 + i * 3.0) * 100.0
        size = 2.0 + np.sin(time * 0.1 + i)
        return x, y, size
