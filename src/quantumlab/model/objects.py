"""
Quantum Objects (Data Model)
============================
Toy "quantum objects": a position on the canvas plus the parameters driving
their standing-wave glyph.

Classes:
    QuantumObject: One simulated object.

Functions:
    seeded_pair: The two mutually entangled objects present at start-up.
    random_object: An unentangled object with randomised wave parameters.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional

import numpy as np

from quantumlab.config import CANVAS_WIDTH, CANVAS_HEIGHT


@dataclass
class QuantumObject:
    id: str
    x: float
    y: float
    frequency: float = 2.0  # Hz
    phase: float = 0.0  # radians
    amplitude: float = 50.0  # px
    is_entangled: bool = False
    entangled_with: Optional[str] = None
    is_teleporting: bool = False

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y

    def move_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def is_mutually_entangled(self, other: QuantumObject) -> bool:
        """Both flags set and each one references the other."""
        return (
            self.is_entangled
            and other.is_entangled
            and self.entangled_with == other.id
            and other.entangled_with == self.id
        )


def seeded_pair() -> list[QuantumObject]:
    """Two entangled objects with phases offset by pi."""
    return [
        QuantumObject(
            id="obj1", x=150.0, y=200.0,
            frequency=2.0, phase=0.0, amplitude=50.0,
            is_entangled=True, entangled_with="obj2",
        ),
        QuantumObject(
            id="obj2", x=550.0, y=300.0,
            frequency=2.0, phase=math.pi, amplitude=50.0,
            is_entangled=True, entangled_with="obj1",
        ),
    ]


def random_object(
    object_id: str,
    rng: np.random.Generator,
    x: Optional[float] = None,
    y: Optional[float] = None,
) -> QuantumObject:
    """
    Create an unentangled object with random frequency, phase and amplitude.

    Without explicit coordinates the object lands inside the canvas, keeping a
    100 px margin so its glyph stays visible.
    """
    if x is None:
        x = float(rng.uniform(100.0, CANVAS_WIDTH - 100.0))
    if y is None:
        y = float(rng.uniform(100.0, CANVAS_HEIGHT - 100.0))
    return QuantumObject(
        id=object_id,
        x=float(x),
        y=float(y),
        frequency=float(rng.uniform(1.5, 4.5)),
        phase=float(rng.uniform(0.0, 2.0 * math.pi)),
        amplitude=float(rng.uniform(40.0, 60.0)),
    )
