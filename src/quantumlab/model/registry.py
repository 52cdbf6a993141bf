"""
Object Registry
===============
Owns the collection of quantum objects and the entanglement relation
between them.

Why is this file needed?
------------------------
1. Ownership: It is the only writer of `QuantumObject` instances; views and
   the renderer read from it.
2. Teleportation: It owns the deferred, cancellable teleport commit.
3. Sync: It emits Qt signals so panels can refresh after a change.

The collection is append-only. Ids are stable for the lifetime of an object
and insertion order is preserved, which is what "the first two objects"
refers to during a teleport.
"""
from __future__ import annotations

from enum import Enum
import logging
from typing import Iterator, Optional

import numpy as np
from PySide6.QtCore import QObject, QTimer, Signal

from quantumlab.config import OBJECT_FREQUENCY, TELEPORT_DELAY_MS
from quantumlab.model.objects import QuantumObject, random_object, seeded_pair

logger = logging.getLogger(__name__)


class TeleportPhase(Enum):
    IDLE = "idle"
    PENDING = "pending"


class ObjectRegistry(QObject):
    """Append-only store of quantum objects with signals for UI sync."""
    objects_changed = Signal()
    selection_changed = Signal(object)  # Optional[str]
    teleport_started = Signal()
    teleport_committed = Signal()
    teleport_cancelled = Signal()

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        teleport_delay_ms: int = TELEPORT_DELAY_MS,
        seeded: bool = True,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._objects: dict[str, QuantumObject] = {}
        self._counter: int = 0
        self._selected_id: Optional[str] = None
        if seeded:
            self._objects = {obj.id: obj for obj in seeded_pair()}
            self._counter = len(self._objects)

        self._teleport_phase = TeleportPhase.IDLE
        self._teleport_pair: tuple[str, str] | None = None
        self._teleport_timer = QTimer(self)
        self._teleport_timer.setSingleShot(True)
        self._teleport_timer.setInterval(teleport_delay_ms)
        self._teleport_timer.timeout.connect(self.commit_teleport)

    # ------------------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[QuantumObject]:
        return iter(self._objects.values())

    def __contains__(self, object_id: object) -> bool:
        return object_id in self._objects

    def objects(self) -> list[QuantumObject]:
        """Snapshot of the objects in insertion order."""
        return list(self._objects.values())

    def get(self, object_id: Optional[str]) -> Optional[QuantumObject]:
        if object_id is None:
            return None
        return self._objects.get(object_id)

    def _next_id(self) -> str:
        while True:
            self._counter += 1
            candidate = f"obj{self._counter}"
            if candidate not in self._objects:
                return candidate

    def add(self, obj: Optional[QuantumObject] = None) -> QuantumObject:
        """
        Register an object. Without an argument a random unentangled object is
        created. An empty or already taken id is replaced by a fresh one.
        """
        if obj is None:
            obj = random_object(self._next_id(), self._rng)
        elif not obj.id or obj.id in self._objects:
            new_id = self._next_id()
            if obj.id:
                logger.warning("Object id '%s' already registered, using '%s'.", obj.id, new_id)
            obj.id = new_id

        self._objects[obj.id] = obj
        logger.info("Added object %s at (%.0f, %.0f).", obj.id, obj.x, obj.y)
        self.objects_changed.emit()
        return obj

    def spawn_at(self, x: float, y: float) -> QuantumObject:
        """Create a random unentangled object at the given canvas coordinates."""
        return self.add(random_object(self._next_id(), self._rng, x=x, y=y))

    def reset(self) -> None:
        """Cancel any pending teleport and restore the two seeded objects."""
        self.cancel_teleport()
        self._objects = {obj.id: obj for obj in seeded_pair()}
        self._counter = len(self._objects)
        self._selected_id = None
        logger.info("Registry reset to the seeded pair.")
        self.objects_changed.emit()
        self.selection_changed.emit(None)

    # ------------------------------------------------------------------------------
    # Selection and per-object edits
    # ------------------------------------------------------------------------------

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def selected(self) -> Optional[QuantumObject]:
        return self.get(self._selected_id)

    def select(self, object_id: Optional[str]) -> None:
        if object_id is not None and object_id not in self._objects:
            logger.debug("Cannot select unknown object '%s'.", object_id)
            object_id = None
        if object_id != self._selected_id:
            self._selected_id = object_id
            self.selection_changed.emit(object_id)

    def set_frequency(self, object_id: Optional[str], value: float) -> None:
        obj = self.get(object_id)
        if obj is None:
            logger.debug("set_frequency ignored, no object '%s'.", object_id)
            return
        obj.frequency = OBJECT_FREQUENCY.clamp(value)
        self.objects_changed.emit()

    def set_selected_frequency(self, value: float) -> None:
        """Frequency slider handler: only the selected object is affected."""
        self.set_frequency(self._selected_id, value)

    def toggle_entangled(self, object_id: str) -> None:
        """
        Flip `is_entangled` on exactly this object.

        The partner's flag and both `entangled_with` references are left
        untouched, so a one-sided link is possible and is simply not drawn.
        """
        obj = self.get(object_id)
        if obj is None:
            logger.debug("toggle_entangled ignored, no object '%s'.", object_id)
            return
        obj.is_entangled = not obj.is_entangled
        logger.info("Object %s entangled=%s.", obj.id, obj.is_entangled)
        self.objects_changed.emit()

    # ------------------------------------------------------------------------------
    # Teleportation
    # ------------------------------------------------------------------------------

    @property
    def teleport_phase(self) -> TeleportPhase:
        return self._teleport_phase

    @property
    def teleport_delay_ms(self) -> int:
        return self._teleport_timer.interval()

    def teleport(self) -> bool:
        """
        Start a teleport of the first two objects.

        Idle -> Pending: both objects are flagged `is_teleporting`; after the
        delay `commit_teleport` swaps their positions. Returns False (no-op)
        with fewer than two objects or while a teleport is already pending.
        """
        if len(self._objects) < 2:
            logger.debug("Teleport needs at least two objects, have %d.", len(self._objects))
            return False
        if self._teleport_phase is TeleportPhase.PENDING:
            logger.debug("Teleport already pending.")
            return False

        first, second = self.objects()[:2]
        first.is_teleporting = True
        second.is_teleporting = True
        self._teleport_pair = (first.id, second.id)
        self._teleport_phase = TeleportPhase.PENDING
        self._teleport_timer.start()
        logger.info("Teleport pending: %s <-> %s.", first.id, second.id)
        self.teleport_started.emit()
        self.objects_changed.emit()
        return True

    def commit_teleport(self) -> None:
        """Pending -> Committed: swap positions and clear both teleport flags."""
        if self._teleport_phase is not TeleportPhase.PENDING or self._teleport_pair is None:
            return
        self._teleport_timer.stop()

        first = self._objects.get(self._teleport_pair[0])
        second = self._objects.get(self._teleport_pair[1])
        self._teleport_phase = TeleportPhase.IDLE
        self._teleport_pair = None
        if first is None or second is None:
            return

        first_pos, second_pos = first.position, second.position
        first.move_to(*second_pos)
        second.move_to(*first_pos)
        first.is_teleporting = False
        second.is_teleporting = False
        logger.info("Teleport committed: %s <-> %s.", first.id, second.id)
        self.objects_changed.emit()
        self.teleport_committed.emit()

    def cancel_teleport(self) -> bool:
        """Drop a pending teleport; positions stay where they are."""
        if self._teleport_phase is not TeleportPhase.PENDING:
            return False
        self._teleport_timer.stop()
        if self._teleport_pair is not None:
            for object_id in self._teleport_pair:
                obj = self._objects.get(object_id)
                if obj is not None:
                    obj.is_teleporting = False
        self._teleport_phase = TeleportPhase.IDLE
        self._teleport_pair = None
        logger.info("Teleport cancelled.")
        self.teleport_cancelled.emit()
        self.objects_changed.emit()
        return True
