"""
Pistachio Sketcher - EntityStore

Laufzeit-optimierte Ablage der Sketch-Geometrie:
- Jede Entity-Art hat ihr eigenes dichtes Array (Insert-Reihenfolge).
- EntityId -> EntityHandle(kind, index) Index für O(1)-Zugriff.

Es gibt kein Entfernen einzelner Entities, nur clear(). Ids sind damit
dauerhaft und Indizes werden nie wiederverwendet. Generationen-Handles wären
der Erweiterungspunkt, falls Löschen später gebraucht wird.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Tuple

from loguru import logger

from config.feature_flags import is_enabled
from .errors import DuplicateIdError, EntityNotFoundError, IndexOutOfRangeError
from .geometry import (
    Point2D, Line2D, Circle2D, Arc2D, Ellipse2D, Curve2D, SketchEntity,
)
from .ids import EntityId, EntityKind


@dataclass(frozen=True)
class EntityHandle:
    """(Art, dichter Index) einer gespeicherten Entity"""
    kind: EntityKind
    index: int

    def __repr__(self):
        return f"Handle({self.kind.name}[{self.index}])"


_ENTITY_TYPES = {
    EntityKind.POINT: Point2D,
    EntityKind.LINE: Line2D,
    EntityKind.CIRCLE: Circle2D,
    EntityKind.ARC: Arc2D,
    EntityKind.ELLIPSE: Ellipse2D,
    EntityKind.CURVE: Curve2D,
}


class EntityStore:
    """Typisierte, spaltenweise Entity-Ablage mit Id-Index.

    Nicht thread-safe: ein Store gehört genau einem schreibenden Thread.
    """

    def __init__(self):
        self._arrays: Dict[EntityKind, List[SketchEntity]] = {kind: [] for kind in EntityKind}
        self._id_to_handle: Dict[EntityId, EntityHandle] = {}

    # === Insert ===

    def _insert(self, kind: EntityKind, entity: SketchEntity) -> EntityHandle:
        expected = _ENTITY_TYPES[kind]
        if not isinstance(entity, expected):
            raise TypeError(f"Expected {expected.__name__}, got {type(entity).__name__}")

        entity_id = entity.header.id
        if entity_id in self._id_to_handle:
            logger.warning(f"EntityStore: doppelte EntityId {entity_id} ({kind.name}) abgelehnt")
            raise DuplicateIdError(entity_id)

        array = self._arrays[kind]
        handle = EntityHandle(kind, len(array))
        array.append(entity)
        self._id_to_handle[entity_id] = handle

        if is_enabled("sketch_debug"):
            logger.debug(f"[STORE] {entity_id} -> {handle}")
        return handle

    def add_point(self, point: Point2D) -> EntityHandle:
        return self._insert(EntityKind.POINT, point)

    def add_line(self, line: Line2D) -> EntityHandle:
        return self._insert(EntityKind.LINE, line)

    def add_circle(self, circle: Circle2D) -> EntityHandle:
        return self._insert(EntityKind.CIRCLE, circle)

    def add_arc(self, arc: Arc2D) -> EntityHandle:
        return self._insert(EntityKind.ARC, arc)

    def add_ellipse(self, ellipse: Ellipse2D) -> EntityHandle:
        return self._insert(EntityKind.ELLIPSE, ellipse)

    def add_curve(self, curve: Curve2D) -> EntityHandle:
        return self._insert(EntityKind.CURVE, curve)

    def add(self, entity: SketchEntity) -> EntityHandle:
        """Generischer Insert, dispatcht über die Entity-Art."""
        kind = getattr(entity, "kind", None)
        if kind not in _ENTITY_TYPES:
            raise TypeError(f"Not a sketch entity: {type(entity).__name__}")
        return self._insert(kind, entity)

    # === Lookup ===

    def contains(self, entity_id: EntityId) -> bool:
        return entity_id in self._id_to_handle

    def __contains__(self, entity_id: EntityId) -> bool:
        return self.contains(entity_id)

    def get_handle(self, entity_id: EntityId) -> EntityHandle:
        """Handle zu einer EntityId. Wirft EntityNotFoundError wenn unbekannt."""
        try:
            return self._id_to_handle[entity_id]
        except KeyError:
            raise EntityNotFoundError(entity_id) from None

    def resolve(self, handle: EntityHandle) -> SketchEntity:
        """Entity zu einem Handle (bounds-checked)."""
        return self._at(handle.kind, handle.index)

    def get(self, entity_id: EntityId) -> SketchEntity:
        """Entity zu einer EntityId."""
        return self.resolve(self.get_handle(entity_id))

    # === Typisierter Zugriff ===

    def _at(self, kind: EntityKind, index: int) -> SketchEntity:
        array = self._arrays[kind]
        # Negative Indizes sind keine gültigen dichten Indizes
        if index < 0 or index >= len(array):
            raise IndexOutOfRangeError(kind, index, len(array))
        return array[index]

    def point(self, index: int) -> Point2D:
        return self._at(EntityKind.POINT, index)

    def line(self, index: int) -> Line2D:
        return self._at(EntityKind.LINE, index)

    def circle(self, index: int) -> Circle2D:
        return self._at(EntityKind.CIRCLE, index)

    def arc(self, index: int) -> Arc2D:
        return self._at(EntityKind.ARC, index)

    def ellipse(self, index: int) -> Ellipse2D:
        return self._at(EntityKind.ELLIPSE, index)

    def curve(self, index: int) -> Curve2D:
        return self._at(EntityKind.CURVE, index)

    # === Bulk-Zugriff (Rendering, Serialisierung) ===

    def points(self) -> Tuple[Point2D, ...]:
        return tuple(self._arrays[EntityKind.POINT])

    def lines(self) -> Tuple[Line2D, ...]:
        return tuple(self._arrays[EntityKind.LINE])

    def circles(self) -> Tuple[Circle2D, ...]:
        return tuple(self._arrays[EntityKind.CIRCLE])

    def arcs(self) -> Tuple[Arc2D, ...]:
        return tuple(self._arrays[EntityKind.ARC])

    def ellipses(self) -> Tuple[Ellipse2D, ...]:
        return tuple(self._arrays[EntityKind.ELLIPSE])

    def curves(self) -> Tuple[Curve2D, ...]:
        return tuple(self._arrays[EntityKind.CURVE])

    def iter_entities(self) -> Iterator[SketchEntity]:
        """Alle Entities, gruppiert nach Art (Point, Line, Circle, Arc, Ellipse, Curve)."""
        for kind in EntityKind:
            yield from self._arrays[kind]

    def ids(self) -> List[EntityId]:
        """Alle EntityIds in Insert-Reihenfolge (über alle Arten hinweg)."""
        return list(self._id_to_handle)

    def count(self, kind: EntityKind) -> int:
        return len(self._arrays[kind])

    def __len__(self) -> int:
        return len(self._id_to_handle)

    def clear(self):
        """Leert alle Arrays und den Id-Index."""
        self._arrays = {kind: [] for kind in EntityKind}
        self._id_to_handle = {}
        if is_enabled("sketch_debug"):
            logger.debug("[STORE] cleared")

    def __repr__(self):
        counts = ", ".join(f"{kind.name.lower()}s={len(arr)}" for kind, arr in self._arrays.items() if arr)
        return f"EntityStore({counts or 'empty'})"
