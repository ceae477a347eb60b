"""
Pistachio Sketcher - Geometrie-Primitives
Punkte, Linien, Kreise, Bögen, Ellipsen und Kurven als reine Datensätze
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Union
import math

from .ids import EntityId, EntityKind


@dataclass(frozen=True)
class Vec2:
    """2D-Vektor in Ebenen-Koordinaten (double)"""
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        # NumPy-Skalare und ints immer als native floats speichern
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def distance_to(self, other: 'Vec2') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def midpoint(self, other: 'Vec2') -> 'Vec2':
        return Vec2((self.x + other.x) / 2, (self.y + other.y) / 2)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self):
        return f"V({self.x:.2f}, {self.y:.2f})"


@dataclass
class EntityHeader:
    """Gemeinsame Kopfdaten aller Entities"""
    id: EntityId
    name: str = ""
    construction: bool = False  # Hilfsgeometrie, nicht Teil des Profils
    visible: bool = True
    selectable: bool = True


@dataclass
class Point2D:
    """2D-Punkt"""
    header: EntityHeader
    p: Vec2 = field(default_factory=Vec2)

    kind = EntityKind.POINT

    @property
    def id(self) -> EntityId:
        return self.header.id

    def __repr__(self):
        return f"Point#{self.id}({self.p.x:.2f}, {self.p.y:.2f})"


@dataclass
class Line2D:
    """2D-Linie von a (Start) nach b (Ende)"""
    header: EntityHeader
    a: Vec2 = field(default_factory=Vec2)
    b: Vec2 = field(default_factory=Vec2)

    kind = EntityKind.LINE

    @property
    def id(self) -> EntityId:
        return self.header.id

    @property
    def length(self) -> float:
        """Länge der Linie"""
        return self.a.distance_to(self.b)

    @property
    def midpoint(self) -> Vec2:
        """Mittelpunkt der Linie"""
        return self.a.midpoint(self.b)

    @property
    def angle(self) -> float:
        """Winkel zur X-Achse in Radiant"""
        return math.atan2(self.b.y - self.a.y, self.b.x - self.a.x)

    def __repr__(self):
        return f"Line#{self.id}({self.a} -> {self.b})"


@dataclass
class Circle2D:
    """2D-Kreis"""
    header: EntityHeader
    center: Vec2 = field(default_factory=Vec2)
    radius: float = 1.0

    kind = EntityKind.CIRCLE

    @property
    def id(self) -> EntityId:
        return self.header.id

    @property
    def diameter(self) -> float:
        return self.radius * 2

    def __repr__(self):
        return f"Circle#{self.id}(center={self.center}, r={self.radius:.2f})"


@dataclass
class Arc2D:
    """2D-Kreisbogen über Mittelpunkt, Radius, Start- und Endpunkt.

    ccw gibt die Laufrichtung von start nach end an.
    """
    header: EntityHeader
    center: Vec2 = field(default_factory=Vec2)
    radius: float = 1.0
    start: Vec2 = field(default_factory=Vec2)
    end: Vec2 = field(default_factory=Vec2)
    ccw: bool = True

    kind = EntityKind.ARC

    @property
    def id(self) -> EntityId:
        return self.header.id

    def __repr__(self):
        direction = "ccw" if self.ccw else "cw"
        return f"Arc#{self.id}(center={self.center}, r={self.radius:.2f}, {direction})"


@dataclass
class Ellipse2D:
    """2D-Ellipse mit separaten Halbachsen und Rotation in Radiant."""
    header: EntityHeader
    center: Vec2 = field(default_factory=Vec2)
    rx: float = 2.0
    ry: float = 1.0
    rotation: float = 0.0

    kind = EntityKind.ELLIPSE

    @property
    def id(self) -> EntityId:
        return self.header.id

    def __repr__(self):
        return f"Ellipse#{self.id}(center={self.center}, rx={self.rx:.2f}, ry={self.ry:.2f})"


@dataclass
class Curve2D:
    """Kurve über geordnete Kontrollpunkte (Spline/Polylinie)"""
    header: EntityHeader
    control_points: List[Vec2] = field(default_factory=list)
    closed: bool = False

    kind = EntityKind.CURVE

    @property
    def id(self) -> EntityId:
        return self.header.id

    def __repr__(self):
        return f"Curve#{self.id}({len(self.control_points)} pts, closed={self.closed})"


SketchEntity = Union[Point2D, Line2D, Circle2D, Arc2D, Ellipse2D, Curve2D]
