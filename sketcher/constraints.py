"""
Pistachio Sketcher - Constraint-Modell
Geometrische und dimensionale Constraints als reine Daten.

Es gibt keinen Solver und keine Prüfung, ob die referenzierten Entities
existieren oder zum Constraint-Typ passen.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Union

from .errors import UnknownKindError
from .ids import ConstraintId, EntityRef


class GeometricConstraintType(IntEnum):
    """Geometrische Constraint-Typen (Zahlenwerte = Datei-Format)"""
    HORIZONTAL = 0          # Linie horizontal
    VERTICAL = 1            # Linie vertikal
    COINCIDENT = 2          # Zwei Stellen zusammen
    TANGENT = 3             # Tangential
    PERPENDICULAR = 4       # Senkrecht
    PARALLEL = 5            # Parallel
    COLLINEAR = 6           # Kollinear
    MIDPOINT = 7            # Auf Mittelpunkt
    CONCENTRIC = 8          # Konzentrisch
    SYMMETRY = 9            # Symmetrisch zu Achse
    FIX = 10                # Fixiert
    CURVATURE = 11          # Krümmungsstetig


class DimensionalConstraintType(IntEnum):
    """Maß-Constraints (Zahlenwerte = Datei-Format)"""
    DISTANCE = 0
    LENGTH = 1
    ANGLE = 2
    RADIUS = 3
    DIAMETER = 4


@dataclass
class ConstraintMeta:
    id: ConstraintId
    name: str = ""
    enabled: bool = True
    suppressed: bool = False


@dataclass
class GeometricConstraint:
    """Geometrische Beziehung mit optionalem Parameter"""
    meta: ConstraintMeta
    type: GeometricConstraintType
    refs: List[EntityRef] = field(default_factory=list)
    param: Optional[float] = None

    def __repr__(self):
        param_str = f"={self.param}" if self.param is not None else ""
        return f"{self.type.name}{param_str}{self.refs}"


@dataclass
class DimensionalConstraint:
    """Maß-Constraint.

    driving=True: Wert ist treibend (Eingabe), False: Referenzmaß (nur lesend).
    """
    meta: ConstraintMeta
    type: DimensionalConstraintType
    refs: List[EntityRef] = field(default_factory=list)
    value: float = 0.0
    driving: bool = True
    units: str = "mm"

    def __repr__(self):
        ref_str = "" if self.driving else " (ref)"
        return f"{self.type.name}={self.value}{self.units}{ref_str}{self.refs}"


Constraint = Union[GeometricConstraint, DimensionalConstraint]


def constraint_refs(constraint: Constraint) -> List[EntityRef]:
    """Referenzliste eines Constraints beliebiger Variante."""
    if isinstance(constraint, (GeometricConstraint, DimensionalConstraint)):
        return constraint.refs
    raise UnknownKindError("constraint", type(constraint).__name__)


# === Constraint-Factories ===

def _geometric(ctype: GeometricConstraintType, cid: ConstraintId, refs, param=None, name: str = "") -> GeometricConstraint:
    return GeometricConstraint(
        meta=ConstraintMeta(id=cid, name=name),
        type=ctype,
        refs=list(refs),
        param=param,
    )


def make_horizontal(cid: ConstraintId, ref: EntityRef, name: str = "") -> GeometricConstraint:
    """Linie horizontal"""
    return _geometric(GeometricConstraintType.HORIZONTAL, cid, [ref], name=name)


def make_vertical(cid: ConstraintId, ref: EntityRef, name: str = "") -> GeometricConstraint:
    """Linie vertikal"""
    return _geometric(GeometricConstraintType.VERTICAL, cid, [ref], name=name)


def make_coincident(cid: ConstraintId, r1: EntityRef, r2: EntityRef, name: str = "") -> GeometricConstraint:
    """Zwei Stellen zusammenfallen lassen"""
    return _geometric(GeometricConstraintType.COINCIDENT, cid, [r1, r2], name=name)


def make_tangent(cid: ConstraintId, r1: EntityRef, r2: EntityRef, name: str = "") -> GeometricConstraint:
    return _geometric(GeometricConstraintType.TANGENT, cid, [r1, r2], name=name)


def make_perpendicular(cid: ConstraintId, r1: EntityRef, r2: EntityRef, name: str = "") -> GeometricConstraint:
    return _geometric(GeometricConstraintType.PERPENDICULAR, cid, [r1, r2], name=name)


def make_parallel(cid: ConstraintId, r1: EntityRef, r2: EntityRef, name: str = "") -> GeometricConstraint:
    return _geometric(GeometricConstraintType.PARALLEL, cid, [r1, r2], name=name)


def make_collinear(cid: ConstraintId, r1: EntityRef, r2: EntityRef, name: str = "") -> GeometricConstraint:
    return _geometric(GeometricConstraintType.COLLINEAR, cid, [r1, r2], name=name)


def make_midpoint(cid: ConstraintId, point: EntityRef, line: EntityRef, name: str = "") -> GeometricConstraint:
    """Punkt auf Mittelpunkt einer Linie"""
    return _geometric(GeometricConstraintType.MIDPOINT, cid, [point, line], name=name)


def make_concentric(cid: ConstraintId, r1: EntityRef, r2: EntityRef, name: str = "") -> GeometricConstraint:
    """Kreise/Bögen konzentrisch"""
    return _geometric(GeometricConstraintType.CONCENTRIC, cid, [r1, r2], name=name)


def make_symmetry(cid: ConstraintId, r1: EntityRef, r2: EntityRef, axis: EntityRef, name: str = "") -> GeometricConstraint:
    """Zwei Stellen symmetrisch zu einer Achse"""
    return _geometric(GeometricConstraintType.SYMMETRY, cid, [r1, r2, axis], name=name)


def make_fix(cid: ConstraintId, ref: EntityRef, name: str = "") -> GeometricConstraint:
    return _geometric(GeometricConstraintType.FIX, cid, [ref], name=name)


def make_curvature(cid: ConstraintId, r1: EntityRef, r2: EntityRef,
                   param: Optional[float] = None, name: str = "") -> GeometricConstraint:
    """Krümmungsstetiger Übergang, param optional als Gewichtung"""
    return _geometric(GeometricConstraintType.CURVATURE, cid, [r1, r2], param=param, name=name)


# === Maß-Constraints ===

def _dimensional(ctype: DimensionalConstraintType, cid: ConstraintId, refs, value: float,
                 driving: bool, units: str, name: str) -> DimensionalConstraint:
    return DimensionalConstraint(
        meta=ConstraintMeta(id=cid, name=name),
        type=ctype,
        refs=list(refs),
        value=float(value),
        driving=driving,
        units=units,
    )


def make_distance(cid: ConstraintId, r1: EntityRef, r2: EntityRef, distance: float,
                  driving: bool = True, units: str = "mm", name: str = "") -> DimensionalConstraint:
    """Abstand zwischen zwei Stellen"""
    return _dimensional(DimensionalConstraintType.DISTANCE, cid, [r1, r2], distance, driving, units, name)


def make_length(cid: ConstraintId, line: EntityRef, length: float,
                driving: bool = True, units: str = "mm", name: str = "") -> DimensionalConstraint:
    """Länge einer Linie"""
    return _dimensional(DimensionalConstraintType.LENGTH, cid, [line], length, driving, units, name)


def make_angle(cid: ConstraintId, l1: EntityRef, l2: EntityRef, angle: float,
               driving: bool = True, units: str = "deg", name: str = "") -> DimensionalConstraint:
    """Winkel zwischen zwei Linien"""
    return _dimensional(DimensionalConstraintType.ANGLE, cid, [l1, l2], angle, driving, units, name)


def make_radius(cid: ConstraintId, circle: EntityRef, radius: float,
                driving: bool = True, units: str = "mm", name: str = "") -> DimensionalConstraint:
    return _dimensional(DimensionalConstraintType.RADIUS, cid, [circle], radius, driving, units, name)


def make_diameter(cid: ConstraintId, circle: EntityRef, diameter: float,
                  driving: bool = True, units: str = "mm", name: str = "") -> DimensionalConstraint:
    return _dimensional(DimensionalConstraintType.DIAMETER, cid, [circle], diameter, driving, units, name)
