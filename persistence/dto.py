"""
Pistachio Persistence - DTO Schema

Einfache Spiegel-Strukturen der Sketch-Typen, entkoppelt von der
Laufzeit-Darstellung (EntityStore, typisierte Arrays). Der JSON-Codec sieht
ausschließlich DTOs.

Die Header-Felder liegen flach in jeder Entity-DTO, genau wie im Datei-Format.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from sketcher.constraints import DimensionalConstraintType, GeometricConstraintType
from sketcher.geometry import Vec2
from sketcher.ids import (
    ConstraintId, DocumentId, EntityAnchor, EntityId, SketchId,
)

# Schema-Version der Datei. Bei inkompatiblen Änderungen erhöhen; es gibt keine
# Migration, jeder andere Wert wird beim Laden abgelehnt.
SKETCH_FILE_VERSION = 1


@dataclass
class EntityRefDto:
    id: EntityId
    anchor: EntityAnchor = EntityAnchor.NONE


@dataclass
class ConstraintMetaDto:
    id: ConstraintId
    name: str = ""
    enabled: bool = True
    suppressed: bool = False


# ----- Entity DTOs -----

@dataclass
class PointDto:
    id: EntityId
    name: str = ""
    construction: bool = False
    visible: bool = True
    selectable: bool = True
    p: Vec2 = field(default_factory=Vec2)


@dataclass
class LineDto:
    id: EntityId
    name: str = ""
    construction: bool = False
    visible: bool = True
    selectable: bool = True
    a: Vec2 = field(default_factory=Vec2)
    b: Vec2 = field(default_factory=Vec2)


@dataclass
class CircleDto:
    id: EntityId
    name: str = ""
    construction: bool = False
    visible: bool = True
    selectable: bool = True
    center: Vec2 = field(default_factory=Vec2)
    radius: float = 1.0


@dataclass
class ArcDto:
    id: EntityId
    name: str = ""
    construction: bool = False
    visible: bool = True
    selectable: bool = True
    center: Vec2 = field(default_factory=Vec2)
    radius: float = 1.0
    start: Vec2 = field(default_factory=Vec2)
    end: Vec2 = field(default_factory=Vec2)
    ccw: bool = True


@dataclass
class EllipseDto:
    id: EntityId
    name: str = ""
    construction: bool = False
    visible: bool = True
    selectable: bool = True
    center: Vec2 = field(default_factory=Vec2)
    rx: float = 2.0
    ry: float = 1.0
    rotation: float = 0.0


@dataclass
class CurveDto:
    id: EntityId
    name: str = ""
    construction: bool = False
    visible: bool = True
    selectable: bool = True
    control_points: List[Vec2] = field(default_factory=list)
    closed: bool = False


EntityDto = Union[PointDto, LineDto, CircleDto, ArcDto, EllipseDto, CurveDto]


# ----- Constraint DTOs -----

@dataclass
class GeometricConstraintDto:
    meta: ConstraintMetaDto
    type: GeometricConstraintType
    refs: List[EntityRefDto] = field(default_factory=list)
    param: Optional[float] = None


@dataclass
class DimensionalConstraintDto:
    meta: ConstraintMetaDto
    type: DimensionalConstraintType
    refs: List[EntityRefDto] = field(default_factory=list)
    value: float = 0.0
    driving: bool = True
    units: str = "mm"


ConstraintDto = Union[GeometricConstraintDto, DimensionalConstraintDto]


# ----- Sketch / Document / File -----

@dataclass
class SketchDto:
    id: SketchId
    name: str = ""
    visible: bool = True
    entities: List[EntityDto] = field(default_factory=list)
    constraints: List[ConstraintDto] = field(default_factory=list)


@dataclass
class DocumentDto:
    id: DocumentId
    name: str = ""
    sketches: List[SketchDto] = field(default_factory=list)


@dataclass
class FileDto:
    document: DocumentDto
    file_version: int = SKETCH_FILE_VERSION
