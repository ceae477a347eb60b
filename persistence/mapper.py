"""
Pistachio Persistence - Document <-> DTO Mapper

to_dto glättet jeden EntityStore zu einer Entity-Liste, gruppiert nach Art
(Point, Line, Circle, Arc, Ellipse, Curve). Die Reihenfolge innerhalb einer
Art bleibt erhalten, die Verschachtelung über Arten hinweg nicht. Alle Ids
müssen in den u64-Bereich der Datei passen, sonst wäre die Datei nicht mehr
ladbar.

from_dto baut ein frisches Document, indem jede Entity-DTO erneut über die
typisierten EntityStore-Inserts eingespielt wird; doppelte Ids fallen so
auch beim Laden auf.
"""

from typing import Callable, Dict, List, Tuple

from loguru import logger

from config.feature_flags import is_enabled
from sketcher.constraints import (
    Constraint, ConstraintMeta, DimensionalConstraint, GeometricConstraint,
)
from sketcher.entity_store import EntityStore
from sketcher.errors import InvalidFieldError, UnknownKindError, UnsupportedVersionError
from sketcher.geometry import (
    Arc2D, Circle2D, Curve2D, Ellipse2D, EntityHeader, Line2D, Point2D, SketchEntity,
)
from sketcher.ids import ID_MAX, EntityRef
from sketcher.sketch import Document, Sketch

from .dto import (
    SKETCH_FILE_VERSION,
    ArcDto, CircleDto, ConstraintDto, ConstraintMetaDto, CurveDto,
    DimensionalConstraintDto, DocumentDto, EllipseDto, EntityDto, EntityRefDto,
    FileDto, GeometricConstraintDto, LineDto, PointDto, SketchDto,
)


# === Ids / Refs / Meta ===

def _wire_id(value: int, field: str) -> int:
    """Id muss ein int im Bereich 0..ID_MAX sein (u64 in der Datei)."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0 or value > ID_MAX:
        raise InvalidFieldError(field, value, "unsigned 64-bit id")
    return value


def _ref_to_dto(ref: EntityRef) -> EntityRefDto:
    return EntityRefDto(id=_wire_id(ref.id, "refs[].id"), anchor=ref.anchor)


def _ref_from_dto(ref: EntityRefDto) -> EntityRef:
    return EntityRef(id=ref.id, anchor=ref.anchor)


def _meta_to_dto(meta: ConstraintMeta) -> ConstraintMetaDto:
    return ConstraintMetaDto(id=_wire_id(meta.id, "meta.id"), name=meta.name,
                             enabled=meta.enabled, suppressed=meta.suppressed)


def _meta_from_dto(meta: ConstraintMetaDto) -> ConstraintMeta:
    return ConstraintMeta(id=meta.id, name=meta.name, enabled=meta.enabled, suppressed=meta.suppressed)


def _header_fields(header: EntityHeader) -> dict:
    return {
        "id": _wire_id(header.id, "entity.id"),
        "name": header.name,
        "construction": header.construction,
        "visible": header.visible,
        "selectable": header.selectable,
    }


def _header_from_dto(e: EntityDto) -> EntityHeader:
    return EntityHeader(
        id=e.id,
        name=e.name,
        construction=e.construction,
        visible=e.visible,
        selectable=e.selectable,
    )


# === Entities: Laufzeit -> DTO ===

def _point_to_dto(p: Point2D) -> PointDto:
    return PointDto(p=p.p, **_header_fields(p.header))


def _line_to_dto(l: Line2D) -> LineDto:
    return LineDto(a=l.a, b=l.b, **_header_fields(l.header))


def _circle_to_dto(c: Circle2D) -> CircleDto:
    return CircleDto(center=c.center, radius=c.radius, **_header_fields(c.header))


def _arc_to_dto(a: Arc2D) -> ArcDto:
    return ArcDto(center=a.center, radius=a.radius, start=a.start, end=a.end, ccw=a.ccw,
                  **_header_fields(a.header))


def _ellipse_to_dto(e: Ellipse2D) -> EllipseDto:
    return EllipseDto(center=e.center, rx=e.rx, ry=e.ry, rotation=e.rotation,
                      **_header_fields(e.header))


def _curve_to_dto(c: Curve2D) -> CurveDto:
    return CurveDto(control_points=list(c.control_points), closed=c.closed, **_header_fields(c.header))


def _store_to_dtos(store: EntityStore) -> List[EntityDto]:
    # Feste Arten-Reihenfolge, unabhängig von der Einfüge-Reihenfolge
    entities: List[EntityDto] = []
    entities.extend(_point_to_dto(p) for p in store.points())
    entities.extend(_line_to_dto(l) for l in store.lines())
    entities.extend(_circle_to_dto(c) for c in store.circles())
    entities.extend(_arc_to_dto(a) for a in store.arcs())
    entities.extend(_ellipse_to_dto(e) for e in store.ellipses())
    entities.extend(_curve_to_dto(c) for c in store.curves())
    return entities


# === Entities: DTO -> Laufzeit ===

def _point_from_dto(e: PointDto) -> Point2D:
    return Point2D(header=_header_from_dto(e), p=e.p)


def _line_from_dto(e: LineDto) -> Line2D:
    return Line2D(header=_header_from_dto(e), a=e.a, b=e.b)


def _circle_from_dto(e: CircleDto) -> Circle2D:
    return Circle2D(header=_header_from_dto(e), center=e.center, radius=e.radius)


def _arc_from_dto(e: ArcDto) -> Arc2D:
    return Arc2D(header=_header_from_dto(e), center=e.center, radius=e.radius,
                 start=e.start, end=e.end, ccw=e.ccw)


def _ellipse_from_dto(e: EllipseDto) -> Ellipse2D:
    return Ellipse2D(header=_header_from_dto(e), center=e.center, rx=e.rx, ry=e.ry, rotation=e.rotation)


def _curve_from_dto(e: CurveDto) -> Curve2D:
    return Curve2D(header=_header_from_dto(e), control_points=list(e.control_points), closed=e.closed)


# DTO-Klasse -> (Builder, EntityStore-Insert)
_ENTITY_REPLAY: Dict[type, Tuple[Callable[..., SketchEntity], Callable[[EntityStore, SketchEntity], object]]] = {
    PointDto: (_point_from_dto, EntityStore.add_point),
    LineDto: (_line_from_dto, EntityStore.add_line),
    CircleDto: (_circle_from_dto, EntityStore.add_circle),
    ArcDto: (_arc_from_dto, EntityStore.add_arc),
    EllipseDto: (_ellipse_from_dto, EntityStore.add_ellipse),
    CurveDto: (_curve_from_dto, EntityStore.add_curve),
}


def _replay_entity(store: EntityStore, entity: EntityDto) -> None:
    try:
        build, insert = _ENTITY_REPLAY[type(entity)]
    except KeyError:
        raise UnknownKindError("entity", type(entity).__name__) from None
    insert(store, build(entity))


# === Constraints ===

def _constraint_to_dto(c: Constraint) -> ConstraintDto:
    if isinstance(c, GeometricConstraint):
        return GeometricConstraintDto(
            meta=_meta_to_dto(c.meta),
            type=c.type,
            refs=[_ref_to_dto(r) for r in c.refs],
            param=c.param,
        )
    if isinstance(c, DimensionalConstraint):
        return DimensionalConstraintDto(
            meta=_meta_to_dto(c.meta),
            type=c.type,
            refs=[_ref_to_dto(r) for r in c.refs],
            value=c.value,
            driving=c.driving,
            units=c.units,
        )
    raise UnknownKindError("constraint", type(c).__name__)


def _constraint_from_dto(c: ConstraintDto) -> Constraint:
    if isinstance(c, GeometricConstraintDto):
        return GeometricConstraint(
            meta=_meta_from_dto(c.meta),
            type=c.type,
            refs=[_ref_from_dto(r) for r in c.refs],
            param=c.param,
        )
    if isinstance(c, DimensionalConstraintDto):
        return DimensionalConstraint(
            meta=_meta_from_dto(c.meta),
            type=c.type,
            refs=[_ref_from_dto(r) for r in c.refs],
            value=c.value,
            driving=c.driving,
            units=c.units,
        )
    raise UnknownKindError("constraint", type(c).__name__)


# === Öffentliche API ===

def document_to_dto(doc: Document) -> FileDto:
    """
    Bildet ein Laufzeit-Document auf ein FileDto mit aktueller Schema-Version ab.

    Raises:
        InvalidFieldError: eine Id liegt außerhalb 0..ID_MAX
        UnknownKindError: unbekannte Constraint-Variante
    """
    sketches = []
    for sketch in doc.sketches:
        sketches.append(SketchDto(
            id=_wire_id(sketch.id, "sketch.id"),
            name=sketch.name,
            visible=sketch.visible,
            entities=_store_to_dtos(sketch.entities),
            constraints=[_constraint_to_dto(c) for c in sketch.constraints],
        ))

    if is_enabled("persistence_debug"):
        logger.debug(f"[DTO] Document {doc.id} -> {len(sketches)} sketch DTO(s)")

    return FileDto(
        file_version=SKETCH_FILE_VERSION,
        document=DocumentDto(id=_wire_id(doc.id, "document.id"), name=doc.name, sketches=sketches),
    )


def document_from_dto(file: FileDto) -> Document:
    """
    Baut ein Document aus einem FileDto neu auf.

    Raises:
        UnsupportedVersionError: file_version weicht von SKETCH_FILE_VERSION ab
        DuplicateIdError: zwei Entities eines Sketches teilen sich eine Id
    """
    if file.file_version != SKETCH_FILE_VERSION:
        raise UnsupportedVersionError(file.file_version, SKETCH_FILE_VERSION)

    doc = Document(id=file.document.id, name=file.document.name)
    for sd in file.document.sketches:
        sketch = Sketch(id=sd.id, name=sd.name, visible=sd.visible)
        for entity in sd.entities:
            _replay_entity(sketch.entities, entity)
        sketch.constraints = [_constraint_from_dto(c) for c in sd.constraints]
        doc.sketches.append(sketch)

        if is_enabled("persistence_debug"):
            logger.debug(
                f"[DTO] Sketch {sketch.id}: {sketch.entity_count()} entities, "
                f"{sketch.constraint_count()} constraints"
            )

    return doc


class SketchDocumentMapper:
    """Namespace-Wrapper für die Mapper-Funktionen."""

    to_dto = staticmethod(document_to_dto)
    from_dto = staticmethod(document_from_dto)
