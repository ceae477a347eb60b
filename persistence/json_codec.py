"""
Pistachio Persistence - JSON Codec

Kodiert/dekodiert den DTO-Baum von/nach JSON-kompatiblen Dicts.

Entities und Constraints werden als Tagged-Union-Envelopes geschrieben:

    {"kind": "Line", "data": {...}}
    {"kind": "Geometric", "data": {...}}

Jede Envelope-Art hat genau einen Codec, einmalig beim Import in einer
Tag -> Codec Tabelle registriert. Ein unbekannter Tag wirft UnknownKindError.

Header-Felder mit Default-Wert (leerer Name, construction=False, visible=True,
selectable=True) werden beim Kodieren weggelassen. Beim Dekodieren liefern
fehlende optionale Keys den Default, fehlende Pflichtfelder werfen
MissingFieldError.

Jeder Dekodier-Fehler ist ein SketchFormatError; Python-Fehler wie
OverflowError oder RecursionError werden an dieser Grenze übersetzt.
"""

import json
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from loguru import logger

from config.feature_flags import is_enabled
from sketcher.constraints import DimensionalConstraintType, GeometricConstraintType
from sketcher.errors import (
    InvalidFieldError, MalformedFileError, MissingFieldError, UnknownKindError,
    UnsupportedVersionError,
)
from sketcher.geometry import Vec2
from sketcher.ids import ID_MAX, EntityAnchor

from .dto import (
    SKETCH_FILE_VERSION,
    ArcDto, CircleDto, ConstraintDto, ConstraintMetaDto, CurveDto,
    DimensionalConstraintDto, DocumentDto, EllipseDto, EntityDto, EntityRefDto,
    FileDto, GeometricConstraintDto, LineDto, PointDto, SketchDto,
)

JsonObject = Dict[str, Any]

_MISSING = object()


# =============================================================================
# Feld-Helfer
# =============================================================================

def _require(data: JsonObject, key: str, context: str) -> Any:
    if key not in data:
        raise MissingFieldError(key, context)
    return data[key]


def _as_object(value: Any, field: str) -> JsonObject:
    if not isinstance(value, dict):
        raise InvalidFieldError(field, value, "object")
    return value


def _as_list(value: Any, field: str) -> list:
    if not isinstance(value, list):
        raise InvalidFieldError(field, value, "array")
    return value


def _as_float(value: Any, field: str) -> float:
    # bool ist in Python ein int, in JSON nicht
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidFieldError(field, value, "number")
    try:
        result = float(value)
    except OverflowError:
        raise InvalidFieldError(field, f"<{value.bit_length()}-bit integer>", "number in double range") from None
    # NaN/Infinity-Tokens liest json.loads zwar, sie sind aber kein gültiges JSON
    if not math.isfinite(result):
        raise InvalidFieldError(field, value, "finite number")
    return result


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFieldError(field, value, "integer")
    return value


def _as_id(value: Any, field: str) -> int:
    value = _as_int(value, field)
    if value < 0 or value > ID_MAX:
        raise InvalidFieldError(field, value, "unsigned 64-bit id")
    return value


def _as_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidFieldError(field, value, "boolean")
    return value


def _as_str(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise InvalidFieldError(field, value, "string")
    return value


def _optional(data: JsonObject, key: str, default: Any, convert: Callable[[Any, str], Any]) -> Any:
    value = data.get(key, _MISSING)
    if value is _MISSING:
        return default
    return convert(value, key)


def _as_enum(enum_cls: Type[IntEnum], value: Any, field: str, category: str) -> IntEnum:
    raw = _as_int(value, field)
    try:
        return enum_cls(raw)
    except ValueError:
        raise UnknownKindError(category, raw) from None


# =============================================================================
# Vec2 / refs / meta
# =============================================================================

def _vec2_to_json(v: Vec2) -> JsonObject:
    return {"x": v.x, "y": v.y}


def _vec2_from_json(value: Any, field: str) -> Vec2:
    obj = _as_object(value, field)
    return Vec2(
        _as_float(_require(obj, "x", field), f"{field}.x"),
        _as_float(_require(obj, "y", field), f"{field}.y"),
    )


def _required_vec2(data: JsonObject, key: str, context: str) -> Vec2:
    return _vec2_from_json(_require(data, key, context), key)


def _required_float(data: JsonObject, key: str, context: str) -> float:
    return _as_float(_require(data, key, context), key)


def _ref_to_json(r: EntityRefDto) -> JsonObject:
    return {"id": r.id, "anchor": int(r.anchor)}


def _ref_from_json(value: Any) -> EntityRefDto:
    obj = _as_object(value, "refs[]")
    return EntityRefDto(
        id=_as_id(_require(obj, "id", "EntityRef"), "id"),
        anchor=_as_enum(EntityAnchor, _require(obj, "anchor", "EntityRef"), "anchor", "anchor"),
    )


def _refs_from_json(data: JsonObject) -> List[EntityRefDto]:
    return [_ref_from_json(r) for r in _optional(data, "refs", [], _as_list)]


def _meta_to_json(m: ConstraintMetaDto) -> JsonObject:
    return {"id": m.id, "name": m.name, "enabled": m.enabled, "suppressed": m.suppressed}


def _meta_from_json(value: Any) -> ConstraintMetaDto:
    obj = _as_object(value, "meta")
    return ConstraintMetaDto(
        id=_as_id(_require(obj, "id", "ConstraintMeta"), "id"),
        name=_optional(obj, "name", "", _as_str),
        enabled=_optional(obj, "enabled", True, _as_bool),
        suppressed=_optional(obj, "suppressed", False, _as_bool),
    )


# =============================================================================
# Entity-Payloads
# =============================================================================

def _header_to_json(e: EntityDto) -> JsonObject:
    j: JsonObject = {"id": e.id}
    if e.name:
        j["name"] = e.name
    if e.construction:
        j["construction"] = True
    if not e.visible:
        j["visible"] = False
    if not e.selectable:
        j["selectable"] = False
    return j


def _header_from_json(data: JsonObject, context: str) -> JsonObject:
    return {
        "id": _as_id(_require(data, "id", context), "id"),
        "name": _optional(data, "name", "", _as_str),
        "construction": _optional(data, "construction", False, _as_bool),
        "visible": _optional(data, "visible", True, _as_bool),
        "selectable": _optional(data, "selectable", True, _as_bool),
    }


def _point_to_json(e: PointDto) -> JsonObject:
    j = _header_to_json(e)
    j["p"] = _vec2_to_json(e.p)
    return j


def _point_from_json(data: JsonObject) -> PointDto:
    return PointDto(p=_required_vec2(data, "p", "Point"), **_header_from_json(data, "Point"))


def _line_to_json(e: LineDto) -> JsonObject:
    j = _header_to_json(e)
    j["a"] = _vec2_to_json(e.a)
    j["b"] = _vec2_to_json(e.b)
    return j


def _line_from_json(data: JsonObject) -> LineDto:
    return LineDto(
        a=_required_vec2(data, "a", "Line"),
        b=_required_vec2(data, "b", "Line"),
        **_header_from_json(data, "Line"),
    )


def _circle_to_json(e: CircleDto) -> JsonObject:
    j = _header_to_json(e)
    j["center"] = _vec2_to_json(e.center)
    j["radius"] = e.radius
    return j


def _circle_from_json(data: JsonObject) -> CircleDto:
    return CircleDto(
        center=_required_vec2(data, "center", "Circle"),
        radius=_required_float(data, "radius", "Circle"),
        **_header_from_json(data, "Circle"),
    )


def _arc_to_json(e: ArcDto) -> JsonObject:
    j = _header_to_json(e)
    j["center"] = _vec2_to_json(e.center)
    j["radius"] = e.radius
    j["start"] = _vec2_to_json(e.start)
    j["end"] = _vec2_to_json(e.end)
    j["ccw"] = e.ccw
    return j


def _arc_from_json(data: JsonObject) -> ArcDto:
    return ArcDto(
        center=_required_vec2(data, "center", "Arc"),
        radius=_required_float(data, "radius", "Arc"),
        start=_required_vec2(data, "start", "Arc"),
        end=_required_vec2(data, "end", "Arc"),
        ccw=_optional(data, "ccw", True, _as_bool),
        **_header_from_json(data, "Arc"),
    )


def _ellipse_to_json(e: EllipseDto) -> JsonObject:
    j = _header_to_json(e)
    j["center"] = _vec2_to_json(e.center)
    j["rx"] = e.rx
    j["ry"] = e.ry
    j["rotation"] = e.rotation
    return j


def _ellipse_from_json(data: JsonObject) -> EllipseDto:
    return EllipseDto(
        center=_required_vec2(data, "center", "Ellipse"),
        rx=_required_float(data, "rx", "Ellipse"),
        ry=_required_float(data, "ry", "Ellipse"),
        rotation=_optional(data, "rotation", 0.0, _as_float),
        **_header_from_json(data, "Ellipse"),
    )


def _curve_to_json(e: CurveDto) -> JsonObject:
    j = _header_to_json(e)
    j["controlPoints"] = [_vec2_to_json(p) for p in e.control_points]
    j["closed"] = e.closed
    return j


def _curve_from_json(data: JsonObject) -> CurveDto:
    points = _optional(data, "controlPoints", [], _as_list)
    return CurveDto(
        control_points=[_vec2_from_json(p, "controlPoints[]") for p in points],
        closed=_optional(data, "closed", False, _as_bool),
        **_header_from_json(data, "Curve"),
    )


# =============================================================================
# Constraint-Payloads
# =============================================================================

def _geometric_to_json(c: GeometricConstraintDto) -> JsonObject:
    j: JsonObject = {
        "meta": _meta_to_json(c.meta),
        "type": int(c.type),
        "refs": [_ref_to_json(r) for r in c.refs],
    }
    if c.param is not None:
        j["param"] = c.param
    return j


def _geometric_from_json(data: JsonObject) -> GeometricConstraintDto:
    return GeometricConstraintDto(
        meta=_meta_from_json(_require(data, "meta", "Geometric")),
        type=_as_enum(GeometricConstraintType, _require(data, "type", "Geometric"), "type", "geometric constraint"),
        refs=_refs_from_json(data),
        param=_optional(data, "param", None, _as_float),
    )


def _dimensional_to_json(c: DimensionalConstraintDto) -> JsonObject:
    return {
        "meta": _meta_to_json(c.meta),
        "type": int(c.type),
        "refs": [_ref_to_json(r) for r in c.refs],
        "value": c.value,
        "driving": c.driving,
        "units": c.units,
    }


def _dimensional_from_json(data: JsonObject) -> DimensionalConstraintDto:
    return DimensionalConstraintDto(
        meta=_meta_from_json(_require(data, "meta", "Dimensional")),
        type=_as_enum(DimensionalConstraintType, _require(data, "type", "Dimensional"), "type", "dimensional constraint"),
        refs=_refs_from_json(data),
        value=_required_float(data, "value", "Dimensional"),
        driving=_optional(data, "driving", True, _as_bool),
        units=_optional(data, "units", "mm", _as_str),
    )


# =============================================================================
# Tagged-Union Dispatch-Tabellen
# =============================================================================

@dataclass(frozen=True)
class KindCodec:
    """Codec für eine Envelope-Art."""
    tag: str
    dto_type: type
    encode: Callable[[Any], JsonObject]
    decode: Callable[[JsonObject], Any]


class _UnionRegistry:
    """Tag <-> DTO-Typ Dispatch für eine Tagged Union."""

    def __init__(self, category: str):
        self.category = category
        self._by_tag: Dict[str, KindCodec] = {}
        self._by_type: Dict[type, KindCodec] = {}

    def register(self, codec: KindCodec) -> None:
        if codec.tag in self._by_tag or codec.dto_type in self._by_type:
            raise ValueError(f"{self.category} codec already registered: {codec.tag}")
        self._by_tag[codec.tag] = codec
        self._by_type[codec.dto_type] = codec

    def tags(self) -> Tuple[str, ...]:
        return tuple(self._by_tag)

    def encode(self, value: Any) -> JsonObject:
        codec = self._by_type.get(type(value))
        if codec is None:
            raise UnknownKindError(self.category, type(value).__name__)
        return {"kind": codec.tag, "data": codec.encode(value)}

    def decode(self, envelope: Any) -> Any:
        obj = _as_object(envelope, f"{self.category} envelope")
        tag = _as_str(_require(obj, "kind", f"{self.category} envelope"), "kind")
        data = _as_object(_require(obj, "data", f"{self.category} envelope"), "data")
        codec = self._by_tag.get(tag)
        if codec is None:
            raise UnknownKindError(self.category, tag)
        return codec.decode(data)


_ENTITY_CODECS = _UnionRegistry("entity")
_CONSTRAINT_CODECS = _UnionRegistry("constraint")


def _register_builtin_codecs() -> None:
    for codec in (
        KindCodec("Point", PointDto, _point_to_json, _point_from_json),
        KindCodec("Line", LineDto, _line_to_json, _line_from_json),
        KindCodec("Circle", CircleDto, _circle_to_json, _circle_from_json),
        KindCodec("Arc", ArcDto, _arc_to_json, _arc_from_json),
        KindCodec("Ellipse", EllipseDto, _ellipse_to_json, _ellipse_from_json),
        KindCodec("Curve", CurveDto, _curve_to_json, _curve_from_json),
    ):
        _ENTITY_CODECS.register(codec)

    _CONSTRAINT_CODECS.register(
        KindCodec("Geometric", GeometricConstraintDto, _geometric_to_json, _geometric_from_json))
    _CONSTRAINT_CODECS.register(
        KindCodec("Dimensional", DimensionalConstraintDto, _dimensional_to_json, _dimensional_from_json))


_register_builtin_codecs()

ENTITY_TAGS = _ENTITY_CODECS.tags()
CONSTRAINT_TAGS = _CONSTRAINT_CODECS.tags()


# =============================================================================
# Öffentliche API
# =============================================================================

def entity_to_json(entity: EntityDto) -> JsonObject:
    return _ENTITY_CODECS.encode(entity)


def entity_from_json(envelope: Any) -> EntityDto:
    return _ENTITY_CODECS.decode(envelope)


def constraint_to_json(constraint: ConstraintDto) -> JsonObject:
    return _CONSTRAINT_CODECS.encode(constraint)


def constraint_from_json(envelope: Any) -> ConstraintDto:
    return _CONSTRAINT_CODECS.decode(envelope)


def sketch_to_json(s: SketchDto) -> JsonObject:
    return {
        "id": s.id,
        "name": s.name,
        "visible": s.visible,
        "entities": [entity_to_json(e) for e in s.entities],
        "constraints": [constraint_to_json(c) for c in s.constraints],
    }


def sketch_from_json(value: Any) -> SketchDto:
    data = _as_object(value, "sketches[]")
    return SketchDto(
        id=_as_id(_require(data, "id", "Sketch"), "id"),
        name=_optional(data, "name", "", _as_str),
        visible=_optional(data, "visible", True, _as_bool),
        entities=[entity_from_json(e) for e in _optional(data, "entities", [], _as_list)],
        constraints=[constraint_from_json(c) for c in _optional(data, "constraints", [], _as_list)],
    )


def document_to_json(d: DocumentDto) -> JsonObject:
    return {"id": d.id, "name": d.name, "sketches": [sketch_to_json(s) for s in d.sketches]}


def document_from_json(value: Any) -> DocumentDto:
    data = _as_object(value, "document")
    return DocumentDto(
        id=_as_id(_require(data, "id", "Document"), "id"),
        name=_optional(data, "name", "", _as_str),
        sketches=[sketch_from_json(s) for s in _optional(data, "sketches", [], _as_list)],
    )


def file_to_json(f: FileDto) -> JsonObject:
    return {"fileVersion": f.file_version, "document": document_to_json(f.document)}


def file_from_json(value: Any, check_version: bool = True) -> FileDto:
    """
    Dekodiert die Datei-Hülle.

    Fehlt fileVersion, gilt die aktuelle Version. Mit check_version läuft die
    Versionsprüfung, bevor das Dokument (und damit jede Entity) geparst wird.

    Raises:
        UnsupportedVersionError: fileVersion != SKETCH_FILE_VERSION (nur mit check_version)
        MissingFieldError: "document" oder ein anderes Pflichtfeld fehlt
        UnknownKindError: unbekannter Envelope-Tag oder Enum-Wert
        InvalidFieldError: Wert mit falschem JSON-Typ
    """
    if not isinstance(value, dict):
        raise MalformedFileError(f"Sketch file must be a JSON object, got {type(value).__name__}")

    version = _optional(value, "fileVersion", SKETCH_FILE_VERSION, _as_int)
    if check_version and version != SKETCH_FILE_VERSION:
        raise UnsupportedVersionError(version, SKETCH_FILE_VERSION)

    document = document_from_json(_require(value, "document", "file"))

    if is_enabled("persistence_debug"):
        logger.debug(f"[CODEC] fileVersion={version}, document={document.id}, sketches={len(document.sketches)}")

    return FileDto(document=document, file_version=version)


def dumps(f: FileDto, indent: Optional[int] = 2) -> str:
    """
    Serialisiert ein FileDto zu JSON-Text (Nicht-ASCII bleibt erhalten).

    Raises:
        InvalidFieldError: NaN oder Infinity in einem Zahlenfeld
    """
    try:
        return json.dumps(file_to_json(f), indent=indent, ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise InvalidFieldError("number", str(e), "finite number") from e


def loads(text: str, check_version: bool = True) -> FileDto:
    """
    Parst JSON-Text zu einem FileDto.

    Raises:
        MalformedFileError: kein gültiges JSON, Zahl über dem Ziffern-Limit
            oder zu tief verschachtelt
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        # JSONDecodeError und das int-Ziffern-Limit sind beides ValueError
        raise MalformedFileError(f"Invalid JSON in sketch file: {e}") from e
    except RecursionError as e:
        raise MalformedFileError("Sketch file is nested too deeply") from e
    return file_from_json(data, check_version=check_version)
