"""
Tests für persistence/json_codec.py

Envelope-Format, Default-Behandlung der Header-Felder und Fehlerfälle
beim Dekodieren.
"""

import json

import pytest

from persistence import (
    SKETCH_FILE_VERSION, ArcDto, CircleDto, ConstraintMetaDto, CurveDto,
    DimensionalConstraintDto, DocumentDto, EllipseDto, EntityRefDto, FileDto,
    GeometricConstraintDto, LineDto, PointDto, SketchDto,
)
from persistence import json_codec
from persistence.json_codec import (
    CONSTRAINT_TAGS, ENTITY_TAGS, KindCodec, constraint_from_json,
    constraint_to_json, entity_from_json, entity_to_json, file_from_json,
    file_to_json, _UnionRegistry,
)
from sketcher import (
    DimensionalConstraintType, EntityAnchor, GeometricConstraintType,
    InvalidFieldError, MalformedFileError, MissingFieldError, UnknownKindError,
    UnsupportedVersionError, Vec2,
)

pytestmark = [pytest.mark.persistence]


def _file(*entities, constraints=()):
    sketch = SketchDto(id=10, name="S", entities=list(entities), constraints=list(constraints))
    return FileDto(document=DocumentDto(id=1, name="D", sketches=[sketch]))


class TestEnvelopes:

    def test_registered_tags(self):
        assert ENTITY_TAGS == ("Point", "Line", "Circle", "Arc", "Ellipse", "Curve")
        assert CONSTRAINT_TAGS == ("Geometric", "Dimensional")

    def test_line_envelope_omits_default_header(self):
        j = entity_to_json(LineDto(id=100, a=Vec2(0, 0), b=Vec2(10, 0)))
        assert j == {
            "kind": "Line",
            "data": {"id": 100, "a": {"x": 0.0, "y": 0.0}, "b": {"x": 10.0, "y": 0.0}},
        }

    def test_non_default_header_written(self):
        j = entity_to_json(PointDto(id=1, name="P", construction=True, visible=False,
                                    selectable=False, p=Vec2(1, 2)))
        data = j["data"]
        assert data["name"] == "P"
        assert data["construction"] is True
        assert data["visible"] is False
        assert data["selectable"] is False

    def test_absent_header_fields_decode_to_defaults(self):
        line = entity_from_json({
            "kind": "Line",
            "data": {"id": 5, "a": {"x": 1, "y": 2}, "b": {"x": 3, "y": 4}},
        })
        assert line == LineDto(id=5, a=Vec2(1, 2), b=Vec2(3, 4))
        assert line.name == ""
        assert line.visible is True
        assert line.selectable is True
        assert line.construction is False

    def test_curve_uses_camel_case_key(self):
        j = entity_to_json(CurveDto(id=7, control_points=[Vec2(0, 0), Vec2(1, 1)], closed=True))
        assert j["data"]["controlPoints"] == [{"x": 0.0, "y": 0.0}, {"x": 1.0, "y": 1.0}]
        assert j["data"]["closed"] is True

    def test_curve_defaults(self):
        curve = entity_from_json({"kind": "Curve", "data": {"id": 7}})
        assert curve.control_points == []
        assert curve.closed is False

    def test_arc_and_ellipse_optional_fields(self):
        arc = entity_from_json({"kind": "Arc", "data": {
            "id": 3, "center": {"x": 0, "y": 0}, "radius": 2,
            "start": {"x": 2, "y": 0}, "end": {"x": 0, "y": 2},
        }})
        assert arc.ccw is True
        assert arc.radius == 2.0

        ellipse = entity_from_json({"kind": "Ellipse", "data": {
            "id": 4, "center": {"x": 0, "y": 0}, "rx": 3, "ry": 1,
        }})
        assert ellipse.rotation == 0.0

    def test_entity_round_trip(self):
        entities = [
            PointDto(id=1, p=Vec2(1.5, -2)),
            CircleDto(id=2, name="c", center=Vec2(1, 1), radius=0.25),
            ArcDto(id=3, center=Vec2(0, 0), radius=5, start=Vec2(5, 0), end=Vec2(0, 5), ccw=False),
            EllipseDto(id=4, construction=True, center=Vec2(2, 2), rx=4, ry=2, rotation=0.3),
        ]
        for e in entities:
            assert entity_from_json(entity_to_json(e)) == e


class TestConstraintEnvelopes:

    def test_geometric_without_param(self):
        c = GeometricConstraintDto(
            meta=ConstraintMetaDto(id=1000),
            type=GeometricConstraintType.HORIZONTAL,
            refs=[EntityRefDto(100, EntityAnchor.LINE_START)],
        )
        j = constraint_to_json(c)
        assert j == {
            "kind": "Geometric",
            "data": {
                "meta": {"id": 1000, "name": "", "enabled": True, "suppressed": False},
                "type": 0,
                "refs": [{"id": 100, "anchor": 2}],
            },
        }
        assert constraint_from_json(j) == c

    def test_geometric_param_written_when_set(self):
        c = GeometricConstraintDto(meta=ConstraintMetaDto(id=1), type=GeometricConstraintType.CURVATURE,
                                   param=0.75)
        j = constraint_to_json(c)
        assert j["data"]["param"] == 0.75
        assert j["data"]["type"] == 11

    def test_dimensional_always_writes_units(self):
        c = DimensionalConstraintDto(meta=ConstraintMetaDto(id=2), type=DimensionalConstraintType.LENGTH,
                                     refs=[EntityRefDto(1)], value=10.0, units="")
        j = constraint_to_json(c)
        assert j["data"]["units"] == ""
        assert j["data"]["driving"] is True
        assert constraint_from_json(j) == c

    def test_dimensional_defaults_on_decode(self):
        c = constraint_from_json({"kind": "Dimensional", "data": {
            "meta": {"id": 3}, "type": 3, "value": 2,
        }})
        assert c.type is DimensionalConstraintType.RADIUS
        assert c.refs == []
        assert c.driving is True
        assert c.units == "mm"
        assert c.meta.enabled is True

    def test_dimensional_value_required(self):
        with pytest.raises(MissingFieldError) as exc_info:
            constraint_from_json({"kind": "Dimensional", "data": {"meta": {"id": 3}, "type": 0}})
        assert exc_info.value.field == "value"


class TestDecodeErrors:

    def test_unknown_entity_tag(self):
        with pytest.raises(UnknownKindError) as exc_info:
            entity_from_json({"kind": "Spline", "data": {"id": 1}})
        assert exc_info.value.kind == "Spline"

    def test_unknown_constraint_tag(self):
        with pytest.raises(UnknownKindError):
            constraint_from_json({"kind": "Magic", "data": {}})

    def test_envelope_needs_kind_and_data(self):
        with pytest.raises(MissingFieldError):
            entity_from_json({"data": {"id": 1}})
        with pytest.raises(MissingFieldError):
            entity_from_json({"kind": "Point"})

    def test_missing_required_vec(self):
        with pytest.raises(MissingFieldError) as exc_info:
            entity_from_json({"kind": "Line", "data": {"id": 1, "a": {"x": 0, "y": 0}}})
        assert exc_info.value.field == "b"

    def test_missing_entity_id(self):
        with pytest.raises(MissingFieldError):
            entity_from_json({"kind": "Point", "data": {"p": {"x": 0, "y": 0}}})

    def test_unknown_anchor_value(self):
        with pytest.raises(UnknownKindError):
            constraint_from_json({"kind": "Geometric", "data": {
                "meta": {"id": 1}, "type": 0, "refs": [{"id": 1, "anchor": 99}],
            }})

    def test_unknown_constraint_type_value(self):
        with pytest.raises(UnknownKindError):
            constraint_from_json({"kind": "Geometric", "data": {"meta": {"id": 1}, "type": 42}})

    @pytest.mark.parametrize("data", [
        {"id": "1", "p": {"x": 0, "y": 0}},
        {"id": -1, "p": {"x": 0, "y": 0}},
        {"id": 1, "p": {"x": "0", "y": 0}},
        {"id": 1, "p": {"x": True, "y": 0}},
        {"id": 1, "p": [0, 0]},
        {"id": 1, "name": 5, "p": {"x": 0, "y": 0}},
        {"id": 1, "visible": "yes", "p": {"x": 0, "y": 0}},
    ])
    def test_wrong_json_types(self, data):
        with pytest.raises(InvalidFieldError):
            entity_from_json({"kind": "Point", "data": data})

    def test_number_beyond_double_range(self):
        with pytest.raises(InvalidFieldError) as exc_info:
            entity_from_json({"kind": "Circle", "data": {
                "id": 1, "center": {"x": 0, "y": 0}, "radius": 10 ** 400,
            }})
        assert exc_info.value.field == "radius"

    @pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_tokens_rejected(self, token):
        text = '{"document": {"id": 1, "sketches": [{"id": 1, "entities": [' \
               '{"kind": "Point", "data": {"id": 1, "p": {"x": %s, "y": 0}}}]}]}}' % token
        with pytest.raises(InvalidFieldError):
            json_codec.loads(text)

    def test_full_u64_id_accepted(self):
        point = entity_from_json({"kind": "Point", "data": {"id": 2 ** 64 - 1, "p": {"x": 0, "y": 0}}})
        assert point.id == 2 ** 64 - 1


class TestFileWrapper:

    def test_file_layout(self):
        j = file_to_json(_file(PointDto(id=1)))
        assert j["fileVersion"] == SKETCH_FILE_VERSION
        assert j["document"]["id"] == 1
        assert j["document"]["name"] == "D"
        sketch = j["document"]["sketches"][0]
        assert sketch["id"] == 10
        assert sketch["visible"] is True
        assert sketch["entities"][0]["kind"] == "Point"
        assert sketch["constraints"] == []

    def test_missing_document(self):
        with pytest.raises(MissingFieldError) as exc_info:
            file_from_json({"fileVersion": SKETCH_FILE_VERSION})
        assert exc_info.value.field == "document"
        assert "Missing field: document" in str(exc_info.value)

    def test_missing_file_version_reads_as_current(self):
        f = file_from_json({"document": {"id": 3}})
        assert f.file_version == SKETCH_FILE_VERSION
        assert f.document == DocumentDto(id=3)

    def test_version_checked_before_entities(self):
        """Test: Versions-Gate greift vor dem Parsen der Entities."""
        with pytest.raises(UnsupportedVersionError) as exc_info:
            file_from_json({
                "fileVersion": SKETCH_FILE_VERSION + 1,
                "document": {"id": 1, "sketches": [
                    {"id": 1, "entities": [{"kind": "NotAKind", "data": {}}]},
                ]},
            })
        assert exc_info.value.found == SKETCH_FILE_VERSION + 1
        assert exc_info.value.expected == SKETCH_FILE_VERSION

    def test_version_check_can_be_deferred(self):
        f = file_from_json({"fileVersion": 99, "document": {"id": 1}}, check_version=False)
        assert f.file_version == 99

    def test_non_object_root(self):
        with pytest.raises(MalformedFileError):
            file_from_json([1, 2, 3])

    def test_sketch_defaults(self):
        f = file_from_json({"document": {"id": 1, "sketches": [{"id": 4}]}})
        assert f.document.name == ""
        assert f.document.sketches == [SketchDto(id=4)]


class TestTextLevel:

    def test_dumps_keeps_non_ascii(self):
        text = json_codec.dumps(_file(PointDto(id=1, name="Größe")))
        assert "Größe" in text

    def test_dumps_compact(self):
        text = json_codec.dumps(_file(PointDto(id=1)), indent=None)
        assert "\n" not in text

    def test_loads_round_trip(self):
        original = _file(
            LineDto(id=100, name="base", a=Vec2(0, 0), b=Vec2(10, 0)),
            CurveDto(id=5, control_points=[Vec2(0, 0), Vec2(1, 2)]),
            constraints=[GeometricConstraintDto(
                meta=ConstraintMetaDto(id=1000, name="h"),
                type=GeometricConstraintType.HORIZONTAL,
                refs=[EntityRefDto(100, EntityAnchor.LINE_START)],
            )],
        )
        assert json_codec.loads(json_codec.dumps(original)) == original

    def test_loads_invalid_json(self):
        with pytest.raises(MalformedFileError):
            json_codec.loads("{not json")

    def test_loads_nesting_too_deep(self):
        with pytest.raises(MalformedFileError):
            json_codec.loads("[" * 200000 + "]" * 200000)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_dumps_rejects_non_finite(self, value):
        with pytest.raises(InvalidFieldError):
            json_codec.dumps(_file(CircleDto(id=1, radius=value)))

    def test_loads_parses_plain_json(self):
        text = json.dumps({"fileVersion": 1, "document": {"id": 9, "name": "x", "sketches": []}})
        assert json_codec.loads(text).document.name == "x"


class TestRegistry:

    def test_duplicate_registration_rejected(self):
        registry = _UnionRegistry("entity")
        codec = KindCodec("Point", PointDto, lambda v: {}, lambda d: PointDto(id=0))
        registry.register(codec)
        with pytest.raises(ValueError):
            registry.register(codec)

    def test_encode_unregistered_type(self):
        with pytest.raises(UnknownKindError):
            entity_to_json(SketchDto(id=1))
