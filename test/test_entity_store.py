"""
Tests für sketcher/entity_store.py - typisierte Ablage mit Id-Index.
"""

import pytest

from sketcher import (
    Arc2D, Circle2D, Curve2D, DuplicateIdError, Ellipse2D, EntityHandle,
    EntityHeader, EntityKind, EntityNotFoundError, EntityStore,
    IndexOutOfRangeError, Line2D, Point2D, Vec2,
)

pytestmark = [pytest.mark.sketch]


def _line(eid, x1=0.0, y1=0.0, x2=10.0, y2=0.0, **header):
    return Line2D(EntityHeader(eid, **header), Vec2(x1, y1), Vec2(x2, y2))


def _point(eid, x=0.0, y=0.0):
    return Point2D(EntityHeader(eid), Vec2(x, y))


class TestInsert:

    def test_handles_are_dense_per_kind(self):
        store = EntityStore()
        assert store.add_line(_line(1)) == EntityHandle(EntityKind.LINE, 0)
        assert store.add_point(_point(2)) == EntityHandle(EntityKind.POINT, 0)
        assert store.add_line(_line(3)) == EntityHandle(EntityKind.LINE, 1)
        assert store.add_circle(Circle2D(EntityHeader(4))) == EntityHandle(EntityKind.CIRCLE, 0)
        assert store.add_arc(Arc2D(EntityHeader(5))) == EntityHandle(EntityKind.ARC, 0)
        assert store.add_ellipse(Ellipse2D(EntityHeader(6))) == EntityHandle(EntityKind.ELLIPSE, 0)
        assert store.add_curve(Curve2D(EntityHeader(7))) == EntityHandle(EntityKind.CURVE, 0)
        assert len(store) == 7

    def test_duplicate_id_raises_and_leaves_store_unchanged(self):
        store = EntityStore()
        store.add_line(_line(100))
        store.add_point(_point(1))

        with pytest.raises(DuplicateIdError) as exc_info:
            store.add_circle(Circle2D(EntityHeader(100), Vec2(0, 0), 2.0))

        assert exc_info.value.entity_id == 100
        assert len(store) == 2
        assert store.circles() == ()
        assert store.get_handle(100) == EntityHandle(EntityKind.LINE, 0)
        assert store.line(0).b == Vec2(10, 0)

    def test_duplicate_id_within_same_kind(self):
        store = EntityStore()
        store.add_point(_point(5, 1, 1))
        with pytest.raises(DuplicateIdError):
            store.add_point(_point(5, 2, 2))
        assert store.points() == (store.point(0),)
        assert store.point(0).p == Vec2(1, 1)

    def test_wrong_entity_type_rejected(self):
        store = EntityStore()
        with pytest.raises(TypeError):
            store.add_line(_point(1))
        assert len(store) == 0
        assert not store.contains(1)

    def test_generic_add_dispatches_on_kind(self):
        store = EntityStore()
        handle = store.add(Ellipse2D(EntityHeader(9), rx=3.0, ry=1.5))
        assert handle == EntityHandle(EntityKind.ELLIPSE, 0)
        assert store.ellipse(0).rx == 3.0

    def test_generic_add_rejects_non_entity(self):
        store = EntityStore()
        with pytest.raises(TypeError):
            store.add(Vec2(1, 2))


class TestLookup:

    def test_contains(self):
        store = EntityStore()
        store.add_line(_line(42))
        assert store.contains(42)
        assert 42 in store
        assert not store.contains(43)
        assert 43 not in store

    def test_get_handle_missing_raises_not_found(self):
        store = EntityStore()
        store.add_line(_line(1))
        with pytest.raises(EntityNotFoundError) as exc_info:
            store.get_handle(999)
        assert exc_info.value.entity_id == 999

    def test_not_found_is_lookup_error(self):
        with pytest.raises(LookupError):
            EntityStore().get_handle(1)

    def test_get_and_resolve(self):
        store = EntityStore()
        store.add_point(_point(1))
        handle = store.add_line(_line(2, 1, 2, 3, 4))
        line = store.get(2)
        assert store.resolve(handle) is line
        assert line.a == Vec2(1, 2)
        assert line.kind is EntityKind.LINE

    def test_typed_accessor_out_of_range(self):
        store = EntityStore()
        store.add_line(_line(1))
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            store.line(1)
        assert exc_info.value.kind is EntityKind.LINE
        assert exc_info.value.size == 1
        with pytest.raises(IndexOutOfRangeError):
            store.circle(0)

    def test_negative_index_rejected(self):
        store = EntityStore()
        store.add_point(_point(1))
        with pytest.raises(IndexError):
            store.point(-1)

    def test_accessor_returns_mutable_entity(self):
        store = EntityStore()
        store.add_line(_line(1))
        store.line(0).b = Vec2(20, 0)
        assert store.get(1).length == pytest.approx(20.0)


class TestBulkAccess:

    def test_insertion_order_within_kind(self):
        store = EntityStore()
        for eid in (30, 10, 20):
            store.add_point(_point(eid, eid, 0))
        assert [p.id for p in store.points()] == [30, 10, 20]

    def test_bulk_accessor_is_read_only_snapshot(self):
        store = EntityStore()
        store.add_point(_point(1))
        points = store.points()
        assert isinstance(points, tuple)
        store.add_point(_point(2))
        assert len(points) == 1
        assert len(store.points()) == 2

    def test_iter_entities_grouped_by_kind(self):
        store = EntityStore()
        store.add_curve(Curve2D(EntityHeader(6)))
        store.add_line(_line(2))
        store.add_point(_point(1))
        store.add_circle(Circle2D(EntityHeader(3)))
        assert [e.id for e in store.iter_entities()] == [1, 2, 3, 6]
        assert store.ids() == [6, 2, 1, 3]

    def test_count_per_kind(self, mixed_sketch):
        store = mixed_sketch.entities
        assert store.count(EntityKind.POINT) == 2
        assert store.count(EntityKind.LINE) == 2
        assert store.count(EntityKind.CURVE) == 1
        assert len(store) == 8


class TestClear:

    def test_clear_empties_arrays_and_index(self, mixed_sketch):
        store = mixed_sketch.entities
        store.clear()
        assert len(store) == 0
        assert not store.contains(100)
        for kind in EntityKind:
            assert store.count(kind) == 0
        with pytest.raises(EntityNotFoundError):
            store.get_handle(100)

    def test_ids_reusable_after_clear(self):
        store = EntityStore()
        store.add_line(_line(1))
        store.clear()
        assert store.add_point(_point(1)) == EntityHandle(EntityKind.POINT, 0)
