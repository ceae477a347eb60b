import pytest

from config.feature_flags import set_flag
from sketcher import (
    Arc2D, Circle2D, Curve2D, Document, Ellipse2D, EntityAnchor, EntityHeader,
    EntityRef, Line2D, Point2D, Sketch, Vec2,
    make_coincident, make_horizontal, make_radius,
)


# Global Feature Flag Defaults - Single Source of Truth for Test Isolation
# ========================================================================
# WICHTIG: Jeder Test muss mit sauberen Feature-Flags starten.
# Diese Defaults müssen mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    # Debug-Modi
    "sketch_debug": False,
    "persistence_debug": False,
    "render_debug": False,

    # Datei-Format
    "compact_json": False,
}


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """
    Globale Feature-Flag-Isolation.

    Stellt sicher, dass jeder Test mit sauberen, deterministischen
    Feature-Flags startet und keine Mutationen in andere Tests leaken.
    """
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)

    yield

    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)


@pytest.fixture
def mixed_sketch() -> Sketch:
    """Sketch mit allen sechs Entity-Arten, absichtlich verschachtelt eingefügt."""
    sketch = Sketch(id=10, name="Mixed")
    store = sketch.entities
    store.add_line(Line2D(EntityHeader(100, name="base"), Vec2(0, 0), Vec2(10, 0)))
    store.add_point(Point2D(EntityHeader(1), Vec2(5, 5)))
    store.add_circle(Circle2D(EntityHeader(200, construction=True), Vec2(2, 2), 3.0))
    store.add_line(Line2D(EntityHeader(101, visible=False), Vec2(10, 0), Vec2(10, 10)))
    store.add_arc(Arc2D(EntityHeader(300), Vec2(0, 0), 5.0, Vec2(5, 0), Vec2(0, 5), ccw=False))
    store.add_ellipse(Ellipse2D(EntityHeader(400, selectable=False), Vec2(1, 1), 4.0, 2.0, 0.5))
    store.add_curve(Curve2D(EntityHeader(500), [Vec2(0, 0), Vec2(1, 2), Vec2(3, 1)], closed=True))
    store.add_point(Point2D(EntityHeader(2, name="p2"), Vec2(-1, -1)))

    sketch.add_constraint(make_horizontal(1000, EntityRef(100, EntityAnchor.LINE_START)))
    sketch.add_constraint(make_coincident(1001, EntityRef(100, EntityAnchor.LINE_END),
                                          EntityRef(101, EntityAnchor.LINE_START)))
    sketch.add_constraint(make_radius(1002, EntityRef(200, EntityAnchor.CENTER), 3.0, driving=False))
    return sketch


@pytest.fixture
def mixed_document(mixed_sketch) -> Document:
    doc = Document(id=1, name="Doc")
    doc.add_sketch(mixed_sketch)
    doc.add_sketch(Sketch(id=11, name="Empty", visible=False))
    return doc
