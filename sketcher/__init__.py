"""
Pistachio Sketcher Module
"""

from .ids import (
    DocumentId, SketchId, EntityId, ConstraintId,
    EntityKind, EntityAnchor, EntityRef,
)

from .geometry import (
    Vec2, EntityHeader,
    Point2D, Line2D, Circle2D, Arc2D, Ellipse2D, Curve2D, SketchEntity,
)

from .entity_store import EntityStore, EntityHandle

from .constraints import (
    Constraint, ConstraintMeta,
    GeometricConstraint, GeometricConstraintType,
    DimensionalConstraint, DimensionalConstraintType,
    constraint_refs,
    make_horizontal, make_vertical, make_coincident, make_tangent,
    make_perpendicular, make_parallel, make_collinear, make_midpoint,
    make_concentric, make_symmetry, make_fix, make_curvature,
    make_distance, make_length, make_angle, make_radius, make_diameter,
)

from .sketch import Sketch, Document

from .errors import (
    SketchError, DuplicateIdError, EntityNotFoundError, IndexOutOfRangeError,
    SketchFormatError, UnsupportedVersionError, MissingFieldError,
    InvalidFieldError, UnknownKindError, MalformedFileError, SketchIOError,
)
