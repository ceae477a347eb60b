"""
Pistachio Rendering - Renderer-agnostische Szene

Typisierte 3D-Primitives, die ein externer Renderer konsumiert.
Kreise, Bögen und Ellipsen bleiben echte Kurven-Primitives (keine
Tessellierung); der Renderer entscheidet selbst über die Auflösung.

Vektoren sind numpy float32 Arrays der Form (3,), Polylinien (N, 3).
Primitives vergleichen per Identität (eq=False).
"""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

Color = Tuple[float, float, float, float]  # RGBA 0..1

WHITE: Color = (1.0, 1.0, 1.0, 1.0)


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    return np.array([x, y, z], dtype=np.float32)


def _z_axis() -> np.ndarray:
    return vec3(0.0, 0.0, 1.0)


def _empty_polyline() -> np.ndarray:
    return np.zeros((0, 3), dtype=np.float32)


@dataclass(eq=False)
class Point3D:
    id: int
    p: np.ndarray = field(default_factory=vec3)
    color: Color = WHITE
    size: float = 4.0
    selectable: bool = True


@dataclass(eq=False)
class Line3D:
    id: int
    a: np.ndarray = field(default_factory=vec3)
    b: np.ndarray = field(default_factory=vec3)
    color: Color = WHITE
    thickness: float = 1.0
    selectable: bool = True


@dataclass(eq=False)
class Polyline3D:
    id: int
    points: np.ndarray = field(default_factory=_empty_polyline)
    color: Color = WHITE
    thickness: float = 1.0
    selectable: bool = True
    construction: bool = False


@dataclass(eq=False)
class Circle3D:
    id: int
    center: np.ndarray = field(default_factory=vec3)
    normal: np.ndarray = field(default_factory=_z_axis)  # Ebenen-Normale
    radius: float = 1.0
    color: Color = WHITE
    thickness: float = 1.0
    selectable: bool = True
    construction: bool = False


@dataclass(eq=False)
class Arc3D:
    """Bogen über Mittelpunkt, Radius und Start-/Endpunkt in Weltkoordinaten"""
    id: int
    center: np.ndarray = field(default_factory=vec3)
    normal: np.ndarray = field(default_factory=_z_axis)
    radius: float = 1.0
    start: np.ndarray = field(default_factory=lambda: vec3(1.0, 0.0, 0.0))
    end: np.ndarray = field(default_factory=lambda: vec3(0.0, 1.0, 0.0))
    ccw: bool = True
    color: Color = WHITE
    thickness: float = 1.0
    selectable: bool = True
    construction: bool = False


@dataclass(eq=False)
class Ellipse3D:
    """Ellipse; rotation_rad dreht um die Normale, 0 = Hauptachse entlang +X"""
    id: int
    center: np.ndarray = field(default_factory=vec3)
    normal: np.ndarray = field(default_factory=_z_axis)
    rx: float = 2.0
    ry: float = 1.0
    rotation_rad: float = 0.0
    color: Color = WHITE
    thickness: float = 1.0
    selectable: bool = True
    construction: bool = False


@dataclass(eq=False)
class GridPlane:
    """Arbeitsebene (Workplane) für das Raster"""
    origin: np.ndarray = field(default_factory=vec3)
    u_axis: np.ndarray = field(default_factory=lambda: vec3(1.0, 0.0, 0.0))
    v_axis: np.ndarray = field(default_factory=lambda: vec3(0.0, 1.0, 0.0))
    spacing: float = 10.0
    line_count: int = 20
    major_color: Color = (0.4, 0.4, 0.4, 1.0)
    minor_color: Color = (0.2, 0.2, 0.2, 1.0)
    visible: bool = True


@dataclass(eq=False)
class RenderScene:
    points: List[Point3D] = field(default_factory=list)
    lines: List[Line3D] = field(default_factory=list)
    polylines: List[Polyline3D] = field(default_factory=list)
    circles: List[Circle3D] = field(default_factory=list)
    arcs: List[Arc3D] = field(default_factory=list)
    ellipses: List[Ellipse3D] = field(default_factory=list)

    grid: GridPlane = field(default_factory=GridPlane)
    show_grid: bool = True

    def clear(self):
        """Entfernt alle Primitives, Raster bleibt erhalten."""
        self.points.clear()
        self.lines.clear()
        self.polylines.clear()
        self.circles.clear()
        self.arcs.clear()
        self.ellipses.clear()

    def primitive_count(self) -> int:
        return (len(self.points) + len(self.lines) + len(self.polylines)
                + len(self.circles) + len(self.arcs) + len(self.ellipses))

    def extend(self, other: 'RenderScene'):
        """Übernimmt alle Primitives einer anderen Szene (Raster nicht)."""
        self.points.extend(other.points)
        self.lines.extend(other.lines)
        self.polylines.extend(other.polylines)
        self.circles.extend(other.circles)
        self.arcs.extend(other.arcs)
        self.ellipses.extend(other.ellipses)

    def __repr__(self):
        return (f"RenderScene(points={len(self.points)}, lines={len(self.lines)}, "
                f"polylines={len(self.polylines)}, circles={len(self.circles)}, "
                f"arcs={len(self.arcs)}, ellipses={len(self.ellipses)})")
