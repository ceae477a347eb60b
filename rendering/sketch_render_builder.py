"""
Pistachio Rendering - Sketch -> RenderScene

Reine Funktion ohne Zustand und Seiteneffekte, kann jeden Frame aufgerufen
werden. Unsichtbare Entities werden verworfen, alles andere landet auf der
Ebene z = options.z.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from sketcher.geometry import EntityHeader, Vec2
from sketcher.sketch import Document, Sketch

from .render_scene import (
    Arc3D, Circle3D, Color, Ellipse3D, GridPlane, Line3D, Point3D, Polyline3D,
    RenderScene, vec3,
)


@dataclass
class SketchRenderOptions:
    z: float = 0.0

    entity_color: Color = (0.1, 0.2, 0.9, 1.0)
    construction_color: Color = (0.3, 0.3, 0.6, 0.6)
    point_color: Color = (0.9, 0.9, 0.9, 1.0)

    line_thickness: float = 2.0
    point_size: float = 6.0

    grid_spacing: float = 10.0
    grid_line_count: int = 40
    show_grid: bool = True


def _to_world(v: Vec2, z: float) -> np.ndarray:
    return vec3(v.x, v.y, z)


def _color(header: EntityHeader, opt: SketchRenderOptions, normal: Color) -> Color:
    return opt.construction_color if header.construction else normal


def _workplane(opt: SketchRenderOptions) -> GridPlane:
    return GridPlane(
        origin=vec3(0.0, 0.0, opt.z),
        u_axis=vec3(1.0, 0.0, 0.0),
        v_axis=vec3(0.0, 1.0, 0.0),
        spacing=opt.grid_spacing,
        line_count=opt.grid_line_count,
    )


def build_render_scene_from_sketch(sketch: Sketch, options: Optional[SketchRenderOptions] = None) -> RenderScene:
    """Projiziert einen Sketch in eine renderer-agnostische 3D-Szene."""
    opt = options or SketchRenderOptions()
    z = opt.z
    store = sketch.entities

    scene = RenderScene(grid=_workplane(opt), show_grid=opt.show_grid)

    # --- Punkte ---
    for p in store.points():
        if not p.header.visible:
            continue
        scene.points.append(Point3D(
            id=p.id,
            p=_to_world(p.p, z),
            color=_color(p.header, opt, opt.point_color),
            size=opt.point_size,
            selectable=p.header.selectable,
        ))

    # --- Linien ---
    for l in store.lines():
        if not l.header.visible:
            continue
        scene.lines.append(Line3D(
            id=l.id,
            a=_to_world(l.a, z),
            b=_to_world(l.b, z),
            color=_color(l.header, opt, opt.entity_color),
            thickness=opt.line_thickness,
            selectable=l.header.selectable,
        ))

    # --- Kreise ---
    for c in store.circles():
        if not c.header.visible:
            continue
        scene.circles.append(Circle3D(
            id=c.id,
            center=_to_world(c.center, z),
            radius=float(c.radius),
            color=_color(c.header, opt, opt.entity_color),
            thickness=opt.line_thickness,
            selectable=c.header.selectable,
            construction=c.header.construction,
        ))

    # --- Bögen ---
    for a in store.arcs():
        if not a.header.visible:
            continue
        scene.arcs.append(Arc3D(
            id=a.id,
            center=_to_world(a.center, z),
            radius=float(a.radius),
            start=_to_world(a.start, z),
            end=_to_world(a.end, z),
            ccw=a.ccw,
            color=_color(a.header, opt, opt.entity_color),
            thickness=opt.line_thickness,
            selectable=a.header.selectable,
            construction=a.header.construction,
        ))

    # --- Ellipsen ---
    for e in store.ellipses():
        if not e.header.visible:
            continue
        scene.ellipses.append(Ellipse3D(
            id=e.id,
            center=_to_world(e.center, z),
            rx=float(e.rx),
            ry=float(e.ry),
            rotation_rad=float(e.rotation),
            color=_color(e.header, opt, opt.entity_color),
            thickness=opt.line_thickness,
            selectable=e.header.selectable,
            construction=e.header.construction,
        ))

    # --- Kurven: Polylinie direkt aus den Kontrollpunkten ---
    for cv in store.curves():
        if not cv.header.visible or len(cv.control_points) < 2:
            continue
        pts = [(cp.x, cp.y, z) for cp in cv.control_points]
        if cv.closed:
            pts.append(pts[0])
        scene.polylines.append(Polyline3D(
            id=cv.id,
            points=np.array(pts, dtype=np.float32),
            color=_color(cv.header, opt, opt.entity_color),
            thickness=opt.line_thickness,
            selectable=cv.header.selectable,
            construction=cv.header.construction,
        ))

    if is_enabled("render_debug"):
        logger.debug(f"[RENDER] Sketch {sketch.id}: {scene}")

    return scene


def build_render_scene_from_document(doc: Document, options: Optional[SketchRenderOptions] = None) -> RenderScene:
    """Fasst alle sichtbaren Sketches eines Dokuments in einer Szene zusammen."""
    opt = options or SketchRenderOptions()
    scene = RenderScene(grid=_workplane(opt), show_grid=opt.show_grid)
    for sketch in doc.sketches:
        if sketch.visible:
            scene.extend(build_render_scene_from_sketch(sketch, opt))
    return scene
