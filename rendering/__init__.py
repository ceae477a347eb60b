"""
Pistachio Rendering Module
Renderer-agnostische Projektion von Sketches in 3D-Primitives.
"""

from .render_scene import (
    Color, Point3D, Line3D, Polyline3D, Circle3D, Arc3D, Ellipse3D,
    GridPlane, RenderScene, vec3,
)

from .sketch_render_builder import (
    SketchRenderOptions,
    build_render_scene_from_sketch,
    build_render_scene_from_document,
)
