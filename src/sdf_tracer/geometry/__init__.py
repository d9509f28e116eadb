"""Geometry module for implicit surfaces.

Components:
    surface: Surface kind tag, Python-side Surface base class, errors
    sphere: Sphere signed distance, normal estimate, analytic intersection

Kernels never see Python surface objects. Each surface is stored as a
tagged slot in the scene fields and dispatched on its SurfaceKind.
"""

from .sphere import (
    Sphere,
    SphereSurface,
    intersect_sphere,
    make_sphere,
    sphere_distance,
    try_sphere_normal,
)
from .surface import DegenerateNormalError, Surface, SurfaceKind

__all__ = [
    "Surface",
    "SurfaceKind",
    "DegenerateNormalError",
    "Sphere",
    "SphereSurface",
    "make_sphere",
    "sphere_distance",
    "try_sphere_normal",
    "intersect_sphere",
]
