"""Core rendering module.

Components:
    constants: Marching tolerance, step budget and sentinel distance
    ray: Ray data structure, reflection, refraction and Fresnel terms
    marcher: Sphere-tracing ray marcher with the ground plane fallback
    integrator: Whitted-style light transport and the frame kernels
    renderer: FrameRenderer and the render() entry point

All per-ray work runs inside Taichi functions and kernels.
"""

from .constants import EPSILON, MAX_DISTANCE, MAX_MARCHING_STEPS
from .ray import (
    Ray,
    fresnel,
    fresnel_terms,
    make_ray,
    ray_at,
    reflect,
    refract,
    refract_from_air,
    vec3,
    vec4,
)

# Note: marcher, integrator and renderer are NOT imported here to avoid
# circular imports with the scene package. Import them directly, e.g.
#   from sdf_tracer.core.renderer import FrameRenderer, render

__all__ = [
    "EPSILON",
    "MAX_DISTANCE",
    "MAX_MARCHING_STEPS",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "vec4",
    "reflect",
    "refract",
    "refract_from_air",
    "fresnel",
    "fresnel_terms",
]
