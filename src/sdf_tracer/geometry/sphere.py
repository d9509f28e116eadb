"""Sphere surface: signed distance, normal estimate and analytic intersection.

The renderer only needs the signed distance and the normal. The closed-form
ray/sphere test is kept as an analytic reference for checking marched hit
distances.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.geometry.sphere import Sphere, sphere_distance, vec3
    >>> @ti.kernel
    ... def demo() -> ti.f32:
    ...     sphere = Sphere(center=vec3(0.0, 0.0, -5.0), radius=1.0)
    ...     return sphere_distance(sphere, vec3(0.0, 0.0, 0.0))
    >>> demo()  # 4.0
"""

import math
from dataclasses import dataclass, field
from typing import ClassVar

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import EPSILON
from sdf_tracer.geometry.surface import DegenerateNormalError, Point, Surface, SurfaceKind
from sdf_tracer.materials.material import Material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)


@ti.func
def sphere_distance(sphere: Sphere, point: vec3) -> ti.f32:
    """Signed distance from point to the sphere surface: |p - c| - r."""
    return tm.length(point - sphere.center) - sphere.radius


@ti.func
def try_sphere_normal(sphere: Sphere, point: vec3):
    """Estimate the outward normal at point.

    The normal is undefined when point coincides with the center.

    Args:
        sphere: The sphere.
        point: A point, normally on or near the surface.

    Returns:
        A tuple (ok, normal). ok is 0 and normal is the zero vector when
        point lies within EPSILON of the center.
    """
    to_point = point - sphere.center
    dist = tm.length(to_point)
    ok = 0
    normal = vec3(0.0, 0.0, 0.0)
    if dist >= EPSILON:
        ok = 1
        normal = to_point / dist
    return ok, normal


@ti.func
def intersect_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Closed-form intersection of a unit-direction ray with a sphere.

    Returns the nearest non-negative ray parameter. A ray starting inside
    the sphere reports the exit point.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized ray direction.
        sphere: The sphere to test.

    Returns:
        A tuple (hit, t) where hit is 1 on intersection and t is the
        distance along the ray (only meaningful when hit is 1).
    """
    to_center = sphere.center - ray_origin
    tca = tm.dot(to_center, ray_direction)
    d2 = tm.dot(to_center, to_center) - tca * tca
    r2 = sphere.radius * sphere.radius

    hit = 0
    t = 0.0
    if d2 <= r2:
        thc = ti.sqrt(r2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        if t0 >= 0.0:
            hit = 1
            t = t0
        elif t1 >= 0.0:
            hit = 1
            t = t1
    return hit, t


@dataclass(frozen=True)
class SphereSurface(Surface):
    """Python-side description of a sphere with its material.

    Attributes:
        center: The center point (x, y, z).
        radius: The radius (must be positive).
        material: The material carried by the sphere.
    """

    center: Point
    radius: float
    material: Material = field(default_factory=Material)

    kind: ClassVar[SurfaceKind] = SurfaceKind.SPHERE

    def __post_init__(self) -> None:
        if len(self.center) != 3:
            raise ValueError(f"Sphere center must have 3 components, got {self.center}")
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius = {self.radius} must be positive.")

    def shape_params(self) -> tuple[float, float, float, float]:
        return (
            float(self.center[0]),
            float(self.center[1]),
            float(self.center[2]),
            float(self.radius),
        )

    def distance(self, point: Point) -> float:
        return math.dist(point, self.center) - self.radius

    def normal_at(self, point: Point) -> Point:
        offset = [p - c for p, c in zip(point, self.center)]
        length = math.sqrt(sum(o * o for o in offset))
        if length < EPSILON:
            raise DegenerateNormalError(
                f"Normal undefined at {tuple(point)}: point is the sphere center."
            )
        return (offset[0] / length, offset[1] / length, offset[2] / length)

    def to_dict(self) -> dict:
        return {
            "type": "sphere",
            "center": list(self.center),
            "radius": self.radius,
            "material": self.material.to_dict(),
        }
