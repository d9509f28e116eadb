"""Sphere-tracing ray marcher with a checkerboard ground plane fallback.

The marcher walks a ray forward by the distance the scene query reports at
the current position. It stops with a hit once that distance drops below
EPSILON. It gives up when the query finds no surface or when the step
budget runs out. In both of those cases it tests the finite checkerboard
patch on the plane y = -4 instead.

Normals that cannot be computed (a hit at a singular point of a surface)
do not abort the march. The hit is reported with a zero normal and an
atomic counter is incremented; see get_degenerate_normal_count().

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.core.marcher import probe_march
    >>> result = probe_march((0.0, 0.0, 0.0), (0.0, -0.25, -0.968))
    >>> result.point if result is not None else None
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import EPSILON, MAX_DISTANCE, MAX_MARCHING_STEPS
from sdf_tracer.materials.material import MaterialData
from sdf_tracer.scene.intersection import (
    get_surface_material,
    scene_sdf,
    try_surface_normal,
)

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4

# =============================================================================
# Ground Plane Configuration
# =============================================================================

# The infinite plane y = GROUND_PLANE_Y, clipped to a finite window
GROUND_PLANE_Y = -4.0
GROUND_HALF_WIDTH = 10.0
GROUND_Z_NEAR = -10.0
GROUND_Z_FAR = -30.0

# Checker cell frequency and tile colors
CHECKER_SCALE = 0.5
CHECKER_X_SHIFT = 1000.0
LIGHT_TILE = (0.3, 0.3, 0.3)
DARK_TILE = (0.3, 0.2, 0.1)

# Plane hits at or beyond this distance are treated as misses
HIT_DISTANCE_LIMIT = 1000.0

# Number of hits whose normal could not be computed
_degenerate_normal_count = ti.field(dtype=ti.i32, shape=())


@ti.dataclass
class MarchHit:
    """Result of marching a ray through the scene.

    Attributes:
        hit: 1 if the ray hit a surface or the ground patch, 0 otherwise.
        point: The hit point. Only valid if hit == 1.
        normal: The surface normal at the hit (zero if it was degenerate).
        material: A copy of the material at the hit.
    """

    hit: ti.i32
    point: vec3
    normal: vec3
    material: MaterialData


@ti.func
def _default_material() -> MaterialData:
    return MaterialData(
        refractive_index=1.0,
        albedo=vec4(1.0, 0.0, 0.0, 0.0),
        diffuse_color=vec3(0.0, 0.0, 0.0),
        specular_exponent=0.0,
    )


@ti.func
def _make_miss_record() -> MarchHit:
    return MarchHit(
        hit=0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=_default_material(),
    )


@ti.func
def checker_color(x: ti.f32, z: ti.f32) -> vec3:
    """Tile color of the ground patch at (x, z).

    Even parity of floor(0.5x + 1000) + floor(0.5z) gives LIGHT_TILE, odd
    parity gives DARK_TILE.
    """
    cell_x = ti.cast(ti.floor(CHECKER_SCALE * x + CHECKER_X_SHIFT), ti.i32)
    cell_z = ti.cast(ti.floor(CHECKER_SCALE * z), ti.i32)
    color = vec3(LIGHT_TILE[0], LIGHT_TILE[1], LIGHT_TILE[2])
    if (cell_x + cell_z) % 2 != 0:
        color = vec3(DARK_TILE[0], DARK_TILE[1], DARK_TILE[2])
    return color


@ti.func
def intersect_ground(origin: vec3, direction: vec3):
    """Intersect a ray with the checkerboard patch of the ground plane.

    Args:
        origin: The ray origin.
        direction: The normalized ray direction.

    Returns:
        A tuple (distance, point). distance is MAX_DISTANCE when the ray is
        near-parallel to the plane, points away from it, or lands outside
        the patch.
    """
    distance = MAX_DISTANCE
    point = vec3(0.0, 0.0, 0.0)
    if ti.abs(direction.y) > EPSILON:
        d = -(origin.y - GROUND_PLANE_Y) / direction.y
        pt = origin + direction * d
        if (
            d > 0.0
            and ti.abs(pt.x) < GROUND_HALF_WIDTH
            and pt.z < GROUND_Z_NEAR
            and pt.z > GROUND_Z_FAR
        ):
            distance = d
            point = pt
    return distance, point


@ti.func
def march(origin: vec3, direction: vec3) -> MarchHit:
    """March a ray through the scene.

    Starting EPSILON along the ray, repeatedly query the scene and advance
    by the returned distance. A returned distance below EPSILON is a hit.
    If the query finds no surface, or MAX_MARCHING_STEPS pass without
    convergence, the ground patch is tested instead.

    Args:
        origin: The ray origin.
        direction: The normalized ray direction.

    Returns:
        A MarchHit. Surface hits carry the surface's material; ground hits
        carry the default material with the checker tile as diffuse color.
    """
    result = _make_miss_record()

    depth = EPSILON
    # Taichi doesn't support break in ti.func loops
    active = 1
    for _ in range(MAX_MARCHING_STEPS):
        if active == 1:
            dist, idx = scene_sdf(origin + direction * depth)
            if idx < 0:
                # Nothing left in front of the ray
                active = 0
            else:
                depth += dist
                if dist < EPSILON:
                    point = origin + direction * depth
                    ok, normal = try_surface_normal(idx, point)
                    if ok == 0:
                        _degenerate_normal_count[None] += 1
                    result = MarchHit(
                        hit=1,
                        point=point,
                        normal=normal,
                        material=get_surface_material(idx),
                    )
                    active = 0

    if result.hit == 0:
        ground_dist, ground_point = intersect_ground(origin, direction)
        if ground_dist < HIT_DISTANCE_LIMIT:
            material = _default_material()
            material.diffuse_color = checker_color(ground_point.x, ground_point.z)
            result = MarchHit(
                hit=1,
                point=ground_point,
                normal=vec3(0.0, 1.0, 0.0),
                material=material,
            )

    return result


# =============================================================================
# Diagnostics
# =============================================================================


def get_degenerate_normal_count() -> int:
    """Number of hits since the last reset whose normal was undefined."""
    return int(_degenerate_normal_count[None])


def reset_degenerate_normal_count() -> None:
    """Reset the degenerate normal counter to zero."""
    _degenerate_normal_count[None] = 0


# =============================================================================
# Python-side Probe
# =============================================================================

_probe_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_hit = ti.field(dtype=ti.i32, shape=())
_probe_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_ior = ti.field(dtype=ti.f32, shape=())
_probe_albedo = ti.Vector.field(4, dtype=ti.f32, shape=())
_probe_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_specular_exponent = ti.field(dtype=ti.f32, shape=())


@dataclass(frozen=True)
class MarchResult:
    """A hit returned by probe_march().

    Attributes:
        point: The hit point.
        normal: The surface normal (zero vector if degenerate).
        refractive_index: Refractive index of the hit material.
        albedo: Albedo weights of the hit material.
        diffuse_color: Diffuse color of the hit material.
        specular_exponent: Specular exponent of the hit material.
    """

    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    refractive_index: float
    albedo: tuple[float, float, float, float]
    diffuse_color: tuple[float, float, float]
    specular_exponent: float


@ti.kernel
def _probe_march_kernel():
    for _ in range(1):
        rec = march(_probe_origin[None], _probe_direction[None])
        _probe_hit[None] = rec.hit
        _probe_point[None] = rec.point
        _probe_normal[None] = rec.normal
        _probe_ior[None] = rec.material.refractive_index
        _probe_albedo[None] = rec.material.albedo
        _probe_color[None] = rec.material.diffuse_color
        _probe_specular_exponent[None] = rec.material.specular_exponent


def _to_tuple(vector, size: int = 3) -> tuple:
    return tuple(float(vector[i]) for i in range(size))


def probe_march(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> MarchResult | None:
    """March a single ray from Python, for testing and debugging.

    Args:
        origin: The ray origin.
        direction: The ray direction (should be normalized).

    Returns:
        A MarchResult, or None if the ray hit nothing.
    """
    _probe_origin[None] = [origin[0], origin[1], origin[2]]
    _probe_direction[None] = [direction[0], direction[1], direction[2]]
    _probe_march_kernel()

    if _probe_hit[None] == 0:
        return None
    return MarchResult(
        point=_to_tuple(_probe_point[None]),
        normal=_to_tuple(_probe_normal[None]),
        refractive_index=float(_probe_ior[None]),
        albedo=_to_tuple(_probe_albedo[None], 4),
        diffuse_color=_to_tuple(_probe_color[None]),
        specular_exponent=float(_probe_specular_exponent[None]),
    )
