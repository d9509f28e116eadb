"""Scene-level surface storage and the nearest-surface distance query.

Surfaces are stored in Taichi fields as tagged slots: a kind, four packed
shape parameters and the four material components. The scene query scans
every slot (no acceleration structure) and returns the smallest
non-negative signed distance together with the index of the surface that
produced it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.geometry.sphere import SphereSurface
    >>> from sdf_tracer.scene.intersection import add_surface, clear_scene, query_scene
    >>> clear_scene()
    >>> add_surface(SphereSurface(center=(0.0, 0.0, -5.0), radius=1.0))
    0
    >>> query_scene((0.0, 0.0, 0.0))  # (4.0, 0)
"""

import taichi as ti
import taichi.math as tm

from sdf_tracer.core.constants import MAX_DISTANCE
from sdf_tracer.geometry.sphere import Sphere, sphere_distance, try_sphere_normal
from sdf_tracer.geometry.surface import Surface, SurfaceKind
from sdf_tracer.materials.material import MaterialData

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# Maximum number of surfaces supported in the scene
MAX_SURFACES = 1024

# Kind tags as plain ints for kernel-side comparisons
_KIND_SPHERE = int(SurfaceKind.SPHERE)

# Surface storage: Structure of Arrays layout
surface_kinds = ti.field(dtype=ti.i32, shape=MAX_SURFACES)
# Sphere: (center.x, center.y, center.z, radius)
surface_params = ti.Vector.field(4, dtype=ti.f32, shape=MAX_SURFACES)
surface_iors = ti.field(dtype=ti.f32, shape=MAX_SURFACES)
surface_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_SURFACES)
surface_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_SURFACES)
num_surfaces = ti.field(dtype=ti.i32, shape=())

# Scratch fields for the Python-side query probe
_probe_point = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_distance = ti.field(dtype=ti.f32, shape=())
_probe_index = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all surfaces from the scene.

    Resets the surface count to zero. The field data is overwritten when new
    surfaces are added.
    """
    num_surfaces[None] = 0


def add_surface(surface: Surface) -> int:
    """Add a surface and its material to the scene.

    Args:
        surface: Any Surface variant (e.g. SphereSurface).

    Returns:
        The index of the added surface.

    Raises:
        RuntimeError: If the maximum number of surfaces is exceeded.
    """
    idx = num_surfaces[None]
    if idx >= MAX_SURFACES:
        raise RuntimeError(f"Maximum number of surfaces ({MAX_SURFACES}) exceeded")

    material = surface.material
    surface_kinds[idx] = int(surface.kind)
    surface_params[idx] = list(surface.shape_params())
    surface_iors[idx] = material.refractive_index
    surface_albedos[idx] = list(material.albedo)
    surface_colors[idx] = list(material.diffuse_color)
    surface_specular_exponents[idx] = material.specular_exponent
    num_surfaces[None] = idx + 1
    return idx


def get_surface_count() -> int:
    """Get the number of surfaces in the scene."""
    return int(num_surfaces[None])


@ti.func
def _get_sphere(idx: ti.i32) -> Sphere:
    params = surface_params[idx]
    return Sphere(center=vec3(params[0], params[1], params[2]), radius=params[3])


@ti.func
def get_surface_material(idx: ti.i32) -> MaterialData:
    """Copy the material of surface idx into a MaterialData value."""
    return MaterialData(
        refractive_index=surface_iors[idx],
        albedo=surface_albedos[idx],
        diffuse_color=surface_colors[idx],
        specular_exponent=surface_specular_exponents[idx],
    )


@ti.func
def surface_distance(idx: ti.i32, point: vec3) -> ti.f32:
    """Signed distance from point to surface idx, dispatched on its kind."""
    dist = MAX_DISTANCE
    if surface_kinds[idx] == _KIND_SPHERE:
        dist = sphere_distance(_get_sphere(idx), point)
    return dist


@ti.func
def try_surface_normal(idx: ti.i32, point: vec3):
    """Estimate the normal of surface idx at point.

    Returns:
        A tuple (ok, normal); ok is 0 when the normal is undefined there.
    """
    ok = 0
    normal = vec3(0.0, 0.0, 0.0)
    if surface_kinds[idx] == _KIND_SPHERE:
        sphere_ok, sphere_normal = try_sphere_normal(_get_sphere(idx), point)
        ok = sphere_ok
        normal = sphere_normal
    return ok, normal


@ti.func
def scene_sdf(point: vec3):
    """Find the nearest surface at point with a non-negative distance.

    Surfaces reporting a negative distance contain the point and are
    skipped, so a point inside a solid never sees that solid. Ties keep
    the earliest surface.

    Args:
        point: The query point.

    Returns:
        A tuple (min_distance, surface_index). When no surface qualifies
        (empty scene or point inside everything) returns (MAX_DISTANCE, -1).
    """
    min_dist = MAX_DISTANCE
    nearest = -1
    for i in range(num_surfaces[None]):
        dist = surface_distance(i, point)
        if dist >= 0.0 and dist < min_dist:
            min_dist = dist
            nearest = i
    return min_dist, nearest


@ti.kernel
def _query_scene_kernel():
    for _ in range(1):
        dist, idx = scene_sdf(_probe_point[None])
        _probe_distance[None] = dist
        _probe_index[None] = idx


def query_scene(point: tuple[float, float, float]) -> tuple[float, int | None]:
    """Run the scene distance query for a single point.

    Args:
        point: The query point (x, y, z).

    Returns:
        Tuple of (min_distance, surface_index), with None as the index when
        no surface qualifies.
    """
    _probe_point[None] = [point[0], point[1], point[2]]
    _query_scene_kernel()
    idx = int(_probe_index[None])
    return float(_probe_distance[None]), (idx if idx >= 0 else None)
