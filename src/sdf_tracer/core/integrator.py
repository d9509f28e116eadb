"""Whitted-style light transport and the frame rendering kernels.

Each hit combines direct lighting (diffuse and Phong specular, with shadow
rays) with a reflected ray and, unless the Fresnel term reports total
internal reflection, a refracted ray. The four albedo weights of the hit
material scale the four terms:

    color = diffuse_color * diffuse * albedo[0]
          + white * specular * albedo[1]
          + reflected * albedo[2]
          + refracted * albedo[3]

The Fresnel reflectance kr only decides whether a refracted ray is spawned.
It does not weight the reflected and refracted terms.

Taichi functions cannot recurse, so the ray tree is evaluated with an
explicit per-ray work-list of (origin, direction, depth, weight) entries.
Because the color is linear in the child colors, summing
weight * local_color over all visited nodes gives exactly the recursive
result. Rays deeper than MAX_BOUNCES contribute the background color
without being marched, which bounds the tree at 2^5 - 1 marched rays per
primary ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.core.integrator import (
    ...     render_frame, setup_render_target, get_image_numpy
    ... )
    >>> from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera
    >>> from sdf_tracer.scene.default_scene import create_default_scene
    >>>
    >>> scene = create_default_scene()
    >>> setup_camera(PinholeCamera(width=256, height=192))
    >>> setup_render_target(256, 192)
    >>> render_frame()
    >>> image = get_image_numpy()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from sdf_tracer.camera.pinhole import get_primary_ray
from sdf_tracer.core.constants import EPSILON
from sdf_tracer.core.marcher import march
from sdf_tracer.core.ray import fresnel, reflect, refract_from_air
from sdf_tracer.materials.material import (
    ALBEDO_DIFFUSE,
    ALBEDO_REFLECT,
    ALBEDO_REFRACT,
    ALBEDO_SPECULAR,
    MaterialData,
)
from sdf_tracer.scene.lights import get_light_intensity, get_light_position, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Reflection/refraction bounces allowed after the primary ray
MAX_BOUNCES = 4

# Color of rays that escape the scene or exceed MAX_BOUNCES
BACKGROUND_COLOR = (0.2, 0.7, 0.8)

# Color of the specular highlight
SPECULAR_COLOR = (1.0, 1.0, 1.0)

# Work-list capacity. Depth-first evaluation holds at most one pending
# sibling per level plus the two children of the deepest node.
_STACK_SIZE = MAX_BOUNCES + 4


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Final radiance per pixel, indexed [column, row] with row 0 at the top
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of marched (non-shadow) rays per pixel
_traced_rays = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers. The buffers
    are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _traced_rays.fill(0)


def reset_render_target() -> None:
    """Clear the buffers and mark the render target as not set up."""
    clear_render_target()
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Local Illumination
# =============================================================================


@ti.func
def _offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Move a ray origin EPSILON off the surface, to the side it travels into."""
    origin = point + normal * EPSILON
    if tm.dot(direction, normal) < 0.0:
        origin = point - normal * EPSILON
    return origin


@ti.func
def _direct_lighting(point: vec3, normal: vec3, direction: vec3, material: MaterialData):
    """Accumulate diffuse and specular intensity from all unshadowed lights.

    A light is shadowed when a ray marched toward it hits something closer
    than the light itself.

    Args:
        point: The shaded point.
        normal: The surface normal at point.
        direction: Direction of the ray that hit point.
        material: The material at point.

    Returns:
        A tuple (diffuse_intensity, specular_intensity).
    """
    diffuse = 0.0
    specular = 0.0
    for li in range(num_lights[None]):
        to_light = get_light_position(li) - point
        light_distance = tm.length(to_light)
        light_dir = tm.normalize(to_light)

        shadow_origin = _offset_ray_origin(point, normal, light_dir)
        shadow = march(shadow_origin, light_dir)
        shadowed = 0
        if shadow.hit == 1:
            if tm.length(shadow.point - shadow_origin) < light_distance:
                shadowed = 1

        if shadowed == 0:
            intensity = get_light_intensity(li)
            diffuse += intensity * ti.max(0.0, tm.dot(light_dir, normal))
            highlight = ti.max(0.0, -tm.dot(reflect(-light_dir, normal), direction))
            specular += (highlight**material.specular_exponent) * intensity
    return diffuse, specular


@ti.func
def _local_color(point: vec3, normal: vec3, direction: vec3, material: MaterialData) -> vec3:
    """Diffuse and specular part of a hit's color."""
    diffuse, specular = _direct_lighting(point, normal, direction, material)
    specular_color = vec3(SPECULAR_COLOR[0], SPECULAR_COLOR[1], SPECULAR_COLOR[2])
    return (
        material.diffuse_color * diffuse * material.albedo[ALBEDO_DIFFUSE]
        + specular_color * specular * material.albedo[ALBEDO_SPECULAR]
    )


# =============================================================================
# Light Transport
# =============================================================================


@ti.func
def _with_row(stack, row: ti.i32, value: vec3):
    """Return a copy of a (_STACK_SIZE, 3) matrix with one row replaced."""
    result = stack
    for c in ti.static(range(3)):
        result[row, c] = value[c]
    return result


@ti.func
def _get_row(stack, row: ti.i32) -> vec3:
    return vec3(stack[row, 0], stack[row, 1], stack[row, 2])


@ti.func
def shade(origin: vec3, direction: vec3, depth: ti.i32):
    """Compute the radiance arriving along a ray.

    Evaluates the full reflection/refraction tree rooted at the ray. A ray
    whose depth exceeds MAX_BOUNCES, or that hits nothing, contributes
    BACKGROUND_COLOR.

    Args:
        origin: The ray origin.
        direction: The normalized ray direction.
        depth: Bounce depth of this ray (0 for primary rays).

    Returns:
        A tuple (color, traced_rays) where traced_rays counts the rays of
        the tree that were marched (shadow rays excluded).
    """
    background = vec3(BACKGROUND_COLOR[0], BACKGROUND_COLOR[1], BACKGROUND_COLOR[2])

    stack_origin = ti.Matrix.zero(ti.f32, _STACK_SIZE, 3)
    stack_direction = ti.Matrix.zero(ti.f32, _STACK_SIZE, 3)
    stack_weight = ti.Matrix.zero(ti.f32, _STACK_SIZE, 3)
    stack_depth = ti.Vector.zero(ti.i32, _STACK_SIZE)

    stack_origin = _with_row(stack_origin, 0, origin)
    stack_direction = _with_row(stack_direction, 0, direction)
    stack_weight = _with_row(stack_weight, 0, vec3(1.0, 1.0, 1.0))
    stack_depth[0] = depth
    top = 1

    color = vec3(0.0, 0.0, 0.0)
    traced = 0
    while top > 0:
        top -= 1
        ray_origin = _get_row(stack_origin, top)
        ray_direction = _get_row(stack_direction, top)
        weight = _get_row(stack_weight, top)
        ray_depth = stack_depth[top]

        contribution = background
        if ray_depth <= MAX_BOUNCES:
            traced += 1
            rec = march(ray_origin, ray_direction)
            if rec.hit == 1:
                material = rec.material
                point = rec.point
                normal = rec.normal

                # Children with a zero albedo weight cannot change the color
                # and are not traced.
                kr = fresnel(ray_direction, normal, material.refractive_index)
                if kr < 1.0 and material.albedo[ALBEDO_REFRACT] > 0.0:
                    refract_dir = tm.normalize(
                        refract_from_air(ray_direction, normal, material.refractive_index)
                    )
                    refract_origin = _offset_ray_origin(point, normal, refract_dir)
                    stack_origin = _with_row(stack_origin, top, refract_origin)
                    stack_direction = _with_row(stack_direction, top, refract_dir)
                    stack_weight = _with_row(
                        stack_weight, top, weight * material.albedo[ALBEDO_REFRACT]
                    )
                    stack_depth[top] = ray_depth + 1
                    top += 1

                if material.albedo[ALBEDO_REFLECT] > 0.0:
                    reflect_dir = tm.normalize(reflect(ray_direction, normal))
                    reflect_origin = _offset_ray_origin(point, normal, reflect_dir)
                    stack_origin = _with_row(stack_origin, top, reflect_origin)
                    stack_direction = _with_row(stack_direction, top, reflect_dir)
                    stack_weight = _with_row(
                        stack_weight, top, weight * material.albedo[ALBEDO_REFLECT]
                    )
                    stack_depth[top] = ray_depth + 1
                    top += 1

                contribution = _local_color(point, normal, ray_direction, material)

        color += weight * contribution

    return color, traced


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame_kernel(width: ti.i32, height: ti.i32):
    """Shade every pixel of the frame in parallel.

    Each pixel writes only its own buffer slots; the scene fields are
    read-only for the duration of the kernel.
    """
    for i, j in ti.ndrange(width, height):
        ray = get_primary_ray(i, j, width, height)
        color, traced = shade(ray.origin, ray.direction, 0)
        _color_buffer[i, j] = color
        _traced_rays[i, j] = traced


_probe_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_direction = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_probe_traced = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _shade_single_ray(depth: ti.i32):
    for _ in range(1):
        color, traced = shade(_probe_origin[None], _probe_direction[None], depth)
        _probe_color[None] = color
        _probe_traced[None] = traced


# =============================================================================
# Public Rendering API
# =============================================================================


def shade_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[tuple[float, float, float], int]:
    """Shade a single ray from Python.

    This is intended for testing and debugging; render_frame() processes
    all pixels in parallel.

    Args:
        origin: The ray origin.
        direction: The ray direction (should be normalized).
        depth: Starting bounce depth.

    Returns:
        Tuple of ((R, G, B), traced_rays).
    """
    _probe_origin[None] = [origin[0], origin[1], origin[2]]
    _probe_direction[None] = [direction[0], direction[1], direction[2]]
    _shade_single_ray(depth)
    color = _probe_color[None]
    return (float(color[0]), float(color[1]), float(color[2])), int(_probe_traced[None])


def render_frame() -> None:
    """Render every pixel of the current render target.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    _render_frame_kernel(width, height)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered radiance as a NumPy array.

    Values are not clamped or normalized. The array shape is
    (height, width, 3), row-major with the top row first.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()

    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    image = np.transpose(image, (1, 0, 2))
    return np.ascontiguousarray(image, dtype=np.float32)


def get_traced_rays_numpy() -> npt.NDArray[np.int32]:
    """Get the number of marched rays per pixel as a (height, width) array.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    width, height = get_image_dimensions()
    counts = _traced_rays.to_numpy()[:width, :height]
    return np.ascontiguousarray(counts.T, dtype=np.int32)
