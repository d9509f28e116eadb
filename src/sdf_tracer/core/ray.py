"""Ray data structure and the closed-form optics helpers used for shading.

This module provides the Ray dataclass plus the pure numeric helpers the
shader relies on: mirror reflection, Snell's-law refraction and the exact
dielectric Fresnel reflectance. All operations are Taichi functions so they
can run inside rendering kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.core.ray import Ray, ray_at, reflect, vec3
    >>> @ti.kernel
    ... def demo() -> ti.f32:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 5.0).z
"""

import taichi as ti
import taichi.math as tm

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# Direction returned by refract() when no transmitted ray exists
TIR_PLACEHOLDER_DIRECTION = (1.0, 0.0, 0.0)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). The marcher and
            the shader expect unit length.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal: I - 2(I.N)N.

    The map is an involution: reflecting twice about the same normal gives
    back the incident vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f32, eta_i: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The normal is assumed to point out of the medium with index eta_t. When
    the ray is leaving that medium (incident and normal point the same way),
    the normal is flipped and the indices swapped, which is the same as
    refracting once more from the other side.

    When no transmitted ray exists (negative discriminant) the function
    returns TIR_PLACEHOLDER_DIRECTION. The value has no physical meaning;
    callers only use it when Fresnel reflectance is below one.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        eta_t: Refractive index on the far side of the boundary.
        eta_i: Refractive index on the incident side.

    Returns:
        The refracted direction vector (not renormalized).
    """
    n = normal
    n_out = eta_t
    n_in = eta_i
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    if cos_i < 0.0:
        cos_i = -cos_i
        n = -normal
        n_out = eta_i
        n_in = eta_t

    eta = n_in / n_out
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)

    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result


@ti.func
def refract_from_air(incident: vec3, normal: vec3, ior: ti.f32) -> vec3:
    """Refract into a material of index ior from a medium of index 1."""
    return refract(incident, normal, ior, 1.0)


@ti.func
def fresnel_terms(incident: vec3, normal: vec3, ior: ti.f32):
    """Compute the polarized Fresnel amplitude ratios at a dielectric boundary.

    The incident cosine is clamped to [-1, 1]. A positive cosine means the
    ray is inside the material, in which case the indices are swapped.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        ior: Refractive index of the material.

    Returns:
        A tuple (rs, rp, total_internal) where rs and rp are the s- and
        p-polarized amplitude ratios (zero when total_internal is 1) and
        total_internal is 1 when the transmitted sine reaches 1.
    """
    cos_i = tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    eta_i = 1.0
    eta_t = ior
    if cos_i > 0.0:
        eta_i = ior
        eta_t = 1.0

    sin_t = eta_i / eta_t * ti.sqrt(ti.max(0.0, 1.0 - cos_i * cos_i))

    rs = 0.0
    rp = 0.0
    total_internal = 0
    if sin_t >= 1.0:
        total_internal = 1
    else:
        cos_t = ti.sqrt(ti.max(0.0, 1.0 - sin_t * sin_t))
        cos_i = ti.abs(cos_i)
        rs = ((eta_t * cos_i) - (eta_i * cos_t)) / ((eta_t * cos_i) + (eta_i * cos_t))
        rp = ((eta_i * cos_i) - (eta_t * cos_t)) / ((eta_i * cos_i) + (eta_t * cos_t))
    return rs, rp, total_internal


@ti.func
def fresnel(incident: vec3, normal: vec3, ior: ti.f32) -> ti.f32:
    """Fraction of light reflected at a dielectric boundary.

    Averages the s- and p-polarized reflectances. Returns exactly 1.0 under
    total internal reflection.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        ior: Refractive index of the material.

    Returns:
        The reflectance kr in [0, 1].
    """
    rs, rp, total_internal = fresnel_terms(incident, normal, ior)
    kr = 1.0
    if total_internal == 0:
        kr = (rs * rs + rp * rp) / 2.0
    return kr
