"""Four-weight albedo material model.

A material is a refractive index, a diffuse color, a specular exponent and
four albedo weights that scale the diffuse, specular, reflected and
refracted contributions of a hit. The weights are not required to sum to
one and energy conservation is not enforced.

Example:
    >>> from sdf_tracer.materials.material import Material
    >>> glass = Material(
    ...     refractive_index=1.5,
    ...     albedo=(0.0, 0.5, 0.1, 0.8),
    ...     diffuse_color=(0.6, 0.7, 0.8),
    ...     specular_exponent=125.0,
    ... )
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

# Type aliases for vectors using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4

# Albedo slots, in the order the shader combines them
ALBEDO_DIFFUSE = 0
ALBEDO_SPECULAR = 1
ALBEDO_REFLECT = 2
ALBEDO_REFRACT = 3


@ti.dataclass
class MaterialData:
    """Material values copied into hit records inside kernels.

    Attributes:
        refractive_index: Index of refraction (>= 1).
        albedo: Weights for (diffuse, specular, reflection, refraction).
        diffuse_color: Base RGB color.
        specular_exponent: Phong exponent for the specular highlight.
    """

    refractive_index: ti.f32
    albedo: vec4
    diffuse_color: vec3
    specular_exponent: ti.f32


@dataclass(frozen=True)
class Material:
    """Immutable material description used when building scenes.

    The defaults describe a plain diffuse material with a black base color,
    which is also what the ground plane starts from before its checker
    color is applied.

    Attributes:
        refractive_index: Index of refraction, must be >= 1.
        albedo: Non-negative weights (diffuse, specular, reflection, refraction).
        diffuse_color: RGB base color, nominally in [0, 1].
        specular_exponent: Non-negative Phong exponent.
    """

    refractive_index: float = 1.0
    albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    diffuse_color: tuple[float, float, float] = (0.0, 0.0, 0.0)
    specular_exponent: float = 0.0

    def __post_init__(self) -> None:
        if self.refractive_index < 1.0:
            raise ValueError(
                f"Index of refraction = {self.refractive_index} is less than 1.0. "
                "IOR must be >= 1.0 for physically meaningful materials."
            )
        if len(self.albedo) != 4:
            raise ValueError(f"Albedo must have 4 weights, got {len(self.albedo)}.")
        for i, weight in enumerate(self.albedo):
            if weight < 0.0:
                raise ValueError(f"Albedo weight {i} = {weight} is negative.")
        if len(self.diffuse_color) != 3:
            raise ValueError(
                f"Diffuse color must have 3 components, got {len(self.diffuse_color)}."
            )
        if self.specular_exponent < 0.0:
            raise ValueError(f"Specular exponent = {self.specular_exponent} is negative.")

    def to_dict(self) -> dict[str, Any]:
        """Describe the material as a JSON-compatible dictionary."""
        return {
            "refractive_index": self.refractive_index,
            "albedo": list(self.albedo),
            "diffuse_color": list(self.diffuse_color),
            "specular_exponent": self.specular_exponent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Material":
        """Build a material from a dictionary, filling in defaults."""
        albedo = data.get("albedo", [1.0, 0.0, 0.0, 0.0])
        color = data.get("diffuse_color", [0.0, 0.0, 0.0])
        return cls(
            refractive_index=float(data.get("refractive_index", 1.0)),
            albedo=tuple(float(a) for a in albedo),
            diffuse_color=tuple(float(c) for c in color),
            specular_exponent=float(data.get("specular_exponent", 0.0)),
        )
