"""Materials module for the four-weight albedo shading model.

Components:
    material: Material value type and the MaterialData kernel struct
    presets: Ivory, glass, red rubber and mirror from the demo scene

The shader combines a hit's contributions as

    diffuse_color * diffuse * albedo[0]
    + white * specular * albedo[1]
    + reflected * albedo[2]
    + refracted * albedo[3]

with no Fresnel weighting of the last two terms.
"""

from .material import (
    ALBEDO_DIFFUSE,
    ALBEDO_REFLECT,
    ALBEDO_REFRACT,
    ALBEDO_SPECULAR,
    Material,
    MaterialData,
)
from .presets import GLASS, IVORY, MIRROR, PRESETS, RED_RUBBER

__all__ = [
    "Material",
    "MaterialData",
    "ALBEDO_DIFFUSE",
    "ALBEDO_SPECULAR",
    "ALBEDO_REFLECT",
    "ALBEDO_REFRACT",
    "IVORY",
    "GLASS",
    "RED_RUBBER",
    "MIRROR",
    "PRESETS",
]
