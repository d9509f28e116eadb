"""Materials of the classic four-sphere demo scene."""

from sdf_tracer.materials.material import Material

IVORY = Material(
    refractive_index=1.0,
    albedo=(0.6, 0.3, 0.1, 0.0),
    diffuse_color=(0.4, 0.4, 0.3),
    specular_exponent=50.0,
)

GLASS = Material(
    refractive_index=1.5,
    albedo=(0.0, 0.5, 0.1, 0.8),
    diffuse_color=(0.6, 0.7, 0.8),
    specular_exponent=125.0,
)

RED_RUBBER = Material(
    refractive_index=1.0,
    albedo=(0.9, 0.1, 0.0, 0.0),
    diffuse_color=(0.3, 0.1, 0.1),
    specular_exponent=10.0,
)

MIRROR = Material(
    refractive_index=1.0,
    albedo=(0.0, 10.0, 0.8, 0.0),
    diffuse_color=(1.0, 1.0, 1.0),
    specular_exponent=1425.0,
)

PRESETS = {
    "ivory": IVORY,
    "glass": GLASS,
    "red_rubber": RED_RUBBER,
    "mirror": MIRROR,
}
