"""Point lights and their field storage.

Lights are immutable value objects on the Python side and a read-only list
of (position, intensity) slots on the kernel side.
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of point lights in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


@dataclass(frozen=True)
class Light:
    """A point light.

    Attributes:
        position: Light position in scene space (x, y, z).
        intensity: Scalar intensity (>= 0).
    """

    position: tuple[float, float, float]
    intensity: float

    def __post_init__(self) -> None:
        if len(self.position) != 3:
            raise ValueError(f"Light position must have 3 components, got {self.position}")
        if self.intensity < 0.0:
            raise ValueError(f"Light intensity = {self.intensity} is negative.")

    def to_dict(self) -> dict[str, Any]:
        return {"position": list(self.position), "intensity": self.intensity}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Light":
        position = data.get("position", [0.0, 0.0, 0.0])
        return cls(
            position=(float(position[0]), float(position[1]), float(position[2])),
            intensity=float(data.get("intensity", 1.0)),
        )


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def add_light(light: Light) -> int:
    """Add a point light.

    Args:
        light: The light to add.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = list(light.position)
    light_intensities[idx] = light.intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def get_light_position(idx: ti.i32) -> vec3:
    return light_positions[idx]


@ti.func
def get_light_intensity(idx: ti.i32) -> ti.f32:
    return light_intensities[idx]
