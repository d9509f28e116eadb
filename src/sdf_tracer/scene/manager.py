"""Scene manager coordinating surface and light storage.

The SceneManager keeps a Python-side list of the surfaces and lights it
has uploaded into the Taichi fields, so the scene can be inspected and
exported as a plain dictionary (and from there to JSON).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.geometry import SphereSurface
    >>> from sdf_tracer.materials import IVORY
    >>> from sdf_tracer.scene.lights import Light
    >>> from sdf_tracer.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> scene.add_surface(SphereSurface((-3.0, 0.0, -16.0), 2.0, IVORY))
    0
    >>> scene.add_light(Light((-20.0, 20.0, 20.0), 1.5))
    0
    >>> config = scene.to_dict()
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sdf_tracer.geometry.sphere import SphereSurface
from sdf_tracer.geometry.surface import Surface
from sdf_tracer.materials.material import Material
from sdf_tracer.scene import intersection, lights
from sdf_tracer.scene.lights import Light


def surface_from_dict(data: dict[str, Any]) -> Surface:
    """Build a surface from its dictionary description.

    Raises:
        ValueError: If the surface type is unknown.
    """
    surface_type = data.get("type", "sphere")
    if surface_type == "sphere":
        center = data.get("center", [0.0, 0.0, 0.0])
        return SphereSurface(
            center=(float(center[0]), float(center[1]), float(center[2])),
            radius=float(data.get("radius", 1.0)),
            material=Material.from_dict(data.get("material", {})),
        )
    raise ValueError(f"Unknown surface type: {surface_type}")


class SceneManager:
    """Builds the scene held in the Taichi fields.

    Creating a manager clears the global surface and light storage, since
    the kernels read a single scene.

    Attributes:
        surfaces: Surfaces in upload order. The index of a surface in this
            list is its index in the scene query.
        lights: Lights in upload order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.surfaces: list[Surface] = []
        self.lights: list[Light] = []
        self.clear()

    def clear(self) -> None:
        """Remove every surface and light, including the field data."""
        intersection.clear_scene()
        lights.clear_lights()
        self.surfaces.clear()
        self.lights.clear()

    def add_surface(self, surface: Surface) -> int:
        """Add a surface with its material.

        Returns:
            The index of the surface in the scene.

        Raises:
            RuntimeError: If the maximum number of surfaces is exceeded.
        """
        idx = intersection.add_surface(surface)
        self.surfaces.append(surface)
        return idx

    def add_light(self, light: Light) -> int:
        """Add a point light.

        Returns:
            The index of the light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        idx = lights.add_light(light)
        self.lights.append(light)
        return idx

    def load(
        self,
        surfaces: Iterable[Surface] | None,
        scene_lights: Iterable[Light] | None,
    ) -> None:
        """Replace the scene with the given surfaces and lights.

        Empty sequences are allowed and give a scene that renders as pure
        background or as an unlit ground plane.

        Raises:
            ValueError: If either argument is None.
        """
        if surfaces is None:
            raise ValueError("Surface list is None; pass an empty list for no surfaces")
        if scene_lights is None:
            raise ValueError("Light list is None; pass an empty list for no lights")

        self.clear()
        for surface in surfaces:
            self.add_surface(surface)
        for light in scene_lights:
            self.add_light(light)

    def get_surface_count(self) -> int:
        return len(self.surfaces)

    def get_light_count(self) -> int:
        return len(self.lights)

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {
            "surfaces": [surface.to_dict() for surface in self.surfaces],
            "lights": [light.to_dict() for light in self.lights],
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'surfaces' and 'lights' keys. Missing
                keys are treated as empty lists.

        Raises:
            ValueError: If a surface has an unknown type or invalid values.
        """
        surfaces = [surface_from_dict(item) for item in data.get("surfaces", [])]
        scene_lights = [Light.from_dict(item) for item in data.get("lights", [])]
        self.load(surfaces, scene_lights)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_surfaces() -> int:
        """Get the maximum number of surfaces supported."""
        return intersection.MAX_SURFACES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return lights.MAX_LIGHTS

    def __repr__(self) -> str:
        return f"SceneManager(surfaces={len(self.surfaces)}, lights={len(self.lights)})"
