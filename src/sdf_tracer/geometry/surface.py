"""Surface variants shared by the Python scene API and the Taichi kernels.

Every surface carries exactly one material and a signed distance function.
On the Python side a surface is an immutable value object; on the GPU side
it is a (kind, shape params, material) slot in the scene fields, and the
kernels dispatch on the kind tag.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sdf_tracer.materials.material import Material

Point = tuple[float, float, float]


class SurfaceKind(IntEnum):
    """Tag identifying which distance function a surface slot uses."""

    SPHERE = 0


class DegenerateNormalError(ValueError):
    """Raised when a surface normal is requested at a singular point."""


class Surface:
    """Base class for Python-side surface descriptions.

    Subclasses are frozen dataclasses that provide ``kind``, ``material``,
    ``shape_params()``, ``distance()`` and ``normal_at()``.
    """

    kind: SurfaceKind
    material: Material

    def shape_params(self) -> tuple[float, float, float, float]:
        """Pack the shape parameters into the four slots of a vec4 field."""
        raise NotImplementedError

    def distance(self, point: Point) -> float:
        """Signed distance from point to the surface (negative inside)."""
        raise NotImplementedError

    def normal_at(self, point: Point) -> Point:
        """Unit outward normal at point.

        Raises:
            DegenerateNormalError: If no direction is defined at point.
        """
        raise NotImplementedError

    def to_dict(self) -> dict:
        """Describe the surface as a JSON-compatible dictionary."""
        raise NotImplementedError
