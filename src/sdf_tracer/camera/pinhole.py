"""Pinhole camera model for primary ray generation.

The camera sits at the origin and looks down -z with +y up. Pixel (i, j)
is sampled through its center; row j = 0 is the top row of the image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera
    >>> camera = PinholeCamera(width=640, height=480)
    >>> setup_camera(camera)
    >>> camera.primary_direction(320, 240)  # close to (0, 0, -1)
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from sdf_tracer.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================

DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
DEFAULT_FOV = math.pi / 3.0


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for the fixed pinhole camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Field of view in radians, measured across the image height.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fov: float = DEFAULT_FOV

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) must be positive"
            )
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"Field of view = {self.fov} must be in (0, pi) radians")

    @property
    def image_plane_distance(self) -> float:
        """Distance from the pinhole to the image plane, in pixel units."""
        return self.height / (2.0 * math.tan(self.fov / 2.0))

    def primary_direction(self, i: int, j: int) -> tuple[float, float, float]:
        """Unit direction of the primary ray through pixel (i, j).

        This mirrors get_primary_ray() for use from Python.
        """
        direction = np.array(
            [
                (i + 0.5) - self.width / 2.0,
                -(j + 0.5) + self.height / 2.0,
                -self.image_plane_distance,
            ],
            dtype=np.float64,
        )
        direction /= np.linalg.norm(direction)
        return (float(direction[0]), float(direction[1]), float(direction[2]))


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_image_plane_distance = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Write the camera state into the Taichi fields used by the kernels.

    Args:
        camera: Camera configuration.
    """
    _camera_origin[None] = [0.0, 0.0, 0.0]
    _image_plane_distance[None] = camera.image_plane_distance


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through the center of pixel (i, j).

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera origin with a normalized direction.
    """
    dir_x = (ti.cast(pixel_i, ti.f32) + 0.5) - ti.cast(width, ti.f32) / 2.0
    dir_y = -(ti.cast(pixel_j, ti.f32) + 0.5) + ti.cast(height, ti.f32) / 2.0
    dir_z = -_image_plane_distance[None]
    direction = tm.normalize(vec3(dir_x, dir_y, dir_z))
    return make_ray(_camera_origin[None], direction)


def get_camera_info() -> dict[str, object]:
    """Get current camera state for debugging."""
    origin = _camera_origin[None]
    return {
        "origin": (float(origin[0]), float(origin[1]), float(origin[2])),
        "image_plane_distance": float(_image_plane_distance[None]),
    }
