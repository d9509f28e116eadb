"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down -z

Primary rays pass through pixel centers; row 0 is the top of the image, so
the framebuffer comes out of the kernels already in display order.
"""

from .pinhole import (
    DEFAULT_FOV,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    PinholeCamera,
    get_camera_info,
    get_primary_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_primary_ray",
    "get_camera_info",
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "DEFAULT_FOV",
]
