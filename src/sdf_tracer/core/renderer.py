"""Frame renderer and the one-call render entry point.

This module wraps the integrator kernels with:
- Camera and render target setup
- Scene upload from surface and light lists
- Readback of the framebuffer and per-pixel traced-ray counts
- The degenerate-normal diagnostic
- PPM output

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.gpu)
    >>> from sdf_tracer.core.renderer import render
    >>> from sdf_tracer.scene.default_scene import DEFAULT_LIGHTS, DEFAULT_SURFACES
    >>> render(DEFAULT_SURFACES, DEFAULT_LIGHTS, "out.ppm")
    PosixPath('out.ppm')
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from pathlib import Path

import numpy as np
import numpy.typing as npt

from sdf_tracer.camera.pinhole import PinholeCamera, setup_camera
from sdf_tracer.core.integrator import (
    get_image_numpy,
    get_traced_rays_numpy,
    render_frame,
    setup_render_target,
)
from sdf_tracer.core.marcher import get_degenerate_normal_count, reset_degenerate_normal_count
from sdf_tracer.geometry.surface import Surface
from sdf_tracer.preview.export import save_ppm
from sdf_tracer.scene.lights import Light
from sdf_tracer.scene.manager import SceneManager

DEFAULT_OUTPUT_PATH = "out.ppm"


class FrameRenderer:
    """Renders single frames of the scene held in the scene fields.

    The renderer owns the camera configuration and delegates to the global
    integrator buffers (which are Taichi fields).

    Attributes:
        camera: The camera used for primary rays.
    """

    def __init__(self, camera: PinholeCamera | None = None) -> None:
        """Initialize the renderer.

        Args:
            camera: Camera configuration. Defaults to a 1024x768 pinhole
                camera with a 60 degree field of view.

        Raises:
            ValueError: If the camera resolution exceeds the render target.
        """
        self.camera = camera if camera is not None else PinholeCamera()
        setup_camera(self.camera)
        setup_render_target(self.camera.width, self.camera.height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.camera.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.height

    @property
    def degenerate_normal_count(self) -> int:
        """Hits of the last frame whose surface normal was undefined."""
        return get_degenerate_normal_count()

    def render(self, scene: SceneManager | None = None) -> None:
        """Render one frame.

        Args:
            scene: The scene to render. The scene fields are global, so the
                scene is uploaded again in case another SceneManager has
                replaced it since. When None the current field contents
                are rendered.
        """
        if scene is not None:
            scene.load(list(scene.surfaces), list(scene.lights))
        setup_camera(self.camera)
        setup_render_target(self.camera.width, self.camera.height)
        reset_degenerate_normal_count()
        render_frame()

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered radiance, shape (height, width, 3), unclamped."""
        return get_image_numpy()

    def get_traced_rays_numpy(self) -> npt.NDArray[np.int32]:
        """Get the marched ray count per pixel, shape (height, width)."""
        return get_traced_rays_numpy()

    def save_ppm(self, filepath: str | os.PathLike[str]) -> Path:
        """Save the rendered frame as a binary PPM file.

        Raises:
            ImageWriteError: If the file cannot be written.
        """
        return save_ppm(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"FrameRenderer(width={self.width}, height={self.height}, "
            f"fov={self.camera.fov:.4f})"
        )


def render(
    surfaces: Iterable[Surface] | None,
    lights: Iterable[Light] | None,
    output_path: str | os.PathLike[str] = DEFAULT_OUTPUT_PATH,
    *,
    camera: PinholeCamera | None = None,
) -> Path:
    """Render a scene and write it as a binary PPM file.

    Args:
        surfaces: The surfaces of the scene, each carrying its material.
        lights: The point lights of the scene.
        output_path: Output file path (default "out.ppm").
        camera: Camera configuration (default 1024x768, 60 degree fov).

    Returns:
        The path that was written.

    Raises:
        ValueError: If surfaces or lights is None, or a value is invalid.
        RuntimeError: If the scene exceeds the field capacity.
        ImageWriteError: If the output file cannot be written.
    """
    scene = SceneManager()
    scene.load(surfaces, lights)

    renderer = FrameRenderer(camera)
    renderer.render(scene)

    degenerate = renderer.degenerate_normal_count
    if degenerate > 0:
        print(
            f"Warning: {degenerate} hit(s) had an undefined surface normal; "
            "they were shaded with a zero normal.",
            file=sys.stderr,
        )

    return renderer.save_ppm(output_path)
