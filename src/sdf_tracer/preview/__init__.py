"""Preview module for output and visualization.

Components:
    display: Max-channel normalization and a Matplotlib preview
    export: 8-bit quantization and the binary PPM writer

Example:
    >>> from sdf_tracer.preview import save_ppm, show_preview
    >>> from sdf_tracer.core.renderer import FrameRenderer
    >>>
    >>> renderer = FrameRenderer()
    >>> renderer.render(scene)
    >>> image = renderer.get_image_numpy()
    >>> save_ppm(image, "out.ppm")
    >>> show_preview(image)
"""

from sdf_tracer.preview.display import (
    normalize_max_channel,
    process_image_for_output,
    show_preview,
)
from sdf_tracer.preview.export import ImageWriteError, image_to_uint8, save_ppm

__all__ = [
    # Display functions
    "normalize_max_channel",
    "process_image_for_output",
    "show_preview",
    # Export functions
    "ImageWriteError",
    "image_to_uint8",
    "save_ppm",
]
