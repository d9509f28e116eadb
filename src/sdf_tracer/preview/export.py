"""Image export utilities for rendered frames.

Supported formats:
    - Binary PPM (P6, 8-bit RGB via Pillow)

Example:
    >>> from sdf_tracer.preview.export import save_ppm
    >>> from sdf_tracer.core.renderer import FrameRenderer
    >>>
    >>> renderer = FrameRenderer()
    >>> renderer.render(scene)
    >>> save_ppm(renderer.get_image_numpy(), "out.ppm")
"""

from __future__ import annotations

import os
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from sdf_tracer.preview.display import process_image_for_output


class ImageWriteError(OSError):
    """Raised when a rendered image cannot be written to disk."""


def image_to_uint8(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.uint8]:
    """Convert a linear framebuffer to 8-bit values.

    Applies max-channel normalization, clamps to [0, 1] and maps each
    channel c to round(255 * c).

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_output(image)
    return np.rint(processed * 255.0).astype(np.uint8)


def save_ppm(
    image: npt.NDArray[np.float32],
    filepath: str | os.PathLike[str],
) -> Path:
    """Save a framebuffer as a binary PPM file.

    The file holds the header "P6\\n<width> <height>\\n255\\n" followed by
    width * height RGB byte triples, rows top to bottom.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path, overwritten if it exists.

    Returns:
        The path that was written.

    Raises:
        ImageWriteError: If the file cannot be created or written.
    """
    path = Path(filepath)
    image_uint8 = image_to_uint8(image)

    pil_image = PILImage.fromarray(image_uint8)
    try:
        pil_image.save(path, format="PPM")
    except OSError as exc:
        raise ImageWriteError(f"Could not write image to {path}: {exc}") from exc
    return path
