"""Framebuffer normalization and Matplotlib preview.

The shader does not clamp its output, so bright specular highlights can
exceed 1 in some channel. Before display or export each such pixel is
scaled down by its largest channel, which keeps its hue.

Example:
    >>> from sdf_tracer.preview.display import show_preview
    >>> from sdf_tracer.core.renderer import FrameRenderer
    >>>
    >>> renderer = FrameRenderer()
    >>> renderer.render(scene)
    >>> show_preview(renderer.get_image_numpy())
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def normalize_max_channel(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Scale every pixel whose largest channel exceeds 1 by that channel.

    Pixels with all channels <= 1 are left untouched.

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        A new array of the same shape with every channel <= 1.
    """
    result = np.asarray(image, dtype=np.float32).copy()
    max_channel = result.max(axis=-1, keepdims=True)
    scale = np.where(max_channel > 1.0, max_channel, 1.0)
    return (result / scale).astype(np.float32)


def process_image_for_output(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Prepare a linear framebuffer for display or export.

    Applies max-channel normalization, then clamps to [0, 1] (which only
    affects negative values).

    Args:
        image: Linear image array of shape (H, W, 3).

    Returns:
        Processed image in the [0, 1] range.
    """
    result = normalize_max_channel(image)
    result = np.clip(result, 0.0, 1.0)
    return result.astype(np.float32)


def show_preview(
    image: npt.NDArray[np.float32],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 6),
    block: bool = True,
) -> None:
    """Display a rendered frame as a Matplotlib figure.

    Args:
        image: Linear image array of shape (H, W, 3).
        title: Custom title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_output(image)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = display_image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
