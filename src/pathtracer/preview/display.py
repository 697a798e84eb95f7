"""Matplotlib-based preview of rendered images.

Example:
    >>> from src.pathtracer.preview.display import show_preview
    >>> pixels = renderer.render()
    >>> show_preview(pixels, title="double_horizon - 100 spp")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def show_preview(
    pixels: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
):
    """Display a rendered image in a Matplotlib figure.

    Args:
        pixels: Array of shape (height, width, 3) with dtype uint8.
        title: Optional figure title.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.

    Returns:
        The Matplotlib figure.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(pixels)
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
    return fig
