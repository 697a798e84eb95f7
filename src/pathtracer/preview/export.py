"""Image export for rendered pixels.

The renderer produces an (height, width, 3) uint8 array. Anything that
accepts such an array is an output sink; this module provides the PNG one.

Supported formats:
    - PNG (8-bit RGB via Pillow)

A sink that cannot persist the image raises ImageExportError. Export is
not retried.

Example:
    >>> from src.pathtracer.preview.export import save_png
    >>> pixels = renderer.render()
    >>> save_png(pixels, "output.png")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

# Anything that consumes a finished (height, width, 3) uint8 image
ImageSink = Callable[[npt.NDArray[np.uint8]], None]


class ImageExportError(RuntimeError):
    """The final image could not be written."""


def _validate_pixels(pixels: npt.NDArray[np.uint8]) -> None:
    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise ValueError(f"Expected an (height, width, 3) array, got shape {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ValueError(f"Expected dtype uint8, got {pixels.dtype}")


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an 8-bit RGB image as a PNG file.

    Args:
        pixels: Array of shape (height, width, 3) with dtype uint8, row 0 at
            the top.
        filepath: Output file path (should end in .png).

    Returns:
        The path written.

    Raises:
        ValueError: If the array has the wrong shape or dtype.
        ImageExportError: If the file cannot be written.
    """
    _validate_pixels(pixels)
    path = Path(filepath)

    pil_image = PILImage.fromarray(np.ascontiguousarray(pixels))
    try:
        pil_image.save(path, format="PNG")
    except OSError as e:
        raise ImageExportError(f"Cannot write image to {path}: {e}") from e

    logger.info("Saved %dx%d image to %s", pixels.shape[1], pixels.shape[0], path)
    return path


class PngSink:
    """Output sink writing every image it receives to one PNG path."""

    def __init__(self, filepath: str | Path) -> None:
        self.filepath = Path(filepath)

    def __call__(self, pixels: npt.NDArray[np.uint8]) -> None:
        save_png(pixels, self.filepath)

    def __repr__(self) -> str:
        return f"PngSink({str(self.filepath)!r})"


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read a PNG back as an (height, width, 3) uint8 array."""
    with PILImage.open(filepath) as image:
        return np.asarray(image.convert("RGB"), dtype=np.uint8)
