"""Taichi-backed framebuffer that turns radiance sums into 8-bit pixels.

The sampler accumulates, for every pixel, the sum of N radiance samples.
Resolving the framebuffer maps each channel independently:

    value = sqrt(sum / N)          (gamma 2 correction)
    value = clamp(value, 0, 0.999)
    byte  = int(value * 255.999)   (truncation)

Negative sums (never produced by the integrator, but possible from
user-supplied arrays) resolve to 0.

The mapping runs as a Taichi kernel over the whole image. ``quantize``
applies the same mapping to a single pixel in plain Python.

The radiance field uses Taichi's default float type, so it is f64 under
``ti.init(default_fp=ti.f64)`` and f32 on backends without doubles.
Taichi must be initialised (``ti.init``) before a Framebuffer is created.

Note: Taichi reads kernel argument annotations at compile time, so this
module must not use postponed (string) annotations.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> fb = Framebuffer(320, 180)
    >>> fb.load(radiance_sums)        # (180, 320, 3) float64
    >>> fb.resolve(samples_per_pixel=100)
    >>> pixels = fb.to_uint8()        # (180, 320, 3) uint8
"""

import math

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.pathtracer.core.vector import Color

# Largest channel value before quantization
MAX_CHANNEL = 0.999

# Scale applied before truncating to a byte
QUANTIZE_SCALE = 255.999


def quantize(color_sum: Color, samples_per_pixel: int) -> tuple[int, int, int]:
    """Average, gamma-correct, clamp and quantize one pixel.

    Args:
        color_sum: Sum of the radiance samples for the pixel.
        samples_per_pixel: Number of samples in the sum.

    Returns:
        The (r, g, b) bytes.
    """
    scale = 1.0 / samples_per_pixel
    channels = []
    for c in color_sum:
        value = math.sqrt(max(c * scale, 0.0))
        value = min(max(value, 0.0), MAX_CHANNEL)
        channels.append(int(value * QUANTIZE_SCALE))
    return channels[0], channels[1], channels[2]


@ti.data_oriented
class Framebuffer:
    """Radiance accumulation buffer and resolved 8-bit image.

    Both fields are indexed (row, column) with row 0 at the top of the image.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        radiance: Per-pixel radiance sums (default float type).
        pixels: Resolved 8-bit channel values.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Framebuffer dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.radiance = ti.Vector.field(3, dtype=float, shape=(height, width))
        self.pixels = ti.Vector.field(3, dtype=ti.i32, shape=(height, width))

    def load(self, radiance: npt.NDArray[np.float64]) -> None:
        """Copy per-pixel radiance sums of shape (height, width, 3)."""
        expected = (self.height, self.width, 3)
        if radiance.shape != expected:
            raise ValueError(f"Radiance shape {radiance.shape} does not match {expected}")
        self.radiance.from_numpy(np.ascontiguousarray(radiance))

    def radiance_sums(self) -> npt.NDArray[np.float64]:
        """Return the accumulated radiance sums as a (height, width, 3) array."""
        return self.radiance.to_numpy().astype(np.float64)

    def clear(self) -> None:
        self.radiance.fill(0.0)
        self.pixels.fill(0)

    @ti.kernel
    def _resolve(self, samples_per_pixel: ti.i32):
        scale = 1.0 / ti.cast(samples_per_pixel, float)
        for row, col in self.radiance:
            for c in ti.static(range(3)):
                value = ti.sqrt(ti.max(self.radiance[row, col][c] * scale, 0.0))
                value = ti.min(ti.max(value, 0.0), MAX_CHANNEL)
                self.pixels[row, col][c] = ti.cast(value * QUANTIZE_SCALE, ti.i32)

    def resolve(self, samples_per_pixel: int) -> None:
        """Map the radiance sums to 8-bit values in the pixel field."""
        if samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
        self._resolve(samples_per_pixel)

    def to_uint8(self) -> npt.NDArray[np.uint8]:
        """Return the resolved image as an (height, width, 3) uint8 array."""
        return self.pixels.to_numpy().astype(np.uint8)

    def __repr__(self) -> str:
        return f"Framebuffer(width={self.width}, height={self.height})"
