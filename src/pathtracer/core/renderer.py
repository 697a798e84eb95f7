"""Per-pixel Monte Carlo sampler and compositor.

For every pixel the renderer traces ``samples_per_pixel`` camera rays, each
through a point jittered uniformly inside the pixel footprint, and sums the
radiance along them. The scene graph is flattened into a ``SceneArena`` and
the sampling runs in the Taichi ``PathTracer`` kernel, one launch per row
with the row's pixels in parallel. The sums land in the framebuffer, which
averages, gamma-corrects, clamps and quantizes them to 8-bit RGB.

``sample_pixel`` computes the same estimate for one pixel with the plain
Python integrator; it is the reference the kernel is checked against.

Rows are numbered from the top of the image, matching the layout of the
returned array.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.scene.presets import create_double_horizon_scene
    >>> scene, camera_settings = create_double_horizon_scene()
    >>> renderer = Renderer(
    ...     scene.world,
    ...     Camera.from_settings(camera_settings),
    ...     RenderSettings(width=64, height=36, samples_per_pixel=16),
    ... )
    >>> pixels = renderer.render()  # (36, 64, 3) uint8
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

import numpy as np
import numpy.typing as npt

from src.pathtracer.camera.thin_lens import Camera
from src.pathtracer.core.framebuffer import Framebuffer
from src.pathtracer.core.integrator import MAX_DEPTH, normal_color, ray_color
from src.pathtracer.core.tracer import PathTracer
from src.pathtracer.core.vector import Color
from src.pathtracer.geometry.hittable import Hittable
from src.pathtracer.scene.arena import SceneArena

logger = logging.getLogger(__name__)

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

ShadeMode = Literal["path", "normals"]


@dataclass(frozen=True)
class RenderSettings:
    """Image and sampling parameters.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Number of jittered rays averaged per pixel.
        max_depth: Bounce budget per camera ray.
        workers: CPU threads tracing the pixels of a row. Has no effect on
            GPU backends.
    """

    width: int
    height: int
    samples_per_pixel: int = 100
    max_depth: int = MAX_DEPTH
    workers: int = 1

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.samples_per_pixel <= 0:
            raise ValueError(
                f"samples_per_pixel must be positive, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def pixel_coordinates(
    i: int, j: int, width: int, height: int, rng: np.random.Generator
) -> tuple[float, float]:
    """Jittered normalized screen coordinates for pixel (column i, row j).

    Row 0 is the top of the image, which maps to t = 1.
    """
    jitter_s, jitter_t = rng.random(2).tolist()
    s = (i + jitter_s) / max(width - 1, 1)
    t = (height - 1 - j + jitter_t) / max(height - 1, 1)
    return s, t


class Renderer:
    """Renders a scene through a camera into an 8-bit RGB image.

    The scene is flattened once, at construction; later edits to the
    surface tree are not seen by ``render``.

    Attributes:
        world: The top-level surface of the scene.
        camera: The camera generating primary rays.
        settings: Image and sampling parameters.
        shade: "path" for full path tracing, "normals" for normal shading.
        arena: The flattened scene used by the kernels.
        framebuffer: Radiance sums and resolved pixels.
    """

    def __init__(
        self,
        world: Hittable,
        camera: Camera,
        settings: RenderSettings,
        shade: ShadeMode = "path",
    ) -> None:
        if shade not in ("path", "normals"):
            raise ValueError(f"Unknown shading mode: {shade}")
        self.world = world
        self.camera = camera
        self.settings = settings
        self.shade = shade
        self._shader = ray_color if shade == "path" else normal_color

        self.arena = SceneArena(world)
        self.framebuffer = Framebuffer(settings.width, settings.height)
        self._tracer = PathTracer(self.arena, camera, self.framebuffer, settings.workers)

    def sample_pixel(self, i: int, j: int, rng: np.random.Generator) -> Color:
        """Sum of ``samples_per_pixel`` radiance samples for pixel (i, j), in Python."""
        settings = self.settings
        total = Color(0.0, 0.0, 0.0)
        for _ in range(settings.samples_per_pixel):
            s, t = pixel_coordinates(i, j, settings.width, settings.height, rng)
            ray = self.camera.get_ray(s, t, rng)
            total = total + self._shader(ray, self.world, settings.max_depth, rng)
        return total

    def render_radiance(
        self, callback: ProgressCallback | None = None
    ) -> npt.NDArray[np.float64]:
        """Trace every pixel and return the raw radiance sums.

        Args:
            callback: Optional function called after each finished row with
                (rows_done, total_rows).

        Returns:
            Array of shape (height, width, 3) holding per-pixel sums.
        """
        settings = self.settings
        self.framebuffer.clear()
        for row in range(settings.height):
            self._tracer.trace_row(
                row,
                settings.samples_per_pixel,
                settings.max_depth,
                normals=self.shade == "normals",
            )
            if callback is not None:
                callback(row + 1, settings.height)
        return self.framebuffer.radiance_sums()

    def render(self, callback: ProgressCallback | None = None) -> npt.NDArray[np.uint8]:
        """Render the full image.

        Args:
            callback: Optional function called after each finished row with
                (rows_done, total_rows).

        Returns:
            Array of shape (height, width, 3) with dtype uint8, row 0 at top.
        """
        settings = self.settings
        logger.info(
            "Rendering %dx%d, %d spp, depth %d, %d worker(s)",
            settings.width,
            settings.height,
            settings.samples_per_pixel,
            settings.max_depth,
            settings.workers,
        )
        start = time.perf_counter()

        self.render_radiance(callback)
        self.framebuffer.resolve(settings.samples_per_pixel)
        pixels = self.framebuffer.to_uint8()

        logger.info("Render finished in %.2fs", time.perf_counter() - start)
        return pixels

    def __repr__(self) -> str:
        return f"Renderer(settings={self.settings!r}, shade={self.shade!r})"
