"""Taichi path tracing kernel.

The same estimator as ``core.integrator.ray_color``, written as an
iterative loop so it can run inside a kernel:

1. Find the nearest hit in (T_MIN, T_FAR) over the scene arena.
2. On a miss, the path ends with the sky gradient times the throughput.
3. On a hit, the material behind the hit's material id scatters the ray.
   Absorption ends the path with black; otherwise the throughput is
   multiplied by the attenuation and the scattered ray continues.
4. A path that uses up ``max_depth`` bounces contributes black.

One kernel launch traces one image row. The columns of the row run in
parallel; each pixel's samples are summed on a single thread, so a pixel
sum is only written once all of its samples are done.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> tracer = PathTracer(arena, camera, framebuffer, workers=4)
    >>> for row in range(framebuffer.height):
    ...     tracer.trace_row(row, samples_per_pixel=16, max_depth=50)
"""

import logging

import taichi as ti
import taichi.math as tm

from src.pathtracer.camera.thin_lens import Camera
from src.pathtracer.core.framebuffer import Framebuffer
from src.pathtracer.core.integrator import HORIZON_COLOR, T_MIN, ZENITH_COLOR
from src.pathtracer.core.sampling import random_in_unit_disk
from src.pathtracer.scene.arena import T_FAR, SceneArena

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

HORIZON = vec3(*HORIZON_COLOR)
ZENITH = vec3(*ZENITH_COLOR)


@ti.func
def background(direction):
    """Sky gradient from HORIZON (looking down) to ZENITH (looking up)."""
    unit_direction = tm.normalize(direction)
    t = 0.5 * (unit_direction.y + 1.0)
    return (1.0 - t) * HORIZON + t * ZENITH


@ti.data_oriented
class PathTracer:
    """Traces camera rays through a scene arena into a framebuffer.

    Attributes:
        arena: Flattened scene.
        framebuffer: Receives per-pixel radiance sums.
        workers: CPU threads for the per-row parallel loop. Ignored on GPU.
    """

    def __init__(
        self,
        arena: SceneArena,
        camera: Camera,
        framebuffer: Framebuffer,
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.arena = arena
        self.framebuffer = framebuffer
        self.workers = workers

        # Pixel-to-screen scaling, fixed per image size
        self.s_scale = float(max(framebuffer.width - 1, 1))
        self.t_scale = float(max(framebuffer.height - 1, 1))

        # Camera frame
        self.origin = ti.Vector.field(3, dtype=float, shape=())
        self.u = ti.Vector.field(3, dtype=float, shape=())
        self.v = ti.Vector.field(3, dtype=float, shape=())
        self.lower_left_corner = ti.Vector.field(3, dtype=float, shape=())
        self.horizontal = ti.Vector.field(3, dtype=float, shape=())
        self.vertical = ti.Vector.field(3, dtype=float, shape=())
        self.lens_radius = ti.field(dtype=float, shape=())
        self.set_camera(camera)
        logger.debug(
            "Path tracer for %dx%d, %d worker(s)", framebuffer.width, framebuffer.height, workers
        )

    def set_camera(self, camera: Camera) -> None:
        """Copy the camera frame into the kernel-side fields."""
        self.origin[None] = camera.origin.components
        self.u[None] = camera.u.components
        self.v[None] = camera.v.components
        self.lower_left_corner[None] = camera.lower_left_corner.components
        self.horizontal[None] = camera.horizontal.components
        self.vertical[None] = camera.vertical.components
        self.lens_radius[None] = camera.lens_radius

    # =========================================================================
    # Ray generation and shading
    # =========================================================================

    @ti.func
    def get_ray(self, s, t):
        """Ray from the (jittered) lens point through screen point (s, t)."""
        origin = self.origin[None]
        lens_radius = self.lens_radius[None]
        if lens_radius > 0.0:
            rd = random_in_unit_disk() * lens_radius
            origin = origin + self.u[None] * rd.x + self.v[None] * rd.y
        target = (
            self.lower_left_corner[None]
            + s * self.horizontal[None]
            + t * self.vertical[None]
        )
        return origin, target - origin

    @ti.func
    def trace(self, origin, direction, max_depth):
        """One path sample of the radiance arriving along a ray."""
        color = vec3(0.0, 0.0, 0.0)
        throughput = vec3(1.0, 1.0, 1.0)
        ray_origin = origin
        ray_direction = direction
        active = 1

        for depth in range(max_depth):
            if active == 1:
                hit, t, normal, front_face, material_id = self.arena.hit_world(
                    ray_origin, ray_direction, T_MIN, T_FAR
                )
                if hit == 0:
                    color = throughput * background(ray_direction)
                    active = 0
                else:
                    scattered, attenuation, did_scatter = self.arena.scatter(
                        material_id, ray_direction, normal, front_face
                    )
                    if did_scatter == 0:
                        active = 0
                    else:
                        throughput = throughput * attenuation
                        ray_origin = ray_origin + t * ray_direction
                        ray_direction = scattered

        return color

    @ti.func
    def normal_shade(self, origin, direction):
        """Map the hit normal from [-1, 1] to [0, 1]; misses show the sky."""
        color = background(direction)
        hit, t, normal, front_face, material_id = self.arena.hit_world(
            origin, direction, T_MIN, T_FAR
        )
        if hit == 1:
            color = 0.5 * (normal + 1.0)
        return color

    # =========================================================================
    # Kernels
    # =========================================================================

    @ti.kernel
    def _trace_row(self, row: ti.i32, samples: ti.i32, max_depth: ti.i32, normals: ti.i32):
        ti.loop_config(parallelize=self.workers)
        for col in range(self.framebuffer.width):
            total = vec3(0.0, 0.0, 0.0)
            for sample in range(samples):
                # Row 0 is the top of the image (t = 1)
                s = (ti.cast(col, float) + ti.random(float)) / self.s_scale
                flipped_row = self.framebuffer.height - 1 - row
                t = (ti.cast(flipped_row, float) + ti.random(float)) / self.t_scale
                origin, direction = self.get_ray(s, t)
                if normals == 1:
                    total += self.normal_shade(origin, direction)
                else:
                    total += self.trace(origin, direction, max_depth)
            self.framebuffer.radiance[row, col] = total

    def trace_row(
        self,
        row: int,
        samples_per_pixel: int,
        max_depth: int,
        normals: bool = False,
    ) -> None:
        """Write the radiance sums of one image row into the framebuffer.

        Args:
            row: Image row, 0 at the top.
            samples_per_pixel: Jittered rays summed per pixel.
            max_depth: Bounce budget per camera ray.
            normals: Shade by surface normal instead of path tracing.
        """
        if not 0 <= row < self.framebuffer.height:
            raise IndexError(f"Row {row} outside image of height {self.framebuffer.height}")
        self._trace_row(row, samples_per_pixel, max_depth, int(normals))

    def __repr__(self) -> str:
        return f"PathTracer(arena={self.arena!r}, workers={self.workers})"
