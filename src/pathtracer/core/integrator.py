"""Recursive shading integrator.

``ray_color`` estimates the radiance arriving along a ray:

1. With no bounces left, return black.
2. Find the nearest hit in (T_MIN, inf). T_MIN keeps a scattered ray from
   hitting the surface it just left ("shadow acne").
3. On a miss, return the sky gradient.
4. On a hit, ask the material to scatter. Absorption returns black;
   otherwise recurse with one bounce less and attenuate the result.

Recursion depth is bounded by ``depth`` (MAX_DEPTH by default).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Color, lerp
from src.pathtracer.geometry.hittable import Hittable, Interval

if TYPE_CHECKING:
    import numpy as np

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = 50

# Lower end of the intersection window, suppresses self-intersection
T_MIN = 0.001

HIT_WINDOW = Interval(T_MIN)

# Sky gradient endpoints
HORIZON_COLOR = Color(1.0, 1.0, 1.0)
ZENITH_COLOR = Color(0.5, 0.7, 1.0)

BLACK = Color(0.0, 0.0, 0.0)


def background(ray: Ray) -> Color:
    """Sky gradient from HORIZON_COLOR (looking down) to ZENITH_COLOR (looking up)."""
    unit_direction = ray.direction.unitize()
    t = 0.5 * (unit_direction.y + 1.0)
    return lerp(HORIZON_COLOR, ZENITH_COLOR, t)


def ray_color(ray: Ray, world: Hittable, depth: int, rng: np.random.Generator) -> Color:
    """Estimate the radiance carried back along a ray.

    Args:
        ray: The ray to trace.
        world: The top-level surface of the scene.
        depth: Remaining bounce budget.
        rng: Random source supplied by the caller.

    Returns:
        The radiance estimate for this path sample.
    """
    if depth <= 0:
        return BLACK

    rec = world.hit_by(ray, HIT_WINDOW)
    if rec is None:
        return background(ray)

    scattered = rec.material.scatter(ray, rec, rng)
    if scattered is None:
        return BLACK

    scattered_ray, attenuation = scattered
    return ray_color(scattered_ray, world, depth - 1, rng).mix(attenuation)


def normal_color(ray: Ray, world: Hittable, depth: int = 1, rng=None) -> Color:
    """Debug shading: visualize surface normals as colors.

    Maps each normal component from [-1, 1] to [0, 1]. Misses show the sky.
    ``depth`` and ``rng`` are accepted so this can stand in for ray_color.
    """
    rec = world.hit_by(ray, HIT_WINDOW)
    if rec is None:
        return background(ray)
    return Color(*(0.5 * (c + 1.0) for c in rec.normal))
