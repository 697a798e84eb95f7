"""Core rendering module.

Components:
    vector: Role-tagged vectors (Displacement, Position, Color) on numpy, and sampling
    sampling: The same vector utilities and sampling as Taichi functions
    ray: Ray data structure
    integrator: Recursive shading of a ray against the scene (Python reference)
    tracer: Iterative path tracing kernel over the scene arena
    framebuffer: Taichi kernel resolving radiance sums to 8-bit pixels
    renderer: Per-pixel Monte Carlo sampling of the whole image
"""

from .ray import Ray
from .vector import (
    Color,
    Displacement,
    Position,
    Vector,
    cross,
    dot,
    lerp,
    mix,
    random_in_unit_ball,
    random_in_unit_disk,
    random_unit_vector,
    reflect,
    refract,
    schlick_reflectance,
    unitize,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from src.pathtracer.core.renderer when needed.

__all__ = [
    "Ray",
    "Vector",
    "Displacement",
    "Position",
    "Color",
    "dot",
    "cross",
    "unitize",
    "mix",
    "lerp",
    "reflect",
    "refract",
    "schlick_reflectance",
    "random_in_unit_ball",
    "random_unit_vector",
    "random_in_unit_disk",
]
