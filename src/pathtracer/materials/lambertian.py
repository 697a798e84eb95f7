"""Lambertian (ideal diffuse) material implementation.

The scattered direction is the surface normal plus a random unit vector.
Adding a uniformly distributed point on the unit sphere to the normal
gives directions distributed proportionally to cos(theta), which is the
Lambertian lobe, so the attenuation is simply the albedo.

If the random vector almost exactly cancels the normal the resulting
direction is degenerate; the normal itself is used instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Color, random_unit_vector
from src.pathtracer.materials.material import Material, Scatter, validate_albedo

if TYPE_CHECKING:
    import numpy as np

    from src.pathtracer.geometry.hittable import HitRecord


class Lambertian(Material):
    """Ideal diffuse reflector.

    Attributes:
        albedo: The diffuse reflectance color, each channel in [0, 1].
    """

    def __init__(self, albedo: Color) -> None:
        validate_albedo(albedo)
        self.albedo = albedo

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: np.random.Generator) -> Scatter:
        direction = rec.normal + random_unit_vector(rng, rec.normal.dim)

        if direction.near_zero():
            direction = rec.normal

        # Diffuse surfaces never absorb
        return Ray(rec.point, direction), self.albedo

    def __repr__(self) -> str:
        return f"Lambertian(albedo={self.albedo!r})"
