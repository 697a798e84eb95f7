"""Metal (specular reflective) material implementation.

The incident direction is mirrored about the normal and then perturbed by a
random point in a ball of radius ``fuzz``:

    scattered = reflect(unit(d), n) + fuzz * random_in_unit_ball

A perturbation can push the scattered direction below the surface. Such a
ray is absorbed instead of being allowed to travel into the object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Color, random_in_unit_ball, reflect
from src.pathtracer.materials.material import Material, Scatter, validate_albedo

if TYPE_CHECKING:
    import numpy as np

    from src.pathtracer.geometry.hittable import HitRecord


class Metal(Material):
    """Specular reflector with optional roughness.

    Attributes:
        albedo: The reflective color, each channel in [0, 1].
        fuzz: Perturbation radius in [0, 1]. 0 is a perfect mirror.
    """

    def __init__(self, albedo: Color, fuzz: float = 0.0) -> None:
        validate_albedo(albedo)
        if fuzz < 0.0 or fuzz > 1.0:
            raise ValueError(f"Fuzz = {fuzz} is outside [0, 1].")
        self.albedo = albedo
        self.fuzz = float(fuzz)

    def scatter(
        self, ray_in: Ray, rec: HitRecord, rng: np.random.Generator
    ) -> Scatter | None:
        reflected = reflect(ray_in.direction.unitize(), rec.normal)
        direction = reflected + random_in_unit_ball(rng, reflected.dim) * self.fuzz

        if direction.dot(rec.normal) <= 0.0:
            return None
        return Ray(rec.point, direction), self.albedo

    def __repr__(self) -> str:
        return f"Metal(albedo={self.albedo!r}, fuzz={self.fuzz!r})"
