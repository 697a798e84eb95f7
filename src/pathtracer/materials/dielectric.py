"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

The material randomly chooses between reflection and refraction using the
Schlick reflectance as the probability of reflecting, which rises towards
grazing angles. Clear dielectrics never tint or absorb, so the attenuation
is always white.

Indices below 1.0 are accepted and model a less dense medium embedded in
the surrounding one (an air bubble in water, for example).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Color, refract, reflect, schlick_reflectance
from src.pathtracer.materials.material import Material, Scatter

if TYPE_CHECKING:
    import numpy as np

    from src.pathtracer.geometry.hittable import HitRecord

# Clear glass transmits every channel
WHITE = Color(1.0, 1.0, 1.0)


class Dielectric(Material):
    """Refractive material.

    Attributes:
        index: Index of refraction. Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    def __init__(self, index: float = 1.5) -> None:
        if index <= 0.0:
            raise ValueError(f"Index of refraction = {index} must be positive.")
        self.index = float(index)

    def refraction_ratio(self, front_face: bool) -> float:
        """n_incident / n_transmitted for a ray entering or leaving the medium."""
        return 1.0 / self.index if front_face else self.index

    @staticmethod
    def reflectance(cosine: float, ratio: float) -> float:
        return schlick_reflectance(cosine, ratio)

    @staticmethod
    def cannot_refract(cos_theta: float, ratio: float) -> bool:
        """True when Snell's law has no solution (total internal reflection)."""
        sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)
        return ratio * sin_theta > 1.0

    def scatter(self, ray_in: Ray, rec: HitRecord, rng: np.random.Generator) -> Scatter:
        ratio = self.refraction_ratio(rec.front_face)

        unit_direction = ray_in.direction.unitize()
        cos_theta = min((-unit_direction).dot(rec.normal), 1.0)

        if self.cannot_refract(cos_theta, ratio) or rng.random() < self.reflectance(
            cos_theta, ratio
        ):
            direction = reflect(unit_direction, rec.normal)
        else:
            direction = refract(unit_direction, rec.normal, ratio)

        return Ray(rec.point, direction), WHITE

    def __repr__(self) -> str:
        return f"Dielectric(index={self.index!r})"
