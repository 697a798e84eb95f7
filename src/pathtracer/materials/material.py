"""Base material interface.

A material decides what happens to light arriving at a surface point: it
either absorbs it (``scatter`` returns None) or bounces it, returning the
scattered ray and the color attenuation applied to whatever that ray
eventually sees.

Materials are immutable after construction and shared by every surface that
uses them. Inside the render kernels a material is referenced by its
material id in the scene arena. All randomness comes from the generator
passed in by the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from src.pathtracer.core.vector import Color

if TYPE_CHECKING:
    import numpy as np

    from src.pathtracer.core.ray import Ray
    from src.pathtracer.geometry.hittable import HitRecord

# (scattered ray, attenuation)
Scatter = tuple["Ray", Color]


def validate_albedo(albedo: Color) -> None:
    """Reject albedo channels outside [0, 1].

    Raises:
        TypeError: If albedo is not a Color.
        ValueError: If any channel would reflect more light than arrives.
    """
    if not isinstance(albedo, Color):
        raise TypeError(f"Albedo must be a Color, got {type(albedo).__name__}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


class Material(ABC):
    """Light scattering behaviour at a surface point."""

    @abstractmethod
    def scatter(
        self, ray_in: Ray, rec: HitRecord, rng: np.random.Generator
    ) -> Scatter | None:
        """Scatter an incident ray.

        Args:
            ray_in: The incoming ray.
            rec: The hit record produced by the surface.
            rng: Random source supplied by the caller.

        Returns:
            (scattered_ray, attenuation), or None if the light is absorbed.
        """
