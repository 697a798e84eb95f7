"""Sphere primitive with ray-sphere intersection.

The intersection solves |O + tD - C|^2 = r^2, written with the half-b
form of the quadratic:

    a = dot(D, D)
    half_b = dot(O - C, D)
    c = dot(O - C, O - C) - r^2
    t = (-half_b -/+ sqrt(half_b^2 - a*c)) / a

The smaller root is tried first so that a ray starting outside the sphere
reports the near side; if it falls outside the window, the far root is
tried (ray starting inside, or the near hit was too close).

Example:
    >>> from src.pathtracer.core.vector import Color, Position
    >>> from src.pathtracer.materials.lambertian import Lambertian
    >>> sphere = Sphere(Position(0.0, 0.0, -1.0), 0.5, Lambertian(Color(0.5, 0.5, 0.5)))
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Position
from src.pathtracer.geometry.hittable import HitRecord, Hittable, Interval

if TYPE_CHECKING:
    from src.pathtracer.materials.material import Material


class Sphere(Hittable):
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
        material: The material shared with the scene graph.
    """

    def __init__(self, center: Position, radius: float, material: Material) -> None:
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = float(radius)
        self.material = material

    def hit_by(self, ray: Ray, t_range: Interval) -> HitRecord | None:
        oc = ray.origin - self.center
        a = ray.direction.norm_pow2()
        half_b = oc.dot(ray.direction)
        c = oc.norm_pow2() - self.radius * self.radius

        discriminant = half_b * half_b - a * c
        if discriminant < 0.0:
            return None
        sqrt_d = math.sqrt(discriminant)

        root = (-half_b - sqrt_d) / a
        if not t_range.contains(root):
            root = (-half_b + sqrt_d) / a
            if not t_range.contains(root):
                return None

        point = ray.at(root)
        rec = HitRecord(point, root, self.material)
        outward_normal = (point - self.center) / self.radius
        rec.set_face_normal(ray, outward_normal)
        return rec

    def __repr__(self) -> str:
        return f"Sphere(center={self.center!r}, radius={self.radius!r})"
