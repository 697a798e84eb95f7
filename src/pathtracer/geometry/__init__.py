"""Geometry module for shape primitives.

Components:
    hittable: Intersection contract, hit records and the surface list
    sphere: Sphere primitive
    cuboid: Axis-aligned box primitive (optionally facing inward)

Ray-object intersection follows the pattern:
    rec = surface.hit_by(ray, Interval(t_min, t_max))
"""

from .cuboid import Cuboid
from .hittable import HitRecord, Hittable, HittableList, Interval, MaterialReleasedError
from .sphere import Sphere

__all__ = [
    "Hittable",
    "HittableList",
    "HitRecord",
    "Interval",
    "MaterialReleasedError",
    "Sphere",
    "Cuboid",
]
