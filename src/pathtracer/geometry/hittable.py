"""Ray-surface intersection contract and the aggregate surface list.

Every surface implements ``hit_by(ray, t_range)`` which returns the nearest
intersection whose parameter lies in the half-open window ``t_range``, or
None. Hits are reported through a HitRecord that points back at the
material of the surface that produced it.

The scene graph owns its materials. A HitRecord only keeps a weak reference,
so the records created on every bounce never become a second owner of a
long-lived material.
"""

from __future__ import annotations

import math
import weakref
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, NamedTuple

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Displacement, Position

if TYPE_CHECKING:
    from src.pathtracer.materials.material import Material


class MaterialReleasedError(RuntimeError):
    """A hit record outlived the scene that owned its material.

    This is an invariant violation, not a recoverable rendering condition.
    """


class Interval(NamedTuple):
    """Half-open parameter window [start, end)."""

    start: float
    end: float = math.inf

    def contains(self, t: float) -> bool:
        return self.start <= t < self.end

    def with_end(self, end: float) -> Interval:
        return Interval(self.start, end)


class HitRecord:
    """Result of a successful ray-surface intersection.

    Attributes:
        point: Where the ray met the surface.
        normal: Unit surface normal, always facing against the incident ray.
        t: Ray parameter of the hit.
        front_face: True if the ray arrived from the outward side.
    """

    __slots__ = ("point", "normal", "t", "front_face", "_material")

    def __init__(self, point: Position, t: float, material: Material) -> None:
        self.point = point
        self.t = t
        self.normal = Displacement.zeros(point.dim)
        self.front_face = False
        self._material = weakref.ref(material)

    @property
    def material(self) -> Material:
        """Resolve the material of the surface that was hit."""
        material = self._material()
        if material is None:
            raise MaterialReleasedError(
                "Hit record refers to a material that is no longer owned by the scene"
            )
        return material

    def set_face_normal(self, ray: Ray, outward_normal: Displacement) -> None:
        """Store the normal so that it points against the incident ray.

        Args:
            ray: The incident ray.
            outward_normal: Unit normal pointing out of the surface.
        """
        self.front_face = ray.direction.dot(outward_normal) < 0.0
        self.normal = outward_normal if self.front_face else -outward_normal

    def __repr__(self) -> str:
        return (
            f"HitRecord(point={self.point!r}, normal={self.normal!r}, t={self.t!r}, "
            f"front_face={self.front_face!r})"
        )


class Hittable(ABC):
    """Anything a ray can intersect."""

    @abstractmethod
    def hit_by(self, ray: Ray, t_range: Interval) -> HitRecord | None:
        """Return the nearest hit with t inside t_range, or None."""


class HittableList(Hittable):
    """Ordered collection of surfaces, itself a surface.

    Intersection is a linear scan. The window end shrinks to the closest
    hit found so far, so later members are tested against a tighter range.
    Lists may be nested to any depth.
    """

    def __init__(self, objects: Iterable[Hittable] = ()) -> None:
        self._objects: list[Hittable] = list(objects)

    def add(self, obj: Hittable) -> None:
        self._objects.append(obj)

    def clear(self) -> None:
        self._objects.clear()

    @property
    def objects(self) -> tuple[Hittable, ...]:
        return tuple(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Hittable]:
        return iter(self._objects)

    def hit_by(self, ray: Ray, t_range: Interval) -> HitRecord | None:
        closest: HitRecord | None = None
        closest_so_far = t_range.end

        for obj in self._objects:
            rec = obj.hit_by(ray, t_range.with_end(closest_so_far))
            if rec is not None:
                closest_so_far = rec.t
                closest = rec

        return closest
