"""Ray data structure.

A ray is the parametric line origin + t * direction. Rays are immutable
values that get created and thrown away on every bounce, so they carry no
validation: t may be negative or beyond any surface, and the direction does
not have to be unit length.

Example:
    >>> from src.pathtracer.core.ray import Ray
    >>> from src.pathtracer.core.vector import Displacement, Position
    >>> ray = Ray(Position(0.0, 0.0, 0.0), Displacement(0.0, 0.0, -1.0))
    >>> ray.at(5.0)
    Position(0.0, 0.0, -5.0)
"""

from dataclasses import dataclass

from src.pathtracer.core.vector import Displacement, Position


@dataclass(frozen=True, slots=True)
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of travel. Not required to be normalized.
    """

    origin: Position
    direction: Displacement

    def at(self, t: float) -> Position:
        """Compute the point along the ray at parameter t."""
        return self.origin + self.direction * t
