"""Axis-aligned cuboid primitive using the slab method.

For each axis the ray crosses two parallel planes. The crossing with the
smaller t is the entry into that slab and the larger one is the exit. The
ray is inside the box between the latest entry and the earliest exit, so it
misses when the latest entry comes after the earliest exit.

A ray parallel to an axis never crosses that axis's planes. It misses unless
its origin lies strictly between them, in which case the axis places no
limit on the hit. A ray lying exactly in a face plane therefore misses,
whichever order the corners were given in.

Axis selection uses pairwise comparisons. When two axes have exactly the
same crossing parameter the lower axis index wins (x before y before z).

A cuboid can be marked ``inward``. Its normals then point into the box,
which turns it into a hollow shell seen from the inside; combined with a
dielectric this gives a glass shell whose inner surface faces the ray.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Displacement, Position
from src.pathtracer.geometry.hittable import HitRecord, Hittable, Interval

if TYPE_CHECKING:
    from src.pathtracer.materials.material import Material


def latest_entry_axis(entries: list[float]) -> int:
    if entries[0] < entries[1]:
        return 2 if entries[1] < entries[2] else 1
    return 2 if entries[0] < entries[2] else 0


def earliest_exit_axis(exits: list[float]) -> int:
    if exits[0] > exits[1]:
        return 2 if exits[1] > exits[2] else 1
    return 2 if exits[0] > exits[2] else 0


class Cuboid(Hittable):
    """Box spanned by two opposite corners.

    Attributes:
        lower: Corner with the smallest coordinate on every axis.
        upper: Corner with the largest coordinate on every axis.
        inward: If True, normals point into the box.
        material: The material shared with the scene graph.
    """

    def __init__(
        self,
        corner_a: Position,
        corner_b: Position,
        material: Material,
        inward: bool = False,
    ) -> None:
        if corner_a.dim != 3 or corner_b.dim != 3:
            raise ValueError("Cuboid corners must be 3-D positions")
        self.lower = Position(*(min(a, b) for a, b in zip(corner_a, corner_b)))
        self.upper = Position(*(max(a, b) for a, b in zip(corner_a, corner_b)))
        self.inward = inward
        self.material = material

    def hit_by(self, ray: Ray, t_range: Interval) -> HitRecord | None:
        entries = []
        exits = []
        for axis in range(3):
            origin = ray.origin[axis]
            direction = ray.direction[axis]
            lower, upper = self.lower[axis], self.upper[axis]
            if direction == 0.0:
                if not lower < origin < upper:
                    return None
                entries.append(-math.inf)
                exits.append(math.inf)
                continue
            t_lower = (lower - origin) / direction
            t_upper = (upper - origin) / direction
            if direction > 0.0:
                entries.append(t_lower)
                exits.append(t_upper)
            else:
                entries.append(t_upper)
                exits.append(t_lower)

        front_axis = latest_entry_axis(entries)
        back_axis = earliest_exit_axis(exits)
        t_entry = entries[front_axis]
        t_exit = exits[back_axis]
        if t_entry > t_exit:
            return None

        if t_range.contains(t_entry):
            t, axis, entering = t_entry, front_axis, True
        elif t_range.contains(t_exit):
            t, axis, entering = t_exit, back_axis, False
        else:
            return None

        # Entering through the lower plane (or leaving through it) faces -axis
        moving_up = ray.direction[axis] > 0.0
        sign = -1.0 if moving_up == entering else 1.0
        if self.inward:
            sign = -sign
        components = [0.0, 0.0, 0.0]
        components[axis] = sign
        outward_normal = Displacement(*components)

        rec = HitRecord(ray.at(t), t, self.material)
        rec.set_face_normal(ray, outward_normal)
        return rec

    def __repr__(self) -> str:
        return f"Cuboid(lower={self.lower!r}, upper={self.upper!r}, inward={self.inward!r})"
