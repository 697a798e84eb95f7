"""Scene arena: the surface tree flattened into Taichi fields.

The render kernels cannot walk Python objects, so before rendering the
scene graph is copied into a structure of arrays:

- one row per primitive (sphere or cuboid), in the order a depth-first walk
  of the surface tree meets them, with the primitive's material id
- one row per distinct material, holding its kind and parameters

A material id is an index into the material rows. It is the in-kernel
handle to a material: it owns nothing, and the arena keeps the material's
parameters for as long as the arena lives.

The closest-hit scan visits primitives in tree order and only accepts a
hit strictly closer than the best so far, which is exactly the behaviour of
nested ``HittableList`` scans.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.pathtracer.scene.presets import create_double_horizon_scene
    >>> scene, _ = create_double_horizon_scene()
    >>> arena = SceneArena(scene.world)
    >>> arena.num_primitives, arena.num_materials
    (2, 2)
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple, Optional

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Displacement, Position
from src.pathtracer.geometry.cuboid import Cuboid
from src.pathtracer.geometry.hittable import Hittable, HittableList
from src.pathtracer.geometry.sphere import Sphere
from src.pathtracer.materials.dielectric import Dielectric
from src.pathtracer.materials.kernels import (
    LAMBERTIAN_KIND,
    METAL_KIND,
    MaterialKind,
    scatter_dielectric,
    scatter_lambertian,
    scatter_metal,
)
from src.pathtracer.materials.lambertian import Lambertian
from src.pathtracer.materials.material import Material
from src.pathtracer.materials.metal import Metal

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Stand-in for an unbounded ray parameter; finite so it survives fast math
T_FAR = 1e30

# Primitive kind codes as plain ints for use inside kernels
SPHERE_KIND = 0
CUBOID_KIND = 1


class PrimitiveKind(IntEnum):
    """Primitive type stored per primitive row."""

    SPHERE = SPHERE_KIND
    CUBOID = CUBOID_KIND


@dataclass
class PrimitiveInfo:
    """One flattened primitive.

    Attributes:
        kind: Sphere or cuboid.
        material_id: Index of the primitive's material row.
        point_a: Sphere center, or the cuboid's lower corner.
        point_b: The cuboid's upper corner (unused for spheres).
        radius: Sphere radius (unused for cuboids).
        inward: Cuboid normals point into the box.
    """

    kind: PrimitiveKind
    material_id: int
    point_a: tuple[float, float, float]
    point_b: tuple[float, float, float] = (0.0, 0.0, 0.0)
    radius: float = 0.0
    inward: bool = False


@dataclass
class MaterialInfo:
    """One material row.

    Attributes:
        kind: Material type for dispatch.
        albedo: Lambertian or metal albedo (white for dielectrics).
        fuzz: Metal fuzz.
        index: Dielectric index of refraction.
    """

    kind: MaterialKind
    albedo: tuple[float, float, float] = (1.0, 1.0, 1.0)
    fuzz: float = 0.0
    index: float = 1.0


class ArenaHit(NamedTuple):
    """Closest hit reported by SceneArena.closest_hit."""

    t: float
    point: Position
    normal: Displacement
    front_face: bool
    material_id: int


def material_info(material: Material) -> MaterialInfo:
    """Describe a material by its kind and parameters.

    Raises:
        TypeError: If the material has no in-kernel counterpart.
    """
    if isinstance(material, Lambertian):
        return MaterialInfo(MaterialKind.LAMBERTIAN, albedo=material.albedo.components)
    if isinstance(material, Metal):
        return MaterialInfo(MaterialKind.METAL, albedo=material.albedo.components, fuzz=material.fuzz)
    if isinstance(material, Dielectric):
        return MaterialInfo(MaterialKind.DIELECTRIC, index=material.index)
    raise TypeError(f"Material {type(material).__name__} cannot be rendered by the kernels")


def flatten_world(world: Hittable) -> tuple[list[PrimitiveInfo], list[MaterialInfo]]:
    """Walk the surface tree depth-first and collect primitives and materials.

    Materials shared by several surfaces get a single material id.

    Raises:
        TypeError: If the tree holds a surface or material the kernels do not know.
    """
    primitives: list[PrimitiveInfo] = []
    materials: list[MaterialInfo] = []
    material_ids: dict[int, int] = {}

    def material_id(material: Material) -> int:
        key = id(material)
        if key not in material_ids:
            material_ids[key] = len(materials)
            materials.append(material_info(material))
        return material_ids[key]

    def visit(node: Hittable) -> None:
        if isinstance(node, HittableList):
            for child in node:
                visit(child)
        elif isinstance(node, Sphere):
            primitives.append(
                PrimitiveInfo(
                    PrimitiveKind.SPHERE,
                    material_id(node.material),
                    point_a=node.center.components,
                    radius=node.radius,
                )
            )
        elif isinstance(node, Cuboid):
            primitives.append(
                PrimitiveInfo(
                    PrimitiveKind.CUBOID,
                    material_id(node.material),
                    point_a=node.lower.components,
                    point_b=node.upper.components,
                    inward=node.inward,
                )
            )
        else:
            raise TypeError(f"Surface {type(node).__name__} cannot be rendered by the kernels")

    visit(world)
    return primitives, materials


@ti.func
def _axis_component(v, axis):
    result = v[0]
    if axis == 1:
        result = v[1]
    elif axis == 2:
        result = v[2]
    return result


@ti.data_oriented
class SceneArena:
    """Structure-of-arrays copy of a scene for the render kernels.

    Attributes:
        num_primitives: Number of primitive rows.
        num_materials: Number of material rows.
    """

    def __init__(self, world: Hittable) -> None:
        primitives, materials = flatten_world(world)
        self.num_primitives = len(primitives)
        self.num_materials = len(materials)

        # Taichi fields need at least one element
        prim_rows = max(self.num_primitives, 1)
        mat_rows = max(self.num_materials, 1)

        # Primitive storage
        self.kind = ti.field(dtype=ti.i32, shape=prim_rows)
        self.material_id = ti.field(dtype=ti.i32, shape=prim_rows)
        self.point_a = ti.Vector.field(3, dtype=float, shape=prim_rows)
        self.point_b = ti.Vector.field(3, dtype=float, shape=prim_rows)
        self.radius = ti.field(dtype=float, shape=prim_rows)
        self.inward = ti.field(dtype=ti.i32, shape=prim_rows)

        # Material storage, indexed by material id
        self.material_kind = ti.field(dtype=ti.i32, shape=mat_rows)
        self.material_albedo = ti.Vector.field(3, dtype=float, shape=mat_rows)
        self.material_fuzz = ti.field(dtype=float, shape=mat_rows)
        self.material_index = ti.field(dtype=float, shape=mat_rows)

        # Result slot for closest_hit queries from Python
        self._query_hit = ti.field(dtype=ti.i32, shape=())
        self._query_t = ti.field(dtype=float, shape=())
        self._query_normal = ti.Vector.field(3, dtype=float, shape=())
        self._query_front_face = ti.field(dtype=ti.i32, shape=())
        self._query_material = ti.field(dtype=ti.i32, shape=())

        if primitives:
            self.kind.from_numpy(np.array([p.kind for p in primitives], dtype=np.int32))
            self.material_id.from_numpy(np.array([p.material_id for p in primitives], dtype=np.int32))
            self.point_a.from_numpy(np.array([p.point_a for p in primitives], dtype=np.float64))
            self.point_b.from_numpy(np.array([p.point_b for p in primitives], dtype=np.float64))
            self.radius.from_numpy(np.array([p.radius for p in primitives], dtype=np.float64))
            self.inward.from_numpy(np.array([p.inward for p in primitives], dtype=np.int32))
        if materials:
            self.material_kind.from_numpy(np.array([m.kind for m in materials], dtype=np.int32))
            self.material_albedo.from_numpy(np.array([m.albedo for m in materials], dtype=np.float64))
            self.material_fuzz.from_numpy(np.array([m.fuzz for m in materials], dtype=np.float64))
            self.material_index.from_numpy(np.array([m.index for m in materials], dtype=np.float64))

        logger.debug(
            "Scene arena: %d primitive(s), %d material(s)",
            self.num_primitives,
            self.num_materials,
        )

    # =========================================================================
    # Primitive intersection
    # =========================================================================

    @ti.func
    def hit_sphere(self, i, origin, direction, t_min, t_max):
        """Half-b quadratic; near root first, then far root.

        Returns (hit, t, outward_normal).
        """
        center = self.point_a[i]
        radius = self.radius[i]
        oc = origin - center
        a = tm.dot(direction, direction)
        half_b = tm.dot(oc, direction)
        c = tm.dot(oc, oc) - radius * radius
        discriminant = half_b * half_b - a * c

        hit = 0
        t = 0.0
        if discriminant >= 0.0:
            sqrt_d = ti.sqrt(discriminant)
            root = (-half_b - sqrt_d) / a
            if t_min <= root and root < t_max:
                hit = 1
                t = root
            else:
                root = (-half_b + sqrt_d) / a
                if t_min <= root and root < t_max:
                    hit = 1
                    t = root

        outward_normal = vec3(0.0, 0.0, 0.0)
        if hit == 1:
            outward_normal = (origin + t * direction - center) / radius
        return hit, t, outward_normal

    @ti.func
    def hit_cuboid(self, i, origin, direction, t_min, t_max):
        """Slab method with the lowest axis winning ties.

        Returns (hit, t, outward_normal).
        """
        lower = self.point_a[i]
        upper = self.point_b[i]
        entries = vec3(0.0, 0.0, 0.0)
        exits = vec3(0.0, 0.0, 0.0)
        hit = 1

        for k in ti.static(range(3)):
            if direction[k] == 0.0:
                # Parallel: inside the open slab or a miss
                if origin[k] <= lower[k] or origin[k] >= upper[k]:
                    hit = 0
                entries[k] = -T_FAR
                exits[k] = T_FAR
            else:
                t_lower = (lower[k] - origin[k]) / direction[k]
                t_upper = (upper[k] - origin[k]) / direction[k]
                if direction[k] > 0.0:
                    entries[k] = t_lower
                    exits[k] = t_upper
                else:
                    entries[k] = t_upper
                    exits[k] = t_lower

        front_axis = 0
        if entries[0] < entries[1]:
            front_axis = 1
            if entries[1] < entries[2]:
                front_axis = 2
        elif entries[0] < entries[2]:
            front_axis = 2

        back_axis = 0
        if exits[0] > exits[1]:
            back_axis = 1
            if exits[1] > exits[2]:
                back_axis = 2
        elif exits[0] > exits[2]:
            back_axis = 2

        t_entry = _axis_component(entries, front_axis)
        t_exit = _axis_component(exits, back_axis)

        t = 0.0
        hit_axis = 0
        entering = 1
        if hit == 1:
            if t_entry > t_exit:
                hit = 0
            elif t_min <= t_entry and t_entry < t_max:
                t = t_entry
                hit_axis = front_axis
            elif t_min <= t_exit and t_exit < t_max:
                t = t_exit
                hit_axis = back_axis
                entering = 0
            else:
                hit = 0

        outward_normal = vec3(0.0, 0.0, 0.0)
        if hit == 1:
            moving_up = 0
            if _axis_component(direction, hit_axis) > 0.0:
                moving_up = 1
            sign = 1.0
            if moving_up == entering:
                sign = -1.0
            if self.inward[i] == 1:
                sign = -sign
            for a in ti.static(range(3)):
                if hit_axis == a:
                    outward_normal[a] = sign
        return hit, t, outward_normal

    @ti.func
    def hit_world(self, origin, direction, t_min, t_max):
        """Closest hit over every primitive, in tree order.

        Returns (hit, t, normal, front_face, material_id) with the normal
        facing against the ray.
        """
        closest = t_max
        hit_any = 0
        hit_t = 0.0
        hit_normal = vec3(0.0, 0.0, 0.0)
        hit_material = -1

        for i in range(self.num_primitives):
            hit = 0
            t = 0.0
            outward_normal = vec3(0.0, 0.0, 0.0)
            if self.kind[i] == SPHERE_KIND:
                hit, t, outward_normal = self.hit_sphere(i, origin, direction, t_min, closest)
            else:
                hit, t, outward_normal = self.hit_cuboid(i, origin, direction, t_min, closest)
            if hit == 1:
                closest = t
                hit_any = 1
                hit_t = t
                hit_normal = outward_normal
                hit_material = self.material_id[i]

        front_face = 0
        if hit_any == 1:
            if tm.dot(direction, hit_normal) < 0.0:
                front_face = 1
            else:
                hit_normal = -hit_normal
        return hit_any, hit_t, hit_normal, front_face, hit_material

    # =========================================================================
    # Material scattering
    # =========================================================================

    @ti.func
    def scatter(self, material_id, incident, normal, front_face):
        """Scatter by the material behind material_id.

        Returns (direction, attenuation, did_scatter).
        """
        direction = vec3(0.0, 0.0, 0.0)
        attenuation = vec3(0.0, 0.0, 0.0)
        did_scatter = 0
        kind = self.material_kind[material_id]
        if kind == LAMBERTIAN_KIND:
            direction, attenuation, did_scatter = scatter_lambertian(
                self.material_albedo[material_id], normal
            )
        elif kind == METAL_KIND:
            direction, attenuation, did_scatter = scatter_metal(
                self.material_albedo[material_id],
                self.material_fuzz[material_id],
                incident,
                normal,
            )
        else:
            direction, attenuation, did_scatter = scatter_dielectric(
                self.material_index[material_id], incident, normal, front_face
            )
        return direction, attenuation, did_scatter

    # =========================================================================
    # Queries from Python
    # =========================================================================

    @ti.kernel
    def _closest_hit(self, origin: vec3, direction: vec3, t_min: float):
        # Single pass; keeps the primitive scan a serial inner loop
        for query in range(1):
            hit, t, normal, front_face, material = self.hit_world(origin, direction, t_min, T_FAR)
            self._query_hit[None] = hit
            self._query_t[None] = t
            self._query_normal[None] = normal
            self._query_front_face[None] = front_face
            self._query_material[None] = material

    def closest_hit(self, ray: Ray, t_min: float = 0.001) -> Optional[ArenaHit]:
        """Run the in-kernel closest-hit scan for one ray.

        Args:
            ray: The ray to trace.
            t_min: Lower end of the hit window.

        Returns:
            The closest hit, or None on a miss.
        """
        self._closest_hit(vec3(*ray.origin), vec3(*ray.direction), t_min)
        if self._query_hit[None] == 0:
            return None
        t = float(self._query_t[None])
        return ArenaHit(
            t=t,
            point=ray.at(t),
            normal=Displacement(*self._query_normal[None].to_numpy().tolist()),
            front_face=bool(self._query_front_face[None]),
            material_id=int(self._query_material[None]),
        )

    def __repr__(self) -> str:
        return (
            f"SceneArena(num_primitives={self.num_primitives}, "
            f"num_materials={self.num_materials})"
        )
