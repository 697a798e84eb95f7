"""Build scene graphs from plain dictionaries.

A description names its materials once and refers to them by name from
any number of objects, so a material is constructed a single time and
shared. Objects are spheres, cuboids, or nested lists of objects.

Description layout::

    {
        "materials": {
            "ground": {"type": "lambertian", "albedo": [0.8, 0.8, 0.0]},
            "mirror": {"type": "metal", "albedo": [0.8, 0.8, 0.8], "fuzz": 0.0},
            "glass": {"type": "dielectric", "index": 1.5},
        },
        "objects": [
            {"type": "sphere", "center": [0, -100.5, -1], "radius": 100,
             "material": "ground"},
            {"type": "cuboid", "min": [-1, -1, -3], "max": [1, 1, -2],
             "material": "glass", "inward": false},
            {"type": "list", "objects": [...]},
        ],
    }

The returned Scene holds the only strong references to the materials.
Hit records produced while rendering keep weak references, so the Scene
must stay alive for as long as its world is being rendered.

Example:
    >>> scene = build_scene({
    ...     "materials": {"grey": {"type": "lambertian", "albedo": [0.5, 0.5, 0.5]}},
    ...     "objects": [{"type": "sphere", "center": [0, 0, -1], "radius": 0.5,
    ...                  "material": "grey"}],
    ... })
    >>> len(scene.world)
    1
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.pathtracer.core.vector import Color, Position
from src.pathtracer.geometry.cuboid import Cuboid
from src.pathtracer.geometry.hittable import Hittable, HittableList
from src.pathtracer.geometry.sphere import Sphere
from src.pathtracer.materials.dielectric import Dielectric
from src.pathtracer.materials.lambertian import Lambertian
from src.pathtracer.materials.material import Material
from src.pathtracer.materials.metal import Metal


@dataclass
class Scene:
    """A built scene: the surface tree plus the materials it uses.

    Attributes:
        world: Top-level surface handed to the renderer.
        materials: Materials by name. This mapping owns them.
    """

    world: HittableList
    materials: dict[str, Material] = field(default_factory=dict)


def _vector3(values: Any, key: str) -> tuple[float, float, float]:
    if values is None or len(values) != 3:
        raise ValueError(f"'{key}' must be a list of 3 numbers, got {values!r}")
    return float(values[0]), float(values[1]), float(values[2])


def build_material(config: dict[str, Any]) -> Material:
    """Construct one material from its description.

    Raises:
        ValueError: If the type is unknown or a parameter is invalid.
    """
    mat_type = str(config.get("type", "")).lower()
    if mat_type == "lambertian":
        albedo = _vector3(config.get("albedo", [0.5, 0.5, 0.5]), "albedo")
        return Lambertian(Color(*albedo))
    if mat_type == "metal":
        albedo = _vector3(config.get("albedo", [0.8, 0.8, 0.8]), "albedo")
        return Metal(Color(*albedo), float(config.get("fuzz", 0.0)))
    if mat_type == "dielectric":
        return Dielectric(float(config.get("index", 1.5)))
    raise ValueError(f"Unknown material type: {mat_type!r}")


def build_object(config: dict[str, Any], materials: dict[str, Material]) -> Hittable:
    """Construct one surface (recursively for lists).

    Raises:
        ValueError: If the type is unknown or refers to a missing material.
    """
    obj_type = str(config.get("type", "")).lower()
    if obj_type == "list":
        return HittableList(build_object(child, materials) for child in config.get("objects", []))

    name = config.get("material")
    if name not in materials:
        raise ValueError(f"Object of type {obj_type!r} refers to unknown material {name!r}")
    material = materials[name]

    if obj_type == "sphere":
        center = _vector3(config.get("center"), "center")
        return Sphere(Position(*center), float(config.get("radius", 1.0)), material)
    if obj_type == "cuboid":
        corner_a = _vector3(config.get("min"), "min")
        corner_b = _vector3(config.get("max"), "max")
        return Cuboid(
            Position(*corner_a),
            Position(*corner_b),
            material,
            inward=bool(config.get("inward", False)),
        )
    raise ValueError(f"Unknown object type: {obj_type!r}")


def build_scene(description: dict[str, Any]) -> Scene:
    """Build a Scene from a description dictionary.

    Args:
        description: Dictionary with 'materials' and 'objects' keys.

    Returns:
        The built Scene.

    Raises:
        ValueError: If the description contains invalid data.
    """
    materials = {
        name: build_material(config)
        for name, config in description.get("materials", {}).items()
    }
    world = HittableList(
        build_object(config, materials) for config in description.get("objects", [])
    )
    return Scene(world=world, materials=materials)
