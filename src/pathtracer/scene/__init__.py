"""Scene module: building surface trees and preset scenes."""

from .builder import Scene, build_material, build_object, build_scene
from .presets import SCENES, create_double_horizon_scene, create_material_showcase_scene

__all__ = [
    "Scene",
    "build_scene",
    "build_material",
    "build_object",
    "SCENES",
    "create_double_horizon_scene",
    "create_material_showcase_scene",
]
