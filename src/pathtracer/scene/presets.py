"""Ready-made scenes.

Each factory returns ``(scene, camera_settings)``. The camera settings
default to a 16:9 aspect ratio; pass a different ``aspect_ratio`` to match
other image sizes.

Scenes:
    double_horizon: A diffuse sphere resting on a huge ground sphere,
        whose curved edge forms a second horizon under the sky.
    material_showcase: Diffuse, metal and glass side by side, including a
        hollow glass box built from an outer cuboid and an inward-facing
        inner cuboid.

Example:
    >>> scene, camera_settings = create_double_horizon_scene()
    >>> camera = Camera.from_settings(camera_settings)
"""

from __future__ import annotations

from collections.abc import Callable

from src.pathtracer.camera.thin_lens import CameraSettings
from src.pathtracer.scene.builder import Scene, build_scene

DEFAULT_ASPECT_RATIO = 16.0 / 9.0


def create_double_horizon_scene(
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
) -> tuple[Scene, CameraSettings]:
    """Sphere on a large ground sphere, seen head-on."""
    scene = build_scene(
        {
            "materials": {
                "ground": {"type": "lambertian", "albedo": [0.8, 0.8, 0.0]},
                "center": {"type": "lambertian", "albedo": [0.7, 0.3, 0.3]},
            },
            "objects": [
                {"type": "sphere", "center": [0.0, 0.0, -1.0], "radius": 0.5,
                 "material": "center"},
                {"type": "sphere", "center": [0.0, -100.5, -1.0], "radius": 100.0,
                 "material": "ground"},
            ],
        }
    )
    camera_settings = CameraSettings(
        look_from=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        vup=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=aspect_ratio,
    )
    return scene, camera_settings


def create_material_showcase_scene(
    aspect_ratio: float = DEFAULT_ASPECT_RATIO,
    aperture: float = 0.0,
) -> tuple[Scene, CameraSettings]:
    """Diffuse and fuzzed metal spheres, a glass sphere and a hollow glass box."""
    scene = build_scene(
        {
            "materials": {
                "ground": {"type": "lambertian", "albedo": [0.8, 0.8, 0.0]},
                "center": {"type": "lambertian", "albedo": [0.1, 0.2, 0.5]},
                "glass": {"type": "dielectric", "index": 1.5},
                "gold": {"type": "metal", "albedo": [0.8, 0.6, 0.2], "fuzz": 0.3},
            },
            "objects": [
                {"type": "sphere", "center": [0.0, -100.5, -1.0], "radius": 100.0,
                 "material": "ground"},
                {"type": "sphere", "center": [0.0, 0.0, -1.0], "radius": 0.5,
                 "material": "center"},
                {"type": "sphere", "center": [1.0, 0.0, -1.0], "radius": 0.5,
                 "material": "gold"},
                {"type": "sphere", "center": [-1.0, 0.0, -1.0], "radius": 0.5,
                 "material": "glass"},
                # Glass walls 0.05 thick: the inward inner box faces its hollow
                {
                    "type": "list",
                    "objects": [
                        {"type": "cuboid", "min": [-0.3, -0.5, -2.3], "max": [0.3, 0.1, -1.7],
                         "material": "glass"},
                        {"type": "cuboid", "min": [-0.25, -0.45, -2.25],
                         "max": [0.25, 0.05, -1.75], "material": "glass", "inward": True},
                    ],
                },
            ],
        }
    )
    look_from = (-2.0, 2.0, 1.0)
    look_at = (0.0, 0.0, -1.0)
    focus_distance = sum((a - b) ** 2 for a, b in zip(look_from, look_at)) ** 0.5
    camera_settings = CameraSettings(
        look_from=look_from,
        look_at=look_at,
        vup=(0.0, 1.0, 0.0),
        vfov=30.0,
        aspect_ratio=aspect_ratio,
        aperture=aperture,
        focus_distance=focus_distance,
    )
    return scene, camera_settings


SCENES: dict[str, Callable[..., tuple[Scene, CameraSettings]]] = {
    "double_horizon": create_double_horizon_scene,
    "material_showcase": create_material_showcase_scene,
}
