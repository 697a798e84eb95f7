"""Thin-lens camera model for perspective ray generation.

The camera supports:
- Look-at positioning (look_from, look_at, vup)
- Vertical field of view in degrees
- Arbitrary aspect ratios
- Optional depth of field (aperture and focus distance)

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at toward look_from (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

With a zero aperture every ray starts at look_from and the camera behaves
as a pinhole. A positive aperture jitters ray origins across a lens disk;
only points at ``focus_distance`` along -w stay sharp.

Example:
    >>> from src.pathtracer.camera.thin_lens import Camera, CameraSettings
    >>> camera = Camera.from_settings(CameraSettings(
    ...     look_from=(0.0, 0.0, 0.0),
    ...     look_at=(0.0, 0.0, -1.0),
    ...     vup=(0.0, 1.0, 0.0),
    ...     vfov=90.0,
    ...     aspect_ratio=16.0 / 9.0,
    ... ))
    >>> ray = camera.get_ray(0.5, 0.5)  # Ray through image center
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from src.pathtracer.core.ray import Ray
from src.pathtracer.core.vector import Displacement, Position, random_in_unit_disk

# =============================================================================
# Camera Configuration
# =============================================================================


@dataclass(frozen=True)
class CameraSettings:
    """Configuration for a camera.

    Attributes:
        look_from: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at in world space (x, y, z).
        vup: Up direction hint for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. 0 gives a pinhole camera.
        focus_distance: Distance from look_from to the plane in focus.
    """

    look_from: tuple[float, float, float]
    look_at: tuple[float, float, float]
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 90.0
    aspect_ratio: float = 16.0 / 9.0
    aperture: float = 0.0
    focus_distance: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov must be in (0, 180) degrees, got {self.vfov}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.aperture < 0.0:
            raise ValueError(f"aperture must be non-negative, got {self.aperture}")
        if self.focus_distance <= 0.0:
            raise ValueError(f"focus_distance must be positive, got {self.focus_distance}")

        view = Position(*self.look_from) - Position(*self.look_at)
        if view.norm_pow2() == 0.0:
            raise ValueError("look_from and look_at must be different points")
        if Displacement(*self.vup).cross(view).near_zero():
            raise ValueError("vup must not be parallel to the view direction")


# =============================================================================
# Camera
# =============================================================================


class Camera:
    """Immutable camera mapping normalized screen coordinates to rays.

    Everything is derived once in the constructor; ``get_ray`` only reads.
    """

    __slots__ = (
        "origin",
        "u",
        "v",
        "w",
        "horizontal",
        "vertical",
        "lower_left_corner",
        "lens_radius",
    )

    def __init__(
        self,
        look_from: Position,
        look_at: Position,
        vup: Displacement,
        vfov: float,
        aspect_ratio: float,
        aperture: float = 0.0,
        focus_distance: float = 1.0,
    ) -> None:
        theta = math.radians(vfov)
        h = math.tan(theta / 2.0)
        viewport_height = 2.0 * h
        viewport_width = aspect_ratio * viewport_height

        w = (look_from - look_at).unitize()
        u = vup.cross(w).unitize()
        v = w.cross(u)

        horizontal = u * (viewport_width * focus_distance)
        vertical = v * (viewport_height * focus_distance)

        object.__setattr__(self, "origin", look_from)
        object.__setattr__(self, "u", u)
        object.__setattr__(self, "v", v)
        object.__setattr__(self, "w", w)
        object.__setattr__(self, "horizontal", horizontal)
        object.__setattr__(self, "vertical", vertical)
        object.__setattr__(
            self,
            "lower_left_corner",
            look_from - horizontal / 2.0 - vertical / 2.0 - w * focus_distance,
        )
        object.__setattr__(self, "lens_radius", aperture / 2.0)

    @classmethod
    def from_settings(cls, settings: CameraSettings) -> Camera:
        return cls(
            look_from=Position(*settings.look_from),
            look_at=Position(*settings.look_at),
            vup=Displacement(*settings.vup),
            vfov=settings.vfov,
            aspect_ratio=settings.aspect_ratio,
            aperture=settings.aperture,
            focus_distance=settings.focus_distance,
        )

    def __setattr__(self, name: str, value) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def basis(self) -> tuple[Displacement, Displacement, Displacement]:
        """The orthonormal basis (u, v, w): right, up, backward."""
        return self.u, self.v, self.w

    def get_ray(self, s: float, t: float, rng: np.random.Generator | None = None) -> Ray:
        """Generate a ray through normalized image coordinates (s, t).

        Args:
            s: Horizontal coordinate, 0 = left edge, 1 = right edge.
            t: Vertical coordinate, 0 = bottom edge, 1 = top edge.
            rng: Random source for the lens sample. Only used with a
                positive aperture; a fresh generator is made if omitted.

        Returns:
            A ray from the (possibly jittered) lens point through the
            viewport point (s, t). The direction is not normalized.
        """
        origin = self.origin
        if self.lens_radius > 0.0:
            if rng is None:
                rng = np.random.default_rng()
            rd = random_in_unit_disk(rng) * self.lens_radius
            origin = origin + self.u * rd.x + self.v * rd.y

        target = self.lower_left_corner + self.horizontal * s + self.vertical * t
        return Ray(origin, target - origin)

    def __repr__(self) -> str:
        return (
            f"Camera(origin={self.origin!r}, w={self.w!r}, lens_radius={self.lens_radius!r})"
        )
