"""Material scattering inside Taichi kernels.

Each function mirrors the ``scatter`` method of the matching material class
and works on plain parameters looked up from the scene arena by material id.
Every function returns ``(direction, attenuation, did_scatter)``; the
scattered ray always starts at the hit point.

Example:
    >>> # Inside a Taichi kernel:
    >>> # direction, attenuation, did_scatter = scatter_metal(albedo, fuzz, d, n)
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.sampling import (
    near_zero,
    random_in_unit_ball,
    random_unit_vector,
    reflect,
    refract,
    schlick_reflectance,
)

# Type alias for 3D vectors
vec3 = tm.vec3


# Material kind codes as plain ints for use inside kernels
LAMBERTIAN_KIND = 0
METAL_KIND = 1
DIELECTRIC_KIND = 2


class MaterialKind(IntEnum):
    """Material type stored per material id, used for dispatch in kernels."""

    LAMBERTIAN = LAMBERTIAN_KIND
    METAL = METAL_KIND
    DIELECTRIC = DIELECTRIC_KIND


@ti.func
def scatter_lambertian(albedo, normal):
    """Diffuse bounce: normal plus a random unit vector, never absorbed."""
    direction = normal + random_unit_vector()
    if near_zero(direction):
        direction = normal
    return direction, albedo, 1


@ti.func
def scatter_metal(albedo, fuzz, incident, normal):
    """Mirror reflection perturbed inside a ball of radius fuzz.

    A perturbation that points below the surface absorbs the ray.
    """
    reflected = reflect(tm.normalize(incident), normal)
    direction = reflected + fuzz * random_in_unit_ball()
    did_scatter = 0
    if tm.dot(direction, normal) > 0.0:
        did_scatter = 1
    return direction, albedo, did_scatter


@ti.func
def scatter_dielectric(index, incident, normal, front_face):
    """Reflect or refract through a clear dielectric (white attenuation)."""
    ratio = index
    if front_face == 1:
        ratio = 1.0 / index

    unit_direction = tm.normalize(incident)
    cos_theta = ti.min(tm.dot(-unit_direction, normal), 1.0)
    sin_theta = ti.sqrt(ti.max(1.0 - cos_theta * cos_theta, 0.0))

    direction = vec3(0.0, 0.0, 0.0)
    if ratio * sin_theta > 1.0 or ti.random(float) < schlick_reflectance(cos_theta, ratio):
        direction = reflect(unit_direction, normal)
    else:
        direction = refract(unit_direction, normal, ratio)
    return direction, vec3(1.0, 1.0, 1.0), 1
