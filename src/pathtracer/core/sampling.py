"""Vector utilities and random sampling for Taichi kernels.

These are the in-kernel counterparts of the role-tagged functions in
``core.vector``: the same formulas, written on ``taichi.math.vec3`` so the
render kernels can call them. Randomness comes from ``ti.random``, which
keeps an independent generator state per hardware thread, seeded by
``ti.init(random_seed=...)``.

All floats use Taichi's default float type.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def sample() -> ti.math.vec3:
    ...     return random_unit_vector()
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Components below this magnitude count as zero for degenerate-direction checks
NEAR_ZERO_EPSILON = 1e-8

# Rejection sampling gives up after this many draws (the odds of needing it
# are below 1e-30)
MAX_REJECTION_TRIES = 100


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def reflect(v, n):
    """Mirror v about the unit normal n, as two subtractions of the projection."""
    projection = n * tm.dot(v, n)
    return v - projection - projection


@ti.func
def refract(uv, n, eta_ratio):
    """Bend the unit incident vector uv through a surface with unit normal n.

    eta_ratio is n_incident / n_transmitted. The caller checks for total
    internal reflection first.
    """
    cos_theta = ti.min(tm.dot(-uv, n), 1.0)
    r_out_perp = eta_ratio * (uv + cos_theta * n)
    r_out_parallel = -ti.sqrt(ti.abs(1.0 - tm.dot(r_out_perp, r_out_perp))) * n
    return r_out_perp + r_out_parallel


@ti.func
def schlick_reflectance(cosine, ratio):
    """Schlick's approximation of Fresnel reflectance."""
    r0 = ((1.0 - ratio) / (1.0 + ratio)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


@ti.func
def near_zero(v) -> ti.i32:
    s = NEAR_ZERO_EPSILON
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_in_unit_ball():
    """Uniform point strictly inside the unit ball, by rejection sampling."""
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for attempt in range(MAX_REJECTION_TRIES):
        if not found:
            candidate = vec3(
                ti.random(float) * 2.0 - 1.0,
                ti.random(float) * 2.0 - 1.0,
                ti.random(float) * 2.0 - 1.0,
            )
            if tm.dot(candidate, candidate) < 1.0:
                p = candidate
                found = True
    return p


@ti.func
def random_unit_vector():
    """Uniform direction on the unit sphere (ball sample projected outward)."""
    p = vec3(0.0, 0.0, 1.0)
    found = False
    for retry in range(MAX_REJECTION_TRIES):
        if not found:
            candidate = random_in_unit_ball()
            # The origin cannot be projected onto the sphere
            if tm.dot(candidate, candidate) > 0.0:
                p = tm.normalize(candidate)
                found = True
    return p


@ti.func
def random_in_unit_disk():
    """Uniform point inside the unit disk in the xy-plane (z = 0)."""
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for attempt in range(MAX_REJECTION_TRIES):
        if not found:
            candidate = vec3(ti.random(float) * 2.0 - 1.0, ti.random(float) * 2.0 - 1.0, 0.0)
            if candidate.x * candidate.x + candidate.y * candidate.y < 1.0:
                p = candidate
                found = True
    return p
