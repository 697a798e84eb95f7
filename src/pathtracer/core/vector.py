"""Role-tagged vector algebra for the path tracer.

This module provides a small N-dimensional vector type split into three
roles that share one representation, a read-only numpy array:

- Displacement: a free vector (difference of two points, or a direction)
- Position: an affine point
- Color: light energy per channel

The roles restrict which operations make sense. Two positions may be
subtracted to give a displacement, but never added. Colors can be mixed
(component-wise product) for attenuation but have no dot or cross product.
Invalid combinations fall through the Python operator protocol and raise
TypeError.

These types describe scenes and serve as the reference math. The render
kernels use the matching Taichi functions in ``core.sampling``.

Example:
    >>> from src.pathtracer.core.vector import Displacement, Position
    >>> a = Position(0.0, 0.0, 0.0)
    >>> b = Position(1.0, 2.0, 2.0)
    >>> (b - a).norm()
    3.0
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator

import numpy as np

# Components below this magnitude count as zero for degenerate-direction checks
NEAR_ZERO_EPSILON = 1e-8

Scalar = (int, float)


class Vector:
    """Immutable fixed-size vector of floats.

    Subclasses decide which arithmetic is allowed. The base class only
    provides storage, comparison and negation.
    """

    __slots__ = ("_data",)

    def __init__(self, *components: float) -> None:
        if not components:
            raise ValueError(f"{type(self).__name__} needs at least one component")
        data = np.array(components, dtype=np.float64)
        if data.ndim != 1:
            raise ValueError(f"{type(self).__name__} components must be scalars")
        data.flags.writeable = False
        self._data = data

    @classmethod
    def from_array(cls, values: np.ndarray):
        """Wrap a 1-D array of floats without going through the varargs constructor."""
        v = cls.__new__(cls)
        data = np.array(values, dtype=np.float64)
        data.flags.writeable = False
        v._data = data
        return v

    @classmethod
    def from_iterable(cls, values: Iterable[float]):
        """Build a vector of this role from any iterable of numbers."""
        return cls(*values)

    @classmethod
    def zeros(cls, dim: int = 3):
        """Return the zero vector of the given dimension."""
        return cls.from_array(np.zeros(dim))

    @property
    def components(self) -> tuple[float, ...]:
        return tuple(self._data.tolist())

    @property
    def array(self) -> np.ndarray:
        """The read-only backing array."""
        return self._data

    @property
    def dim(self) -> int:
        return self._data.shape[0]

    @property
    def x(self) -> float:
        return float(self._data[0])

    @property
    def y(self) -> float:
        return float(self._data[1])

    @property
    def z(self) -> float:
        return float(self._data[2])

    def __len__(self) -> int:
        return self.dim

    def __iter__(self) -> Iterator[float]:
        return iter(self._data.tolist())

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return bool(np.array_equal(self._data, other._data))

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.components))

    def __repr__(self) -> str:
        inner = ", ".join(repr(c) for c in self._data.tolist())
        return f"{type(self).__name__}({inner})"

    def __neg__(self):
        return type(self).from_array(-self._data)

    def isclose(self, other: Vector, tol: float = 1e-9) -> bool:
        """Check component-wise closeness against a vector of the same role."""
        if type(other) is not type(self) or other.dim != self.dim:
            return False
        return bool(np.all(np.abs(self._data - other._data) <= tol))

    def _check_dim(self, other: Vector) -> None:
        if other.dim != self.dim:
            raise ValueError(f"Dimension mismatch: {self.dim} vs {other.dim}")

    def _zip_with(self, other: Vector, op, result_type):
        self._check_dim(other)
        return result_type.from_array(op(self._data, other._data))

    def _scale(self, factor: float):
        return type(self).from_array(self._data * factor)

    def _divide(self, divisor: float):
        if divisor == 0:
            raise ZeroDivisionError(f"{type(self).__name__} division by zero")
        return type(self).from_array(self._data / divisor)


class Displacement(Vector):
    """A free vector: a direction or the difference of two positions."""

    __slots__ = ()

    def __add__(self, other):
        if type(other) is not Displacement:
            return NotImplemented
        return self._zip_with(other, np.add, Displacement)

    def __sub__(self, other):
        if type(other) is not Displacement:
            return NotImplemented
        return self._zip_with(other, np.subtract, Displacement)

    def __mul__(self, factor):
        if not isinstance(factor, Scalar):
            return NotImplemented
        return self._scale(factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        if not isinstance(divisor, Scalar):
            return NotImplemented
        return self._divide(divisor)

    def dot(self, other: Displacement) -> float:
        if type(other) is not Displacement:
            raise TypeError(f"dot() needs a Displacement, got {type(other).__name__}")
        self._check_dim(other)
        return float(np.dot(self._data, other._data))

    def norm_pow2(self) -> float:
        return self.dot(self)

    def norm(self) -> float:
        return math.sqrt(self.norm_pow2())

    def unitize(self) -> Displacement:
        """Scale to unit length. Raises ZeroDivisionError for the zero vector."""
        return self / self.norm()

    def cross(self, other: Displacement) -> Displacement:
        if type(other) is not Displacement:
            raise TypeError(f"cross() needs a Displacement, got {type(other).__name__}")
        if self.dim != 3 or other.dim != 3:
            raise ValueError("cross() is only defined for 3-D displacements")
        return Displacement.from_array(np.cross(self._data, other._data))

    def reflect(self, normal: Displacement) -> Displacement:
        return reflect(self, normal)

    def refract(self, normal: Displacement, eta_ratio: float) -> Displacement:
        return refract(self, normal, eta_ratio)

    def near_zero(self) -> bool:
        """True if every component is smaller than NEAR_ZERO_EPSILON."""
        return bool(np.all(np.abs(self._data) < NEAR_ZERO_EPSILON))


class Position(Vector):
    """An affine point in space."""

    __slots__ = ()

    def __add__(self, other):
        if type(other) is not Displacement:
            return NotImplemented
        return self._zip_with(other, np.add, Position)

    def __sub__(self, other):
        if type(other) is Position:
            return self._zip_with(other, np.subtract, Displacement)
        if type(other) is Displacement:
            return self._zip_with(other, np.subtract, Position)
        return NotImplemented

    def to_displacement(self) -> Displacement:
        """Displacement from the origin to this point."""
        return Displacement.from_array(self._data)


class Color(Vector):
    """Light energy per channel (linear, unbounded)."""

    __slots__ = ()

    def __add__(self, other):
        if type(other) is not Color:
            return NotImplemented
        return self._zip_with(other, np.add, Color)

    def __sub__(self, other):
        if type(other) is not Color:
            return NotImplemented
        return self._zip_with(other, np.subtract, Color)

    def __mul__(self, factor):
        if not isinstance(factor, Scalar):
            return NotImplemented
        return self._scale(factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        if not isinstance(divisor, Scalar):
            return NotImplemented
        return self._divide(divisor)

    def mix(self, other: Color) -> Color:
        """Component-wise product, used for attenuation."""
        if type(other) is not Color:
            raise TypeError(f"mix() needs a Color, got {type(other).__name__}")
        return self._zip_with(other, np.multiply, Color)


# =============================================================================
# Free functions
# =============================================================================


def dot(a: Displacement, b: Displacement) -> float:
    return a.dot(b)


def cross(a: Displacement, b: Displacement) -> Displacement:
    return a.cross(b)


def unitize(v: Displacement) -> Displacement:
    return v.unitize()


def mix(a: Color, b: Color) -> Color:
    return a.mix(b)


def lerp(start: Color, end: Color, t: float) -> Color:
    """Linear interpolation between two colors, t=0 gives start."""
    return start * (1.0 - t) + end * t


def reflect(v: Displacement, n: Displacement) -> Displacement:
    """Mirror v about the unit normal n.

    Written as two subtractions of the projection, which equals
    v - 2*dot(v, n)*n.
    """
    projection = n * v.dot(n)
    return v - projection - projection


def refract(uv: Displacement, n: Displacement, eta_ratio: float) -> Displacement:
    """Bend the unit incident vector uv through a surface with unit normal n.

    Uses Snell's law split into the components perpendicular and parallel
    to the normal. eta_ratio is n_incident / n_transmitted. The caller is
    responsible for detecting total internal reflection first.
    """
    cos_theta = min((-uv).dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * eta_ratio
    r_out_parallel = n * -math.sqrt(abs(1.0 - r_out_perp.norm_pow2()))
    return r_out_perp + r_out_parallel


def schlick_reflectance(cosine: float, ratio: float) -> float:
    """Schlick's approximation of Fresnel reflectance."""
    r0 = ((1.0 - ratio) / (1.0 + ratio)) ** 2
    return r0 + (1.0 - r0) * (1.0 - cosine) ** 5


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


def random_in_unit_ball(rng: np.random.Generator, dim: int = 3) -> Displacement:
    """Uniform point strictly inside the unit ball, by rejection sampling."""
    while True:
        p = Displacement.from_array(rng.uniform(-1.0, 1.0, size=dim))
        if p.norm_pow2() < 1.0:
            return p


def random_unit_vector(rng: np.random.Generator, dim: int = 3) -> Displacement:
    """Uniform direction on the unit sphere (ball sample projected outward)."""
    while True:
        p = random_in_unit_ball(rng, dim)
        # The origin cannot be projected onto the sphere
        if p.norm_pow2() > 0.0:
            return p.unitize()


def random_in_unit_disk(rng: np.random.Generator) -> Displacement:
    """Uniform point inside the unit disk in the xy-plane (z = 0)."""
    while True:
        x, y = rng.uniform(-1.0, 1.0, size=2)
        if x * x + y * y < 1.0:
            return Displacement(x, y, 0.0)
