"""Unit tests for the role-tagged vector algebra.

Tests cover:
- Allowed and forbidden arithmetic between roles
- Dot, cross, norm and unitize
- Reflection and refraction formulas
- Schlick reflectance
- Random sampling utilities
"""

import math

import numpy as np
import pytest


class TestRoles:
    """Tests for which operations each role permits."""

    def test_position_minus_position_is_displacement(self):
        """Subtracting two points gives the vector between them."""
        from src.pathtracer.core.vector import Displacement, Position

        result = Position(1.0, 2.0, 3.0) - Position(0.5, 0.5, 0.5)

        assert isinstance(result, Displacement)
        assert result == Displacement(0.5, 1.5, 2.5)

    def test_position_plus_displacement_is_position(self):
        """Moving a point by a displacement gives a point."""
        from src.pathtracer.core.vector import Displacement, Position

        result = Position(1.0, 1.0, 1.0) + Displacement(1.0, 0.0, -1.0)

        assert isinstance(result, Position)
        assert result == Position(2.0, 1.0, 0.0)

    def test_position_minus_displacement_is_position(self):
        """Moving a point backwards still gives a point."""
        from src.pathtracer.core.vector import Displacement, Position

        result = Position(1.0, 1.0, 1.0) - Displacement(1.0, 0.0, -1.0)

        assert isinstance(result, Position)
        assert result == Position(0.0, 1.0, 2.0)

    def test_position_plus_position_rejected(self):
        """Adding two points has no meaning."""
        from src.pathtracer.core.vector import Position

        with pytest.raises(TypeError):
            Position(1.0, 0.0, 0.0) + Position(0.0, 1.0, 0.0)

    def test_position_cannot_be_scaled(self):
        """Points cannot be multiplied by scalars."""
        from src.pathtracer.core.vector import Position

        with pytest.raises(TypeError):
            Position(1.0, 0.0, 0.0) * 2.0

    def test_displacement_minus_position_rejected(self):
        """A displacement minus a point is not defined."""
        from src.pathtracer.core.vector import Displacement, Position

        with pytest.raises(TypeError):
            Displacement(1.0, 0.0, 0.0) - Position(0.0, 1.0, 0.0)

    def test_color_and_displacement_do_not_mix(self):
        """Colors and geometric vectors cannot be added."""
        from src.pathtracer.core.vector import Color, Displacement

        with pytest.raises(TypeError):
            Color(1.0, 0.0, 0.0) + Displacement(0.0, 1.0, 0.0)

    def test_color_has_no_dot_product(self):
        """Color does not expose dot or cross."""
        from src.pathtracer.core.vector import Color

        assert not hasattr(Color(1.0, 1.0, 1.0), "dot")
        assert not hasattr(Color(1.0, 1.0, 1.0), "cross")

    def test_dot_rejects_color(self):
        """Displacement.dot refuses a Color argument."""
        from src.pathtracer.core.vector import Color, Displacement

        with pytest.raises(TypeError):
            Displacement(1.0, 0.0, 0.0).dot(Color(1.0, 0.0, 0.0))

    def test_dimension_mismatch_rejected(self):
        """Vectors of different dimension cannot be combined."""
        from src.pathtracer.core.vector import Displacement

        with pytest.raises(ValueError, match="Dimension mismatch"):
            Displacement(1.0, 0.0) + Displacement(1.0, 0.0, 0.0)

    def test_equality_is_role_sensitive(self):
        """Same components with different roles are not equal."""
        from src.pathtracer.core.vector import Color, Displacement

        assert Displacement(1.0, 2.0, 3.0) != Color(1.0, 2.0, 3.0)

    def test_negation_keeps_role(self):
        """Negating a vector keeps its role."""
        from src.pathtracer.core.vector import Displacement

        result = -Displacement(1.0, -2.0, 3.0)

        assert isinstance(result, Displacement)
        assert result == Displacement(-1.0, 2.0, -3.0)

    def test_scalar_multiplication_both_sides(self):
        """Scalars multiply from the left and the right."""
        from src.pathtracer.core.vector import Displacement

        v = Displacement(1.0, 2.0, 3.0)

        assert v * 2.0 == Displacement(2.0, 4.0, 6.0)
        assert 2.0 * v == Displacement(2.0, 4.0, 6.0)
        assert v / 2.0 == Displacement(0.5, 1.0, 1.5)

    def test_n_dimensional_vectors(self):
        """The algebra is not limited to three dimensions."""
        from src.pathtracer.core.vector import Displacement

        v = Displacement(1.0, 1.0, 1.0, 1.0)

        assert v.dim == 4
        assert v.norm() == pytest.approx(2.0)

    def test_empty_vector_rejected(self):
        """A vector needs at least one component."""
        from src.pathtracer.core.vector import Displacement

        with pytest.raises(ValueError):
            Displacement()

    def test_backing_array_is_read_only(self):
        import numpy as np

        from src.pathtracer.core.vector import Displacement

        v = Displacement(1.0, 2.0, 3.0)

        assert v.array.dtype == np.float64
        with pytest.raises(ValueError):
            v.array[0] = 5.0
        assert v.x == 1.0

    def test_from_array_copies_input(self):
        import numpy as np

        from src.pathtracer.core.vector import Color

        values = np.array([0.1, 0.2, 0.3])
        c = Color.from_array(values)
        values[0] = 9.0

        assert c == Color(0.1, 0.2, 0.3)

    def test_division_by_zero(self):
        from src.pathtracer.core.vector import Displacement

        with pytest.raises(ZeroDivisionError):
            Displacement(1.0, 0.0, 0.0) / 0.0


class TestDisplacementOperations:
    """Tests for dot, cross, norm and unitize."""

    def test_dot(self):
        from src.pathtracer.core.vector import Displacement, dot

        assert dot(Displacement(1.0, 2.0, 3.0), Displacement(4.0, -5.0, 6.0)) == 12.0

    def test_norm_pow2_and_norm(self):
        from src.pathtracer.core.vector import Displacement

        v = Displacement(2.0, 3.0, 6.0)

        assert v.norm_pow2() == 49.0
        assert v.norm() == 7.0

    def test_unitize_has_unit_norm(self):
        """norm(unitize(v)) is 1 for a spread of nonzero vectors."""
        from src.pathtracer.core.vector import Displacement

        rng = np.random.default_rng(3)
        for _ in range(200):
            components = rng.uniform(-1000.0, 1000.0, size=3).tolist()
            v = Displacement(*components)
            assert abs(v.unitize().norm() - 1.0) < 1e-9

    def test_unitize_tiny_vector(self):
        """Very short vectors still normalize to unit length."""
        from src.pathtracer.core.vector import Displacement

        v = Displacement(1e-12, -2e-12, 3e-12)

        assert abs(v.unitize().norm() - 1.0) < 1e-9

    def test_cross_of_axes(self):
        """x cross y is z, following the right-hand rule."""
        from src.pathtracer.core.vector import Displacement, cross

        result = cross(Displacement(1.0, 0.0, 0.0), Displacement(0.0, 1.0, 0.0))

        assert result == Displacement(0.0, 0.0, 1.0)

    def test_cross_is_orthogonal(self):
        """The cross product is perpendicular to both inputs."""
        from src.pathtracer.core.vector import Displacement

        a = Displacement(1.0, 2.0, 3.0)
        b = Displacement(-2.0, 0.5, 4.0)
        c = a.cross(b)

        assert c.dot(a) == pytest.approx(0.0, abs=1e-12)
        assert c.dot(b) == pytest.approx(0.0, abs=1e-12)

    def test_cross_requires_3d(self):
        from src.pathtracer.core.vector import Displacement

        with pytest.raises(ValueError):
            Displacement(1.0, 0.0).cross(Displacement(0.0, 1.0))

    def test_near_zero(self):
        """near_zero only holds when every component is below 1e-8."""
        from src.pathtracer.core.vector import Displacement

        assert Displacement(1e-9, -1e-9, 0.0).near_zero()
        assert not Displacement(1e-9, 1e-7, 0.0).near_zero()


class TestColor:
    """Tests for the Color role."""

    def test_mix_is_componentwise(self):
        from src.pathtracer.core.vector import Color, mix

        result = mix(Color(0.5, 0.2, 1.0), Color(0.5, 0.5, 0.25))

        assert result == Color(0.25, 0.1, 0.25)

    def test_mix_rejects_displacement(self):
        from src.pathtracer.core.vector import Color, Displacement

        with pytest.raises(TypeError):
            Color(1.0, 1.0, 1.0).mix(Displacement(1.0, 1.0, 1.0))

    def test_lerp_endpoints(self):
        from src.pathtracer.core.vector import Color, lerp

        a = Color(1.0, 1.0, 1.0)
        b = Color(0.5, 0.7, 1.0)

        assert lerp(a, b, 0.0) == a
        assert lerp(a, b, 1.0).isclose(b)


class TestReflectRefract:
    """Tests for reflection and refraction."""

    def test_reflect_flips_normal_component(self):
        """dot(reflect(v, n), n) equals -dot(v, n)."""
        from src.pathtracer.core.vector import Displacement, reflect

        rng = np.random.default_rng(5)
        for _ in range(100):
            v = Displacement(*rng.normal(size=3).tolist())
            n = Displacement(*rng.normal(size=3).tolist()).unitize()
            assert reflect(v, n).dot(n) == pytest.approx(-v.dot(n), abs=1e-9)

    def test_reflect_preserves_tangent_component(self):
        """A 45 degree ray bounces off a floor at 45 degrees."""
        from src.pathtracer.core.vector import Displacement

        v = Displacement(1.0, -1.0, 0.0)
        n = Displacement(0.0, 1.0, 0.0)

        assert v.reflect(n) == Displacement(1.0, 1.0, 0.0)

    def test_refract_normal_incidence(self):
        """At normal incidence the ray continues straight through."""
        from src.pathtracer.core.vector import Displacement, refract

        result = refract(Displacement(0.0, -1.0, 0.0), Displacement(0.0, 1.0, 0.0), 1.0 / 1.5)

        assert result.isclose(Displacement(0.0, -1.0, 0.0), tol=1e-12)

    def test_refract_follows_snells_law(self):
        """sin(theta_out) = eta * sin(theta_in)."""
        from src.pathtracer.core.vector import Displacement, refract

        inv_sqrt2 = 1.0 / math.sqrt(2.0)
        incident = Displacement(inv_sqrt2, -inv_sqrt2, 0.0)
        normal = Displacement(0.0, 1.0, 0.0)
        eta = 1.0 / 1.5

        result = refract(incident, normal, eta)

        assert result.norm() == pytest.approx(1.0, abs=1e-12)
        assert result.x == pytest.approx(inv_sqrt2 * eta, abs=1e-12)
        assert result.y < 0.0

    def test_refract_ratio_one_is_identity(self):
        """Equal indices do not bend the ray."""
        from src.pathtracer.core.vector import Displacement, refract

        incident = Displacement(0.6, -0.8, 0.0)

        result = refract(incident, Displacement(0.0, 1.0, 0.0), 1.0)

        assert result.isclose(incident, tol=1e-12)

    def test_schlick_at_normal_incidence_is_r0(self):
        """(1 - cos)^5 vanishes at cos = 1, leaving r0."""
        from src.pathtracer.core.vector import schlick_reflectance

        ratio = 1.0 / 1.5
        r0 = ((1.0 - ratio) / (1.0 + ratio)) ** 2

        assert schlick_reflectance(1.0, ratio) == r0

    def test_schlick_at_grazing_is_one(self):
        from src.pathtracer.core.vector import schlick_reflectance

        assert schlick_reflectance(0.0, 1.0 / 1.5) == pytest.approx(1.0)


class TestRandomSampling:
    """Tests for the Monte Carlo sampling helpers."""

    def test_random_in_unit_ball_inside(self):
        from src.pathtracer.core.vector import random_in_unit_ball

        rng = np.random.default_rng(1)
        for _ in range(500):
            assert random_in_unit_ball(rng).norm_pow2() < 1.0

    def test_random_in_unit_ball_covers_all_octants(self):
        """Samples are drawn from [-1, 1), not just the positive octant."""
        from src.pathtracer.core.vector import random_in_unit_ball

        rng = np.random.default_rng(2)
        samples = [random_in_unit_ball(rng) for _ in range(500)]

        for axis in range(3):
            assert any(p[axis] < 0.0 for p in samples)
            assert any(p[axis] > 0.0 for p in samples)

    def test_random_unit_vector_has_unit_length(self):
        from src.pathtracer.core.vector import random_unit_vector

        rng = np.random.default_rng(3)
        for _ in range(200):
            assert random_unit_vector(rng).norm() == pytest.approx(1.0, abs=1e-12)

    def test_random_in_unit_disk(self):
        from src.pathtracer.core.vector import random_in_unit_disk

        rng = np.random.default_rng(4)
        for _ in range(200):
            p = random_in_unit_disk(rng)
            assert p.z == 0.0
            assert p.x * p.x + p.y * p.y < 1.0
