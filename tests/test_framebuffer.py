"""Unit tests for the Taichi framebuffer and pixel quantization.

Tests cover:
- Gamma 2 correction, clamping and truncation
- Agreement between the kernel and the pure-Python mapping
- Shape and argument validation
- Kernel modules keep evaluated annotations
"""

import numpy as np
import pytest


class TestQuantize:
    """Tests for the single-pixel mapping."""

    def test_quarter_intensity_maps_to_127(self):
        """sqrt(0.25) = 0.5 and 0.5 * 255.999 truncates to 127."""
        from src.pathtracer.core.framebuffer import quantize
        from src.pathtracer.core.vector import Color

        assert quantize(Color(0.25, 0.25, 0.25), 1) == (127, 127, 127)

    def test_sum_is_averaged(self):
        from src.pathtracer.core.framebuffer import quantize
        from src.pathtracer.core.vector import Color

        assert quantize(Color(25.0, 25.0, 25.0), 100) == (127, 127, 127)

    def test_bright_values_clamp_to_255(self):
        from src.pathtracer.core.framebuffer import quantize
        from src.pathtracer.core.vector import Color

        assert quantize(Color(1.0, 4.0, 1000.0), 1) == (255, 255, 255)

    def test_black_and_negative_map_to_zero(self):
        from src.pathtracer.core.framebuffer import quantize
        from src.pathtracer.core.vector import Color

        assert quantize(Color(0.0, -1.0, 0.0), 1) == (0, 0, 0)

    def test_channels_are_independent(self):
        from src.pathtracer.core.framebuffer import quantize
        from src.pathtracer.core.vector import Color

        # sqrt(0.01) = 0.1 -> 25; sqrt(0.64) = 0.8 -> 204
        assert quantize(Color(0.01, 0.64, 1.0), 1) == (25, 204, 255)


class TestFramebuffer:
    """Tests for the Taichi resolve kernel."""

    def test_resolve_matches_quantize(self):
        from src.pathtracer.core.framebuffer import Framebuffer, quantize
        from src.pathtracer.core.vector import Color

        rng = np.random.default_rng(0)
        radiance = rng.uniform(-0.5, 3.0, size=(5, 7, 3)) * 4.0

        fb = Framebuffer(7, 5)
        fb.load(radiance)
        fb.resolve(4)
        pixels = fb.to_uint8()

        assert pixels.shape == (5, 7, 3)
        assert pixels.dtype == np.uint8
        for row in range(5):
            for col in range(7):
                expected = quantize(Color(*radiance[row, col]), 4)
                assert tuple(int(c) for c in pixels[row, col]) == expected

    def test_known_values(self):
        from src.pathtracer.core.framebuffer import Framebuffer

        radiance = np.array([[[0.25, 1.0, 0.0], [4.0, -1.0, 0.01]]])

        fb = Framebuffer(2, 1)
        fb.load(radiance)
        fb.resolve(1)

        np.testing.assert_array_equal(fb.to_uint8(), [[[127, 255, 0], [255, 0, 25]]])

    def test_clear_resets_fields(self):
        from src.pathtracer.core.framebuffer import Framebuffer

        fb = Framebuffer(3, 2)
        fb.load(np.ones((2, 3, 3)))
        fb.resolve(1)
        fb.clear()

        assert not fb.to_uint8().any()
        assert not fb.radiance.to_numpy().any()

    def test_shape_mismatch_rejected(self):
        from src.pathtracer.core.framebuffer import Framebuffer

        fb = Framebuffer(4, 3)

        with pytest.raises(ValueError, match="does not match"):
            fb.load(np.zeros((4, 3, 3)))

    def test_nonpositive_samples_rejected(self):
        from src.pathtracer.core.framebuffer import Framebuffer

        fb = Framebuffer(2, 2)

        with pytest.raises(ValueError):
            fb.resolve(0)

    def test_nonpositive_dimensions_rejected(self):
        from src.pathtracer.core.framebuffer import Framebuffer

        with pytest.raises(ValueError):
            Framebuffer(0, 10)

    def test_radiance_sums_round_trip_dtype(self):
        from src.pathtracer.core.framebuffer import Framebuffer

        fb = Framebuffer(3, 2)
        fb.load(np.full((2, 3, 3), 0.5))

        sums = fb.radiance_sums()

        assert sums.dtype == np.float64
        np.testing.assert_allclose(sums, 0.5)


@pytest.mark.parametrize(
    "module_name",
    [
        "src.pathtracer.core.framebuffer",
        "src.pathtracer.core.sampling",
        "src.pathtracer.core.tracer",
        "src.pathtracer.materials.kernels",
        "src.pathtracer.scene.arena",
    ],
)
def test_kernel_modules_keep_real_annotations(module_name):
    """Taichi reads kernel argument types at compile time; string annotations break it."""
    import importlib

    module = importlib.import_module(module_name)

    assert not hasattr(module, "annotations")
