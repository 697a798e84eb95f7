"""Tests for the Taichi path tracing kernel.

Tests cover:
- Argument validation
- Zero bounce budget and absorbing scenes
- Sky gradient on misses
"""

import numpy as np
import pytest


def _tracer(world, width=4, height=3, workers=1):
    from src.pathtracer.camera.thin_lens import Camera, CameraSettings
    from src.pathtracer.core.framebuffer import Framebuffer
    from src.pathtracer.core.tracer import PathTracer
    from src.pathtracer.scene.arena import SceneArena

    camera = Camera.from_settings(
        CameraSettings((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), aspect_ratio=width / height)
    )
    framebuffer = Framebuffer(width, height)
    return PathTracer(SceneArena(world), camera, framebuffer, workers), framebuffer


class TestPathTracer:
    def test_workers_validated(self):
        from src.pathtracer.geometry.hittable import HittableList

        with pytest.raises(ValueError):
            _tracer(HittableList(), workers=0)

    def test_row_out_of_range(self):
        from src.pathtracer.geometry.hittable import HittableList

        tracer, _ = _tracer(HittableList())

        with pytest.raises(IndexError):
            tracer.trace_row(3, samples_per_pixel=1, max_depth=5)

    def test_zero_depth_is_black(self):
        from src.pathtracer.geometry.hittable import HittableList

        tracer, framebuffer = _tracer(HittableList())

        for row in range(3):
            tracer.trace_row(row, samples_per_pixel=2, max_depth=0)

        assert (framebuffer.radiance_sums() == 0.0).all()

    def test_empty_world_matches_sky(self):
        """Each sample is the sky color along its ray, between horizon and zenith."""
        from src.pathtracer.geometry.hittable import HittableList

        tracer, framebuffer = _tracer(HittableList(), workers=2)

        for row in range(3):
            tracer.trace_row(row, samples_per_pixel=4, max_depth=5)
        means = framebuffer.radiance_sums() / 4

        np.testing.assert_allclose(means[:, :, 2], 1.0)
        assert (means[:, :, 0] >= 0.5 - 1e-9).all()
        assert (means[:, :, 0] <= 1.0 + 1e-9).all()
        # Looking higher means bluer sky
        assert means[0, :, 0].mean() < means[-1, :, 0].mean()

    def test_enclosed_camera_with_black_walls_is_black(self):
        """Inside a closed box of black diffuse walls every path is absorbed to black."""
        from src.pathtracer.core.vector import Color, Position
        from src.pathtracer.geometry.cuboid import Cuboid
        from src.pathtracer.materials.lambertian import Lambertian

        black = Lambertian(Color(0.0, 0.0, 0.0))
        room = Cuboid(Position(-5.0, -5.0, -5.0), Position(5.0, 5.0, 5.0), black, inward=True)
        tracer, framebuffer = _tracer(room)

        for row in range(3):
            tracer.trace_row(row, samples_per_pixel=3, max_depth=10)

        assert (framebuffer.radiance_sums() == 0.0).all()

    def test_normals_mode_inside_room(self, grey):
        """From the room center looking down -z the wall normal faces the camera (+z)."""
        from src.pathtracer.core.vector import Position
        from src.pathtracer.geometry.cuboid import Cuboid

        room = Cuboid(Position(-5.0, -5.0, -5.0), Position(5.0, 5.0, 5.0), grey, inward=True)
        tracer, framebuffer = _tracer(room, width=3, height=3)

        tracer.trace_row(1, samples_per_pixel=1, max_depth=1, normals=True)
        center = framebuffer.radiance_sums()[1, 1]

        np.testing.assert_allclose(center, [0.5, 0.5, 1.0], atol=1e-9)
