"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. f64 is the default
    float type so the framebuffer kernel matches the Python-side math.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture
def rng():
    """Deterministic random generator for material and camera sampling."""
    return np.random.default_rng(12345)


@pytest.fixture
def grey():
    """A mid-grey diffuse material kept alive for the duration of a test."""
    from src.pathtracer.core.vector import Color
    from src.pathtracer.materials.lambertian import Lambertian

    return Lambertian(Color(0.5, 0.5, 0.5))
