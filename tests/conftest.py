"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the module-level fields every scene module allocates.
    """
    import taichi as ti

    from whitted import init_taichi

    init_taichi(arch=ti.cpu, default_fp=ti.f64)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear global primitive, material and light storage around each test."""
    # Import here to ensure Taichi is initialized
    from whitted.materials.phong import clear_materials
    from whitted.scene.intersection import clear_scene
    from whitted.scene.lighting import DEFAULT_BACKGROUND_COLOR, clear_lights, set_background_color

    def _clear_all():
        clear_scene()
        clear_materials()
        clear_lights()
        set_background_color(DEFAULT_BACKGROUND_COLOR)

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def default_camera():
    """Camera at the origin looking down -z with a 45 degree field of view."""
    from whitted.camera.pinhole import PinholeCamera

    return PinholeCamera(
        position=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        vfov=45.0,
        aspect_ratio=1.0,
    )
