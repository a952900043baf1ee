"""Pytest configuration for raycaster tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data and render settings before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before fields are declared
    from raycaster.core.integrator import RenderSettings, configure_render
    from raycaster.materials.phong import clear_materials
    from raycaster.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_materials()
        configure_render(RenderSettings())

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def red_sphere_scene():
    """Single red sphere at (0, 0, 5), radius 1, lit from the camera position.

    The material has no specular or reflection weight, so the pixel at the
    image center sees pure red.
    """
    from raycaster.camera.pinhole import Camera
    from raycaster.scene.manager import SceneManager

    scene = SceneManager(camera=Camera(width=64, height=48, fov=60.0))
    red = scene.add_material((1.0, 0.0, 0.0), 10.0, (1.0, 0.0, 0.0))
    scene.add_sphere((0.0, 0.0, 5.0), 1.0, red)
    scene.add_light((0.0, 0.0, 0.0), 1.0)
    return scene
