"""Unit tests for the shading engine and raster driver.

Tests cover:
- Render target setup and error handling
- Render settings validation
- Background color on miss
- Hard shadows
- Reflection depth bound
- End-to-end pixel colors for a small scene
"""

import numpy as np
import pytest


def _assert_color(actual, expected, tol=1e-5):
    for k in range(3):
        assert abs(actual[k] - expected[k]) < tol, f"{actual} != {expected}"


@pytest.fixture
def facing_mirrors():
    """Two half-reflective mirrors on the z axis facing each other, no lights.

    A ray along the axis bounces between them until the depth bound, picking
    up a factor 0.5 at every surface.
    """
    from raycaster.scene.manager import SceneManager

    scene = SceneManager()
    mirror = scene.add_material((1.0, 1.0, 1.0), 1.0, (0.0, 0.0, 0.5))
    scene.add_sphere((0.0, 0.0, 5.0), 1.0, mirror)
    scene.add_sphere((0.0, 0.0, -5.0), 1.0, mirror)
    return scene


@pytest.fixture
def shadow_scene():
    """Diffuse red sphere with a light off to the side.

    The ray along +z hits the sphere at (0, 0, 8) with normal (0, 0, -1).
    The light at (6, 0, 0) is at distance 10 with cos = 0.8.
    """
    from raycaster.scene.manager import SceneManager

    scene = SceneManager()
    red = scene.add_material((1.0, 0.0, 0.0), 10.0, (1.0, 0.0, 0.0))
    scene.add_sphere((0.0, 0.0, 10.0), 2.0, red)
    scene.add_light((6.0, 0.0, 0.0), 1.0)
    return scene, red


class TestRenderTargetSetup:
    """Tests for render target initialization."""

    def test_setup_render_target_sets_dimensions(self):
        from raycaster.core.integrator import get_image_dimensions, setup_render_target

        setup_render_target(64, 48)
        assert get_image_dimensions() == (64, 48)

    @pytest.mark.parametrize("width,height", [(0, 10), (10, -1), (4096, 10), (10, 4096)])
    def test_invalid_dimensions_raise(self, width, height):
        from raycaster.core.integrator import setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(width, height)

    def test_image_shape_and_dtype(self):
        from raycaster.core.integrator import get_image_numpy, setup_render_target

        setup_render_target(16, 8)
        image = get_image_numpy()
        assert image.shape == (8, 16, 3)
        assert image.dtype == np.float32
        assert np.all(image == 0.0)

    def test_render_without_setup_raises(self):
        from raycaster.core import integrator

        integrator._render_target_initialized[None] = 0
        with pytest.raises(RuntimeError, match="Render target not set up"):
            integrator.render_image()
        with pytest.raises(RuntimeError, match="Render target not set up"):
            integrator.render_pixel(0, 0)
        with pytest.raises(RuntimeError, match="Render target not set up"):
            integrator.get_image_numpy()


class TestRenderSettings:
    """Tests for RenderSettings validation."""

    def test_defaults(self):
        from raycaster.core.integrator import BACKGROUND_COLOR, MAX_DEPTH, RenderSettings

        settings = RenderSettings()
        assert settings.max_depth == MAX_DEPTH == 4
        assert settings.far_plane == 1000.0
        assert settings.background == BACKGROUND_COLOR == (0.2, 0.7, 0.8)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_depth": -1},
            {"max_depth": 2.5},
            {"far_plane": 0.0},
            {"far_plane": float("inf")},
            {"background": (0.0, 0.0)},
        ],
    )
    def test_invalid_settings_raise(self, kwargs):
        from raycaster.core.integrator import RenderSettings

        with pytest.raises(ValueError):
            RenderSettings(**kwargs)

    def test_configure_render(self):
        from raycaster.core.integrator import RenderSettings, configure_render, get_render_settings

        settings = RenderSettings(max_depth=2, far_plane=50.0)
        configure_render(settings)
        assert get_render_settings() is settings


class TestCastRay:
    """Tests for the color along a single ray."""

    def test_empty_scene_returns_background(self):
        from raycaster.core.integrator import trace_ray

        _assert_color(trace_ray((0.0, 0.0, 0.0), (0.3, 0.2, 1.0)), (0.2, 0.7, 0.8))

    def test_custom_background(self):
        from raycaster.core.integrator import RenderSettings, configure_render, trace_ray

        configure_render(RenderSettings(background=(1.0, 0.0, 0.5)))
        _assert_color(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0)), (1.0, 0.0, 0.5))

    def test_zero_direction_raises(self):
        from raycaster.core.integrator import trace_ray

        with pytest.raises(ValueError):
            trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    def test_unblocked_light(self, shadow_scene):
        from raycaster.core.integrator import trace_ray

        _assert_color(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0)), (0.8, 0.0, 0.0))

    def test_direction_is_normalized(self, shadow_scene):
        from raycaster.core.integrator import trace_ray

        _assert_color(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 7.0)), (0.8, 0.0, 0.0))

    def test_blocked_light_casts_shadow(self, shadow_scene):
        """A sphere between the surface and the light removes its contribution."""
        from raycaster.core.integrator import trace_ray

        scene, red = shadow_scene
        scene.add_sphere((3.0, 0.0, 4.0), 0.5, red)

        _assert_color(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0)), (0.0, 0.0, 0.0))

    def test_occluder_beyond_light_does_not_shadow(self):
        from raycaster.core.integrator import trace_ray
        from raycaster.scene.manager import SceneManager

        scene = SceneManager()
        red = scene.add_material((1.0, 0.0, 0.0), 10.0, (1.0, 0.0, 0.0))
        scene.add_sphere((0.0, 0.0, 10.0), 2.0, red)
        scene.add_light((3.0, 0.0, 4.0), 1.0)
        # On the same line as the light, but further from the surface
        scene.add_sphere((6.0, 0.0, 0.0), 0.5, red)

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        # cos = 0.8 toward the light at (3, 0, 4)
        _assert_color(color, (0.8, 0.0, 0.0))

    def test_hit_beyond_far_plane_is_background(self, shadow_scene):
        from raycaster.core.integrator import RenderSettings, configure_render, trace_ray

        configure_render(RenderSettings(far_plane=5.0))
        _assert_color(trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0)), (0.2, 0.7, 0.8))


class TestReflectionDepth:
    """Tests for the reflection depth bound."""

    @pytest.mark.parametrize("max_depth", [0, 1, 2, 4, 6])
    def test_facing_mirrors_terminate(self, facing_mirrors, max_depth):
        """Each of the max_depth + 1 shaded surfaces halves the background."""
        from raycaster.core.integrator import RenderSettings, configure_render, trace_ray

        configure_render(RenderSettings(max_depth=max_depth))
        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))

        factor = 0.5 ** (max_depth + 1)
        _assert_color(color, (0.2 * factor, 0.7 * factor, 0.8 * factor))

    def test_default_depth_with_perfect_mirrors(self):
        """Lossless mirrors still return a finite color."""
        from raycaster.core.integrator import trace_ray
        from raycaster.scene.manager import SceneManager

        scene = SceneManager()
        mirror = scene.add_material((1.0, 1.0, 1.0), 1.0, (0.0, 0.0, 1.0))
        scene.add_sphere((0.0, 0.0, 5.0), 1.0, mirror)
        scene.add_sphere((0.0, 0.0, -5.0), 1.0, mirror)

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert all(np.isfinite(color))
        _assert_color(color, (0.2, 0.7, 0.8))


class TestRenderImage:
    """End-to-end tests on a full image."""

    def test_center_pixel_is_red(self, red_sphere_scene):
        from raycaster.camera.pinhole import setup_camera
        from raycaster.core.integrator import render_pixel, setup_render_target

        setup_camera(red_sphere_scene.camera)
        setup_render_target(64, 48)

        _assert_color(render_pixel(32, 24), (1.0, 0.0, 0.0))

    def test_render_image_matches_render_pixel(self, red_sphere_scene):
        from raycaster.camera.pinhole import setup_camera
        from raycaster.core.integrator import (
            get_image_numpy,
            render_image,
            render_pixel,
            setup_render_target,
        )

        setup_camera(red_sphere_scene.camera)
        setup_render_target(64, 48)
        render_image()
        image = get_image_numpy()

        # Rows are indexed from the top, columns from the left
        for i, j in [(32, 24), (0, 0), (40, 10), (63, 47)]:
            _assert_color(image[j, i], render_pixel(i, j))

    def test_corner_pixels_are_background(self, red_sphere_scene):
        from raycaster.camera.pinhole import setup_camera
        from raycaster.core.integrator import get_image_numpy, render_image, setup_render_target

        setup_camera(red_sphere_scene.camera)
        setup_render_target(64, 48)
        render_image()
        image = get_image_numpy()

        for row, col in [(0, 0), (0, 63), (47, 0), (47, 63)]:
            _assert_color(image[row, col], (0.2, 0.7, 0.8))

    def test_no_nan_or_negative_values(self):
        from raycaster.camera.pinhole import setup_camera
        from raycaster.core.integrator import get_image_numpy, render_image, setup_render_target
        from raycaster.scene.demo import create_demo_scene

        scene = create_demo_scene(width=64, height=48)
        setup_camera(scene.camera)
        setup_render_target(64, 48)
        render_image()
        image = get_image_numpy()

        assert np.all(np.isfinite(image))
        assert np.all(image >= 0.0)
