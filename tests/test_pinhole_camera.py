"""Unit tests for the pinhole camera module.

Tests cover:
- Camera parameter validation
- Focal distance for a given field of view
- Ray directions for center, edge and corner pixels
- Agreement between device and host ray generation
"""

import math

import pytest
import taichi as ti


def _device_direction(camera, pixel_i, pixel_j):
    """Compute primary_ray_direction on the device for one pixel."""
    from raycaster.camera.pinhole import primary_ray_direction, setup_camera

    setup_camera(camera)
    result = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(i: ti.i32, j: ti.i32):
        result[None] = primary_ray_direction(i, j)

    test_kernel(pixel_i, pixel_j)
    r = result[None]
    return (r[0], r[1], r[2])


class TestCameraParameters:
    """Tests for the Camera dataclass."""

    def test_valid_camera(self):
        from raycaster.camera.pinhole import Camera

        camera = Camera(width=1024, height=768, fov=60.0)
        assert camera.aspect_ratio == pytest.approx(1024 / 768)
        assert camera.fov_radians == pytest.approx(math.pi / 3)

    def test_focal_distance(self):
        """For a 90 degree field of view the plane sits at height / 2."""
        from raycaster.camera.pinhole import Camera

        assert Camera(width=200, height=100, fov=90.0).focal_distance == pytest.approx(50.0)
        assert Camera(width=1024, height=768, fov=60.0).focal_distance == pytest.approx(
            384.0 / math.tan(math.pi / 6)
        )

    @pytest.mark.parametrize(
        "width,height,fov",
        [
            (0, 768, 60.0),
            (1024, -1, 60.0),
            (10.5, 768, 60.0),
            (True, 768, 60.0),
            (1024, 768, 0.0),
            (1024, 768, 180.0),
            (1024, 768, float("nan")),
        ],
    )
    def test_invalid_camera_raises(self, width, height, fov):
        from raycaster.camera.pinhole import Camera

        with pytest.raises(ValueError):
            Camera(width=width, height=height, fov=fov)

    def test_setup_camera_writes_fields(self):
        from raycaster.camera.pinhole import Camera, get_camera_info, setup_camera

        setup_camera(Camera(width=200, height=100, fov=90.0))
        info = get_camera_info()
        assert info["width"] == 200
        assert info["height"] == 100
        assert abs(info["focal_distance"] - 50.0) < 1e-4


class TestRayGeneration:
    """Tests for primary ray directions."""

    def test_center_pixel_looks_along_z(self):
        from raycaster.camera.pinhole import Camera

        d = _device_direction(Camera(width=64, height=48, fov=60.0), 32, 24)
        assert abs(d[0]) < 1e-6
        assert abs(d[1]) < 1e-6
        assert abs(d[2] - 1.0) < 1e-6

    def test_top_left_pixel_points_up_and_left(self):
        """Row 0 is the top of the image and column 0 the left edge."""
        from raycaster.camera.pinhole import Camera

        d = _device_direction(Camera(width=64, height=48, fov=60.0), 0, 0)
        assert d[0] < 0.0
        assert d[1] > 0.0
        assert d[2] > 0.0

    def test_top_edge_angle_matches_half_fov(self):
        """The ray through the top edge of the center column is fov/2 above the axis."""
        from raycaster.camera.pinhole import Camera

        camera = Camera(width=64, height=48, fov=60.0)
        d = _device_direction(camera, 32, 0)
        assert abs(math.atan2(d[1], d[2]) - math.radians(30.0)) < 1e-5

    def test_directions_are_unit_length(self):
        from raycaster.camera.pinhole import Camera

        d = _device_direction(Camera(width=64, height=48, fov=75.0), 5, 40)
        assert abs(math.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2) - 1.0) < 1e-6

    @pytest.mark.parametrize("pixel", [(0, 0), (63, 47), (10, 30), (32, 24)])
    def test_device_matches_host(self, pixel):
        from raycaster.camera.pinhole import Camera, host_primary_ray_direction

        camera = Camera(width=64, height=48, fov=60.0)
        device = _device_direction(camera, *pixel)
        host = host_primary_ray_direction(camera, *pixel)
        for k in range(3):
            assert abs(device[k] - host[k]) < 1e-5

    def test_get_ray_starts_at_origin(self):
        from raycaster.camera.pinhole import Camera, get_ray, setup_camera

        setup_camera(Camera(width=64, height=48, fov=60.0))
        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = get_ray(32, 24)
            result[None] = ray.origin + ray.direction

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1]) < 1e-6
        assert abs(r[2] - 1.0) < 1e-6
