"""Unit tests for ray-sphere intersection."""

import pytest
import taichi as ti


def _intersect(origin, direction, center, radius):
    """Run intersect_sphere in a kernel and return (hit, t)."""
    from raycaster.geometry.sphere import Sphere, intersect_sphere, vec3

    hit_result = ti.field(dtype=ti.i32, shape=())
    t_result = ti.field(dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f32, oy: ti.f32, oz: ti.f32,
        dx: ti.f32, dy: ti.f32, dz: ti.f32,
        cx: ti.f32, cy: ti.f32, cz: ti.f32,
        r: ti.f32,
    ):
        sphere = Sphere(center=vec3(cx, cy, cz), radius=r)
        did_hit, t = intersect_sphere(vec3(ox, oy, oz), vec3(dx, dy, dz), sphere)
        hit_result[None] = did_hit
        t_result[None] = t

    test_kernel(*origin, *direction, *center, radius)
    return hit_result[None], t_result[None]


class TestSphereIntersection:
    """Tests for intersect_sphere."""

    def test_hit_from_outside(self):
        """A ray toward a sphere hits its near surface."""
        hit, t = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 1
        assert abs(t - 4.0) < 1e-5

    def test_miss(self):
        """A ray passing beside a sphere misses it."""
        hit, _ = _intersect((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 0

    def test_origin_inside_returns_far_root(self):
        """From the center, the far surface is hit at t = r."""
        hit, t = _intersect((0.0, 0.0, 5.0), (1.0, 0.0, 0.0), (0.0, 0.0, 5.0), 2.0)
        assert hit == 1
        assert abs(t - 2.0) < 1e-5

    def test_sphere_behind_ray_is_missed(self):
        """Both roots negative means no hit."""
        hit, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 0

    def test_tangent_ray_hits(self):
        """A ray grazing the sphere touches it at a single point."""
        hit, t = _intersect((1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 1
        assert abs(t - 5.0) < 1e-3

    def test_zero_direction_never_hits(self):
        """A zero direction vector cannot produce a hit."""
        hit, _ = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, 0.0, 5.0), 1.0)
        assert hit == 0

    @pytest.mark.parametrize("distance", [3.0, 10.0, 100.0])
    def test_distance_scales_with_center(self, distance):
        hit, t = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, distance), 0.5)
        assert hit == 1
        assert abs(t - (distance - 0.5)) < 1e-4


class TestSphereNormal:
    """Tests for sphere_normal."""

    def test_normal_points_outward(self):
        from raycaster.geometry.sphere import Sphere, sphere_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 5.0), radius=2.0)
            result[None] = sphere_normal(sphere, vec3(0.0, 2.0, 5.0))

        test_kernel()
        r = result[None]
        assert abs(r[0]) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_make_sphere(self):
        from raycaster.geometry.sphere import make_sphere, vec3

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_sphere(vec3(1.0, 2.0, 3.0), 4.0)
            result[None] = sphere.radius + sphere.center[2]

        test_kernel()
        assert abs(result[None] - 7.0) < 1e-6
