"""Sphere primitive with closed-form ray-sphere intersection.

The intersection solves the full quadratic

    a*t^2 + b*t + c = 0
    a = D.D,  b = 2 D.L,  c = L.L - r^2,  L = O - C

and returns the nearest non-negative root. When the ray starts inside the
sphere the near root is negative and the far root is returned instead, so a
sphere seen from inside shows its far surface.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.geometry.sphere import Sphere, intersect_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 5), radius=1.0)
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def intersect_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (normalized by the caller).
        sphere: The sphere to test against.

    Returns:
        A tuple (hit, t): hit is 1 when the ray meets the sphere at a
        non-negative distance, and t is that nearest distance (0.0 on a miss).
    """
    # Vector from sphere center to ray origin
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * a * c

    # Taichi requires outer-scope declaration
    did_hit = 0
    hit_t = 0.0

    # a == 0 only for a zero direction
    if a > 0.0 and discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t1 = (-b - sqrt_d) / (2.0 * a)
        t2 = (-b + sqrt_d) / (2.0 * a)

        if ti.max(t1, t2) >= 0.0:
            did_hit = 1
            hit_t = t2
            if t1 >= 0.0:
                hit_t = t1

    return did_hit, hit_t


@ti.func
def sphere_normal(sphere: Sphere, point: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return tm.normalize(point - sphere.center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius."""
    return Sphere(center=center, radius=radius)
