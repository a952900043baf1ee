"""Ray data structure and vector utilities for Whitted-style ray casting.

This module provides the Ray dataclass and the vector helpers shared by the
intersection, shading and camera code. The Taichi functions run inside
kernels; the ``host_*`` helpers are their plain-Python counterparts used for
validation, camera setup and tests.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import math

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Distance secondary ray origins are pushed off a surface
SURFACE_EPSILON = 1e-3

# Host-side 3-tuple used for points, directions and colors
Vector3 = tuple[float, float, float]


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Intersection and
            shading expect it normalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The vector must not be zero-length; callers guarantee this by
    precondition rather than by a runtime check.
    """
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes ``I - 2 (I . N) N``. Applying it twice with the same unit
    normal returns the original vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Push a secondary ray origin off the surface it starts on.

    The point moves SURFACE_EPSILON along the normal, toward the side the
    new ray travels into, so the ray does not immediately hit the surface
    it leaves.

    Args:
        point: The intersection point.
        normal: The outward unit surface normal.
        direction: The direction of the secondary ray.

    Returns:
        The offset origin point.
    """
    result = point + SURFACE_EPSILON * normal
    if tm.dot(direction, normal) < 0.0:
        result = point - SURFACE_EPSILON * normal
    return result


# =============================================================================
# Host-side Helpers
# =============================================================================


def to_vec3(values, name: str = "vector") -> Vector3:
    """Convert a 3-element sequence to a tuple of finite floats.

    Args:
        values: Any sequence of three numbers.
        name: Name used in error messages.

    Returns:
        The values as a tuple of three floats.

    Raises:
        ValueError: If the sequence does not have exactly three finite numbers.
    """
    try:
        items = [float(v) for v in values]
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a sequence of 3 numbers, got {values!r}") from e
    if len(items) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(items)}")
    for i, component in enumerate(items):
        if not math.isfinite(component):
            raise ValueError(f"{name} component {i} = {component} is not finite")
    return (items[0], items[1], items[2])


def host_dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def host_length(v: Vector3) -> float:
    return math.sqrt(host_dot(v, v))


def host_normalize(v: Vector3) -> Vector3:
    """Normalize a host-side vector.

    Raises:
        ValueError: If the vector has zero length.
    """
    n = host_length(v)
    if n == 0.0:
        raise ValueError("Cannot normalize a zero-length vector")
    return (v[0] / n, v[1] / n, v[2] / n)


def host_reflect(incident: Vector3, normal: Vector3) -> Vector3:
    """Host-side counterpart of reflect()."""
    k = 2.0 * host_dot(incident, normal)
    return (
        incident[0] - k * normal[0],
        incident[1] - k * normal[1],
        incident[2] - k * normal[2],
    )
