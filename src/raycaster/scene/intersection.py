"""Scene storage and nearest-hit scene query.

Spheres and point lights are stored in Taichi fields (Structure of Arrays)
and searched linearly. The scene query returns the closest sphere hit along
a ray together with the hit point, the outward unit normal and the material
id of the sphere.

A hit only counts when its distance is below the far plane; anything beyond
is treated as background.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.scene.intersection import (
    ...     add_light, add_sphere, clear_scene, intersect_scene
    ... )
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, 5), 1.0, material_id=0)
    >>> add_light(vec3(-20, 20, 20), 1.5)
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from raycaster.geometry.sphere import Sphere, intersect_sphere, sphere_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Default render distance; hits at or beyond it count as misses
FAR_PLANE = 1000.0

# Larger than any distance a hit can report
_NO_HIT_DISTANCE = 3.0e38


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected a sphere within the far plane
            (1 if hit, 0 if miss).
        t: Distance along the ray to the nearest hit. Only valid if hit == 1.
        point: The 3D hit point. Only valid if hit == 1.
        normal: Outward unit normal of the hit sphere at the hit point.
            Only valid if hit == 1.
        material_id: Material id of the hit sphere. -1 on a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


# Maximum number of primitives and lights supported in the scene
MAX_SPHERES = 1024
MAX_LIGHTS = 256

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Point light storage
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all spheres and lights from the scene.

    Resets the counts to zero. The field data is overwritten when new
    entries are added.
    """
    num_spheres[None] = 0
    num_lights[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive; checked by SceneManager).
        material_id: The material id to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def add_light(position: vec3, intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: The light position.
        intensity: The light intensity (non-negative).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = position
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3, far_plane: ti.f32) -> SceneHitRecord:
    """Find the nearest sphere hit along a ray.

    Tests every sphere in order. A sphere replaces the current best only
    when it is strictly closer, so the first of two equidistant spheres wins.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        far_plane: Hits at this distance or further are ignored.

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    closest_t = _NO_HIT_DISTANCE
    closest_index = -1

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        did_hit, t = intersect_sphere(ray_origin, ray_direction, sphere)
        if did_hit == 1 and t < closest_t:
            closest_t = t
            closest_index = i

    result = _make_miss_record()
    if closest_index >= 0 and closest_t < far_plane:
        sphere = Sphere(
            center=sphere_centers[closest_index],
            radius=sphere_radii[closest_index],
        )
        point = ray_origin + closest_t * ray_direction
        result = SceneHitRecord(
            hit=1,
            t=closest_t,
            point=point,
            normal=sphere_normal(sphere, point),
            material_id=sphere_material_ids[closest_index],
        )

    return result
