"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with closed-form ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) called from the
scene query inside rendering kernels:
    hit, t = intersect_sphere(ray_origin, ray_direction, sphere)
"""

from .sphere import Sphere, intersect_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "intersect_sphere",
    "make_sphere",
    "sphere_normal",
]
