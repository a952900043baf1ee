"""Core rendering module.

This module contains the fundamental building blocks for ray casting:

Components:
    ray: Ray data structure and vector utilities
    integrator: Shading engine (recursive reflection, Phong lighting with
        hard shadows) and the per-pixel raster driver
    renderer: Scene upload, render settings and image output in one object

All compute-intensive operations use Taichi kernels; the pixel loop runs
as a single parallel kernel over the image.
"""

from .ray import (
    SURFACE_EPSILON,
    Ray,
    Vector3,
    dot,
    host_dot,
    host_length,
    host_normalize,
    host_reflect,
    length,
    length_squared,
    make_ray,
    normalize,
    offset_origin,
    ray_at,
    reflect,
    to_vec3,
    vec3,
)

# Note: integrator and renderer are NOT imported here because they allocate
# Taichi fields at import time. Import them after ti.init():
#   from raycaster.core.renderer import Renderer

__all__ = [
    "Ray",
    "Vector3",
    "SURFACE_EPSILON",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "reflect",
    "offset_origin",
    "to_vec3",
    "host_dot",
    "host_length",
    "host_normalize",
    "host_reflect",
]
