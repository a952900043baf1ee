"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking along +Z

Camera responsibilities:
    - Hold image size and vertical field of view
    - Map pixel (i, j) to a unit primary ray direction
"""

from .pinhole import (
    CAMERA_ORIGIN,
    Camera,
    get_camera_info,
    get_ray,
    host_primary_ray_direction,
    primary_ray_direction,
    setup_camera,
)

__all__ = [
    "CAMERA_ORIGIN",
    "Camera",
    "setup_camera",
    "get_ray",
    "get_camera_info",
    "primary_ray_direction",
    "host_primary_ray_direction",
]
