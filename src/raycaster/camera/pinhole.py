"""Pinhole camera model for primary ray generation.

The camera sits at the origin and looks along +Z with +Y up. Pixel (i, j)
is mapped onto an image plane at distance

    z = (height / 2) / tan(fov / 2)

at the camera-space point (i - width/2, height/2 - j, z), so i counts from
the left edge and j from the top edge. The field of view is the vertical
one, given in degrees.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.camera.pinhole import Camera, setup_camera
    >>>
    >>> camera = Camera(width=1024, height=768, fov=60.0)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     direction = primary_ray_direction(512, 384)  # Ray through image center
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import Ray, Vector3, host_normalize, make_ray, vec3

# Camera position is fixed at the world origin
CAMERA_ORIGIN = (0.0, 0.0, 0.0)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Image and projection parameters of the pinhole camera.

    Attributes:
        width: Image width in pixels (positive).
        height: Image height in pixels (positive).
        fov: Vertical field of view in degrees, strictly between 0 and 180.
    """

    width: int
    height: int
    fov: float

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"Camera {name} must be a positive integer, got {value!r}")
        if not math.isfinite(self.fov) or not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {self.fov}")

    @property
    def fov_radians(self) -> float:
        return math.radians(self.fov)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def focal_distance(self) -> float:
        """Distance from the origin to the image plane, in pixel units."""
        return (self.height / 2.0) / math.tan(self.fov_radians / 2.0)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_width = ti.field(dtype=ti.i32, shape=())
_camera_height = ti.field(dtype=ti.i32, shape=())
_camera_focal = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Write the camera parameters to the GPU-side fields.

    Must be called before rendering and from Python (not from within a
    Taichi kernel).
    """
    _camera_width[None] = camera.width
    _camera_height[None] = camera.height
    _camera_focal[None] = camera.focal_distance


def get_camera_info() -> dict[str, float]:
    """Get current camera state for debugging."""
    return {
        "width": int(_camera_width[None]),
        "height": int(_camera_height[None]),
        "focal_distance": float(_camera_focal[None]),
    }


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def primary_ray_direction(pixel_i: ti.i32, pixel_j: ti.i32) -> vec3:
    """Unit direction of the primary ray through pixel (i, j).

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        The normalized camera-space direction through the pixel.
    """
    width = ti.cast(_camera_width[None], ti.f32)
    height = ti.cast(_camera_height[None], ti.f32)
    x = ti.cast(pixel_i, ti.f32) - width / 2.0
    y = height / 2.0 - ti.cast(pixel_j, ti.f32)
    return tm.normalize(vec3(x, y, _camera_focal[None]))


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32) -> Ray:
    """Primary ray from the camera origin through pixel (i, j)."""
    return make_ray(vec3(0.0, 0.0, 0.0), primary_ray_direction(pixel_i, pixel_j))


def host_primary_ray_direction(camera: Camera, pixel_i: int, pixel_j: int) -> Vector3:
    """Python-side counterpart of primary_ray_direction()."""
    x = pixel_i - camera.width / 2.0
    y = camera.height / 2.0 - pixel_j
    return host_normalize((x, y, camera.focal_distance))
