"""Whitted-style shading engine and raster driver.

This module implements the color computation along a ray and the kernel
that evaluates it for every pixel of the image.

At each surface the ray reaches, the color is

    color = base_color * diffuse * albedo[0]
          + white * specular * albedo[1]
          + cast_ray(reflected ray) * albedo[2]

where diffuse and specular are summed over all lights not blocked by
another sphere (hard shadows). Rays that miss the scene, hit beyond the far
plane, or go deeper than the maximum reflection depth return the background
color. There is no ambient term and no energy normalization; colors above
1.0 are clamped only when the image is written.

Taichi functions cannot recurse, so cast_ray walks the chain of mirror
reflections in a loop, carrying the product of the reflection weights of
the surfaces passed so far. Because the shading model is linear in the
reflected color, this gives the same result as the recursive definition.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.camera.pinhole import Camera, setup_camera
    >>> from raycaster.core.integrator import (
    ...     render_image, setup_render_target, get_image_numpy
    ... )
    >>> from raycaster.scene.demo import create_demo_scene
    >>>
    >>> scene = create_demo_scene()
    >>> setup_camera(scene.camera)
    >>> setup_render_target(scene.camera.width, scene.camera.height)
    >>> render_image()
    >>> image = get_image_numpy()
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from raycaster.camera.pinhole import primary_ray_direction
from raycaster.core.ray import Vector3, host_normalize, normalize, offset_origin, reflect, to_vec3
from raycaster.materials.phong import combine, diffuse_term, get_material, specular_term
from raycaster.scene.intersection import (
    FAR_PLANE,
    intersect_scene,
    light_intensities,
    light_positions,
    num_lights,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Deepest reflection level that is still shaded; deeper rays see background
MAX_DEPTH = 4

# Color returned for rays that hit nothing
BACKGROUND_COLOR = (0.2, 0.7, 0.8)


@dataclass(frozen=True)
class RenderSettings:
    """Tunable parameters of the shading engine.

    Attributes:
        max_depth: Maximum reflection depth. A ray at a depth greater than
            this returns the background color.
        far_plane: Hits at this distance or further count as misses.
        background: Color of rays that hit nothing.
    """

    max_depth: int = MAX_DEPTH
    far_plane: float = FAR_PLANE
    background: tuple[float, float, float] = BACKGROUND_COLOR

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ValueError(f"max_depth must be an integer, got {self.max_depth!r}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if not math.isfinite(self.far_plane) or self.far_plane <= 0.0:
            raise ValueError(f"far_plane must be a positive finite number, got {self.far_plane}")
        object.__setattr__(self, "background", to_vec3(self.background, "background"))


_settings = RenderSettings()


def configure_render(settings: RenderSettings) -> None:
    """Set the render settings used by subsequent renders."""
    global _settings
    _settings = settings


def get_render_settings() -> RenderSettings:
    """Get the render settings currently in effect."""
    return _settings


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear color buffer indexed [i, j], j = 0 is the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffer.

    Sets the active image dimensions and clears the buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading Engine
# =============================================================================


@ti.func
def direct_lighting(
    point: vec3,
    normal: vec3,
    view_dir: vec3,
    specular_exponent: ti.f32,
    far_plane: ti.f32,
):
    """Sum the diffuse and specular intensity of all unblocked lights.

    For each light a shadow ray is cast from just off the surface toward the
    light. The light is blocked when that ray hits a sphere closer than the
    light itself.

    Args:
        point: The surface point being shaded.
        normal: Outward unit normal at the point.
        view_dir: Direction of the ray that reached the point.
        specular_exponent: Phong exponent of the surface material.
        far_plane: Render distance used for the shadow queries.

    Returns:
        A tuple (diffuse, specular) of summed light intensities.
    """
    diffuse = 0.0
    specular = 0.0

    n_lights = num_lights[None]
    for k in range(n_lights):
        to_light = light_positions[k] - point
        light_distance = tm.length(to_light)
        light_dir = normalize(to_light)

        shadow_origin = offset_origin(point, normal, light_dir)
        shadow = intersect_scene(shadow_origin, light_dir, far_plane)

        lit = 1
        if shadow.hit == 1:
            if tm.length(shadow.point - shadow_origin) < light_distance:
                lit = 0

        if lit == 1:
            intensity = light_intensities[k]
            diffuse += diffuse_term(intensity, light_dir, normal)
            specular += specular_term(intensity, light_dir, normal, view_dir, specular_exponent)

    return diffuse, specular


@ti.func
def cast_ray(
    origin: vec3,
    direction: vec3,
    max_depth: ti.i32,
    far_plane: ti.f32,
    background: vec3,
) -> vec3:
    """Compute the linear color seen along a ray.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        max_depth: Deepest reflection level that is still shaded.
        far_plane: Render distance for all scene queries.
        background: Color of rays that hit nothing.

    Returns:
        The (unclamped) RGB color.
    """
    color = vec3(0.0, 0.0, 0.0)

    # Product of the reflection weights of all surfaces passed so far
    weight = 1.0

    ray_origin = origin
    ray_direction = direction
    active = 1

    for _ in range(max_depth + 1):
        if active == 1:
            rec = intersect_scene(ray_origin, ray_direction, far_plane)

            if rec.hit == 0:
                active = 0
            else:
                material = get_material(rec.material_id)
                diffuse, specular = direct_lighting(
                    rec.point,
                    rec.normal,
                    ray_direction,
                    material.specular_exponent,
                    far_plane,
                )
                color += weight * combine(material, diffuse, specular, vec3(0.0, 0.0, 0.0))
                weight *= material.albedo[2]

                reflect_direction = normalize(reflect(ray_direction, rec.normal))
                ray_origin = offset_origin(rec.point, rec.normal, reflect_direction)
                ray_direction = reflect_direction

    # Escaped the scene or ran past the depth bound
    color += weight * background

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_all_pixels(
    width: ti.i32,
    height: ti.i32,
    max_depth: ti.i32,
    far_plane: ti.f32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
):
    """Cast one primary ray per pixel and store the result.

    Every pixel only reads the scene and writes its own buffer slot, so the
    outer loop runs in parallel.
    """
    background = vec3(bg_r, bg_g, bg_b)
    for i, j in ti.ndrange(width, height):
        direction = primary_ray_direction(i, j)
        _color_buffer[i, j] = cast_ray(
            vec3(0.0, 0.0, 0.0), direction, max_depth, far_plane, background
        )


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    max_depth: ti.i32,
    far_plane: ti.f32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
) -> vec3:
    """Render one pixel without touching the color buffer."""
    direction = primary_ray_direction(pixel_i, pixel_j)
    return cast_ray(
        vec3(0.0, 0.0, 0.0), direction, max_depth, far_plane, vec3(bg_r, bg_g, bg_b)
    )


@ti.kernel
def _trace_single_ray(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    max_depth: ti.i32,
    far_plane: ti.f32,
    bg_r: ti.f32,
    bg_g: ti.f32,
    bg_b: ti.f32,
) -> vec3:
    """Cast an arbitrary ray through the scene."""
    return cast_ray(
        vec3(ox, oy, oz), vec3(dx, dy, dz), max_depth, far_plane, vec3(bg_r, bg_g, bg_b)
    )


# =============================================================================
# Public Rendering API
# =============================================================================


def _to_color(color) -> Vector3:
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image() -> None:
    """Render every pixel of the render target with the current settings.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    s = _settings
    _render_all_pixels(width, height, s.max_depth, s.far_plane, *s.background)


def render_pixel(pixel_i: int, pixel_j: int) -> Vector3:
    """Render a single pixel of the current camera.

    Intended for testing and debugging; use render_image() for full frames.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    s = _settings
    color = _render_single_pixel(pixel_i, pixel_j, s.max_depth, s.far_plane, *s.background)
    return _to_color(color)


def trace_ray(origin: Vector3, direction: Vector3) -> Vector3:
    """Cast a single ray through the current scene.

    Args:
        origin: Ray origin.
        direction: Ray direction; normalized before casting.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        ValueError: If the direction has zero length.
    """
    o = to_vec3(origin, "origin")
    d = host_normalize(to_vec3(direction, "direction"))
    s = _settings
    color = _trace_single_ray(*o, *d, s.max_depth, s.far_plane, *s.background)
    return _to_color(color)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Returns the linear, unclamped color buffer as an array of shape
    (height, width, 3), first row at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Extract active region and transpose from (width, height, 3)
    full_image = _color_buffer.to_numpy()
    image = full_image[:width, :height, :]
    image = np.transpose(image, (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)
