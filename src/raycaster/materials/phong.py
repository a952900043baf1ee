"""Phong material model and material registry.

A material has a base color, a specular exponent and three albedo weights
that scale the three additive terms of the shading model:

    color = base_color * diffuse * albedo[0]
          + white * specular * albedo[1]
          + reflected_color * albedo[2]

The weights are independent and need not sum to 1; the result is clamped
only when the image is written out.

The per-light terms follow the classic Phong formulation:

    diffuse  = intensity * max(0, L . N)
    specular = intensity * max(0, reflect(L, N) . D) ^ exponent

where L points from the surface to the light and D is the direction of the
ray that reached the surface.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.materials.phong import add_material
    >>> ivory = add_material((0.4, 0.4, 0.3), 50.0, (0.6, 0.3, 0.1))
"""

import math

import taichi as ti
import taichi.math as tm

from raycaster.core.ray import reflect, to_vec3

# Type alias for 3D vectors
vec3 = tm.vec3

WHITE = vec3(1.0, 1.0, 1.0)


@ti.dataclass
class PhongMaterial:
    """Phong material properties.

    Attributes:
        base_color: The surface's own color (RGB, each component in [0, 1]).
        specular_exponent: Phong exponent controlling highlight size (>= 0).
        albedo: Weights for the own-color, specular and reflection terms.
    """

    base_color: vec3
    specular_exponent: ti.f32
    albedo: vec3


@ti.func
def diffuse_term(intensity: ti.f32, light_dir: vec3, normal: vec3) -> ti.f32:
    """Lambert cosine term for one light."""
    return intensity * ti.max(0.0, tm.dot(light_dir, normal))


@ti.func
def specular_term(
    intensity: ti.f32,
    light_dir: vec3,
    normal: vec3,
    view_dir: vec3,
    exponent: ti.f32,
) -> ti.f32:
    """Phong highlight term for one light.

    Args:
        intensity: Light intensity.
        light_dir: Unit vector from the surface point toward the light.
        normal: Outward unit surface normal.
        view_dir: Direction of the incoming ray (toward the surface).
        exponent: Specular exponent of the material.

    Returns:
        intensity * max(0, reflect(light_dir, normal) . view_dir) ^ exponent
    """
    cos_r = ti.max(0.0, tm.dot(reflect(light_dir, normal), view_dir))
    return intensity * (cos_r**exponent)


@ti.func
def combine(
    material: PhongMaterial,
    diffuse: ti.f32,
    specular: ti.f32,
    reflected: vec3,
) -> vec3:
    """Weighted sum of the own-color, specular and reflection terms."""
    return (
        material.base_color * diffuse * material.albedo[0]
        + WHITE * specular * material.albedo[1]
        + reflected * material.albedo[2]
    )


# =============================================================================
# Material Field Storage (for scene-level material management)
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

# Structure of Arrays storage for material properties
material_base_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def validate_material(
    base_color: tuple[float, float, float],
    specular_exponent: float,
    albedo: tuple[float, float, float],
) -> tuple[tuple[float, float, float], float, tuple[float, float, float]]:
    """Check material parameters and normalize them to floats.

    Returns:
        The (base_color, specular_exponent, albedo) triple as floats.

    Raises:
        ValueError: If a base color component is outside [0, 1], the exponent
            is negative or not finite, or an albedo weight is negative.
    """
    color = to_vec3(base_color, "base_color")
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(f"Base color component {i} = {component} is outside [0, 1]")

    exponent = float(specular_exponent)
    if not math.isfinite(exponent) or exponent < 0.0:
        raise ValueError(f"Specular exponent must be finite and >= 0, got {specular_exponent}")

    weights = to_vec3(albedo, "albedo")
    for i, weight in enumerate(weights):
        if weight < 0.0:
            raise ValueError(f"Albedo weight {i} = {weight} is negative")

    return color, exponent, weights


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(
    base_color: tuple[float, float, float],
    specular_exponent: float,
    albedo: tuple[float, float, float],
) -> int:
    """Add a material to the registry.

    Args:
        base_color: The own color as (R, G, B), each in [0, 1].
        specular_exponent: The Phong exponent (>= 0).
        albedo: Weights for own color, specular and reflection.

    Returns:
        The index (material id) of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is invalid.
    """
    color, exponent, weights = validate_material(base_color, specular_exponent, albedo)

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_base_colors[idx] = vec3(color[0], color[1], color[2])
    material_specular_exponents[idx] = exponent
    material_albedos[idx] = vec3(weights[0], weights[1], weights[2])
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_id: ti.i32) -> PhongMaterial:
    """Look up a registered material by id."""
    return PhongMaterial(
        base_color=material_base_colors[material_id],
        specular_exponent=material_specular_exponents[material_id],
        albedo=material_albedos[material_id],
    )
