"""Material models.

Components:
    phong: Phong material (base color, specular exponent, albedo weights),
        the material registry and the per-light shading terms
"""

from .phong import (
    MAX_MATERIALS,
    PhongMaterial,
    add_material,
    clear_materials,
    combine,
    diffuse_term,
    get_material,
    get_material_count,
    specular_term,
    validate_material,
)

__all__ = [
    "PhongMaterial",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
    "validate_material",
    "diffuse_term",
    "specular_term",
    "combine",
]
