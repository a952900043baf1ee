"""Scene manager coordinating materials, spheres, lights and the camera.

The SceneManager is the single entry point for building a scene. Every
entity is validated on the Python side before it is written to the Taichi
fields, so an invalid scene fails while it is being built and never
reaches the renderer.

The SceneManager maintains:
- Immutable descriptions of every material, sphere and light (in order)
- The material id space (0-based, in registration order)
- The camera (image size and field of view)
- Scene serialization to and from plain dictionaries

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> red = scene.add_material((1.0, 0.0, 0.0), 10.0, (1.0, 0.0, 0.0))
    >>> scene.add_sphere((0, 0, 5), 1.0, red)
    >>> scene.add_light((0, 0, 0), 1.0)
"""

import math
import numbers
from dataclasses import dataclass, field
from typing import Any

import taichi.math as tm

from raycaster.camera.pinhole import Camera
from raycaster.core.ray import Vector3, to_vec3
from raycaster.materials.phong import (
    MAX_MATERIALS,
    add_material,
    clear_materials,
    get_material_count,
    validate_material,
)
from raycaster.scene.intersection import (
    MAX_LIGHTS,
    MAX_SPHERES,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_sphere_count,
)

# Type alias for 3D vectors
vec3 = tm.vec3

# Camera used until one is assigned
DEFAULT_CAMERA = Camera(width=1024, height=768, fov=60.0)


def _to_material_id(value: Any) -> int:
    """Accept an integer material id, including integral floats from JSON.

    Raises:
        ValueError: If the value is not a whole number.
    """
    if isinstance(value, bool):
        raise ValueError(f"material_id must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValueError(f"material_id must be an integer, got {value!r}")


@dataclass(frozen=True)
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The material id (index in registration order).
        base_color: The own color (R, G, B) in [0, 1].
        specular_exponent: The Phong exponent.
        albedo: Weights for own color, specular and reflection.
    """

    material_id: int
    base_color: Vector3
    specular_exponent: float
    albedo: Vector3


@dataclass(frozen=True)
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material id assigned to the sphere.
    """

    sphere_index: int
    center: Vector3
    radius: float
    material_id: int


@dataclass(frozen=True)
class LightInfo:
    """Information about a point light in the scene.

    Attributes:
        light_index: The index in the light storage arrays.
        position: The light position.
        intensity: The light intensity.
    """

    light_index: int
    position: Vector3
    intensity: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Sphere entries refer to materials by 0-based ``material_id``.

    Attributes:
        camera: Camera parameters (width, height, fov), or None for the default.
        materials: List of material configurations.
        spheres: List of sphere configurations.
        lights: List of light configurations.
    """

    camera: dict[str, Any] | None = None
    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Scene builder with validation and Taichi field upload.

    The Taichi-side storage is global, so only one SceneManager should be
    populated at a time; creating a new one clears the previous scene.

    Attributes:
        camera: The camera used to render this scene.
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        lights: List of LightInfo for all lights in the scene.

    Example:
        >>> scene = SceneManager(camera=Camera(640, 480, 60.0))
        >>> ivory = scene.add_material((0.4, 0.4, 0.3), 50.0, (0.6, 0.3, 0.1))
        >>> scene.add_sphere((-3, 0, 16), 2.0, ivory)
        >>> scene.add_light((-20, 20, 20), 1.5)
    """

    def __init__(self, camera: Camera | None = None) -> None:
        """Initialize an empty scene."""
        self.camera: Camera = camera if camera is not None else DEFAULT_CAMERA
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_materials()
        self.materials.clear()
        self.spheres.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (spheres, lights and materials).

        The camera is kept.
        """
        self._clear_all()

    def upload(self) -> None:
        """Rewrite the Taichi scene fields from this scene's descriptions.

        The fields are shared by every SceneManager, so building another
        scene replaces their contents. Call this before rendering to make
        the device-side scene match this one again.
        """
        clear_scene()
        clear_materials()
        for mat in self.materials:
            add_material(mat.base_color, mat.specular_exponent, mat.albedo)
        for sphere in self.spheres:
            c = sphere.center
            add_sphere(vec3(c[0], c[1], c[2]), sphere.radius, sphere.material_id)
        for light in self.lights:
            p = light.position
            add_light(vec3(p[0], p[1], p[2]), light.intensity)

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        base_color: tuple[float, float, float],
        specular_exponent: float,
        albedo: tuple[float, float, float],
    ) -> int:
        """Add a material to the scene.

        Args:
            base_color: The own color as (R, G, B), each in [0, 1].
            specular_exponent: The Phong exponent (>= 0).
            albedo: Weights for own color, specular and reflection.

        Returns:
            The material id for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any parameter is invalid.
        """
        color, exponent, weights = validate_material(base_color, specular_exponent, albedo)
        material_id = add_material(color, exponent, weights)

        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                base_color=color,
                specular_exponent=exponent,
                albedo=weights,
            )
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by id, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive and Light Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (positive).
            material_id: The material id to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the center, radius or material_id is invalid.
        """
        c = to_vec3(center, "center")
        r = float(radius)
        if not math.isfinite(r) or r <= 0.0:
            raise ValueError(f"Sphere radius must be positive and finite, got {radius}")
        material_id = _to_material_id(material_id)
        if material_id < 0 or material_id >= len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

        sphere_index = add_sphere(vec3(c[0], c[1], c[2]), r, material_id)

        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=c,
                radius=r,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light to the scene.

        Args:
            position: The light position as (x, y, z).
            intensity: The light intensity (>= 0).

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the position or intensity is invalid.
        """
        p = to_vec3(position, "position")
        value = float(intensity)
        if not math.isfinite(value) or value < 0.0:
            raise ValueError(f"Light intensity must be finite and >= 0, got {intensity}")

        light_index = add_light(vec3(p[0], p[1], p[2]), value)

        self.lights.append(LightInfo(light_index=light_index, position=p, intensity=value))
        return light_index

    def add_sphere_with_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        base_color: tuple[float, float, float],
        specular_exponent: float,
        albedo: tuple[float, float, float],
    ) -> tuple[int, int]:
        """Add a sphere with a new material in one call.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_material(base_color, specular_exponent, albedo)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig(
            camera={
                "width": self.camera.width,
                "height": self.camera.height,
                "fov": self.camera.fov,
            }
        )

        for mat in self.materials:
            config.materials.append(
                {
                    "base_color": list(mat.base_color),
                    "specular_exponent": mat.specular_exponent,
                    "albedo": list(mat.albedo),
                }
            )

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for light in self.lights:
            config.lights.append(
                {
                    "position": list(light.position),
                    "intensity": light.intensity,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration. Materials are
        loaded first since spheres refer to them by id.

        Raises:
            ValueError: If the configuration contains invalid data, including
                missing keys and values of the wrong type.
        """
        self.clear()

        if config.camera is not None:
            try:
                self.camera = Camera(
                    width=config.camera["width"],
                    height=config.camera["height"],
                    fov=float(config.camera["fov"]),
                )
            except KeyError as e:
                raise ValueError(f"Camera configuration is missing {e.args[0]!r}") from e
            except TypeError as e:
                raise ValueError(f"Invalid camera configuration: {e}") from e

        try:
            for mat_config in config.materials:
                self.add_material(
                    mat_config["base_color"],
                    mat_config["specular_exponent"],
                    mat_config["albedo"],
                )

            for sphere_config in config.spheres:
                self.add_sphere(
                    sphere_config["center"],
                    sphere_config["radius"],
                    sphere_config["material_id"],
                )

            for light_config in config.lights:
                self.add_light(light_config["position"], light_config["intensity"])
        except KeyError as e:
            raise ValueError(f"Scene configuration is missing {e.args[0]!r}") from e
        except TypeError as e:
            raise ValueError(f"Invalid scene configuration: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "camera": config.camera,
            "materials": config.materials,
            "spheres": config.spheres,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'camera', 'materials', 'spheres', 'lights' keys.
        """
        config = SceneConfig(
            camera=data.get("camera"),
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
