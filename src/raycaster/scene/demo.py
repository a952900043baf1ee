"""Built-in demo scene.

Four spheres (ivory, red rubber and two mirrors) lit by three point lights,
seen from the fixed camera at the origin looking along +Z. The CLI renders
this scene when no scene file is given.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from raycaster.scene.demo import create_demo_scene
    >>>
    >>> scene = create_demo_scene(width=320, height=240)
    >>> scene.get_sphere_count()
    4
"""

from dataclasses import dataclass

from raycaster.camera.pinhole import Camera
from raycaster.scene.manager import SceneManager


@dataclass(frozen=True)
class DemoMaterial:
    """Parameters of one demo material."""

    base_color: tuple[float, float, float]
    specular_exponent: float
    albedo: tuple[float, float, float]


# =============================================================================
# Demo Scene Constants
# =============================================================================

DEFAULT_WIDTH = 1024
DEFAULT_HEIGHT = 768
DEFAULT_FOV = 60.0

IVORY = DemoMaterial((0.4, 0.4, 0.3), 50.0, (0.6, 0.3, 0.1))
RED_RUBBER = DemoMaterial((0.3, 0.1, 0.1), 10.0, (0.9, 0.1, 0.0))
MIRROR = DemoMaterial((1.0, 1.0, 1.0), 1425.0, (0.0, 10.0, 0.8))

# (center, radius, material)
DEMO_SPHERES = (
    ((-3.0, 0.0, 16.0), 2.0, IVORY),
    ((-1.0, -1.5, 12.0), 2.0, MIRROR),
    ((1.5, -0.5, 18.0), 3.0, RED_RUBBER),
    ((7.0, 5.0, 18.0), 4.0, MIRROR),
)

# (position, intensity)
DEMO_LIGHTS = (
    ((-20.0, 20.0, -20.0), 1.5),
    ((30.0, 50.0, 25.0), 1.8),
    ((30.0, 20.0, -30.0), 1.7),
)


def create_demo_scene(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    fov: float = DEFAULT_FOV,
) -> SceneManager:
    """Create the demo scene.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in degrees.

    Returns:
        A SceneManager holding the demo materials, spheres, lights and camera.
    """
    scene = SceneManager(camera=Camera(width=width, height=height, fov=fov))

    material_ids: dict[DemoMaterial, int] = {}
    for material in (IVORY, RED_RUBBER, MIRROR):
        material_ids[material] = scene.add_material(
            material.base_color, material.specular_exponent, material.albedo
        )

    for center, radius, material in DEMO_SPHERES:
        scene.add_sphere(center, radius, material_ids[material])

    for position, intensity in DEMO_LIGHTS:
        scene.add_light(position, intensity)

    return scene
