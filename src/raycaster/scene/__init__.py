"""Scene module for scene storage, construction and input.

This module handles scene representation and ray-scene queries:

Components:
    intersection: Sphere and light storage, nearest-hit scene query
    manager: Scene builder with validation and serialization
    loader: JSON and token stream scene files, interactive prompts
    demo: Built-in four-sphere demo scene

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for spheres and lights
    - Material ids indexing the material registry
"""

from .demo import create_demo_scene
from .intersection import (
    FAR_PLANE,
    MAX_LIGHTS,
    MAX_SPHERES,
    SceneHitRecord,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_sphere_count,
    intersect_scene,
)
from .loader import (
    SceneFormatError,
    load_scene_file,
    parse_scene_tokens,
    prompt_scene,
    save_scene_file,
)
from .manager import (
    LightInfo,
    MaterialInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "add_light",
    "clear_scene",
    "get_sphere_count",
    "get_light_count",
    "intersect_scene",
    "FAR_PLANE",
    "MAX_SPHERES",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SceneConfig",
    "MaterialInfo",
    "SphereInfo",
    "LightInfo",
    # Loader module
    "SceneFormatError",
    "load_scene_file",
    "save_scene_file",
    "parse_scene_tokens",
    "prompt_scene",
    # Demo scene
    "create_demo_scene",
]
