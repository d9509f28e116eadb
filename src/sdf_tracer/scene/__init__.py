"""Scene module for surface and light storage and the distance query.

Components:
    intersection: Surface storage in Taichi fields and the nearest-surface query
    lights: Point light value type and storage
    manager: SceneManager coordinating uploads and dict configuration
    default_scene: The four-sphere demo scene

Scene data is organized for parallel kernel access:
    - Structure-of-Arrays layout for surfaces and their materials
    - Read-only during a frame render
"""

from .default_scene import DEFAULT_LIGHTS, DEFAULT_SURFACES, create_default_scene
from .intersection import (
    MAX_SURFACES,
    add_surface,
    clear_scene,
    get_surface_count,
    query_scene,
    scene_sdf,
)
from .lights import MAX_LIGHTS, Light, add_light, clear_lights, get_light_count
from .manager import SceneManager, surface_from_dict

__all__ = [
    # Intersection module
    "MAX_SURFACES",
    "add_surface",
    "clear_scene",
    "get_surface_count",
    "query_scene",
    "scene_sdf",
    # Lights module
    "MAX_LIGHTS",
    "Light",
    "add_light",
    "clear_lights",
    "get_light_count",
    # Manager module
    "SceneManager",
    "surface_from_dict",
    # Demo scene
    "DEFAULT_SURFACES",
    "DEFAULT_LIGHTS",
    "create_default_scene",
]
