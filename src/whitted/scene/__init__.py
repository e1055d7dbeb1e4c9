"""Scene module: primitive storage, lights, the Scene container and demo scenes.

Components:
    intersection: SoA primitive storage and the nearest-hit / any-hit queries
    lighting: Point lights, attenuation curve and background color
    manager: Scene container that owns primitives, materials, lights and camera
    demo_scenes: Built-in scene catalog (scene1 to scene4)

Scene data is organized for the kernels:
    - Structure-of-Arrays layout per primitive kind
    - One material slot per primitive
    - Lights and background color in their own fields
"""

from .demo_scenes import SCENE_BUILDERS, create_scene, list_scenes
from .intersection import (
    MAX_CUBES,
    MAX_CYLINDERS,
    MAX_PLANES,
    MAX_SPHERES,
    PrimitiveKind,
    SceneHit,
    SceneHitRecord,
    clear_scene,
    get_primitive_counts,
    intersect_scene,
    intersect_scene_any,
    nearest_hit,
)
from .lighting import DEFAULT_BACKGROUND_COLOR, MAX_LIGHTS, Light, light_attenuation
from .manager import CubeInfo, CylinderInfo, PlaneInfo, Scene, SphereInfo

__all__ = [
    # Intersection module
    "PrimitiveKind",
    "SceneHit",
    "SceneHitRecord",
    "clear_scene",
    "get_primitive_counts",
    "intersect_scene",
    "intersect_scene_any",
    "nearest_hit",
    "MAX_SPHERES",
    "MAX_PLANES",
    "MAX_CUBES",
    "MAX_CYLINDERS",
    # Lighting module
    "Light",
    "light_attenuation",
    "DEFAULT_BACKGROUND_COLOR",
    "MAX_LIGHTS",
    # Manager module
    "Scene",
    "SphereInfo",
    "PlaneInfo",
    "CubeInfo",
    "CylinderInfo",
    # Demo scenes
    "SCENE_BUILDERS",
    "create_scene",
    "list_scenes",
]
