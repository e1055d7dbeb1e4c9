"""Catalog of built-in demo scenes.

Every scene starts from the same base: a camera at the origin looking down
-z with a 45 degree vertical field of view, and one white light at
(5, 5, 5). The builders then add their objects and may replace the light or
the camera:

- scene1: a single large red sphere
- scene2: a lavender ground plane and a light blue cube under a dim light
- scene3: ground plane, red sphere, green cube and blue cylinder
- scene4: scene3 seen from an elevated camera

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.scene.demo_scenes import create_scene
    >>> scene = create_scene("scene3", aspect_ratio=800 / 600)
    >>> scene.get_primitive_count()
    4
"""

import logging
from collections.abc import Callable

from whitted.camera.pinhole import PinholeCamera
from whitted.materials.phong import Material
from whitted.scene.lighting import Light
from whitted.scene.manager import Scene

logger = logging.getLogger(__name__)

DEFAULT_SCENE = "scene1"


def _default_camera(aspect_ratio: float) -> PinholeCamera:
    return PinholeCamera(
        position=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        vfov=45.0,
        aspect_ratio=aspect_ratio,
    )


def _build_sphere_scene(scene: Scene) -> None:
    red = Material(
        color=(0.8, 0.2, 0.2), ambient=0.2, diffuse=0.8, specular=0.3, shininess=100.0
    )
    scene.add_sphere((0.0, 0.0, -5.0), 2.0, red)


def _build_plane_cube_scene(scene: Scene) -> None:
    scene.clear_lights()
    scene.add_light(Light(position=(5.0, 5.0, 5.0), color=(0.3, 0.3, 0.3), intensity=0.3))

    lavender = Material(
        color=(0.9, 0.8, 0.95), ambient=0.3, diffuse=0.8, specular=0.3, shininess=200.0
    )
    light_blue = Material(
        color=(0.7, 0.9, 1.0), ambient=0.3, diffuse=0.8, specular=0.4, shininess=200.0
    )
    scene.add_plane((0.0, -2.0, 0.0), (0.0, 1.0, 0.0), lavender)
    scene.add_cube((0.0, 0.0, -5.0), 1.0, light_blue)


def _add_all_objects(scene: Scene) -> None:
    def matte(color: tuple[float, float, float]) -> Material:
        return Material(color=color, ambient=0.1, diffuse=0.7, specular=0.2, shininess=200.0)

    scene.add_plane((0.0, -2.0, 0.0), (0.0, 1.0, 0.0), matte((0.5, 0.5, 0.5)))
    scene.add_sphere((-2.0, 0.0, -5.0), 1.0, matte((0.8, 0.2, 0.2)))
    scene.add_cube((2.0, 0.0, -5.0), 1.0, matte((0.2, 0.8, 0.2)))
    scene.add_cylinder((0.0, 0.0, -7.0), 0.5, 2.0, matte((0.2, 0.2, 0.8)))


def _build_all_objects_scene(scene: Scene) -> None:
    _add_all_objects(scene)


def _build_elevated_view_scene(scene: Scene) -> None:
    # Fixed 4:3 aspect regardless of the output size
    scene.set_camera(
        PinholeCamera(
            position=(-3.0, 3.0, 2.0),
            look_at=(0.0, 0.0, -5.0),
            up=(0.0, 1.0, 0.0),
            vfov=45.0,
            aspect_ratio=800.0 / 600.0,
        )
    )
    _add_all_objects(scene)


SCENE_BUILDERS: dict[str, Callable[[Scene], None]] = {
    "scene1": _build_sphere_scene,
    "scene2": _build_plane_cube_scene,
    "scene3": _build_all_objects_scene,
    "scene4": _build_elevated_view_scene,
}


def list_scenes() -> list[str]:
    """Names of the built-in scenes."""
    return sorted(SCENE_BUILDERS)


def create_scene(name: str = DEFAULT_SCENE, aspect_ratio: float = 4.0 / 3.0) -> Scene:
    """Build a demo scene by name.

    Unknown names fall back to scene1.

    Args:
        name: One of list_scenes().
        aspect_ratio: Aspect ratio of the default camera (width / height).

    Returns:
        A Scene with camera, lights and objects set.

    Raises:
        ValueError: If aspect_ratio is not positive.
    """
    builder = SCENE_BUILDERS.get(name)
    if builder is None:
        logger.warning("Unknown scene %r, falling back to %s", name, DEFAULT_SCENE)
        builder = SCENE_BUILDERS[DEFAULT_SCENE]

    scene = Scene()
    scene.set_camera(_default_camera(aspect_ratio))
    scene.add_light(Light(position=(5.0, 5.0, 5.0), color=(1.0, 1.0, 1.0), intensity=1.0))
    builder(scene)
    return scene
