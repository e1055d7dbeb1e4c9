"""Scene container coordinating primitives, materials, lights and the camera.

The Scene keeps the authoritative description of the world on the Python
side: a list per primitive kind (each primitive owning its Material by
value), the point lights, the background color and an optional camera.
upload() writes all of it into the module-level Taichi fields that the
intersection and shading kernels read. Each primitive gets its own material
slot, so the material id stored with a primitive is simply its upload order.

Uploading clears the fields first, so it is idempotent and a Scene can be
rendered, edited and rendered again.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.camera.pinhole import PinholeCamera
    >>> from whitted.materials.phong import Material
    >>> from whitted.scene.lighting import Light
    >>> from whitted.scene.manager import Scene
    >>> scene = Scene()
    >>> scene.add_sphere((0, 0, -5), 1.0, Material(color=(0.8, 0.2, 0.2)))
    >>> scene.add_light(Light(position=(5, 5, 5)))
    >>> scene.set_camera(PinholeCamera((0, 0, 0), (0, 0, -1), (0, 1, 0), 45.0, 4 / 3))
    >>> image = scene.render(80, 60)
"""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from whitted.camera.pinhole import PinholeCamera, compute_camera_basis, setup_camera
from whitted.materials.phong import Material, add_material, clear_materials
from whitted.scene import intersection
from whitted.scene.intersection import SceneHit, clear_scene, nearest_hit
from whitted.scene.lighting import (
    DEFAULT_BACKGROUND_COLOR,
    Light,
    add_light,
    clear_lights,
    set_background_color,
)

if TYPE_CHECKING:
    from whitted.preview.image import Image


def _as_triple(values: Any) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass
class SphereInfo:
    """A sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere.
        material: The material owned by the sphere.
    """

    center: tuple[float, float, float]
    radius: float
    material: Material = field(default_factory=Material)


@dataclass
class PlaneInfo:
    """An infinite plane in the scene.

    Attributes:
        point: Any point on the plane.
        normal: Unit normal of the plane.
        material: The material owned by the plane.
    """

    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    material: Material = field(default_factory=Material)


@dataclass
class CubeInfo:
    """An axis-aligned cube in the scene.

    Attributes:
        center: The center of the cube.
        size: Edge length of the cube.
        material: The material owned by the cube.
    """

    center: tuple[float, float, float]
    size: float
    material: Material = field(default_factory=Material)


@dataclass
class CylinderInfo:
    """A capped cylinder aligned with the y axis.

    Attributes:
        center: The center of the cylinder (midway between the caps).
        radius: Radius of the cylinder.
        height: Distance between the caps.
        material: The material owned by the cylinder.
    """

    center: tuple[float, float, float]
    radius: float
    height: float
    material: Material = field(default_factory=Material)


class Scene:
    """Container for everything a render needs.

    Attributes:
        spheres: SphereInfo for every sphere, in insertion order.
        planes: PlaneInfo for every plane.
        cubes: CubeInfo for every cube.
        cylinders: CylinderInfo for every cylinder.
        lights: The point lights.
        background_color: Color returned by rays that hit nothing.
    """

    def __init__(
        self, background_color: tuple[float, float, float] = DEFAULT_BACKGROUND_COLOR
    ) -> None:
        self.spheres: list[SphereInfo] = []
        self.planes: list[PlaneInfo] = []
        self.cubes: list[CubeInfo] = []
        self.cylinders: list[CylinderInfo] = []
        self.lights: list[Light] = []
        self.background_color = _as_triple(background_color)
        self._camera: PinholeCamera | None = None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material | None = None,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material: The sphere's material. Defaults to Material.default().

        Returns:
            The index of the added sphere.

        Raises:
            ValueError: If radius is not positive.
            RuntimeError: If the sphere capacity is exceeded.
        """
        if radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        if len(self.spheres) >= intersection.MAX_SPHERES:
            raise RuntimeError(f"Maximum number of spheres ({intersection.MAX_SPHERES}) exceeded")
        info = SphereInfo(_as_triple(center), float(radius), material or Material.default())
        self.spheres.append(info)
        return len(self.spheres) - 1

    def add_plane(
        self,
        point: tuple[float, float, float],
        normal: tuple[float, float, float],
        material: Material | None = None,
    ) -> int:
        """Add an infinite plane to the scene. The normal is normalized.

        Raises:
            ValueError: If the normal has zero length.
            RuntimeError: If the plane capacity is exceeded.
        """
        nx, ny, nz = _as_triple(normal)
        norm = math.sqrt(nx * nx + ny * ny + nz * nz)
        if norm == 0.0:
            raise ValueError("Plane normal must be non-zero")
        if len(self.planes) >= intersection.MAX_PLANES:
            raise RuntimeError(f"Maximum number of planes ({intersection.MAX_PLANES}) exceeded")
        info = PlaneInfo(
            _as_triple(point), (nx / norm, ny / norm, nz / norm), material or Material.default()
        )
        self.planes.append(info)
        return len(self.planes) - 1

    def add_cube(
        self,
        center: tuple[float, float, float],
        size: float,
        material: Material | None = None,
    ) -> int:
        """Add an axis-aligned cube with edge length size.

        Raises:
            ValueError: If size is not positive.
            RuntimeError: If the cube capacity is exceeded.
        """
        if size <= 0.0:
            raise ValueError(f"Cube size must be positive, got {size}")
        if len(self.cubes) >= intersection.MAX_CUBES:
            raise RuntimeError(f"Maximum number of cubes ({intersection.MAX_CUBES}) exceeded")
        self.cubes.append(CubeInfo(_as_triple(center), float(size), material or Material.default()))
        return len(self.cubes) - 1

    def add_cylinder(
        self,
        center: tuple[float, float, float],
        radius: float,
        height: float,
        material: Material | None = None,
    ) -> int:
        """Add a capped cylinder aligned with the y axis.

        Raises:
            ValueError: If radius or height is not positive.
            RuntimeError: If the cylinder capacity is exceeded.
        """
        if radius <= 0.0:
            raise ValueError(f"Cylinder radius must be positive, got {radius}")
        if height <= 0.0:
            raise ValueError(f"Cylinder height must be positive, got {height}")
        if len(self.cylinders) >= intersection.MAX_CYLINDERS:
            raise RuntimeError(
                f"Maximum number of cylinders ({intersection.MAX_CYLINDERS}) exceeded"
            )
        info = CylinderInfo(
            _as_triple(center), float(radius), float(height), material or Material.default()
        )
        self.cylinders.append(info)
        return len(self.cylinders) - 1

    # =========================================================================
    # Lights and Camera
    # =========================================================================

    def add_light(self, light: Light) -> int:
        """Add a point light. Returns its index."""
        self.lights.append(light)
        return len(self.lights) - 1

    def clear_lights(self) -> None:
        """Remove all lights from the scene."""
        self.lights.clear()

    def set_camera(self, camera: PinholeCamera) -> None:
        """Set the camera used by render().

        Raises:
            ValueError: If the camera configuration is degenerate.
        """
        compute_camera_basis(camera)
        self._camera = camera

    @property
    def camera(self) -> PinholeCamera | None:
        """The current camera, or None if none has been set."""
        return self._camera

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        return len(self.spheres)

    def get_plane_count(self) -> int:
        return len(self.planes)

    def get_cube_count(self) -> int:
        return len(self.cubes)

    def get_cylinder_count(self) -> int:
        return len(self.cylinders)

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the scene."""
        return len(self.spheres) + len(self.planes) + len(self.cubes) + len(self.cylinders)

    def get_light_count(self) -> int:
        return len(self.lights)

    def clear(self) -> None:
        """Remove every primitive and light and unset the camera."""
        self.spheres.clear()
        self.planes.clear()
        self.cubes.clear()
        self.cylinders.clear()
        self.lights.clear()
        self._camera = None

    # =========================================================================
    # Taichi Upload
    # =========================================================================

    def upload(self) -> None:
        """Write the scene into the Taichi fields read by the kernels.

        Clears the primitive, material and light storage first. The camera
        is uploaded only if one is set.

        Raises:
            RuntimeError: If the material or light capacity is exceeded.
        """
        clear_scene()
        clear_materials()
        clear_lights()

        for sphere in self.spheres:
            material_id = add_material(sphere.material)
            intersection.add_sphere(sphere.center, sphere.radius, material_id)
        for plane in self.planes:
            material_id = add_material(plane.material)
            intersection.add_plane(plane.point, plane.normal, material_id)
        for cube in self.cubes:
            material_id = add_material(cube.material)
            intersection.add_cube(cube.center, cube.size, material_id)
        for cylinder in self.cylinders:
            material_id = add_material(cylinder.material)
            intersection.add_cylinder(
                cylinder.center, cylinder.radius, cylinder.height, material_id
            )

        for light in self.lights:
            add_light(light)
        set_background_color(self.background_color)

        if self._camera is not None:
            setup_camera(self._camera)

    def hit(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
        t_min: float = 0.001,
        t_max: float = math.inf,
    ) -> SceneHit | None:
        """Find the nearest primitive hit by a ray.

        Args:
            origin: Ray origin.
            direction: Ray direction (normalized internally).
            t_min: Exclusive lower bound on the ray parameter.
            t_max: Inclusive upper bound on the ray parameter.

        Returns:
            The nearest SceneHit, or None if the ray escapes.
        """
        self.upload()
        return nearest_hit(origin, direction, t_min, t_max)

    def ray_color(
        self,
        origin: tuple[float, float, float],
        direction: tuple[float, float, float],
        depth: int = 5,
        enable_reflection: bool = False,
    ) -> tuple[float, float, float]:
        """Shade a single ray against this scene.

        Args:
            origin: Ray origin.
            direction: Ray direction (normalized internally).
            depth: Remaining recursion budget; 0 returns black.
            enable_reflection: Whether mirror reflection rays are traced.

        Returns:
            The clamped (R, G, B) color.
        """
        from whitted.core.integrator import trace_ray

        self.upload()
        return trace_ray(origin, direction, depth=depth, enable_reflection=enable_reflection)

    def render(
        self,
        width: int,
        height: int,
        enable_reflection: bool = False,
        *,
        max_depth: int = 5,
        callback: Callable[[int, int], None] | None = None,
    ) -> "Image":
        """Render the scene through its camera. See whitted.core.render.render()."""
        from whitted.core.render import render

        return render(
            self,
            width,
            height,
            enable_reflection,
            max_depth=max_depth,
            callback=callback,
        )

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        return {
            "background_color": list(self.background_color),
            "camera": self._camera.to_dict() if self._camera is not None else None,
            "lights": [light.to_dict() for light in self.lights],
            "spheres": [
                {"center": list(s.center), "radius": s.radius, "material": s.material.to_dict()}
                for s in self.spheres
            ],
            "planes": [
                {"point": list(p.point), "normal": list(p.normal), "material": p.material.to_dict()}
                for p in self.planes
            ],
            "cubes": [
                {"center": list(c.center), "size": c.size, "material": c.material.to_dict()}
                for c in self.cubes
            ],
            "cylinders": [
                {
                    "center": list(c.center),
                    "radius": c.radius,
                    "height": c.height,
                    "material": c.material.to_dict(),
                }
                for c in self.cylinders
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Scene":
        """Create a scene from a dictionary produced by to_dict().

        Missing sections are treated as empty.

        Raises:
            ValueError: If the data describes an invalid primitive, material,
                light or camera.
        """
        scene = cls(background_color=data.get("background_color", DEFAULT_BACKGROUND_COLOR))

        for sphere in data.get("spheres", []):
            scene.add_sphere(
                sphere["center"], sphere["radius"], Material.from_dict(sphere.get("material", {}))
            )
        for plane in data.get("planes", []):
            scene.add_plane(
                plane["point"], plane["normal"], Material.from_dict(plane.get("material", {}))
            )
        for cube in data.get("cubes", []):
            scene.add_cube(cube["center"], cube["size"], Material.from_dict(cube.get("material", {})))
        for cylinder in data.get("cylinders", []):
            scene.add_cylinder(
                cylinder["center"],
                cylinder["radius"],
                cylinder["height"],
                Material.from_dict(cylinder.get("material", {})),
            )

        for light in data.get("lights", []):
            scene.add_light(Light.from_dict(light))

        camera = data.get("camera")
        if camera is not None:
            scene.set_camera(PinholeCamera.from_dict(camera))

        return scene
