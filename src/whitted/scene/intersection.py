"""Scene-level primitive intersection testing.

Primitives are stored per kind in Structure-of-Arrays Taichi fields, each
with the index of the material slot it owns. intersect_scene() scans every
primitive linearly, shrinking the upper bound of the search interval each
time a closer hit is found, so the result is the nearest hit regardless of
insertion order. The record carries a handle to the owning primitive
(kind + index) and its material slot.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.scene.intersection import add_sphere, clear_scene, nearest_hit
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -5.0), 1.0, material_id=0)
    >>> hit = nearest_hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
    >>> hit.t
    4.0
"""

import math
from dataclasses import dataclass
from enum import IntEnum

import taichi as ti

from whitted.core.ray import HitRecord
from whitted.core.vector import real, vec3
from whitted.geometry.cube import Cube, hit_cube
from whitted.geometry.cylinder import Cylinder, hit_cylinder
from whitted.geometry.plane import Plane, hit_plane
from whitted.geometry.sphere import Sphere, hit_sphere


class PrimitiveKind(IntEnum):
    """Primitive variants stored in the scene."""

    SPHERE = 0
    PLANE = 1
    CUBE = 2
    CYLINDER = 3


# Plain ints for use inside kernels
KIND_SPHERE = int(PrimitiveKind.SPHERE)
KIND_PLANE = int(PrimitiveKind.PLANE)
KIND_CUBE = int(PrimitiveKind.CUBE)
KIND_CYLINDER = int(PrimitiveKind.CYLINDER)


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with a handle to the primitive.

    Attributes:
        hit: 1 if any primitive was hit, 0 on a miss.
        t: Ray parameter of the nearest intersection.
        point: The intersection point.
        normal: Unit normal oriented against the ray.
        front_face: 1 if the ray struck the outside of the surface.
        material_id: Material slot of the hit primitive (-1 on a miss).
        primitive_kind: PrimitiveKind of the hit primitive (-1 on a miss).
        primitive_index: Index of the primitive within its kind (-1 on a miss).
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32
    primitive_kind: ti.i32
    primitive_index: ti.i32


@dataclass
class SceneHit:
    """Python-side result of a nearest-hit query.

    Attributes:
        t: Ray parameter of the intersection.
        point: The intersection point.
        normal: Unit normal oriented against the ray.
        front_face: Whether the ray struck the outside of the surface.
        primitive_kind: Kind of the primitive that was hit.
        primitive_index: Index of the primitive within its kind.
        material_id: Material slot of the primitive.
    """

    t: float
    point: tuple[float, float, float]
    normal: tuple[float, float, float]
    front_face: bool
    primitive_kind: PrimitiveKind
    primitive_index: int
    material_id: int


# Maximum number of primitives of each kind
MAX_SPHERES = 256
MAX_PLANES = 256
MAX_CUBES = 256
MAX_CYLINDERS = 256

# Sphere storage
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Plane storage
plane_points = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PLANES)
plane_normals = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PLANES)
plane_material_ids = ti.field(dtype=ti.i32, shape=MAX_PLANES)
num_planes = ti.field(dtype=ti.i32, shape=())

# Cube storage
cube_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_CUBES)
cube_sizes = ti.field(dtype=ti.f64, shape=MAX_CUBES)
cube_material_ids = ti.field(dtype=ti.i32, shape=MAX_CUBES)
num_cubes = ti.field(dtype=ti.i32, shape=())

# Cylinder storage
cylinder_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_CYLINDERS)
cylinder_radii = ti.field(dtype=ti.f64, shape=MAX_CYLINDERS)
cylinder_heights = ti.field(dtype=ti.f64, shape=MAX_CYLINDERS)
cylinder_material_ids = ti.field(dtype=ti.i32, shape=MAX_CYLINDERS)
num_cylinders = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The field data is overwritten when
    new primitives are added.
    """
    num_spheres[None] = 0
    num_planes[None] = 0
    num_cubes[None] = 0
    num_cylinders[None] = 0


def _next_slot(counter, capacity: int, kind: str) -> int:
    idx = counter[None]
    if idx >= capacity:
        raise RuntimeError(f"Maximum number of {kind} ({capacity}) exceeded")
    counter[None] = idx + 1
    return idx


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = _next_slot(num_spheres, MAX_SPHERES, "spheres")
    sphere_centers[idx] = list(center)
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    return idx


def add_plane(
    point: tuple[float, float, float],
    normal: tuple[float, float, float],
    material_id: int = 0,
) -> int:
    """Add a plane to the scene. The normal is normalized here.

    Returns:
        The index of the added plane.

    Raises:
        ValueError: If the normal has zero length.
        RuntimeError: If the maximum number of planes is exceeded.
    """
    norm = math.sqrt(normal[0] * normal[0] + normal[1] * normal[1] + normal[2] * normal[2])
    if norm == 0.0:
        raise ValueError("Plane normal must be non-zero")
    idx = _next_slot(num_planes, MAX_PLANES, "planes")
    plane_points[idx] = list(point)
    plane_normals[idx] = [normal[0] / norm, normal[1] / norm, normal[2] / norm]
    plane_material_ids[idx] = material_id
    return idx


def add_cube(center: tuple[float, float, float], size: float, material_id: int = 0) -> int:
    """Add an axis-aligned cube to the scene.

    Returns:
        The index of the added cube.

    Raises:
        RuntimeError: If the maximum number of cubes is exceeded.
    """
    idx = _next_slot(num_cubes, MAX_CUBES, "cubes")
    cube_centers[idx] = list(center)
    cube_sizes[idx] = size
    cube_material_ids[idx] = material_id
    return idx


def add_cylinder(
    center: tuple[float, float, float],
    radius: float,
    height: float,
    material_id: int = 0,
) -> int:
    """Add a y-aligned capped cylinder to the scene.

    Returns:
        The index of the added cylinder.

    Raises:
        RuntimeError: If the maximum number of cylinders is exceeded.
    """
    idx = _next_slot(num_cylinders, MAX_CYLINDERS, "cylinders")
    cylinder_centers[idx] = list(center)
    cylinder_radii[idx] = radius
    cylinder_heights[idx] = height
    cylinder_material_ids[idx] = material_id
    return idx


def get_primitive_counts() -> dict[PrimitiveKind, int]:
    """Get the number of stored primitives of each kind."""
    return {
        PrimitiveKind.SPHERE: int(num_spheres[None]),
        PrimitiveKind.PLANE: int(num_planes[None]),
        PrimitiveKind.CUBE: int(num_cubes[None]),
        PrimitiveKind.CYLINDER: int(num_cylinders[None]),
    }


@ti.func
def _to_scene_hit_record(
    rec: HitRecord, material_id: ti.i32, kind: ti.i32, index: ti.i32
) -> SceneHitRecord:
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        front_face=rec.front_face,
        material_id=material_id,
        primitive_kind=kind,
        primitive_index=index,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        material_id=-1,
        primitive_kind=-1,
        primitive_index=-1,
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: real,
    t_max: real,
) -> SceneHitRecord:
    """Find the nearest intersection of a ray with every primitive.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        t_min: Exclusive lower bound on the ray parameter.
        t_max: Inclusive upper bound on the ray parameter.

    Returns:
        The nearest SceneHitRecord, or a miss record.
    """
    closest_t = t_max
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _to_scene_hit_record(
                rec, sphere_material_ids[i], KIND_SPHERE, i
            )

    for i in range(num_planes[None]):
        plane = Plane(point=plane_points[i], normal=plane_normals[i])
        rec = hit_plane(ray_origin, ray_direction, plane, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _to_scene_hit_record(rec, plane_material_ids[i], KIND_PLANE, i)

    for i in range(num_cubes[None]):
        cube = Cube(center=cube_centers[i], size=cube_sizes[i])
        rec = hit_cube(ray_origin, ray_direction, cube, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _to_scene_hit_record(rec, cube_material_ids[i], KIND_CUBE, i)

    for i in range(num_cylinders[None]):
        cylinder = Cylinder(
            center=cylinder_centers[i], radius=cylinder_radii[i], height=cylinder_heights[i]
        )
        rec = hit_cylinder(ray_origin, ray_direction, cylinder, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _to_scene_hit_record(
                rec, cylinder_material_ids[i], KIND_CYLINDER, i
            )

    return result


@ti.func
def intersect_scene_any(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: real,
    t_max: real,
) -> ti.i32:
    """Test whether a ray hits any primitive (shadow ray query).

    Stops testing once a hit has been found.

    Returns:
        1 if any primitive was hit in (t_min, t_max], 0 otherwise.
    """
    hit_any = 0

    for i in range(num_spheres[None]):
        if hit_any == 0:
            sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
            hit_any = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max).hit

    for i in range(num_planes[None]):
        if hit_any == 0:
            plane = Plane(point=plane_points[i], normal=plane_normals[i])
            hit_any = hit_plane(ray_origin, ray_direction, plane, t_min, t_max).hit

    for i in range(num_cubes[None]):
        if hit_any == 0:
            cube = Cube(center=cube_centers[i], size=cube_sizes[i])
            hit_any = hit_cube(ray_origin, ray_direction, cube, t_min, t_max).hit

    for i in range(num_cylinders[None]):
        if hit_any == 0:
            cylinder = Cylinder(
                center=cylinder_centers[i], radius=cylinder_radii[i], height=cylinder_heights[i]
            )
            hit_any = hit_cylinder(ray_origin, ray_direction, cylinder, t_min, t_max).hit

    return hit_any


# =============================================================================
# Python-callable queries
# =============================================================================

_query_hit = ti.field(dtype=ti.i32, shape=())
_query_t = ti.field(dtype=ti.f64, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f64, shape=())
_query_normal = ti.Vector.field(3, dtype=ti.f64, shape=())
_query_front_face = ti.field(dtype=ti.i32, shape=())
_query_material_id = ti.field(dtype=ti.i32, shape=())
_query_kind = ti.field(dtype=ti.i32, shape=())
_query_index = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _nearest_hit_kernel(
    ox: ti.f64, oy: ti.f64, oz: ti.f64, dx: ti.f64, dy: ti.f64, dz: ti.f64, t_min: ti.f64, t_max: ti.f64
):
    # Single-iteration outer loop keeps the primitive scans serial
    for _ in range(1):
        direction = vec3(dx, dy, dz).normalized()
        rec = intersect_scene(vec3(ox, oy, oz), direction, t_min, t_max)
        _query_hit[None] = rec.hit
        _query_t[None] = rec.t
        _query_point[None] = rec.point
        _query_normal[None] = rec.normal
        _query_front_face[None] = rec.front_face
        _query_material_id[None] = rec.material_id
        _query_kind[None] = rec.primitive_kind
        _query_index[None] = rec.primitive_index


def nearest_hit(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    t_min: float = 0.001,
    t_max: float = math.inf,
) -> SceneHit | None:
    """Find the nearest intersection of a ray with the stored primitives.

    This is a Python-callable wrapper for testing and inspection; kernels use
    intersect_scene() directly.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized here; must be non-zero).
        t_min: Exclusive lower bound on the ray parameter.
        t_max: Inclusive upper bound on the ray parameter.

    Returns:
        A SceneHit, or None if nothing was hit.

    Raises:
        ValueError: If the direction has zero length.
    """
    if direction[0] == 0.0 and direction[1] == 0.0 and direction[2] == 0.0:
        raise ValueError("Ray direction must be non-zero")

    _nearest_hit_kernel(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], t_min, t_max
    )
    if _query_hit[None] == 0:
        return None

    point = _query_point[None]
    normal = _query_normal[None]
    return SceneHit(
        t=float(_query_t[None]),
        point=(float(point[0]), float(point[1]), float(point[2])),
        normal=(float(normal[0]), float(normal[1]), float(normal[2])),
        front_face=bool(_query_front_face[None]),
        primitive_kind=PrimitiveKind(int(_query_kind[None])),
        primitive_index=int(_query_index[None]),
        material_id=int(_query_material_id[None]),
    )
