"""Ray and hit record data structures.

A Ray is an origin plus a unit direction; rays built through make_ray() are
normalized at construction so every intersection routine can rely on
|direction| == 1 (the zero vector stays zero, see normalize()).

A HitRecord describes one ray/surface intersection. Its normal always faces
the incoming ray: front_face tells whether the geometric outward normal
opposed the ray direction, and normal is the outward normal flipped when it
did not.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.core.ray import make_ray, ray_at, vec3
    >>> @ti.kernel
    ... def point() -> vec3:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
    ...     return ray_at(ray, 5.0)  # (0, 0, -5)
"""

import taichi as ti

from whitted.core.vector import normalize, real, vec3


@ti.dataclass
class Ray:
    """A half-line origin + t * direction.

    Attributes:
        origin: The starting point of the ray.
        direction: The unit direction of the ray.
    """

    origin: vec3
    direction: vec3


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 on a miss.
        t: Ray parameter of the intersection. Only valid if hit == 1.
        point: The intersection point. Only valid if hit == 1.
        normal: Unit surface normal oriented against the incoming ray.
            Only valid if hit == 1.
        front_face: 1 if the outward normal opposes the ray direction,
            0 if the ray struck the surface from inside.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def ray_at(ray: Ray, t: real) -> vec3:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray, normalizing its direction.

    Args:
        origin: The starting point of the ray.
        direction: Any direction vector; it is normalized here.

    Returns:
        A new Ray with a unit direction.
    """
    return Ray(origin=origin, direction=normalize(direction))


@ti.func
def make_hit_record(point: vec3, outward_normal: vec3, t: real, direction: vec3) -> HitRecord:
    """Build a hit record, orienting the normal against the ray.

    Args:
        point: The intersection point.
        outward_normal: The geometric normal pointing out of the surface.
        t: Ray parameter of the intersection.
        direction: Direction of the ray that produced the hit.

    Returns:
        A HitRecord with hit == 1.
    """
    front_face = 1
    normal = outward_normal
    if direction.dot(outward_normal) >= 0.0:
        front_face = 0
        normal = -outward_normal

    return HitRecord(hit=1, t=t, point=point, normal=normal, front_face=front_face)


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
    )
