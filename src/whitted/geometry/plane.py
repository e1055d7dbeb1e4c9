"""Infinite plane primitive.

A plane is a point on the plane plus a unit normal. Rays whose direction is
(almost) perpendicular to the normal run parallel to the plane and are
reported as misses; otherwise the single linear equation

    t = (P - O) . N / (N . D)

gives the crossing.
"""

import taichi as ti

from whitted.core.ray import HitRecord, make_hit_record, make_miss_record
from whitted.core.vector import EPSILON, dot, real, vec3


@ti.dataclass
class Plane:
    """An infinite plane.

    Attributes:
        point: Any point on the plane.
        normal: The unit plane normal (normalized when the plane is added to
            a scene).
    """

    point: vec3
    normal: vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: real,
    t_max: real,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test against.
        t_min: Exclusive lower bound on the ray parameter.
        t_max: Inclusive upper bound on the ray parameter.

    Returns:
        A HitRecord; check its hit field.
    """
    record = make_miss_record()
    denom = dot(plane.normal, ray_direction)

    if ti.abs(denom) >= EPSILON:
        t = dot(plane.point - ray_origin, plane.normal) / denom
        if t > t_min and t <= t_max:
            point = ray_origin + t * ray_direction
            record = make_hit_record(point, plane.normal, t, ray_direction)

    return record
