"""Axis-aligned cube primitive using the slab method.

Each axis contributes an entry/exit interval computed with the inverse ray
direction; the ray hits the box when the three intervals overlap in front of
the origin. An axis along which the ray does not move is an infinite slab if
the origin lies between its two planes and an empty one otherwise, so no
division by zero ever takes place.

The reported parameter is the entry distance, except when the entry lies at
or before t_min (the ray starts inside the box or just on its surface); the
exit distance is used instead. The face normal is taken from the axis with
the largest offset between the hit point and the cube center, ties resolved
in x, y, z order.
"""

import taichi as ti

from whitted.core.ray import HitRecord, make_hit_record, make_miss_record
from whitted.core.vector import EPSILON, real, vec3

# Stand-in for an unbounded slab interval
_SLAB_INFINITY = 1e30


@ti.dataclass
class Cube:
    """An axis-aligned cube.

    Attributes:
        center: The center of the cube.
        size: The edge length (the half-extent is size / 2).
    """

    center: vec3
    size: real


@ti.func
def _slab(origin: real, direction: real, lo: real, hi: real):
    """Entry/exit interval of a ray against one pair of axis planes.

    Returns:
        A tuple (t_near, t_far, ok); ok is 0 when a ray parallel to the
        planes lies outside them.
    """
    t_near = -_SLAB_INFINITY
    t_far = _SLAB_INFINITY
    ok = 1

    if ti.abs(direction) < EPSILON:
        if origin < lo or origin > hi:
            ok = 0
    else:
        inv_dir = 1.0 / direction
        t0 = (lo - origin) * inv_dir
        t1 = (hi - origin) * inv_dir
        t_near = ti.min(t0, t1)
        t_far = ti.max(t0, t1)

    return t_near, t_far, ok


@ti.func
def _face_normal(offset: vec3) -> vec3:
    """Outward normal of the face containing a point at offset from the center."""
    ax = ti.abs(offset.x)
    ay = ti.abs(offset.y)
    az = ti.abs(offset.z)

    normal = vec3(0.0, 0.0, ti.select(offset.z >= 0.0, 1.0, -1.0))
    if ax >= ay and ax >= az:
        normal = vec3(ti.select(offset.x >= 0.0, 1.0, -1.0), 0.0, 0.0)
    elif ay >= az:
        normal = vec3(0.0, ti.select(offset.y >= 0.0, 1.0, -1.0), 0.0)
    return normal


@ti.func
def hit_cube(
    ray_origin: vec3,
    ray_direction: vec3,
    cube: Cube,
    t_min: real,
    t_max: real,
) -> HitRecord:
    """Test for ray-cube intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        cube: The cube to test against.
        t_min: Exclusive lower bound on the ray parameter.
        t_max: Inclusive upper bound on the ray parameter.

    Returns:
        A HitRecord; check its hit field.
    """
    half_size = cube.size * 0.5
    lo = cube.center - half_size
    hi = cube.center + half_size

    near_x, far_x, ok_x = _slab(ray_origin.x, ray_direction.x, lo.x, hi.x)
    near_y, far_y, ok_y = _slab(ray_origin.y, ray_direction.y, lo.y, hi.y)
    near_z, far_z, ok_z = _slab(ray_origin.z, ray_direction.z, lo.z, hi.z)

    t_enter = ti.max(near_x, ti.max(near_y, near_z))
    t_exit = ti.min(far_x, ti.min(far_y, far_z))

    record = make_miss_record()
    if ok_x == 1 and ok_y == 1 and ok_z == 1 and t_exit >= 0.0 and t_enter <= t_exit:
        t = t_enter
        if t_enter <= t_min:
            t = t_exit

        if t > t_min and t <= t_max:
            point = ray_origin + t * ray_direction
            outward_normal = _face_normal(point - cube.center)
            record = make_hit_record(point, outward_normal, t, ray_direction)

    return record
