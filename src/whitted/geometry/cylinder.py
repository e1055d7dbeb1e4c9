"""Finite capped cylinder aligned with the y axis.

The lateral surface is the infinite cylinder (x - cx)^2 + (z - cz)^2 = r^2,
solved as a 2D quadratic in (x, z); its roots count only when the hit lies
within height / 2 of the center along y. The two caps are disks in the planes
y = cy +/- height / 2, accepted when the crossing point lies within the
radius. All candidates are compared and the nearest one is reported.

Rays travelling along the axis skip the lateral test (the quadratic
degenerates) and can only hit the caps; rays parallel to the caps skip the
cap test.
"""

import taichi as ti

from whitted.core.ray import HitRecord, make_hit_record, make_miss_record
from whitted.core.vector import EPSILON, real, solve_quadratic, vec3


@ti.dataclass
class Cylinder:
    """A capped cylinder whose axis is parallel to y.

    Attributes:
        center: The center of the cylinder (midway between the caps).
        radius: The radius of the cylinder.
        height: The distance between the two caps.
    """

    center: vec3
    radius: real
    height: real


@ti.func
def _keep_nearest(
    t: real,
    normal: vec3,
    t_min: real,
    best_t: real,
    best_normal: vec3,
    found: ti.i32,
):
    """Keep candidate t if it is in range and closer than the current best.

    best_t starts at t_max, which is itself a valid parameter, so the first
    candidate may equal it; later candidates must be strictly closer.
    """
    accept = 0
    if t > t_min:
        if t < best_t or (found == 0 and t <= best_t):
            accept = 1

    out_t = best_t
    out_normal = best_normal
    out_found = found
    if accept == 1:
        out_t = t
        out_normal = normal
        out_found = 1
    return out_t, out_normal, out_found


@ti.func
def hit_cylinder(
    ray_origin: vec3,
    ray_direction: vec3,
    cylinder: Cylinder,
    t_min: real,
    t_max: real,
) -> HitRecord:
    """Test for ray-cylinder intersection (lateral surface and both caps).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        cylinder: The cylinder to test against.
        t_min: Exclusive lower bound on the ray parameter.
        t_max: Inclusive upper bound on the ray parameter.

    Returns:
        A HitRecord for the nearest valid candidate; check its hit field.
    """
    oc = ray_origin - cylinder.center
    half_height = cylinder.height * 0.5
    radius_sq = cylinder.radius * cylinder.radius

    best_t = t_max
    best_normal = vec3(0.0, 0.0, 0.0)
    found = 0

    # Lateral surface
    a = ray_direction.x * ray_direction.x + ray_direction.z * ray_direction.z
    half_b = oc.x * ray_direction.x + oc.z * ray_direction.z
    c = oc.x * oc.x + oc.z * oc.z - radius_sq
    t0, t1, ok = solve_quadratic(a, half_b, c)

    if ok == 1:
        y0 = oc.y + t0 * ray_direction.y
        if ti.abs(y0) <= half_height:
            p0 = oc + t0 * ray_direction
            n0 = vec3(p0.x / cylinder.radius, 0.0, p0.z / cylinder.radius)
            best_t, best_normal, found = _keep_nearest(t0, n0, t_min, best_t, best_normal, found)

        y1 = oc.y + t1 * ray_direction.y
        if ti.abs(y1) <= half_height:
            p1 = oc + t1 * ray_direction
            n1 = vec3(p1.x / cylinder.radius, 0.0, p1.z / cylinder.radius)
            best_t, best_normal, found = _keep_nearest(t1, n1, t_min, best_t, best_normal, found)

    # Caps
    if ti.abs(ray_direction.y) > EPSILON:
        t_bottom = (-half_height - oc.y) / ray_direction.y
        pb = oc + t_bottom * ray_direction
        if pb.x * pb.x + pb.z * pb.z <= radius_sq:
            best_t, best_normal, found = _keep_nearest(
                t_bottom, vec3(0.0, -1.0, 0.0), t_min, best_t, best_normal, found
            )

        t_top = (half_height - oc.y) / ray_direction.y
        pt = oc + t_top * ray_direction
        if pt.x * pt.x + pt.z * pt.z <= radius_sq:
            best_t, best_normal, found = _keep_nearest(
                t_top, vec3(0.0, 1.0, 0.0), t_min, best_t, best_normal, found
            )

    record = make_miss_record()
    if found == 1:
        point = ray_origin + best_t * ray_direction
        record = make_hit_record(point, best_normal, best_t, ray_direction)

    return record
