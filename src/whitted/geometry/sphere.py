"""Sphere primitive with robust ray-sphere intersection.

The intersection solves |O + tD - C|^2 = r^2, which expands to the quadratic

    a*t^2 + 2*half_b*t + c = 0

with a = D.D, half_b = D.(O - C) and c = |O - C|^2 - r^2. Roots come from
solve_quadratic(), which uses the cancellation-free formulation so grazing
rays stay stable. The nearer root in (t_min, t_max] wins; the farther root is
used when the ray starts inside the sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.geometry.sphere import Sphere, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from whitted.core.ray import HitRecord, make_hit_record, make_miss_record
from whitted.core.vector import dot, length_squared, real, solve_quadratic, vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: vec3
    radius: real


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: real,
    t_max: real,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test against.
        t_min: Exclusive lower bound on the ray parameter.
        t_max: Inclusive upper bound on the ray parameter.

    Returns:
        A HitRecord; check its hit field. A zero-length direction is a miss.
    """
    oc = ray_origin - sphere.center
    a = length_squared(ray_direction)
    half_b = dot(oc, ray_direction)
    c = length_squared(oc) - sphere.radius * sphere.radius

    record = make_miss_record()
    t0, t1, ok = solve_quadratic(a, half_b, c)

    if ok == 1:
        t = t0
        valid = t > t_min and t <= t_max
        if not valid:
            t = t1
            valid = t > t_min and t <= t_max

        if valid:
            point = ray_origin + t * ray_direction
            outward_normal = (point - sphere.center) / sphere.radius
            record = make_hit_record(point, outward_normal, t, ray_direction)

    return record
