"""Core rendering module.

Components:
    vector: Double-precision vector kernel (dot, cross, normalize, reflect, refract)
    ray: Ray and HitRecord structures
    integrator: Whitted-style recursive shading and the per-pixel kernels
    render: Parallel render entry point with row-batched progress reporting

Note: integrator and render are NOT imported here because they hold Taichi
fields through the scene modules; import them directly once Taichi has been
initialized.
"""

from .ray import HitRecord, Ray, make_hit_record, make_miss_record, make_ray, ray_at
from .vector import (
    EPSILON,
    clamp,
    cross,
    dot,
    length,
    length_squared,
    lerp,
    near_zero,
    normalize,
    real,
    reflect,
    refract,
    solve_quadratic,
    vec3,
)

__all__ = [
    "Ray",
    "HitRecord",
    "ray_at",
    "make_ray",
    "make_hit_record",
    "make_miss_record",
    "vec3",
    "real",
    "EPSILON",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "reflect",
    "refract",
    "clamp",
    "lerp",
    "near_zero",
    "solve_quadratic",
]
