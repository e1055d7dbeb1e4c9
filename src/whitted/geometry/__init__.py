"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with robust quadratic intersection
    plane: Infinite plane primitive
    cube: Axis-aligned cube using the slab method
    cylinder: Capped cylinder aligned with the y axis

All intersection routines are Taichi functions with the same contract:

    record = hit_<shape>(ray_origin, ray_direction, shape, t_min, t_max)

where the accepted parameter interval is (t_min, t_max] and record.hit tells
whether an intersection was found. Degenerate rays are reported as misses.
There is no acceleration structure; the scene scans its primitives linearly.
"""

from .cube import Cube, hit_cube
from .cylinder import Cylinder, hit_cylinder
from .plane import Plane, hit_plane
from .sphere import Sphere, hit_sphere

__all__ = [
    "Sphere",
    "hit_sphere",
    "Plane",
    "hit_plane",
    "Cube",
    "hit_cube",
    "Cylinder",
    "hit_cylinder",
]
