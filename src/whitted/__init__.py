"""Whitted-style recursive ray tracer built on Taichi.

This package renders scenes of spheres, planes, cubes and capped cylinders lit
by point lights, with support for:
- Phong ambient/diffuse/specular shading with binary shadows
- Mirror reflection and dielectric refraction up to a fixed bounce depth
- Data-parallel evaluation of every pixel in a single Taichi kernel

Subpackages:
    core: Vector kernel, rays and hit records, shading integrator, render loop
    camera: Pinhole camera with look-at positioning
    geometry: Primitive intersection tests
    materials: Phong material model and GPU-side material storage
    scene: Scene container, lights, nearest-hit queries, demo scenes
    preview: Pixel grid and PPM/PNG export

Taichi must be initialized before any module holding Taichi fields is
imported. Use :func:`init_taichi` or call ``ti.init`` yourself with
``default_fp=ti.f64``.
"""

__version__ = "0.1.0"

_taichi_initialized = False


def init_taichi(arch=None, *, force: bool = False, **kwargs) -> None:
    """Initialize Taichi with the settings the renderer expects.

    Calling it again is a no-op unless force is set. Re-initializing Taichi
    invalidates every field, so modules holding fields must be re-imported
    after a forced re-initialization.

    Args:
        arch: Taichi backend. Defaults to ``ti.cpu``.
        force: Re-initialize even if this function already ran.
        **kwargs: Extra keyword arguments forwarded to ``ti.init``.
    """
    global _taichi_initialized
    if _taichi_initialized and not force:
        return

    import taichi as ti

    kwargs.setdefault("default_fp", ti.f64)
    ti.init(arch=ti.cpu if arch is None else arch, **kwargs)
    _taichi_initialized = True
