"""Camera module for primary ray generation.

Components:
    pinhole: Perspective pinhole camera with look-at positioning

The camera state lives in Taichi fields, so this package must be imported
after Taichi has been initialized.
"""

from .pinhole import (
    PinholeCamera,
    compute_camera_basis,
    get_camera_info,
    get_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "compute_camera_basis",
    "setup_camera",
    "get_ray",
    "get_camera_info",
]
