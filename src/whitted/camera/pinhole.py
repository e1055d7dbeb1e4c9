"""Pinhole camera model for perspective projection ray generation.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at back toward position (the camera looks down -w)
- u: up x w, points right in the image plane
- v: w x u, points up in the image plane

The viewport sits at unit distance in front of the camera with height
2 * tan(vfov / 2) and width height * aspect_ratio. The basis and viewport are
computed once on the Python side (NumPy, float64) and uploaded into Taichi
fields that get_ray() reads for every pixel.

Degenerate configurations (position == look_at, up parallel to the view
direction, non-positive field of view or aspect ratio) are precondition
violations and raise ValueError instead of yielding NaN rays.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera
    >>> camera = PinholeCamera(
    ...     position=(0.0, 0.0, 0.0),
    ...     look_at=(0.0, 0.0, -1.0),
    ...     up=(0.0, 1.0, 0.0),
    ...     vfov=45.0,
    ...     aspect_ratio=4.0 / 3.0,
    ... )
    >>> setup_camera(camera)
"""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
import taichi as ti

from whitted.core.ray import Ray, make_ray
from whitted.core.vector import real

# Minimum |up x w| before the basis is considered degenerate
_DEGENERATE_BASIS_EPSILON = 1e-12


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at in world space.
        up: Up hint for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the viewport.
    """

    position: tuple[float, float, float]
    look_at: tuple[float, float, float]
    up: tuple[float, float, float]
    vfov: float
    aspect_ratio: float

    def to_dict(self) -> dict[str, Any]:
        """Export the camera to a JSON-friendly dictionary."""
        return {
            "position": list(self.position),
            "look_at": list(self.look_at),
            "up": list(self.up),
            "vfov": self.vfov,
            "aspect_ratio": self.aspect_ratio,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PinholeCamera":
        """Create a camera from a dictionary produced by to_dict()."""
        return cls(
            position=_as_triple(data.get("position", (0.0, 0.0, 0.0))),
            look_at=_as_triple(data.get("look_at", (0.0, 0.0, -1.0))),
            up=_as_triple(data.get("up", (0.0, 1.0, 0.0))),
            vfov=float(data.get("vfov", 45.0)),
            aspect_ratio=float(data.get("aspect_ratio", 1.0)),
        )


def _as_triple(values: Any) -> tuple[float, float, float]:
    return (float(values[0]), float(values[1]), float(values[2]))


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f64, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f64, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f64, shape=())  # Backward

# Viewport vectors for ray computation
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f64, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f64, shape=())


# =============================================================================
# Camera Setup (Python-side)
# =============================================================================


def compute_camera_basis(camera: PinholeCamera) -> dict[str, np.ndarray]:
    """Compute the camera basis and viewport geometry.

    Args:
        camera: Camera configuration.

    Returns:
        Dictionary of float64 arrays: origin, u, v, w, horizontal, vertical,
        lower_left.

    Raises:
        ValueError: If the configuration is degenerate.
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Vertical field of view must be in (0, 180) degrees, got {camera.vfov}")
    if camera.aspect_ratio <= 0.0:
        raise ValueError(f"Aspect ratio must be positive, got {camera.aspect_ratio}")

    position = np.array(camera.position, dtype=np.float64)
    look_at = np.array(camera.look_at, dtype=np.float64)
    up = np.array(camera.up, dtype=np.float64)

    w = position - look_at
    w_len = np.linalg.norm(w)
    if w_len == 0.0:
        raise ValueError("Camera position and look_at point must differ")
    w = w / w_len

    u = np.cross(up, w)
    u_len = np.linalg.norm(u)
    if u_len < _DEGENERATE_BASIS_EPSILON:
        raise ValueError(
            f"Camera up vector {tuple(camera.up)} is parallel to the view direction"
        )
    u = u / u_len
    v = np.cross(w, u)

    viewport_height = 2.0 * math.tan(math.radians(camera.vfov) / 2.0)
    viewport_width = viewport_height * camera.aspect_ratio

    horizontal = viewport_width * u
    vertical = viewport_height * v
    lower_left = position - horizontal / 2.0 - vertical / 2.0 - w

    return {
        "origin": position,
        "u": u,
        "v": v,
        "w": w,
        "horizontal": horizontal,
        "vertical": vertical,
        "lower_left": lower_left,
    }


def setup_camera(camera: PinholeCamera) -> None:
    """Upload the camera basis and viewport into Taichi fields.

    Must be called from Python scope before any kernel calls get_ray().

    Args:
        camera: Camera configuration.

    Raises:
        ValueError: If the configuration is degenerate.
    """
    basis = compute_camera_basis(camera)

    _camera_origin[None] = basis["origin"].tolist()
    _camera_u[None] = basis["u"].tolist()
    _camera_v[None] = basis["v"].tolist()
    _camera_w[None] = basis["w"].tolist()
    _viewport_horizontal[None] = basis["horizontal"].tolist()
    _viewport_vertical[None] = basis["vertical"].tolist()
    _lower_left_corner[None] = basis["lower_left"].tolist()


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(s: real, t: real) -> Ray:
    """Generate a ray through normalized viewport coordinates (s, t).

    - s = 0: left edge, s = 1: right edge
    - t = 0: bottom edge, t = 1: top edge

    Args:
        s: Horizontal coordinate in [0, 1].
        t: Vertical coordinate in [0, 1].

    Returns:
        A Ray from the camera position with a unit direction toward the
        corresponding point on the viewport.
    """
    target = _lower_left_corner[None] + s * _viewport_horizontal[None] + t * _viewport_vertical[None]
    origin = _camera_origin[None]
    return make_ray(origin, target - origin)


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Read the uploaded camera state back for inspection.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left.
    """
    fields = {
        "origin": _camera_origin,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
        "horizontal": _viewport_horizontal,
        "vertical": _viewport_vertical,
        "lower_left": _lower_left_corner,
    }
    info = {}
    for name, field in fields.items():
        value = field[None]
        info[name] = (float(value[0]), float(value[1]), float(value[2]))
    return info
