"""Point lights and the scene background.

Lights are isotropic point sources with a color and an intensity. Their
contribution falls off with a fixed curve rather than the inverse-square law:

    attenuation(d) = 1 / (1 + 0.1 * d + 0.01 * d^2)

The background color is what rays that escape the scene return.
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti

from whitted.core.vector import real, vec3

# Attenuation curve coefficients
ATTENUATION_CONSTANT = 1.0
ATTENUATION_LINEAR = 0.1
ATTENUATION_QUADRATIC = 0.01

DEFAULT_BACKGROUND_COLOR = (0.7, 0.8, 1.0)  # Light sky blue


@dataclass(frozen=True)
class Light:
    """A point light.

    Attributes:
        position: Light position in world space.
        color: Light color as (R, G, B).
        intensity: Scalar multiplier applied to diffuse and specular terms.
    """

    position: tuple[float, float, float]
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    intensity: float = 1.0

    def __post_init__(self) -> None:
        if self.intensity < 0.0:
            raise ValueError(f"Light intensity must be non-negative, got {self.intensity}")
        for i, component in enumerate(self.color):
            if component < 0.0:
                raise ValueError(f"Light color component {i} = {component} is negative")

    def attenuation(self, distance: float) -> float:
        """Distance falloff for this light (same curve as light_attenuation)."""
        return 1.0 / (
            ATTENUATION_CONSTANT
            + ATTENUATION_LINEAR * distance
            + ATTENUATION_QUADRATIC * distance * distance
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": list(self.position),
            "color": list(self.color),
            "intensity": self.intensity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Light":
        position = data["position"]
        color = data.get("color", (1.0, 1.0, 1.0))
        return cls(
            position=(float(position[0]), float(position[1]), float(position[2])),
            color=(float(color[0]), float(color[1]), float(color[2])),
            intensity=float(data.get("intensity", 1.0)),
        )


# =============================================================================
# Light Field Storage
# =============================================================================

MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

_background_color = ti.Vector.field(3, dtype=ti.f64, shape=())


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def add_light(light: Light) -> int:
    """Add a point light.

    Args:
        light: The light to store.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = list(light.position)
    light_colors[idx] = list(light.color)
    light_intensities[idx] = light.intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights."""
    return int(num_lights[None])


def set_background_color(color: tuple[float, float, float]) -> None:
    """Set the color returned by rays that hit nothing."""
    _background_color[None] = [color[0], color[1], color[2]]


@ti.func
def get_background_color() -> vec3:
    """Get the background color."""
    return _background_color[None]


@ti.func
def light_attenuation(distance: real) -> real:
    """Distance falloff 1 / (1 + 0.1 d + 0.01 d^2)."""
    return 1.0 / (
        ATTENUATION_CONSTANT
        + ATTENUATION_LINEAR * distance
        + ATTENUATION_QUADRATIC * distance * distance
    )
