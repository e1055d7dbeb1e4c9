"""Phong material model.

A material combines a base color with Phong coefficients and the two
secondary-ray weights used by the integrator:

    ambient     fraction of the base color always visible
    diffuse     Lambert term weight, scaled by max(0, N . L)
    specular    highlight weight, scaled by max(0, V . R)^shininess
    reflectivity    blend weight of the mirror-reflected ray, in [0, 1]
    transparency    blend weight of the refracted ray, in [0, 1]
    refractive_index    index of refraction, >= 1

Each primitive owns its material by value; the scene uploads one material
slot per primitive into the Taichi fields below.

Example:
    >>> from whitted.materials.phong import Material
    >>> red = Material(color=(0.8, 0.2, 0.2), ambient=0.2, diffuse=0.8, specular=0.3)
    >>> mirror = Material.reflective((0.9, 0.9, 0.9), reflectivity=0.8)
    >>> glass = Material.transparent((1.0, 1.0, 1.0), transparency=0.9, refractive_index=1.5)
"""

from dataclasses import dataclass
from typing import Any

import taichi as ti

from whitted.core.vector import real, vec3


@dataclass(frozen=True)
class Material:
    """Phong material parameters (Python side).

    Attributes:
        color: Base color as (R, G, B), non-negative components.
        ambient: Ambient coefficient.
        diffuse: Diffuse coefficient.
        specular: Specular coefficient.
        shininess: Specular exponent.
        reflectivity: Mirror reflection weight in [0, 1].
        transparency: Refraction weight in [0, 1].
        refractive_index: Index of refraction (>= 1).
    """

    color: tuple[float, float, float] = (0.5, 0.5, 0.5)
    ambient: float = 0.1
    diffuse: float = 0.7
    specular: float = 0.2
    shininess: float = 200.0
    reflectivity: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0

    def __post_init__(self) -> None:
        """Validate the material parameters.

        Raises:
            ValueError: If any parameter is out of range.
        """
        if len(self.color) != 3:
            raise ValueError(f"Color must have 3 components, got {len(self.color)}")
        for i, component in enumerate(self.color):
            if component < 0.0:
                raise ValueError(f"Color component {i} must be non-negative, got {component}")

        for name in ("ambient", "diffuse", "specular", "shininess"):
            value = getattr(self, name)
            if value < 0.0:
                raise ValueError(f"{name} must be non-negative, got {value}")

        if not 0.0 <= self.reflectivity <= 1.0:
            raise ValueError(f"Reflectivity must be in [0, 1], got {self.reflectivity}")
        if not 0.0 <= self.transparency <= 1.0:
            raise ValueError(f"Transparency must be in [0, 1], got {self.transparency}")
        if self.refractive_index < 1.0:
            raise ValueError(f"Refractive index must be >= 1, got {self.refractive_index}")

    @classmethod
    def default(cls) -> "Material":
        """Matte gray material."""
        return cls()

    @classmethod
    def reflective(cls, color: tuple[float, float, float], reflectivity: float) -> "Material":
        """Shiny material that mirrors the scene with the given weight."""
        return cls(
            color=color,
            ambient=0.1,
            diffuse=0.3,
            specular=0.6,
            shininess=200.0,
            reflectivity=reflectivity,
        )

    @classmethod
    def transparent(
        cls,
        color: tuple[float, float, float],
        transparency: float,
        refractive_index: float,
    ) -> "Material":
        """Glass-like material with a faint reflection."""
        return cls(
            color=color,
            ambient=0.1,
            diffuse=0.1,
            specular=0.8,
            shininess=200.0,
            reflectivity=0.1,
            transparency=transparency,
            refractive_index=refractive_index,
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the material to a JSON-friendly dictionary."""
        return {
            "color": list(self.color),
            "ambient": self.ambient,
            "diffuse": self.diffuse,
            "specular": self.specular,
            "shininess": self.shininess,
            "reflectivity": self.reflectivity,
            "transparency": self.transparency,
            "refractive_index": self.refractive_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Material":
        """Create a material from a dictionary; missing keys use defaults.

        Raises:
            ValueError: If any parameter is out of range.
        """
        defaults = cls()
        color = data.get("color", defaults.color)
        return cls(
            color=(float(color[0]), float(color[1]), float(color[2])),
            ambient=float(data.get("ambient", defaults.ambient)),
            diffuse=float(data.get("diffuse", defaults.diffuse)),
            specular=float(data.get("specular", defaults.specular)),
            shininess=float(data.get("shininess", defaults.shininess)),
            reflectivity=float(data.get("reflectivity", defaults.reflectivity)),
            transparency=float(data.get("transparency", defaults.transparency)),
            refractive_index=float(data.get("refractive_index", defaults.refractive_index)),
        )


@ti.dataclass
class PhongMaterial:
    """Phong material parameters (Taichi side).

    Mirrors Material field for field so kernels can read a whole material
    with one get_material() call.
    """

    color: vec3
    ambient: real
    diffuse: real
    specular: real
    shininess: real
    reflectivity: real
    transparency: real
    refractive_index: real


# =============================================================================
# Material Field Storage
# =============================================================================

# One slot per primitive
MAX_MATERIALS = 1024

material_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_ambient = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_diffuse = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_specular = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_shininess = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_reflectivity = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_transparency = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_refractive_index = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero; stale slots are overwritten when new
    materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Add a material to the registry.

    Args:
        material: The material to store.

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_colors[idx] = list(material.color)
    material_ambient[idx] = material.ambient
    material_diffuse[idx] = material.diffuse
    material_specular[idx] = material.specular
    material_shininess[idx] = material.shininess
    material_reflectivity[idx] = material.reflectivity
    material_transparency[idx] = material.transparency
    material_refractive_index[idx] = material.refractive_index
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_idx: ti.i32) -> PhongMaterial:
    """Get the material stored at an index.

    Args:
        material_idx: The index of the material in the registry.

    Returns:
        The PhongMaterial for that slot.
    """
    return PhongMaterial(
        color=material_colors[material_idx],
        ambient=material_ambient[material_idx],
        diffuse=material_diffuse[material_idx],
        specular=material_specular[material_idx],
        shininess=material_shininess[material_idx],
        reflectivity=material_reflectivity[material_idx],
        transparency=material_transparency[material_idx],
        refractive_index=material_refractive_index[material_idx],
    )
