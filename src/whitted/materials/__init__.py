"""Material models.

Components:
    phong: Phong material (ambient/diffuse/specular plus reflection and
        refraction weights) and its Taichi field storage

Materials are attached to primitives by value. The Python-side Material is
validated on construction; the scene copies it into the Taichi fields when it
is uploaded for rendering.
"""

from .phong import (
    MAX_MATERIALS,
    Material,
    PhongMaterial,
    add_material,
    clear_materials,
    get_material,
    get_material_count,
)

__all__ = [
    "Material",
    "PhongMaterial",
    "MAX_MATERIALS",
    "add_material",
    "clear_materials",
    "get_material",
    "get_material_count",
]
