"""Materials module for local illumination models.

Components:
    phong: Phong material with named diffuse, specular, reflection and
        refraction weights, and the device-side material registry

Every primitive references a material by ID. The evaluator looks the
material up with get_phong_material() and combines its contributions with
combine_contributions().
"""

from .phong import (
    MAX_MATERIALS,
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
    combine_contributions,
    get_material_count,
    get_phong_material,
    is_valid_material_id,
)

__all__ = [
    "PhongMaterial",
    "add_phong_material",
    "clear_phong_materials",
    "combine_contributions",
    "get_material_count",
    "get_phong_material",
    "is_valid_material_id",
    "MAX_MATERIALS",
]
