"""Phong material with named light-transport weights.

A material combines four contributions computed by the evaluator:

    color = diffuse_color * diffuse_intensity * diffuse_weight
          + white * specular_intensity * specular_weight
          + reflection_color * reflection_weight
          + refraction_color * refraction_weight

The weights are stored together as a vec4 on the device, in the order
(diffuse, specular, reflection, refraction). A material without a
refraction channel simply has refraction_weight == 0 and the evaluator
skips the refracted ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.materials.phong import add_phong_material
    >>> ivory = add_phong_material(
    ...     diffuse_color=(0.4, 0.4, 0.3),
    ...     diffuse_weight=0.6,
    ...     specular_weight=0.3,
    ...     reflection_weight=0.1,
    ...     specular_exponent=50.0,
    ... )
"""

import math

import taichi as ti
import taichi.math as tm

# Type aliases for vectors
vec3 = tm.vec3
vec4 = tm.vec4

# Index of each weight inside the packed weight vector
DIFFUSE = 0
SPECULAR = 1
REFLECTION = 2
REFRACTION = 3


@ti.dataclass
class PhongMaterial:
    """Phong material properties as seen by the evaluator.

    Attributes:
        diffuse_color: Base color scaled by the diffuse intensity.
        weights: (diffuse, specular, reflection, refraction) weights.
        specular_exponent: Phong exponent of the highlight (> 0).
        refractive_index: Index of refraction (>= 1); only meaningful when
            the refraction weight is positive.
    """

    diffuse_color: vec3
    weights: vec4
    specular_exponent: ti.f32
    refractive_index: ti.f32


@ti.func
def combine_contributions(
    material: PhongMaterial,
    diffuse_intensity: ti.f32,
    specular_intensity: ti.f32,
    reflection_color: vec3,
    refraction_color: vec3,
) -> vec3:
    """Weight and sum the four light-transport terms of a hit."""
    w = material.weights
    return (
        material.diffuse_color * diffuse_intensity * w[DIFFUSE]
        + vec3(1.0, 1.0, 1.0) * specular_intensity * w[SPECULAR]
        + reflection_color * w[REFLECTION]
        + refraction_color * w[REFRACTION]
    )


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

# Storage for material properties (Structure of Arrays)
material_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_weights = ti.Vector.field(4, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_phong_material(
    diffuse_color: tuple[float, float, float],
    diffuse_weight: float = 0.0,
    specular_weight: float = 0.0,
    reflection_weight: float = 0.0,
    refraction_weight: float = 0.0,
    specular_exponent: float = 1.0,
    refractive_index: float = 1.0,
) -> int:
    """Add a material to the material registry.

    Args:
        diffuse_color: Base color as (R, G, B).
        diffuse_weight: Weight of the diffuse term.
        specular_weight: Weight of the specular highlight.
        reflection_weight: Weight of the mirror-reflected color.
        refraction_weight: Weight of the refracted color.
        specular_exponent: Phong exponent, must be positive.
        refractive_index: Index of refraction, must be >= 1.

    Returns:
        The material ID of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is non-finite or out of range.
    """
    for i, component in enumerate(diffuse_color):
        if not math.isfinite(component) or component < 0.0:
            raise ValueError(f"Diffuse color component {i} = {component} must be finite and >= 0.")

    weights = (diffuse_weight, specular_weight, reflection_weight, refraction_weight)
    names = ("diffuse", "specular", "reflection", "refraction")
    for name, weight in zip(names, weights):
        if not math.isfinite(weight) or weight < 0.0:
            raise ValueError(f"The {name} weight = {weight} must be finite and >= 0.")

    if not math.isfinite(specular_exponent) or specular_exponent <= 0.0:
        raise ValueError(f"Specular exponent = {specular_exponent} must be positive.")

    if not math.isfinite(refractive_index) or refractive_index < 1.0:
        raise ValueError(
            f"Index of refraction = {refractive_index} is less than 1.0. "
            "IOR must be >= 1.0 for physically meaningful materials."
        )

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_diffuse_colors[idx] = vec3(diffuse_color[0], diffuse_color[1], diffuse_color[2])
    material_weights[idx] = vec4(*weights)
    material_specular_exponents[idx] = specular_exponent
    material_refractive_indices[idx] = refractive_index
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


def is_valid_material_id(material_id: int) -> bool:
    """Check whether a material ID refers to a registered material."""
    return 0 <= material_id < get_material_count()


@ti.func
def get_phong_material(material_id: ti.i32) -> PhongMaterial:
    """Get a material by ID.

    Args:
        material_id: The index of the material in the registry.

    Returns:
        The PhongMaterial stored at that index.
    """
    return PhongMaterial(
        diffuse_color=material_diffuse_colors[material_id],
        weights=material_weights[material_id],
        specular_exponent=material_specular_exponents[material_id],
        refractive_index=material_refractive_indices[material_id],
    )
