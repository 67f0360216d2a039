"""Immutable host-side scene description.

These value types describe a scene before it is uploaded to device storage
by the SceneManager. They carry no Taichi state, so a Scene can be built
before taichi is initialized and shared freely.

Example:
    >>> from whitted.scene.description import Light, Material, Scene, Sphere
    >>> matte = Material(diffuse_color=(0.8, 0.2, 0.2), diffuse_weight=1.0)
    >>> scene = Scene(
    ...     spheres=(Sphere(center=(0.0, 0.0, -5.0), radius=2.0, material=matte),),
    ...     lights=(Light(position=(10.0, 10.0, 10.0), intensity=1.0),),
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass

Vector3 = tuple[float, float, float]


@dataclass(frozen=True)
class Material:
    """Surface description with explicitly named contribution weights.

    Attributes:
        diffuse_color: Base color scaled by the diffuse lighting intensity.
        diffuse_weight: Weight of the diffuse term.
        specular_weight: Weight of the white specular highlight.
        reflection_weight: Weight of the mirror-reflected color.
        refraction_weight: Weight of the refracted color.
        specular_exponent: Phong exponent of the highlight (> 0).
        refractive_index: Index of refraction (>= 1).
    """

    diffuse_color: Vector3
    diffuse_weight: float = 0.0
    specular_weight: float = 0.0
    reflection_weight: float = 0.0
    refraction_weight: float = 0.0
    specular_exponent: float = 1.0
    refractive_index: float = 1.0

    def __post_init__(self) -> None:
        # Materials are dictionary keys in the SceneManager
        object.__setattr__(self, "diffuse_color", tuple(self.diffuse_color))

    @classmethod
    def from_albedo(
        cls,
        diffuse_color: Vector3,
        albedo: tuple[float, ...],
        specular_exponent: float,
        refractive_index: float = 1.0,
    ) -> Material:
        """Build a material from a positional albedo of 3 or 4 weights.

        A 3-channel albedo has no refraction weight, which defaults to 0.
        """
        if len(albedo) not in (3, 4):
            raise ValueError(f"Albedo must have 3 or 4 channels, got {len(albedo)}")
        weights = tuple(albedo) + (0.0,) * (4 - len(albedo))
        return cls(
            diffuse_color=diffuse_color,
            diffuse_weight=weights[0],
            specular_weight=weights[1],
            reflection_weight=weights[2],
            refraction_weight=weights[3],
            specular_exponent=specular_exponent,
            refractive_index=refractive_index,
        )


@dataclass(frozen=True)
class Sphere:
    center: Vector3
    radius: float
    material: Material


@dataclass(frozen=True)
class CheckerPlane:
    """Bounded horizontal checkerboard.

    Attributes:
        height: The y coordinate of the plane.
        extent_min: Lower (x, z) corner of the footprint, exclusive.
        extent_max: Upper (x, z) corner of the footprint, exclusive.
        even_material: Material of squares with even parity.
        odd_material: Material of squares with odd parity.
    """

    height: float
    extent_min: tuple[float, float]
    extent_max: tuple[float, float]
    even_material: Material
    odd_material: Material


@dataclass(frozen=True)
class Light:
    position: Vector3
    intensity: float


@dataclass(frozen=True)
class Scene:
    """A complete scene: primitives plus point lights.

    Sphere order does not influence the image; the nearest hit always wins.
    """

    spheres: tuple[Sphere, ...] = ()
    lights: tuple[Light, ...] = ()
    planes: tuple[CheckerPlane, ...] = ()
