"""Scene manager coordinating primitives, materials and lights.

The SceneManager uploads a scene into the Taichi fields read by the
intersection engine and the evaluator. It can load a complete immutable
Scene description in one call, or be driven piece by piece.

Materials are registered by value: adding the same Material twice returns
the same material ID, so spheres sharing a material share a registry slot.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.description import Material
    >>> from whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> matte = scene.add_material(Material((0.8, 0.3, 0.3), diffuse_weight=1.0))
    >>> scene.add_sphere(center=(0, 0, -5), radius=2.0, material_id=matte)
    >>> scene.add_light(position=(10, 10, 10), intensity=1.5)
"""

import logging
from dataclasses import dataclass

import taichi.math as tm

from whitted.materials.phong import (
    add_phong_material,
    clear_phong_materials,
    get_material_count,
    is_valid_material_id,
)
from whitted.scene.description import CheckerPlane, Light, Material, Scene
from whitted.scene.description import Sphere as SphereDescription
from whitted.scene.intersection import (
    add_checker_plane,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_plane_count,
    get_sphere_count,
)

# Type alias for 3D vectors
vec3 = tm.vec3

logger = logging.getLogger(__name__)


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class PlaneInfo:
    """Information about a checkerboard plane in the scene."""

    plane_index: int
    height: float
    extent_min: tuple[float, float]
    extent_max: tuple[float, float]
    even_material_id: int
    odd_material_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene."""

    light_index: int
    position: tuple[float, float, float]
    intensity: float


class SceneManager:
    """Scene manager coordinating primitives, materials and lights.

    Creating a SceneManager clears the device-side scene storage; only one
    scene is active at a time.

    Attributes:
        materials: Registered materials, indexed by material ID.
        spheres: SphereInfo for all spheres in the scene.
        planes: PlaneInfo for all checkerboard planes in the scene.
        lights: LightInfo for all point lights in the scene.
    """

    def __init__(self, scene: Scene | None = None) -> None:
        """Initialize an empty scene, optionally loading a description."""
        self.materials: list[Material] = []
        self.spheres: list[SphereInfo] = []
        self.planes: list[PlaneInfo] = []
        self.lights: list[LightInfo] = []
        self._material_ids: dict[Material, int] = {}
        self._clear_all()
        if scene is not None:
            self.load(scene)

    def _clear_all(self) -> None:
        clear_scene()
        clear_phong_materials()
        self.materials.clear()
        self.spheres.clear()
        self.planes.clear()
        self.lights.clear()
        self._material_ids.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives, lights and materials)."""
        self._clear_all()

    def load(self, scene: Scene) -> None:
        """Replace the current contents with a complete scene description.

        Args:
            scene: The immutable scene to upload.

        If any item is rejected the scene is left empty, never partially
        loaded.

        Raises:
            ValueError: If any primitive, material or light is invalid.
            RuntimeError: If any storage capacity is exceeded.
        """
        self._clear_all()
        try:
            for sphere in scene.spheres:
                self.add_sphere_with_material(sphere.center, sphere.radius, sphere.material)
            for plane in scene.planes:
                self.add_checker_plane(plane)
            for light in scene.lights:
                self.add_light(light.position, light.intensity)
        except (ValueError, RuntimeError):
            logger.warning("Scene upload failed, clearing partial scene")
            self._clear_all()
            raise
        logger.info(
            "Loaded scene: %d spheres, %d planes, %d lights, %d materials",
            len(self.spheres),
            len(self.planes),
            len(self.lights),
            len(self.materials),
        )

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(self, material: Material) -> int:
        """Register a material, reusing the ID of an identical one.

        Args:
            material: The material description.

        Returns:
            The material ID.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any material parameter is out of range.
        """
        existing = self._material_ids.get(material)
        if existing is not None:
            return existing

        material_id = add_phong_material(
            diffuse_color=material.diffuse_color,
            diffuse_weight=material.diffuse_weight,
            specular_weight=material.specular_weight,
            reflection_weight=material.reflection_weight,
            refraction_weight=material.refraction_weight,
            specular_exponent=material.specular_exponent,
            refractive_index=material.refractive_index,
        )
        self._material_ids[material] = material_id
        self.materials.append(material)
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_material_count()

    def get_material(self, material_id: int) -> Material | None:
        """Get a registered material by ID, or None if not found."""
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def _check_material_id(self, material_id: int) -> None:
        if not is_valid_material_id(material_id):
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere (must be positive).
            material_id: The material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If the radius or material_id is invalid.
        """
        self._check_material_id(material_id)

        center_vec = vec3(center[0], center[1], center[2])
        sphere_index = add_sphere(center_vec, radius, material_id)

        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=tuple(center),
                radius=radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_sphere_with_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Register a material and add a sphere using it in one call."""
        material_id = self.add_material(material)
        return self.add_sphere(center, radius, material_id)

    def add_checker_plane(self, plane: CheckerPlane) -> int:
        """Add a checkerboard plane, registering both of its materials.

        Args:
            plane: The plane description.

        Returns:
            The index of the added plane.

        Raises:
            RuntimeError: If the maximum number of planes is exceeded.
            ValueError: If the plane extent or materials are invalid.
        """
        even_id = self.add_material(plane.even_material)
        odd_id = self.add_material(plane.odd_material)
        plane_index = add_checker_plane(
            plane.height,
            plane.extent_min,
            plane.extent_max,
            even_id,
            odd_id,
        )
        self.planes.append(
            PlaneInfo(
                plane_index=plane_index,
                height=plane.height,
                extent_min=tuple(plane.extent_min),
                extent_max=tuple(plane.extent_max),
                even_material_id=even_id,
                odd_material_id=odd_id,
            )
        )
        return plane_index

    # =========================================================================
    # Light Management
    # =========================================================================

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light to the scene.

        Args:
            position: The light position as (x, y, z).
            intensity: The light intensity (must be >= 0).

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If the intensity is negative.
        """
        position_vec = vec3(position[0], position[1], position[2])
        light_index = add_light(position_vec, intensity)
        self.lights.append(
            LightInfo(light_index=light_index, position=tuple(position), intensity=intensity)
        )
        return light_index

    # =========================================================================
    # Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_plane_count(self) -> int:
        """Get the number of checkerboard planes in the scene."""
        return get_plane_count()

    def get_light_count(self) -> int:
        """Get the number of point lights in the scene."""
        return get_light_count()

    def to_description(self) -> Scene:
        """Rebuild an immutable Scene from the uploaded contents."""
        spheres = tuple(
            SphereDescription(
                center=info.center,
                radius=info.radius,
                material=self.materials[info.material_id],
            )
            for info in self.spheres
        )
        planes = tuple(
            CheckerPlane(
                height=info.height,
                extent_min=info.extent_min,
                extent_max=info.extent_max,
                even_material=self.materials[info.even_material_id],
                odd_material=self.materials[info.odd_material_id],
            )
            for info in self.planes
        )
        lights = tuple(Light(position=info.position, intensity=info.intensity) for info in self.lights)
        return Scene(spheres=spheres, lights=lights, planes=planes)

    def __repr__(self) -> str:
        return (
            f"SceneManager(spheres={len(self.spheres)}, planes={len(self.planes)}, "
            f"lights={len(self.lights)}, materials={len(self.materials)})"
        )

