"""Scene-level primitive intersection testing.

This module stores the scene's primitives and point lights in Taichi fields
and provides the brute-force nearest-hit query over every primitive kind.

Primitive kinds form a small tagged set (PrimitiveKind). Each kind has its
own Structure-of-Arrays storage and a hit_<kind>() function returning the
shared HitRecord; intersect_scene() walks every kind in turn and keeps the
nearest hit. Adding a kind means adding its storage, its hit function and
one loop here.

A hit only counts when its distance is strictly below the render distance
cutoff passed by the caller, so rays escaping the scene are classified as
background instead of chasing far-away floating-point noise.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere(ti.math.vec3(0, 0, -5), 2.0, material_id=0)
    >>> # Use intersect_scene within a Taichi kernel
"""

import math
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from whitted.geometry.plane import CheckerPlane, checker_parity, hit_checker_plane
from whitted.geometry.sphere import Sphere, hit_sphere

# Type aliases for vectors using Taichi's math module
vec2 = tm.vec2
vec3 = tm.vec3


class PrimitiveKind(IntEnum):
    """Kinds of primitive the intersection engine understands."""

    NONE = -1
    SPHERE = 0
    PLANE = 1


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: Distance to the hit point. Only valid if hit == 1.
        point: The 3D hit point. Only valid if hit == 1.
        normal: The outward unit surface normal. Only valid if hit == 1.
        material_id: Material of the hit surface. For the checkerboard this
            already reflects the parity of the hit square.
        kind: The PrimitiveKind of the hit primitive.
        index: Index of the primitive within the storage of its kind.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32
    kind: ti.i32
    index: ti.i32


# Maximum number of primitives and lights supported in the scene
MAX_SPHERES = 1024
MAX_PLANES = 16
MAX_LIGHTS = 64

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Checkerboard plane storage
plane_heights = ti.field(dtype=ti.f32, shape=MAX_PLANES)
plane_extent_min = ti.Vector.field(2, dtype=ti.f32, shape=MAX_PLANES)
plane_extent_max = ti.Vector.field(2, dtype=ti.f32, shape=MAX_PLANES)
plane_even_material_ids = ti.field(dtype=ti.i32, shape=MAX_PLANES)
plane_odd_material_ids = ti.field(dtype=ti.i32, shape=MAX_PLANES)
num_planes = ti.field(dtype=ti.i32, shape=())

# Point light storage
light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def _check_finite(name: str, values) -> None:
    for i, value in enumerate(values):
        if not math.isfinite(value):
            raise ValueError(f"{name} component {i} = {value} is not finite.")


def clear_scene() -> None:
    """Clear all primitives and lights from the scene.

    Resets the counts to zero. The field data is not cleared but will be
    overwritten when new primitives are added.
    """
    num_spheres[None] = 0
    num_planes[None] = 0
    num_lights[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If the radius is not positive or the center is not finite.
    """
    _check_finite("Sphere center", (center[0], center[1], center[2]))
    if not math.isfinite(radius) or radius <= 0.0:
        raise ValueError(f"Sphere radius = {radius} must be positive.")

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def add_checker_plane(
    height: float,
    extent_min: tuple[float, float],
    extent_max: tuple[float, float],
    even_material_id: int,
    odd_material_id: int,
) -> int:
    """Add a bounded horizontal checkerboard plane to the scene.

    Args:
        height: The y coordinate of the plane.
        extent_min: Lower (x, z) corner of the footprint.
        extent_max: Upper (x, z) corner of the footprint.
        even_material_id: Material of squares with even parity.
        odd_material_id: Material of squares with odd parity.

    Returns:
        The index of the added plane.

    Raises:
        RuntimeError: If the maximum number of planes is exceeded.
        ValueError: If the footprint is empty or not finite.
    """
    _check_finite("Plane height", (height,))
    _check_finite("Plane extent", (*extent_min, *extent_max))
    if extent_min[0] >= extent_max[0] or extent_min[1] >= extent_max[1]:
        raise ValueError(f"Plane extent {extent_min} -> {extent_max} is empty.")

    idx = num_planes[None]
    if idx >= MAX_PLANES:
        raise RuntimeError(f"Maximum number of planes ({MAX_PLANES}) exceeded")
    plane_heights[idx] = height
    plane_extent_min[idx] = vec2(extent_min[0], extent_min[1])
    plane_extent_max[idx] = vec2(extent_max[0], extent_max[1])
    plane_even_material_ids[idx] = even_material_id
    plane_odd_material_ids[idx] = odd_material_id
    num_planes[None] = idx + 1
    return idx


def add_light(position: vec3, intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: The light position.
        intensity: The light intensity (must be >= 0).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If the intensity is negative or the position not finite.
    """
    _check_finite("Light position", (position[0], position[1], position[2]))
    if not math.isfinite(intensity) or intensity < 0.0:
        raise ValueError(f"Light intensity = {intensity} must be >= 0.")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = position
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_plane_count() -> int:
    """Get the number of checkerboard planes in the scene."""
    return int(num_planes[None])


def get_light_count() -> int:
    """Get the number of point lights in the scene."""
    return int(num_lights[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
        kind=int(PrimitiveKind.NONE),
        index=-1,
    )


@ti.func
def intersect_scene(ray_origin: vec3, ray_direction: vec3, max_distance: ti.f32) -> SceneHitRecord:
    """Find the nearest primitive hit along a ray.

    Tests every sphere and every checkerboard plane and keeps the hit with
    the smallest distance strictly below max_distance.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        max_distance: Render distance cutoff; farther hits count as misses.

    Returns:
        A SceneHitRecord for the nearest hit, or a miss record.
    """
    closest_t = max_distance
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                material_id=sphere_material_ids[i],
                kind=int(PrimitiveKind.SPHERE),
                index=i,
            )

    for i in range(num_planes[None]):
        plane = CheckerPlane(
            height=plane_heights[i],
            extent_min=plane_extent_min[i],
            extent_max=plane_extent_max[i],
        )
        rec = hit_checker_plane(ray_origin, ray_direction, plane)
        if rec.hit == 1 and rec.t < closest_t:
            closest_t = rec.t
            material_id = plane_even_material_ids[i]
            if checker_parity(rec.point) == 1:
                material_id = plane_odd_material_ids[i]
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                material_id=material_id,
                kind=int(PrimitiveKind.PLANE),
                index=i,
            )

    return result


@ti.func
def get_light(index: ti.i32):
    """Get the position and intensity of a point light by index."""
    return light_positions[index], light_intensities[index]
