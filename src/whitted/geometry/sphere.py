"""Sphere primitive with geometric ray-sphere intersection.

This module provides the Sphere dataclass, the HitRecord shared by every
primitive kind, and the classic geometric ray-sphere test:

    L   = center - origin
    tca = dot(L, direction)
    d2  = dot(L, L) - tca^2

If d2 exceeds radius^2 the ray misses. Otherwise the two candidate
distances are tca -/+ sqrt(radius^2 - d2); the nearer one is used unless
it lies behind the ray origin, in which case the farther one is used (the
origin is inside the sphere). If both are behind the origin the ray misses.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=2.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: Distance along the (normalized) ray to the hit point.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The outward unit surface normal at the hit point. It is not
            flipped toward the ray; refraction relies on the outward
            orientation to detect rays leaving an object.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(hit=0, t=0.0, point=vec3(0.0, 0.0, 0.0), normal=vec3(0.0, 0.0, 0.0))


@ti.func
def intersect_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Geometric ray-sphere test returning only the hit flag and distance.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        sphere: The sphere to test against.

    Returns:
        A tuple (hit, t) where hit is 1 on intersection and t is the
        distance to the nearest intersection in front of the origin.
    """
    to_center = sphere.center - ray_origin
    tca = tm.dot(to_center, ray_direction)
    d2 = tm.dot(to_center, to_center) - tca * tca
    r2 = sphere.radius * sphere.radius

    did_hit = 0
    t = 0.0
    if d2 <= r2:
        thc = ti.sqrt(r2 - d2)
        t = tca - thc
        if t < 0.0:
            t = tca + thc
        if t >= 0.0:
            did_hit = 1

    return did_hit, t


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> HitRecord:
    """Test for ray-sphere intersection and fill in the hit geometry.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        sphere: The sphere to test against.

    Returns:
        A HitRecord; check the hit field to determine if intersection
        occurred. The normal is normalize(point - center).
    """
    did_hit, t = intersect_sphere(ray_origin, ray_direction, sphere)
    record = make_miss_record()
    if did_hit == 1:
        point = ray_origin + t * ray_direction
        record = HitRecord(
            hit=1,
            t=t,
            point=point,
            normal=tm.normalize(point - sphere.center),
        )
    return record


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius inside a Taichi kernel."""
    return Sphere(center=center, radius=radius)
