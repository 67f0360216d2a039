"""Ray data structure and vector utilities for the Whitted ray tracer.

This module provides the Ray dataclass and the vector functions used by the
intersection engine and the shading evaluator. All operations are Taichi
functions so they can be called from inside kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Normalized by
            every caller in this package.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def add(a: vec3, b: vec3) -> vec3:
    return a + b


@ti.func
def sub(a: vec3, b: vec3) -> vec3:
    return a - b


@ti.func
def scale(v: vec3, f: ti.f32) -> vec3:
    return v * f


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length of a vector, sqrt(dot(v, v))."""
    return ti.sqrt(tm.dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    The input must not be zero-length; every direction traced by the
    evaluator derives from normalized camera rays or from reflection and
    refraction of normalized rays about unit normals.
    """
    return v / length(v)


@ti.func
def negate(v: vec3) -> vec3:
    return -v


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The unit surface normal.

    Returns:
        incident - 2 * dot(incident, normal) * normal
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, refractive_index: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The space outside every object is treated as vacuum (index 1). When
    the ray travels from inside the object (the incident direction and the
    outward normal point the same way) the indices are swapped and the
    normal is flipped.

    On total internal reflection the fixed direction (1, 0, 0) is
    returned. It has no physical meaning and is kept so renders stay
    comparable with the reference images.

    Args:
        incident: The incoming direction (should be normalized).
        normal: The outward unit surface normal.
        refractive_index: Index of refraction of the object.

    Returns:
        The unnormalized transmitted direction.
    """
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    eta_i = 1.0
    eta_t = refractive_index
    n = normal
    if cos_i < 0.0:
        cos_i = -cos_i
        eta_i = refractive_index
        eta_t = 1.0
        n = -normal
    eta = eta_i / eta_t
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)

    # Total internal reflection fallback
    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = eta * incident + (eta * cos_i - ti.sqrt(k)) * n
    return result
