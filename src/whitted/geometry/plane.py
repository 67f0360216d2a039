"""Horizontal checkerboard plane primitive.

The plane is the set of points with y == height, limited to a rectangular
footprint in x and z. Its material is procedural: each hit picks one of two
materials from the parity of

    floor(0.5 * x + 1000) + floor(0.5 * z)

The +1000 offset keeps the first floor argument positive for every
footprint used in practice so the squares line up across x == 0.

Rays nearly parallel to the plane (|direction.y| <= 1e-3) are excluded from
the test instead of dividing by a near-zero value.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.geometry.plane import CheckerPlane, hit_checker_plane
    >>> plane = CheckerPlane(
    ...     height=-4.0,
    ...     extent_min=ti.math.vec2(-10.0, -30.0),
    ...     extent_max=ti.math.vec2(10.0, -10.0),
    ... )
    >>> # Use hit_checker_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord, make_miss_record

# Type aliases for vectors using Taichi's math module
vec2 = tm.vec2
vec3 = tm.vec3

# Smallest |direction.y| for which the plane is tested
PARALLEL_EPSILON = 1e-3

# Offset that keeps the x term of the checker parity positive
CHECKER_OFFSET = 1000.0

# Size multiplier of the checker pattern (squares are 2 units wide)
CHECKER_FREQUENCY = 0.5


@ti.dataclass
class CheckerPlane:
    """A bounded horizontal plane.

    Attributes:
        height: The y coordinate of the plane.
        extent_min: Lower (x, z) corner of the footprint, exclusive.
        extent_max: Upper (x, z) corner of the footprint, exclusive.
    """

    height: ti.f32
    extent_min: vec2
    extent_max: vec2


@ti.func
def hit_checker_plane(ray_origin: vec3, ray_direction: vec3, plane: CheckerPlane) -> HitRecord:
    """Test for ray-plane intersection within the plane footprint.

    Solves origin.y + t * direction.y == height for t and accepts the hit
    only in front of the origin and strictly inside the footprint.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The normalized direction of the ray.
        plane: The plane to test against.

    Returns:
        A HitRecord whose normal is always +y.
    """
    record = make_miss_record()
    if ti.abs(ray_direction.y) > PARALLEL_EPSILON:
        t = (plane.height - ray_origin.y) / ray_direction.y
        point = ray_origin + t * ray_direction
        inside = (
            point.x > plane.extent_min.x
            and point.x < plane.extent_max.x
            and point.z > plane.extent_min.y
            and point.z < plane.extent_max.y
        )
        if t > 0.0 and inside:
            record = HitRecord(hit=1, t=t, point=point, normal=vec3(0.0, 1.0, 0.0))
    return record


@ti.func
def checker_parity(point: vec3) -> ti.i32:
    """Return 1 for points on an odd checker square, 0 otherwise."""
    ix = ti.cast(ti.floor(CHECKER_FREQUENCY * point.x + CHECKER_OFFSET), ti.i32)
    iz = ti.cast(ti.floor(CHECKER_FREQUENCY * point.z), ti.i32)
    return (ix + iz) & 1


@ti.func
def make_checker_plane(height: ti.f32, extent_min: vec2, extent_max: vec2) -> CheckerPlane:
    """Create a checker plane inside a Taichi kernel."""
    return CheckerPlane(height=height, extent_min=extent_min, extent_max=extent_max)
