"""Pinhole camera model for primary ray generation.

The camera sits at a fixed position and looks down the negative z axis
with +y up. For an image of width W and height H, the ray through pixel
(x, y) has direction

    normalize(( (2 * (x + 0.5) / W - 1) * tan(fov / 2) * W / H,
               -(2 * (y + 0.5) / H - 1) * tan(fov / 2),
               -1 ))

so pixel rows are numbered from the top of the image and the horizontal
axis is aspect-corrected. fov is the vertical field of view in radians.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import PinholeCamera, setup_camera, get_primary_ray
    >>>
    >>> camera = PinholeCamera(position=(0.0, 0.0, 0.0), fov=math.pi / 2)
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_primary_ray(0, 0, 640, 480)  # Ray through top-left pixel
"""

import math
from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        fov: Vertical field of view in radians, in (0, pi).
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fov: float = math.pi / 2.0

    def __post_init__(self) -> None:
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"Field of view = {self.fov} must be in (0, pi) radians.")


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

# Camera origin (position)
_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# tan(fov / 2), the half-height of the image plane at unit distance
_camera_half_height = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Must be called before rendering, from Python scope.

    Args:
        camera: Camera configuration with position and field of view.
    """
    _camera_origin[None] = [camera.position[0], camera.position[1], camera.position[2]]
    _camera_half_height[None] = math.tan(camera.fov / 2.0)


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_primary_ray(pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the ray through the center of a pixel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the camera position with a normalized direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    half_height = _camera_half_height[None]

    target_x = (2.0 * (ti.cast(pixel_x, ti.f32) + 0.5) / w - 1.0) * half_height * w / h
    target_y = -(2.0 * (ti.cast(pixel_y, ti.f32) + 0.5) / h - 1.0) * half_height
    direction = tm.normalize(vec3(target_x, target_y, -1.0))

    return make_ray(_camera_origin[None], direction)


@ti.func
def get_camera_origin() -> vec3:
    """Get the camera origin (position) in world space."""
    return _camera_origin[None]


def get_camera_info() -> dict[str, float | tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with the camera origin and tan(fov / 2).
    """
    origin_vec = _camera_origin[None]
    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "half_height": float(_camera_half_height[None]),
    }
