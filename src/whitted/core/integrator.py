"""Whitted-style recursive ray evaluator and frame driver.

This module implements the shading of a ray hit and the per-pixel render
loop. For every hit the evaluator combines:

    - direct lighting from every point light that is not shadowed
      (Lambert diffuse term plus Phong specular term),
    - a recursively traced mirror reflection ray,
    - a recursively traced refraction ray (only for materials with a
      positive refraction weight),

weighted by the material's named weights. Rays that miss every primitive,
or that are cast with no recursion depth left, return the background color.

Recursion is resolved at compile time: cast_ray() takes its depth as a
template argument and calls itself with depth - 1 until the depth reaches
zero, so each distinct maximum depth compiles its own kernel. Bias epsilon,
render distance cutoff and background color are runtime settings stored in
fields and never trigger recompilation.

Each pixel only reads the scene and writes its own framebuffer cell, so the
outermost kernel loop runs in parallel without changing the result.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.integrator import (
    ...     render_frame, reset_tracer_settings, setup_render_target
    ... )
    >>> from whitted.scene.demo import create_demo_scene
    >>> from whitted.scene.manager import SceneManager
    >>> from whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> SceneManager(scene)
    >>> setup_camera(camera)
    >>> reset_tracer_settings()
    >>> setup_render_target(1024, 768)
    >>> render_frame(max_depth=4)
"""

import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import get_primary_ray
from whitted.core.ray import length, normalize, reflect, refract
from whitted.materials.phong import (
    REFRACTION,
    combine_contributions,
    get_phong_material,
)
from whitted.scene.intersection import get_light, intersect_scene, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default recursion depth of primary rays
DEFAULT_MAX_DEPTH = 4

# Offset of secondary ray origins along the surface normal
DEFAULT_BIAS_EPSILON = 1e-3

# Hits at or beyond this distance count as misses
DEFAULT_MAX_DISTANCE = 1000.0

# Color returned by rays that escape the scene
DEFAULT_BACKGROUND_COLOR = (0.2, 0.7, 0.8)

# =============================================================================
# Tracer Settings
# =============================================================================

_background_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_bias_epsilon = ti.field(dtype=ti.f32, shape=())
_max_distance = ti.field(dtype=ti.f32, shape=())


def configure_tracer(
    background_color: tuple[float, float, float] = DEFAULT_BACKGROUND_COLOR,
    bias_epsilon: float = DEFAULT_BIAS_EPSILON,
    max_distance: float = DEFAULT_MAX_DISTANCE,
) -> None:
    """Set the runtime settings read by the evaluator.

    Args:
        background_color: Color of rays that hit nothing.
        bias_epsilon: Offset applied to secondary ray origins.
        max_distance: Render distance cutoff.

    Raises:
        ValueError: If bias_epsilon or max_distance is not positive.
    """
    if bias_epsilon <= 0.0:
        raise ValueError(f"Bias epsilon = {bias_epsilon} must be positive.")
    if max_distance <= 0.0:
        raise ValueError(f"Max distance = {max_distance} must be positive.")

    _background_color[None] = [background_color[0], background_color[1], background_color[2]]
    _bias_epsilon[None] = bias_epsilon
    _max_distance[None] = max_distance


def reset_tracer_settings() -> None:
    """Restore the default evaluator settings."""
    configure_tracer()


def get_tracer_settings() -> dict[str, float | tuple[float, float, float]]:
    """Get the current evaluator settings."""
    bg = _background_color[None]
    return {
        "background_color": (float(bg[0]), float(bg[1]), float(bg[2])),
        "bias_epsilon": float(_bias_epsilon[None]),
        "max_distance": float(_max_distance[None]),
    }


# =============================================================================
# Render Target (Framebuffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear color per pixel, indexed [x, y] with y = 0 at the top
_framebuffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of writes per pixel during the current render pass
_write_count = ti.field(dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# 1 once setup_render_target() has run
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# 1 once a render pass has filled the framebuffer
_frame_complete = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the framebuffer for an image of the given size.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the framebuffer and mark the frame as incomplete."""
    _framebuffer.fill(0.0)
    _write_count.fill(0)
    _frame_complete[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def is_frame_complete() -> bool:
    """Check whether a render pass has filled the framebuffer."""
    return bool(_frame_complete[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_depth(max_depth: int) -> None:
    if not isinstance(max_depth, int) or max_depth < 0:
        raise ValueError(f"Recursion depth = {max_depth} must be a non-negative integer.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a ray origin to avoid self-intersection.

    Pushes the point by the bias epsilon along the normal, on the side of
    the surface the new ray travels into.

    Args:
        point: The intersection point.
        normal: The outward surface normal.
        direction: The direction of the new ray.

    Returns:
        The offset origin point.
    """
    offset = normal * _bias_epsilon[None]
    if tm.dot(direction, normal) < 0.0:
        offset = -offset
    return point + offset


@ti.func
def is_occluded(point: vec3, normal: vec3, light_direction: vec3, light_distance: ti.f32) -> ti.i32:
    """Cast a shadow ray from a surface point toward a light.

    Only the intersection engine is queried; the shadow ray is never shaded.

    Returns:
        1 if a primitive lies between the point and the light, 0 otherwise.
    """
    shadow_origin = offset_ray_origin(point, normal, light_direction)
    rec = intersect_scene(shadow_origin, light_direction, _max_distance[None])
    occluded = 0
    if rec.hit == 1 and length(rec.point - shadow_origin) < light_distance:
        occluded = 1
    return occluded


@ti.func
def direct_lighting(point: vec3, normal: vec3, view_direction: vec3, specular_exponent: ti.f32):
    """Accumulate diffuse and specular intensity from all visible lights.

    Args:
        point: The surface point being shaded.
        normal: The outward surface normal.
        view_direction: Direction of the ray that hit the point.
        specular_exponent: Phong exponent of the material.

    Returns:
        A tuple (diffuse_intensity, specular_intensity).
    """
    diffuse = 0.0
    specular = 0.0
    for k in range(num_lights[None]):
        light_position, intensity = get_light(k)
        to_light = light_position - point
        light_distance = length(to_light)
        light_direction = normalize(to_light)

        if is_occluded(point, normal, light_direction, light_distance) == 0:
            diffuse += intensity * tm.max(0.0, tm.dot(light_direction, normal))
            highlight = tm.max(0.0, -tm.dot(reflect(-light_direction, normal), view_direction))
            specular += highlight**specular_exponent * intensity

    return diffuse, specular


@ti.func
def cast_ray(origin: vec3, direction: vec3, depth: ti.template()) -> vec3:
    """Compute the color seen along a ray.

    Args:
        origin: The ray origin.
        direction: The normalized ray direction.
        depth: Remaining recursion depth (compile-time constant). At zero
            the background color is returned without testing the scene.

    Returns:
        The linear color carried back along the ray.
    """
    color = _background_color[None]
    if ti.static(depth > 0):
        rec = intersect_scene(origin, direction, _max_distance[None])
        if rec.hit == 1:
            point = rec.point
            normal = rec.normal
            material = get_phong_material(rec.material_id)

            reflect_direction = normalize(reflect(direction, normal))
            reflect_origin = offset_ray_origin(point, normal, reflect_direction)
            reflect_color = cast_ray(reflect_origin, reflect_direction, depth - 1)

            refract_color = vec3(0.0, 0.0, 0.0)
            if material.weights[REFRACTION] > 0.0:
                refract_direction = normalize(
                    refract(direction, normal, material.refractive_index)
                )
                refract_origin = offset_ray_origin(point, normal, refract_direction)
                refract_color = cast_ray(refract_origin, refract_direction, depth - 1)

            diffuse, specular = direct_lighting(
                point, normal, direction, material.specular_exponent
            )
            color = combine_contributions(
                material, diffuse, specular, reflect_color, refract_color
            )
    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame_kernel(width: ti.i32, height: ti.i32, depth: ti.template()):
    """Trace one primary ray through the center of every pixel."""
    for x, y in ti.ndrange(width, height):
        ray = get_primary_ray(x, y, width, height)
        _framebuffer[x, y] = cast_ray(ray.origin, ray.direction, depth)
        _write_count[x, y] += 1


@ti.kernel
def _render_pixel_kernel(
    pixel_x: ti.i32, pixel_y: ti.i32, width: ti.i32, height: ti.i32, depth: ti.template()
) -> vec3:
    """Trace the primary ray of a single pixel without touching the framebuffer."""
    ray = get_primary_ray(pixel_x, pixel_y, width, height)
    return cast_ray(ray.origin, ray.direction, depth)


@ti.kernel
def _trace_ray_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    depth: ti.template(),
) -> vec3:
    """Trace an arbitrary ray."""
    return cast_ray(vec3(ox, oy, oz), tm.normalize(vec3(dx, dy, dz)), depth)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_frame(max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Render the whole image into the framebuffer.

    Every active framebuffer cell is written exactly once. The frame is
    marked complete only after the kernel has finished.

    Args:
        max_depth: Recursion depth of primary rays.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If max_depth is negative.
    """
    _check_render_target_initialized()
    _check_depth(max_depth)

    width, height = get_image_dimensions()
    clear_render_target()
    _render_frame_kernel(width, height, max_depth)
    _frame_complete[None] = 1


def render_pixel(
    pixel_x: int, pixel_y: int, max_depth: int = DEFAULT_MAX_DEPTH
) -> tuple[float, float, float]:
    """Render a single pixel of the current render target.

    This is a Python-callable function for testing. For production
    rendering, use render_frame() which processes all pixels in parallel.

    Args:
        pixel_x: Pixel column (0 = left).
        pixel_y: Pixel row (0 = top).
        max_depth: Recursion depth of the primary ray.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the pixel lies outside the image or max_depth is negative.
    """
    _check_render_target_initialized()
    _check_depth(max_depth)

    width, height = get_image_dimensions()
    if not (0 <= pixel_x < width and 0 <= pixel_y < height):
        raise ValueError(f"Pixel ({pixel_x}, {pixel_y}) outside {width}x{height} image")

    color = _render_pixel_kernel(pixel_x, pixel_y, width, height, max_depth)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> tuple[float, float, float]:
    """Trace a single ray through the current scene.

    Args:
        origin: Ray origin.
        direction: Ray direction; normalized before tracing.
        max_depth: Recursion depth.

    Returns:
        Tuple of (R, G, B) linear color values.
    """
    _check_depth(max_depth)
    color = _trace_ray_kernel(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2], max_depth
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def get_framebuffer_numpy():
    """Get the rendered image as a NumPy array.

    The array shape is (height, width, 3) with dtype float32, row-major
    with the origin at the top-left. Values are linear and unclamped.

    Raises:
        RuntimeError: If no render pass has completed.
    """
    import numpy as np

    _check_render_target_initialized()
    if _frame_complete[None] == 0:
        raise RuntimeError("No complete frame available. Call render_frame() first.")

    width, height = get_image_dimensions()
    image = _framebuffer.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    return np.ascontiguousarray(np.transpose(image, (1, 0, 2))).astype(np.float32)


def get_write_count_numpy():
    """Get the per-pixel write counter of the last render pass as (height, width)."""
    import numpy as np

    _check_render_target_initialized()
    width, height = get_image_dimensions()
    counts = _write_count.to_numpy()[:width, :height]
    return np.ascontiguousarray(counts.T)
