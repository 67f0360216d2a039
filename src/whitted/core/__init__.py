"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities (reflect, refract, ...)
    integrator: Recursive Whitted evaluator, framebuffer and render kernels
    renderer: RenderConfig and the Renderer facade

All compute-intensive operations are Taichi kernels; every pixel is traced
independently, so the frame loop runs in parallel on the selected backend.
"""

from .ray import (
    Ray,
    add,
    dot,
    length,
    make_ray,
    negate,
    normalize,
    ray_at,
    reflect,
    refract,
    scale,
    sub,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from whitted.core.integrator or whitted.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "add",
    "sub",
    "scale",
    "dot",
    "length",
    "normalize",
    "negate",
    "reflect",
    "refract",
]
