"""Taichi-based Whitted-style ray tracer.

This package renders scenes made of spheres, a checkerboard floor and point
lights with recursive ray tracing, supporting:
- Phong local illumination (diffuse + specular) with hard shadows
- Mirror reflection and dielectric refraction up to a configurable depth
- Parallel per-pixel rendering into a linear-color framebuffer

Subpackages:
    core: Vector utilities, recursive evaluator, frame driver and renderer
    geometry: Sphere and checkerboard plane primitives
    materials: Phong material registry
    scene: Scene description, storage, intersection and the demo scene
    camera: Pinhole camera ray generation
    preview: Color conversion and PNG export
"""

__version__ = "0.1.0"
