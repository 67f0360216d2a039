"""Geometry module for shape primitives.

This module provides the two primitive kinds the tracer understands:

Components:
    sphere: Sphere primitive with geometric ray-sphere intersection
    plane: Bounded horizontal checkerboard plane

All intersection routines are Taichi functions (@ti.func) returning the
shared HitRecord, so the scene-level query can treat every primitive kind
the same way:
    record = hit_<kind>(ray_origin, ray_direction, primitive)
"""

from .plane import (
    CheckerPlane,
    checker_parity,
    hit_checker_plane,
    make_checker_plane,
)
from .sphere import HitRecord, Sphere, hit_sphere, intersect_sphere, make_miss_record, make_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "intersect_sphere",
    "make_sphere",
    "make_miss_record",
    "CheckerPlane",
    "hit_checker_plane",
    "make_checker_plane",
    "checker_parity",
]
