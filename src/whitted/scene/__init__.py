"""Scene module for scene description, storage and ray-scene queries.

Components:
    description: Immutable host-side value types (Material, Sphere,
        CheckerPlane, Light, Scene)
    intersection: Device-side primitive and light storage, nearest-hit query
    manager: SceneManager uploading descriptions into device storage
    demo: The reference four-sphere scene over a checkerboard

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout per primitive kind
    - Material IDs resolved per hit, including checkerboard parity
"""

from .description import CheckerPlane, Light, Material, Scene, Sphere
from .intersection import (
    MAX_LIGHTS,
    MAX_PLANES,
    MAX_SPHERES,
    PrimitiveKind,
    SceneHitRecord,
    add_checker_plane,
    add_light,
    add_sphere,
    clear_scene,
    get_light_count,
    get_plane_count,
    get_sphere_count,
    intersect_scene,
)
from .manager import LightInfo, PlaneInfo, SceneManager, SphereInfo

# Imported last: the demo scene depends on the camera package
from .demo import create_demo_scene  # noqa: E402

__all__ = [
    # Description module
    "Material",
    "Sphere",
    "CheckerPlane",
    "Light",
    "Scene",
    # Intersection module
    "PrimitiveKind",
    "SceneHitRecord",
    "add_sphere",
    "add_checker_plane",
    "add_light",
    "clear_scene",
    "get_sphere_count",
    "get_plane_count",
    "get_light_count",
    "intersect_scene",
    "MAX_SPHERES",
    "MAX_PLANES",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "PlaneInfo",
    "LightInfo",
    # Demo scene
    "create_demo_scene",
]
