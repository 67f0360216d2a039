"""Reference demo scene.

Four spheres of different materials above a checkerboard floor, lit by
three point lights, seen from a camera at the origin looking down -z with a
90 degree vertical field of view:

- Ivory: mostly diffuse with a soft highlight and a little reflection
- Glass: refractive (index 1.5) with a sharp highlight
- Red rubber: diffuse with a faint highlight
- Mirror: strongly reflective with a very sharp highlight

The checkerboard lies at y = -4 and spans |x| < 10, -30 < z < -10.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.demo import create_demo_scene
    >>> from whitted.scene.manager import SceneManager
    >>> from whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> manager = SceneManager(scene)
    >>> setup_camera(camera)
"""

import math

from whitted.camera.pinhole import PinholeCamera
from whitted.scene.description import CheckerPlane, Light, Material, Scene, Sphere

# =============================================================================
# Materials
# =============================================================================

IVORY = Material.from_albedo((0.4, 0.4, 0.3), (0.6, 0.3, 0.1, 0.0), specular_exponent=50.0)
GLASS = Material.from_albedo(
    (0.6, 0.7, 0.8), (0.0, 0.5, 0.1, 0.8), specular_exponent=125.0, refractive_index=1.5
)
RED_RUBBER = Material.from_albedo((0.3, 0.1, 0.1), (0.9, 0.1, 0.0, 0.0), specular_exponent=10.0)
MIRROR = Material.from_albedo((1.0, 1.0, 1.0), (0.0, 10.0, 0.8, 0.0), specular_exponent=1425.0)

# Checkerboard colors are pre-dimmed to 30%
CHECKER_DIMMING = 0.3
CHECKER_EVEN = Material(
    diffuse_color=(CHECKER_DIMMING, CHECKER_DIMMING, CHECKER_DIMMING),
    diffuse_weight=1.0,
)
CHECKER_ODD = Material(
    diffuse_color=(1.0 * CHECKER_DIMMING, 0.7 * CHECKER_DIMMING, 0.3 * CHECKER_DIMMING),
    diffuse_weight=1.0,
)

# =============================================================================
# Geometry and Lights
# =============================================================================

CHECKERBOARD = CheckerPlane(
    height=-4.0,
    extent_min=(-10.0, -30.0),
    extent_max=(10.0, -10.0),
    even_material=CHECKER_EVEN,
    odd_material=CHECKER_ODD,
)

DEMO_SPHERES = (
    Sphere(center=(-3.0, 0.0, -16.0), radius=2.0, material=IVORY),
    Sphere(center=(-1.0, -1.5, -12.0), radius=2.0, material=GLASS),
    Sphere(center=(1.5, -0.5, -18.0), radius=3.0, material=RED_RUBBER),
    Sphere(center=(7.0, 5.0, -18.0), radius=4.0, material=MIRROR),
)

DEMO_LIGHTS = (
    Light(position=(-20.0, 20.0, 20.0), intensity=1.5),
    Light(position=(30.0, 50.0, -25.0), intensity=1.8),
    Light(position=(30.0, 20.0, 30.0), intensity=1.7),
)

DEMO_FOV = math.pi / 2.0


def create_demo_scene(with_checkerboard: bool = True) -> tuple[Scene, PinholeCamera]:
    """Create the reference scene and its camera.

    Args:
        with_checkerboard: Include the checkerboard floor. Default True.

    Returns:
        A tuple of (Scene, PinholeCamera).
    """
    planes = (CHECKERBOARD,) if with_checkerboard else ()
    scene = Scene(spheres=DEMO_SPHERES, lights=DEMO_LIGHTS, planes=planes)
    camera = PinholeCamera(position=(0.0, 0.0, 0.0), fov=DEMO_FOV)
    return scene, camera
