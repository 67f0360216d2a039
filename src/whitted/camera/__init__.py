"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole (perspective) camera looking down -z

Ray generation maps pixel (x, y), with row 0 at the top of the image, to a
normalized world-space direction through the pixel center.
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_camera_origin,
    get_primary_ray,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_primary_ray",
    "get_camera_origin",
    "get_camera_info",
]
