"""Preview module for rendered output.

Components:
    export: Linear color to 8-bit RGBA conversion and PNG export (Pillow)

Example:
    >>> from whitted.preview import save_png
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> save_png(renderer.render(), "output.png")
"""

from whitted.preview.export import (
    compute_rmse,
    load_png,
    save_png,
    to_rgba8,
)

__all__ = [
    "to_rgba8",
    "save_png",
    "load_png",
    "compute_rmse",
]
