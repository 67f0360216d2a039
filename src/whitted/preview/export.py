"""Image export utilities for rendered frames.

The renderer produces linear color. Conversion to an image applies no
gamma: each channel is clamped to [0, 1], scaled to 0-255 and truncated to
8 bits, and a fully opaque alpha channel is appended.

Example:
    >>> from whitted.preview.export import save_png
    >>> from whitted.core.renderer import Renderer
    >>>
    >>> renderer = Renderer()
    >>> image = renderer.render()
    >>> save_png(image, "output.png")
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def to_rgba8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to opaque 8-bit RGBA.

    Args:
        image: Linear color image of shape (H, W, 3).

    Returns:
        Array of shape (H, W, 4) with dtype uint8 and alpha 255.

    Raises:
        ValueError: If the image does not have 3 channels.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")

    rgb = (np.clip(image, 0.0, 1.0) * 255).astype(np.uint8)
    alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=2)


def save_png(image: npt.NDArray[np.floating], filepath: str) -> None:
    """Save a linear float image as an RGBA PNG file.

    Args:
        image: Linear color image of shape (H, W, 3), top row first.
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(to_rgba8(image))
    pil_image.save(filepath)


def load_png(filepath: str) -> npt.NDArray[np.uint8]:
    """Load a PNG written by save_png() as an (H, W, 4) uint8 array."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGBA"))


def compute_rmse(
    image_a: npt.NDArray[np.floating[npt.NBitBase]],
    image_b: npt.NDArray[np.floating[npt.NBitBase]],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
