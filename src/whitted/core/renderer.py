"""Renderer facade tying configuration, scene, camera and frame driver together.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.renderer import RenderConfig, Renderer
    >>> from whitted.scene.demo import create_demo_scene
    >>>
    >>> scene, camera = create_demo_scene()
    >>> renderer = Renderer(RenderConfig(width=320, height=240))
    >>> renderer.set_scene(scene)
    >>> image = renderer.render()  # (240, 320, 3) float32, linear color
"""

import logging
import math
import time
from dataclasses import dataclass, replace

import numpy as np
import numpy.typing as npt

from whitted.camera.pinhole import PinholeCamera, setup_camera
from whitted.core.integrator import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BIAS_EPSILON,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_DISTANCE,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    configure_tracer,
    get_framebuffer_numpy,
    render_frame,
    render_pixel,
    setup_render_target,
)
from whitted.scene.description import Scene
from whitted.scene.manager import SceneManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderConfig:
    """Settings of a render pass.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in radians.
        max_depth: Recursion depth of primary rays.
        bias_epsilon: Offset of secondary ray origins off the surface.
        max_distance: Render distance cutoff; farther hits are background.
        background_color: Color of rays that escape the scene.
    """

    width: int = 1024
    height: int = 768
    fov: float = math.pi / 2.0
    max_depth: int = DEFAULT_MAX_DEPTH
    bias_epsilon: float = DEFAULT_BIAS_EPSILON
    max_distance: float = DEFAULT_MAX_DISTANCE
    background_color: tuple[float, float, float] = DEFAULT_BACKGROUND_COLOR

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions ({self.width}x{self.height}) must be positive")
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if not 0.0 < self.fov < math.pi:
            raise ValueError(f"Field of view = {self.fov} must be in (0, pi) radians.")
        if not isinstance(self.max_depth, int) or self.max_depth < 0:
            raise ValueError(
                f"Recursion depth = {self.max_depth} must be a non-negative integer."
            )
        if self.bias_epsilon <= 0.0:
            raise ValueError(f"Bias epsilon = {self.bias_epsilon} must be positive.")
        if self.max_distance <= 0.0:
            raise ValueError(f"Max distance = {self.max_distance} must be positive.")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class Renderer:
    """Render a scene into a linear-color framebuffer.

    The renderer owns the global render target; the scene and camera are
    uploaded with set_scene() and set_camera(). A render pass either runs to
    completion or raises, the framebuffer is never handed out half filled.

    Attributes:
        config: The render settings.
        scene: The SceneManager of the uploaded scene, if any.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()
        self.scene: SceneManager | None = None
        self._camera = PinholeCamera(fov=self.config.fov)
        self._apply_config()

    def _apply_config(self) -> None:
        config = self.config
        configure_tracer(
            background_color=config.background_color,
            bias_epsilon=config.bias_epsilon,
            max_distance=config.max_distance,
        )
        setup_render_target(config.width, config.height)
        setup_camera(self._camera)
        logger.debug("Render configuration: %s", config)

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def camera(self) -> PinholeCamera:
        return self._camera

    def set_scene(self, scene: Scene) -> SceneManager:
        """Upload a scene description, replacing any previous scene.

        On a rejected scene the renderer is left holding an empty scene.
        """
        self.scene = SceneManager()
        self.scene.load(scene)
        return self.scene

    def set_camera(self, camera: PinholeCamera) -> None:
        """Replace the camera; its field of view becomes the configured one."""
        self._camera = camera
        self.config = replace(self.config, fov=camera.fov)
        setup_camera(camera)

    def reconfigure(self, config: RenderConfig) -> None:
        """Apply new render settings, keeping the scene and camera position.

        The field of view of the new config replaces the camera's.
        """
        self.config = config
        self._camera = PinholeCamera(position=self._camera.position, fov=config.fov)
        self._apply_config()

    def render(self) -> npt.NDArray[np.float32]:
        """Render one frame.

        Returns:
            Linear color image of shape (height, width, 3), top row first.
        """
        config = self.config
        logger.info(
            "Rendering %dx%d at depth %d", config.width, config.height, config.max_depth
        )
        start_time = time.perf_counter()
        render_frame(config.max_depth)
        image = get_framebuffer_numpy()
        logger.info("Rendering done in %.2fs", time.perf_counter() - start_time)
        return image

    def render_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Render a single pixel without touching the framebuffer."""
        return render_pixel(x, y, self.config.max_depth)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the last complete frame as (height, width, 3) float32."""
        return get_framebuffer_numpy()

    def save_image(self, filepath: str) -> None:
        """Save the last complete frame as a PNG file."""
        from whitted.preview.export import save_png

        save_png(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"max_depth={self.config.max_depth})"
        )
