"""Tests for RenderConfig and the Renderer facade.

Tests cover:
- Configuration defaults and validation
- Rendering the demo scene end to end
- Reconfiguration and single-pixel rendering
- Saving the rendered image
"""

import math
from dataclasses import replace

import numpy as np
import pytest


class TestRenderConfig:
    """Tests for render configuration."""

    def test_defaults(self):
        from whitted.core.renderer import RenderConfig

        config = RenderConfig()
        assert (config.width, config.height) == (1024, 768)
        assert config.fov == pytest.approx(math.pi / 2.0)
        assert config.max_depth == 4
        assert config.bias_epsilon == pytest.approx(1e-3)
        assert config.max_distance == pytest.approx(1000.0)
        assert config.background_color == (0.2, 0.7, 0.8)
        assert config.aspect_ratio == pytest.approx(4.0 / 3.0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": 5000},
            {"fov": 0.0},
            {"fov": math.pi},
            {"max_depth": -1},
            {"max_depth": 2.0},
            {"bias_epsilon": 0.0},
            {"max_distance": 0.0},
        ],
    )
    def test_invalid_config(self, kwargs):
        from whitted.core.renderer import RenderConfig

        with pytest.raises(ValueError):
            RenderConfig(**kwargs)


class TestRenderer:
    """Tests for the Renderer facade."""

    def test_render_demo_scene(self):
        from whitted.core.renderer import RenderConfig, Renderer
        from whitted.scene.demo import create_demo_scene

        scene, camera = create_demo_scene()
        renderer = Renderer(RenderConfig(width=24, height=16, max_depth=2))
        manager = renderer.set_scene(scene)
        renderer.set_camera(camera)
        image = renderer.render()

        assert manager.get_sphere_count() == 4
        assert image.shape == (16, 24, 3)
        assert image.dtype == np.float32
        assert np.all(np.isfinite(image))
        assert np.array_equal(renderer.get_image_numpy(), image)

    def test_render_pixel_matches_frame(self):
        from whitted.core.renderer import RenderConfig, Renderer
        from whitted.scene.demo import create_demo_scene

        scene, _ = create_demo_scene()
        renderer = Renderer(RenderConfig(width=12, height=8, max_depth=1))
        renderer.set_scene(scene)
        image = renderer.render()

        assert renderer.render_pixel(6, 4) == pytest.approx(tuple(image[4, 6]), abs=1e-5)

    def test_reconfigure(self):
        from whitted.core.integrator import get_image_dimensions, get_tracer_settings
        from whitted.core.renderer import RenderConfig, Renderer

        renderer = Renderer(RenderConfig(width=8, height=8))
        renderer.reconfigure(
            RenderConfig(width=10, height=6, fov=math.pi / 3.0, background_color=(0.0, 0.0, 0.0))
        )

        assert (renderer.width, renderer.height) == (10, 6)
        assert get_image_dimensions() == (10, 6)
        assert renderer.camera.fov == pytest.approx(math.pi / 3.0)
        assert get_tracer_settings()["background_color"] == (0.0, 0.0, 0.0)

    def test_empty_scene_renders_background(self):
        from whitted.core.renderer import RenderConfig, Renderer

        config = RenderConfig(width=4, height=3, max_depth=1, background_color=(0.5, 0.25, 0.0))
        image = Renderer(config).render()

        assert np.allclose(image, np.array([0.5, 0.25, 0.0], dtype=np.float32))

    def test_save_image(self, tmp_path):
        from PIL import Image as PILImage

        from whitted.core.renderer import RenderConfig, Renderer

        renderer = Renderer(RenderConfig(width=5, height=4, max_depth=1))
        renderer.render()
        output = tmp_path / "frame.png"
        renderer.save_image(str(output))

        with PILImage.open(output) as saved:
            assert saved.size == (5, 4)
            assert saved.mode == "RGBA"

    def test_rejected_scene_leaves_renderer_empty(self):
        """Test that a failed upload never renders part of the rejected scene."""
        from whitted.core.renderer import RenderConfig, Renderer
        from whitted.scene.description import Material, Scene, Sphere
        from whitted.scene.intersection import get_sphere_count

        matte = Material((0.5, 0.5, 0.5), diffuse_weight=1.0)
        renderer = Renderer(RenderConfig(width=4, height=4, max_depth=1))
        renderer.set_scene(Scene(spheres=(Sphere((0.0, 0.0, -5.0), 2.0, matte),)))
        bad = Scene(
            spheres=(
                Sphere((5.0, 0.0, -5.0), 1.0, matte),
                Sphere((0.0, 0.0, -8.0), -1.0, matte),
            )
        )

        with pytest.raises(ValueError):
            renderer.set_scene(bad)

        assert get_sphere_count() == 0
        assert renderer.scene.get_sphere_count() == 0
        assert renderer.scene.spheres == []
        image = renderer.render()
        assert np.allclose(image, np.array(renderer.config.background_color, dtype=np.float32))

    def test_set_camera_sets_config_fov(self):
        from whitted.camera.pinhole import PinholeCamera
        from whitted.core.renderer import RenderConfig, Renderer

        renderer = Renderer(RenderConfig(width=8, height=8))
        renderer.set_camera(PinholeCamera(position=(0.0, 1.0, 0.0), fov=math.pi / 4.0))

        assert renderer.config.fov == pytest.approx(math.pi / 4.0)

        # Resizing keeps the camera's field of view and position
        renderer.reconfigure(replace(renderer.config, width=6))
        assert renderer.camera.fov == pytest.approx(math.pi / 4.0)
        assert renderer.camera.position == (0.0, 1.0, 0.0)

    def test_repr(self):
        from whitted.core.renderer import RenderConfig, Renderer

        renderer = Renderer(RenderConfig(width=8, height=6, max_depth=3))
        assert repr(renderer) == "Renderer(width=8, height=6, max_depth=3)"
