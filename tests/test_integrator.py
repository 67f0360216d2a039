"""Tests for the Whitted ray evaluator and frame driver.

This module tests the core ray tracing functionality including:
- Render target setup and validation
- Background color for misses and exhausted recursion depth
- Diffuse shading against a hand-computed value
- Shadow rays (only occluders closer than the light count)
- Refraction through a sphere of index 1
- Framebuffer write-once contract and frame completion
- Pixel-order independence of the result

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run, so module-level
imports of modules containing ti.field() declarations would fail.
"""

import math
import random

import numpy as np
import pytest

BACKGROUND = (0.2, 0.7, 0.8)


def _matte_sphere_scene(light_position, occluder=None):
    """Red matte sphere at (0, 0, -5) with one light and an optional occluder."""
    from whitted.scene.description import Light, Material, Scene, Sphere
    from whitted.scene.manager import SceneManager

    matte = Material((1.0, 0.0, 0.0), diffuse_weight=1.0)
    spheres = [Sphere((0.0, 0.0, -5.0), 2.0, matte)]
    if occluder is not None:
        spheres.append(Sphere(occluder, 1.0, matte))
    scene = Scene(spheres=tuple(spheres), lights=(Light(light_position, 1.0),))
    return SceneManager(scene)


class TestRenderTargetSetup:
    """Test render target initialization and management."""

    def test_setup_render_target(self):
        from whitted.core.integrator import (
            get_image_dimensions,
            is_frame_complete,
            setup_render_target,
        )

        setup_render_target(64, 48)

        assert get_image_dimensions() == (64, 48)
        assert not is_frame_complete()

    @pytest.mark.parametrize("size", [(0, 10), (10, -1), (4096, 10), (10, 4096)])
    def test_invalid_dimensions(self, size):
        from whitted.core.integrator import setup_render_target

        with pytest.raises(ValueError, match="Image dimensions"):
            setup_render_target(*size)

    def test_framebuffer_unavailable_before_render(self):
        from whitted.core.integrator import get_framebuffer_numpy, setup_render_target

        setup_render_target(8, 8)
        with pytest.raises(RuntimeError, match="No complete frame"):
            get_framebuffer_numpy()

    def test_negative_depth_rejected(self):
        from whitted.core.integrator import render_frame, setup_render_target

        setup_render_target(4, 4)
        with pytest.raises(ValueError, match="Recursion depth"):
            render_frame(max_depth=-1)


class TestTracerSettings:
    """Test the runtime evaluator settings."""

    def test_defaults(self):
        from whitted.core.integrator import get_tracer_settings

        settings = get_tracer_settings()
        assert settings["background_color"] == pytest.approx(BACKGROUND)
        assert settings["bias_epsilon"] == pytest.approx(1e-3)
        assert settings["max_distance"] == pytest.approx(1000.0)

    @pytest.mark.parametrize(
        "kwargs", [{"bias_epsilon": 0.0}, {"max_distance": -5.0}]
    )
    def test_invalid_settings(self, kwargs):
        from whitted.core.integrator import configure_tracer

        with pytest.raises(ValueError):
            configure_tracer(**kwargs)

    def test_max_distance_cutoff(self):
        """Test that a sphere beyond the configured distance is background."""
        from whitted.core.integrator import configure_tracer, trace_ray

        _matte_sphere_scene((10.0, 10.0, 10.0))

        configure_tracer(max_distance=2.0)
        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=1)
        assert color == pytest.approx(BACKGROUND, abs=1e-6)


class TestCastRay:
    """Test the recursive evaluator through trace_ray()."""

    def test_miss_returns_background(self):
        from whitted.core.integrator import trace_ray

        _matte_sphere_scene((10.0, 10.0, 10.0))
        color = trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), max_depth=2)

        assert color == pytest.approx(BACKGROUND, abs=1e-6)

    def test_depth_zero_returns_background(self):
        """Test that no intersection is attempted without recursion depth."""
        from whitted.core.integrator import trace_ray

        _matte_sphere_scene((10.0, 10.0, 10.0))
        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=0)

        assert color == pytest.approx(BACKGROUND, abs=1e-6)

    def test_custom_background(self):
        from whitted.core.integrator import configure_tracer, trace_ray

        configure_tracer(background_color=(0.0, 0.0, 0.0))
        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=1) == pytest.approx(
            (0.0, 0.0, 0.0)
        )

    def test_lambert_diffuse(self):
        """Test the diffuse term against a hand-computed value."""
        from whitted.core.integrator import trace_ray

        _matte_sphere_scene((10.0, 10.0, 10.0))
        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=1)

        # Hit (0, 0, -3) with normal +z; light direction (10, 10, 13) / |.|
        expected = 13.0 / math.sqrt(10.0**2 + 10.0**2 + 13.0**2)
        assert color[0] == pytest.approx(expected, abs=1e-4)
        assert color[1] == pytest.approx(0.0, abs=1e-6)
        assert color[2] == pytest.approx(0.0, abs=1e-6)

    def test_occluder_casts_shadow(self):
        """Test that a primitive between the point and the light blocks it."""
        from whitted.core.integrator import trace_ray

        # Ray starts between the two spheres; occluder spans z in [2, 4]
        _matte_sphere_scene((0.0, 0.0, 10.0), occluder=(0.0, 0.0, 3.0))
        color = trace_ray((0.0, 0.0, -1.0), (0.0, 0.0, -1.0), max_depth=1)

        assert color == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)

    def test_occluder_behind_light_ignored(self):
        """Test that a primitive farther than the light does not shadow."""
        from whitted.core.integrator import trace_ray

        _matte_sphere_scene((0.0, 0.0, 0.5), occluder=(0.0, 0.0, 3.0))
        color = trace_ray((0.0, 0.0, -1.0), (0.0, 0.0, -1.0), max_depth=1)

        assert color[0] == pytest.approx(1.0, abs=1e-4)

    def test_shadow_leaves_other_lights_unaffected(self):
        """Test that only the blocked light loses its contribution."""
        from whitted.core.integrator import trace_ray
        from whitted.scene.description import Light, Material, Scene, Sphere
        from whitted.scene.manager import SceneManager

        matte = Material((1.0, 0.0, 0.0), diffuse_weight=1.0)
        spheres = (
            Sphere((0.0, 0.0, -5.0), 2.0, matte),
            Sphere((0.0, 0.0, 3.0), 1.0, matte),
        )
        blocked = Light((0.0, 0.0, 10.0), 1.0)
        visible = Light((5.0, 0.0, -1.0), 1.0)
        SceneManager(Scene(spheres=spheres, lights=(blocked, visible)))

        color = trace_ray((0.0, 0.0, -1.0), (0.0, 0.0, -1.0), max_depth=1)

        # Only the visible light at direction (5, 0, 2) / |.| contributes
        assert color[0] == pytest.approx(2.0 / math.sqrt(29.0), abs=1e-4)

    def test_index_one_refraction_is_transparent(self):
        """Test that a fully refractive sphere of index 1 shows the background."""
        from whitted.core.integrator import trace_ray
        from whitted.scene.description import Material, Scene, Sphere
        from whitted.scene.manager import SceneManager

        clear = Material((0.0, 0.0, 0.0), refraction_weight=1.0, refractive_index=1.0)
        SceneManager(Scene(spheres=(Sphere((0.0, 0.0, -5.0), 1.0, clear),)))

        # Enter, leave, then escape: three levels of recursion
        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=3)
        assert color == pytest.approx(BACKGROUND, abs=1e-4)

        # With two levels the ray ends inside the sphere on the background
        # returned by the exhausted depth, so the result is unchanged
        assert trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=2) == pytest.approx(
            BACKGROUND, abs=1e-4
        )

    def test_mirror_reflects_background(self):
        """Test that a perfect mirror returns the background it reflects."""
        from whitted.core.integrator import trace_ray
        from whitted.scene.description import Material, Scene, Sphere
        from whitted.scene.manager import SceneManager

        mirror = Material((0.0, 0.0, 0.0), reflection_weight=1.0)
        SceneManager(Scene(spheres=(Sphere((0.0, 0.0, -5.0), 1.0, mirror),)))

        color = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), max_depth=2)
        assert color == pytest.approx(BACKGROUND, abs=1e-5)


class TestRenderFrame:
    """Test whole-frame rendering."""

    def _setup(self, width, height):
        from whitted.camera.pinhole import PinholeCamera, setup_camera
        from whitted.core.integrator import setup_render_target

        setup_camera(PinholeCamera())
        setup_render_target(width, height)

    def test_empty_scene_is_background(self):
        from whitted.core.integrator import get_framebuffer_numpy, render_frame

        self._setup(6, 4)
        render_frame(max_depth=2)
        image = get_framebuffer_numpy()

        assert image.shape == (4, 6, 3)
        assert image.dtype == np.float32
        assert np.allclose(image, np.array(BACKGROUND, dtype=np.float32))

    def test_every_pixel_written_once(self):
        from whitted.core.integrator import (
            get_write_count_numpy,
            is_frame_complete,
            render_frame,
        )

        _matte_sphere_scene((10.0, 10.0, 10.0))
        self._setup(7, 5)
        render_frame(max_depth=1)

        counts = get_write_count_numpy()
        assert counts.shape == (5, 7)
        assert np.all(counts == 1)
        assert is_frame_complete()

    def test_center_pixel_is_shaded(self):
        from whitted.core.integrator import get_framebuffer_numpy, render_frame

        _matte_sphere_scene((10.0, 10.0, 10.0))
        self._setup(5, 5)
        render_frame(max_depth=1)
        image = get_framebuffer_numpy()

        expected = 13.0 / math.sqrt(369.0)
        assert image[2, 2, 0] == pytest.approx(expected, abs=1e-4)
        # Corner rays at 90 degrees fov miss the sphere
        assert tuple(image[0, 0]) == pytest.approx(BACKGROUND, abs=1e-6)

    def test_pixel_order_independence(self):
        """Test that pixels rendered one by one in any order match the frame."""
        from whitted.core.integrator import get_framebuffer_numpy, render_frame, render_pixel
        from whitted.scene.demo import create_demo_scene
        from whitted.scene.manager import SceneManager

        scene, _ = create_demo_scene()
        SceneManager(scene)
        self._setup(16, 12)
        render_frame(max_depth=2)
        image = get_framebuffer_numpy()

        pixels = [(x, y) for y in range(12) for x in range(16)]
        random.Random(0).shuffle(pixels)
        for x, y in pixels[:40]:
            assert render_pixel(x, y, max_depth=2) == pytest.approx(tuple(image[y, x]), abs=1e-5)

    def test_render_pixel_out_of_bounds(self):
        from whitted.core.integrator import render_pixel

        self._setup(4, 4)
        with pytest.raises(ValueError, match="outside"):
            render_pixel(4, 0, max_depth=1)

    def test_demo_scene_is_finite(self):
        """Test that mirror and glass recursion produce finite colors."""
        from whitted.core.integrator import get_framebuffer_numpy, render_frame
        from whitted.scene.demo import create_demo_scene
        from whitted.scene.manager import SceneManager

        scene, _ = create_demo_scene()
        SceneManager(scene)
        self._setup(32, 24)
        render_frame(max_depth=4)
        image = get_framebuffer_numpy()

        assert np.all(np.isfinite(image))
        assert np.all(image >= 0.0)
        assert not np.allclose(image, np.array(BACKGROUND, dtype=np.float32))
