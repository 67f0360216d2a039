"""Unit tests for the pinhole camera.

Tests cover:
- Camera configuration validation
- Primary ray through the image center
- Row 0 at the top of the image
- Horizontal aspect correction
"""

import math

import pytest
import taichi as ti


def _primary_direction(x, y, width, height):
    from whitted.camera.pinhole import get_primary_ray

    origin = ti.Vector.field(3, dtype=ti.f32, shape=())
    direction = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def ray_kernel(px: ti.i32, py: ti.i32, w: ti.i32, h: ti.i32):
        ray = get_primary_ray(px, py, w, h)
        origin[None] = ray.origin
        direction[None] = ray.direction

    ray_kernel(x, y, width, height)
    return origin[None], direction[None]


class TestPinholeCameraConfig:
    """Tests for PinholeCamera validation and setup."""

    def test_default_camera(self):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera()
        assert camera.position == (0.0, 0.0, 0.0)
        assert camera.fov == pytest.approx(math.pi / 2.0)

    @pytest.mark.parametrize("fov", [0.0, -1.0, math.pi, 4.0])
    def test_invalid_fov(self, fov):
        from whitted.camera.pinhole import PinholeCamera

        with pytest.raises(ValueError, match="Field of view"):
            PinholeCamera(fov=fov)

    def test_setup_camera_stores_half_height(self):
        from whitted.camera.pinhole import PinholeCamera, get_camera_info, setup_camera

        setup_camera(PinholeCamera(position=(1.0, 2.0, 3.0), fov=math.pi / 3.0))
        info = get_camera_info()

        assert info["origin"] == pytest.approx((1.0, 2.0, 3.0))
        assert info["half_height"] == pytest.approx(math.tan(math.pi / 6.0), rel=1e-5)


class TestPrimaryRays:
    """Tests for primary ray generation."""

    def test_center_ray_looks_down_negative_z(self):
        """Test the center pixel of an odd-sized image looks straight ahead."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(position=(0.0, 1.0, 0.0)))
        origin, direction = _primary_direction(2, 2, 5, 5)

        assert (origin[0], origin[1], origin[2]) == pytest.approx((0.0, 1.0, 0.0))
        assert direction[0] == pytest.approx(0.0, abs=1e-6)
        assert direction[1] == pytest.approx(0.0, abs=1e-6)
        assert direction[2] == pytest.approx(-1.0, abs=1e-6)

    def test_top_row_points_up(self):
        """Test that pixel row 0 is the top of the image."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera())
        _, top = _primary_direction(2, 0, 5, 5)
        _, bottom = _primary_direction(2, 4, 5, 5)

        assert top[1] > 0.0
        assert bottom[1] < 0.0
        assert top[1] == pytest.approx(-bottom[1], abs=1e-6)

    def test_directions_are_normalized(self):
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera())
        _, direction = _primary_direction(0, 0, 64, 48)

        length = math.sqrt(sum(direction[i] ** 2 for i in range(3)))
        assert length == pytest.approx(1.0, abs=1e-5)

    def test_aspect_correction(self):
        """Test that the horizontal extent scales with width / height."""
        from whitted.camera.pinhole import PinholeCamera, setup_camera

        setup_camera(PinholeCamera(fov=math.pi / 2.0))
        width, height = 8, 4
        _, left = _primary_direction(0, 1, width, height)

        # Unnormalized target: x = (2 * 0.5 / 8 - 1) * 1 * 2, y = -(2 * 1.5 / 4 - 1)
        target = (-1.75, 0.25, -1.0)
        norm = math.sqrt(sum(c * c for c in target))
        assert left[0] == pytest.approx(target[0] / norm, abs=1e-5)
        assert left[1] == pytest.approx(target[1] / norm, abs=1e-5)
        assert left[2] == pytest.approx(target[2] / norm, abs=1e-5)

    def test_camera_origin_on_device(self):
        from whitted.camera.pinhole import PinholeCamera, get_camera_origin, setup_camera

        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def origin_kernel():
            result[None] = get_camera_origin()

        setup_camera(PinholeCamera(position=(0.5, -1.0, 2.0)))
        origin_kernel()

        origin = result[None]
        assert (origin[0], origin[1], origin[2]) == pytest.approx((0.5, -1.0, 2.0))
