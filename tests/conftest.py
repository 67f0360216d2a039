"""Pytest configuration for ray tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data and tracer settings before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized first
    from whitted.core.integrator import clear_render_target, reset_tracer_settings
    from whitted.materials.phong import clear_phong_materials
    from whitted.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_phong_materials()
        reset_tracer_settings()
        clear_render_target()

    _clear_all()

    yield

    _clear_all()
