"""Pytest configuration for ray marcher tests.

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


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear surfaces, lights, counters and the render target around each test.

    This ensures tests are isolated from each other.
    """
    # Import here so the fields are created after ti.init
    from sdf_tracer.core.integrator import reset_render_target
    from sdf_tracer.core.marcher import reset_degenerate_normal_count
    from sdf_tracer.scene.intersection import clear_scene
    from sdf_tracer.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_lights()
        reset_degenerate_normal_count()
        reset_render_target()

    _clear_all()

    yield

    _clear_all()
