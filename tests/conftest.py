"""Pytest configuration for rtweekend tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.

Modules that declare Taichi fields are imported inside tests (or fixtures),
never at test-module import time, since collection runs before ti.init().
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate every field declared by already-imported modules.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Reset world, materials and random streams around each test."""
    from rtweekend.core.sampler import seed_streams
    from rtweekend.materials.registry import clear_materials
    from rtweekend.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_materials()
        seed_streams(1234)

    _clear_all()
    yield
    _clear_all()

