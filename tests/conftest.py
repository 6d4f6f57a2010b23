"""Pytest configuration and shared fixtures."""

import math

import pytest

from pathtracer.camera.camera import Camera
from pathtracer.core.vector import Vector3
from pathtracer.geometry.plane import Plane
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.world import World
from pathtracer.materials.material import Material


@pytest.fixture
def ground_material():
    return Material(Vector3(0.2, 0.8, 0.3))


@pytest.fixture
def sphere_material():
    return Material(Vector3(0.8, 0.3, 0.2))


@pytest.fixture
def reference_world(ground_material, sphere_material):
    """Ground plane at y=0 and a unit sphere resting on it at the origin."""
    return World([
        Plane(Vector3(0, 1, 0), 0.0, ground_material),
        Sphere(Vector3(0, 1, 0), 1.0, sphere_material),
    ])


@pytest.fixture
def reference_camera():
    """Camera at (0, 1, -3) looking toward +z."""
    return Camera(Vector3(0, 1, -3), yaw=math.pi, pitch=0.0)


@pytest.fixture
def fast_render_settings():
    """Small settings so compiled frames stay quick in tests."""
    return {
        'width': 16,
        'height': 12,
        'samples_per_bounce': 2,
        'bounces': 3,
        'day': False,
    }
