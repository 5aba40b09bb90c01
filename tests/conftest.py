"""
Shared test fixtures and configuration for the camframe test suite.

Every test runs without a CAMFRAME_CONFIG overlay, so only the built-in
defaults apply unless a test sets one.
"""

import pytest

from camframe.camera.projection import Camera, ProjectionMode, Viewport


@pytest.fixture(autouse=True)
def no_config_overlay(monkeypatch):
    """Ignore any CAMFRAME_CONFIG set in the calling environment."""
    from camframe.config.rig_config import ENV_CONFIG_PATH

    monkeypatch.delenv(ENV_CONFIG_PATH, raising=False)


@pytest.fixture
def viewport():
    return Viewport(width=800, height=600)


@pytest.fixture
def camera(viewport):
    """Perspective camera at the origin looking down +Z."""
    return Camera(viewport=viewport)


@pytest.fixture
def ortho_camera(viewport):
    """Orthographic camera at the origin looking down +Z, half-height 5."""
    return Camera(viewport=viewport, mode=ProjectionMode.ORTHOGRAPHIC, ortho_size=5.0)
