"""Shared fixtures for the tinytracer tests."""

import os
import random

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")


@pytest.fixture
def rng():
    """A seeded random source so sampling tests are repeatable."""
    return random.Random(1234)


@pytest.fixture
def world():
    """The default two-sphere scene."""
    from tinytracer.renderer.scene import build_scene

    return build_scene()


@pytest.fixture
def small_config():
    """A render small enough to finish in well under a second."""
    from tinytracer.renderer.config import RenderConfig

    return RenderConfig(
        image_width=8,
        aspect_ratio=2.0,
        samples_per_pixel=2,
        max_depth=4,
        num_workers=3,
        seed=7,
    )
