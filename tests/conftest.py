# conftest.py

import os

# Headless pygame: no window and no audio device are needed for Surfaces.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pygame
import pytest

from particle_field import ParticleField


@pytest.fixture(scope="session", autouse=True)
def pygame_headless():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def make_field():
    """Builds a seeded 800x600 field from keyword options."""
    def _make(size=(800, 600), seed=0, **options):
        return ParticleField(options, np.random.default_rng(seed), size)
    return _make
