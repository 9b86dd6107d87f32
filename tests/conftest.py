import copy
import json
import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pygame
import pytest

from viewport import ViewportMapper

CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config.json")

with open(CONFIG_PATH, "r") as f:
    _CONFIG = json.load(f)


@pytest.fixture(scope="session", autouse=True)
def pygame_headless():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def scene_config() -> dict:
    """A fresh copy of the 'scene' section of config.json."""
    return copy.deepcopy(_CONFIG["scene"])


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def geometry(scene_config):
    """Geometry of a 1920x1080 surface: scale 1.0, water at 810, road at 972."""
    return ViewportMapper(scene_config["viewport"]).recompute(1920, 1080)


@pytest.fixture
def screen(geometry) -> pygame.Surface:
    return pygame.Surface((geometry.surface_width, geometry.surface_height))
