import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from living_mandelbrot.view import EffectToggles, RasterDimensions, ViewState


@pytest.fixture
def default_view():
    return ViewState()


@pytest.fixture
def small_raster():
    return RasterDimensions(32, 24)


@pytest.fixture
def all_effects():
    return EffectToggles(flow_enabled=True, rays_enabled=True)


@pytest.fixture
def no_effects():
    return EffectToggles(flow_enabled=False, rays_enabled=False)
