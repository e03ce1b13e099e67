import numpy as np
import pytest

from living_mandelbrot.coloring import colorize_result
from living_mandelbrot.compute import evaluate
from living_mandelbrot.renderer import AnimationClock, FrameRenderer, PixelBuffer
from living_mandelbrot.view import EffectToggles, RasterDimensions, ViewState, map_to_complex


@pytest.fixture
def renderer():
    return FrameRenderer(use_gpu=False)


def test_every_pixel_is_opaque(renderer, default_view, small_raster, all_effects):
    buffer = renderer.render_frame(default_view, small_raster, all_effects, 3.25)
    assert buffer.pixels.shape == (24, 32, 4)
    assert buffer.pixels.dtype == np.uint8
    assert np.all(buffer.pixels[:, :, 3] == 255)


def test_frames_are_deterministic(renderer, default_view, small_raster, all_effects):
    first = renderer.render_frame(default_view, small_raster, all_effects, 7.5).pixels.copy()
    second = renderer.render_frame(default_view, small_raster, all_effects, 7.5).pixels
    np.testing.assert_array_equal(first, second)


def test_frame_changes_over_time(renderer, default_view, small_raster, all_effects):
    first = renderer.render_frame(default_view, small_raster, all_effects, 0.0).pixels.copy()
    later = renderer.render_frame(default_view, small_raster, all_effects, 2.0).pixels
    assert not np.array_equal(first, later)


@pytest.mark.parametrize("px, py", [(0, 0), (5, 7), (16, 12), (31, 23)])
def test_pixels_match_scalar_pipeline(renderer, small_raster, all_effects, px, py):
    view = ViewState(-0.6, 0.1, 2.5)
    elapsed = 4.2
    buffer = renderer.render_frame(view, small_raster, all_effects, elapsed)

    c_real, c_imag = map_to_complex(px, py, view, small_raster)
    time_offset = elapsed + (px / small_raster.width + py / small_raster.height) * 2
    result = evaluate(c_real, c_imag, time_offset, all_effects.flow_enabled)
    expected = colorize_result(result, elapsed, all_effects)

    assert tuple(int(v) for v in buffer.pixels[py, px, :3]) == expected


def test_interior_view_is_black_without_flow(renderer, small_raster):
    view = ViewState(-0.2, 0.0, 0.01)
    toggles = EffectToggles(flow_enabled=False, rays_enabled=True)
    buffer = renderer.render_frame(view, small_raster, toggles, 9.0)
    assert np.all(buffer.rgb() == 0)
    assert np.all(buffer.pixels[:, :, 3] == 255)


def test_interior_view_pulses_with_flow(renderer, small_raster):
    view = ViewState(-0.2, 0.0, 0.01)
    buffer = renderer.render_frame(view, small_raster, EffectToggles(True, False), 0.0)
    assert np.all(buffer.rgb() == np.array([4, 1, 5], dtype=np.uint8))


def test_buffer_follows_raster_size(renderer, default_view, all_effects):
    first = renderer.render_frame(default_view, RasterDimensions(16, 12), all_effects, 0.0)
    same = renderer.render_frame(default_view, RasterDimensions(16, 12), all_effects, 0.1)
    assert same is first

    resized = renderer.render_frame(default_view, RasterDimensions(20, 10), all_effects, 0.2)
    assert resized is not first
    assert resized.pixels.shape == (10, 20, 4)
    assert np.all(resized.pixels[:, :, 3] == 255)


def test_cpu_backend_when_gpu_disabled(renderer):
    assert renderer.use_gpu is False
    assert renderer.backend_name == "CPU (Numba)"
    assert renderer.warmup() >= 0.0


def test_pixel_buffer_layout():
    buffer = PixelBuffer(7, 3)
    assert buffer.stride == 28
    assert buffer.pixels.shape == (3, 7, 4)
    assert buffer.rgb().shape == (3, 7, 3)
    assert buffer.matches(RasterDimensions(7, 3))
    assert not buffer.matches(RasterDimensions(3, 7))


def test_animation_clock_is_monotonic():
    clock = AnimationClock()
    assert clock.tick(5000) == 0.0
    assert clock.tick(5500) == 0.5
    # A host timestamp going backwards never rewinds the animation
    assert clock.tick(5200) == 0.5
    assert clock.tick(7000) == 2.0
    assert clock.frames == 4
