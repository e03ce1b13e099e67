import numpy as np
import pytest

torch = pytest.importorskip("torch")

from living_mandelbrot.compute_gpu import GPUCompute
from living_mandelbrot.renderer import render_frame_rgba


@pytest.fixture
def gpu():
    # PyTorch CPU device with float64, comparable with the Numba kernel
    return GPUCompute(prefer_gpu=False)


def render_both(gpu, view, width, height, elapsed, flow, rays):
    cpu_out = np.zeros((height, width, 4), dtype=np.uint8)
    gpu_out = np.zeros((height, width, 4), dtype=np.uint8)
    render_frame_rgba(view[0], view[1], view[2], width, height, elapsed, flow, rays, cpu_out)
    gpu.render_frame_rgba(view[0], view[1], view[2], width, height, elapsed, flow, rays, gpu_out)
    return cpu_out, gpu_out


@pytest.mark.parametrize("flow, rays", [(False, False), (True, False), (False, True), (True, True)])
def test_gpu_frame_matches_cpu_kernel(gpu, flow, rays):
    cpu_out, gpu_out = render_both(gpu, (-0.5, 0.0, 3.5), 48, 32, 2.75, flow, rays)

    assert np.all(gpu_out[:, :, 3] == 255)
    diff = np.abs(cpu_out.astype(np.int16) - gpu_out.astype(np.int16)).max(axis=-1)
    # Libm differences can flip a few boundary pixels; the bulk must agree
    assert np.mean(diff <= 1) > 0.97


def test_gpu_interior_pulse(gpu):
    cpu_out, gpu_out = render_both(gpu, (-0.2, 0.0, 0.01), 16, 16, 0.0, True, False)
    assert np.all(gpu_out[:, :, :3] == np.array([4, 1, 5], dtype=np.uint8))
    np.testing.assert_array_equal(cpu_out, gpu_out)


def test_gpu_requires_torch(gpu):
    gpu.available = False
    with pytest.raises(RuntimeError):
        gpu.render_frame_rgba(-0.5, 0.0, 3.5, 4, 4, 0.0, True, True,
                              np.zeros((4, 4, 4), dtype=np.uint8))


def test_device_info(gpu):
    assert gpu.device.type == "cpu"
    assert "CPU" in gpu.get_device_info()
