"""
Frame renderer for the living Mandelbrot animation.

The FrameRenderer class handles:
- Owning the RGBA pixel buffer (recreated when the raster size changes)
- Running the full-frame render pass every tick (no caching)
- Choosing between the Numba CPU kernel and the PyTorch GPU backend
- JIT/GPU warm-up before the first frame
"""

import time

import numpy as np
from numba import jit, prange

from .compute import map_to_complex, escape_time
from .coloring import colorize
from .compute_gpu import get_gpu_compute, is_gpu_available, should_default_to_gpu
from .logging_setup import get_logger


logger = get_logger()


@jit(nopython=True, parallel=True, cache=True)
def render_frame_rgba(center_real, center_imag, scale, width, height,
                      elapsed, flow_enabled, rays_enabled, out):
    """
    Render one animation frame into an RGBA buffer.

    Every pixel is recomputed; rows are split across threads. The evaluator
    sees a per-pixel time offset (a diagonal travelling wave across the
    frame) while the colorizer uses the global elapsed time.

    Args:
        center_real, center_imag, scale: View state
        width, height: Raster dimensions
        elapsed: Global animation time in seconds
        flow_enabled, rays_enabled: Effect toggles
        out: uint8 array of shape (height, width, 4), modified in place
    """
    for py in prange(height):
        for px in range(width):
            cr, ci = map_to_complex(px, py, center_real, center_imag,
                                    scale, width, height)
            time_offset = elapsed + (px / width + py / height) * 2.0

            iteration, smooth, escaped, zr, zi, magnitude, angle = escape_time(
                cr, ci, time_offset, flow_enabled
            )
            r, g, b = colorize(smooth, escaped, angle, elapsed,
                               flow_enabled, rays_enabled)

            out[py, px, 0] = np.uint8(r)
            out[py, px, 1] = np.uint8(g)
            out[py, px, 2] = np.uint8(b)
            out[py, px, 3] = 255


class PixelBuffer:
    """
    Dense RGBA framebuffer.

    Attributes:
        width, height: Dimensions in pixels
        stride: Bytes per row
        pixels: uint8 array of shape (height, width, 4), row-major
    """

    CHANNELS = 4

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.stride = width * self.CHANNELS
        self.pixels = np.zeros((height, width, self.CHANNELS), dtype=np.uint8)

    def matches(self, raster):
        return self.width == raster.width and self.height == raster.height

    def rgb(self):
        """View of the color channels without alpha."""
        return self.pixels[:, :, :3]

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"


class AnimationClock:
    """
    Elapsed animation time derived from host timestamps.

    The host supplies a millisecond timestamp per frame; the first one seen
    becomes time zero. Elapsed time never decreases.
    """

    def __init__(self):
        self.start_ms = None
        self.elapsed = 0.0
        self.frames = 0

    def tick(self, now_ms):
        """Advance to host time now_ms and return elapsed seconds."""
        if self.start_ms is None:
            self.start_ms = now_ms
        self.elapsed = max(self.elapsed, (now_ms - self.start_ms) / 1000.0)
        self.frames += 1
        return self.elapsed


class FrameRenderer:
    """
    Renders full frames into a reusable PixelBuffer.

    Usage:
        renderer = FrameRenderer()
        buffer = renderer.render_frame(view, raster, toggles, elapsed)
        # buffer.pixels is (height, width, 4) RGBA, alpha always 255

    Attributes:
        use_gpu: Whether the PyTorch backend is used for frames
        buffer: The current PixelBuffer (None before the first frame)
        last_frame_ms: Wall time of the most recent render pass
    """

    def __init__(self, use_gpu=None):
        """
        Initialize the renderer.

        Args:
            use_gpu: Whether to use GPU acceleration (None = auto-detect;
                only CUDA is picked automatically)
        """
        if use_gpu is None:
            use_gpu = should_default_to_gpu()
        self.use_gpu = bool(use_gpu) and is_gpu_available()
        if use_gpu and not self.use_gpu:
            logger.warning("GPU rendering requested but no GPU is available; using CPU")

        self._gpu_compute = None
        if self.use_gpu:
            self._gpu_compute = get_gpu_compute(prefer_gpu=True)

        self.buffer = None
        self.last_frame_ms = 0.0

    @property
    def backend_name(self):
        if self.use_gpu:
            return f"GPU: {self._gpu_compute.get_device_info()}"
        return "CPU (Numba)"

    def warmup(self):
        """
        Compile kernels on a tiny raster.

        Returns:
            Seconds spent warming up.
        """
        start = time.perf_counter()
        dummy = np.zeros((8, 8, 4), dtype=np.uint8)
        render_frame_rgba(-0.5, 0.0, 3.5, 8, 8, 0.0, True, True, dummy)
        if self.use_gpu:
            self._gpu_compute.warmup()
        elapsed = time.perf_counter() - start
        logger.info("Warm-up finished in %.2fs (%s)", elapsed, self.backend_name)
        return elapsed

    def _ensure_buffer(self, raster):
        """Return a buffer sized for raster, allocating a new one if needed."""
        if self.buffer is None or not self.buffer.matches(raster):
            self.buffer = PixelBuffer(raster.width, raster.height)
            logger.debug("Allocated %r", self.buffer)
        return self.buffer

    def render_frame(self, view, raster, toggles, elapsed):
        """
        Render a complete frame.

        Args:
            view: ViewState
            raster: RasterDimensions
            toggles: EffectToggles
            elapsed: Global animation time in seconds

        Returns:
            The PixelBuffer, fully overwritten.
        """
        buffer = self._ensure_buffer(raster)
        start = time.perf_counter()

        if self.use_gpu:
            self._gpu_compute.render_frame_rgba(
                view.center_real, view.center_imag, view.scale,
                raster.width, raster.height, float(elapsed),
                toggles.flow_enabled, toggles.rays_enabled, buffer.pixels
            )
        else:
            render_frame_rgba(
                view.center_real, view.center_imag, view.scale,
                raster.width, raster.height, float(elapsed),
                bool(toggles.flow_enabled), bool(toggles.rays_enabled),
                buffer.pixels
            )

        self.last_frame_ms = (time.perf_counter() - start) * 1000.0
        return buffer

