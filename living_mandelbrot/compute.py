"""
Escape-time computation functions using Numba JIT compilation.

This module contains the per-point kernels of the living Mandelbrot
renderer. They are JIT-compiled for speed and handle:
- Mapping raster coordinates onto the complex plane
- The time-perturbed ("flow") escape-time iteration

The Python-level wrapper at the bottom of the module (evaluate) returns a
friendlier result object for callers that are not themselves JIT code.
"""

from collections import namedtuple

import numpy as np
from numba import jit


MAX_ITERATIONS = 120
ESCAPE_RADIUS_SQ = 4.0
FLOW_TIME_RATE = 0.1
FLOW_STRENGTH = 0.02

LOG_2 = np.log(2.0)


EvaluationResult = namedtuple(
    'EvaluationResult',
    ['iteration_count', 'smooth_value', 'escaped',
     'final_real', 'final_imag', 'final_magnitude', 'final_angle']
)


@jit(nopython=True, cache=True)
def map_to_complex(px, py, center_real, center_imag, scale, width, height):
    """
    Map a raster coordinate to a point in the complex plane.

    The horizontal extent of the window is `scale`. The vertical step is
    scale / aspect / width per pixel, so the imaginary extent shrinks with
    the square of the aspect ratio on wide rasters.

    Args:
        px, py: Raster coordinate (may be fractional)
        center_real, center_imag: Complex-plane point at the raster center
        scale: Width of the visible complex-plane window
        width, height: Raster dimensions in pixels

    Returns:
        (real, imag) tuple
    """
    real = center_real + (px - width / 2) * scale / width
    vertical_scale = scale / (width / height)
    imag = center_imag + (py - height / 2) * vertical_scale / width
    return real, imag


@jit(nopython=True, cache=True)
def escape_time(cr, ci, time_offset, flow_enabled):
    """
    Iterate z <- z² + c from z = 0 with an optional time perturbation.

    When flow is enabled each step also adds time_influence * z (using the
    pre-update z), where time_influence = sin(time_offset * 0.1) * 0.02.

    Args:
        cr, ci: Real and imaginary parts of c
        time_offset: Time value driving the flow perturbation
        flow_enabled: Whether to apply the perturbation at all

    Returns:
        (iteration, smooth, escaped, zr, zi, magnitude, angle)
    """
    time_influence = 0.0
    if flow_enabled:
        time_influence = np.sin(time_offset * FLOW_TIME_RATE) * FLOW_STRENGTH

    zr = 0.0
    zi = 0.0
    iteration = 0
    while zr * zr + zi * zi <= ESCAPE_RADIUS_SQ and iteration < MAX_ITERATIONS:
        new_zi = 2.0 * zr * zi + ci + time_influence * zi
        new_zr = zr * zr - zi * zi + cr + time_influence * zr
        zr = new_zr
        zi = new_zi
        iteration += 1

    magnitude = np.sqrt(zr * zr + zi * zi)
    angle = np.arctan2(zi, zr)

    escaped = iteration < MAX_ITERATIONS
    smooth = float(iteration)
    # log(log(|z|)) is undefined for |z| <= 1; keep the raw count there
    if escaped and magnitude > 1.0:
        smooth = iteration + 1 - np.log(np.log(magnitude)) / LOG_2

    return iteration, smooth, escaped, zr, zi, magnitude, angle


def evaluate(c_real, c_imag, time_offset, flow_enabled):
    """Evaluate a single point and return an EvaluationResult."""
    iteration, smooth, escaped, zr, zi, magnitude, angle = escape_time(
        float(c_real), float(c_imag), float(time_offset), bool(flow_enabled)
    )
    return EvaluationResult(
        int(iteration), float(smooth), bool(escaped),
        float(zr), float(zi), float(magnitude), float(angle)
    )
