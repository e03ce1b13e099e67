"""
Animated colorization for escape-time results.

Colors are produced in HSV space and converted to RGB. Two optional
effects animate the palette over time:
- Rays: brightness modulation driven by the final orbit angle
- Flow: a rippling shift of saturation/value along the escape gradient

Saturation and value are deliberately left unclamped (combined effects can
push them past 1 or below 0); only the final byte store saturates into
[0, 255].
"""

import numpy as np
from numba import jit

from .compute import MAX_ITERATIONS


RAY_INTENSITY = 0.6
FLOW_INTENSITY = 0.8

# Per-channel weights of the faint pulse inside the set (purple-black)
INTERIOR_WEIGHTS = (40.0, 10.0, 50.0)


@jit(nopython=True, cache=True)
def hsv_to_rgb(h, s, v):
    """
    Convert HSV to RGB using the 6-sector formula.

    Args:
        h: Hue in [0, 1)
        s, v: Saturation and value (not clamped)

    Returns:
        (r, g, b) floored to integers on a 0-255 scale. Out-of-range
        saturation/value yields out-of-range channels.
    """
    h6 = h * 6.0
    i = int(np.floor(h6))
    f = h6 - i
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    sector = i % 6
    if sector == 0:
        r, g, b = v, t, p
    elif sector == 1:
        r, g, b = q, v, p
    elif sector == 2:
        r, g, b = p, v, t
    elif sector == 3:
        r, g, b = p, q, v
    elif sector == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return (int(np.floor(r * 255.0)),
            int(np.floor(g * 255.0)),
            int(np.floor(b * 255.0)))


@jit(nopython=True, cache=True)
def clamp_channel(value):
    """Saturate a channel value into the byte range."""
    if value < 0:
        return 0
    if value > 255:
        return 255
    return value


@jit(nopython=True, cache=True)
def colorize(smooth, escaped, angle, time, flow_enabled, rays_enabled):
    """
    Compute the final color of one pixel.

    Args:
        smooth: Smooth iteration value from the evaluator
        escaped: Whether the orbit escaped
        angle: Angle of the final orbit point (radians)
        time: Global animation time in seconds
        flow_enabled, rays_enabled: Effect toggles

    Returns:
        (r, g, b) integers in [0, 255]
    """
    if not escaped:
        pulse = 0.0
        if flow_enabled:
            pulse = np.sin(time * 2.0) * 0.1 + 0.1
        return (clamp_channel(int(np.floor(pulse * INTERIOR_WEIGHTS[0]))),
                clamp_channel(int(np.floor(pulse * INTERIOR_WEIGHTS[1]))),
                clamp_channel(int(np.floor(pulse * INTERIOR_WEIGHTS[2]))))

    normalized = smooth / MAX_ITERATIONS

    ray_effect = 0.0
    if rays_enabled:
        ray_effect = abs(np.sin(angle * 10.0 + time * 3.0)) ** 3 * RAY_INTENSITY

    flow_effect = 0.0
    if flow_enabled:
        flow_effect = np.sin(normalized * 20.0 + time * 2.0) * 0.15 * FLOW_INTENSITY

    hue = (normalized * 360.0 + time * 15.0) % 360.0
    saturation = 0.8 + flow_effect
    value = 0.7 + ray_effect + flow_effect * 0.3

    r, g, b = hsv_to_rgb(hue / 360.0, saturation, value)
    return clamp_channel(r), clamp_channel(g), clamp_channel(b)


def colorize_result(result, time, toggles):
    """
    Colorize an EvaluationResult using the given EffectToggles.

    Returns:
        (r, g, b) tuple of ints in [0, 255]
    """
    r, g, b = colorize(
        float(result.smooth_value), bool(result.escaped),
        float(result.final_angle), float(time),
        bool(toggles.flow_enabled), bool(toggles.rays_enabled)
    )
    return int(r), int(g), int(b)
