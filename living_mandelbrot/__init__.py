"""
Living Mandelbrot Package

A continuously animated, interactively explorable Mandelbrot fractal
using Pygame for display and Numba for JIT-compiled per-pixel work.
Each frame recolors the fractal and slightly perturbs the iteration
("flow"), with optional angle-driven "rays".

Quick Start:
    from living_mandelbrot import run, load_settings
    run(load_settings())

Or from command line:
    python -m living_mandelbrot
    living-mandelbrot --render-scale 0.5

Package Structure:
    - compute.py: JIT-compiled mapping and escape-time evaluation
    - coloring.py: Animated HSV colorization (flow and ray effects)
    - compute_gpu.py: Optional PyTorch frame renderer
    - renderer.py: Full-frame render pass and pixel buffer
    - view.py: View state and interaction controller
    - controls.py: On-screen Reset / Flow / Rays buttons
    - app.py: Main application and event loop
    - settings.py, cli.py, logging_setup.py: Configuration and logging

Controls:
    - Left click: Zoom in at the cursor
    - Right click: Zoom out
    - +/-: Zoom about the center
    - R: Reset to default view
    - F: Toggle flow
    - G: Toggle rays
    - ESC: Quit
"""

from .app import run, LivingMandelbrotApp
from .compute import evaluate, EvaluationResult, MAX_ITERATIONS
from .coloring import colorize_result, hsv_to_rgb
from .renderer import FrameRenderer, PixelBuffer, AnimationClock
from .settings import load_settings
from .view import (
    ViewController,
    ViewState,
    RasterDimensions,
    EffectToggles,
    map_to_complex,
)

__version__ = "1.0.0"
__all__ = [
    "run",
    "LivingMandelbrotApp",
    "evaluate",
    "EvaluationResult",
    "MAX_ITERATIONS",
    "colorize_result",
    "hsv_to_rgb",
    "FrameRenderer",
    "PixelBuffer",
    "AnimationClock",
    "load_settings",
    "ViewController",
    "ViewState",
    "RasterDimensions",
    "EffectToggles",
    "map_to_complex",
]
