from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from .app import run
from .logging_setup import LOG_LEVELS, configure_logging, get_logger, level_from_name
from .settings import load_settings, normalise_settings


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="living-mandelbrot", description="Animated, explorable Mandelbrot fractal.")
    p.add_argument("--config", type=str, default=None, help="Path to a settings JSON file overriding the defaults.")
    p.add_argument("--width", type=int, default=None, help="Window width in pixels.")
    p.add_argument("--height", type=int, default=None, help="Window height in pixels.")
    p.add_argument("--fps", type=int, default=None, help="Frame rate cap.")
    p.add_argument("--render-scale", type=float, default=None, help="Raster size as a fraction of the window (0, 1].")
    p.add_argument("--no-flow", action="store_true", help="Start with the flow effect disabled.")
    p.add_argument("--no-rays", action="store_true", help="Start with the ray effect disabled.")
    gpu = p.add_mutually_exclusive_group()
    gpu.add_argument("--gpu", dest="use_gpu", action="store_const", const=True, default=None, help="Render frames with PyTorch on the GPU.")
    gpu.add_argument("--cpu", dest="use_gpu", action="store_const", const=False, help="Render frames with the Numba CPU kernel.")
    p.add_argument("--log-level", type=str.upper, default=None, choices=list(LOG_LEVELS), help="Log level.")
    p.add_argument("--log-file", type=str, default=None, help="Rotating log file path.")
    return p


def settings_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = load_settings(args.config)
    overrides = {
        "width": args.width,
        "height": args.height,
        "fps": args.fps,
        "render_scale": args.render_scale,
        "use_gpu": args.use_gpu,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
    cfg.update({k: v for k, v in overrides.items() if v is not None})
    if args.no_flow:
        cfg["flow_enabled"] = False
    if args.no_rays:
        cfg["rays_enabled"] = False
    return normalise_settings(cfg)


def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logger = get_logger()

    try:
        cfg = settings_from_args(args)
    except (ValueError, OSError) as e:
        configure_logging(level=logging.INFO)
        logger.error("Invalid settings: %s", e)
        return 2

    configure_logging(level=level_from_name(cfg["log_level"]), log_file=cfg["log_file"])
    logger.info("Starting with settings: %s", cfg)

    run(cfg)
    return 0
