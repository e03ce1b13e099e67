"""
Settings for the living Mandelbrot app.

Defaults ship in settings.json next to this module. A user config file
(JSON object) may override any subset of them; command-line flags are
applied on top by cli.py.
"""

import json
import os
from typing import Any, Dict, Optional

from .logging_setup import LOG_LEVELS


SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


def _read_json_object(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Settings file {path} must contain a JSON object.")
    return cfg


def load_default_settings() -> Dict[str, Any]:
    """Load the packaged settings.json."""
    return _read_json_object(SETTINGS_PATH)


def load_settings(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load settings, merging an optional user file over the defaults.

    Args:
        config_path: Path to a JSON object with overrides, or None

    Returns:
        Validated settings dict (see normalise_settings)

    Raises:
        ValueError: The user file is not a JSON object or a value is invalid
        OSError: The user file cannot be read
    """
    cfg = load_default_settings()
    if config_path:
        try:
            overrides = _read_json_object(config_path)
        except json.JSONDecodeError as e:
            raise ValueError(f"Settings file {config_path} is not valid JSON: {e}") from e
        cfg.update({k: v for k, v in overrides.items() if k in cfg})
    return normalise_settings(cfg)


def _positive_int(cfg: Dict[str, Any], key: str) -> int:
    value = cfg[key]
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a positive integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{key} must be a whole number, got {value!r}")
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a positive integer, got {cfg[key]!r}") from None
    if value <= 0:
        raise ValueError(f"{key} must be a positive integer, got {value}")
    return value


def _bool(cfg: Dict[str, Any], key: str) -> bool:
    value = cfg[key]
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def normalise_settings(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and coerce a settings dict.

    Missing keys are filled from the packaged defaults.
    """
    defaults = load_default_settings()
    merged = dict(defaults)
    merged.update({k: v for k, v in cfg.items() if k in defaults})

    out = dict(merged)
    out["width"] = _positive_int(merged, "width")
    out["height"] = _positive_int(merged, "height")
    out["fps"] = _positive_int(merged, "fps")

    try:
        render_scale = float(merged["render_scale"])
    except (TypeError, ValueError):
        raise ValueError(f"render_scale must be a number, got {merged['render_scale']!r}") from None
    if not 0.0 < render_scale <= 1.0:
        raise ValueError(f"render_scale must be in (0, 1], got {render_scale}")
    out["render_scale"] = render_scale

    out["flow_enabled"] = _bool(merged, "flow_enabled")
    out["rays_enabled"] = _bool(merged, "rays_enabled")

    use_gpu = merged["use_gpu"]
    if use_gpu is not None and not isinstance(use_gpu, bool):
        raise ValueError(f"use_gpu must be true, false or null, got {use_gpu!r}")
    out["use_gpu"] = use_gpu

    log_level = str(merged["log_level"]).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {merged['log_level']!r}")
    out["log_level"] = log_level

    log_file = merged["log_file"]
    out["log_file"] = str(log_file) if log_file else None
    return out
