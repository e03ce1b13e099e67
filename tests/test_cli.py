import json

import pytest

from living_mandelbrot import cli


def parse(*argv):
    return cli.build_arg_parser().parse_args(list(argv))


def test_defaults_without_flags():
    cfg = cli.settings_from_args(parse())
    assert cfg["width"] == 800
    assert cfg["use_gpu"] is None
    assert cfg["flow_enabled"] is True


def test_flags_override_settings():
    cfg = cli.settings_from_args(parse(
        "--width", "640", "--height", "360", "--fps", "30", "--render-scale", "0.5",
        "--no-flow", "--cpu", "--log-level", "debug",
    ))
    assert (cfg["width"], cfg["height"], cfg["fps"]) == (640, 360, 30)
    assert cfg["render_scale"] == 0.5
    assert cfg["flow_enabled"] is False
    assert cfg["rays_enabled"] is True
    assert cfg["use_gpu"] is False
    assert cfg["log_level"] == "DEBUG"


def test_flags_override_config_file(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"width": 1000, "rays_enabled": False}), encoding="utf-8")
    cfg = cli.settings_from_args(parse("--config", str(path), "--width", "500", "--gpu"))
    assert cfg["width"] == 500
    assert cfg["rays_enabled"] is False
    assert cfg["use_gpu"] is True


def test_gpu_and_cpu_are_exclusive():
    with pytest.raises(SystemExit):
        parse("--gpu", "--cpu")


def test_invalid_settings_exit_with_status_two(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"width": -1}), encoding="utf-8")
    assert cli.main(["--config", str(path)]) == 2


def test_invalid_render_scale_flag_exits_with_status_two():
    assert cli.main(["--render-scale", "3"]) == 2
