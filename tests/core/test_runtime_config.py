from __future__ import annotations

import os
from pathlib import Path

import pytest

from typefx.core.runtime_config import output_root_dir, runtime_config, set_config_path


def _write(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join([*lines, ""]), encoding="utf-8")
    return path


def test_packaged_defaults(tmp_path) -> None:
    set_config_path(_write(tmp_path / "config.yaml", ["version: 1"]))
    cfg = runtime_config()
    assert cfg.output_dir == Path("data/output")
    assert cfg.font_dirs == ()
    assert cfg.gif.width == 800
    assert cfg.gif.height == 600
    assert cfg.gif.fps == 20.0
    assert cfg.gif.supersample == 2
    assert cfg.gif.yield_every == 3
    assert cfg.settings_path.name == "settings.json"


def test_explicit_config_replaces_top_level_mappings(tmp_path) -> None:
    fonts_a = tmp_path / "a"
    fonts_b = tmp_path / "b"
    cfg_path = _write(
        tmp_path / "config.yaml",
        [
            "version: 1",
            "paths:",
            f'  output_dir: "{tmp_path / "out"}"',
            f'  font_dirs: "{fonts_a}{os.pathsep}{fonts_b}"',
            "export:",
            "  gif:",
            "    width: 320",
            "    height: 240",
            "    fps: 10",
        ],
    )
    set_config_path(cfg_path)
    cfg = runtime_config()
    assert cfg.config_path == cfg_path
    assert output_root_dir() == tmp_path / "out"
    assert cfg.font_dirs == (fonts_a, fonts_b)
    assert (cfg.gif.width, cfg.gif.height, cfg.gif.fps) == (320, 240, 10.0)
    # export.gif は丸ごと置換されるため、省略キーはコード側の既定値になる。
    assert cfg.gif.supersample == 1
    assert cfg.gif.foreground_color == "#ffffff"


def test_runtime_config_is_cached_until_path_changes(tmp_path) -> None:
    set_config_path(_write(tmp_path / "one.yaml", ["version: 1"]))
    first = runtime_config()
    assert runtime_config() is first
    set_config_path(_write(tmp_path / "two.yaml", ["version: 1"]))
    assert runtime_config() is not first


def test_missing_explicit_config_raises(tmp_path) -> None:
    set_config_path(tmp_path / "nope.yaml")
    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    "lines",
    [
        ["version: 2"],
        ["version: 1", "paths: [1, 2]"],
        ["version: 1", "export:", "  gif:", "    width: wide", "    height: 1", "    fps: 1"],
        ["version: [unclosed"],
    ],
)
def test_invalid_config_raises_runtime_error(tmp_path, lines) -> None:
    set_config_path(_write(tmp_path / "config.yaml", lines))
    with pytest.raises(RuntimeError):
        runtime_config()


def test_non_positive_gif_size_is_rejected(tmp_path) -> None:
    set_config_path(
        _write(
            tmp_path / "config.yaml",
            ["version: 1", "export:", "  gif:", "    width: 0", "    height: 10", "    fps: 5"],
        )
    )
    with pytest.raises(ValueError):
        runtime_config()
