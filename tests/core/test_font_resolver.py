from __future__ import annotations

import sys
from pathlib import Path

import pytest

from typefx.core.font_resolver import (
    _search_dirs,
    _system_font_dirs,
    list_font_files,
    resolve_font_path,
)
from typefx.core.runtime_config import set_config_path


def _font_tree(root: Path) -> Path:
    (root / "Roboto").mkdir(parents=True)
    (root / "Roboto" / "Roboto-Regular.ttf").write_bytes(b"\0")
    (root / "Roboto" / "notes.txt").write_text("not a font", encoding="utf-8")
    (root / "Loose.OTF").write_bytes(b"\0")
    return root


def _use_font_dir(tmp_path: Path, font_dir: Path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "\n".join(["version: 1", "paths:", '  output_dir: "out"', "  font_dirs:", f'    - "{font_dir}"', ""]),
        encoding="utf-8",
    )
    set_config_path(cfg)


def test_resolve_font_path_by_existing_path(tmp_path) -> None:
    root = _font_tree(tmp_path / "fonts")
    target = root / "Roboto" / "Roboto-Regular.ttf"
    assert resolve_font_path(str(target)) == target.resolve()


def test_resolve_font_path_by_file_name_and_stem(tmp_path) -> None:
    root = _font_tree(tmp_path / "fonts")
    _use_font_dir(tmp_path, root)
    expected = (root / "Roboto" / "Roboto-Regular.ttf").resolve()
    assert resolve_font_path("Roboto-Regular.ttf") == expected
    assert resolve_font_path("roboto-regular") == expected


def test_resolve_font_path_not_found_lists_searched_dirs(tmp_path) -> None:
    root = _font_tree(tmp_path / "fonts")
    _use_font_dir(tmp_path, root)
    with pytest.raises(FileNotFoundError) as exc_info:
        resolve_font_path("definitely-not-installed-font-xyz.ttf")
    msg = str(exc_info.value)
    assert "searched_dirs=" in msg
    assert str(root) in msg
    assert "paths.font_dirs:" in msg


def test_list_font_files_reports_family_from_directory(tmp_path) -> None:
    root = _font_tree(tmp_path / "fonts")
    files = {f.name: f for f in list_font_files([root])}
    assert set(files) == {"Roboto-Regular.ttf", "Loose.OTF"}
    assert files["Roboto-Regular.ttf"].family == "Roboto"
    assert files["Roboto-Regular.ttf"].relative_path == Path("Roboto/Roboto-Regular.ttf")
    assert files["Loose.OTF"].family == "Unknown"


def test_search_dirs_puts_config_dirs_first(tmp_path) -> None:
    root = _font_tree(tmp_path / "fonts")
    _use_font_dir(tmp_path, root)
    dirs = _search_dirs()
    assert dirs[0] == root
    assert {d for d in _system_font_dirs() if d.is_dir()} <= set(dirs)


def test_system_font_dirs_returns_platform_paths() -> None:
    dirs = _system_font_dirs()
    assert len(dirs) >= 2
    if sys.platform == "darwin":
        assert Path("/Library/Fonts") in dirs
    elif sys.platform.startswith("linux"):
        assert Path("/usr/share/fonts") in dirs
