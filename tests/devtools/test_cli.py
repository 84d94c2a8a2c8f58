from __future__ import annotations

import json

from typefx.__main__ import main as typefx_main
from typefx.core.effect_list import create_effect
from typefx.core.settings_store import Settings, save_settings
from typefx.devtools import export_text, list_builtins


def test_list_effects(capsys) -> None:
    assert list_builtins.main(["effects"]) == 0
    out = capsys.readouterr().out
    assert "multiply (Multiply): count, offset_x, offset_y, rotation, opacity_decay" in out
    assert "fonts:" not in out


def test_list_fonts_from_config_dir(tmp_path, capsys, tiny_font_path) -> None:
    font_dir = tmp_path / "fonts" / "Tiny"
    font_dir.mkdir(parents=True)
    (font_dir / "Tiny-Regular.ttf").write_bytes(tiny_font_path.read_bytes())
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "\n".join(["version: 1", "paths:", '  output_dir: "out"', "  font_dirs:", f'    - "{tmp_path / "fonts"}"', ""]),
        encoding="utf-8",
    )
    assert list_builtins.main(["fonts", "--config", str(cfg)]) == 0
    assert "Tiny\tTiny-Regular.ttf\t" in capsys.readouterr().out


def test_export_svg(tmp_path, capsys, tiny_font_path) -> None:
    out = tmp_path / "a.svg"
    code = export_text.main(
        [
            "--fmt",
            "svg",
            "--font",
            str(tiny_font_path),
            "--text",
            "AO",
            "--settings",
            str(tmp_path / "missing.json"),
            "--out",
            str(out),
        ]
    )
    assert code == 0
    assert out.read_text(encoding="utf-8").startswith("<svg")
    assert f"Saved SVG: {out}" in capsys.readouterr().out


def test_export_gif_uses_saved_settings(tmp_path, capsys, tiny_font_path) -> None:
    settings_path = save_settings(
        Settings(selected_font=str(tiny_font_path), text="A", effects=(create_effect("outline"),)),
        tmp_path / "settings.json",
    )
    assert json.loads(settings_path.read_text(encoding="utf-8"))["text"] == "A"

    code = export_text.main(
        [
            "--settings",
            str(settings_path),
            "--canvas",
            "40",
            "30",
            "--fps",
            "5",
            "--duration",
            "0.4",
            "--run-id",
            "t1",
        ]
    )
    assert code == 0
    out = capsys.readouterr().out
    assert "Saved GIF: " in out
    saved = tmp_path / "data" / "output" / "gif" / "A_40x30_t1.gif"
    assert saved.read_bytes().startswith(b"GIF89a")


def test_export_without_font_fails(tmp_path, capsys) -> None:
    assert export_text.main(["--settings", str(tmp_path / "none.json")]) == 2
    assert "--font" in capsys.readouterr().err


def test_export_missing_font_reports_error(tmp_path, capsys) -> None:
    code = export_text.main(["--font", "no-such-font-for-cli-test.ttf", "--settings", str(tmp_path / "x.json")])
    assert code == 1
    assert "error:" in capsys.readouterr().err


def test_main_dispatches_subcommands(capsys) -> None:
    assert typefx_main(["list", "effects"]) == 0
    assert "distortion" in capsys.readouterr().out
