"""core.settings_store をテスト。"""

from __future__ import annotations

import json
import logging

from typefx.core.animation import AnimationConfig
from typefx.core.effect_list import create_effect
from typefx.core.runtime_config import set_config_path
from typefx.core.settings_store import (
    Settings,
    decode_settings,
    default_settings_path,
    load_settings,
    save_settings,
)


def test_save_then_load_restores_state(tmp_path) -> None:
    e = create_effect("outline", effect_id="o")
    settings = Settings(
        selected_font="Roboto-Regular.ttf",
        text="Hi\nthere",
        wireframe=True,
        effects=(e,),
        animations={"o": {"thickness": AnimationConfig(enabled=True, max=20.0)}},
    )
    path = save_settings(settings, tmp_path / "state" / "settings.json")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["selectedFont"] == "Roboto-Regular.ttf"
    assert payload["wireframeMode"] is True

    assert load_settings(path) == settings


def test_load_settings_missing_or_corrupt_file_gives_defaults(tmp_path) -> None:
    assert load_settings(tmp_path / "missing.json") == Settings()
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_settings(broken) == Settings()


def test_decode_settings_falls_back_per_key(caplog) -> None:
    payload = {
        "selectedFont": "",
        "text": "Keep me",
        "wireframeMode": "true",
        "effects": {"not": "a list"},
        "animations": {"x": {"count": {"enabled": True}}},
    }
    with caplog.at_level(logging.WARNING):
        s = decode_settings(payload)
    assert s.selected_font is None
    assert s.text == "Keep me"
    assert s.wireframe is True
    assert s.effects == ()
    assert set(s.animations) == {"x"}
    assert "effects" in caplog.text


def test_decode_settings_non_object_payload() -> None:
    assert decode_settings([1, 2, 3]) == Settings()
    assert Settings().text == "Type"


def test_default_settings_path_follows_config(tmp_path) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "\n".join(
            [
                "version: 1",
                "paths:",
                '  output_dir: "out"',
                f'  settings_path: "{tmp_path / "s.json"}"',
                "",
            ]
        ),
        encoding="utf-8",
    )
    set_config_path(cfg)
    assert default_settings_path() == tmp_path / "s.json"

    save_settings(Settings(text="Saved"))
    assert load_settings().text == "Saved"
