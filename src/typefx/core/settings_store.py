# どこで: `src/typefx/core/settings_store.py`。
# 何を: エディタ状態（フォント / テキスト / effect / アニメーション / プリセット）を JSON ファイルへ保存・復元する。
# なぜ: 次回起動時に前回の状態から再開できるようにするため。

"""エディタ状態の JSON ファイル永続化。

保存先は既定で `runtime_config().settings_path`。キー単位で読み、
壊れたキーはログを出して既定値へ戻す（他のキーは生かす）。
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from typefx.core.animation import EffectAnimations
from typefx.core.effect_list import Effect
from typefx.core.parameters import codec
from typefx.core.presets import Preset
from typefx.core.runtime_config import runtime_config

logger = logging.getLogger(__name__)

DEFAULT_TEXT = "Type"


@dataclass(frozen=True, slots=True)
class Settings:
    selected_font: str | None = None
    text: str = DEFAULT_TEXT
    wireframe: bool = False
    effects: tuple[Effect, ...] = ()
    animations: EffectAnimations = field(default_factory=dict)
    presets: tuple[Preset, ...] = ()


def default_settings_path() -> Path:
    return Path(runtime_config().settings_path)


def encode_settings(settings: Settings) -> dict[str, Any]:
    return {
        "selectedFont": settings.selected_font,
        "text": settings.text,
        "wireframeMode": bool(settings.wireframe),
        "effects": codec.encode_effects(settings.effects),
        "animations": codec.encode_animations(settings.animations),
        "presets": codec.encode_presets(settings.presets),
    }


def decode_settings(payload: Any) -> Settings:
    """dict から `Settings` を復元する。壊れたキーは既定値に戻す。"""

    if not isinstance(payload, dict):
        logger.warning("Settings payload is not an object; using defaults")
        return Settings()

    base = Settings()
    font = payload.get("selectedFont")
    text = payload.get("text")
    wireframe = payload.get("wireframeMode")

    def _decode(key: str, decoder: Any, default: Any) -> Any:
        if key not in payload:
            return default
        try:
            return decoder(payload[key])
        except TypeError as exc:
            logger.warning("Failed to parse saved %s: %s", key, exc)
            return default

    return Settings(
        selected_font=font if isinstance(font, str) and font else base.selected_font,
        text=text if isinstance(text, str) and text else base.text,
        wireframe=wireframe is True or wireframe == "true",
        effects=_decode("effects", codec.decode_effects, base.effects),
        animations=_decode("animations", codec.decode_animations, {}),
        presets=_decode("presets", codec.decode_presets, base.presets),
    )


def load_settings(path: str | Path | None = None) -> Settings:
    """保存済みの状態を読み込む。ファイルが無い / 読めない場合は既定値。"""

    p = default_settings_path() if path is None else Path(path)
    if not p.is_file():
        return Settings()
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Failed to load settings from %s: %s", p, exc)
        return Settings()
    return decode_settings(payload)


def save_settings(settings: Settings, path: str | Path | None = None) -> Path:
    """状態を JSON として書き出し、保存先パスを返す。"""

    p = default_settings_path() if path is None else Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(codec.dumps(encode_settings(settings)) + "\n", encoding="utf-8")
    return p


__all__ = [
    "DEFAULT_TEXT",
    "Settings",
    "decode_settings",
    "default_settings_path",
    "encode_settings",
    "load_settings",
    "save_settings",
]
