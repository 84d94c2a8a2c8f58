# どこで: `src/typefx/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: フォント探索先・出力先・書き出し既定値をユーザーが指定できるようにするため。

"""実行時設定（`config.yaml`）の探索・ロード・キャッシュを担当する。

このモジュールは、以下を提供する:

- `config.yaml` を「同梱デフォルト → ユーザー設定（任意）」の順に適用して `RuntimeConfig` を構築
- 探索パス（CWD / HOME）と、明示指定（`set_config_path()`）の両方に対応
- 1 回ロードした結果をプロセス内でキャッシュ（設定を切り替える場合は `set_config_path()` で破棄）

実装メモ
--------
- ユーザー設定の適用は `dict.update()`（トップレベルの浅い上書き）で行う。
  ネストした mapping は「部分的にマージ」されず「丸ごと置換」される。
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

# paths.settings_path が省略された場合のフォールバック。
_SETTINGS_PATH_DEFAULT = "~/.config/typefx/settings.json"


@dataclass(frozen=True, slots=True)
class GifExportConfig:
    """GIF 書き出しの既定値（`config.yaml` の `export.gif`）。"""

    width: int
    height: int
    fps: float
    foreground_color: str
    background_color: str
    supersample: int
    yield_every: int


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """typefx の実行時設定。

    Attributes
    ----------
    config_path:
        実際に採用されたユーザー設定ファイルのパス。無ければ None。
    output_dir:
        生成物（GIF / SVG）の出力先ディレクトリ。
    font_dirs:
        フォント探索用のディレクトリ列。
    settings_path:
        エディタ状態（effect / アニメーション / プリセット）を保存する JSON ファイル。
    gif:
        GIF 書き出しの既定値。
    """

    config_path: Path | None
    output_dir: Path
    font_dirs: tuple[Path, ...]
    settings_path: Path
    gif: GifExportConfig


# `set_config_path()` で指定される「明示 config」のパス。
_EXPLICIT_CONFIG_PATH: Path | None = None
# `runtime_config()` のプロセス内キャッシュ。設定を切り替える場合は破棄する。
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    - `path` を None にすると明示指定を解除し、既定の探索に戻る。
    - 設定が変わるため、`runtime_config()` のキャッシュを破棄する。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    _EXPLICIT_CONFIG_PATH = None if path is None else Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    """既定の `config.yaml` 探索候補を返す（先勝ち）。"""

    return (
        Path.cwd() / ".typefx" / "config.yaml",
        Path.home() / ".config" / "typefx" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    """パス文字列内の `~` と環境変数を展開して返す。"""

    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    """任意値を「空なら None / それ以外は Path」へ変換する。"""

    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_path_list(value: Any) -> list[Path]:
    """任意値を Path の list に変換する。

    - None → `[]`
    - str → `os.pathsep` 区切りで分解
    - iterable → 各要素を `_as_optional_path()` で変換（空要素は捨てる）
    """

    if value is None:
        return []
    if isinstance(value, str):
        parts = [p for p in value.strip().split(os.pathsep) if p]
        return [Path(_expand_path_text(p)) for p in parts]
    try:
        seq = list(value)
    except TypeError:
        return []

    out: list[Path] = []
    for item in seq:
        p = _as_optional_path(item)
        if p is not None:
            out.append(p)
    return out


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    """任意値を mapping として解釈し、dict に正規化して返す。"""

    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _require(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    """YAML テキストを読み、トップレベル mapping を dict として返す。"""

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    return _load_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱 `typefx/resource/default_config.yaml` をロードして dict を返す。"""

    try:
        blob = (
            resources.files("typefx")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc
    return _load_yaml_text(blob, source="typefx/resource/default_config.yaml")


def _gif_config(export: dict[str, Any]) -> GifExportConfig:
    gif = _as_mapping(export.get("gif"), key="export.gif")
    width = _require(_as_int(gif.get("width"), key="export.gif.width"), key="export.gif.width")
    height = _require(_as_int(gif.get("height"), key="export.gif.height"), key="export.gif.height")
    fps = _require(_as_float(gif.get("fps"), key="export.gif.fps"), key="export.gif.fps")
    supersample = _as_int(gif.get("supersample"), key="export.gif.supersample")
    yield_every = _as_int(gif.get("yield_every"), key="export.gif.yield_every")
    if width <= 0 or height <= 0:
        raise ValueError(f"export.gif の width/height は正の値である必要があります: got={width}x{height}")
    if fps <= 0:
        raise ValueError(f"export.gif.fps は正の値である必要があります: got={fps}")

    supersample_i = 1 if supersample is None else int(supersample)
    yield_every_i = 3 if yield_every is None else int(yield_every)
    if supersample_i < 1:
        raise ValueError(f"export.gif.supersample は 1 以上である必要があります: got={supersample_i}")
    if yield_every_i < 1:
        raise ValueError(f"export.gif.yield_every は 1 以上である必要があります: got={yield_every_i}")

    return GifExportConfig(
        width=int(width),
        height=int(height),
        fps=float(fps),
        foreground_color=str(gif.get("foreground_color") or "#ffffff"),
        background_color=str(gif.get("background_color") or "#000000"),
        supersample=supersample_i,
        yield_every=yield_every_i,
    )


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    読み込み元の優先順位（後勝ち）:
    1) 同梱 `typefx/resource/default_config.yaml`
    2) 探索で見つかった `config.yaml`（任意）
    3) `set_config_path()` で明示指定された `config.yaml`（任意）

    Raises
    ------
    FileNotFoundError
        明示指定された config.yaml が存在しない場合。
    RuntimeError
        YAML が読めない、必須キーが欠けている、version が未対応の場合。
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload.update(_load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload.update(_load_yaml_config(explicit_path))

    version = _as_int(_require(payload.get("version"), key="version"), key="version")
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _require(_as_optional_path(paths.get("output_dir")), key="paths.output_dir")
    settings_path = _as_optional_path(paths.get("settings_path"))
    if settings_path is None:
        settings_path = Path(_expand_path_text(_SETTINGS_PATH_DEFAULT))
    font_dirs = _as_path_list(paths.get("font_dirs"))

    export = _as_mapping(payload.get("export"), key="export")

    cfg = RuntimeConfig(
        config_path=explicit_path if explicit_path is not None else discovered_path,
        output_dir=output_dir,
        font_dirs=tuple(font_dirs),
        settings_path=settings_path,
        gif=_gif_config(export),
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。"""

    return Path(runtime_config().output_dir)


__all__ = [
    "GifExportConfig",
    "RuntimeConfig",
    "output_root_dir",
    "runtime_config",
    "set_config_path",
]
