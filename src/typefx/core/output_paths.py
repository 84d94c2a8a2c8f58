# どこで: `src/typefx/core/output_paths.py`。
# 何を: 書き出しファイル（GIF / SVG）の既定保存先パスを決める。
# なぜ: `output/{kind}/` 配下へテキストとサイズから決まる名前で整理して保存するため。

from __future__ import annotations

from pathlib import Path
import re

from typefx.core.runtime_config import output_root_dir

# ファイル名に埋め込むテキストの最大長。
_MAX_STEM_LEN = 32


def _sanitize(text: str) -> str:
    """ファイル名の一部として使える形に正規化して返す。"""

    return re.sub(r"[^A-Za-z0-9._-]+", "_", str(text))


def _run_id_suffix(run_id: str | None) -> str:
    """run_id の接尾辞（例: `_v1`）を返す。未指定なら空文字を返す。"""

    if run_id is None:
        return ""
    sanitized = _sanitize(str(run_id).strip()).strip("_")
    return f"_{sanitized}" if sanitized else ""


def _fmt_canvas_dim_for_filename(value: float | int) -> str:
    v = float(value)
    if v <= 0:
        raise ValueError("canvas_size は正の値である必要がある")
    if abs(v - round(v)) < 1e-9:
        return str(int(round(v)))
    s = f"{v:.3f}".rstrip("0").rstrip(".")
    return s if s else "0"


def _canvas_size_suffix(canvas_size: tuple[float | int, float | int] | None) -> str:
    """canvas_size の接尾辞（例: `_800x600`）を返す。未指定なら空文字を返す。"""

    if canvas_size is None:
        return ""
    w, h = canvas_size
    return f"_{_fmt_canvas_dim_for_filename(w)}x{_fmt_canvas_dim_for_filename(h)}"


def _text_stem(text: str) -> str:
    stem = _sanitize(" ".join(str(text).split())).strip("_.")
    if len(stem) > _MAX_STEM_LEN:
        stem = stem[:_MAX_STEM_LEN].rstrip("_.")
    return stem or "untitled"


def output_path_for_text(
    text: str,
    *,
    kind: str,
    ext: str,
    canvas_size: tuple[float | int, float | int] | None = None,
    run_id: str | None = None,
) -> Path:
    """テキストから書き出しファイルの保存先パスを返す。

    Notes
    -----
    - `output_root/{kind}/<text>[_WxH][_run_id].{ext}` 形式。
    - テキストはファイル名に使えない文字を `_` へ置換し、32 文字で切る。
      空になった場合は `untitled`。
    """

    ext_norm = str(ext).lstrip(".").strip()
    if not ext_norm:
        raise ValueError("ext は空でない必要がある")
    filename = f"{_text_stem(text)}{_canvas_size_suffix(canvas_size)}{_run_id_suffix(run_id)}.{ext_norm}"
    return output_root_dir() / str(kind) / filename


__all__ = ["output_path_for_text"]
