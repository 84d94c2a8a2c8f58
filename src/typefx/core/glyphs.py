"""
どこで: `src/typefx/core/glyphs.py`。フォントからのグリフ輪郭取得。
何を: fontTools の pen でグリフを M/L/C/Q/Z のコマンド列（フォント単位）へ変換し、送り幅と共に返す。
なぜ: レイアウトと effect がフォント形式（TrueType / CFF）を意識せずに輪郭を扱えるようにするため。
"""

from __future__ import annotations

import logging
import struct
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from fontTools.pens.basePen import BasePen
from fontTools.ttLib import TTFont, TTLibError

from typefx.core.font_resolver import resolve_font_path
from typefx.core.path_model import PathCommand, close_path, line_to, move_to

logger = logging.getLogger(__name__)

NOTDEF = ".notdef"


@dataclass(frozen=True, slots=True)
class Glyph:
    """フォント単位（y 上向き）のグリフ輪郭と送り幅。"""

    commands: tuple[PathCommand, ...]
    advance_width: float


class GlyphOutlineProvider(Protocol):
    """1 文字から輪郭と送り幅を返すフォント抽象。"""

    @property
    def units_per_em(self) -> float: ...

    def glyph(self, char: str) -> Glyph: ...


class _CommandPen(BasePen):
    """描画呼び出しを絶対座標の `PathCommand` 列として記録する pen。"""

    def __init__(self, glyph_set: Any) -> None:
        super().__init__(glyph_set)
        self.commands: list[PathCommand] = []

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self.commands.append(move_to(*pt))

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self.commands.append(line_to(*pt))

    def _curveToOne(self, pt1, pt2, pt3) -> None:  # type: ignore[no-untyped-def]
        self.commands.append(PathCommand("C", False, (*map(float, pt1), *map(float, pt2), *map(float, pt3))))

    def _qCurveToOne(self, pt1, pt2) -> None:  # type: ignore[no-untyped-def]
        self.commands.append(PathCommand("Q", False, (*map(float, pt1), *map(float, pt2))))

    def _closePath(self) -> None:
        self.commands.append(close_path())

    def _endPath(self) -> None:
        # 開いた輪郭は閉じない。
        pass


class _LRU:
    """単純な上限付き LRU キャッシュ（キー: str）。"""

    def __init__(self, maxsize: int = 4096) -> None:
        self.maxsize = int(maxsize)
        self._od: "OrderedDict[str, Any]" = OrderedDict()

    def get(self, key: str) -> Any | None:
        value = self._od.get(key)
        if value is not None:
            self._od.move_to_end(key)
        return value

    def set(self, key: str, value: Any) -> None:
        self._od[key] = value
        self._od.move_to_end(key)
        if len(self._od) > self.maxsize:
            self._od.popitem(last=False)


class FontFace:
    """`TTFont` をラップした `GlyphOutlineProvider` 実装（グリフはキャッシュする）。"""

    def __init__(self, tt_font: TTFont, *, source: str = "<memory>", cache_size: int = 4096) -> None:
        self._font = tt_font
        self._source = str(source)
        self._cmap: dict[int, str] = tt_font.getBestCmap() or {}
        self._glyph_set = tt_font.getGlyphSet()
        self._hmtx = tt_font["hmtx"]
        self._units_per_em = float(tt_font["head"].unitsPerEm)
        self._cache = _LRU(maxsize=cache_size)

    @property
    def units_per_em(self) -> float:
        return self._units_per_em

    @property
    def source(self) -> str:
        return self._source

    def _glyph_name(self, char: str) -> str | None:
        name = self._cmap.get(ord(char))
        if name is not None:
            return name
        logger.warning(
            "Character '%s' (U+%04X) not found in font '%s'; using %s",
            char,
            ord(char),
            self._source,
            NOTDEF,
        )
        return NOTDEF if NOTDEF in self._glyph_set else None

    def glyph(self, char: str) -> Glyph:
        """1 文字分の輪郭と送り幅（フォント単位）を返す。

        cmap に無い文字は `.notdef` で代替する。`.notdef` も無ければ空グリフ。
        """

        if len(char) != 1:
            raise ValueError(f"glyph() は 1 文字を受け取る: got={char!r}")
        cached = self._cache.get(char)
        if cached is not None:
            return cached

        name = self._glyph_name(char)
        if name is None:
            out = Glyph(commands=(), advance_width=0.0)
            self._cache.set(char, out)
            return out

        pen = _CommandPen(self._glyph_set)
        self._glyph_set[name].draw(pen)
        advance = float(self._hmtx[name][0]) if name in self._hmtx.metrics else 0.0
        out = Glyph(commands=tuple(pen.commands), advance_width=advance)
        self._cache.set(char, out)
        return out


# 解決済みパス -> FontFace。
_FONTS: dict[str, FontFace] = {}


def load_font(font: str | Path, *, font_number: int = 0) -> FontFace:
    """フォント名 / パスから `FontFace` をロードして返す（キャッシュ）。

    Raises
    ------
    FileNotFoundError
        フォントが見つからない場合。
    RuntimeError
        ファイルはあるがフォントとして読めない場合。
    """

    path = resolve_font_path(font)
    key = f"{path}|{int(font_number)}"
    cached = _FONTS.get(key)
    if cached is not None:
        return cached

    try:
        if path.suffix.lower() in (".ttc", ".otc"):
            tt = TTFont(path, fontNumber=int(font_number))
        else:
            tt = TTFont(path)
        face = FontFace(tt, source=str(path))
    except (OSError, TTLibError, KeyError, AssertionError, struct.error) as exc:
        raise RuntimeError(f"フォントの読み込みに失敗しました: {path}") from exc

    _FONTS[key] = face
    return face


__all__ = ["FontFace", "Glyph", "GlyphOutlineProvider", "NOTDEF", "load_font"]
