from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from typefx.core.glyphs import Glyph
from typefx.core.path_model import close_path, line_to, move_to
from typefx.core.runtime_config import set_config_path


@pytest.fixture(autouse=True)
def _isolated_runtime_config(tmp_path, monkeypatch) -> Iterator[None]:
    # ./.typefx/config.yaml の探索と相対 output_dir を tmp_path 配下へ閉じ込める。
    monkeypatch.chdir(tmp_path)
    set_config_path(None)
    yield
    set_config_path(None)


def _box_glyph(x0: int, y0: int, x1: int, y1: int):
    pen = TTGlyphPen(None)
    pen.moveTo((x0, y0))
    pen.lineTo((x0, y1))
    pen.lineTo((x1, y1))
    pen.lineTo((x1, y0))
    pen.closePath()
    return pen.glyph()


def _round_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((300, 0))
    pen.qCurveTo((550, 0), (550, 350))
    pen.qCurveTo((550, 700), (300, 700))
    pen.qCurveTo((50, 700), (50, 350))
    pen.qCurveTo((50, 0), (300, 0))
    pen.closePath()
    return pen.glyph()


def build_tiny_font(path: Path) -> Path:
    """.notdef / space / A（矩形）/ O（2 次曲線）だけを持つ TrueType フォントを書き出す。"""

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "space", "A", "O"])
    fb.setupCharacterMap({32: "space", 65: "A", 79: "O"})
    glyphs = {
        ".notdef": _box_glyph(50, 0, 450, 700),
        "space": TTGlyphPen(None).glyph(),
        "A": _box_glyph(100, 0, 500, 700),
        "O": _round_glyph(),
    }
    fb.setupGlyf(glyphs)
    glyf = fb.font["glyf"]
    advances = {".notdef": 500, "space": 250, "A": 600, "O": 600}
    fb.setupHorizontalMetrics(
        {name: (adv, getattr(glyf[name], "xMin", 0)) for name, adv in advances.items()}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "TypefxTest", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    fb.save(str(path))
    return path


@pytest.fixture(scope="session")
def tiny_font_path(tmp_path_factory) -> Path:
    return build_tiny_font(tmp_path_factory.mktemp("fonts") / "TypefxTest-Regular.ttf")


class BoxFont:
    """空白以外を 500x700 の矩形として返す、ファイル不要のグリフ供給。"""

    units_per_em = 1000.0

    def glyph(self, char: str) -> Glyph:
        if char.isspace():
            return Glyph(commands=(), advance_width=250.0)
        commands = (
            move_to(0, 0),
            line_to(0, 700),
            line_to(500, 700),
            line_to(500, 0),
            close_path(),
        )
        return Glyph(commands=commands, advance_width=500.0)


@pytest.fixture
def box_font() -> BoxFont:
    return BoxFont()
