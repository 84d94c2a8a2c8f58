# どこで: `src/typefx/core/pipeline.py`。
# 何を: テキスト → Scene（レイアウト）→ effect 適用 → bbox / viewport を持つ Frame を組み立てる。
# なぜ: ライブプレビューと書き出しが同じフレーム生成経路を共有するため。

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from typefx.core.builtins import ensure_builtin_effects_registered
from typefx.core.effect_list import Effect
from typefx.core.effect_registry import effect_registry
from typefx.core.glyphs import GlyphOutlineProvider
from typefx.core.path_model import transform_commands
from typefx.core.scene import (
    Bounds,
    CharGroup,
    Outline,
    PathStyle,
    Scene,
    outline_bounds,
    scene_bounds,
    union_bounds,
)

logger = logging.getLogger(__name__)

FONT_SIZE = 200.0
LINE_HEIGHT = FONT_SIZE * 1.2
START_X = 50.0
# 1 行目のベースライン。
START_Y = 250.0

# viewport はコンテンツ寸法のこの倍率（ズームアウトの余白）。
VIEWPORT_SCALE = 5.0
MIN_VIEWPORT_SIZE = (800.0, 400.0)
DEFAULT_BOUNDS: Bounds = (0.0, 0.0, 800.0, 400.0)

FILL_STYLE = PathStyle(fill="currentColor")
WIREFRAME_STYLE = PathStyle(fill="none", stroke="currentColor", stroke_width=2.0)


@dataclass(frozen=True, slots=True)
class Viewport:
    x: float
    y: float
    width: float
    height: float

    def as_viewbox(self) -> str:
        return f"{self.x:g} {self.y:g} {self.width:g} {self.height:g}"


@dataclass(frozen=True, slots=True)
class Frame:
    """effect 適用済みシーンと、それを収める viewport。"""

    scene: Scene
    viewport: Viewport


def layout_text(text: str, font: GlyphOutlineProvider, wireframe: bool = False) -> Scene:
    """テキストを 1 文字 1 グループのシーンへレイアウトする。

    Notes
    -----
    - 行は "\\n" で分割する。空行はスキップするが行インデックスは進める。
    - 輪郭を持たない文字（空白など）も空のグループとして残す。
    - 送り幅は `advance_width * FONT_SIZE / units_per_em`。
    """

    scale = FONT_SIZE / float(font.units_per_em)
    style = WIREFRAME_STYLE if wireframe else FILL_STYLE

    groups: list[CharGroup] = []
    for line_index, line in enumerate(str(text).split("\n")):
        if not line:
            continue
        x = START_X
        y = START_Y + line_index * LINE_HEIGHT
        for char_index, char in enumerate(line):
            g = font.glyph(char)
            outlines: tuple[Outline, ...] = ()
            if g.commands:
                # フォント単位（y 上向き）→ シーン座標（y 下向き）。
                placed = transform_commands(g.commands, (scale, 0.0, 0.0, -scale, x, y))
                outlines = (Outline(commands=tuple(placed), style=style),)
            groups.append(
                CharGroup(char=char, char_index=char_index, line_index=line_index, outlines=outlines)
            )
            x += g.advance_width * scale
    return Scene(groups=tuple(groups))


def apply_effects(scene: Scene, effects: Sequence[Effect]) -> Scene:
    """有効な effect をリスト順に適用したシーンを返す（入力は変更しない）。"""

    ensure_builtin_effects_registered()
    out = scene
    for e in effects:
        if not e.enabled:
            continue
        spec = effect_registry.get(e.kind)
        out = spec.func(out, e.params)
    return out


def viewport_for(bounds: Bounds | None) -> Viewport:
    """コンテンツ bbox から viewport を求める（5 倍・最小 800x400・中央揃え）。"""

    min_x, min_y, max_x, max_y = DEFAULT_BOUNDS if bounds is None else bounds
    width = max_x - min_x
    height = max_y - min_y
    vw = max(width * VIEWPORT_SCALE, MIN_VIEWPORT_SIZE[0])
    vh = max(height * VIEWPORT_SCALE, MIN_VIEWPORT_SIZE[1])
    cx = min_x + width / 2.0
    cy = min_y + height / 2.0
    return Viewport(x=cx - vw / 2.0, y=cy - vh / 2.0, width=vw, height=vh)


def render_frame(
    text: str,
    font: GlyphOutlineProvider,
    wireframe: bool,
    effects: Sequence[Effect],
) -> Frame:
    """1 フレーム分のシーンと viewport を生成する。

    bbox は「配置直後のグリフ」と「effect 適用後の全アウトライン（グループ変換込み）」の和。
    測れないアウトラインは無視し、何も測れなければ (0, 0)-(800, 400) を使う。
    """

    base = layout_text(text, font, wireframe)
    scene = apply_effects(base, effects)

    glyph_bounds = union_bounds(outline_bounds(o) for g in base.groups for o in g.outlines)
    bounds = union_bounds((glyph_bounds, scene_bounds(scene)))
    if bounds is None:
        logger.debug("No measurable outlines; using default viewport")
    return Frame(scene=scene, viewport=viewport_for(bounds))


__all__ = [
    "FILL_STYLE",
    "FONT_SIZE",
    "Frame",
    "LINE_HEIGHT",
    "START_X",
    "START_Y",
    "Viewport",
    "WIREFRAME_STYLE",
    "apply_effects",
    "layout_text",
    "render_frame",
    "viewport_for",
]
