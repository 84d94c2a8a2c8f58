"""グリフ輪郭に currentColor のストロークを付け、縁取りする effect。"""

from __future__ import annotations

from dataclasses import dataclass, replace

from typefx.core.effect_registry import effect
from typefx.core.parameters.meta import ParamMeta
from typefx.core.scene import Outline, Scene

outline_meta = {
    "thickness": ParamMeta(kind="float", ui_min=0.0, ui_max=50.0, step=0.5),
    "style": ParamMeta(kind="choice", choices=("round", "square")),
}


@dataclass(frozen=True, slots=True)
class OutlineParams:
    thickness: float = 8.0
    style: str = "round"


@effect(params=OutlineParams, meta=outline_meta)
def outline(scene: Scene, p: OutlineParams) -> Scene:
    """全アウトラインへストローク属性を設定する。

    join は round / それ以外は miter、cap は round / それ以外は square。
    塗りより先にストロークを描く（paint-order: stroke fill）。
    """

    rounded = p.style == "round"
    join = "round" if rounded else "miter"
    cap = "round" if rounded else "square"
    width = float(p.thickness)

    def _apply(o: Outline) -> Outline:
        style = replace(
            o.style,
            stroke="currentColor",
            stroke_width=width,
            stroke_linejoin=join,
            stroke_linecap=cap,
            paint_order="stroke fill",
        )
        return replace(o, style=style)

    return scene.map_outlines(_apply)


__all__ = ["OutlineParams", "outline", "outline_meta"]
