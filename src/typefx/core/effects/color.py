"""塗り / 線の色を HSL 指定の色へ置き換える effect。"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from typefx.core.effect_registry import effect
from typefx.core.parameters.meta import ParamMeta
from typefx.core.scene import Outline, Scene

color_meta = {
    "hue": ParamMeta(kind="float", ui_min=0.0, ui_max=360.0, step=1),
    "saturation": ParamMeta(kind="float", ui_min=0.0, ui_max=100.0, step=1),
    "lightness": ParamMeta(kind="float", ui_min=0.0, ui_max=100.0, step=1),
}


@dataclass(frozen=True, slots=True)
class ColorParams:
    hue: float = 0.0
    saturation: float = 100.0
    lightness: float = 50.0

    def __post_init__(self) -> None:
        for name in ("hue", "saturation", "lightness"):
            v = float(getattr(self, name))
            if not math.isfinite(v):
                raise ValueError(f"{name} は有限の数値である必要があります: got={v!r}")


def _fmt(value: float) -> str:
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"色成分が有限ではありません: got={value!r}")
    if v == int(v):
        return str(int(v))
    return repr(v)


def hsl_string(hue: float, saturation: float, lightness: float) -> str:
    """`hsl(H, S%, L%)` 形式の CSS 色文字列を返す。"""
    return f"hsl({_fmt(hue)}, {_fmt(saturation)}%, {_fmt(lightness)}%)"


def _recolor(value: str | None, color: str) -> str | None:
    if value is None or value == "none":
        return value
    return color


@effect(params=ColorParams, meta=color_meta)
def color(scene: Scene, p: ColorParams) -> Scene:
    """設定済み（かつ "none" でない）fill / stroke を HSL 色へ置き換える。"""

    c = hsl_string(p.hue, p.saturation, p.lightness)

    def _apply(o: Outline) -> Outline:
        style = replace(
            o.style,
            fill=_recolor(o.style.fill, c),
            stroke=_recolor(o.style.stroke, c),
        )
        return replace(o, style=style)

    return scene.map_outlines(_apply)


__all__ = ["ColorParams", "color", "color_meta", "hsl_string"]
