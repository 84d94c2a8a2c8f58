"""Frame をスタンドアロンの SVG 文書へシリアライズする。"""

from __future__ import annotations

from pathlib import Path
from xml.sax.saxutils import quoteattr

from typefx.core.path_model import serialize_path
from typefx.core.pipeline import Frame
from typefx.core.scene import IDENTITY, CharGroup, Outline, affine_to_svg

_SVG_NS = "http://www.w3.org/2000/svg"


def _fmt(value: float) -> str:
    return f"{float(value):g}"


def _path_element(outline: Outline) -> str:
    style = outline.style
    attrs = [f"d={quoteattr(serialize_path(outline.commands))}"]
    if style.fill is not None:
        attrs.append(f"fill={quoteattr(style.fill)}")
    if style.stroke is not None:
        attrs.append(f"stroke={quoteattr(style.stroke)}")
    if style.stroke_width is not None:
        attrs.append(f'stroke-width="{_fmt(style.stroke_width)}"')
    if style.stroke_linejoin is not None:
        attrs.append(f"stroke-linejoin={quoteattr(style.stroke_linejoin)}")
    if style.stroke_linecap is not None:
        attrs.append(f"stroke-linecap={quoteattr(style.stroke_linecap)}")
    if style.paint_order is not None:
        attrs.append(f"paint-order={quoteattr(style.paint_order)}")
    return "<path " + " ".join(attrs) + "/>"


def _group_element(group: CharGroup) -> str:
    attrs = [
        f"data-char={quoteattr(group.char)}",
        f'data-char-index="{int(group.char_index)}"',
        f'data-line-index="{int(group.line_index)}"',
    ]
    if group.duplicate:
        attrs.append('data-effect-duplicate="true"')
    if group.transform != IDENTITY:
        attrs.append(f'transform="{affine_to_svg(group.transform)}"')
    if group.opacity < 1.0:
        attrs.append(f'opacity="{_fmt(group.opacity)}"')
    body = "".join(_path_element(o) for o in group.outlines)
    return f"<g {' '.join(attrs)}>{body}</g>"


def frame_to_svg(
    frame: Frame,
    *,
    current_color: str = "#ffffff",
    background_color: str | None = None,
) -> str:
    """Frame を SVG 文字列にする。

    `currentColor` はルート要素の `color` で解決されるため、パス側はそのまま残す。
    `background_color` を指定すると viewport 全面に背景矩形を敷く。
    """

    vp = frame.viewport
    parts = [
        f'<svg xmlns="{_SVG_NS}" viewBox="{vp.as_viewbox()}" '
        f"style={quoteattr(f'color: {current_color}')}>"
    ]
    if background_color is not None:
        parts.append(
            f'<rect x="{_fmt(vp.x)}" y="{_fmt(vp.y)}" width="{_fmt(vp.width)}" '
            f'height="{_fmt(vp.height)}" fill={quoteattr(background_color)}/>'
        )
    parts.extend(_group_element(g) for g in frame.scene.groups)
    parts.append("</svg>")
    return "\n".join(parts) + "\n"


def save_svg(frame: Frame, path: str | Path, **kwargs) -> Path:  # type: ignore[no-untyped-def]
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(frame_to_svg(frame, **kwargs), encoding="utf-8")
    return p


__all__ = ["frame_to_svg", "save_svg"]
