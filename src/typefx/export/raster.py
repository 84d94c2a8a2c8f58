# どこで: `src/typefx/export/raster.py`。
# 何を: Frame（ベクターシーン + viewport）を Pillow で RGB ピクセル配列へラスタライズする。
# なぜ: GIF 書き出しがブラウザ等の外部レンダラに依存せず headless で動くようにするため。

"""Frame のラスタライズ。

描画規則
--------
- viewport は `xMidYMid meet`（縦横比を保って中央に収める）で出力サイズへ写す。
- 塗りは SVG 既定の nonzero（ピクセル中心での巻き数が 0 でなければ内側）。
- `paint_order="stroke fill"` ならストロークを先に描く。
- `currentColor` は前景色。解釈できない色は警告して前景色で代用する。
- グループ不透明度 < 1 のグループは別レイヤへ描いてから合成する。
- `supersample` 倍で描いて BOX フィルタで縮小する（簡易アンチエイリアス）。
"""

from __future__ import annotations

import colorsys
import logging
import math
import re

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from typefx.core.path_model import Affine
from typefx.core.path_subdivision import flatten_path
from typefx.core.pipeline import Frame, Viewport
from typefx.core.scene import CharGroup, Outline, compose

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

# 曲線 1 本あたりの平坦化分割数。
_CURVE_SEGMENTS = 16

_HSL_RE = re.compile(
    r"^hsla?\(\s*([-+]?[\d.]+(?:e[-+]?\d+)?)\s*,\s*([-+]?[\d.]+(?:e[-+]?\d+)?)%\s*,"
    r"\s*([-+]?[\d.]+(?:e[-+]?\d+)?)%\s*\)$",
    re.IGNORECASE,
)


def parse_color(value: str) -> RGBA:
    """CSS 色文字列を RGBA へ変換する。

    Pillow の `ImageColor` に加え、小数・範囲外の値を含む `hsl()` も受け付ける。

    Raises
    ------
    ValueError
        解釈できない色文字列の場合。
    """

    m = _HSL_RE.match(str(value).strip())
    if m is not None:
        h = (float(m.group(1)) / 360.0) % 1.0
        s = min(1.0, max(0.0, float(m.group(2)) / 100.0))
        lum = min(1.0, max(0.0, float(m.group(3)) / 100.0))
        r, g, b = colorsys.hls_to_rgb(h, lum, s)
        return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), 255)
    r, g, b, a = ImageColor.getcolor(str(value), "RGBA")  # type: ignore[misc]
    return (int(r), int(g), int(b), int(a))


def _resolve(value: str | None, current: RGBA, *, default: str | None) -> RGBA | None:
    v = default if value is None else value
    if v is None or v == "none":
        return None
    if v == "currentColor":
        return current
    try:
        return parse_color(v)
    except ValueError:
        logger.warning("Unparsable color %r; using foreground color", v)
        return current


def viewport_transform(viewport: Viewport, width: int, height: int) -> Affine:
    """viewport を (width, height) のピクセル座標へ写すアフィン（xMidYMid meet）。"""

    s = min(width / viewport.width, height / viewport.height)
    ox = (width - viewport.width * s) / 2.0 - viewport.x * s
    oy = (height - viewport.height * s) / 2.0 - viewport.y * s
    return (s, 0.0, 0.0, s, ox, oy)


def _map_points(affine: Affine, pts: np.ndarray) -> list[tuple[float, float]]:
    a, b, c, d, e, f = affine
    x = a * pts[:, 0] + c * pts[:, 1] + e
    y = b * pts[:, 0] + d * pts[:, 1] + f
    return list(zip(x.tolist(), y.tolist()))


def _winding_mask(
    polys: list[list[tuple[float, float]]], width: int, height: int
) -> np.ndarray:
    """nonzero 規則の塗りマスク（shape (height, width) bool）を返す。

    各ピクセル中心 (x + 0.5, y + 0.5) から左へ向かう半直線と交差する辺の向き
    （下向き +1 / 上向き -1）を足し合わせ、0 でなければ内側とする。
    """

    edges = [
        np.concatenate([np.asarray(p, dtype=np.float64), np.asarray(p[:1], dtype=np.float64)])
        for p in polys
        if len(p) >= 3
    ]
    if not edges:
        return np.zeros((height, width), dtype=bool)
    starts = np.concatenate([e[:-1] for e in edges])
    ends = np.concatenate([e[1:] for e in edges])
    x0, y0 = starts[:, 0], starts[:, 1]
    x1, y1 = ends[:, 0], ends[:, 1]
    keep = y0 != y1
    x0, y0, x1, y1 = x0[keep], y0[keep], x1[keep], y1[keep]
    direction = np.where(y1 > y0, 1, -1).astype(np.int32)

    # 行 r の中心 r + 0.5 が [ymin, ymax) に入る行だけが交差する。
    ymin = np.minimum(y0, y1)
    ymax = np.maximum(y0, y1)
    r0 = np.clip(np.ceil(ymin - 0.5), 0, height).astype(np.int64)
    r1 = np.clip(np.ceil(ymax - 0.5), 0, height).astype(np.int64)
    counts = np.maximum(r1 - r0, 0)
    total = int(counts.sum())
    if total == 0:
        return np.zeros((height, width), dtype=bool)

    edge_idx = np.repeat(np.arange(counts.shape[0]), counts)
    offsets = np.cumsum(counts) - counts
    rows = r0[edge_idx] + (np.arange(total) - offsets[edge_idx])
    yc = rows + 0.5
    t = (yc - y0[edge_idx]) / (y1[edge_idx] - y0[edge_idx])
    xc = x0[edge_idx] + t * (x1[edge_idx] - x0[edge_idx])
    cols = np.clip(np.ceil(xc - 0.5), 0, width).astype(np.int64)

    diff = np.zeros((height, width + 1), dtype=np.int32)
    np.add.at(diff, (rows, cols), direction[edge_idx])
    winding = np.cumsum(diff[:, :width], axis=1)
    return winding != 0


def _fill(
    image: Image.Image, polys: list[list[tuple[float, float]]], color: RGBA
) -> None:
    w, h = image.size
    mask = _winding_mask(polys, w, h)
    if not mask.any():
        return
    image.paste(color, (0, 0, w, h), Image.fromarray(mask.astype(np.uint8) * 255))


def _extend_end(
    tip: tuple[float, float], prev: tuple[float, float], amount: float
) -> tuple[float, float]:
    """`prev → tip` の向きに `tip` を `amount` だけ延ばす。長さ 0 なら動かさない。"""

    dx = tip[0] - prev[0]
    dy = tip[1] - prev[1]
    length = math.hypot(dx, dy)
    if length == 0.0:
        return tip
    return (tip[0] + dx / length * amount, tip[1] + dy / length * amount)


def _stroke(
    image: Image.Image,
    polys: list[tuple[list[tuple[float, float]], bool]],
    color: RGBA,
    width_px: float,
    *,
    round_join: bool,
    cap: str | None,
) -> None:
    w = max(1, int(round(width_px)))
    draw = ImageDraw.Draw(image)
    for pts, closed in polys:
        line = pts + [pts[0]] if closed else list(pts)
        if cap == "square" and not closed and len(line) >= 2:
            # square: 両端を線幅の半分だけ延長する（既定の butt は延長しない）。
            line[0] = _extend_end(line[0], line[1], w / 2.0)
            line[-1] = _extend_end(line[-1], line[-2], w / 2.0)
        draw.line(line, fill=color, width=w, joint="curve" if round_join else None)
        if cap == "round" and not closed and w > 2:
            r = w / 2.0
            for x, y in (line[0], line[-1]):
                draw.ellipse((x - r, y - r, x + r, y + r), fill=color)


def _draw_outline(image: Image.Image, outline: Outline, affine: Affine, current: RGBA) -> None:
    subpaths = flatten_path(outline.commands, _CURVE_SEGMENTS)
    if not subpaths:
        return
    mapped = [
        (_map_points(affine, s.points), s.closed)
        for s in subpaths
        if np.all(np.isfinite(s.points))
    ]
    if not mapped:
        return

    style = outline.style
    fill = _resolve(style.fill, current, default="#000000")
    stroke = _resolve(style.stroke, current, default=None)
    # 変換の面積倍率から線幅の倍率を求める。
    a, b, c, d, _e, _f = affine
    scale = math.sqrt(abs(a * d - b * c))
    stroke_w = (1.0 if style.stroke_width is None else float(style.stroke_width)) * scale

    def _do_fill() -> None:
        if fill is not None:
            _fill(image, [pts for pts, _closed in mapped], fill)

    def _do_stroke() -> None:
        if stroke is not None and stroke_w > 0.0:
            _stroke(
                image,
                mapped,
                stroke,
                stroke_w,
                round_join=style.stroke_linejoin == "round",
                cap=style.stroke_linecap,
            )

    if (style.paint_order or "").startswith("stroke"):
        _do_stroke()
        _do_fill()
    else:
        _do_fill()
        _do_stroke()


def _draw_group(canvas: Image.Image, group: CharGroup, base: Affine, current: RGBA) -> Image.Image:
    if not group.outlines:
        return canvas
    opacity = min(1.0, max(0.0, float(group.opacity)))
    if opacity <= 0.0:
        return canvas
    affine = compose(base, group.transform)
    if opacity >= 1.0:
        for o in group.outlines:
            _draw_outline(canvas, o, affine, current)
        return canvas

    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    for o in group.outlines:
        _draw_outline(layer, o, affine, current)
    alpha = layer.getchannel("A").point(lambda v: int(round(v * opacity)))
    layer.putalpha(alpha)
    return Image.alpha_composite(canvas, layer)


def rasterize_frame(
    frame: Frame,
    width: int,
    height: int,
    *,
    foreground_color: str = "#ffffff",
    background_color: str = "#000000",
    supersample: int = 2,
) -> np.ndarray:
    """Frame を RGB 画像へラスタライズする。

    Parameters
    ----------
    frame : Frame
        描画するフレーム。
    width, height : int
        出力ピクセルサイズ。
    foreground_color : str
        `currentColor` の解決先。
    background_color : str
        背景色。
    supersample : int, default 2
        内部解像度の倍率（1 で無効）。

    Returns
    -------
    np.ndarray
        shape (height, width, 3) の uint8 配列。

    Raises
    ------
    ValueError
        サイズが正でない場合、または前景色 / 背景色が解釈できない場合。
    """

    w = int(width)
    h = int(height)
    ss = max(1, int(supersample))
    if w <= 0 or h <= 0:
        raise ValueError(f"width/height は正の値である必要があります: got={width}x{height}")

    current = parse_color(foreground_color)
    bg = parse_color(background_color)

    canvas = Image.new("RGBA", (w * ss, h * ss), bg)
    base = viewport_transform(frame.viewport, w * ss, h * ss)
    for group in frame.scene.groups:
        canvas = _draw_group(canvas, group, base, current)

    rgb = canvas.convert("RGB")
    if ss > 1:
        rgb = rgb.resize((w, h), Image.Resampling.BOX)
    return np.asarray(rgb, dtype=np.uint8)


__all__ = ["parse_color", "rasterize_frame", "viewport_transform"]
