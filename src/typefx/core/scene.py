# どこで: `src/typefx/core/scene.py`。
# 何を: 文字グループ / アウトライン / スタイルからなる不変シーンモデルと bbox 計算を定義する。
# なぜ: effect を「Scene -> Scene」の純関数として合成できるようにするため。

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

import numpy as np

from typefx.core.path_model import Affine, PathCommand
from typefx.core.path_subdivision import flatten_path

IDENTITY: Affine = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

Bounds = tuple[float, float, float, float]
"""`(min_x, min_y, max_x, max_y)`。"""


@dataclass(frozen=True, slots=True)
class PathStyle:
    """アウトライン 1 本の描画スタイル。None は「未指定」。"""

    fill: str | None = None
    stroke: str | None = None
    stroke_width: float | None = None
    stroke_linejoin: str | None = None
    stroke_linecap: str | None = None
    paint_order: str | None = None


@dataclass(frozen=True, slots=True)
class Outline:
    commands: tuple[PathCommand, ...]
    style: PathStyle = PathStyle()


@dataclass(frozen=True, slots=True)
class CharGroup:
    """1 文字分のグループ。

    Attributes
    ----------
    char : str
        元の文字。
    char_index : int
        行内の文字インデックス。
    line_index : int
        行インデックス（空行もカウントする）。
    outlines : tuple[Outline, ...]
        グリフ輪郭。空白など輪郭の無い文字では空。
    transform : Affine
        グループ全体に掛かる変換。
    opacity : float
        グループ不透明度 [0, 1]。
    duplicate : bool
        multiply が生成したコピーなら True。
    """

    char: str
    char_index: int
    line_index: int
    outlines: tuple[Outline, ...] = ()
    transform: Affine = IDENTITY
    opacity: float = 1.0
    duplicate: bool = False

    def __post_init__(self) -> None:
        if len(self.transform) != 6:
            raise ValueError(f"transform は 6 要素である必要があります: got={self.transform!r}")


@dataclass(frozen=True, slots=True)
class Scene:
    groups: tuple[CharGroup, ...] = ()

    def map_outlines(self, fn: Callable[[Outline], Outline]) -> Scene:
        """全アウトラインへ `fn` を適用した新しいシーンを返す。"""
        return Scene(
            groups=tuple(
                replace(g, outlines=tuple(fn(o) for o in g.outlines)) for g in self.groups
            )
        )


def compose(outer: Affine, inner: Affine) -> Affine:
    """`outer · inner`（inner を先に適用）を返す。"""

    a1, b1, c1, d1, e1, f1 = outer
    a2, b2, c2, d2, e2, f2 = inner
    return (
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * e2 + c1 * f2 + e1,
        b1 * e2 + d1 * f2 + f1,
    )


def translation(tx: float, ty: float) -> Affine:
    return (1.0, 0.0, 0.0, 1.0, float(tx), float(ty))


def rotation_about(deg: float, cx: float, cy: float) -> Affine:
    """点 (cx, cy) を中心とした回転（SVG の `rotate(deg, cx, cy)` と同じ）。"""

    rad = math.radians(float(deg))
    cos = math.cos(rad)
    sin = math.sin(rad)
    return (
        cos,
        sin,
        -sin,
        cos,
        cx - cos * cx + sin * cy,
        cy - sin * cx - cos * cy,
    )


def _finite_points(commands: Iterable[PathCommand]) -> np.ndarray:
    subpaths = flatten_path(tuple(commands))
    if not subpaths:
        return np.zeros((0, 2), dtype=np.float64)
    pts = np.concatenate([s.points for s in subpaths], axis=0)
    return pts[np.all(np.isfinite(pts), axis=1)]


def _bounds_of(pts: np.ndarray) -> Bounds | None:
    if pts.shape[0] == 0:
        return None
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def _apply_affine_array(affine: Affine, pts: np.ndarray) -> np.ndarray:
    a, b, c, d, e, f = affine
    x = pts[:, 0]
    y = pts[:, 1]
    return np.stack([a * x + c * y + e, b * x + d * y + f], axis=1)


def union_bounds(items: Iterable[Bounds | None]) -> Bounds | None:
    out: Bounds | None = None
    for bb in items:
        if bb is None:
            continue
        if out is None:
            out = bb
        else:
            out = (min(out[0], bb[0]), min(out[1], bb[1]), max(out[2], bb[2]), max(out[3], bb[3]))
    return out


def outline_bounds(outline: Outline, transform: Affine = IDENTITY) -> Bounds | None:
    """アウトラインの bbox。測れない（空 / 非有限）場合は None。"""

    pts = _finite_points(outline.commands)
    if transform != IDENTITY and pts.shape[0]:
        pts = _apply_affine_array(transform, pts)
    return _bounds_of(pts)


def group_local_bounds(group: CharGroup) -> Bounds | None:
    """グループ変換を掛けない（ローカル座標の）bbox。"""
    return union_bounds(outline_bounds(o) for o in group.outlines)


def scene_bounds(scene: Scene) -> Bounds | None:
    """グループ変換を適用した後のシーン全体の bbox。"""

    return union_bounds(
        outline_bounds(o, g.transform) for g in scene.groups for o in g.outlines
    )


def affine_to_svg(affine: Affine) -> str:
    return "matrix(" + " ".join(f"{float(v):.6g}" for v in affine) + ")"


__all__ = [
    "Bounds",
    "CharGroup",
    "IDENTITY",
    "Outline",
    "PathStyle",
    "Scene",
    "affine_to_svg",
    "compose",
    "group_local_bounds",
    "outline_bounds",
    "rotation_about",
    "scene_bounds",
    "translation",
    "union_bounds",
]
