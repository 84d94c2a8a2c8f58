"""直線 / 2 次・3 次ベジエ上の点と接線を評価する小さな関数群。"""

from __future__ import annotations

import math

Point = tuple[float, float]

# 長さ 0 の接線を正規化できない場合のフォールバック方向。
_FALLBACK_TANGENT: Point = (1.0, 0.0)


def _normalize(dx: float, dy: float) -> Point:
    length = math.hypot(dx, dy)
    if length == 0.0 or not math.isfinite(length):
        return _FALLBACK_TANGENT
    return (dx / length, dy / length)


def point_on_line(p0: Point, p1: Point, t: float) -> Point:
    mt = 1.0 - t
    return (mt * p0[0] + t * p1[0], mt * p0[1] + t * p1[1])


def tangent_on_line(p0: Point, p1: Point) -> Point:
    """線分の単位接線。端点が一致する場合は (1, 0)。"""
    return _normalize(p1[0] - p0[0], p1[1] - p0[1])


def point_on_quadratic(p0: Point, p1: Point, p2: Point, t: float) -> Point:
    mt = 1.0 - t
    a = mt * mt
    b = 2.0 * mt * t
    c = t * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0],
        a * p0[1] + b * p1[1] + c * p2[1],
    )


def tangent_on_quadratic(p0: Point, p1: Point, p2: Point, t: float) -> Point:
    mt = 1.0 - t
    dx = 2.0 * mt * (p1[0] - p0[0]) + 2.0 * t * (p2[0] - p1[0])
    dy = 2.0 * mt * (p1[1] - p0[1]) + 2.0 * t * (p2[1] - p1[1])
    return _normalize(dx, dy)


def point_on_cubic(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3.0 * mt * mt * t
    c = 3.0 * mt * t * t
    d = t * t * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
        a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
    )


def tangent_on_cubic(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """3 次ベジエの導関数を正規化した接線を返す。

    制御点が重なって導関数が 0 になる場合は (1, 0) を返す。
    """
    mt = 1.0 - t
    a = 3.0 * mt * mt
    b = 6.0 * mt * t
    c = 3.0 * t * t
    dx = a * (p1[0] - p0[0]) + b * (p2[0] - p1[0]) + c * (p3[0] - p2[0])
    dy = a * (p1[1] - p0[1]) + b * (p2[1] - p1[1]) + c * (p3[1] - p2[1])
    return _normalize(dx, dy)


def normal(tangent: Point) -> Point:
    """接線を +90° 回した法線 (-ty, tx)。"""
    return (-tangent[1], tangent[0])


__all__ = [
    "Point",
    "normal",
    "point_on_cubic",
    "point_on_line",
    "point_on_quadratic",
    "tangent_on_cubic",
    "tangent_on_line",
    "tangent_on_quadratic",
]
