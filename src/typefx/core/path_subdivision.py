# どこで: `src/typefx/core/path_subdivision.py`。
# 何を: パスコマンド列を直線列へ細分化 / 平坦化する。
# なぜ: distortion 等の頂点ベースの変形と、bbox / ラスタライズが共通の折れ線表現を必要とするため。

"""パスの細分化（`subdivide_path`）と平坦化（`flatten_path`）。

`subdivide_path` は M/L/C/Q を絶対座標の L 列へ置き換え、それ以外のコマンドは
そのまま通す（パスの見た目を保つ最小限の変換）。

`flatten_path` は全コマンド種（相対 / H / V / S / T / A を含む）を扱い、
閉じフラグ付きの折れ線（`Subpath`）の列を返す。bbox 計算とラスタライズ専用。
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from typefx.core.curves import point_on_cubic, point_on_line, point_on_quadratic
from typefx.core.path_model import PathCommand, close_path, line_to, move_to


def _endpoint(cmd: PathCommand, cx: float, cy: float) -> tuple[float, float]:
    """コマンドの終点（絶対座標）を返す。"""

    ops = cmd.operands
    ox, oy = (cx, cy) if cmd.relative else (0.0, 0.0)
    if cmd.kind == "H":
        return (ops[0] + ox, cy)
    if cmd.kind == "V":
        return (cx, ops[0] + oy)
    return (ops[-2] + ox, ops[-1] + oy)


def subdivide_path(commands: Sequence[PathCommand], subdivisions: int = 10) -> list[PathCommand]:
    """M/L/C/Q を絶対座標の直線列へ細分化する。

    Parameters
    ----------
    commands : Sequence[PathCommand]
        入力コマンド列。
    subdivisions : int, default 10
        L/C/Q 1 本あたりの分割数 N。各セグメントは t=i/N (i=1..N) の N 本の L になる。

    Returns
    -------
    list[PathCommand]
        M / L / Z と、素通しされたその他のコマンドからなる列。

    Raises
    ------
    ValueError
        `subdivisions` が 1 未満の場合。
    """

    n = int(subdivisions)
    if n < 1:
        raise ValueError(f"subdivisions は 1 以上である必要があります: got={subdivisions!r}")

    out: list[PathCommand] = []
    cx = cy = 0.0
    sx = sy = 0.0
    for cmd in commands:
        if cmd.is_empty:
            out.append(cmd)
            continue

        kind = cmd.kind
        ops = cmd.operands
        ox, oy = (cx, cy) if cmd.relative else (0.0, 0.0)

        if kind == "M":
            cx, cy = ops[0] + ox, ops[1] + oy
            sx, sy = cx, cy
            out.append(move_to(cx, cy))
        elif kind == "L":
            p0 = (cx, cy)
            p1 = (ops[0] + ox, ops[1] + oy)
            for i in range(1, n + 1):
                out.append(line_to(*point_on_line(p0, p1, i / n)))
            cx, cy = p1
        elif kind == "C":
            p0 = (cx, cy)
            p1 = (ops[0] + ox, ops[1] + oy)
            p2 = (ops[2] + ox, ops[3] + oy)
            p3 = (ops[4] + ox, ops[5] + oy)
            for i in range(1, n + 1):
                out.append(line_to(*point_on_cubic(p0, p1, p2, p3, i / n)))
            cx, cy = p3
        elif kind == "Q":
            p0 = (cx, cy)
            p1 = (ops[0] + ox, ops[1] + oy)
            p2 = (ops[2] + ox, ops[3] + oy)
            for i in range(1, n + 1):
                out.append(line_to(*point_on_quadratic(p0, p1, p2, i / n)))
            cx, cy = p2
        elif kind == "Z":
            out.append(close_path())
            cx, cy = sx, sy
        else:
            # H/V/S/T/A は細分化しない。後続の相対コマンドのために現在点だけ進める。
            out.append(cmd)
            cx, cy = _endpoint(cmd, cx, cy)
    return out


@dataclass(frozen=True, slots=True)
class Subpath:
    """平坦化済みの部分パス。

    Attributes
    ----------
    points : np.ndarray
        shape (N, 2) の float64 頂点列（絶対座標）。
    closed : bool
        Z で閉じられていれば True。
    """

    points: np.ndarray
    closed: bool


def flatten_path(commands: Sequence[PathCommand], segments: int = 8) -> list[Subpath]:
    """任意のコマンド列を折れ線の列へ平坦化する。

    Notes
    -----
    - S/T は直前の制御点を反転して補う。
    - A（円弧）は始点→終点の弦で近似する。
    - 頂点が 1 つしかない部分パスは捨てる。
    """
    # TODO: A コマンドを楕円弧として平坦化する（現状は弦で近似）。

    seg = max(1, int(segments))
    ts = [i / seg for i in range(1, seg + 1)]

    out: list[Subpath] = []
    pts: list[tuple[float, float]] = []
    cx = cy = 0.0
    sx = sy = 0.0
    last_cubic_ctrl: tuple[float, float] | None = None
    last_quad_ctrl: tuple[float, float] | None = None

    def flush(closed: bool) -> None:
        if len(pts) >= 2:
            out.append(Subpath(points=np.asarray(pts, dtype=np.float64), closed=closed))
        pts.clear()

    for cmd in commands:
        if cmd.is_empty:
            continue
        kind = cmd.kind
        ops = cmd.operands
        ox, oy = (cx, cy) if cmd.relative else (0.0, 0.0)
        p0 = (cx, cy)
        cubic_ctrl: tuple[float, float] | None = None
        quad_ctrl: tuple[float, float] | None = None

        if kind == "M":
            flush(False)
            cx, cy = ops[0] + ox, ops[1] + oy
            sx, sy = cx, cy
            pts.append((cx, cy))
        elif kind == "Z":
            if pts:
                flush(True)
            cx, cy = sx, sy
        else:
            if not pts:
                pts.append(p0)
            if kind in ("L", "H", "V", "A"):
                end = _endpoint(cmd, cx, cy)
                pts.append(end)
            elif kind in ("C", "S"):
                if kind == "C":
                    c1 = (ops[0] + ox, ops[1] + oy)
                    c2 = (ops[2] + ox, ops[3] + oy)
                    end = (ops[4] + ox, ops[5] + oy)
                else:
                    if last_cubic_ctrl is None:
                        c1 = p0
                    else:
                        c1 = (2.0 * cx - last_cubic_ctrl[0], 2.0 * cy - last_cubic_ctrl[1])
                    c2 = (ops[0] + ox, ops[1] + oy)
                    end = (ops[2] + ox, ops[3] + oy)
                pts.extend(point_on_cubic(p0, c1, c2, end, t) for t in ts)
                cubic_ctrl = c2
            else:
                if kind == "Q":
                    c1 = (ops[0] + ox, ops[1] + oy)
                    end = (ops[2] + ox, ops[3] + oy)
                else:
                    if last_quad_ctrl is None:
                        c1 = p0
                    else:
                        c1 = (2.0 * cx - last_quad_ctrl[0], 2.0 * cy - last_quad_ctrl[1])
                    end = (ops[0] + ox, ops[1] + oy)
                pts.extend(point_on_quadratic(p0, c1, end, t) for t in ts)
                quad_ctrl = c1
            cx, cy = end

        last_cubic_ctrl = cubic_ctrl
        last_quad_ctrl = quad_ctrl

    flush(False)
    return out


__all__ = ["Subpath", "flatten_path", "subdivide_path"]
