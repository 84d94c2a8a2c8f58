"""アウトラインを細分化し、弧長に沿った波形で法線方向へ変位させる effect。"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace

import numpy as np
from numba import njit  # type: ignore[import-untyped]

from typefx.core.effect_registry import effect
from typefx.core.parameters.meta import ParamMeta
from typefx.core.path_model import PathCommand, close_path, line_to, move_to
from typefx.core.path_subdivision import subdivide_path
from typefx.core.scene import Outline, Scene

# 変位前に各セグメントを何分割するか。
DISTORTION_SUBDIVISIONS = 8

distortion_meta = {
    "wave_type": ParamMeta(kind="choice", choices=("sine", "saw", "triangle")),
    "amplitude": ParamMeta(kind="float", ui_min=0.0, ui_max=50.0, step=0.5),
    "frequency": ParamMeta(kind="float", ui_min=0.1, ui_max=5.0, step=0.1),
    "phase": ParamMeta(kind="float", ui_min=0.0, ui_max=360.0, step=1),
}

_WAVE_KINDS = {"sine": 0, "sin": 0, "saw": 1}
_WAVE_TRIANGLE = 2

_CODE_MOVE = 0
_CODE_LINE = 1
_CODE_CLOSE = 2
_CODE_OTHER = 3


@dataclass(frozen=True, slots=True)
class DistortionParams:
    wave_type: str = "sine"
    amplitude: float = 10.0
    frequency: float = 1.0
    phase: float = 0.0


@njit(cache=True)  # type: ignore[misc]
def _wave(kind: int, x: float) -> float:
    if kind == 0:
        return math.sin(x)
    # 剰余は切り捨て方向（負値では負の小数部になる）。
    v = x / (2.0 * math.pi)
    frac = v - float(int(v))
    if kind == 1:
        return frac * 2.0 - 1.0
    if frac < 0.5:
        return 4.0 * frac - 1.0
    return 1.0 - (frac - 0.5) * 4.0


@njit(cache=True)  # type: ignore[misc]
def _displace_kernel(
    codes: np.ndarray,
    xy: np.ndarray,
    amplitude: float,
    frequency: float,
    phase_rad: float,
    wave_kind: int,
    out: np.ndarray,
) -> None:
    """M/L/Z のイベント列を歩き、L の終点を法線方向へ変位させる。"""
    cx = 0.0
    cy = 0.0
    sx = 0.0
    sy = 0.0
    arc = 0.0
    for i in range(codes.shape[0]):
        code = codes[i]
        x = xy[i, 0]
        y = xy[i, 1]
        out[i, 0] = x
        out[i, 1] = y
        if code == 0:
            cx = x
            cy = y
            sx = x
            sy = y
            arc = 0.0
        elif code == 1:
            dx = x - cx
            dy = y - cy
            length = math.sqrt(dx * dx + dy * dy)
            arc += length
            if length > 0.0:
                tx = dx / length
                ty = dy / length
            else:
                tx = 1.0
                ty = 0.0
            d = amplitude * _wave(wave_kind, frequency * arc + phase_rad)
            out[i, 0] = x - ty * d
            out[i, 1] = y + tx * d
            # 接線は変位前の入力セグメントから取るため、現在点は変位前の終点。
            cx = x
            cy = y
        elif code == 2:
            cx = sx
            cy = sy
        elif code == 3:
            cx = x
            cy = y


def _events(commands: Sequence[PathCommand]) -> tuple[np.ndarray, np.ndarray]:
    n = len(commands)
    codes = np.full((n,), -1, dtype=np.int64)
    xy = np.zeros((n, 2), dtype=np.float64)
    cx = cy = 0.0
    for i, cmd in enumerate(commands):
        if cmd.is_empty:
            continue
        if cmd.kind == "Z":
            codes[i] = _CODE_CLOSE
            continue
        if cmd.kind in ("M", "L") and not cmd.relative:
            codes[i] = _CODE_MOVE if cmd.kind == "M" else _CODE_LINE
            cx, cy = cmd.operands[0], cmd.operands[1]
        else:
            # 素通しされるコマンドは終点だけを追跡する。
            ops = cmd.operands
            ox, oy = (cx, cy) if cmd.relative else (0.0, 0.0)
            if cmd.kind == "H":
                cx = ops[0] + ox
            elif cmd.kind == "V":
                cy = ops[0] + oy
            else:
                cx, cy = ops[-2] + ox, ops[-1] + oy
            codes[i] = _CODE_OTHER
        xy[i, 0] = cx
        xy[i, 1] = cy
    return codes, xy


def distort_commands(
    commands: Sequence[PathCommand],
    *,
    wave_type: str = "sine",
    amplitude: float = 10.0,
    frequency: float = 1.0,
    phase: float = 0.0,
) -> list[PathCommand]:
    """コマンド列を細分化し、各 L の終点を波形で変位させて返す。

    Parameters
    ----------
    commands : Sequence[PathCommand]
        入力コマンド列。
    wave_type : str, default "sine"
        "sine" / "saw" / "triangle"。それ以外は triangle として扱う。
    amplitude : float, default 10.0
        変位量（法線方向）。
    frequency : float, default 1.0
        弧長あたりの角周波数。
    phase : float, default 0.0
        位相 [deg]。

    Returns
    -------
    list[PathCommand]
        変位済みのコマンド列。Z とその他のコマンドは素通し。
    """

    subdivided = subdivide_path(commands, DISTORTION_SUBDIVISIONS)
    if not subdivided:
        return subdivided

    codes, xy = _events(subdivided)
    out = np.empty_like(xy)
    _displace_kernel(
        codes,
        xy,
        float(amplitude),
        float(frequency),
        math.radians(float(phase)),
        int(_WAVE_KINDS.get(str(wave_type), _WAVE_TRIANGLE)),
        out,
    )

    result: list[PathCommand] = []
    for i, cmd in enumerate(subdivided):
        code = int(codes[i])
        if code == _CODE_MOVE:
            result.append(move_to(float(out[i, 0]), float(out[i, 1])))
        elif code == _CODE_LINE:
            result.append(line_to(float(out[i, 0]), float(out[i, 1])))
        elif code == _CODE_CLOSE:
            result.append(close_path())
        else:
            result.append(cmd)
    return result


@effect(params=DistortionParams, meta=distortion_meta)
def distortion(scene: Scene, p: DistortionParams) -> Scene:
    """全アウトラインへ `distort_commands` を適用する。"""

    def _apply(o: Outline) -> Outline:
        commands = distort_commands(
            o.commands,
            wave_type=p.wave_type,
            amplitude=p.amplitude,
            frequency=p.frequency,
            phase=p.phase,
        )
        return replace(o, commands=tuple(commands))

    return scene.map_outlines(_apply)


__all__ = ["DistortionParams", "distort_commands", "distortion", "distortion_meta"]
