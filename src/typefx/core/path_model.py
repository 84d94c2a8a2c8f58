# どこで: `src/typefx/core/path_model.py`。
# 何を: SVG パス文字列と `PathCommand` 列の相互変換を提供する。
# なぜ: effect 群が文字列ではなく構造化されたコマンド列を入出力にできるようにするため。

"""SVG パスデータのパース / シリアライズ。

入出力
------
- `parse_path(text)`: パス文字列 → `list[PathCommand]`（壊れた入力でも例外を投げない）
- `serialize_path(commands)`: `PathCommand` 列 → パス文字列（数値は小数 2 桁へ丸める）
- `transform_commands(commands, affine)`: 絶対座標コマンドをアフィン変換する

Notes
-----
- `PathCommand.kind` は常に大文字。相対コマンドかどうかは `relative` で持つ。
- オペランド数がアリティの倍数を超える場合は、SVG の暗黙の繰り返し規則に従って
  複数コマンドへ展開する（`M` の 2 組目以降は `L` になる）。
- アリティに満たないランは「オペランド無し」のコマンドになり、以降の処理では no-op 扱い。
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

Affine = tuple[float, float, float, float, float, float]
"""SVG の `matrix(a, b, c, d, e, f)` と同じ並びのアフィン変換。"""

COMMAND_ARITY: dict[str, int] = {
    "M": 2,
    "L": 2,
    "H": 1,
    "V": 1,
    "C": 6,
    "S": 4,
    "Q": 4,
    "T": 2,
    "A": 7,
    "Z": 0,
}

_COMMAND_RE = re.compile(r"([MmLlHhVvCcSsQqTtAaZz])([^MmLlHhVvCcSsQqTtAaZz]*)")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


@dataclass(frozen=True, slots=True)
class PathCommand:
    """パスコマンド 1 個。

    Attributes
    ----------
    kind : str
        大文字のコマンド文字（M/L/H/V/C/S/Q/T/A/Z）。
    relative : bool
        小文字（相対座標）コマンドなら True。
    operands : tuple[float, ...]
        数値オペランド。空タプルは「パースできなかった」コマンドを表す。
    """

    kind: str
    relative: bool = False
    operands: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if self.kind not in COMMAND_ARITY:
            raise ValueError(f"未知のパスコマンドです: {self.kind!r}")
        n = len(self.operands)
        if n and n != COMMAND_ARITY[self.kind]:
            raise ValueError(
                f"{self.kind} のオペランド数が不正です: expected={COMMAND_ARITY[self.kind]}, got={n}"
            )

    @property
    def letter(self) -> str:
        """元のパス文字列で使われるコマンド文字を返す。"""
        return self.kind.lower() if self.relative else self.kind

    @property
    def is_empty(self) -> bool:
        """オペランドが必要なのに欠けているなら True。"""
        return COMMAND_ARITY[self.kind] > 0 and not self.operands


def move_to(x: float, y: float) -> PathCommand:
    return PathCommand("M", False, (float(x), float(y)))


def line_to(x: float, y: float) -> PathCommand:
    return PathCommand("L", False, (float(x), float(y)))


def close_path() -> PathCommand:
    return PathCommand("Z", False, ())


def parse_path(text: str) -> list[PathCommand]:
    """SVG パス文字列を `PathCommand` のリストへ変換する。

    Parameters
    ----------
    text : str
        SVG の `d` 属性文字列。

    Returns
    -------
    list[PathCommand]
        出現順のコマンド列。コマンド文字以外で始まる前置テキストは無視する。

    Notes
    -----
    例外は投げない。数値として読めないランは空オペランドのコマンドになる。
    """

    out: list[PathCommand] = []
    for match in _COMMAND_RE.finditer(str(text)):
        letter = match.group(1)
        kind = letter.upper()
        relative = letter.islower() and kind != "Z"
        arity = COMMAND_ARITY[kind]

        if arity == 0:
            out.append(PathCommand(kind, False, ()))
            continue

        values = [float(v) for v in _NUMBER_RE.findall(match.group(2))]
        values = [v for v in values if math.isfinite(v)]
        n_groups = len(values) // arity
        if n_groups == 0:
            out.append(PathCommand(kind, relative, ()))
            continue

        for g in range(n_groups):
            chunk = tuple(values[g * arity : (g + 1) * arity])
            # M の 2 組目以降は暗黙の lineto。
            group_kind = "L" if (kind == "M" and g > 0) else kind
            out.append(PathCommand(group_kind, relative, chunk))
    return out


def _fmt_number(value: float) -> str:
    """小数 2 桁へ四捨五入（0.5 は +∞ 方向）し、最短表記で返す。"""

    v = math.floor(float(value) * 100.0 + 0.5) / 100.0
    if v == 0.0:
        return "0"
    if v == int(v):
        return str(int(v))
    s = f"{v:.2f}".rstrip("0").rstrip(".")
    return s


def serialize_path(commands: Iterable[PathCommand]) -> str:
    """`PathCommand` 列をパス文字列へ変換する。

    コマンド間に区切りは入れず、オペランドは空白区切りで並べる。
    オペランドが無いコマンドは文字だけを出力する。
    """

    parts: list[str] = []
    for cmd in commands:
        if cmd.operands:
            parts.append(cmd.letter + " ".join(_fmt_number(v) for v in cmd.operands))
        else:
            parts.append(cmd.letter)
    return "".join(parts)


def apply_affine(affine: Affine, x: float, y: float) -> tuple[float, float]:
    a, b, c, d, e, f = affine
    return (a * x + c * y + e, b * x + d * y + f)


def transform_commands(commands: Sequence[PathCommand], affine: Affine) -> list[PathCommand]:
    """絶対座標のコマンド列をアフィン変換して返す。

    Raises
    ------
    ValueError
        相対コマンド / 円弧、または回転・せん断を含む変換に対する H/V が含まれる場合。
    """

    a, b, c, d, e, f = (float(v) for v in affine)
    axis_aligned = b == 0.0 and c == 0.0
    out: list[PathCommand] = []
    for cmd in commands:
        if cmd.kind == "Z" or cmd.is_empty:
            out.append(cmd)
            continue
        if cmd.relative or cmd.kind == "A":
            raise ValueError(f"transform_commands は絶対座標の M/L/C/S/Q/T/H/V のみ対応: {cmd.letter}")
        if cmd.kind in ("H", "V"):
            if not axis_aligned:
                raise ValueError("H/V は軸平行な変換でのみ変換できます")
            (v,) = cmd.operands
            mapped = a * v + e if cmd.kind == "H" else d * v + f
            out.append(PathCommand(cmd.kind, False, (mapped,)))
            continue
        ops = cmd.operands
        mapped_ops: list[float] = []
        for i in range(0, len(ops), 2):
            x, y = ops[i], ops[i + 1]
            mapped_ops.append(a * x + c * y + e)
            mapped_ops.append(b * x + d * y + f)
        out.append(PathCommand(cmd.kind, False, tuple(mapped_ops)))
    return out


__all__ = [
    "Affine",
    "COMMAND_ARITY",
    "PathCommand",
    "apply_affine",
    "close_path",
    "line_to",
    "move_to",
    "parse_path",
    "serialize_path",
    "transform_commands",
]
