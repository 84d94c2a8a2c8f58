"""パラメータのメタ情報（種別・範囲・刻み・選択肢）。"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

_NUMERIC_KINDS = ("int", "float")


@dataclass(frozen=True, slots=True)
class ParamMeta:
    """effect パラメータ 1 個のメタ情報。

    Attributes
    ----------
    kind : str
        "int" / "float" / "choice" のいずれか。
    ui_min, ui_max : float | None
        数値パラメータの許容範囲（アニメーション範囲の既定値にも使う）。
    step : float | None
        UI の刻み幅。
    choices : tuple[str, ...] | None
        kind="choice" の選択肢。
    """

    kind: str
    ui_min: float | None = None
    ui_max: float | None = None
    step: float | None = None
    choices: tuple[str, ...] | None = None

    @property
    def is_numeric(self) -> bool:
        return self.kind in _NUMERIC_KINDS

    def clamp(self, value: Any) -> Any:
        """値を範囲内へ収めて返す。数値でない / 選択肢外なら ValueError。"""

        if self.kind == "choice":
            s = str(value)
            if self.choices is not None and s not in self.choices:
                raise ValueError(f"選択肢に無い値です: {s!r} (choices={self.choices})")
            return s

        v = float(value)
        if not math.isfinite(v):
            raise ValueError(f"数値パラメータが有限ではありません: {value!r}")
        if self.ui_min is not None:
            v = max(float(self.ui_min), v)
        if self.ui_max is not None:
            v = min(float(self.ui_max), v)
        if self.kind == "int":
            return int(math.floor(v + 0.5))
        return v

    def coerce(self, value: float) -> Any:
        """アニメーション値をパラメータ型へ変換する（範囲で切らない）。"""

        if self.kind == "int":
            return int(math.floor(float(value) + 0.5))
        return float(value)


__all__ = ["ParamMeta"]
