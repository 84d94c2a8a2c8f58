# どこで: `src/typefx/core/effect_list.py`。
# 何を: `Effect` 値型と、effect リストの作成・編集操作を提供する。
# なぜ: 編集 UI / 永続化 / export が同じ不変モデルを共有できるようにするため。

from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from typefx.core.builtins import ensure_builtin_effects_registered
from typefx.core.effect_registry import EffectSpec, effect_registry


@dataclass(frozen=True, slots=True)
class Effect:
    """effect リストの 1 要素。

    Attributes
    ----------
    id : str
        リスト内で一意な識別子（アニメーション設定のキーにもなる）。
    kind : str
        effect 種別名（registry のキー）。
    enabled : bool
        False の場合は適用しない。
    params : Any
        種別ごとの frozen パラメータ dataclass。
    """

    id: str
    kind: str
    enabled: bool
    params: Any

    def __post_init__(self) -> None:
        spec = effect_spec(self.kind)
        if not isinstance(self.params, spec.params_type):
            raise TypeError(
                f"effect '{self.kind}' の params 型が不正です: "
                f"expected={spec.params_type.__name__}, got={type(self.params).__name__}"
            )


def effect_spec(kind: str) -> EffectSpec:
    """種別名に対応する `EffectSpec` を返す。未知の種別なら ValueError。"""

    ensure_builtin_effects_registered()
    if kind not in effect_registry:
        raise ValueError(f"未知の effect 種別です: {kind!r}")
    return effect_registry.get(kind)


def effect_kinds() -> tuple[str, ...]:
    ensure_builtin_effects_registered()
    return effect_registry.kinds()


def effect_display_name(kind: str) -> str:
    return effect_spec(kind).display_name


def new_effect_id() -> str:
    return uuid.uuid4().hex


def create_effect(kind: str, *, effect_id: str | None = None) -> Effect:
    """既定パラメータで有効状態の effect を作って返す。"""

    spec = effect_spec(kind)
    return Effect(
        id=new_effect_id() if effect_id is None else str(effect_id),
        kind=spec.kind,
        enabled=True,
        params=spec.default_params(),
    )


def param_values(effect: Effect) -> dict[str, Any]:
    """パラメータを「名前 -> 値」の dict として返す。"""
    return {f.name: getattr(effect.params, f.name) for f in dataclasses.fields(effect.params)}


def with_params(effect: Effect, **changes: Any) -> Effect:
    """パラメータを検証（範囲へクランプ）して更新した effect を返す。

    Raises
    ------
    ValueError
        種別に存在しないパラメータ名、選択肢外の値、非有限の数値が渡された場合。
    """

    meta = effect_spec(effect.kind).meta
    unknown = [k for k in changes if k not in meta]
    if unknown:
        raise ValueError(f"effect '{effect.kind}' に存在しないパラメータです: {unknown}")
    validated = {k: meta[k].clamp(v) for k, v in changes.items()}
    return dataclasses.replace(effect, params=dataclasses.replace(effect.params, **validated))


def _index_of(effects: Sequence[Effect], effect_id: str) -> int | None:
    for i, e in enumerate(effects):
        if e.id == effect_id:
            return i
    return None


def add_effect(effects: Sequence[Effect], kind: str) -> tuple[Effect, ...]:
    return (*effects, create_effect(kind))


def update_effect(effects: Sequence[Effect], effect_id: str, **changes: Any) -> tuple[Effect, ...]:
    """`effect_id` のパラメータを更新したリストを返す。id が無ければそのまま。"""

    return tuple(with_params(e, **changes) if e.id == effect_id else e for e in effects)


def toggle_effect(effects: Sequence[Effect], effect_id: str) -> tuple[Effect, ...]:
    return tuple(
        dataclasses.replace(e, enabled=not e.enabled) if e.id == effect_id else e for e in effects
    )


def delete_effect(effects: Sequence[Effect], effect_id: str) -> tuple[Effect, ...]:
    return tuple(e for e in effects if e.id != effect_id)


def move_effect(effects: Sequence[Effect], effect_id: str, direction: str) -> tuple[Effect, ...]:
    """effect を隣と入れ替える（direction は "up" / "down"）。

    端を越える移動や未知の id は何もしない。
    """

    if direction not in ("up", "down"):
        raise ValueError(f"direction は 'up' か 'down': got={direction!r}")
    i = _index_of(effects, effect_id)
    out = list(effects)
    if i is None:
        return tuple(out)
    j = i - 1 if direction == "up" else i + 1
    if j < 0 or j >= len(out):
        return tuple(out)
    out[i], out[j] = out[j], out[i]
    return tuple(out)


__all__ = [
    "Effect",
    "add_effect",
    "create_effect",
    "delete_effect",
    "effect_display_name",
    "effect_kinds",
    "effect_spec",
    "move_effect",
    "new_effect_id",
    "param_values",
    "toggle_effect",
    "update_effect",
    "with_params",
]
