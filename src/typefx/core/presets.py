"""effect リストとアニメーション設定のスナップショット（プリセット）。"""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from typefx.core.animation import AnimationConfig, EffectAnimations
from typefx.core.effect_list import Effect


def _copy_animations(animations: Mapping[str, Mapping[str, AnimationConfig]]) -> EffectAnimations:
    # AnimationConfig は不変なので、外側 2 段の dict を作り直せば独立した写しになる。
    return {str(eid): dict(per) for eid, per in animations.items()}


@dataclass(frozen=True, slots=True)
class Preset:
    """名前付きスナップショット。

    Attributes
    ----------
    created_at : int
        作成時刻（epoch ミリ秒）。
    """

    id: str
    name: str
    effects: tuple[Effect, ...] = ()
    animations: EffectAnimations = field(default_factory=dict)
    created_at: int = 0


def make_preset(
    name: str,
    effects: Sequence[Effect],
    animations: Mapping[str, Mapping[str, AnimationConfig]],
    *,
    now_ms: int | None = None,
) -> Preset:
    """現在の effect / アニメーションの写しからプリセットを作る。"""

    s = str(name).strip()
    if not s:
        raise ValueError("プリセット名は空にできません")
    return Preset(
        id=uuid.uuid4().hex,
        name=s,
        effects=tuple(effects),
        animations=_copy_animations(animations),
        created_at=int(time.time() * 1000) if now_ms is None else int(now_ms),
    )


def save_preset(
    presets: Sequence[Preset],
    name: str,
    effects: Sequence[Effect],
    animations: Mapping[str, Mapping[str, AnimationConfig]],
) -> tuple[Preset, ...]:
    return (*presets, make_preset(name, effects, animations))


def load_preset(
    presets: Sequence[Preset], preset_id: str
) -> tuple[tuple[Effect, ...], EffectAnimations] | None:
    """プリセットの effect / アニメーションの写しを返す。見つからなければ None。"""

    for p in presets:
        if p.id == preset_id:
            return tuple(p.effects), _copy_animations(p.animations)
    return None


def delete_preset(presets: Sequence[Preset], preset_id: str) -> tuple[Preset, ...]:
    return tuple(p for p in presets if p.id != preset_id)


__all__ = ["Preset", "delete_preset", "load_preset", "make_preset", "save_preset"]
