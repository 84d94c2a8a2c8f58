# どこで: `src/typefx/core/animation.py`。
# 何を: イージング関数群と、経過時間からパラメータ値を求めるアニメーションエンジン。
# なぜ: ライブプレビューと GIF 書き出しが同じ「時刻 -> effect リスト」の写像を使うため。

"""パラメータアニメーション。

`AnimationConfig` 1 個が effect パラメータ 1 個の時間変化を表す。
`animated_value(config, t)` は純関数で、同じ入力には同じ値を返す。

周期
----
- 1 周期は `1 / speed` 秒。`progress = (t * speed) mod 1`。
- ping_pong: progress < 0.5 なら `progress * 2`、それ以外は `(1 - progress) * 2`。
- 値は `min + easing(progress) * (max - min)`。elastic のオーバーシュートは切らない。
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from typefx.core.effect_list import Effect, effect_spec
from typefx.core.parameters.meta import ParamMeta

EasingFunc = Callable[[float], float]

# 有効なアニメーションが無い場合の書き出し尺 [s]。
DEFAULT_EXPORT_DURATION = 2.0


def _linear(t: float) -> float:
    return t


def _ease_in(t: float) -> float:
    return t * t


def _ease_out(t: float) -> float:
    return t * (2.0 - t)


def _ease_in_out(t: float) -> float:
    if t < 0.5:
        return 2.0 * t * t
    return -1.0 + (4.0 - 2.0 * t) * t


def _bounce(t: float) -> float:
    n1 = 7.5625
    d1 = 2.75
    if t < 1.0 / d1:
        return n1 * t * t
    if t < 2.0 / d1:
        t -= 1.5 / d1
        return n1 * t * t + 0.75
    if t < 2.5 / d1:
        t -= 2.25 / d1
        return n1 * t * t + 0.9375
    t -= 2.625 / d1
    return n1 * t * t + 0.984375


def _elastic(t: float) -> float:
    if t == 0.0:
        return 0.0
    if t == 1.0:
        return 1.0
    c4 = (2.0 * math.pi) / 3.0
    return 2.0 ** (-10.0 * t) * math.sin((t * 10.0 - 0.75) * c4) + 1.0


EASINGS: dict[str, EasingFunc] = {
    "linear": _linear,
    "ease": _ease_in_out,
    "ease-in": _ease_in,
    "ease-out": _ease_out,
    "ease-in-out": _ease_in_out,
    "bounce": _bounce,
    "elastic": _elastic,
}
"""イージング名 -> [0,1] 上の関数。`ease` は `ease-in-out` と同じ。"""

EASING_ALIASES: dict[str, str] = {
    "bounce-out": "bounce",
    "elastic-out": "elastic",
}


def canonical_easing(name: str) -> str:
    """別名を正規名へ変換する。未知の名前なら ValueError。"""

    s = EASING_ALIASES.get(str(name), str(name))
    if s not in EASINGS:
        raise ValueError(f"未知のイージングです: {name!r}")
    return s


@dataclass(frozen=True, slots=True)
class AnimationConfig:
    """effect パラメータ 1 個のアニメーション設定。

    Attributes
    ----------
    enabled : bool
        False の場合はパラメータを上書きしない。
    min, max : float
        値の範囲（min <= max）。
    speed : float
        1 秒あたりの周期数。0 以下では値が min に固定される。
    easing : str
        `EASINGS` のキー。
    ping_pong : bool
        True なら 1 周期で min -> max -> min と往復する。
    """

    enabled: bool = False
    min: float = 0.0
    max: float = 100.0
    speed: float = 1.0
    easing: str = "ease-in-out"
    ping_pong: bool = True

    def __post_init__(self) -> None:
        if self.easing not in EASINGS:
            raise ValueError(f"未知のイージングです: {self.easing!r}")
        if float(self.min) > float(self.max):
            raise ValueError(f"min は max 以下である必要があります: min={self.min}, max={self.max}")


DEFAULT_ANIMATION_CONFIG = AnimationConfig()

EffectAnimations = dict[str, dict[str, AnimationConfig]]
"""effect id -> パラメータ名 -> `AnimationConfig`。"""


def animation_config_for(meta: ParamMeta) -> AnimationConfig:
    """パラメータの範囲を min/max に使った既定のアニメーション設定を返す。"""

    lo = DEFAULT_ANIMATION_CONFIG.min if meta.ui_min is None else float(meta.ui_min)
    hi = DEFAULT_ANIMATION_CONFIG.max if meta.ui_max is None else float(meta.ui_max)
    return dataclasses.replace(DEFAULT_ANIMATION_CONFIG, min=lo, max=hi)


def animated_value(config: AnimationConfig, elapsed: float) -> float:
    """経過時間 `elapsed` [s] におけるパラメータ値を返す。

    Notes
    -----
    - 無効（enabled=False）、speed が 0 以下 / 非有限、または elapsed が非有限の場合は
      `config.min` を返す。
    - `ping_pong=True` かつ progress=0.5 のとき max になる。
    """

    lo = float(config.min)
    hi = float(config.max)
    speed = float(config.speed)
    t = float(elapsed)
    if not config.enabled or not (math.isfinite(speed) and speed > 0.0 and math.isfinite(t)):
        return lo

    progress = (t * speed) % 1.0
    if config.ping_pong:
        progress = progress * 2.0 if progress < 0.5 else (1.0 - progress) * 2.0

    eased = EASINGS[config.easing](progress)
    return lo + eased * (hi - lo)


def has_active_animations(animations: Mapping[str, Mapping[str, AnimationConfig]]) -> bool:
    """有効なアニメーション設定が 1 つでもあれば True。"""
    return any(cfg.enabled for per_effect in animations.values() for cfg in per_effect.values())


def default_duration(animations: Mapping[str, Mapping[str, AnimationConfig]]) -> float:
    """有効なアニメーションの最長周期 `1 / speed` を返す。無ければ 2 秒。"""

    longest = 0.0
    for per_effect in animations.values():
        for cfg in per_effect.values():
            if cfg.enabled and cfg.speed > 0:
                longest = max(longest, 1.0 / float(cfg.speed))
    return longest if longest > 0.0 else DEFAULT_EXPORT_DURATION


def resolve_animated_effects(
    effects: Sequence[Effect],
    animations: Mapping[str, Mapping[str, AnimationConfig]],
    elapsed: float,
) -> tuple[Effect, ...]:
    """時刻 `elapsed` のアニメーション値で上書きした effect リストを返す。

    Notes
    -----
    - 入力の effect / animations は変更しない。
    - 上書きするのは「有効」かつ「effect 種別が宣言している数値パラメータ」のみ。
      削除済み・改名済みのパラメータに対する設定は無視される。
    - int パラメータは四捨五入する。範囲へのクランプはしない。
    """

    out: list[Effect] = []
    for e in effects:
        per_effect = animations.get(e.id)
        if not per_effect:
            out.append(e)
            continue
        meta = effect_spec(e.kind).meta
        changes: dict[str, object] = {}
        for name, cfg in per_effect.items():
            m = meta.get(name)
            if not cfg.enabled or m is None or not m.is_numeric:
                continue
            changes[name] = m.coerce(animated_value(cfg, elapsed))
        if changes:
            e = dataclasses.replace(e, params=dataclasses.replace(e.params, **changes))
        out.append(e)
    return tuple(out)


def prune_animations(
    animations: Mapping[str, Mapping[str, AnimationConfig]],
    effects: Sequence[Effect],
) -> EffectAnimations:
    """リストに存在しない effect id のアニメーション設定を取り除いた写しを返す。"""

    ids = {e.id for e in effects}
    return {eid: dict(per) for eid, per in animations.items() if eid in ids}


def set_animation(
    animations: Mapping[str, Mapping[str, AnimationConfig]],
    effect_id: str,
    param: str,
    config: AnimationConfig,
) -> EffectAnimations:
    """1 パラメータ分の設定を差し替えた写しを返す。"""

    out: EffectAnimations = {eid: dict(per) for eid, per in animations.items()}
    out.setdefault(str(effect_id), {})[str(param)] = config
    return out


__all__ = [
    "AnimationConfig",
    "DEFAULT_ANIMATION_CONFIG",
    "DEFAULT_EXPORT_DURATION",
    "EASINGS",
    "EASING_ALIASES",
    "EffectAnimations",
    "animated_value",
    "animation_config_for",
    "canonical_easing",
    "default_duration",
    "has_active_animations",
    "prune_animations",
    "resolve_animated_effects",
    "set_animation",
]
