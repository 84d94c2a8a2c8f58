# どこで: `src/typefx/core/parameters/codec.py`。
# 何を: effect リスト / アニメーション設定 / プリセットの JSON encode/decode を提供する。
# なぜ: 永続化仕様を 1 箇所へ閉じ、スキーマ変更の影響範囲を局所化するため。

"""エディタ状態の永続化用 JSON codec。

永続化レイアウト
----------------
- effect: ``{"id", "type", "enabled", "parameters": {name: value}}``
- アニメーション: ``{effect_id: {param: {"enabled", "min", "max", "speed", "easing", "pingPong"}}}``
- プリセット: ``{"id", "name", "effects", "animations", "createdAt"}``

Notes
-----
- decode は壊れた / 古い / 部分的な JSON を想定し、可能な範囲で復元して不正な要素は捨てる。
  例外で落とすのは「トップレベルの型が違う」ケースに限定する。
- パラメータ名は snake_case で保存する。camelCase（`offsetX` 等）や旧名 `sin` も読める。
"""

from __future__ import annotations

import dataclasses
import json
import logging
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

from typefx.core.animation import (
    AnimationConfig,
    EffectAnimations,
    canonical_easing,
)
from typefx.core.effect_list import Effect, effect_kinds, effect_spec, new_effect_id, param_values
from typefx.core.presets import Preset

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")

# 旧い保存データの選択肢名 -> 現在名。
_CHOICE_ALIASES = {"sin": "sine"}


def snake_case(name: str) -> str:
    """`offsetX` -> `offset_x`。すでに snake_case ならそのまま。"""
    return _CAMEL_RE.sub(r"_\1", str(name)).lower()


def encode_effect(effect: Effect) -> dict[str, Any]:
    return {
        "id": effect.id,
        "type": effect.kind,
        "enabled": bool(effect.enabled),
        "parameters": param_values(effect),
    }


def decode_effect(obj: Any) -> Effect | None:
    """dict から `Effect` を復元する。復元できなければ None。

    未知 / 不正なパラメータは既定値のまま残し、範囲外の数値はクランプする。
    """

    if not isinstance(obj, Mapping):
        return None
    kind = obj.get("type")
    if not isinstance(kind, str) or kind not in effect_kinds():
        return None
    spec = effect_spec(kind)

    raw_id = obj.get("id")
    effect_id = str(raw_id) if isinstance(raw_id, (str, int)) and str(raw_id) else new_effect_id()
    enabled = obj.get("enabled", True)
    enabled_b = bool(enabled) if isinstance(enabled, (bool, int)) else True

    changes: dict[str, Any] = {}
    raw_params = obj.get("parameters")
    if isinstance(raw_params, Mapping):
        for key, value in raw_params.items():
            name = snake_case(str(key))
            meta = spec.meta.get(name)
            if meta is None:
                continue
            if meta.kind == "choice":
                value = _CHOICE_ALIASES.get(str(value), value)
            try:
                changes[name] = meta.clamp(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid parameter %s.%s=%r", kind, name, value)

    params = dataclasses.replace(spec.default_params(), **changes)
    return Effect(id=effect_id, kind=kind, enabled=enabled_b, params=params)


def encode_effects(effects: Sequence[Effect]) -> list[dict[str, Any]]:
    return [encode_effect(e) for e in effects]


def decode_effects(obj: Any) -> tuple[Effect, ...]:
    """list から effect 列を復元する（不正要素と重複 id は捨てる）。

    Raises
    ------
    TypeError
        obj が list でない場合。
    """

    if not isinstance(obj, list):
        raise TypeError("effects は list である必要があります")
    out: list[Effect] = []
    seen: set[str] = set()
    for item in obj:
        e = decode_effect(item)
        if e is None or e.id in seen:
            continue
        seen.add(e.id)
        out.append(e)
    return tuple(out)


def encode_animation_config(cfg: AnimationConfig) -> dict[str, Any]:
    return {
        "enabled": bool(cfg.enabled),
        "min": float(cfg.min),
        "max": float(cfg.max),
        "speed": float(cfg.speed),
        "easing": cfg.easing,
        "pingPong": bool(cfg.ping_pong),
    }


def _finite(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    return v if math.isfinite(v) else default


def decode_animation_config(obj: Any) -> AnimationConfig | None:
    """dict から `AnimationConfig` を復元する。復元できなければ None。

    min > max の場合は入れ替える。
    """

    if not isinstance(obj, Mapping):
        return None
    base = AnimationConfig()
    try:
        easing = canonical_easing(str(obj.get("easing", base.easing)))
    except ValueError:
        return None

    lo = _finite(obj.get("min"), base.min)
    hi = _finite(obj.get("max"), base.max)
    if lo > hi:
        lo, hi = hi, lo
    ping_pong = obj.get("pingPong", obj.get("ping_pong", base.ping_pong))
    return AnimationConfig(
        enabled=bool(obj.get("enabled", base.enabled)),
        min=lo,
        max=hi,
        speed=_finite(obj.get("speed"), base.speed),
        easing=easing,
        ping_pong=bool(ping_pong),
    )


def encode_animations(animations: Mapping[str, Mapping[str, AnimationConfig]]) -> dict[str, Any]:
    return {
        str(eid): {str(name): encode_animation_config(cfg) for name, cfg in per.items()}
        for eid, per in animations.items()
    }


def decode_animations(obj: Any) -> EffectAnimations:
    """dict からアニメーション設定を復元する（不正要素は捨てる）。

    Raises
    ------
    TypeError
        obj が dict でない場合。
    """

    if not isinstance(obj, Mapping):
        raise TypeError("animations は dict である必要があります")
    out: EffectAnimations = {}
    for eid, per in obj.items():
        if not isinstance(per, Mapping):
            continue
        decoded: dict[str, AnimationConfig] = {}
        for name, raw in per.items():
            cfg = decode_animation_config(raw)
            if cfg is not None:
                decoded[snake_case(str(name))] = cfg
        if decoded:
            out[str(eid)] = decoded
    return out


def encode_preset(preset: Preset) -> dict[str, Any]:
    return {
        "id": preset.id,
        "name": preset.name,
        "effects": encode_effects(preset.effects),
        "animations": encode_animations(preset.animations),
        "createdAt": int(preset.created_at),
    }


def decode_preset(obj: Any) -> Preset | None:
    if not isinstance(obj, Mapping):
        return None
    preset_id = obj.get("id")
    name = obj.get("name")
    if not isinstance(preset_id, str) or not preset_id or not isinstance(name, str):
        return None
    try:
        effects = decode_effects(obj.get("effects", []))
        animations = decode_animations(obj.get("animations", {}))
    except TypeError:
        return None
    return Preset(
        id=preset_id,
        name=name,
        effects=effects,
        animations=animations,
        created_at=int(_finite(obj.get("createdAt"), 0.0)),
    )


def encode_presets(presets: Sequence[Preset]) -> list[dict[str, Any]]:
    return [encode_preset(p) for p in presets]


def decode_presets(obj: Any) -> tuple[Preset, ...]:
    if not isinstance(obj, list):
        raise TypeError("presets は list である必要があります")
    return tuple(p for p in (decode_preset(item) for item in obj) if p is not None)


def dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)


def loads(text: str) -> Any:
    return json.loads(text)


__all__ = [
    "decode_animation_config",
    "decode_animations",
    "decode_effect",
    "decode_effects",
    "decode_preset",
    "decode_presets",
    "dumps",
    "encode_animation_config",
    "encode_animations",
    "encode_effect",
    "encode_effects",
    "encode_preset",
    "encode_presets",
    "loads",
    "snake_case",
]
