"""
どこで: `src/typefx/core/builtins.py`。
何を: 組み込み effect の登録（registry 初期化）を単一入口へ集約する。
なぜ: import 副作用の分散と手動列挙の重複をなくすため。
"""

from __future__ import annotations

import importlib

_BUILTIN_EFFECT_MODULES: tuple[str, ...] = (
    "typefx.core.effects.multiply",
    "typefx.core.effects.distortion",
    "typefx.core.effects.outline",
    "typefx.core.effects.subdivide",
    "typefx.core.effects.color",
)

_BUILTIN_EFFECTS_REGISTERED = False


def ensure_builtin_effects_registered() -> None:
    """組み込み effect を registry に登録する（idempotent）。"""

    global _BUILTIN_EFFECTS_REGISTERED
    if _BUILTIN_EFFECTS_REGISTERED:
        return
    for module in _BUILTIN_EFFECT_MODULES:
        importlib.import_module(module)
    _BUILTIN_EFFECTS_REGISTERED = True


__all__ = ["ensure_builtin_effects_registered"]
