# どこで: `src/typefx/core/effect_registry.py`。
# 何を: effect 種別名と「Scene -> Scene」関数・パラメータ型・メタ情報を対応付ける。
# なぜ: effect の追加を登録だけで完結させ、適用側（pipeline / codec / animation）が種別を列挙しないため。

from __future__ import annotations

import dataclasses
from collections.abc import ItemsView, Mapping
from dataclasses import dataclass
from typing import Any, Callable

from typefx.core.parameters.meta import ParamMeta
from typefx.core.scene import Scene

EffectFunc = Callable[[Scene, Any], Scene]


@dataclass(frozen=True, slots=True)
class EffectSpec:
    """登録済み effect 1 種の定義。"""

    kind: str
    func: EffectFunc
    params_type: type
    meta: Mapping[str, ParamMeta]
    display_name: str

    def default_params(self) -> Any:
        return self.params_type()


class EffectRegistry:
    """effect 種別名と `EffectSpec` のレジストリ。

    Notes
    -----
    登録された関数のシグネチャは ``func(scene: Scene, params) -> Scene`` を想定する。
    params は `params_type` の不変インスタンス。
    """

    def __init__(self) -> None:
        self._items: dict[str, EffectSpec] = {}

    def _register(self, spec: EffectSpec, *, overwrite: bool = True) -> None:
        """effect を登録する（`@effect` デコレータからのみ呼ぶ）。"""
        if not overwrite and spec.kind in self._items:
            raise ValueError(f"effect '{spec.kind}' は既に登録されている")
        self._items[spec.kind] = spec

    def get(self, kind: str) -> EffectSpec:
        """種別名に対応する `EffectSpec` を返す。

        Raises
        ------
        KeyError
            未登録の種別名が指定された場合。
        """
        return self._items[kind]

    def __contains__(self, kind: object) -> bool:
        return kind in self._items

    def __getitem__(self, kind: str) -> EffectSpec:
        return self.get(kind)

    def items(self) -> ItemsView[str, EffectSpec]:
        return self._items.items()

    def kinds(self) -> tuple[str, ...]:
        return tuple(self._items.keys())

    def get_meta(self, kind: str) -> dict[str, ParamMeta]:
        spec = self._items.get(kind)
        return {} if spec is None else dict(spec.meta)


effect_registry = EffectRegistry()
"""グローバルな effect レジストリインスタンス。"""


def effect(
    *,
    params: type,
    meta: Mapping[str, ParamMeta],
    kind: str | None = None,
    display_name: str | None = None,
    overwrite: bool = True,
):
    """グローバル effect レジストリ用デコレータ。

    Parameters
    ----------
    params : type
        パラメータを保持する frozen dataclass。全フィールドに既定値が必要。
    meta : Mapping[str, ParamMeta]
        パラメータ名 -> メタ情報。キーは `params` のフィールドと一致している必要がある。
    kind : str or None, optional
        種別名。省略時は関数名。
    display_name : str or None, optional
        表示名。省略時は種別名の先頭を大文字にしたもの。

    Examples
    --------
    @effect(params=OutlineParams, meta=outline_meta)
    def outline(scene: Scene, p: OutlineParams) -> Scene:
        ...
    """

    if not dataclasses.is_dataclass(params):
        raise TypeError(f"effect の params は dataclass である必要があります: {params!r}")
    field_names = [f.name for f in dataclasses.fields(params)]
    missing = [name for name in field_names if name not in meta]
    unknown = [name for name in meta if name not in field_names]
    if missing or unknown:
        raise ValueError(
            f"effect の meta と params のフィールドが一致しません: missing={missing}, unknown={unknown}"
        )
    ordered_meta = {name: meta[name] for name in field_names}

    def decorator(f: EffectFunc) -> EffectFunc:
        name = str(kind) if kind is not None else f.__name__
        spec = EffectSpec(
            kind=name,
            func=f,
            params_type=params,
            meta=ordered_meta,
            display_name=display_name if display_name is not None else name.capitalize(),
        )
        effect_registry._register(spec, overwrite=overwrite)
        return f

    return decorator


__all__ = ["EffectFunc", "EffectRegistry", "EffectSpec", "effect", "effect_registry"]
