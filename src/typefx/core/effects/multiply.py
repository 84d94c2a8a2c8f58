"""文字グループを平行移動・回転・減衰しながら複製し、残像状のコピーを重ねる effect。"""

from __future__ import annotations

from dataclasses import dataclass, replace

from typefx.core.effect_registry import effect
from typefx.core.parameters.meta import ParamMeta
from typefx.core.scene import (
    CharGroup,
    Scene,
    compose,
    group_local_bounds,
    rotation_about,
    translation,
)

multiply_meta = {
    "count": ParamMeta(kind="int", ui_min=1, ui_max=20, step=1),
    "offset_x": ParamMeta(kind="float", ui_min=-100.0, ui_max=100.0, step=1),
    "offset_y": ParamMeta(kind="float", ui_min=-100.0, ui_max=100.0, step=1),
    "rotation": ParamMeta(kind="float", ui_min=0.0, ui_max=360.0, step=1),
    "opacity_decay": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0, step=0.01),
}


@dataclass(frozen=True, slots=True)
class MultiplyParams:
    count: int = 5
    offset_x: float = 10.0
    offset_y: float = 10.0
    rotation: float = 0.0
    opacity_decay: float = 0.2


def _copies_of(group: CharGroup, p: MultiplyParams) -> list[CharGroup]:
    bb = group_local_bounds(group)
    if bb is None:
        cx = cy = 0.0
    else:
        cx = (bb[0] + bb[2]) / 2.0
        cy = (bb[1] + bb[3]) / 2.0

    copies: list[CharGroup] = []
    for i in range(1, int(p.count)):
        local = compose(
            translation(p.offset_x * i, p.offset_y * i),
            rotation_about(p.rotation * i, cx, cy),
        )
        copies.append(
            replace(
                group,
                transform=compose(group.transform, local),
                opacity=group.opacity * (1.0 - p.opacity_decay) ** i,
                duplicate=True,
            )
        )
    return copies


@effect(params=MultiplyParams, meta=multiply_meta)
def multiply(scene: Scene, p: MultiplyParams) -> Scene:
    """各文字グループの前に `count - 1` 個のコピーを挿入する。

    Parameters
    ----------
    scene : Scene
        入力シーン。
    p : MultiplyParams
        count: 元を含む総数。offset_x/offset_y: コピー i ごとの平行移動量（×i）。
        rotation: コピー i ごとの回転 [deg]（×i、グループ bbox 中心まわり）。
        opacity_decay: コピー i の不透明度は `(1 - opacity_decay)^i` 倍。

    Returns
    -------
    Scene
        コピー（`duplicate=True`）を元グループの直前に挿入したシーン。

    Notes
    -----
    変換と不透明度は元グループの値に合成する（上書きしない）。
    bbox が測れないグループは原点まわりに回転する。
    """

    if int(p.count) <= 1:
        return scene

    groups: list[CharGroup] = []
    for g in scene.groups:
        groups.extend(_copies_of(g, p))
        groups.append(g)
    return Scene(groups=tuple(groups))


__all__ = ["MultiplyParams", "multiply", "multiply_meta"]
