"""アウトラインを細かい直線列へ置き換える effect。"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from typefx.core.effect_registry import effect
from typefx.core.parameters.meta import ParamMeta
from typefx.core.path_subdivision import subdivide_path
from typefx.core.scene import Outline, Scene

subdivide_meta = {
    "subdivisions": ParamMeta(kind="int", ui_min=1, ui_max=20, step=1),
}


@dataclass(frozen=True, slots=True)
class SubdivideParams:
    subdivisions: int = 10


@effect(params=SubdivideParams, meta=subdivide_meta)
def subdivide(scene: Scene, p: SubdivideParams) -> Scene:
    """各 L/C/Q を `subdivisions` 本の直線に分割する（1 未満は 1 として扱う）。"""

    n = max(1, int(math.floor(float(p.subdivisions) + 0.5)))

    def _apply(o: Outline) -> Outline:
        return replace(o, commands=tuple(subdivide_path(o.commands, n)))

    return scene.map_outlines(_apply)


__all__ = ["SubdivideParams", "subdivide", "subdivide_meta"]
