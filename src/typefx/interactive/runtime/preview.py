# どこで: `src/typefx/interactive/runtime/preview.py`。
# 何を: プレビューのズーム / パン状態と、アニメーションのライブプレビュー用クロックを提供する。
# なぜ: 描画先（GUI / ブラウザ等）に依存せず、時刻管理とビュー操作をテスト可能な純粋状態として持つため。

"""ライブプレビューの状態。

- `ViewState`: ズーム（0.1..10 にクランプ）とパン。ホイール操作はカーソル位置を固定点にする。
- `PreviewClock`: 有効なアニメーションがある間だけ進むクロック。
  停止 → 再開のたびに開始時刻を取り直す（再開直後は t=0 から）。
- `run_preview()`: クロックが止まるまで 1 tick ごとに解決済み effect リストを通知する。
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, replace

from typefx.core.animation import AnimationConfig, has_active_animations, resolve_animated_effects
from typefx.core.effect_list import Effect

logger = logging.getLogger(__name__)

MIN_ZOOM = 0.1
MAX_ZOOM = 10.0
WHEEL_ZOOM_OUT = 0.9
WHEEL_ZOOM_IN = 1.1


def _clamp_zoom(z: float) -> float:
    return min(MAX_ZOOM, max(MIN_ZOOM, float(z)))


@dataclass(frozen=True, slots=True)
class ViewState:
    """プレビューのズームとパン（画面ピクセル単位）。"""

    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def zoom_at(self, x: float, y: float, wheel_delta: float) -> ViewState:
        """ホイール操作でズームする。

        `wheel_delta > 0` で縮小（×0.9）、それ以外で拡大（×1.1）。
        画面上の (x, y) の下にある点が動かないようにパンを補正する。
        """

        factor = WHEEL_ZOOM_OUT if wheel_delta > 0 else WHEEL_ZOOM_IN
        new_zoom = _clamp_zoom(self.zoom * factor)
        ratio = new_zoom / self.zoom
        return ViewState(
            zoom=new_zoom,
            pan_x=x - (x - self.pan_x) * ratio,
            pan_y=y - (y - self.pan_y) * ratio,
        )

    def pan_by(self, dx: float, dy: float) -> ViewState:
        return replace(self, pan_x=self.pan_x + dx, pan_y=self.pan_y + dy)

    def with_zoom(self, zoom: float) -> ViewState:
        return replace(self, zoom=_clamp_zoom(zoom))

    def reset(self) -> ViewState:
        return ViewState()


@dataclass
class PreviewClock:
    """アニメーションのライブプレビュー用クロック。

    Attributes
    ----------
    start_time : float | None
        現在の再生区間の開始時刻。停止中は None。
    """

    start_time: float | None = None

    @property
    def running(self) -> bool:
        return self.start_time is not None

    def elapsed(self, now: float) -> float:
        return 0.0 if self.start_time is None else float(now) - self.start_time

    def tick(
        self,
        effects: Sequence[Effect],
        animations: Mapping[str, Mapping[str, AnimationConfig]],
        now: float,
    ) -> tuple[Effect, ...] | None:
        """1 tick 分の effect リストを返す。

        有効なアニメーションが無ければクロックを止めて None を返す。
        停止中から有効になった場合は `now` を開始時刻にする。
        """

        if not has_active_animations(animations):
            if self.start_time is not None:
                logger.debug("Preview clock stopped")
            self.start_time = None
            return None
        if self.start_time is None:
            self.start_time = float(now)
            logger.debug("Preview clock started at %.3f", self.start_time)
        return resolve_animated_effects(effects, animations, self.elapsed(now))


PreviewState = tuple[Sequence[Effect], Mapping[str, Mapping[str, AnimationConfig]]]


async def run_preview(
    clock: PreviewClock,
    state_source: Callable[[], PreviewState],
    on_frame: Callable[[tuple[Effect, ...]], None],
    *,
    interval: float = 1.0 / 60.0,
    now: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """クロックが止まるまで tick し、描画すべき effect リストを `on_frame` へ渡す。

    `state_source` は毎 tick 呼ばれ、その時点の (effects, animations) を返す。
    戻り値は描画したフレーム数。
    """

    frames = 0
    while True:
        effects, animations = state_source()
        resolved = clock.tick(effects, animations, now())
        if resolved is None:
            return frames
        on_frame(resolved)
        frames += 1
        await sleep(interval)


__all__ = [
    "MAX_ZOOM",
    "MIN_ZOOM",
    "PreviewClock",
    "ViewState",
    "run_preview",
]
