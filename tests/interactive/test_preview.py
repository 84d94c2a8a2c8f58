"""interactive.runtime.preview をテスト。"""

from __future__ import annotations

import asyncio

import pytest

from typefx.core.animation import AnimationConfig
from typefx.core.effect_list import create_effect
from typefx.interactive.runtime.preview import MAX_ZOOM, MIN_ZOOM, PreviewClock, ViewState, run_preview


def _active() -> dict:
    cfg = AnimationConfig(enabled=True, min=0.0, max=100.0, speed=1.0, easing="linear", ping_pong=False)
    return {"o": {"thickness": cfg}}


def test_zoom_at_keeps_cursor_point_fixed() -> None:
    view = ViewState().zoom_at(100.0, 100.0, wheel_delta=1.0)
    assert view.zoom == pytest.approx(0.9)
    assert (view.pan_x, view.pan_y) == pytest.approx((10.0, 10.0))

    view = ViewState().zoom_at(0.0, 0.0, wheel_delta=-3.0)
    assert view.zoom == pytest.approx(1.1)
    assert (view.pan_x, view.pan_y) == (0.0, 0.0)


def test_zoom_is_clamped() -> None:
    view = ViewState(zoom=MAX_ZOOM).zoom_at(50.0, 50.0, wheel_delta=-1.0)
    assert view.zoom == MAX_ZOOM
    assert (view.pan_x, view.pan_y) == (0.0, 0.0)
    assert ViewState().with_zoom(0.01).zoom == MIN_ZOOM


def test_pan_and_reset() -> None:
    view = ViewState().pan_by(5.0, -2.0).pan_by(1.0, 1.0)
    assert (view.pan_x, view.pan_y) == (6.0, -1.0)
    assert view.reset() == ViewState()


def test_clock_runs_only_while_animations_are_active() -> None:
    clock = PreviewClock()
    effects = (create_effect("outline", effect_id="o"),)

    assert clock.tick(effects, {}, now=1.0) is None
    assert not clock.running

    resolved = clock.tick(effects, _active(), now=5.0)
    assert clock.running
    assert resolved is not None and resolved[0].params.thickness == 0.0

    resolved = clock.tick(effects, _active(), now=5.25)
    assert resolved is not None and resolved[0].params.thickness == 25.0

    assert clock.tick(effects, {}, now=6.0) is None
    assert clock.elapsed(7.0) == 0.0

    # 再開すると t=0 からやり直す。
    resolved = clock.tick(effects, _active(), now=9.5)
    assert resolved is not None and resolved[0].params.thickness == 0.0


def test_run_preview_stops_when_animations_are_disabled() -> None:
    effects = (create_effect("outline", effect_id="o"),)
    states = [(effects, _active())] * 3 + [(effects, {})]
    times = iter([0.0, 0.1, 0.2, 0.3])
    frames: list[float] = []
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    count = asyncio.run(
        run_preview(
            PreviewClock(),
            lambda: states.pop(0),
            lambda resolved: frames.append(resolved[0].params.thickness),
            interval=0.5,
            now=lambda: next(times),
            sleep=fake_sleep,
        )
    )
    assert count == 3
    assert frames == pytest.approx([0.0, 10.0, 20.0])
    assert sleeps == [0.5, 0.5, 0.5]
