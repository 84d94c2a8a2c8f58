"""core.effects.distortion をテスト。"""

from __future__ import annotations

import math

import pytest

from typefx.core.effects.distortion import (
    DISTORTION_SUBDIVISIONS,
    DistortionParams,
    distort_commands,
    distortion,
)
from typefx.core.path_model import PathCommand, close_path, line_to, move_to
from typefx.core.path_subdivision import subdivide_path
from typefx.core.scene import CharGroup, Outline, PathStyle, Scene


def _ys(commands) -> list[float]:
    return [c.operands[1] for c in commands if c.kind == "L"]


def test_zero_amplitude_equals_plain_subdivision() -> None:
    cmds = [
        move_to(0, 0),
        PathCommand("Q", False, (30.0, 40.0, 60.0, 0.0)),
        line_to(60, 60),
        close_path(),
    ]
    expected = subdivide_path(cmds, DISTORTION_SUBDIVISIONS)
    for wave in ("sine", "saw", "triangle"):
        out = distort_commands(cmds, wave_type=wave, amplitude=0.0, frequency=2.0, phase=33.0)
        assert out == expected


def test_sine_displaces_along_normal_by_arc_length() -> None:
    out = distort_commands([move_to(0, 0), line_to(80, 0)], amplitude=10.0, frequency=1.0, phase=90.0)
    assert len(out) == 1 + DISTORTION_SUBDIVISIONS
    assert out[0] == move_to(0, 0)
    xs = [c.operands[0] for c in out[1:]]
    assert xs == pytest.approx([10.0 * i for i in range(1, 9)])
    assert _ys(out) == pytest.approx([10.0 * math.cos(10.0 * i) for i in range(1, 9)])


def test_saw_and_triangle_waves() -> None:
    line = [move_to(0, 0), line_to(2 * math.pi, 0)]
    # 弧長 i*pi/4 + 位相 pi/8 なので、周期内位置は (2i + 1) / 16。
    fracs = [((2 * i + 1) / 16) % 1.0 for i in range(1, 9)]

    saw = _ys(distort_commands(line, wave_type="saw", amplitude=1.0, frequency=1.0, phase=22.5))
    assert saw == pytest.approx([2 * f - 1 for f in fracs])

    tri = _ys(distort_commands(line, wave_type="triangle", amplitude=1.0, frequency=1.0, phase=22.5))
    assert tri == pytest.approx([4 * f - 1 if f < 0.5 else 1 - (f - 0.5) * 4 for f in fracs])


def test_unknown_wave_type_behaves_as_triangle_and_sin_alias_as_sine() -> None:
    line = [move_to(0, 0), line_to(50, 10)]
    assert distort_commands(line, wave_type="zigzag") == distort_commands(line, wave_type="triangle")
    assert distort_commands(line, wave_type="sin") == distort_commands(line, wave_type="sine")


def test_move_restarts_arc_length_and_close_is_kept() -> None:
    square = [move_to(0, 0), line_to(16, 0), close_path()]
    out = distort_commands(square + [move_to(100, 0), line_to(116, 0)], amplitude=5.0, phase=45.0)
    n = DISTORTION_SUBDIVISIONS
    assert out[n + 1] == close_path()
    first = _ys(out[: n + 1])
    second = _ys(out[n + 2 :])
    assert first == pytest.approx(second)


def test_empty_and_passthrough_commands() -> None:
    assert distort_commands([]) == []
    h = PathCommand("H", False, (5.0,))
    out = distort_commands([move_to(0, 0), h, line_to(5, 8)], amplitude=3.0)
    assert out[1] == h


def test_distortion_effect_keeps_style_and_groups() -> None:
    style = PathStyle(fill="currentColor")
    g = CharGroup(
        char="A",
        char_index=0,
        line_index=0,
        outlines=(Outline(commands=(move_to(0, 0), line_to(10, 0), close_path()), style=style),),
    )
    out = distortion(Scene(groups=(g,)), DistortionParams())
    assert len(out.groups) == 1
    assert out.groups[0].outlines[0].style == style
    assert len(out.groups[0].outlines[0].commands) == 1 + DISTORTION_SUBDIVISIONS + 1
