from __future__ import annotations

from typefx.core.effects.subdivide import SubdivideParams, subdivide
from typefx.core.path_model import PathCommand, close_path, line_to, move_to
from typefx.core.scene import CharGroup, Outline, Scene


def _scene() -> Scene:
    o = Outline(
        commands=(move_to(0, 0), PathCommand("Q", False, (5.0, 5.0, 10.0, 0.0)), line_to(0, 0), close_path())
    )
    return Scene(groups=(CharGroup(char="A", char_index=0, line_index=0, outlines=(o,)),))


def test_subdivide_replaces_curves_with_lines() -> None:
    cmds = subdivide(_scene(), SubdivideParams(subdivisions=3)).groups[0].outlines[0].commands
    assert [c.kind for c in cmds] == ["M"] + ["L"] * 6 + ["Z"]
    assert cmds[3] == line_to(10, 0)


def test_subdivide_treats_zero_as_one() -> None:
    cmds = subdivide(_scene(), SubdivideParams(subdivisions=0)).groups[0].outlines[0].commands
    assert [c.kind for c in cmds] == ["M", "L", "L", "Z"]


def test_subdivide_rounds_half_up_like_param_meta() -> None:
    cmds = subdivide(_scene(), SubdivideParams(subdivisions=2.5)).groups[0].outlines[0].commands
    assert [c.kind for c in cmds] == ["M"] + ["L"] * 6 + ["Z"]
