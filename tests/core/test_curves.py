from __future__ import annotations

import pytest

from typefx.core.curves import (
    normal,
    point_on_cubic,
    point_on_line,
    point_on_quadratic,
    tangent_on_cubic,
    tangent_on_line,
    tangent_on_quadratic,
)


def test_point_on_line_hits_endpoints_exactly() -> None:
    p0 = (0.1, 0.7)
    p1 = (3.3, -2.9)
    assert point_on_line(p0, p1, 0.0) == p0
    assert point_on_line(p0, p1, 1.0) == p1


def test_bezier_midpoints() -> None:
    assert point_on_quadratic((0, 0), (1, 2), (2, 0), 0.5) == (1.0, 1.0)
    assert point_on_cubic((0, 0), (0, 1), (1, 1), (1, 0), 0.5) == (0.5, 0.75)


def test_tangents_are_unit_vectors() -> None:
    assert tangent_on_line((0, 0), (0, 5)) == (0.0, 1.0)
    assert tangent_on_quadratic((0, 0), (1, 2), (2, 0), 0.5) == (1.0, 0.0)
    tx, ty = tangent_on_cubic((0, 0), (1, 3), (2, -1), (4, 2), 0.3)
    assert tx * tx + ty * ty == pytest.approx(1.0)


def test_degenerate_tangent_falls_back_to_x_axis() -> None:
    assert tangent_on_line((2, 2), (2, 2)) == (1.0, 0.0)
    assert tangent_on_cubic((1, 1), (1, 1), (1, 1), (1, 1), 0.5) == (1.0, 0.0)


def test_normal_rotates_tangent_by_90_degrees() -> None:
    assert normal((1.0, 0.0)) == (0.0, 1.0)
    assert normal((0.0, 1.0)) == (-1.0, 0.0)
