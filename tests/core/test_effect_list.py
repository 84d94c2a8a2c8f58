"""core.effect_list をテスト。"""

from __future__ import annotations

import pytest

from typefx.core.effect_list import (
    Effect,
    add_effect,
    create_effect,
    delete_effect,
    effect_display_name,
    effect_kinds,
    move_effect,
    param_values,
    toggle_effect,
    update_effect,
    with_params,
)
from typefx.core.effects.multiply import MultiplyParams
from typefx.core.effects.outline import OutlineParams


def _ids(effects) -> list[str]:
    return [e.id for e in effects]


def test_builtin_effect_kinds_are_registered() -> None:
    assert set(effect_kinds()) == {"multiply", "distortion", "outline", "subdivide", "color"}
    assert effect_display_name("multiply") == "Multiply"


def test_create_effect_uses_defaults_and_unique_ids() -> None:
    a = create_effect("multiply")
    b = create_effect("multiply")
    assert a.enabled is True
    assert a.params == MultiplyParams()
    assert a.id != b.id
    assert param_values(a) == {
        "count": 5,
        "offset_x": 10.0,
        "offset_y": 10.0,
        "rotation": 0.0,
        "opacity_decay": 0.2,
    }


def test_create_effect_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        create_effect("sparkle")


def test_effect_rejects_params_of_another_kind() -> None:
    with pytest.raises(TypeError):
        Effect(id="x", kind="multiply", enabled=True, params=OutlineParams())


def test_with_params_clamps_and_rounds() -> None:
    e = create_effect("multiply")
    assert with_params(e, count=100).params.count == 20
    assert with_params(e, count=2.6).params.count == 3
    assert with_params(e, opacity_decay=-1).params.opacity_decay == 0.0
    assert e.params.count == 5


def test_with_params_rejects_unknown_name_and_bad_choice() -> None:
    e = create_effect("distortion")
    with pytest.raises(ValueError):
        with_params(e, speed=1.0)
    with pytest.raises(ValueError):
        with_params(e, wave_type="square")
    with pytest.raises(ValueError):
        with_params(e, amplitude=float("nan"))
    assert with_params(e, wave_type="saw").params.wave_type == "saw"


def test_add_update_toggle_delete() -> None:
    effects = add_effect((), "outline")
    effects = add_effect(effects, "color")
    first, second = effects

    effects = update_effect(effects, first.id, thickness=12)
    assert effects[0].params.thickness == 12.0
    assert effects[1] is second

    effects = toggle_effect(effects, second.id)
    assert effects[1].enabled is False
    effects = toggle_effect(effects, second.id)
    assert effects[1].enabled is True

    assert _ids(delete_effect(effects, first.id)) == [second.id]
    assert _ids(delete_effect(effects, "missing")) == _ids(effects)


def test_move_effect_swaps_with_neighbor() -> None:
    a, b, c = (create_effect("subdivide", effect_id=i) for i in ("a", "b", "c"))
    effects = (a, b, c)
    assert _ids(move_effect(effects, "b", "up")) == ["b", "a", "c"]
    assert _ids(move_effect(effects, "b", "down")) == ["a", "c", "b"]


def test_move_effect_past_edges_or_unknown_id_is_noop() -> None:
    effects = tuple(create_effect("subdivide", effect_id=i) for i in ("a", "b"))
    assert _ids(move_effect(effects, "a", "up")) == ["a", "b"]
    assert _ids(move_effect(effects, "b", "down")) == ["a", "b"]
    assert _ids(move_effect(effects, "zzz", "up")) == ["a", "b"]
    with pytest.raises(ValueError):
        move_effect(effects, "a", "left")
