"""core.animation をテスト。"""

from __future__ import annotations

import pytest

from typefx.core.animation import (
    EASINGS,
    AnimationConfig,
    animated_value,
    animation_config_for,
    canonical_easing,
    default_duration,
    has_active_animations,
    prune_animations,
    resolve_animated_effects,
    set_animation,
)
from typefx.core.effect_list import create_effect
from typefx.core.parameters.meta import ParamMeta


def _linear(**kwargs) -> AnimationConfig:
    base = dict(enabled=True, min=0.0, max=100.0, speed=1.0, easing="linear", ping_pong=False)
    base.update(kwargs)
    return AnimationConfig(**base)


def test_linear_one_way_cycle() -> None:
    cfg = _linear()
    assert animated_value(cfg, 0.0) == 0.0
    assert animated_value(cfg, 0.25) == 25.0
    assert animated_value(cfg, 1.25) == 25.0


def test_ping_pong_peaks_at_half_period() -> None:
    cfg = _linear(ping_pong=True)
    assert animated_value(cfg, 0.25) == 50.0
    assert animated_value(cfg, 0.5) == 100.0
    assert animated_value(cfg, 0.75) == 50.0
    assert animated_value(cfg, 1.0) == 0.0


def test_speed_scales_period() -> None:
    cfg = _linear(speed=2.0)
    assert animated_value(cfg, 0.25) == 50.0


def test_non_positive_speed_holds_minimum() -> None:
    assert animated_value(_linear(min=3.0, speed=0.0), 0.7) == 3.0
    assert animated_value(_linear(min=3.0, speed=-1.0), 0.7) == 3.0


def test_disabled_config_always_returns_minimum() -> None:
    cfg = _linear(min=7.0, enabled=False)
    assert [animated_value(cfg, t) for t in (0.0, 0.3, 0.5, 12.9)] == [7.0, 7.0, 7.0, 7.0]



def test_easings_start_at_zero_and_end_at_one() -> None:
    for name, fn in EASINGS.items():
        assert fn(0.0) == pytest.approx(0.0, abs=1e-9), name
        assert fn(1.0) == pytest.approx(1.0, abs=1e-9), name


def test_ease_in_out_is_symmetric_at_midpoint() -> None:
    assert EASINGS["ease-in-out"](0.5) == pytest.approx(0.5)
    assert EASINGS["ease"](0.25) == EASINGS["ease-in-out"](0.25)


def test_elastic_overshoot_is_not_clamped() -> None:
    cfg = _linear(easing="elastic")
    assert animated_value(cfg, 0.2) > 100.0


def test_animation_config_validation() -> None:
    with pytest.raises(ValueError):
        AnimationConfig(easing="wobbly")
    with pytest.raises(ValueError):
        AnimationConfig(min=10.0, max=1.0)


def test_canonical_easing_accepts_aliases() -> None:
    assert canonical_easing("bounce-out") == "bounce"
    assert canonical_easing("elastic-out") == "elastic"
    assert canonical_easing("linear") == "linear"
    with pytest.raises(ValueError):
        canonical_easing("nope")


def test_animation_config_for_uses_parameter_range() -> None:
    cfg = animation_config_for(ParamMeta(kind="float", ui_min=-5.0, ui_max=5.0))
    assert (cfg.min, cfg.max, cfg.enabled) == (-5.0, 5.0, False)
    cfg = animation_config_for(ParamMeta(kind="float"))
    assert (cfg.min, cfg.max) == (0.0, 100.0)


def test_default_duration_is_longest_enabled_period() -> None:
    animations = {
        "a": {"count": _linear(speed=0.5), "rotation": _linear(speed=4.0)},
        "b": {"amplitude": _linear(speed=0.1, enabled=False)},
    }
    assert default_duration(animations) == 2.0
    assert default_duration({"a": {"count": _linear(speed=0.25)}}) == 4.0
    assert default_duration({}) == 2.0


def test_has_active_animations() -> None:
    assert not has_active_animations({})
    assert not has_active_animations({"a": {"count": _linear(enabled=False)}})
    assert has_active_animations({"a": {"count": _linear()}})


def test_resolve_animated_effects_overrides_numeric_params_only() -> None:
    m = create_effect("multiply", effect_id="m")
    d = create_effect("distortion", effect_id="d")
    animations = {
        "m": {"count": _linear(min=1.0, max=20.0), "removed_param": _linear()},
        "d": {"wave_type": _linear(), "amplitude": _linear(enabled=False)},
    }
    out = resolve_animated_effects((m, d), animations, 0.5)
    assert out[0].params.count == 11
    assert isinstance(out[0].params.count, int)
    assert out[1] is d
    assert m.params.count == 5


def test_resolve_animated_effects_does_not_clamp_to_param_range() -> None:
    m = create_effect("multiply", effect_id="m")
    out = resolve_animated_effects((m,), {"m": {"offset_x": _linear(min=0.0, max=400.0)}}, 0.5)
    assert out[0].params.offset_x == 200.0


def test_prune_and_set_animation_return_copies() -> None:
    keep = create_effect("outline", effect_id="keep")
    animations = {"keep": {"thickness": _linear()}, "gone": {"count": _linear()}}
    pruned = prune_animations(animations, [keep])
    assert set(pruned) == {"keep"}
    assert "gone" in animations

    updated = set_animation(pruned, "keep", "thickness", _linear(max=5.0))
    assert updated["keep"]["thickness"].max == 5.0
    assert pruned["keep"]["thickness"].max == 100.0
