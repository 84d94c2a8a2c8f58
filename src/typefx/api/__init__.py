"""typefx の公開 API。

フレーム生成（`render_frame` / `apply_effects`）、アニメーション解決、
GIF / SVG 書き出しの入口をまとめて再公開する。
"""

from __future__ import annotations

from typefx.core.animation import (
    AnimationConfig,
    animated_value,
    default_duration,
    has_active_animations,
    resolve_animated_effects,
)
from typefx.core.effect_list import Effect, create_effect, with_params
from typefx.core.glyphs import load_font
from typefx.core.path_model import PathCommand, parse_path, serialize_path
from typefx.core.path_subdivision import subdivide_path
from typefx.core.pipeline import Frame, apply_effects, render_frame
from typefx.export.gif import GifExportOptions, export_animation, export_animation_sync
from typefx.export.svg import frame_to_svg

__all__ = [
    "AnimationConfig",
    "Effect",
    "Frame",
    "GifExportOptions",
    "PathCommand",
    "animated_value",
    "apply_effects",
    "create_effect",
    "default_duration",
    "export_animation",
    "export_animation_sync",
    "frame_to_svg",
    "has_active_animations",
    "load_font",
    "parse_path",
    "render_frame",
    "resolve_animated_effects",
    "serialize_path",
    "subdivide_path",
    "with_params",
]
