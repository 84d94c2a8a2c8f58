"""
どこで: `src/typefx/devtools/export_text.py`。
何を: `python -m typefx export ...` で、保存済みの effect / アニメーション設定からテキストを GIF / SVG に書き出す。
なぜ: 対話プレビュー無しで書き出しを回せるようにするため。
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from typefx.core.animation import default_duration, resolve_animated_effects
from typefx.core.glyphs import load_font
from typefx.core.output_paths import output_path_for_text
from typefx.core.pipeline import render_frame
from typefx.core.runtime_config import runtime_config, set_config_path
from typefx.core.settings_store import load_settings
from typefx.export.gif import GifExportOptions, export_animation_sync, save_gif
from typefx.export.svg import save_svg


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m typefx export")
    p.add_argument("--fmt", choices=("gif", "svg"), default="gif", help="出力形式（既定: gif）")
    p.add_argument("--text", default=None, help="書き出すテキスト（省略時: 保存済みテキスト）")
    p.add_argument("--font", default=None, help="フォントのパスまたはファイル名（省略時: 保存済みフォント）")
    p.add_argument(
        "--settings",
        default=None,
        help="effect / アニメーション設定の JSON（省略時: config の paths.settings_path）",
    )
    p.add_argument("--out", default=None, help="出力パス（省略時: 既定の出力先）")
    p.add_argument("--run-id", default=None, help="既定出力パスの run_id（ファイル名 suffix）")
    p.add_argument("--canvas", nargs=2, type=int, default=None, metavar=("W", "H"), help="GIF のピクセルサイズ")
    p.add_argument("--fps", type=float, default=None, help="GIF のフレームレート")
    p.add_argument("--duration", type=float, default=None, help="GIF の尺 [s]（省略時: 最長のアニメーション周期）")
    p.add_argument("--t", type=float, default=0.0, help="SVG を書き出す時刻 [s]（既定: 0.0）")
    p.add_argument("--fg", default=None, help="前景色（currentColor）")
    p.add_argument("--bg", default=None, help="背景色")
    p.add_argument("--wireframe", action="store_true", help="塗りではなく輪郭線で描く")
    p.add_argument("--config", default=None, help="config.yaml のパス（指定した場合は探索より優先）")
    p.add_argument("--verbose", action="store_true", help="ログを表示する")
    return p.parse_args(argv)


def _print_progress(ratio: float) -> None:
    print(f"\rExporting GIF: {ratio * 100:5.1f}%", end="", file=sys.stderr, flush=True)


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if args.config is not None:
        set_config_path(args.config)

    settings = load_settings(args.settings)
    text = settings.text if args.text is None else str(args.text)
    font_spec = args.font if args.font is not None else settings.selected_font
    if not font_spec:
        print("error: --font を指定してください（保存済みフォントがありません）", file=sys.stderr)
        return 2

    try:
        font = load_font(font_spec)
    except (FileNotFoundError, RuntimeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    gif_cfg = runtime_config().gif
    fg = gif_cfg.foreground_color if args.fg is None else str(args.fg)
    bg = gif_cfg.background_color if args.bg is None else str(args.bg)
    wireframe = bool(args.wireframe or settings.wireframe)

    if args.fmt == "svg":
        effects = resolve_animated_effects(settings.effects, settings.animations, float(args.t))
        frame = render_frame(text, font, wireframe, effects)
        out_path = (
            Path(str(args.out))
            if args.out is not None
            else output_path_for_text(text, kind="svg", ext="svg", run_id=args.run_id)
        )
        save_svg(frame, out_path, current_color=fg, background_color=bg)
        print(f"Saved SVG: {out_path} (t={float(args.t)})")
        return 0

    width, height = (gif_cfg.width, gif_cfg.height) if args.canvas is None else args.canvas
    duration = default_duration(settings.animations) if args.duration is None else float(args.duration)
    options = GifExportOptions(
        width=int(width),
        height=int(height),
        fps=gif_cfg.fps if args.fps is None else float(args.fps),
        duration=duration,
        foreground_color=fg,
        background_color=bg,
        supersample=gif_cfg.supersample,
    )
    data = export_animation_sync(
        font,
        text,
        wireframe,
        settings.effects,
        settings.animations,
        options,
        _print_progress,
    )
    print(file=sys.stderr)

    out_path = (
        Path(str(args.out))
        if args.out is not None
        else output_path_for_text(
            text, kind="gif", ext="gif", canvas_size=(options.width, options.height), run_id=args.run_id
        )
    )
    save_gif(data, out_path)
    print(f"Saved GIF: {out_path} ({len(data)} bytes)")
    return 0


__all__ = ["main"]
