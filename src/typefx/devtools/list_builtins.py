"""
どこで: `src/typefx/devtools/list_builtins.py`。
何を: 組み込み effect と、探索ディレクトリ内のフォントを CLI 用に列挙する。
なぜ: 使える effect 名 / フォント名を探す手間を下げるため。
"""

from __future__ import annotations

import argparse
import sys

from typefx.core.effect_list import effect_kinds, effect_spec
from typefx.core.font_resolver import list_font_files
from typefx.core.runtime_config import set_config_path


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m typefx list")
    p.add_argument(
        "target",
        nargs="?",
        default="all",
        choices=("effects", "fonts", "all"),
        help="一覧対象（省略時: all）",
    )
    p.add_argument("--config", default=None, help="config.yaml のパス")
    return p.parse_args(argv)


def _effect_lines() -> list[str]:
    lines: list[str] = []
    for kind in sorted(effect_kinds()):
        spec = effect_spec(kind)
        params = ", ".join(spec.meta.keys())
        lines.append(f"{kind} ({spec.display_name}): {params}")
    return lines


def _font_lines() -> list[str]:
    return [f"{f.family}\t{f.name}\t{f.path}" for f in list_font_files()]


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    if args.config is not None:
        set_config_path(args.config)
    target = str(args.target)

    if target in ("effects", "all"):
        if target == "all":
            print("effects:")
        for line in _effect_lines():
            print(line)
    if target in ("fonts", "all"):
        if target == "all":
            print("fonts:")
        for line in _font_lines():
            print(line)
    return 0


__all__ = ["main"]
