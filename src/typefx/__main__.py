# どこで: `src/typefx/__main__.py`。
# 何を: `python -m typefx ...` の CLI エントリポイントを提供する。
# なぜ: 書き出しと一覧表示を短い導線で実行できるようにするため。

from __future__ import annotations

import argparse
import sys


def _strip_separator(rest: list[str]) -> list[str]:
    out = list(rest)
    if out and out[0] == "--":
        out = out[1:]
    return out


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="python -m typefx")
    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("export", help="テキストを GIF / SVG に書き出す", add_help=False)
    sub.add_parser("list", help="組み込み effect / フォントを一覧表示する", add_help=False)

    args, rest = p.parse_known_args(argv)

    if args.cmd == "export":
        from typefx.devtools import export_text

        return int(export_text.main(_strip_separator(rest)))

    if args.cmd == "list":
        from typefx.devtools import list_builtins

        return int(list_builtins.main(_strip_separator(rest)))

    raise AssertionError(f"unknown cmd: {args.cmd!r}")


if __name__ == "__main__":
    raise SystemExit(main())
