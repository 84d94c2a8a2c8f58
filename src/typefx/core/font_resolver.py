# どこで: `src/typefx/core/font_resolver.py`。
# 何を: フォント名 / パスを実ファイルへ解決し、探索ディレクトリ内のフォントを列挙する。
# なぜ: CLI / 設定から「ファイル名だけ」でフォントを指定できるようにするため。

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from typefx.core.runtime_config import runtime_config

FONT_SUFFIXES = (".ttf", ".otf")

# ディレクトリ -> その配下のフォントファイル（再帰）。
_FONT_FILES_CACHE: dict[Path, tuple[Path, ...]] = {}


@dataclass(frozen=True, slots=True)
class FontFile:
    """探索で見つかったフォントファイル。

    Attributes
    ----------
    name : str
        ファイル名（例: `Roboto-Regular.ttf`）。
    path : Path
        絶対パス。
    relative_path : Path
        探索ディレクトリからの相対パス。
    family : str
        相対パスの先頭ディレクトリ名。直下に置かれている場合は "Unknown"。
    """

    name: str
    path: Path
    relative_path: Path
    family: str


def _system_font_dirs() -> tuple[Path, ...]:
    """OS 標準のフォントディレクトリ候補を返す（存在確認はしない）。"""

    home = Path.home()
    if sys.platform == "darwin":
        return (Path("/System/Library/Fonts"), Path("/Library/Fonts"), home / "Library" / "Fonts")
    if sys.platform == "win32":
        return (Path("C:/Windows/Fonts"), home / "AppData" / "Local" / "Microsoft" / "Windows" / "Fonts")
    return (Path("/usr/share/fonts"), Path("/usr/local/share/fonts"), home / ".local" / "share" / "fonts")


def _search_dirs() -> list[Path]:
    """探索順のディレクトリ列（config の font_dirs → OS 標準）を返す。"""

    out: list[Path] = []
    for d in (*runtime_config().font_dirs, *_system_font_dirs()):
        if d.is_dir() and d not in out:
            out.append(d)
    return out


def _font_files_in(directory: Path) -> tuple[Path, ...]:
    cached = _FONT_FILES_CACHE.get(directory)
    if cached is not None:
        return cached
    found = tuple(
        sorted(
            p
            for p in directory.rglob("*")
            if p.is_file() and p.suffix.lower() in FONT_SUFFIXES
        )
    )
    _FONT_FILES_CACHE[directory] = found
    return found


def resolve_font_path(font: str | Path) -> Path:
    """フォント指定を実在ファイルの絶対パスへ解決する。

    解決順:
    1) 実在するパス
    2) 探索ディレクトリ内のファイル名完全一致
    3) 探索ディレクトリ内の stem 一致（大文字小文字を区別しない）

    Raises
    ------
    FileNotFoundError
        どこにも見つからない場合。メッセージに探索したディレクトリを含める。
    """

    p = Path(str(font)).expanduser()
    if p.is_file():
        return p.resolve()

    name = p.name
    dirs = _search_dirs()
    for d in dirs:
        for f in _font_files_in(d):
            if f.name == name:
                return f.resolve()
    key = p.stem.lower()
    for d in dirs:
        for f in _font_files_in(d):
            if f.stem.lower() == key:
                return f.resolve()

    searched = ", ".join(str(d) for d in dirs) or "(none)"
    raise FileNotFoundError(
        f"フォントが見つかりません: {font!s}; searched_dirs=[{searched}]"
        "（config.yaml の paths.font_dirs: にフォントのディレクトリを追加してください）"
    )


def list_font_files(dirs: list[Path] | tuple[Path, ...] | None = None) -> list[FontFile]:
    """探索ディレクトリ配下の .ttf / .otf を列挙して返す。

    Parameters
    ----------
    dirs : Sequence[Path] or None, optional
        列挙対象。None の場合は `_search_dirs()`。
    """

    roots = _search_dirs() if dirs is None else [Path(d) for d in dirs if Path(d).is_dir()]
    out: list[FontFile] = []
    for root in roots:
        for f in _font_files_in(root):
            rel = f.relative_to(root)
            family = rel.parts[0] if len(rel.parts) > 1 else "Unknown"
            out.append(FontFile(name=f.name, path=f.resolve(), relative_path=rel, family=family))
    return out


__all__ = ["FONT_SUFFIXES", "FontFile", "list_font_files", "resolve_font_path"]
