# どこで: `src/typefx/export/gif.py`。
# 何を: アニメーションを一定間隔でサンプリングし、ラスタライズ → 減色 → GIF エンコードする。
# なぜ: プレビューと同じ effect / アニメーション計算で、ループ GIF をオフラインに生成するため。

"""アニメーション GIF 書き出し。

処理の流れ（フレーム i ごと）
-----------------------------
1. `t = i / fps` でアニメーション値を解決（`resolve_animated_effects`）
2. `render_frame` でシーンと viewport を生成
3. `rasterize_frame` で RGB ピクセル化
4. `quantize`（≤256 色のパレット）→ `apply_palette`（インデックス化）
5. `GifEncoder.write_frame`（delay = round(1000 / fps) ms）
6. 進捗 `(i + 1) / total` を通知、`i % yield_every == 0` ならイベントループへ譲る

Notes
-----
- 入力の effect / アニメーションはフレーム 0 の前に写しを取る。以降の変更は反映しない。
- 失敗は 1 つの RuntimeError にまとめ、途中まで作ったデータは捨てる。
- タスクのキャンセル（`asyncio.CancelledError`）は譲り点でそのまま伝播する。
"""

from __future__ import annotations

import asyncio
import logging
import math
import struct
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import GifImagePlugin, Image

from typefx.core.animation import AnimationConfig, resolve_animated_effects
from typefx.core.effect_list import Effect
from typefx.core.glyphs import GlyphOutlineProvider
from typefx.core.pipeline import render_frame
from typefx.core.runtime_config import runtime_config
from typefx.export.raster import rasterize_frame

logger = logging.getLogger(__name__)

MAX_COLORS = 256

# NETSCAPE2.0 アプリケーション拡張（ループ回数 0 = 無限）。
_LOOP_FOREVER = b"!\xff\x0bNETSCAPE2.0\x03\x01\x00\x00\x00"

ProgressCallback = Callable[[float], None]
YieldPoint = Callable[[], Awaitable[None]]


def _round_half_up(x: float) -> int:
    return int(math.floor(float(x) + 0.5))


@dataclass(frozen=True, slots=True)
class GifExportOptions:
    """GIF 書き出しのオプション。

    Attributes
    ----------
    width, height : int
        出力ピクセルサイズ。
    fps : float
        フレームレート（> 0）。
    duration : float
        尺 [s]（>= 0）。フレーム数は `max(1, round(fps * duration))`。
    foreground_color, background_color : str
        前景（`currentColor`）と背景の CSS 色。
    supersample : int
        ラスタライズ時の内部解像度倍率。
    """

    width: int = 800
    height: int = 600
    fps: float = 20.0
    duration: float = 2.0
    foreground_color: str = "#ffffff"
    background_color: str = "#000000"
    supersample: int = 2

    def __post_init__(self) -> None:
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ValueError(f"width/height は正の値である必要があります: got={self.width}x{self.height}")
        if not (math.isfinite(float(self.fps)) and float(self.fps) > 0.0):
            raise ValueError(f"fps は正の値である必要があります: got={self.fps}")
        if not (math.isfinite(float(self.duration)) and float(self.duration) >= 0.0):
            raise ValueError(f"duration は 0 以上である必要があります: got={self.duration}")
        if int(self.supersample) < 1:
            raise ValueError(f"supersample は 1 以上である必要があります: got={self.supersample}")

    @classmethod
    def from_config(cls, *, duration: float = 2.0) -> GifExportOptions:
        """`config.yaml` の `export.gif` を既定値として使う。"""

        cfg = runtime_config().gif
        return cls(
            width=cfg.width,
            height=cfg.height,
            fps=cfg.fps,
            duration=float(duration),
            foreground_color=cfg.foreground_color,
            background_color=cfg.background_color,
            supersample=cfg.supersample,
        )


def frame_schedule(fps: float, duration: float) -> tuple[int, int]:
    """`(総フレーム数, フレーム間隔 [ms])` を返す。

    総フレーム数は `max(1, round(fps * duration))`、間隔は `round(1000 / fps)`。
    """

    f = float(fps)
    if not (math.isfinite(f) and f > 0.0):
        raise ValueError(f"fps は正の値である必要があります: got={fps}")
    total = max(1, _round_half_up(f * float(duration)))
    delay = _round_half_up(1000.0 / f)
    return total, delay


def _pad_palette(palette: np.ndarray) -> np.ndarray:
    """パレットを 256 色へ埋める（不足分は先頭色の繰り返し）。"""

    pal = np.asarray(palette, dtype=np.uint8).reshape(-1, 3)
    if pal.shape[0] == 0:
        pal = np.zeros((1, 3), dtype=np.uint8)
    if pal.shape[0] > MAX_COLORS:
        raise ValueError(f"パレットは最大 {MAX_COLORS} 色です: got={pal.shape[0]}")
    if pal.shape[0] < MAX_COLORS:
        fill = np.repeat(pal[:1], MAX_COLORS - pal.shape[0], axis=0)
        pal = np.concatenate([pal, fill], axis=0)
    return pal


def quantize(pixels: np.ndarray, max_colors: int = MAX_COLORS) -> np.ndarray:
    """RGB 画像から最大 `max_colors` 色のパレット（shape (k, 3) uint8）を作る。"""

    n = int(max_colors)
    if not 1 <= n <= MAX_COLORS:
        raise ValueError(f"max_colors は 1..{MAX_COLORS} である必要があります: got={max_colors}")
    img = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    q = img.quantize(colors=n, method=Image.Quantize.MEDIANCUT, dither=Image.Dither.NONE)
    used = int(np.asarray(q).max()) + 1
    raw = q.getpalette() or []
    pal = np.asarray(raw[: used * 3], dtype=np.uint8).reshape(-1, 3)
    return pal


def apply_palette(pixels: np.ndarray, palette: np.ndarray) -> np.ndarray:
    """各ピクセルを最も近いパレット色のインデックス（shape (H, W) uint8）へ写す。"""

    img = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    pal_img = Image.new("P", (1, 1))
    pal_img.putpalette(_pad_palette(palette).flatten().tolist())
    indexed = img.quantize(palette=pal_img, dither=Image.Dither.NONE)
    return np.asarray(indexed, dtype=np.uint8)


class GifEncoder:
    """インデックス化済みフレームを受け取り、無限ループ GIF のバイト列を作る。

    フレームはローカルカラーテーブル付きで 1 枚ずつ書き出す。内容が同じ連続フレームも
    統合しない（`Image.save(save_all=True)` は統合して遅延を合算してしまう）。
    LZW 圧縮は `GifImagePlugin.getdata` に任せる。遅延は GIF の仕様上 10 ms 単位へ丸める。
    """

    def __init__(self) -> None:
        self._frames: list[Image.Image] = []
        self._delays: list[int] = []
        self._data: bytes | None = None

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def delays(self) -> tuple[int, ...]:
        return tuple(self._delays)

    def write_frame(
        self,
        index: np.ndarray,
        width: int,
        height: int,
        *,
        palette: np.ndarray,
        delay: int,
    ) -> None:
        """1 フレームを追加する。

        Parameters
        ----------
        index : np.ndarray
            shape (height, width) のパレットインデックス。
        palette : np.ndarray
            shape (k, 3) のフレーム固有パレット（k <= 256）。
        delay : int
            表示時間 [ms]。
        """

        if self._data is not None:
            raise RuntimeError("finish() 後に write_frame() は呼べません")
        idx = np.ascontiguousarray(index, dtype=np.uint8)
        if idx.shape != (int(height), int(width)):
            raise ValueError(
                f"index の shape が不正です: expected={(int(height), int(width))}, got={idx.shape}"
            )
        img = Image.frombytes("P", (int(width), int(height)), idx.tobytes())
        img.putpalette(_pad_palette(palette).flatten().tolist())
        self._frames.append(img)
        self._delays.append(int(delay))

    def finish(self) -> None:
        """GIF バイト列を確定する。"""

        if not self._frames:
            raise RuntimeError("フレームが 1 枚もありません")
        width, height = self._frames[0].size
        out = bytearray(b"GIF89a")
        # 論理画面記述子（グローバルカラーテーブル無し）。
        out += struct.pack("<HHBBB", width, height, 0, 0, 0)
        out += _LOOP_FOREVER
        for img, delay in zip(self._frames, self._delays):
            # GCE: disposal 1（残す）、透明色無し、遅延は 1/100 秒単位。
            delay_cs = min(0xFFFF, _round_half_up(delay / 10.0))
            out += b"!\xf9\x04" + struct.pack("<BHBB", 0b00000100, delay_cs, 0, 0)
            for chunk in GifImagePlugin.getdata(img, include_color_table=True):
                out += chunk
        out += b";"
        self._data = bytes(out)

    def bytes(self) -> bytes:
        if self._data is None:
            raise RuntimeError("finish() の前に bytes() は呼べません")
        return self._data


async def _yield_to_event_loop() -> None:
    await asyncio.sleep(0)


async def export_animation(
    font: GlyphOutlineProvider,
    text: str,
    wireframe: bool,
    effects: Sequence[Effect],
    animations: Mapping[str, Mapping[str, AnimationConfig]],
    options: GifExportOptions | None = None,
    on_progress: ProgressCallback | None = None,
    *,
    yield_point: YieldPoint | None = None,
    yield_every: int | None = None,
    encoder_factory: Callable[[], GifEncoder] = GifEncoder,
) -> bytes:
    """アニメーションを GIF バイト列として書き出す。

    Parameters
    ----------
    font : GlyphOutlineProvider
        ロード済みフォント。
    text, wireframe, effects, animations
        書き出し対象の状態。呼び出し時点の写しを使う。
    options : GifExportOptions or None, optional
        None の場合は `GifExportOptions.from_config()`。
    on_progress : Callable[[float], None] or None, optional
        各フレーム後に `(i + 1) / total` で呼ばれる。
    yield_point : Callable[[], Awaitable[None]] or None, optional
        協調的に処理を譲るための awaitable。既定は `asyncio.sleep(0)`。
    yield_every : int or None, optional
        何フレームごとに譲るか。None の場合は `config.yaml` の `export.gif.yield_every`。

    Returns
    -------
    bytes
        GIF89a のバイト列。

    Raises
    ------
    ValueError
        オプションが不正な場合。
    RuntimeError
        フレーム生成・エンコードのいずれかが失敗した場合。
    """

    opts = GifExportOptions.from_config() if options is None else options
    every = runtime_config().gif.yield_every if yield_every is None else int(yield_every)
    if every < 1:
        raise ValueError(f"yield_every は 1 以上である必要があります: got={yield_every}")
    pause = _yield_to_event_loop if yield_point is None else yield_point

    base_effects = tuple(effects)
    anims = {str(eid): dict(per) for eid, per in animations.items()}
    text_s = str(text)
    total, delay = frame_schedule(opts.fps, opts.duration)

    logger.info(
        "Exporting GIF: frames=%d size=%dx%d fps=%g delay=%dms",
        total,
        opts.width,
        opts.height,
        opts.fps,
        delay,
    )
    encoder = encoder_factory()
    try:
        for i in range(total):
            t = i / float(opts.fps)
            frame_effects = resolve_animated_effects(base_effects, anims, t)
            frame = render_frame(text_s, font, wireframe, frame_effects)
            pixels = rasterize_frame(
                frame,
                opts.width,
                opts.height,
                foreground_color=opts.foreground_color,
                background_color=opts.background_color,
                supersample=opts.supersample,
            )
            palette = quantize(pixels, MAX_COLORS)
            index = apply_palette(pixels, palette)
            encoder.write_frame(index, opts.width, opts.height, palette=palette, delay=delay)
            if on_progress is not None:
                on_progress((i + 1) / total)
            logger.debug("Encoded frame %d/%d (t=%.3f)", i + 1, total, t)
            if i % every == 0:
                await pause()
        encoder.finish()
        data = encoder.bytes()
    except Exception as exc:
        raise RuntimeError(f"GIF export に失敗しました: {exc}") from exc

    logger.info("Exported GIF: %d bytes", len(data))
    return data


def export_animation_sync(*args, **kwargs) -> bytes:  # type: ignore[no-untyped-def]
    """`export_animation` をイベントループ外から同期的に実行する。"""
    return asyncio.run(export_animation(*args, **kwargs))


class AnimationExporter:
    """同時に 1 つの書き出しだけを許可するラッパ。"""

    def __init__(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    async def export(self, *args, **kwargs) -> bytes:  # type: ignore[no-untyped-def]
        """`export_animation` を実行する。書き出し中なら RuntimeError。"""

        if self._busy:
            raise RuntimeError("GIF export は既に実行中です")
        self._busy = True
        try:
            return await export_animation(*args, **kwargs)
        finally:
            self._busy = False


def save_gif(data: bytes, path: str | Path) -> Path:
    """GIF バイト列をファイルへ保存し、パスを返す。"""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data)
    return p


__all__ = [
    "AnimationExporter",
    "GifEncoder",
    "GifExportOptions",
    "MAX_COLORS",
    "apply_palette",
    "export_animation",
    "export_animation_sync",
    "frame_schedule",
    "quantize",
    "save_gif",
]
