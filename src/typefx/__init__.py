"""typefx: フォントのグリフ輪郭に effect とアニメーションを掛け、GIF / SVG に書き出す。"""

__version__ = "0.1.0"
