"""書き出し（ラスタライズ / GIF / SVG）。"""
