"""
どこで: `engine.render.canvas`。
何を: Pillow の RGB 画像へ背景・座標軸・2D ベクトル（線分 + 矢じり）を描く。
なぜ: 1 フレームぶんの画像をワーカごとに独立して生成できるよう、描画を純関数にまとめるため。

座標:
- 入力はワールド座標。ピクセル座標への変換は `ScreenSnapshot.interpolate` に委ねる。
- 画像サイズは `ScreenSnapshot` の解像度と一致している前提。
"""

from __future__ import annotations

import math
from typing import Iterable

from PIL import Image, ImageDraw

from engine.core.screen import ScreenSnapshot
from util.color import RGB

ARROW_LENGTH = 20
ARROW_HALF_WIDTH = 10
MARKER_HALF_LENGTH = 10
TIP_BASE_RATIO = 0.95

XY = tuple[float, float]


def new_frame(snap: ScreenSnapshot, background: RGB | None = None) -> Image.Image:
    """背景色（省略時は `snap.background`）で塗りつぶした新しいフレーム画像を返す。"""
    fill = background if background is not None else snap.background
    return Image.new("RGB", (snap.width, snap.height), fill)


def _axis_lines(snap: ScreenSnapshot) -> list[tuple[XY, XY]]:
    usable_w, usable_h = snap.quality.usable()
    cx, cy = snap.get_center_pixels()
    vertical = ((cx, snap.height - usable_h), (cx, usable_h))
    horizontal = ((snap.width - usable_w, cy), (usable_w, cy))
    return [vertical, horizontal]


def _axis_tips(snap: ScreenSnapshot) -> list[list[XY]]:
    usable_w, usable_h = snap.quality.usable()
    cx, cy = snap.get_center_pixels()
    top = snap.height - usable_h
    right_tip = [
        (usable_w, cy),
        (usable_w - ARROW_LENGTH, cy + ARROW_HALF_WIDTH),
        (usable_w - ARROW_LENGTH, cy - ARROW_HALF_WIDTH),
    ]
    top_tip = [
        (cx, top),
        (cx - ARROW_HALF_WIDTH, top + ARROW_LENGTH),
        (cx + ARROW_HALF_WIDTH, top + ARROW_LENGTH),
    ]
    return [right_tip, top_tip]


def marker_positions(snap: ScreenSnapshot) -> list[tuple[int, int]]:
    """軸上の整数目盛り（原点を除く）のワールド座標を返す。

    両端の整数は矢じりと重なるため除外する（`ceil(min)+1 .. floor(max)-1`）。
    """
    x_min, x_max = snap.x_axis
    y_min, y_max = snap.y_axis
    xs = range(math.ceil(x_min) + 1, math.floor(x_max))
    ys = range(math.ceil(y_min) + 1, math.floor(y_max))
    out = [(x, 0) for x in xs if x != 0 and y_min <= 0 <= y_max]
    out += [(0, y) for y in ys if y != 0 and x_min <= 0 <= x_max]
    return out


def draw_axis(image: Image.Image, snap: ScreenSnapshot, color: RGB | None = None) -> None:
    """x/y 軸・矢じり・整数目盛りを描く（色の省略時は `snap.axis_color`）。"""
    color = color if color is not None else snap.axis_color
    draw = ImageDraw.Draw(image)
    for start, end in _axis_lines(snap):
        draw.line([start, end], fill=color)
    for tip in _axis_tips(snap):
        draw.polygon(tip, fill=color)
    for wx, wy in marker_positions(snap):
        px, py = snap.interpolate((wx, wy))
        if wy == 0:
            draw.line([(px, py - MARKER_HALF_LENGTH), (px, py + MARKER_HALF_LENGTH)], fill=color)
        else:
            draw.line([(px - MARKER_HALF_LENGTH, py), (px + MARKER_HALF_LENGTH, py)], fill=color)


def rotate_about(point: XY, angle: float, center: XY) -> XY:
    """`point` を `center` まわりに `angle` [rad] 回転した座標。"""
    px, py = point
    ox, oy = center
    c, s = math.cos(angle), math.sin(angle)
    return (
        (px - ox) * c - (py - oy) * s + ox,
        (px - ox) * s + (py - oy) * c + oy,
    )


def vector_tip(x: float, y: float) -> list[XY]:
    """矢じり三角形の頂点（ワールド座標）。

    先端 `(x, y)` を、シャフト 95% 地点まわりに ±120° 回転した 2 点と組にする。
    """
    base = (TIP_BASE_RATIO * x, TIP_BASE_RATIO * y)
    return [
        (x, y),
        rotate_about((x, y), 2.0 * math.pi / 3.0, base),
        rotate_about((x, y), 4.0 * math.pi / 3.0, base),
    ]


def _to_pixels(snap: ScreenSnapshot, points: Iterable[XY]) -> list[XY]:
    return [snap.interpolate(p) for p in points]


def draw_vector(
    image: Image.Image, snap: ScreenSnapshot, x: float, y: float, color: RGB
) -> None:
    """原点から `(x, y)` へのシャフトと塗りつぶした矢じりを描く。"""
    draw = ImageDraw.Draw(image)
    origin = snap.get_center_pixels()
    draw.line([origin, snap.interpolate((x, y))], fill=color)
    draw.polygon(_to_pixels(snap, vector_tip(x, y)), fill=color)


__all__ = [
    "new_frame",
    "draw_axis",
    "draw_vector",
    "marker_positions",
    "rotate_about",
    "vector_tip",
]
