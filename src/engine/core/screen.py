"""
どこで: `engine.core.screen`。
何を: 共有・可変のスクリーンコンテキスト `Screen2D`（軸範囲/解像度/fps/保存先/フレームカウンタ）と、
      ワーカへ渡す不変スナップショット `ScreenSnapshot`、出力解像度の `Quality`。
なぜ: 1 回のアニメーション呼び出しの間、ワールド→ピクセル変換に必要な読み取り専用値は 1 度だけ
      ロック下で取り出し、可変なのはフレームカウンタの前進（バッチ末尾の 1 回）だけにするため。

座標系:
- ワールド座標の原点のピクセル位置は軸範囲の非対称性に比例する（中央固定ではない）。
  `cx = width * |x_min| / (|x_min| + |x_max|)`, `cy = height * |y_max| / (|y_max| + |y_min|)`。
- 倍率は「解像度の 95%」/「各軸の絶対値の和」。画面の y は下向きなのでワールド y を反転する。

スレッド安全性:
- `Screen2D` の全フィールドは `threading.Lock` の下で読み書きする。
- ワーカは `snapshot()` で得た `ScreenSnapshot` だけを参照し、ライブのコンテキストには触れない。
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from common.errors import InvalidConfigurationError
from util.color import AXIS_COLOR, BACKGROUND, RGB

logger = logging.getLogger(__name__)

AxisRange = tuple[float, float]
USABLE_FRACTION = 0.95


class Quality(enum.Enum):
    """出力解像度（4 種固定）。"""

    LOW = (854, 480)
    MEDIUM = (1280, 720)
    HIGH = (1920, 1080)
    ULTRA = (3840, 2160)

    @property
    def width(self) -> int:
        return self.value[0]

    @property
    def height(self) -> int:
        return self.value[1]

    def resolution(self) -> tuple[float, float]:
        return float(self.value[0]), float(self.value[1])

    def usable(self) -> tuple[float, float]:
        """描画に使う領域（解像度の 95%）。"""
        w, h = self.resolution()
        return USABLE_FRACTION * w, USABLE_FRACTION * h

    @classmethod
    def from_resolution(cls, width: int, height: int) -> "Quality":
        for q in cls:
            if q.value == (int(width), int(height)):
                return q
        raise InvalidConfigurationError(f"unsupported resolution: {width}x{height}")

    @classmethod
    def parse(cls, name: str) -> "Quality":
        """`"low"|"medium"|"high"|"ultra"`（大文字小文字不問）または `"1920x1080"`。"""
        key = name.strip()
        try:
            return cls[key.upper()]
        except KeyError:
            pass
        if "x" in key.lower():
            w, _, h = key.lower().partition("x")
            try:
                return cls.from_resolution(int(w), int(h))
            except ValueError:
                pass
        raise InvalidConfigurationError(f"unknown quality: {name!r}")

    def __str__(self) -> str:
        return self.name.lower()


class HasXY(Protocol):
    @property
    def x(self) -> float: ...

    @property
    def y(self) -> float: ...


def _validate_range(name: str, axis: AxisRange) -> AxisRange:
    lo, hi = float(axis[0]), float(axis[1])
    if not lo < hi:
        raise InvalidConfigurationError(f"invalid {name} range: min must be < max ({lo}, {hi})")
    return lo, hi


def in_axis_range(value: float, axis: AxisRange) -> bool:
    start, end = axis
    return start <= float(value) <= end


@dataclass(frozen=True)
class ScreenSnapshot:
    """ワーカが 1 バッチの間に参照する読み取り専用の値。"""

    x_axis: AxisRange
    y_axis: AxisRange
    width: int
    height: int
    fps: int
    save_dir: Path
    current_frame: int
    background: RGB = BACKGROUND
    axis_color: RGB = AXIS_COLOR

    @property
    def quality(self) -> Quality:
        return Quality.from_resolution(self.width, self.height)

    def get_center_pixels(self) -> tuple[float, float]:
        """ワールド原点 (0, 0) のピクセル座標。"""
        x_min, x_max = self.x_axis
        y_min, y_max = self.y_axis
        cx = self.width * abs(x_min) / (abs(x_min) + abs(x_max))
        cy = self.height * abs(y_max) / (abs(y_max) + abs(y_min))
        return cx, cy

    def scaling_factor(self) -> tuple[float, float]:
        usable_w, usable_h = USABLE_FRACTION * self.width, USABLE_FRACTION * self.height
        sx = usable_w / (abs(self.x_axis[0]) + abs(self.x_axis[1]))
        sy = usable_h / (abs(self.y_axis[0]) + abs(self.y_axis[1]))
        return sx, sy

    def interpolate(self, point: tuple[float, float]) -> tuple[float, float]:
        """ワールド座標 → ピクセル座標（y 反転）。"""
        x, y = float(point[0]), float(point[1])
        cx, cy = self.get_center_pixels()
        sx, sy = self.scaling_factor()
        return x * sx + cx, -y * sy + cy

    def can_contain(self, obj: HasXY) -> bool:
        return in_axis_range(obj.x, self.x_axis) and in_axis_range(obj.y, self.y_axis)


class Screen2D:
    """2D アニメーションの共有コンテキスト。

    1 プロセスで 1 度生成し、アニメーション呼び出しの間はワーカ間で参照共有される。
    フレームカウンタは単調増加で、`advance_frame` だけが更新する。
    """

    def __init__(
        self,
        x_range: AxisRange,
        y_range: AxisRange,
        save_dir: str | Path,
        fps: int,
        width: int,
        height: int,
        *,
        background: RGB = BACKGROUND,
        axis_color: RGB = AXIS_COLOR,
    ) -> None:
        self._x_axis = _validate_range("x", x_range)
        self._y_axis = _validate_range("y", y_range)
        Quality.from_resolution(width, height)
        if int(fps) <= 0:
            raise InvalidConfigurationError(f"fps must be positive: {fps}")
        self._width = int(width)
        self._height = int(height)
        self._fps = int(fps)
        self._save_dir = Path(save_dir)
        self._current_frame = 0
        self._background = tuple(background)
        self._axis_color = tuple(axis_color)
        self._lock = threading.Lock()

    @classmethod
    def from_quality(
        cls,
        x_range: AxisRange,
        y_range: AxisRange,
        save_dir: str | Path,
        fps: int,
        quality: Quality,
        **style: RGB,
    ) -> "Screen2D":
        return cls(x_range, y_range, save_dir, fps, quality.width, quality.height, **style)

    # ---- 読み取り（ロック下） ----
    @property
    def x_axis(self) -> AxisRange:
        with self._lock:
            return self._x_axis

    @property
    def y_axis(self) -> AxisRange:
        with self._lock:
            return self._y_axis

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def fps(self) -> int:
        return self._fps

    @property
    def save_dir(self) -> Path:
        return self._save_dir

    @property
    def current_frame(self) -> int:
        with self._lock:
            return self._current_frame

    def snapshot(self) -> ScreenSnapshot:
        """読み取り専用フィールドを 1 度のロック取得でまとめて取り出す。"""
        with self._lock:
            return ScreenSnapshot(
                x_axis=self._x_axis,
                y_axis=self._y_axis,
                width=self._width,
                height=self._height,
                fps=self._fps,
                save_dir=self._save_dir,
                current_frame=self._current_frame,
                background=self._background,
                axis_color=self._axis_color,
            )

    def get_center_pixels(self) -> tuple[float, float]:
        return self.snapshot().get_center_pixels()

    def interpolate(self, point: tuple[float, float]) -> tuple[float, float]:
        return self.snapshot().interpolate(point)

    def can_contain(self, obj: HasXY) -> bool:
        return self.snapshot().can_contain(obj)

    # ---- 更新 ----
    def change_dimensions(self, x_range: AxisRange, y_range: AxisRange) -> None:
        """両軸の範囲を検証してから同時に置き換える。"""
        x_axis = _validate_range("x", x_range)
        y_axis = _validate_range("y", y_range)
        with self._lock:
            self._x_axis = x_axis
            self._y_axis = y_axis

    def advance_frame(self, new_value: int) -> None:
        """フレームカウンタを前進させる。`new_value <= current_frame` は拒否。"""
        with self._lock:
            if new_value <= self._current_frame:
                raise InvalidConfigurationError(
                    f"cannot move frame counter backward ({self._current_frame} -> {new_value})"
                )
            logger.debug("frame counter %d -> %d", self._current_frame, new_value)
            self._current_frame = int(new_value)

    def __repr__(self) -> str:
        snap = self.snapshot()
        return (
            f"Screen2D(x={snap.x_axis}, y={snap.y_axis}, {snap.width}x{snap.height}, "
            f"fps={snap.fps}, frame={snap.current_frame})"
        )


__all__ = [
    "AxisRange",
    "Quality",
    "ScreenSnapshot",
    "Screen2D",
    "in_axis_range",
    "USABLE_FRACTION",
]
