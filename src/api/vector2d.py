"""
どこで: `api.vector2d`。
何を: スクリーンへアタッチして描画・アニメーションする 2D ベクトル `Vector2D`。
なぜ: すべてのモーション（回転/移動/行列変換/極分解）を 1 つのパラメトリック関数
      `f(t) -> (x, y)` に還元し、フレーム生成を `engine.runtime.worker` に一本化するため。

使い方:
    screen = Screen2D((-3, 3), (-3, 3), "out", 30, 1920, 1080)
    v = Vector2D(0.0, 1.0, "#ff8800").add_context(screen)
    v = v.rotate(1.0, math.pi / 2, (0.0, 0.0))
    v = v.multiply_by_matrix(1.0, Matrix([[1, 0], [1, 1]]))

値の扱い:
- `Vector2D` の位置は不変。モーション操作は描画後に「終点に置かれた新しい Vector2D」を返す
  （同じコンテキスト/色を引き継ぐ）。元のインスタンスの位置は変わらない。
- 範囲チェックはアタッチ時のみ。アニメーション途中で軸範囲外に出ても失敗にはしない。
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np
from PIL import Image

from common.errors import (
    DimensionMismatchError,
    InvalidConfigurationError,
    InvalidShapeError,
    MissingContextError,
    OutOfBoundsError,
)
from engine.core.matrix import Matrix
from engine.core.numeric import NumberLike
from engine.core.point import Vector
from engine.core.screen import Screen2D, ScreenSnapshot
from engine.render.canvas import draw_axis, draw_vector, new_frame
from engine.runtime.worker import run_frame_batch
from util.color import AXIS_COLOR, RGB, to_u8_rgb

from .show import Parametric

logger = logging.getLogger(__name__)


def frame_count_for(duration: float, fps: int) -> int:
    """`round(duration * fps)`。負の duration は `InvalidConfigurationError`。"""
    if duration < 0 or not math.isfinite(duration):
        raise InvalidConfigurationError(f"duration must be a finite value >= 0: {duration}")
    return int(round(duration * fps))


def _xy(value: Sequence[float] | "Vector2D") -> tuple[float, float]:
    if isinstance(value, Vector2D):
        return value.x, value.y
    if len(value) != 2:
        raise DimensionMismatchError(2, len(value), "2D coordinate")
    return float(value[0]), float(value[1])


class Vector2D:
    """スクリーンに描画できる 2D ベクトル。"""

    __slots__ = ("_vector", "_context", "_color")

    def __init__(
        self,
        x: NumberLike,
        y: NumberLike,
        color: object = AXIS_COLOR,
        *,
        context: Screen2D | None = None,
    ) -> None:
        self._vector = Vector([x, y])
        self._color: RGB = to_u8_rgb(color)
        self._context: Screen2D | None = None
        if context is not None:
            self._check_contained(context)
            self._context = context

    # ── ファクトリ ───────────────────
    @classmethod
    def origin(cls, color: object = AXIS_COLOR) -> "Vector2D":
        return cls(0.0, 0.0, color)

    @classmethod
    def from_vector(
        cls, vector: Vector, color: object = AXIS_COLOR, *, context: Screen2D | None = None
    ) -> "Vector2D":
        if vector.dimensions != 2:
            raise DimensionMismatchError(2, vector.dimensions, "Vector2D")
        obj = cls.__new__(cls)
        obj._vector = vector
        obj._color = to_u8_rgb(color)
        obj._context = None
        if context is not None:
            obj._check_contained(context)
            obj._context = context
        return obj

    # ── アクセサ ─────────────────────
    @property
    def x(self) -> float:
        return float(self._vector[0])

    @property
    def y(self) -> float:
        return float(self._vector[1])

    @property
    def vector(self) -> Vector:
        return self._vector

    @property
    def color(self) -> RGB:
        return self._color

    @property
    def context(self) -> Screen2D | None:
        return self._context

    @property
    def is_attached(self) -> bool:
        return self._context is not None

    def __repr__(self) -> str:
        state = "attached" if self.is_attached else "unattached"
        return f"Vector2D({self.x}, {self.y}, color={self._color}, {state})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector2D):
            return NotImplemented
        return self._vector == other._vector and self._context is other._context

    def __hash__(self) -> int:
        return hash((self._vector, id(self._context)))

    # ── コンテキスト ─────────────────
    def _check_contained(self, context: Screen2D) -> None:
        if not context.can_contain(self):
            raise OutOfBoundsError(
                f"Vector cannot be contained within the context's bounds: ({self.x}, {self.y})"
            )

    def add_context(self, context: Screen2D) -> "Vector2D":
        """コンテキストへアタッチする（in-place、チェーン用に self を返す）。

        範囲外なら `OutOfBoundsError` を送出し、Unattached のまま残る。
        """
        self._check_contained(context)
        self._context = context
        return self

    attach = add_context

    def _require_context(self) -> Screen2D:
        if self._context is None:
            raise MissingContextError()
        return self._context

    def moved_to(self, x: NumberLike, y: NumberLike) -> "Vector2D":
        """同じ色・コンテキストのまま位置だけ差し替えたインスタンス（範囲チェックなし）。"""
        obj = Vector2D(x, y, self._color)
        obj._context = self._context
        return obj

    # ── 描画 ─────────────────────────
    def render_at(self, snap: ScreenSnapshot, x: float, y: float) -> Image.Image:
        """背景 → 軸 → ベクトルの順に 1 フレームを描いた画像を返す。"""
        image = new_frame(snap)
        draw_axis(image, snap)
        draw_vector(image, snap, x, y, self._color)
        return image

    def draw(self, color: object, image: Image.Image) -> None:
        """現在位置のベクトルを `image` へ描く。Unattached なら `MissingContextError`。"""
        context = self._require_context()
        draw_vector(image, context.snapshot(), self.x, self.y, to_u8_rgb(color))

    # ── モーション ───────────────────
    def move_along_parametric(
        self,
        duration: float,
        parametric: Parametric,
        t_min: float,
        t_max: float,
    ) -> "Vector2D":
        """`t ∈ [t_min, t_max]` を等間隔に標本化し、各 t の `parametric(t)` 位置を 1 フレームずつ描く。

        Parameters
        ----------
        duration : float
            秒数。フレーム数は `round(duration * fps)`（0 なら何も書き出さない）。
        parametric : Callable[[float], tuple[float, float]]
            t → ワールド座標。スレッドから並行に呼ばれるため副作用を持たないこと。
        t_min, t_max : float
            標本化区間（両端を含む。1 フレームのときは t_min のみ）。

        Returns
        -------
        Vector2D
            `parametric(t_max)` に置かれた新しいインスタンス（同じコンテキスト/色）。

        Raises
        ------
        MissingContextError
            Unattached の場合。
        FrameGenerationError
            いずれかのフレームの生成/保存に失敗した場合（フレームカウンタは据え置き）。
        """
        context = self._require_context()
        frames = frame_count_for(duration, context.fps)
        # 終点はバッチ確定前に評価する（F <= 1 では t_max を描画しない）
        end_x, end_y = parametric(t_max)

        def render(t: float, snap: ScreenSnapshot) -> Image.Image:
            x, y = parametric(t)
            return self.render_at(snap, float(x), float(y))

        run_frame_batch(context, frames, t_min, t_max, render)
        return self.moved_to(float(end_x), float(end_y))

    def rotate(self, duration: float, angle: float, center: Sequence[float]) -> "Vector2D":
        """`center` まわりに 0 → `angle` [rad] だけ回転させる。"""
        cx, cy = _xy(center)
        x0, y0 = self.x - cx, self.y - cy

        def f(t: float) -> tuple[float, float]:
            c, s = math.cos(t), math.sin(t)
            return x0 * c - y0 * s + cx, x0 * s + y0 * c + cy

        return self.move_along_parametric(duration, f, 0.0, float(angle))

    def move_to(self, duration: float, target: Sequence[float] | "Vector2D") -> "Vector2D":
        """現在位置から `target` まで直線補間で移動する。"""
        tx, ty = _xy(target)
        x0, y0 = self.x, self.y

        def f(t: float) -> tuple[float, float]:
            return (1.0 - t) * x0 + t * tx, (1.0 - t) * y0 + t * ty

        return self.move_along_parametric(duration, f, 0.0, 1.0)

    def multiply_by_matrix(self, duration: float, matrix: Matrix) -> "Vector2D":
        """`matrix · v` の位置まで移動する。`matrix` は 2x2 必須。"""
        self._require_context()
        if matrix.dimensions != (2, 2):
            raise InvalidShapeError(f"Matrix is not 2x2: {matrix.dimensions}")
        image = matrix.apply(self._vector)
        return self.move_to(duration, (float(image[0]), float(image[1])))

    def rotate_then_scale(self, duration: float, matrix: Matrix) -> "Vector2D":
        """極分解 `M = Q S` に従い、前半で Q、後半で S を適用する。"""
        self._require_context()
        q, s = matrix.polar_decomposition_2d()
        logger.debug("polar decomposition Q=%s S=%s", q.tolist(), s.tolist())
        half = duration / 2.0
        mid = self.multiply_by_matrix(half, q)
        return mid.multiply_by_matrix(half, s)

    # ── 代数 ─────────────────────────
    def dot(self, other: "Vector2D") -> float:
        return float(self._vector.dot(other._vector))

    def __add__(self, other: object) -> "Vector2D":
        if not isinstance(other, Vector2D):
            return NotImplemented
        if (
            self._context is not None
            and other._context is not None
            and self._context is not other._context
        ):
            raise InvalidConfigurationError("cannot add vectors attached to different contexts")
        obj = Vector2D.from_vector(self._vector + other._vector, self._color)
        obj._context = self._context if self._context is not None else other._context
        return obj

    def __mul__(self, scalar: object) -> "Vector2D":
        if isinstance(scalar, (Vector2D, Matrix)) or isinstance(scalar, np.ndarray):
            return NotImplemented
        scaled = self._vector * scalar
        if scaled is NotImplemented:
            return NotImplemented
        obj = Vector2D.from_vector(scaled, self._color)
        obj._context = self._context
        return obj

    def __rmul__(self, other: object) -> "Vector2D":
        if isinstance(other, Matrix):
            return self.__rmatmul__(other)
        return self.__mul__(other)

    def __rmatmul__(self, other: object) -> "Vector2D":
        if not isinstance(other, Matrix):
            return NotImplemented
        obj = Vector2D.from_vector(other.apply(self._vector), self._color)
        obj._context = self._context
        return obj


__all__ = ["Vector2D", "frame_count_for"]
