"""
どこで: `api.show`。
何を: スクリーンに描画・アニメーションできる 2D オブジェクトの構造的インタフェース `Show2D`。
なぜ: シーン実行や `Screen2D.can_contain` が具体型（Vector2D）に依存せず、x/y と操作群だけで扱えるようにするため。

状態遷移:
- Unattached（コンテキスト未設定）→ `add_context` 成功で Attached。
- Attached のオブジェクトだけが `draw` とモーション操作を実行できる。
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence, runtime_checkable

from PIL import Image

from engine.core.matrix import Matrix
from engine.core.screen import Screen2D

Parametric = Callable[[float], tuple[float, float]]


@runtime_checkable
class Show2D(Protocol):
    @property
    def x(self) -> float: ...

    @property
    def y(self) -> float: ...

    @property
    def context(self) -> Screen2D | None: ...

    def add_context(self, context: Screen2D) -> "Show2D": ...

    def draw(self, color: object, image: Image.Image) -> None: ...

    def move_along_parametric(
        self, duration: float, parametric: Parametric, t_min: float, t_max: float
    ) -> "Show2D": ...

    def rotate(self, duration: float, angle: float, center: Sequence[float]) -> "Show2D": ...

    def move_to(self, duration: float, target: Sequence[float]) -> "Show2D": ...

    def multiply_by_matrix(self, duration: float, matrix: Matrix) -> "Show2D": ...

    def rotate_then_scale(self, duration: float, matrix: Matrix) -> "Show2D": ...


__all__ = ["Show2D", "Parametric"]
