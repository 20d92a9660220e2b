"""
どこで: `common.errors`。
何を: 線形代数層・スクリーン・アニメーションエンジンが送出する例外の分類（単一基底 `MathVisError`）。
なぜ: 呼び出し側が失敗の種類ごとに捕捉でき、CLI では 1 つの基底でまとめて扱えるようにするため。

分類:
- `DimensionMismatchError`: 次元の合わないベクトル/点/行列の演算。
- `InvalidShapeError`: 空行列・行長不一致・正方/2x2 でない行列。
- `DegenerateValueError`: ノルム 0 の正規化、行列式 0 の逆行列など。
- `OutOfBoundsError`: アタッチ時に座標がスクリーンの軸範囲外。
- `MissingContextError`: コンテキスト未設定のまま描画/アニメーション。
- `FrameGenerationError`: バッチ内のフレーム生成失敗（完了数/総数を保持）。
- `InvalidConfigurationError`: 軸範囲/解像度/フレームカウンタの不正。
"""

from __future__ import annotations

from typing import Sequence


class MathVisError(Exception):
    """プロジェクト共通の基底例外。"""


class DimensionMismatchError(MathVisError):
    def __init__(self, left: object, right: object, op: str = "operation") -> None:
        super().__init__(f"dimension mismatch in {op}: {left} vs {right}")
        self.left = left
        self.right = right


class InvalidShapeError(MathVisError):
    pass


class DegenerateValueError(MathVisError):
    pass


class OutOfBoundsError(MathVisError):
    pass


class MissingContextError(MathVisError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "This object does not have an associated context. Try using add_context()."
        )


class InvalidConfigurationError(MathVisError):
    pass


class FrameTaskError(MathVisError):
    """1 フレームぶんの失敗を frame_number 付きで保持する。"""

    def __init__(self, frame_number: int, original: BaseException) -> None:
        super().__init__(f"frame {frame_number} failed: {original!r}")
        self.frame_number = frame_number
        self.original = original


class FrameGenerationError(MathVisError):
    """バッチ全体の失敗。`completed`/`total` は診断用の部分完了数。"""

    def __init__(
        self,
        completed: int,
        total: int,
        failures: Sequence[FrameTaskError] = (),
    ) -> None:
        super().__init__(f"Frame generation failed. Completed: {completed}, Total: {total}")
        self.completed = completed
        self.total = total
        self.failures = tuple(failures)


class VideoAssemblyError(MathVisError):
    pass


class SceneError(MathVisError):
    pass


__all__ = [
    "MathVisError",
    "DimensionMismatchError",
    "InvalidShapeError",
    "DegenerateValueError",
    "OutOfBoundsError",
    "MissingContextError",
    "InvalidConfigurationError",
    "FrameTaskError",
    "FrameGenerationError",
    "VideoAssemblyError",
    "SceneError",
]
