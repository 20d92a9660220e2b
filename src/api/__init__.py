"""
どこで: `api` 入口（高レベル公開 API）。
何を: `Vector2D`・`Screen2D`・`Matrix` などアニメーションの記述に必要な型と、シーン実行を再輸出。
なぜ: 利用者が単一名前空間からスクリーン生成→アタッチ→モーション→動画化まで完結できるようにするため。

Usage:
    from api import Matrix, Screen2D, Vector2D, join_frames

    screen = Screen2D((-3, 3), (-3, 3), "out", 30, 1920, 1080)
    v = Vector2D(1.0, 0.0, "#ffcc00").add_context(screen)
    v = v.rotate_then_scale(2.0, Matrix([[1, 1], [0, 1]]))
    join_frames("out/output.mp4", 30, False, "out")
"""

from common.errors import MathVisError

# コアクラス（高度な使用）
from engine.core.matrix import Matrix
from engine.core.point import Point, Vector
from engine.core.screen import Quality, Screen2D
from engine.export.video import join_frames

from .scene import Scene, load_scene, run_scene
from .show import Show2D

# 主要API
from .vector2d import Vector2D

__all__ = [
    # メインAPI
    "Vector2D",
    "Screen2D",
    "Quality",
    "Show2D",
    "join_frames",
    # シーン
    "Scene",
    "load_scene",
    "run_scene",
    # 線形代数
    "Point",
    "Vector",
    "Matrix",
    # 例外基底
    "MathVisError",
]

# バージョン情報
__version__ = "0.1.0"
