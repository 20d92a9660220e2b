"""
どこで: `engine.runtime` のタスク定義。
何を: ワーカへ渡す 1 フレームぶんの `FrameTask`（バッチ内番号・保存用フレーム番号・パラメータ t）。
なぜ: バッチ分割の規則（t のサンプリングと連番）を 1 か所に固定し、ワーカ側を単純にするため。
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class FrameTask:
    """メインスレッド → ワーカへ送る描画タスク。"""

    index: int  # バッチ内の 0 始まり番号
    frame_number: int  # 保存ファイル名に使う通し番号
    t: float


def sample_time(index: int, frame_count: int, t_min: float, t_max: float) -> float:
    """`t_i = t_min + i / (F - 1) * (t_max - t_min)`。

    `F == 1` のときは `t_min` を返す（0 除算を避ける）。
    """
    if frame_count <= 1:
        return float(t_min)
    return float(t_min) + index / (frame_count - 1) * (float(t_max) - float(t_min))


def build_tasks(
    start_frame: int, frame_count: int, t_min: float, t_max: float
) -> list[FrameTask]:
    """`start_frame` から連番で `frame_count` 個のタスクを作る。"""
    return [
        FrameTask(
            index=i,
            frame_number=start_frame + i,
            t=sample_time(i, frame_count, t_min, t_max),
        )
        for i in range(frame_count)
    ]


__all__ = ["FrameTask", "sample_time", "build_tasks"]
