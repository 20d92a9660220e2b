"""
どこで: `engine.runtime` のワーカ実行層。
何を: 1 回のアニメーション呼び出しを `FrameTask` 群へ分割し、スレッドプールで並行に描画・保存する。
      各タスクの例外は `FrameTaskError` でフレーム番号付きに包み、バッチ末尾でまとめて
      `FrameGenerationError` として送出する。
なぜ: フレーム生成（描画 + PNG エンコード）は互いに独立なので並行化し、共有状態は
      「完了数/失敗」の集計とフレームカウンタの 1 回の前進だけに絞るため。

実行モデル:
- `ThreadPoolExecutor(max_workers=fps)` を `with` ブロックで使い、ブロック終端を join 点とする。
- ワーカは `ScreenSnapshot`（不変）だけを参照し、画像はタスクごとに新規生成する。
- 途中で失敗しても他のタスクは止めない（キャンセルなし）。書き出し済みファイルは残る。
- 全タスク成功時のみ `Screen2D.advance_frame(start + F)` でカウンタを確定する。
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from PIL import Image

from common import settings
from common.errors import FrameGenerationError, FrameTaskError, InvalidConfigurationError
from engine.core.screen import Screen2D, ScreenSnapshot
from engine.export.image import save_frame
from util.paths import ensure_frames_dir

from .task import FrameTask, build_tasks

logger = logging.getLogger(__name__)

RenderFrame = Callable[[float, ScreenSnapshot], Image.Image]


class _BatchTally:
    """完了数と失敗の集計（ワーカ間で共有、専用ロックで保護）。"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._completed = 0
        self._failures: list[FrameTaskError] = []

    def record_success(self) -> None:
        with self._lock:
            self._completed += 1

    def record_failure(self, err: FrameTaskError) -> None:
        with self._lock:
            self._failures.append(err)

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    @property
    def failures(self) -> list[FrameTaskError]:
        with self._lock:
            return sorted(self._failures, key=lambda e: e.frame_number)


def resolve_workers(fps: int, frame_count: int, override: int | None = None) -> int:
    """ワーカ数を決める（既定は fps、`MVS_WORKERS` で上書き、タスク数を上限とする）。"""
    n = override if override is not None else settings.get().WORKERS
    if n is None:
        n = fps
    return max(1, min(int(n), frame_count))


def _execute_frame(
    task: FrameTask, snap: ScreenSnapshot, render: RenderFrame
) -> FrameTaskError | None:
    """1 フレームを描画して保存する。失敗は例外ではなく `FrameTaskError` で返す。"""
    try:
        image = render(task.t, snap)
        save_frame(image, snap.save_dir, task.frame_number)
    except Exception as e:  # ワーカ境界で文脈を付与し、集計側へ渡す
        logger.exception(
            "[worker] stage=frame frame=%d t=%.6f error=%s", task.frame_number, task.t, e
        )
        return FrameTaskError(task.frame_number, e)
    logger.debug("generated frame %d", task.frame_number)
    return None


def _run_task(
    task: FrameTask, snap: ScreenSnapshot, render: RenderFrame, tally: _BatchTally
) -> None:
    err = _execute_frame(task, snap, render)
    if err is None:
        tally.record_success()
    else:
        tally.record_failure(err)


def run_frame_batch(
    screen: Screen2D,
    frame_count: int,
    t_min: float,
    t_max: float,
    render: RenderFrame,
    *,
    workers: int | None = None,
) -> int:
    """`frame_count` 枚のフレームを並行生成し、成功時にフレームカウンタを前進させる。

    Parameters
    ----------
    screen : Screen2D
        共有コンテキスト。読み取りはバッチ開始時のスナップショット 1 回のみ。
    frame_count : int
        生成枚数。0 なら何もしない（カウンタも据え置き）。
    t_min, t_max : float
        パラメータ t のサンプリング区間（両端を含む）。
    render : Callable[[float, ScreenSnapshot], PIL.Image.Image]
        t から 1 フレームぶんの画像を作る関数。スレッドから並行に呼ばれる。
    workers : int | None
        ワーカ数の明示指定。省略時は `resolve_workers`。

    Returns
    -------
    int
        生成したフレーム数。

    Raises
    ------
    FrameGenerationError
        いずれかのフレームが失敗した場合（カウンタは変更しない）。
    """
    if frame_count < 0:
        raise InvalidConfigurationError(f"frame count must be >= 0: {frame_count}")
    if frame_count == 0:
        return 0

    snap = screen.snapshot()
    ensure_frames_dir(snap.save_dir)
    tasks = build_tasks(snap.current_frame, frame_count, t_min, t_max)
    tally = _BatchTally()
    n_workers = resolve_workers(snap.fps, frame_count, workers)

    with ThreadPoolExecutor(max_workers=n_workers, thread_name_prefix="frame") as pool:
        for task in tasks:
            pool.submit(_run_task, task, snap, render, tally)

    completed = tally.completed
    failures = tally.failures
    if failures:
        logger.error(
            "frame batch failed: completed=%d total=%d first_failed=%d",
            completed,
            frame_count,
            failures[0].frame_number,
        )
        raise FrameGenerationError(completed, frame_count, failures)

    screen.advance_frame(snap.current_frame + frame_count)
    logger.info(
        "generated frames %d..%d (%d workers)",
        snap.current_frame,
        snap.current_frame + frame_count - 1,
        n_workers,
    )
    return frame_count


__all__ = ["RenderFrame", "resolve_workers", "run_frame_batch"]
