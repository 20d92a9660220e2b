"""
どこで: `engine.export.video`。
何を: `{dir}/tmp/frame_%03d.png` の連番フレームを ffmpeg で MP4（libx264/yuv420p）または GIF にまとめる。
なぜ: フレーム生成（並行）と動画化（1 回の外部プロセス）を分離し、失敗を明確な例外で返すため。

ffmpeg の解決順:
1) 設定 `MVS_FFMPEG`
2) `imageio_ffmpeg.get_ffmpeg_exe()`（同梱バイナリ）
3) PATH 上の `ffmpeg`
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

import imageio_ffmpeg

from common import settings
from common.errors import VideoAssemblyError
from util.paths import frames_dir as _frames_dir

from .image import FRAME_PATTERN

logger = logging.getLogger(__name__)


def resolve_ffmpeg(explicit: str | None = None) -> str:
    """ffmpeg 実行ファイルのパスを返す。見つからなければ `VideoAssemblyError`。"""
    configured = explicit or settings.get().FFMPEG
    if configured:
        return configured
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError as e:
        logger.debug("imageio-ffmpeg binary unavailable: %s", e)
    found = shutil.which("ffmpeg")
    if found is None:
        raise VideoAssemblyError("ffmpeg executable not found (set MVS_FFMPEG or install ffmpeg)")
    return found


def build_ffmpeg_command(
    ffmpeg: str, output: str | Path, fps: int, gif: bool, frames_dir: str | Path
) -> list[str]:
    """ffmpeg の引数列を組み立てる（入力は `{frames_dir}/tmp/frame_%03d.png`）。"""
    pattern = _frames_dir(frames_dir) / FRAME_PATTERN
    cmd = [
        ffmpeg,
        "-framerate",
        str(int(fps)),
        "-i",
        str(pattern),
        "-nostats",
        "-loglevel",
        "0",
        "-y",
    ]
    if gif:
        cmd.extend(["-f", "gif"])
    else:
        cmd.extend(["-c:v", "libx264", "-pix_fmt", "yuv420p"])
    cmd.append(str(output))
    return cmd


def _run(cmd: Sequence[str]) -> subprocess.CompletedProcess:
    return subprocess.run(list(cmd), capture_output=True, text=True)


def join_frames(
    output: str | Path,
    fps: int,
    gif: bool,
    frames_dir: str | Path,
    *,
    ffmpeg: str | None = None,
) -> Path:
    """フレーム列を 1 本の動画にまとめ、出力パスを返す。

    Raises
    ------
    VideoAssemblyError
        ffmpeg が見つからない・起動できない・非 0 で終了した場合。
    """
    exe = resolve_ffmpeg(ffmpeg)
    cmd = build_ffmpeg_command(exe, output, fps, gif, frames_dir)
    logger.info("assembling %s at %d fps (%s)", output, fps, "gif" if gif else "mp4")
    try:
        proc = _run(cmd)
    except OSError as e:
        raise VideoAssemblyError(f"failed to launch ffmpeg: {e}") from e
    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise VideoAssemblyError(
            f"ffmpeg exited with status {proc.returncode}" + (f": {stderr}" if stderr else "")
        )
    return Path(output)


__all__ = ["resolve_ffmpeg", "build_ffmpeg_command", "join_frames"]
