"""
どこで: `engine.export.image`。
何を: 1 フレームの画像を `{save_dir}/tmp/frame_{n:03}.png` として保存する。
なぜ: ファイル名の規約を ffmpeg の入力パターン（`frame_%03d.png`）と 1 か所で揃えるため。
"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from util.paths import frames_dir

FRAME_PATTERN = "frame_%03d.png"


def frame_path(save_dir: str | Path, frame_number: int) -> Path:
    """フレーム番号から保存先パスを返す（3 桁ゼロ埋め、1000 以上はそのまま桁が増える）。"""
    return frames_dir(save_dir) / (FRAME_PATTERN % int(frame_number))


def save_frame(image: Image.Image, save_dir: str | Path, frame_number: int) -> Path:
    """PNG として保存し、保存先パスを返す。

    親ディレクトリ（`{save_dir}/tmp`）は呼び出し側で作成済みであること。
    """
    path = frame_path(save_dir, frame_number)
    image.save(path, format="PNG")
    return path


__all__ = ["FRAME_PATTERN", "frame_path", "save_frame"]
