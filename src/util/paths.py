"""
どこで: `util.paths`。
何を: フレーム画像の一時ディレクトリ `{output_dir}/tmp` の作成と後片付け。
なぜ: ワーカが並行に書き込む前にディレクトリを用意し、動画生成後に安全に消せるようにするため。
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

FRAMES_SUBDIR = "tmp"


def frames_dir(output_dir: str | Path) -> Path:
    return Path(output_dir) / FRAMES_SUBDIR


def ensure_frames_dir(output_dir: str | Path) -> Path:
    """フレーム出力先 `{output_dir}/tmp/` を作成して返す。

    - 親ディレクトリも同時に作成される。
    - 既存の場合もそのまま Path を返す。
    - 並行呼び出しに対して `exist_ok=True` で安全。
    """
    out = frames_dir(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    return out


def remove_frames_dir(output_dir: str | Path) -> None:
    """`{output_dir}/tmp/` を中身ごと削除する（存在しなければ何もしない）。"""
    out = frames_dir(output_dir)
    if out.is_dir():
        shutil.rmtree(out)
        logger.debug("removed frames dir %s", out)


def ensure_output_parent(output: str | Path) -> Path:
    """動画ファイルの親ディレクトリを作成し、解決済みのパスを返す。

    相対パスはカレントディレクトリ基準。
    """
    path = Path(output).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


__all__ = [
    "FRAMES_SUBDIR",
    "frames_dir",
    "ensure_frames_dir",
    "remove_frames_dir",
    "ensure_output_parent",
]
