"""共通フィクスチャ。

- 乱数シード固定
- tmp_path に書き出す小さな Screen2D
- 設定（`MVS_*`）の隔離
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import numpy as np
import pytest

from common import settings
from engine.core.screen import Screen2D


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture()
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """テスト中は `MVS_*` を消した状態で設定を読み直す。"""
    for name in (
        "MVS_FPS",
        "MVS_QUALITY",
        "MVS_WORKERS",
        "MVS_FFMPEG",
        "MVS_KEEP_FRAMES",
        "MVS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    settings.reload_from_env()
    yield
    monkeypatch.undo()
    settings.reload_from_env()


@pytest.fixture()
def screen(tmp_path: Path) -> Screen2D:
    """低解像度・低 fps のスクリーン（フレームは tmp_path/tmp に出る）。"""
    return Screen2D((-5.0, 5.0), (-5.0, 5.0), tmp_path, 4, 854, 480)


@pytest.fixture()
def frame_names(tmp_path: Path):
    """`tmp_path/tmp` に書き出されたフレームのファイル名（昇順）を返す関数。"""

    def _names() -> list[str]:
        return sorted(p.name for p in (tmp_path / "tmp").glob("frame_*.png"))

    return _names
