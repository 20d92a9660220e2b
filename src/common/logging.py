"""
どこで: `common.logging`。
何を: CLI/スクリプト向けの最小ロギング設定を 1 度だけ適用するヘルパ。
なぜ: ライブラリ側は `logging.getLogger(__name__)` だけを使い、ハンドラ構成は上位に任せるため。
"""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: int | str) -> int:
    """`"debug"` や `10` をロギングレベルへ正規化する（不明な名前は INFO）。"""
    if isinstance(level, str):
        return getattr(logging, level.strip().upper(), logging.INFO)
    return int(level)


def setup_default_logging(level: int | str = "INFO") -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - ルートロガーにハンドラが既にあれば何もしない（no-op）
    - 上位のランナー/CLI から呼び出す想定
    """
    lvl = resolve_level(level)

    root = logging.getLogger()
    if root.handlers:
        # Assume the app has configured logging
        return
    logging.basicConfig(level=lvl, format=_FORMAT)


__all__ = ["setup_default_logging", "resolve_level"]
