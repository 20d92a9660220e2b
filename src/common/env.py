"""
どこで: `common.env`（`common.settings` からのみ利用）。
何を: `MVS_*` 環境変数を int / bool / str として読む。不正値は黙って既定値に倒す。
なぜ: 環境変数の誤記でレンダリング全体を止めず、設定層の既定値へ委ねるため。
"""

from __future__ import annotations

import os
from typing import Optional


def env_int(
    name: str, default: Optional[int] = None, *, min_value: Optional[int] = None
) -> Optional[int]:
    """`MVS_FPS` / `MVS_WORKERS` などの整数値。未設定や数値でない値は `default`、
    `min_value` 未満は `min_value` に切り上げる（fps/ワーカ数 0 を防ぐ）。
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        val = int(raw)
    except ValueError:
        return default
    if min_value is not None and val < min_value:
        val = min_value
    return val


def env_bool(name: str, default: bool = False) -> bool:
    """`MVS_KEEP_FRAMES` などのフラグ。数値は非 0 で真、yes/no・on/off 等も受理。"""
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    try:
        # 数値優先
        return int(raw) != 0
    except ValueError:
        s = raw.strip().lower()
        if s in {"true", "t", "yes", "y", "on"}:
            return True
        if s in {"false", "f", "no", "n", "off"}:
            return False
        return bool(default)


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """前後の空白を除いた文字列。空白だけの値は未設定とみなす。"""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


__all__ = ["env_int", "env_bool", "env_str"]
