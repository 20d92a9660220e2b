"""
どこで: `common.settings`
何を: プロジェクトの環境変数（`MVS_*`）を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。

優先順位は CLI 引数 > 環境変数 > `configs/*.yaml` > コード既定値。
ここでは環境変数の層だけを扱い、未設定は `None`（= 下位の層に委ねる）で表す。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_int, env_str


@dataclass
class _Settings:
    # Animation
    FPS: int | None = None
    QUALITY: str | None = None

    # Workers（None なら fps と同数）
    WORKERS: int | None = None

    # Video assembly
    FFMPEG: str | None = None
    KEEP_FRAMES: bool = False

    # Misc
    LOG_LEVEL: str = "INFO"


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - bool は `env_bool`、int は `env_int`、文字列は `env_str` を使用。
    - fps/ワーカ数は 1 未満を 1 に丸める。
    """
    # Animation
    _settings.FPS = env_int("MVS_FPS", None, min_value=1)
    quality = env_str("MVS_QUALITY")
    _settings.QUALITY = quality.lower() if quality is not None else None

    # Workers
    _settings.WORKERS = env_int("MVS_WORKERS", None, min_value=1)

    # Video assembly
    _settings.FFMPEG = env_str("MVS_FFMPEG")
    _settings.KEEP_FRAMES = env_bool("MVS_KEEP_FRAMES", False)

    # Misc
    _settings.LOG_LEVEL = env_str("MVS_LOG_LEVEL", "INFO") or "INFO"


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
