"""
どこで: `common` パッケージ。
何を: 例外分類・環境変数/設定・ロギング補助など、全層で共有する軽量ユーティリティ。
なぜ: engine/api から再利用する共通基盤を分離し、依存の向きを単純化するため。
"""

from .errors import MathVisError

__all__ = [
    "MathVisError",
]
