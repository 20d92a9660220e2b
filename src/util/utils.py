"""
どこで: `util.utils`。
何を: YAML 構成（`configs/default.yaml` + ルート `config.yaml`）の読み込みと、CLI 既定値の取り出し。
なぜ: 既定値をコードへ埋め込まず、リポジトリ単位で上書きできるようにするため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

# コード既定値（YAML が無い/壊れている場合の最終フォールバック）
DEFAULTS: Dict[str, Any] = {
    "fps": 30,
    "quality": "high",
    "output": "../output/output.mp4",
    "x_range": [-10.0, 10.0],
    "y_range": [-10.0, 10.0],
    "background": [43, 42, 51],
    "axis_color": [255, 255, 255],
}


def _safe_load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("failed to load %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _find_project_root(start: Path) -> Path:
    """プロジェクトルートを推定して返す。

    - `src/` 配下から呼ばれることを想定し、上位に `.git` や `pyproject.toml`、`configs/` がある
      もっとも近いディレクトリを返す。
    - 見つからない場合は `start.parent.parent` をフォールバックとして返す。
    """
    cur = start.resolve()
    for parent in [cur] + list(cur.parents):
        if (
            (parent / ".git").exists()
            or (parent / "pyproject.toml").exists()
            or (parent / "configs").exists()
        ):
            return parent
    # 典型: <repo>/src/util/utils.py -> <repo>
    return cur.parent.parent


def load_config(root: Path | None = None) -> Dict[str, Any]:
    """構成を読み込んで辞書で返す（フェイルソフト）。

    優先順:
    1) `configs/default.yaml`（ベース）
    2) ルート `config.yaml`（ベースに上書き）

    - いずれも存在しない/不正な場合は空辞書を返す。
    - ネストした辞書のディープマージは行わず、トップレベルのみ上書き。
    """
    project_root = root if root is not None else _find_project_root(Path(__file__).parent)
    base: Dict[str, Any] = {}

    default_path = project_root / "configs" / "default.yaml"
    if default_path.exists():
        base.update(_safe_load_yaml(default_path))

    root_config_path = project_root / "config.yaml"
    if root_config_path.exists():
        base.update(_safe_load_yaml(root_config_path))

    return base


def animation_defaults(cfg: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """`DEFAULTS` に YAML の `animation:` セクション（無ければトップレベル）を重ねて返す。"""
    data = load_config() if cfg is None else cfg
    section = data.get("animation", data)
    merged = dict(DEFAULTS)
    if isinstance(section, dict):
        merged.update({k: v for k, v in section.items() if k in DEFAULTS and v is not None})
    return merged


__all__ = ["DEFAULTS", "load_config", "animation_defaults"]
