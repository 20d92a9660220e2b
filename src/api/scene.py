"""
どこで: `api.scene`。
何を: YAML のシーンファイル（スクリーン範囲・オブジェクト・ステップ列）を読み込み、順に実行する。
なぜ: アニメーションの台本をコードから切り離し、CLI から 1 ファイルで動画を生成できるようにするため。

ファイル形式:
    screen: {x_range: [-3, 3], y_range: [-3, 3]}
    objects:
      v: {x: 0.0, y: 1.0, color: "#ffffff"}
    steps:
      - {object: v, op: rotate, duration: 1.0, angle: 1.5708, center: [0, 0]}
      - {object: v, op: move_to, duration: 1.0, target: [1, 1]}
      - {object: v, op: multiply_by_matrix, duration: 1.0, matrix: [[1, 0], [1, 1]]}
      - {object: v, op: rotate_then_scale, duration: 2.0, matrix: [[1, 0], [1, 1]]}

検証:
- トップレベル（screen/objects/steps の型、オブジェクト定義）は `load_scene` で検証し、
  不正なら `SceneError`。
- 各ステップは実行直前に検証する。`skip_invalid=True` のときだけ不正なステップを
  WARNING ログで読み飛ばす。フレーム生成の失敗は読み飛ばさない。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import numpy as np
import yaml

from common.errors import InvalidShapeError, SceneError
from engine.core.matrix import Matrix
from engine.core.screen import AxisRange, Screen2D
from util.color import to_u8_rgb

from .vector2d import Vector2D

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectSpec:
    name: str
    x: float
    y: float
    color: object = "#ffffff"


@dataclass(frozen=True)
class Step:
    """検証済みの 1 ステップ。`args` は op ごとの追加引数。"""

    object: str
    op: str
    duration: float
    args: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Scene:
    objects: Mapping[str, ObjectSpec]
    steps: Sequence[Mapping[str, Any]]
    x_range: AxisRange | None = None
    y_range: AxisRange | None = None
    source: Path | None = None


# ── 値の検証 ──────────────────────────


def _number(raw: Mapping[str, Any], key: str, where: str) -> float:
    if key not in raw:
        raise SceneError(f"{where}: missing '{key}'")
    value = raw[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneError(f"{where}: '{key}' must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise SceneError(f"{where}: '{key}' must be finite, got {value!r}")
    return float(value)


def _pair(value: Any, key: str, where: str) -> tuple[float, float]:
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 2
        or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in value)
        or any(isinstance(v, float) and not math.isfinite(v) for v in value)
    ):
        raise SceneError(f"{where}: '{key}' must be a pair of numbers, got {value!r}")
    return float(value[0]), float(value[1])


def _matrix(raw: Mapping[str, Any], where: str) -> Matrix:
    if "matrix" not in raw:
        raise SceneError(f"{where}: missing 'matrix'")
    try:
        m = Matrix(raw["matrix"])
    except (InvalidShapeError, TypeError, ValueError) as e:
        raise SceneError(f"{where}: invalid matrix {raw['matrix']!r}: {e}") from e
    if m.dimensions != (2, 2):
        raise SceneError(f"{where}: matrix must be 2x2, got {m.dimensions}")
    if not np.all(np.isfinite(m.values)):
        raise SceneError(f"{where}: matrix entries must be finite, got {m.tolist()}")
    return m


def _color(value: object, where: str) -> object:
    try:
        to_u8_rgb(value)
    except ValueError as e:
        raise SceneError(f"{where}: invalid color {value!r}: {e}") from e
    return value


def _rotate_args(raw: Mapping[str, Any], where: str) -> dict[str, Any]:
    center = _pair(raw.get("center", [0, 0]), "center", where)
    return {"angle": _number(raw, "angle", where), "center": center}


def _move_to_args(raw: Mapping[str, Any], where: str) -> dict[str, Any]:
    if "target" not in raw:
        raise SceneError(f"{where}: missing 'target'")
    return {"target": _pair(raw["target"], "target", where)}


def _matrix_args(raw: Mapping[str, Any], where: str) -> dict[str, Any]:
    return {"matrix": _matrix(raw, where)}


_ARG_PARSERS: dict[str, Callable[[Mapping[str, Any], str], dict[str, Any]]] = {
    "rotate": _rotate_args,
    "move_to": _move_to_args,
    "multiply_by_matrix": _matrix_args,
    "rotate_then_scale": _matrix_args,
}

SUPPORTED_OPS = tuple(_ARG_PARSERS)


def parse_step(raw: object, objects: Mapping[str, ObjectSpec], index: int = 0) -> Step:
    """生のステップ辞書を検証して `Step` にする。不正なら `SceneError`。"""
    where = f"step {index}"
    if not isinstance(raw, Mapping):
        raise SceneError(f"{where}: expected a mapping, got {type(raw).__name__}")
    name = raw.get("object")
    if name not in objects:
        raise SceneError(f"{where}: unknown object {name!r}")
    op = raw.get("op")
    parser = _ARG_PARSERS.get(op)  # type: ignore[arg-type]
    if parser is None:
        raise SceneError(f"{where}: unknown op {op!r} (expected one of {', '.join(SUPPORTED_OPS)})")
    duration = _number(raw, "duration", where)
    if duration < 0:
        raise SceneError(f"{where}: 'duration' must be >= 0, got {duration}")
    return Step(object=str(name), op=str(op), duration=duration, args=parser(raw, where))


def _parse_objects(raw: object) -> dict[str, ObjectSpec]:
    if not isinstance(raw, Mapping) or not raw:
        raise SceneError("'objects' must be a non-empty mapping")
    out: dict[str, ObjectSpec] = {}
    for name, spec in raw.items():
        where = f"object {name!r}"
        if not isinstance(spec, Mapping):
            raise SceneError(f"{where}: expected a mapping")
        out[str(name)] = ObjectSpec(
            name=str(name),
            x=_number(spec, "x", where),
            y=_number(spec, "y", where),
            color=_color(spec.get("color", "#ffffff"), where),
        )
    return out


def _parse_screen(raw: object) -> tuple[AxisRange | None, AxisRange | None]:
    if raw is None:
        return None, None
    if not isinstance(raw, Mapping):
        raise SceneError("'screen' must be a mapping")
    x_range = _pair(raw["x_range"], "x_range", "screen") if "x_range" in raw else None
    y_range = _pair(raw["y_range"], "y_range", "screen") if "y_range" in raw else None
    return x_range, y_range


def scene_from_dict(data: object, source: Path | None = None) -> Scene:
    """辞書からシーンを組み立てる（トップレベルのみ検証）。"""
    if not isinstance(data, Mapping):
        raise SceneError("scene must be a mapping at the top level")
    x_range, y_range = _parse_screen(data.get("screen"))
    objects = _parse_objects(data.get("objects"))
    steps = data.get("steps", [])
    if not isinstance(steps, list):
        raise SceneError("'steps' must be a list")
    return Scene(objects=objects, steps=steps, x_range=x_range, y_range=y_range, source=source)


def load_scene(path: str | Path) -> Scene:
    """YAML のシーンファイルを読み込む。読み込み/構文/構造の不備は `SceneError`。"""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SceneError(f"cannot read scene file {p}: {e}") from e
    except yaml.YAMLError as e:
        raise SceneError(f"invalid YAML in {p}: {e}") from e
    return scene_from_dict(data, source=p)


# ── 実行 ─────────────────────────────


def _apply(obj: Vector2D, step: Step) -> Vector2D:
    if step.op == "rotate":
        return obj.rotate(step.duration, step.args["angle"], step.args["center"])
    if step.op == "move_to":
        return obj.move_to(step.duration, step.args["target"])
    if step.op == "multiply_by_matrix":
        return obj.multiply_by_matrix(step.duration, step.args["matrix"])
    return obj.rotate_then_scale(step.duration, step.args["matrix"])


def run_scene(
    scene: Scene, screen: Screen2D, skip_invalid: bool = False
) -> dict[str, Vector2D]:
    """シーンのステップを順に実行し、各オブジェクトの最終状態を返す。

    Parameters
    ----------
    scene : Scene
        `load_scene` の結果。
    screen : Screen2D
        全オブジェクトをアタッチするコンテキスト。
    skip_invalid : bool, default False
        True なら不正なステップを WARNING ログで読み飛ばす（False なら `SceneError`）。
    """
    state: dict[str, Vector2D] = {
        name: Vector2D(spec.x, spec.y, spec.color).add_context(screen)
        for name, spec in scene.objects.items()
    }
    for index, raw in enumerate(scene.steps):
        try:
            step = parse_step(raw, scene.objects, index)
        except SceneError as e:
            if not skip_invalid:
                raise
            logger.warning("skipping invalid %s", e)
            continue
        logger.info("step %d: %s %s (%.3fs)", index, step.object, step.op, step.duration)
        state[step.object] = _apply(state[step.object], step)
    return state


__all__ = [
    "ObjectSpec",
    "Step",
    "Scene",
    "SUPPORTED_OPS",
    "parse_step",
    "scene_from_dict",
    "load_scene",
    "run_scene",
]
