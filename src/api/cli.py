"""
どこで: `api.cli`（`python -m api` / コンソールスクリプト `mathvis`）。
何を: シーンファイルを読み込み、フレームを生成し、ffmpeg で MP4/GIF にまとめる。
なぜ: 引数・環境変数・YAML 構成の 3 層から設定を解決し、失敗時は動画を作らずに非 0 で終了するため。

流れ:
    ロギング設定 → 構成解決 → フレームディレクトリ作成 → Screen2D 生成 → シーン実行
    → join_frames → フレームディレクトリ削除（--keep-frames で保持）
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from common import settings
from common.errors import InvalidConfigurationError, MathVisError
from common.logging import setup_default_logging
from engine.core.screen import Quality, Screen2D
from engine.export.video import join_frames
from util.color import AXIS_COLOR, BACKGROUND, color_or_default
from util.paths import ensure_frames_dir, ensure_output_parent, remove_frames_dir
from util.utils import animation_defaults

from .scene import load_scene, run_scene

logger = logging.getLogger(__name__)


def build_parser(defaults: Mapping[str, Any] | None = None) -> argparse.ArgumentParser:
    """引数パーサを返す（既定値は設定層から解決済みのもの）。"""
    d = dict(defaults) if defaults is not None else resolve_defaults()
    parser = argparse.ArgumentParser(
        prog="mathvis", description="Render a 2D linear-algebra animation from a scene file."
    )
    parser.add_argument("source", help="scene file (YAML)")
    parser.add_argument("--fps", type=int, default=d["fps"], help="frames per second")
    parser.add_argument(
        "-o", "--output", default=d["output"], help="output video path (.mp4 or .gif)"
    )
    parser.add_argument("--gif", action="store_true", help="encode as GIF instead of H.264 MP4")
    parser.add_argument(
        "-q",
        "--quality",
        default=d["quality"],
        help="output resolution: low|medium|high|ultra (or WIDTHxHEIGHT)",
    )
    parser.add_argument(
        "--keep-frames",
        action="store_true",
        default=bool(d.get("keep_frames", False)),
        help="keep the intermediate PNG frames after encoding",
    )
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="skip malformed scene steps with a warning instead of failing",
    )
    parser.add_argument("--log-level", default=d["log_level"], help="logging level (e.g. DEBUG)")
    return parser


def resolve_defaults() -> dict[str, Any]:
    """YAML 構成に環境変数（`MVS_*`）を重ねた既定値。"""
    merged = animation_defaults()
    s = settings.get()
    if s.FPS is not None:
        merged["fps"] = s.FPS
    if s.QUALITY is not None:
        merged["quality"] = s.QUALITY
    merged["keep_frames"] = s.KEEP_FRAMES
    merged["log_level"] = s.LOG_LEVEL
    return merged


def _range(value: Any, name: str) -> tuple[float, float]:
    try:
        lo, hi = value
        return float(lo), float(hi)
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"invalid {name} in config: {value!r}") from e


def render(args: argparse.Namespace, defaults: Mapping[str, Any]) -> Path:
    """シーンを描画して動画ファイルのパスを返す。失敗は `MathVisError` として送出。"""
    quality = Quality.parse(str(args.quality))
    scene = load_scene(args.source)
    output = ensure_output_parent(args.output)
    out_dir = output.parent

    x_range = scene.x_range or _range(defaults["x_range"], "x_range")
    y_range = scene.y_range or _range(defaults["y_range"], "y_range")
    # 前回の残りフレーム（失敗時 / --keep-frames）は持ち越さない
    remove_frames_dir(out_dir)
    ensure_frames_dir(out_dir)
    screen = Screen2D.from_quality(
        x_range,
        y_range,
        out_dir,
        args.fps,
        quality,
        background=color_or_default(defaults.get("background"), BACKGROUND),
        axis_color=color_or_default(defaults.get("axis_color"), AXIS_COLOR),
    )
    logger.info("rendering %s with %r", args.source, screen)

    run_scene(scene, screen, skip_invalid=args.skip_invalid)
    if screen.current_frame == 0:
        raise InvalidConfigurationError("scene produced no frames")

    join_frames(output, args.fps, args.gif, out_dir)
    if not args.keep_frames:
        remove_frames_dir(out_dir)
    return output


def main(argv: Sequence[str] | None = None) -> int:
    defaults = resolve_defaults()
    args = build_parser(defaults).parse_args(argv)
    setup_default_logging(args.log_level)
    try:
        output = render(args, defaults)
    except MathVisError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    except ValueError as e:
        # 色指定など構成値の不正
        logger.error("invalid configuration: %s", e)
        return 1
    logger.info("wrote %s", output)
    return 0


__all__ = ["build_parser", "resolve_defaults", "render", "main"]
