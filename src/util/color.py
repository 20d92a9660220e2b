"""
どこで: `util.color`。
何を: 色指定（Hex 文字列 / RGB(A) タプル 0–1 または 0–255）を Pillow 向けの 8bit RGB へ正規化する。
なぜ: シーンファイル・設定・API 呼び出しのどこから来た色も、同一の受理仕様とエラーメッセージで扱うため。
"""

from __future__ import annotations

from typing import Sequence

RGB = tuple[int, int, int]

BACKGROUND: RGB = (43, 42, 51)
AXIS_COLOR: RGB = (255, 255, 255)


def _clamp(x: float, hi: float) -> float:
    return 0.0 if x < 0.0 else hi if x > hi else float(x)


def parse_hex_color_str(s: str) -> tuple[float, float, float, float]:
    """Hex 文字列から RGBA(0–1) を返す。

    受理形式: "#RRGGBB", "#RRGGBBAA", "0xRRGGBB", "0xRRGGBBAA", "RRGGBB", "RRGGBBAA"。
    """
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB or RRGGBBAA)")
    try:
        channels = [int(t[i : i + 2], 16) for i in range(0, len(t), 2)]
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    if len(channels) == 3:
        channels.append(255)
    r, g, b, a = (c / 255.0 for c in channels)
    return (r, g, b, a)


def normalize_color(value: object) -> tuple[float, float, float, float]:
    """色を RGBA(0–1) へ正規化する。

    - 全要素が 0..1 の float 列はそのまま 0–1 とみなす。
    - それ以外は 0–255 とみなして丸め・クランプする。
    """
    if isinstance(value, str):
        return parse_hex_color_str(value)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"unsupported color type: {type(value)!r}")
    seq: Sequence[object] = value
    if len(seq) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        fseq = [float(v) for v in seq]  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    if len(fseq) == 3:
        fseq.append(1.0 if all(0.0 <= x <= 1.0 for x in fseq) else 255.0)
    if all(0.0 <= x <= 1.0 for x in fseq):
        r, g, b, a = fseq
        return (r, g, b, a)
    r, g, b, a = (_clamp(round(x), 255.0) / 255.0 for x in fseq)
    return (r, g, b, a)


def to_u8_rgb(value: object) -> RGB:
    """色を Pillow が受け取る RGB(0–255) へ変換する（アルファは捨てる）。"""
    r, g, b, _a = normalize_color(value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def color_or_default(value: object | None, default: RGB) -> RGB:
    """`None` なら既定色、それ以外は `to_u8_rgb`。"""
    if value is None:
        return default
    return to_u8_rgb(value)


__all__ = [
    "RGB",
    "BACKGROUND",
    "AXIS_COLOR",
    "parse_hex_color_str",
    "normalize_color",
    "to_u8_rgb",
    "color_or_default",
]
