"""
どこで: `engine.core.numeric`。
何を: 幾何層が前提とする抽象スカラー（NumericType）の契約と、numpy スカラー型への実装。
なぜ: Point/Vector/Matrix を 1 つの数値インタフェース上で書き、float/int の差異をここへ閉じ込めるため。

対応する型（"kind"）:
- `np.float32`, `np.float64`, `np.int32`, `np.int64`
- Python の `float` は `np.float64`、`int` は `np.int64` とみなす。
- `bool` とそれ以外の dtype は `TypeError`（領域エラーではなくプログラミングエラー）。

契約:
- `zero(kind)` は加法単位元、`one(kind)` は乗法単位元。
- 四則演算と符号反転は numpy スカラーの演算子に委ねる（ゼロ除算の検査は行わない）。
- `sqrt` は負の浮動小数に対して NaN を返す（例外にしない）。整数の負値は 0 を返す。
- 整数の `sqrt`/`pow` は浮動小数の結果を 0 方向へ切り捨てる。
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Protocol, Union

import numpy as np

Kind = type[np.generic]
NumberLike = Union[int, float, np.integer, np.floating]

FLOAT_KINDS: tuple[Kind, ...] = (np.float32, np.float64)
INT_KINDS: tuple[Kind, ...] = (np.int32, np.int64)
SUPPORTED_KINDS: tuple[Kind, ...] = FLOAT_KINDS + INT_KINDS


class Numeric(Protocol):
    """幾何計算に必要な最小のスカラー契約（numpy スカラーが満たす）。"""

    def __add__(self, other: Any) -> Any: ...
    def __sub__(self, other: Any) -> Any: ...
    def __mul__(self, other: Any) -> Any: ...
    def __truediv__(self, other: Any) -> Any: ...
    def __neg__(self) -> Any: ...
    def __lt__(self, other: Any) -> bool: ...
    def __le__(self, other: Any) -> bool: ...
    def __float__(self) -> float: ...
    def __int__(self) -> int: ...


def kind_of(value: object) -> Kind:
    """スカラー値の kind を返す。未対応の型は `TypeError`。"""
    if isinstance(value, (bool, np.bool_)):
        raise TypeError("bool は数値型として扱えません")
    if isinstance(value, np.generic):
        k = type(value)
        if k in SUPPORTED_KINDS:
            return k
        raise TypeError(f"未対応の数値型です: {k.__name__}")
    if isinstance(value, int):
        return np.int64
    if isinstance(value, float):
        return np.float64
    raise TypeError(f"未対応の数値型です: {type(value)!r}")


def kind_of_dtype(dtype: np.dtype) -> Kind:
    """配列 dtype を対応 kind へ正規化する（int 系は int64、float 系は float64 へ寄せる）。"""
    k = np.dtype(dtype).type
    if k in SUPPORTED_KINDS:
        return k
    if np.dtype(dtype).kind in ("i", "u"):
        return np.int64
    if np.dtype(dtype).kind == "f":
        return np.float64
    raise TypeError(f"未対応の dtype です: {np.dtype(dtype)}")


def promote(left: Kind, right: Kind) -> Kind:
    """2 つの kind を numpy の昇格規則で合成する。"""
    return kind_of_dtype(np.promote_types(left, right))


def is_integer_kind(kind: Kind) -> bool:
    return kind in INT_KINDS


def float_kind(kind: Kind) -> Kind:
    """整数 kind を float64 へ、浮動小数 kind はそのまま返す。"""
    return kind if kind in FLOAT_KINDS else np.float64


def as_array(values: Iterable[NumberLike] | np.ndarray, kind: Kind | None = None) -> np.ndarray:
    """値列を対応 kind の読み取り専用 numpy 配列へ正規化する。"""
    raw = values if isinstance(values, np.ndarray) else np.asarray(list(values))
    if raw.dtype.kind == "b":
        raise TypeError("bool は数値型として扱えません")
    if raw.size == 0 and kind is None:
        kind = np.float64
    target = kind if kind is not None else kind_of_dtype(raw.dtype)
    arr = np.array(raw, dtype=target)
    arr.setflags(write=False)
    return arr


def zero(kind: Kind) -> np.generic:
    return kind(0)


def one(kind: Kind) -> np.generic:
    return kind(1)


def convert(value: NumberLike, kind: Kind) -> np.generic:
    """値を kind へ変換する。float→int は 0 方向へ切り捨て。"""
    if is_integer_kind(kind):
        f = float(value)
        if not math.isfinite(f):
            raise ValueError(f"{f} は整数へ変換できません")
        return kind(math.trunc(f))
    return kind(value)


def from_f64(value: float, kind: Kind) -> np.generic:
    return convert(np.float64(value), kind)


def from_f32(value: float, kind: Kind) -> np.generic:
    return convert(np.float32(value), kind)


def from_i64(value: int, kind: Kind) -> np.generic:
    return convert(np.int64(value), kind)


def from_i32(value: int, kind: Kind) -> np.generic:
    return convert(np.int32(value), kind)


def to_f64(value: NumberLike) -> float:
    return float(value)


def to_i64(value: NumberLike) -> int:
    return int(math.trunc(float(value)))


def is_zero(value: NumberLike) -> bool:
    return value == 0


def is_positive(value: NumberLike) -> bool:
    return value > 0


def is_negative(value: NumberLike) -> bool:
    return value < 0


def absolute(value: NumberLike) -> np.generic:
    """絶対値。`value > 0 なら value、そうでなければ -value` で導出する。"""
    kind = kind_of(value)
    v = kind(value)
    return v if v > zero(kind) else kind(-v)


def sqrt(value: NumberLike) -> np.generic:
    """平方根。負の浮動小数は NaN、整数は切り捨て（負は 0）。"""
    kind = kind_of(value)
    if is_integer_kind(kind):
        if value < 0:
            return zero(kind)
        return kind(math.trunc(math.sqrt(float(value))))
    with np.errstate(invalid="ignore"):
        return kind(np.sqrt(kind(value)))


def ipow(value: NumberLike, exponent: int) -> np.generic:
    """整数乗。整数 kind の負の指数は浮動小数の結果を切り捨てて戻す。"""
    kind = kind_of(value)
    if is_integer_kind(kind):
        if exponent < 0:
            if value == 0:
                raise ZeroDivisionError("0 の負の整数乗は定義されません")
            return convert(float(value) ** exponent, kind)
        return kind(int(value) ** exponent)
    return kind(kind(value) ** exponent)


__all__ = [
    "Kind",
    "NumberLike",
    "Numeric",
    "FLOAT_KINDS",
    "INT_KINDS",
    "SUPPORTED_KINDS",
    "kind_of",
    "kind_of_dtype",
    "promote",
    "is_integer_kind",
    "float_kind",
    "as_array",
    "zero",
    "one",
    "convert",
    "from_f64",
    "from_f32",
    "from_i64",
    "from_i32",
    "to_f64",
    "to_i64",
    "is_zero",
    "is_positive",
    "is_negative",
    "absolute",
    "sqrt",
    "ipow",
]
