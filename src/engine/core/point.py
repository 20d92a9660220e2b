"""
どこで: `engine.core.point`。
何を: n 次元の座標実体 `Point` と `Vector`（不変の値オブジェクト）と、その次元検査付き演算。
なぜ: 2D アニメーションの位置計算と、行列演算（固有ベクトル/行列×ベクトル）の土台を共通化するため。

データモデル（不変条件）:
- 値は 1 次元の読み取り専用 numpy 配列（kind は `engine.core.numeric` の対応型）。
- 次元（= 要素数）は 1 以上。空の生成は `InvalidShapeError`。
- 2 つのインスタンス間の演算（加算/内積/外積/距離）は次元一致が必須。不一致は
  `DimensionMismatchError`（回復可能なエラー）。
- 変換はすべて新しいインスタンスを返す。

スカラー倍の型:
- 結果の kind はスカラー側の kind（例: int ベクトル × 0.5 → float64 ベクトル）。
- 逆に float ベクトル × Python int は int64 ベクトルへ切り捨てられる点に注意。
"""

from __future__ import annotations

from typing import Iterable, Iterator, TypeVar

import numpy as np

from common.errors import DegenerateValueError, DimensionMismatchError, InvalidShapeError

from . import numeric as num
from .numeric import Kind, NumberLike

_P = TypeVar("_P", bound="PointLike")


class PointLike:
    """Point/Vector 共通の基底。値の保持・次元・比較・ファクトリを提供する。"""

    __slots__ = ("_values",)

    _values: np.ndarray

    def __init__(self, values: Iterable[NumberLike] | np.ndarray, *, kind: Kind | None = None):
        arr = num.as_array(values, kind)
        if arr.ndim != 1 or arr.size == 0:
            raise InvalidShapeError(f"{type(self).__name__} は 1 要素以上の 1 次元列が必要です")
        self._values = arr

    # ── ファクトリ ───────────────────
    @classmethod
    def origin(cls: type[_P], dimensions: int, kind: Kind = np.float64) -> _P:
        """原点（全成分 0）を返す。`dimensions == 0` は `InvalidShapeError`。"""
        if dimensions <= 0:
            raise InvalidShapeError("次元は 1 以上である必要があります")
        return cls(np.zeros(dimensions, dtype=kind))

    @classmethod
    def random(
        cls: type[_P],
        dimensions: int,
        kind: Kind = np.float64,
        rng: np.random.Generator | None = None,
    ) -> _P:
        """乱数座標を返す（float は [0, 1)、int は [-10, 10]）。"""
        if dimensions <= 0:
            raise InvalidShapeError("次元は 1 以上である必要があります")
        gen = rng if rng is not None else np.random.default_rng()
        if num.is_integer_kind(kind):
            vals = gen.integers(-10, 10, size=dimensions, endpoint=True)
        else:
            vals = gen.random(dimensions)
        return cls(vals, kind=kind)

    # ── 基本アクセサ ─────────────────
    @property
    def values(self) -> np.ndarray:
        """読み取り専用の値配列。"""
        return self._values

    @property
    def kind(self) -> Kind:
        return self._values.dtype.type

    @property
    def dimensions(self) -> int:
        return int(self._values.size)

    def __len__(self) -> int:
        return self.dimensions

    def __iter__(self) -> Iterator[np.generic]:
        return iter(self._values)

    def __getitem__(self, index: int) -> np.generic:
        return self._values[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointLike) or type(other) is not type(self):
            return NotImplemented
        return self.dimensions == other.dimensions and bool(
            np.array_equal(self._values, other._values)
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, tuple(self._values.tolist())))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values.tolist()}, kind={self.kind.__name__})"

    def to_tuple(self) -> tuple[float, ...]:
        return tuple(float(v) for v in self._values)

    def _check_same_dimensions(self, other: "PointLike", op: str) -> None:
        if self.dimensions != other.dimensions:
            raise DimensionMismatchError(self.dimensions, other.dimensions, op)

    def distance_to(self, other: "PointLike") -> np.generic:
        """ユークリッド距離（結果の kind は左辺）。"""
        self._check_same_dimensions(other, "distance_to")
        diff = self._values.astype(np.float64) - other._values.astype(np.float64)
        return num.convert(float(np.sqrt(np.sum(diff * diff))), self.kind)

    def _scaled(self: _P, scalar: NumberLike) -> _P:
        kind = num.kind_of(scalar)
        with np.errstate(invalid="ignore", over="ignore"):
            vals = self._values * scalar
        return type(self)(vals, kind=kind)

    def __mul__(self: _P, scalar: NumberLike) -> _P:
        if isinstance(scalar, PointLike):
            return NotImplemented
        try:
            num.kind_of(scalar)
        except TypeError:
            return NotImplemented
        return self._scaled(scalar)

    __rmul__ = __mul__


class Point(PointLike):
    """n 次元の点。ベクトルを加えて平行移動でき、点同士の差はベクトルになる。"""

    __slots__ = ()

    def __add__(self, other: object) -> "Point":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_dimensions(other, "point + vector")
        kind = num.promote(self.kind, other.kind)
        return Point(self._values + other._values, kind=kind)

    def __sub__(self, other: object) -> "Vector":
        if not isinstance(other, Point):
            return NotImplemented
        self._check_same_dimensions(other, "point - point")
        kind = num.promote(self.kind, other.kind)
        return Vector(self._values - other._values, kind=kind)

    def to_vector(self) -> "Vector":
        return Vector(self._values)


class Vector(PointLike):
    """n 次元のベクトル。内積・ノルム・正規化・外積を持つ。"""

    __slots__ = ()

    def __add__(self, other: object) -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_dimensions(other, "vector + vector")
        kind = num.promote(self.kind, other.kind)
        return Vector(self._values + other._values, kind=kind)

    def __sub__(self, other: object) -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_dimensions(other, "vector - vector")
        kind = num.promote(self.kind, other.kind)
        return Vector(self._values - other._values, kind=kind)

    def __neg__(self) -> "Vector":
        return Vector(-self._values, kind=self.kind)

    def dot(self, other: "Vector") -> np.generic:
        """内積。結果の kind は左辺（混在 kind は呼び出し側で揃えること）。"""
        self._check_same_dimensions(other, "dot")
        return num.convert(np.dot(self._values, other._values), self.kind)

    def norm(self) -> np.generic:
        """`sqrt(sum(v_i^2))`。二乗和は非負なので負の平方根にはならない。"""
        return num.sqrt(num.convert(np.sum(self._values * self._values), self.kind))

    def normalize(self) -> "Vector":
        """単位ベクトルを返す。ノルム 0 は `DegenerateValueError`。

        整数ベクトルは float64 で正規化する（整数のままでは単位長を表現できないため）。
        """
        kind = num.float_kind(self.kind)
        vals = self._values.astype(kind)
        length = num.sqrt(num.convert(np.sum(vals * vals), kind))
        if num.is_zero(length):
            raise DegenerateValueError("degenerate vector: cannot normalize a vector of norm 0")
        return Vector(vals / length, kind=kind)

    def cross(self, other: "Vector") -> "Vector":
        """3 次元の外積（行列式展開）。どちらかが 3 次元でなければ `DimensionMismatchError`。"""
        if self.dimensions != 3 or other.dimensions != 3:
            raise DimensionMismatchError(self.dimensions, other.dimensions, "cross (3D only)")
        a1, a2, a3 = self._values
        b1, b2, b3 = other._values
        return Vector(
            [a2 * b3 - a3 * b2, a3 * b1 - a1 * b3, a1 * b2 - a2 * b1],
            kind=num.promote(self.kind, other.kind),
        )

    def to_point(self) -> Point:
        return Point(self._values)


__all__ = ["PointLike", "Point", "Vector"]
