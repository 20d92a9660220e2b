"""
どこで: `engine.core.matrix`。
何を: 任意サイズの行列 `Matrix`（行優先・不変）と、2x2 専用の固有値分解/逆行列/SVD/極分解。
なぜ: ベクトルの線形変換アニメーション（`multiply_by_matrix`/`rotate_then_scale`）の数値基盤とするため。

不変条件:
- 値は 2 次元の読み取り専用 numpy 配列（行数・列数とも 1 以上、全行同じ長さ）。
- `determinant` は正方行列のみ、`*_2d` 系は厳密に 2x2 のみ。違反は `InvalidShapeError`。
- 行列積/行列×ベクトルは内側の次元一致が必須。違反は `DimensionMismatchError`。
- `transpose` とスカラー倍は任意の矩形行列で成功する。

2x2 分解の数値方針:
- 固有値・固有ベクトル・逆行列・SVD・極分解は float kind で計算する（整数行列は float64 へ昇格）。
- 固有ベクトルは (A - λI) の零空間の候補 `(b, λ-a)` と `(λ-d, c)` のうちノルムの大きい方を採る。
  対角行列は標準基底を返す（スカラー倍の単位行列でも 2 本の独立な固有ベクトルが得られる）。
- 判別式が丸め誤差の範囲で負になった場合は 0 とみなす。それを超える負（複素固有値）は NaN になり、
  `eigenvectors_2d` 以降は `DegenerateValueError` を送出する。
- 極分解 `A = Q S` は SVD 経由の近似（best effort）。数値的に敏感な経路なので、結果は許容誤差付きで扱うこと。
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from common.errors import DegenerateValueError, DimensionMismatchError, InvalidShapeError

from . import numeric as num
from .numeric import Kind, NumberLike
from .point import Vector

_DISCRIMINANT_RTOL = 1e-12


def characteristic_roots(a: float, b: float, c: float, d: float) -> tuple[float, float]:
    """`λ² − (a+d)λ + (ad−bc) = 0` の 2 根（`+` 側が先）。

    判別式は `((a+d)/2)² − (ad−bc)` と等価な `((a−d)/2)² + bc` で計算する（桁落ちを避けるため）。
    """
    half_trace = 0.5 * (a + d)
    half_gap = 0.5 * (a - d)
    delta = half_gap * half_gap + b * c
    if delta < 0.0 and abs(delta) <= _DISCRIMINANT_RTOL * max(1.0, half_gap * half_gap, abs(b * c)):
        delta = 0.0
    root = math.sqrt(delta) if delta >= 0.0 else math.nan
    return half_trace + root, half_trace - root


class Matrix:
    """行優先の矩形行列（値オブジェクト）。

    `@` と `*` はどちらも行列積/行列×ベクトルとして振る舞い、`*` にスカラーを渡すとスカラー倍になる。
    スカラー倍の結果 kind はスカラー側の kind。
    """

    __slots__ = ("_values",)

    _values: np.ndarray

    def __init__(
        self,
        rows: Iterable[Sequence[NumberLike]] | np.ndarray,
        *,
        kind: Kind | None = None,
    ) -> None:
        if isinstance(rows, np.ndarray):
            raw_rows = [list(r) for r in rows] if rows.ndim == 2 else None
        else:
            raw_rows = [list(r) for r in rows]
        if not raw_rows or not raw_rows[0]:
            raise InvalidShapeError("行列は 1 行 1 列以上である必要があります")
        width = len(raw_rows[0])
        if any(len(r) != width for r in raw_rows):
            raise InvalidShapeError("行列の全行は同じ長さである必要があります")
        raw = rows if isinstance(rows, np.ndarray) else np.asarray(raw_rows)
        if raw.dtype.kind == "b":
            raise TypeError("bool は数値型として扱えません")
        target = kind if kind is not None else num.kind_of_dtype(raw.dtype)
        arr = np.array(raw, dtype=target)
        arr.setflags(write=False)
        self._values = arr

    # ── ファクトリ ───────────────────
    @classmethod
    def identity(cls, dimensions: int, kind: Kind = np.float64) -> "Matrix":
        """n x n の単位行列。`dimensions == 0` は `InvalidShapeError`。"""
        if dimensions <= 0:
            raise InvalidShapeError("単位行列の次元は 1 以上である必要があります")
        return cls(np.eye(dimensions, dtype=kind))

    @classmethod
    def rotation_2d(cls, angle: float) -> "Matrix":
        """原点回りに `angle` [rad] 回転させる float64 の 2x2 行列。"""
        c, s = math.cos(angle), math.sin(angle)
        return cls([[c, -s], [s, c]], kind=np.float64)

    @classmethod
    def random(
        cls,
        shape: tuple[int, int],
        kind: Kind = np.float64,
        rng: np.random.Generator | None = None,
    ) -> "Matrix":
        """乱数行列（主にテスト用）。"""
        rows, cols = shape
        if rows <= 0 or cols <= 0:
            raise InvalidShapeError("行数・列数は 1 以上である必要があります")
        gen = rng if rng is not None else np.random.default_rng()
        if num.is_integer_kind(kind):
            vals = gen.integers(-10, 10, size=(rows, cols), endpoint=True)
        else:
            vals = gen.random((rows, cols))
        return cls(vals, kind=kind)

    # ── アクセサ ─────────────────────
    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def kind(self) -> Kind:
        return self._values.dtype.type

    @property
    def dimensions(self) -> tuple[int, int]:
        rows, cols = self._values.shape
        return int(rows), int(cols)

    def get_dimensions(self) -> tuple[int, int]:
        return self.dimensions

    def __getitem__(self, index: tuple[int, int]) -> np.generic:
        return self._values[index]

    def tolist(self) -> list[list[float]]:
        return self._values.tolist()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.dimensions == other.dimensions and bool(
            np.array_equal(self._values, other._values)
        )

    def __hash__(self) -> int:
        return hash(tuple(map(tuple, self._values.tolist())))

    def __repr__(self) -> str:
        return f"Matrix({self._values.tolist()}, kind={self.kind.__name__})"

    def allclose(self, other: "Matrix", *, atol: float = 1e-9, rtol: float = 1e-7) -> bool:
        """許容誤差付き比較（分解結果の検証用）。"""
        return self.dimensions == other.dimensions and bool(
            np.allclose(self._values, other._values, atol=atol, rtol=rtol)
        )

    # ── 基本演算 ─────────────────────
    def _require_2x2(self) -> None:
        if self.dimensions != (2, 2):
            raise InvalidShapeError(f"Matrix is not 2x2: {self.dimensions}")

    def _as_float(self) -> "Matrix":
        if num.is_integer_kind(self.kind):
            return Matrix(self._values, kind=np.float64)
        return self

    def determinant(self) -> np.generic:
        """第 1 行での余因子展開による行列式（素朴な O(n!)、実用上は 3x3 まで）。"""
        rows, cols = self.dimensions
        if rows != cols:
            raise InvalidShapeError("determinant requires a square matrix")
        return _cofactor_determinant(self._values)

    def transpose(self) -> "Matrix":
        return Matrix(self._values.T, kind=self.kind)

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def matmul(self, other: "Matrix") -> "Matrix":
        """行列積。内側の次元が合わなければ `DimensionMismatchError`。"""
        if self.dimensions[1] != other.dimensions[0]:
            raise DimensionMismatchError(self.dimensions, other.dimensions, "matrix product")
        kind = num.promote(self.kind, other.kind)
        return Matrix(self._values @ other._values, kind=kind)

    def apply(self, vector: Vector) -> Vector:
        """行列×ベクトル。列数とベクトル次元が合わなければ `DimensionMismatchError`。"""
        if self.dimensions[1] != vector.dimensions:
            raise DimensionMismatchError(
                self.dimensions, vector.dimensions, "matrix-vector product"
            )
        kind = num.promote(self.kind, vector.kind)
        return Vector(self._values @ vector.values, kind=kind)

    def scale(self, scalar: NumberLike) -> "Matrix":
        """スカラー倍。結果 kind はスカラー側。"""
        kind = num.kind_of(scalar)
        with np.errstate(invalid="ignore", over="ignore"):
            vals = self._values * scalar
        return Matrix(vals, kind=kind)

    def __matmul__(self, other: object):
        if isinstance(other, Matrix):
            return self.matmul(other)
        if isinstance(other, Vector):
            return self.apply(other)
        return NotImplemented

    def __mul__(self, other: object):
        if isinstance(other, (Matrix, Vector)):
            return self.__matmul__(other)
        try:
            num.kind_of(other)
        except TypeError:
            return NotImplemented
        return self.scale(other)  # type: ignore[arg-type]

    def __rmul__(self, other: object):
        if isinstance(other, (Matrix, Vector)):
            return NotImplemented
        try:
            num.kind_of(other)
        except TypeError:
            return NotImplemented
        return self.scale(other)  # type: ignore[arg-type]

    # ── 2x2 専用 ─────────────────────
    def eigenvalues_2d(self) -> tuple[np.generic, np.generic]:
        """特性多項式 `λ² − (a+d)λ + (ad−bc)` の根（`+` 側が先、順序に意味はない）。"""
        self._require_2x2()
        m = self._as_float()
        a, b, c, d = (float(v) for v in m._values.ravel())
        l1, l2 = characteristic_roots(a, b, c, d)
        return m.kind(l1), m.kind(l2)

    def eigenvectors_2d(self) -> tuple[Vector, Vector]:
        """固有値 `(λ1, λ2)` に対応する正規化済み固有ベクトル。"""
        self._require_2x2()
        m = self._as_float()
        a, b, c, d = (float(v) for v in m._values.ravel())
        l1, l2 = (float(v) for v in m.eigenvalues_2d())
        if not (math.isfinite(l1) and math.isfinite(l2)):
            raise DegenerateValueError(
                "eigenvalues are not real; eigenvectors cannot be computed"
            )
        tol = 1e-12 * max(1.0, abs(a), abs(d))
        if abs(b) <= tol and abs(c) <= tol:
            e1 = Vector([1.0, 0.0], kind=m.kind)
            e2 = Vector([0.0, 1.0], kind=m.kind)
            return (e1, e2) if abs(l1 - a) <= abs(l1 - d) else (e2, e1)
        return (
            _null_vector(a, b, c, d, l1, m.kind).normalize(),
            _null_vector(a, b, c, d, l2, m.kind).normalize(),
        )

    def invert_2d(self) -> "Matrix":
        """2x2 の逆行列。行列式 0 は `DegenerateValueError`。"""
        self._require_2x2()
        m = self._as_float()
        a, b, c, d = m._values.ravel()
        det = m.determinant()
        if num.is_zero(det):
            raise DegenerateValueError("cannot invert a matrix with determinant 0")
        return Matrix([[d, -b], [-c, a]], kind=m.kind).scale(m.kind(1) / det)

    def svd_2d(self) -> tuple["Matrix", "Matrix", "Matrix"]:
        """2x2 の特異値分解 `(U, Σ, V)`。

        `AᵗA` の固有値の平方根を Σ、固有ベクトルを列とする行列を U とし、`V = U⁻¹` とする。
        """
        self._require_2x2()
        m = self._as_float()
        ata = m.transpose().matmul(m)
        l1, l2 = ata.eigenvalues_2d()
        kind = m.kind
        # AᵗA は半正定値。丸めで僅かに負になった固有値は 0 に寄せる
        s1 = num.sqrt(kind(max(float(l1), 0.0))) if math.isfinite(float(l1)) else kind(l1)
        s2 = num.sqrt(kind(max(float(l2), 0.0))) if math.isfinite(float(l2)) else kind(l2)
        sigma = Matrix([[s1, 0.0], [0.0, s2]], kind=kind)
        v1, v2 = ata.eigenvectors_2d()
        u = Matrix([[v1[0], v2[0]], [v1[1], v2[1]]], kind=kind)
        v = u.invert_2d()
        return u, sigma, v

    def polar_decomposition_2d(self) -> tuple["Matrix", "Matrix"]:
        """極分解 `A = Q S` の `(Q, S)`。Q が回転成分、S が対称な伸縮成分（近似）。"""
        u, sigma, v = self.svd_2d()
        s = u.matmul(sigma).matmul(v)
        q = self._as_float().matmul(s.invert_2d())
        return q, s


def _cofactor_determinant(vals: np.ndarray) -> np.generic:
    kind = vals.dtype.type
    size = vals.shape[0]
    if size == 1:
        return vals[0, 0]
    total = num.zero(kind)
    for col in range(size):
        minor = np.delete(vals[1:], col, axis=1)
        sign = num.one(kind) if col % 2 == 0 else kind(-num.one(kind))
        total = kind(total + sign * vals[0, col] * _cofactor_determinant(minor))
    return total


def _null_vector(a: float, b: float, c: float, d: float, lam: float, kind: Kind) -> Vector:
    first = (b, lam - a)
    second = (lam - d, c)
    n1 = math.hypot(*first)
    n2 = math.hypot(*second)
    return Vector(first if n1 >= n2 else second, kind=kind)


__all__ = ["Matrix", "characteristic_roots"]
