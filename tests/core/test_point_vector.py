from __future__ import annotations

import math

import numpy as np
import pytest

from common.errors import DegenerateValueError, DimensionMismatchError, InvalidShapeError
from engine.core.point import Point, Vector


def test_empty_construction_fails() -> None:
    with pytest.raises(InvalidShapeError):
        Vector([])
    with pytest.raises(InvalidShapeError):
        Point([])


@pytest.mark.parametrize("factory", [Vector.origin, Point.origin, Vector.random, Point.random])
def test_zero_dimension_factories_fail(factory) -> None:
    with pytest.raises(InvalidShapeError):
        factory(0)


def test_origin_is_all_zero() -> None:
    v = Vector.origin(4)
    assert v.dimensions == 4
    assert v.to_tuple() == (0.0, 0.0, 0.0, 0.0)


def test_random_ranges(rng: np.random.Generator) -> None:
    f = Vector.random(50, np.float64, rng)
    assert all(0.0 <= x < 1.0 for x in f.to_tuple())
    i = Vector.random(50, np.int32, rng)
    assert i.kind is np.int32
    assert all(-10 <= int(x) <= 10 for x in i)


def test_dot_and_dimension_mismatch() -> None:
    assert Vector([1, 1]).dot(Vector([1, 1])) == 2
    with pytest.raises(DimensionMismatchError):
        Vector([1, 2]).dot(Vector([1, 2, 3]))


def test_dot_result_kind_follows_left_operand() -> None:
    r = Vector([1, 2], kind=np.int32).dot(Vector([0.5, 0.5]))
    assert type(r) is np.int32


def test_norm_and_normalize() -> None:
    v = Vector([3.0, 4.0])
    assert float(v.norm()) == pytest.approx(5.0)
    n = v.normalize()
    assert n.to_tuple() == pytest.approx((0.6, 0.8))
    assert float(n.norm()) == pytest.approx(1.0)


def test_normalize_zero_vector_is_degenerate() -> None:
    with pytest.raises(DegenerateValueError):
        Vector([0.0, 0.0]).normalize()


def test_integer_vector_normalizes_into_float() -> None:
    n = Vector([0, 5]).normalize()
    assert n.kind is np.float64
    assert n.to_tuple() == (0.0, 1.0)


def test_cross_requires_three_dimensions() -> None:
    x = Vector([1.0, 0.0, 0.0])
    y = Vector([0.0, 1.0, 0.0])
    assert x.cross(y) == Vector([0.0, 0.0, 1.0])
    with pytest.raises(DimensionMismatchError):
        Vector([1.0, 0.0]).cross(Vector([0.0, 1.0]))


def test_addition_and_translation() -> None:
    assert Vector([1, 2]) + Vector([3, 4]) == Vector([4, 6])
    p = Point([1.0, 1.0]) + Vector([2.0, -1.0])
    assert isinstance(p, Point)
    assert p == Point([3.0, 0.0])
    assert Point([3.0, 0.0]) - Point([1.0, 1.0]) == Vector([2.0, -1.0])
    with pytest.raises(DimensionMismatchError):
        Vector([1, 2]) + Vector([1, 2, 3])


def test_point_vector_conversion_keeps_coordinates() -> None:
    assert Point([1.0, -2.0]).to_vector() == Vector([1.0, -2.0])
    assert Vector([1.0, -2.0]).to_point() == Point([1.0, -2.0])


def test_scalar_multiplication_uses_scalar_kind() -> None:
    v = Vector([1, 3]) * 0.5
    assert v.kind is np.float64
    assert v.to_tuple() == (0.5, 1.5)
    w = 2 * Vector([1.5, 2.0])
    assert w.kind is np.int64
    assert w.to_tuple() == (3.0, 4.0)


def test_distance_between_points() -> None:
    d = Point([0.0, 0.0]).distance_to(Point([3.0, 4.0]))
    assert float(d) == pytest.approx(5.0)
    with pytest.raises(DimensionMismatchError):
        Point([0.0]).distance_to(Point([1.0, 1.0]))


def test_equality_requires_same_type_and_dimension() -> None:
    assert Vector([1.0, 2.0]) == Vector([1, 2])
    assert Vector([1.0, 2.0]) != Point([1.0, 2.0])
    assert Vector([1.0, 2.0]) != Vector([1.0, 2.0, 0.0])
    assert hash(Vector([1.0, 2.0])) == hash(Vector([1.0, 2.0]))


def test_values_are_immutable() -> None:
    v = Vector([1.0, 2.0])
    with pytest.raises(ValueError):
        v.values[0] = math.pi
