from __future__ import annotations

import math

import numpy as np
import pytest

from engine.core import numeric as num


@pytest.mark.parametrize("kind", num.SUPPORTED_KINDS)
def test_zero_and_one_are_identities(kind) -> None:
    x = kind(7)
    assert x + num.zero(kind) == x
    assert x * num.one(kind) == x
    assert type(num.zero(kind)) is kind


def test_kind_of_python_scalars() -> None:
    assert num.kind_of(3) is np.int64
    assert num.kind_of(3.0) is np.float64
    assert num.kind_of(np.float32(1.0)) is np.float32


@pytest.mark.parametrize("bad", [True, np.bool_(False), "1", np.float16(1.0), None])
def test_kind_of_rejects_unsupported(bad) -> None:
    with pytest.raises(TypeError):
        num.kind_of(bad)


def test_sqrt_negative_float_is_nan_not_error() -> None:
    assert math.isnan(float(num.sqrt(np.float64(-4.0))))
    assert math.isnan(float(num.sqrt(np.float32(-1.0))))


def test_integer_sqrt_truncates() -> None:
    assert num.sqrt(np.int64(10)) == 3
    assert num.sqrt(np.int32(16)) == 4
    assert type(num.sqrt(np.int32(16))) is np.int32
    assert num.sqrt(np.int64(-9)) == 0


def test_ipow_integer_negative_exponent_truncates() -> None:
    assert num.ipow(np.int64(2), -1) == 0
    assert num.ipow(np.int64(1), -3) == 1
    assert num.ipow(np.int64(3), 3) == 27
    assert num.ipow(np.float64(2.0), -1) == 0.5


def test_absolute_and_predicates() -> None:
    assert num.absolute(np.int64(-5)) == 5
    assert num.absolute(np.float64(2.5)) == 2.5
    assert num.is_zero(np.float64(0.0))
    assert num.is_positive(np.int32(1))
    assert num.is_negative(np.float32(-0.5))


def test_conversions_truncate_toward_zero() -> None:
    assert num.from_f64(-2.7, np.int64) == -2
    assert num.from_f32(2.7, np.int32) == 2
    assert num.from_i64(3, np.float64) == 3.0
    assert num.from_i32(-4, np.float32) == -4.0
    assert num.to_i64(np.float64(-3.9)) == -3
    assert num.to_f64(np.int32(5)) == 5.0
    with pytest.raises(ValueError):
        num.convert(float("nan"), np.int64)


def test_as_array_is_read_only() -> None:
    arr = num.as_array([1, 2, 3])
    assert arr.dtype == np.int64
    with pytest.raises(ValueError):
        arr[0] = 5
