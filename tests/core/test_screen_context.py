from __future__ import annotations

import threading
from pathlib import Path

import pytest

from common.errors import InvalidConfigurationError
from engine.core.screen import Quality, Screen2D


class _Obj:
    def __init__(self, x: float, y: float) -> None:
        self.x = x
        self.y = y


def _screen(tmp_path: Path, x=(-10.0, 10.0), y=(-10.0, 15.0)) -> Screen2D:
    return Screen2D(x, y, tmp_path, 30, 1920, 1080)


@pytest.mark.smoke
def test_center_pixels_follow_axis_asymmetry(tmp_path: Path) -> None:
    assert _screen(tmp_path).get_center_pixels() == pytest.approx((960.0, 648.0))


def test_interpolate_maps_origin_to_center(tmp_path: Path) -> None:
    s = _screen(tmp_path)
    assert s.interpolate((0.0, 0.0)) == pytest.approx(s.get_center_pixels())


def test_interpolate_scales_and_inverts_y(tmp_path: Path) -> None:
    s = _screen(tmp_path)
    x, y = s.interpolate((10.0, 5.0))
    assert x == pytest.approx(960.0 + 10.0 * 0.95 * 1920 / 20)
    assert y == pytest.approx(648.0 - 5.0 * 0.95 * 1080 / 25)


def test_can_contain_is_inclusive(tmp_path: Path) -> None:
    s = _screen(tmp_path)
    assert s.can_contain(_Obj(10.0, -10.0))
    assert s.can_contain(_Obj(0.0, 15.0))
    assert not s.can_contain(_Obj(10.5, 0.0))
    assert not s.can_contain(_Obj(0.0, -10.01))


@pytest.mark.parametrize(
    "x_range,y_range",
    [((1.0, 1.0), (-1.0, 1.0)), ((-1.0, 1.0), (2.0, -2.0))],
)
def test_invalid_ranges_are_rejected(tmp_path: Path, x_range, y_range) -> None:
    with pytest.raises(InvalidConfigurationError):
        Screen2D(x_range, y_range, tmp_path, 30, 1920, 1080)


def test_resolution_and_fps_are_validated(tmp_path: Path) -> None:
    with pytest.raises(InvalidConfigurationError):
        Screen2D((-1, 1), (-1, 1), tmp_path, 30, 1000, 1000)
    with pytest.raises(InvalidConfigurationError):
        Screen2D((-1, 1), (-1, 1), tmp_path, 0, 1920, 1080)


def test_change_dimensions_validates_before_replacing(tmp_path: Path) -> None:
    s = _screen(tmp_path)
    s.change_dimensions((-2.0, 2.0), (-1.0, 1.0))
    assert s.x_axis == (-2.0, 2.0)
    assert s.y_axis == (-1.0, 1.0)
    with pytest.raises(InvalidConfigurationError):
        s.change_dimensions((-3.0, 3.0), (1.0, -1.0))
    assert s.x_axis == (-2.0, 2.0)


def test_frame_counter_only_moves_forward(tmp_path: Path) -> None:
    s = _screen(tmp_path)
    s.advance_frame(5)
    assert s.current_frame == 5
    with pytest.raises(InvalidConfigurationError, match="backward"):
        s.advance_frame(5)
    with pytest.raises(InvalidConfigurationError):
        s.advance_frame(3)
    assert s.current_frame == 5


def test_snapshot_is_detached_from_later_changes(tmp_path: Path) -> None:
    s = _screen(tmp_path)
    snap = s.snapshot()
    s.change_dimensions((-1.0, 1.0), (-1.0, 1.0))
    s.advance_frame(3)
    assert snap.x_axis == (-10.0, 10.0)
    assert snap.current_frame == 0
    assert snap.quality is Quality.HIGH
    with pytest.raises(AttributeError):
        snap.current_frame = 9  # type: ignore[misc]


def test_concurrent_advances_are_serialized(tmp_path: Path) -> None:
    s = _screen(tmp_path)
    errors: list[Exception] = []

    def bump(value: int) -> None:
        try:
            s.advance_frame(value)
        except InvalidConfigurationError as e:
            errors.append(e)

    threads = [threading.Thread(target=bump, args=(10,)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert s.current_frame == 10
    assert len(errors) == 7


def test_quality_table() -> None:
    assert Quality.from_resolution(854, 480) is Quality.LOW
    assert Quality.from_resolution(3840, 2160) is Quality.ULTRA
    assert Quality.HIGH.usable() == pytest.approx((1824.0, 1026.0))
    assert Quality.parse("Medium") is Quality.MEDIUM
    assert Quality.parse("1920x1080") is Quality.HIGH
    with pytest.raises(InvalidConfigurationError):
        Quality.parse("huge")
    with pytest.raises(InvalidConfigurationError):
        Quality.from_resolution(800, 600)
