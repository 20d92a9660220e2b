from __future__ import annotations

import logging

import pytest

from common import settings
from common.env import env_bool, env_int, env_str
from common.logging import resolve_level


def test_defaults_when_unset() -> None:
    s = settings.get()
    assert s.FPS is None
    assert s.QUALITY is None
    assert s.WORKERS is None
    assert s.FFMPEG is None
    assert s.KEEP_FRAMES is False
    assert s.LOG_LEVEL == "INFO"


def test_reload_reads_prefixed_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MVS_FPS", "24")
    monkeypatch.setenv("MVS_QUALITY", "LOW")
    monkeypatch.setenv("MVS_WORKERS", "0")
    monkeypatch.setenv("MVS_KEEP_FRAMES", "yes")
    monkeypatch.setenv("MVS_LOG_LEVEL", "debug")
    settings.reload_from_env()
    s = settings.get()
    assert s.FPS == 24
    assert s.QUALITY == "low"
    assert s.WORKERS == 1
    assert s.KEEP_FRAMES is True
    assert s.LOG_LEVEL == "debug"


def test_env_int_invalid_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MVS_TEST_INT", "abc")
    assert env_int("MVS_TEST_INT", 7) == 7
    monkeypatch.setenv("MVS_TEST_INT", "-3")
    assert env_int("MVS_TEST_INT", None, min_value=1) == 1


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("0", False), ("true", True), ("Off", False), ("maybe", False)],
)
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("MVS_TEST_BOOL", raw)
    assert env_bool("MVS_TEST_BOOL", False) is expected


def test_env_str_blank_is_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MVS_TEST_STR", "   ")
    assert env_str("MVS_TEST_STR", "dflt") == "dflt"


def test_resolve_level() -> None:
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" Warning ") == logging.WARNING
    assert resolve_level("nonsense") == logging.INFO
    assert resolve_level(40) == logging.ERROR
