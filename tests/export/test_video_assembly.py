from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from PIL import Image

from common import settings
from common.errors import VideoAssemblyError
from engine.export import video
from engine.export.image import frame_path, save_frame
from engine.export.video import build_ffmpeg_command, join_frames, resolve_ffmpeg


def test_frame_path_is_zero_padded(tmp_path: Path) -> None:
    assert frame_path(tmp_path, 7) == tmp_path / "tmp" / "frame_007.png"
    assert frame_path(tmp_path, 1234).name == "frame_1234.png"


def test_save_frame_writes_png(tmp_path: Path) -> None:
    (tmp_path / "tmp").mkdir()
    out = save_frame(Image.new("RGB", (4, 4), (1, 2, 3)), tmp_path, 3)
    with Image.open(out) as img:
        assert img.format == "PNG"
        assert img.getpixel((0, 0)) == (1, 2, 3)


def test_mp4_command_layout(tmp_path: Path) -> None:
    cmd = build_ffmpeg_command("ffmpeg", "out.mp4", 30, False, tmp_path)
    assert cmd == [
        "ffmpeg",
        "-framerate",
        "30",
        "-i",
        str(tmp_path / "tmp" / "frame_%03d.png"),
        "-nostats",
        "-loglevel",
        "0",
        "-y",
        "-c:v",
        "libx264",
        "-pix_fmt",
        "yuv420p",
        "out.mp4",
    ]


def test_gif_command_uses_gif_muxer(tmp_path: Path) -> None:
    cmd = build_ffmpeg_command("ffmpeg", "out.gif", 12, True, tmp_path)
    assert cmd[-3:] == ["-f", "gif", "out.gif"]
    assert "libx264" not in cmd


def test_resolve_prefers_explicit_then_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_ffmpeg("/opt/ffmpeg") == "/opt/ffmpeg"
    monkeypatch.setenv("MVS_FFMPEG", "/usr/local/bin/ffmpeg")
    settings.reload_from_env()
    assert resolve_ffmpeg() == "/usr/local/bin/ffmpeg"


def test_resolve_falls_back_to_path(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing() -> str:
        raise RuntimeError("no bundled binary")

    monkeypatch.setattr(video.imageio_ffmpeg, "get_ffmpeg_exe", missing)
    monkeypatch.setattr(video.shutil, "which", lambda name: "/bin/ffmpeg")
    assert resolve_ffmpeg() == "/bin/ffmpeg"
    monkeypatch.setattr(video.shutil, "which", lambda name: None)
    with pytest.raises(VideoAssemblyError):
        resolve_ffmpeg()


def test_join_frames_runs_ffmpeg_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(video, "_run", fake_run)
    out = join_frames(tmp_path / "v.mp4", 24, False, tmp_path, ffmpeg="ffmpeg")
    assert out == tmp_path / "v.mp4"
    assert len(calls) == 1
    assert calls[0][:3] == ["ffmpeg", "-framerate", "24"]


def test_join_frames_nonzero_exit_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        video, "_run", lambda cmd: subprocess.CompletedProcess(cmd, 1, "", "bad input")
    )
    with pytest.raises(VideoAssemblyError, match="bad input"):
        join_frames(tmp_path / "v.gif", 24, True, tmp_path, ffmpeg="ffmpeg")


def test_join_frames_launch_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(cmd):
        raise FileNotFoundError("ffmpeg")

    monkeypatch.setattr(video, "_run", boom)
    with pytest.raises(VideoAssemblyError):
        join_frames(tmp_path / "v.mp4", 24, False, tmp_path, ffmpeg="/nope/ffmpeg")
