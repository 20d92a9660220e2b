from __future__ import annotations

from pathlib import Path

from util.paths import ensure_frames_dir, ensure_output_parent, remove_frames_dir
from util.utils import DEFAULTS, animation_defaults, load_config


def test_frames_dir_lifecycle(tmp_path: Path) -> None:
    out = ensure_frames_dir(tmp_path / "a" / "b")
    assert out == tmp_path / "a" / "b" / "tmp"
    assert out.is_dir()
    assert ensure_frames_dir(tmp_path / "a" / "b") == out
    (out / "frame_000.png").write_bytes(b"x")
    remove_frames_dir(tmp_path / "a" / "b")
    assert not out.exists()
    remove_frames_dir(tmp_path / "a" / "b")


def test_ensure_output_parent(tmp_path: Path) -> None:
    target = tmp_path / "videos" / "clip.mp4"
    assert ensure_output_parent(target) == target
    assert target.parent.is_dir()
    assert not target.exists()


def test_load_config_merges_root_over_default(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text(
        "animation:\n  fps: 12\nother: 1\n", encoding="utf-8"
    )
    (tmp_path / "config.yaml").write_text("other: 2\n", encoding="utf-8")
    cfg = load_config(root=tmp_path)
    assert cfg == {"animation": {"fps": 12}, "other": 2}


def test_load_config_tolerates_broken_yaml(tmp_path: Path) -> None:
    (tmp_path / "configs").mkdir()
    (tmp_path / "configs" / "default.yaml").write_text("animation: [1, 2\n", encoding="utf-8")
    assert load_config(root=tmp_path) == {}


def test_animation_defaults_overlay() -> None:
    merged = animation_defaults({"animation": {"fps": 60, "quality": None, "unknown": 3}})
    assert merged["fps"] == 60
    assert merged["quality"] == DEFAULTS["quality"]
    assert "unknown" not in merged


def test_animation_defaults_accepts_flat_config() -> None:
    assert animation_defaults({"fps": 5})["fps"] == 5


def test_shipped_config_is_loaded() -> None:
    merged = animation_defaults()
    assert merged["fps"] == 30
    assert merged["quality"] == "high"
