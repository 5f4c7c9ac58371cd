"""Tests for the keyframer command line."""

import logging

import cv2
import numpy as np
import pytest

from keyframer.cli import build_parser, main


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture
def video_path(tmp_path):
    path = tmp_path / "dance.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 10.0, (48, 32))
    if not writer.isOpened():
        pytest.skip("OpenCV build cannot write MJPG video")
    for i in range(30):
        writer.write(np.full((32, 48, 3), i * 8, dtype=np.uint8))
    writer.release()
    return path


def test_parser_defaults():
    args = build_parser().parse_args(["clip.mp4"])
    assert args.frames is None
    assert args.output is None
    assert args.config is None


def test_main_writes_report(video_path, tmp_path, capsys):
    out_dir = tmp_path / "reports"
    code = main([str(video_path), "-n", "3", "-o", str(out_dir), "--title", "Dance"])

    assert code == 0
    reports = list(out_dir.glob("motion_analysis_*.html"))
    assert len(reports) == 1
    html = reports[0].read_text(encoding="utf-8")
    assert html.count('<div class="frame"') == 3
    assert "<title>Dance</title>" in html
    assert str(reports[0]) in capsys.readouterr().out


def test_main_missing_video(tmp_path):
    assert main([str(tmp_path / "missing.mp4"), "-o", str(tmp_path)]) == 1


def test_main_invalid_frame_count(video_path, tmp_path):
    assert main([str(video_path), "-n", "0", "-o", str(tmp_path)]) == 1


def test_main_unwritable_output(video_path, tmp_path):
    blocker = tmp_path / "taken"
    blocker.write_text("not a directory")
    assert main([str(video_path), "-n", "2", "-o", str(blocker / "reports")]) == 1
