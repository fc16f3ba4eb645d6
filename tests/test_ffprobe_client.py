"""Tests for the ffprobe video probe."""

import asyncio
import stat
from pathlib import Path

from memory_calendar.adapters.ffprobe_client import FfprobeClient


def _fake_ffprobe(tmp_path: Path, script: str) -> str:
    executable = tmp_path / "ffprobe"
    executable.write_text(f"#!/bin/sh\n{script}\n")
    executable.chmod(executable.stat().st_mode | stat.S_IEXEC)
    return str(executable)


def test_returns_first_line(tmp_path: Path) -> None:
    probe = FfprobeClient(
        _fake_ffprobe(tmp_path, "printf '2024-02-14T18:30:00.000000Z\\nextra\\n'")
    )

    result = asyncio.run(probe.creation_time(tmp_path / "clip.mp4"))

    assert result == "2024-02-14T18:30:00.000000Z"


def test_empty_output_is_none(tmp_path: Path) -> None:
    probe = FfprobeClient(_fake_ffprobe(tmp_path, "exit 0"))

    assert asyncio.run(probe.creation_time(tmp_path / "clip.mp4")) is None


def test_failure_is_none(tmp_path: Path) -> None:
    probe = FfprobeClient(_fake_ffprobe(tmp_path, "echo 'bad file' >&2; exit 1"))

    assert asyncio.run(probe.creation_time(tmp_path / "clip.mp4")) is None
