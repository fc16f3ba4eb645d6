"""Video metadata probing via the ffprobe command-line tool."""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class VideoProbe(Protocol):
    """Interface for reading container metadata from a video file."""

    async def creation_time(self, path: Path) -> str | None:
        """Return the raw creation_time tag of the first video stream."""


@dataclass
class FfprobeClient(VideoProbe):
    """VideoProbe that shells out to ffprobe."""

    executable: str = "ffprobe"

    async def creation_time(self, path: Path) -> str | None:
        """Return the raw creation_time tag, or None if ffprobe has none."""
        process = await asyncio.create_subprocess_exec(
            self.executable,
            "-v",
            "quiet",
            "-select_streams",
            "v:0",
            "-show_entries",
            "stream_tags=creation_time",
            "-of",
            "default=noprint_wrappers=1:nokey=1",
            str(path),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            if message:
                logger.warning("ffprobe failed for %s: %s", path, message)
            return None
        lines = stdout.decode("utf-8", errors="replace").strip().splitlines()
        first = lines[0].strip() if lines else ""
        return first or None
