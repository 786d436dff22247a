"""Detection of the encoders provided by the local ffmpeg build.

The planner does not run ffmpeg itself. The encoder list is only used to
skip entries of an encoder try-list the build cannot provide.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
from pathlib import Path

logger = logging.getLogger(__name__)

DETECTION_TIMEOUT = 10

# Format: " V....D libx264    libx264 H.264 / AVC ..."
_ENCODER_LINE = re.compile(r"^\s*([VAS])[F.][S.][X.][B.][D.]\s+(\S+)")


class EncoderDetectionError(Exception):
    """Raised when the ffmpeg encoder list cannot be read."""


def _run_command(args: list[str], timeout: int = DETECTION_TIMEOUT) -> str:
    """Run a command and return its stdout.

    Raises:
        EncoderDetectionError: If the command cannot run or exits non-zero.
    """
    try:
        result = subprocess.run(  # nosec B603 - args are tool paths and fixed flags
            args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise EncoderDetectionError(f"Command timed out: {' '.join(args)}") from e
    except OSError as e:
        raise EncoderDetectionError(f"Could not run {args[0]}: {e}") from e

    if result.returncode != 0:
        raise EncoderDetectionError(
            f"{args[0]} exited with {result.returncode}: {result.stderr.strip()}"
        )
    return result.stdout


def parse_encoder_list(output: str) -> dict[str, str]:
    """Parse `ffmpeg -encoders` output.

    Returns:
        Mapping of encoder name (lowercase) to its type letter: "V" for
        video, "A" for audio, "S" for subtitles. Legend lines are skipped.
    """
    encoders: dict[str, str] = {}
    for line in output.splitlines():
        match = _ENCODER_LINE.match(line)
        if match and match.group(2) != "=":
            encoders[match.group(2).casefold()] = match.group(1)
    return encoders


def detect_available_encoders(ffmpeg_path: Path | None = None) -> frozenset[str]:
    """List the encoders of the local ffmpeg build.

    Args:
        ffmpeg_path: Explicit ffmpeg path. Looked up in PATH when None.

    Returns:
        Encoder names, e.g. {"libx264", "aac", ...}.

    Raises:
        EncoderDetectionError: If ffmpeg is missing or fails.
    """
    if ffmpeg_path is None:
        found = shutil.which("ffmpeg")
        if found is None:
            raise EncoderDetectionError("ffmpeg is not installed or not in PATH")
        ffmpeg_path = Path(found)

    output = _run_command([str(ffmpeg_path), "-hide_banner", "-encoders"])
    encoders = frozenset(parse_encoder_list(output))
    logger.debug("ffmpeg at %s provides %d encoders", ffmpeg_path, len(encoders))
    return encoders
