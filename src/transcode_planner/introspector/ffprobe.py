"""FFprobe-based implementation of the MediaIntrospector protocol."""

import json
import logging
import shutil
import subprocess  # nosec B404 - subprocess is required for ffprobe invocation
from pathlib import Path

from transcode_planner.domain.models import MediaFileDescriptor
from transcode_planner.introspector.interface import MediaIntrospectionError
from transcode_planner.introspector.parsers import parse_ffprobe_output

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60


class FFprobeIntrospector:
    """ffprobe-based implementation of MediaIntrospector.

    Runs ffprobe with JSON output and parses the first video and audio
    streams into a MediaFileDescriptor.
    """

    def __init__(
        self,
        ffprobe_path: Path | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Explicit path to ffprobe. Looked up in PATH when None.
            timeout: Seconds before a probe is abandoned.

        Raises:
            MediaIntrospectionError: If ffprobe is not available.
        """
        if ffprobe_path is None:
            found = shutil.which("ffprobe")
            ffprobe_path = Path(found) if found else None

        if ffprobe_path is None:
            raise MediaIntrospectionError(
                "ffprobe is not installed or not in PATH. "
                "Install ffmpeg or configure a path via TPLAN_FFPROBE_PATH "
                "or [tools] ffprobe in ~/.tplan/config.toml"
            )
        self._ffprobe_path = ffprobe_path
        self._timeout = timeout

    @staticmethod
    def is_available() -> bool:
        """Check if ffprobe is in PATH."""
        return shutil.which("ffprobe") is not None

    def get_descriptor(self, path: Path) -> MediaFileDescriptor:
        """Probe a media file.

        Args:
            path: Path to the media file.

        Returns:
            MediaFileDescriptor for the file.

        Raises:
            MediaIntrospectionError: If the file cannot be introspected.
        """
        if not path.exists():
            raise MediaIntrospectionError(f"File not found: {path}")

        try:
            ffprobe_output = self._run_ffprobe(path)
        except subprocess.TimeoutExpired as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {path} after {e.timeout}s"
            ) from e
        except subprocess.CalledProcessError as e:
            raise MediaIntrospectionError(
                f"ffprobe failed for {path}: {e.stderr or e}"
            ) from e
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {path}: {e}"
            ) from e
        except OSError as e:
            raise MediaIntrospectionError(
                f"Could not run {self._ffprobe_path}: {e}"
            ) from e

        descriptor = parse_ffprobe_output(path, ffprobe_output)
        logger.debug(
            "Probed %s: %sx%s @ %s fps, video=%s audio=%s",
            path,
            descriptor.width,
            descriptor.height,
            descriptor.fps,
            descriptor.video_codec,
            descriptor.audio_codec,
        )
        return descriptor

    def _run_ffprobe(self, path: Path) -> dict:
        """Run ffprobe and return parsed JSON output.

        Raises:
            subprocess.CalledProcessError: If ffprobe returns non-zero.
            json.JSONDecodeError: If output is not valid JSON.
            MediaIntrospectionError: If output is missing required keys.
        """
        result = subprocess.run(  # nosec B603 - ffprobe path is configured
            [
                str(self._ffprobe_path),
                "-v",
                "error",
                "-print_format",
                "json",
                "-show_streams",
                "-show_format",
                str(path),
            ],
            capture_output=True,
            text=True,
            errors="replace",
            check=True,
            timeout=self._timeout,
        )
        data = json.loads(result.stdout)

        for key in ("streams", "format"):
            if key not in data:
                raise MediaIntrospectionError(
                    f"Missing '{key}' in ffprobe output for {path}. "
                    "File may be corrupted or not a valid media file."
                )
        return data
