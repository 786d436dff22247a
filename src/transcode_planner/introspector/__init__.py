"""Media introspection.

- MediaIntrospector: Protocol defining the introspection interface
- FFprobeIntrospector: Production implementation using ffprobe
- MediaIntrospectionError: Exception for introspection failures
"""

from transcode_planner.introspector.ffprobe import FFprobeIntrospector
from transcode_planner.introspector.interface import (
    MediaIntrospectionError,
    MediaIntrospector,
)
from transcode_planner.introspector.parsers import (
    parse_ffprobe_output,
    parse_frame_rate,
)

__all__ = [
    "FFprobeIntrospector",
    "MediaIntrospectionError",
    "MediaIntrospector",
    "parse_ffprobe_output",
    "parse_frame_rate",
]
