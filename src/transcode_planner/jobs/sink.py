"""Job sinks: the terminal side effect of a planning invocation.

A sink receives a whole staged graph at once. Stage 0 is the root stage;
jobs of a later stage must not start before the stage they depend on has
completed. Enforcing that ordering is the job queue's responsibility.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING, Any, Protocol

from transcode_planner.domain.models import StagedGraph, staged_graph_to_list

if TYPE_CHECKING:
    from transcode_planner.planning.media import Video

logger = logging.getLogger(__name__)


class JobSink(Protocol):
    """Receives staged job graphs."""

    def create_jobs(self, *, video: Video, payloads: StagedGraph, user: Any) -> None:
        """Enqueue a staged job graph.

        Raises:
            Exception: Any failure; the caller wraps it in JobEnqueueError.
        """
        ...


@dataclass(frozen=True)
class Submission:
    """One create_jobs call recorded by CollectingJobSink."""

    video_uuid: str
    payloads: StagedGraph
    user: Any = None


@dataclass
class CollectingJobSink:
    """Records every submitted graph in memory."""

    submissions: list[Submission] = field(default_factory=list)

    def create_jobs(self, *, video: Video, payloads: StagedGraph, user: Any) -> None:
        self.submissions.append(
            Submission(
                video_uuid=video.uuid,
                payloads=[list(stage) for stage in payloads],
                user=user,
            )
        )

    @property
    def last(self) -> Submission:
        """Most recent submission.

        Raises:
            IndexError: If nothing was submitted.
        """
        return self.submissions[-1]


class JsonJobSink:
    """Writes each submitted graph as one JSON document to a stream."""

    def __init__(self, stream: IO[str], indent: int | None = 2) -> None:
        self._stream = stream
        self._indent = indent

    def create_jobs(self, *, video: Video, payloads: StagedGraph, user: Any) -> None:
        document = {
            "video": video.uuid,
            "user": user,
            "stages": staged_graph_to_list(payloads),
        }
        self._stream.write(json.dumps(document, indent=self._indent, default=str))
        self._stream.write("\n")
        self._stream.flush()
        logger.debug("Wrote %d stage(s) for video %s", len(payloads), video.uuid)
