"""Job sinks receiving planned job graphs."""

from transcode_planner.jobs.exceptions import JobEnqueueError, JobSinkError
from transcode_planner.jobs.sink import (
    CollectingJobSink,
    JobSink,
    JsonJobSink,
    Submission,
)

__all__ = [
    "CollectingJobSink",
    "JobEnqueueError",
    "JobSink",
    "JobSinkError",
    "JsonJobSink",
    "Submission",
]
