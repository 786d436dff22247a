"""Exceptions raised when handing job graphs to a queue."""


class JobSinkError(Exception):
    """Base exception for job sink errors."""


class JobEnqueueError(JobSinkError):
    """Raised when a staged job graph could not be enqueued.

    The graph is handed over whole or not at all, so no job of the graph
    should be considered queued.

    Attributes:
        video_uuid: Video the graph was planned for.
    """

    def __init__(self, video_uuid: str, message: str) -> None:
        """Initialize the exception.

        Args:
            video_uuid: Video the graph was planned for.
            message: Description of the failure.
        """
        self.video_uuid = video_uuid
        super().__init__(f"Cannot enqueue jobs of video {video_uuid}: {message}")
