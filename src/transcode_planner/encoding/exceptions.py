"""Exceptions raised by encoder option builders and encoder selection."""


class EncoderError(Exception):
    """Base exception for encoder profile errors."""


class EncoderBuilderError(EncoderError):
    """Raised by an option builder that cannot handle the given stream.

    Encoder selection treats this as "try the next encoder".
    """


class NoEncoderAvailableError(EncoderError):
    """Raised when no encoder of a try-list could build options.

    Attributes:
        context: Transcoding context value (e.g., "vod").
        stream_type: Stream type value (e.g., "video").
        tried: Encoder names that were considered, in order.
    """

    def __init__(self, context: str, stream_type: str, tried: list[str]) -> None:
        """Initialize the exception.

        Args:
            context: Transcoding context value.
            stream_type: Stream type value.
            tried: Encoder names that were considered.
        """
        self.context = context
        self.stream_type = stream_type
        self.tried = tried
        super().__init__(
            f"No available {stream_type} encoder for {context} "
            f"(tried: {', '.join(tried) or 'none'})"
        )
