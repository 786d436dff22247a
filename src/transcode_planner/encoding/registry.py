"""Encoder profile registry.

Holds, per transcoding context, the option builders available for each
encoder and the ordered list of encoders to try for each stream type.
Selection walks the try-list and keeps the first encoder that is available
and whose builder accepts the stream, so a context can prefer an efficient
encoder and fall back to a more compatible one.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from transcode_planner.config.models import TranscodingConfig
from transcode_planner.domain.enums import StreamType, TranscodingContext
from transcode_planner.domain.models import SelectedEncoder
from transcode_planner.encoding.exceptions import (
    EncoderBuilderError,
    NoEncoderAvailableError,
)
from transcode_planner.encoding.profiles import (
    EncoderOptionsBuilder,
    EncoderOptionsBuilderParams,
    default_aac_options_builder,
    default_libfdk_aac_vod_options_builder,
    default_x264_live_options_builder,
    default_x264_vod_options_builder,
    default_x265_vod_options_builder,
    flat_bitrate_aac_options_builder,
)

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"

# context -> encoder -> profile name -> builder
BuilderTable = dict[TranscodingContext, dict[str, dict[str, EncoderOptionsBuilder]]]
# context -> stream type -> encoder names
TryListTable = dict[TranscodingContext, dict[StreamType, list[str]]]


def get_default_available_encoders() -> BuilderTable:
    """Return the built-in builders keyed by context, encoder and profile."""
    return {
        TranscodingContext.VOD: {
            "libx264": {DEFAULT_PROFILE: default_x264_vod_options_builder},
            "libx265": {DEFAULT_PROFILE: default_x265_vod_options_builder},
            "aac": {
                DEFAULT_PROFILE: default_aac_options_builder,
                "flat-bitrate": flat_bitrate_aac_options_builder,
            },
            "libfdk_aac": {DEFAULT_PROFILE: default_libfdk_aac_vod_options_builder},
        },
        TranscodingContext.LIVE: {
            "libx264": {DEFAULT_PROFILE: default_x264_live_options_builder},
            "aac": {
                DEFAULT_PROFILE: default_aac_options_builder,
                "flat-bitrate": flat_bitrate_aac_options_builder,
            },
        },
    }


def get_default_encoders_to_try() -> TryListTable:
    """Return the built-in try-lists keyed by context and stream type."""
    return {
        TranscodingContext.VOD: {
            StreamType.VIDEO: ["libx264"],
            StreamType.AUDIO: ["libfdk_aac", "aac"],
        },
        TranscodingContext.LIVE: {
            StreamType.VIDEO: ["libx264"],
            StreamType.AUDIO: ["libfdk_aac", "aac"],
        },
    }


class EncoderProfileRegistry:
    """Registry of encoder option builders and encoder try-lists.

    Example:
        registry = EncoderProfileRegistry()
        selected = registry.select_encoder(
            TranscodingContext.VOD,
            StreamType.VIDEO,
            params,
            available={"libx264", "aac"},
        )
        selected.encoder  # "libx264"
    """

    def __init__(
        self,
        builders: BuilderTable | None = None,
        encoders_to_try: TryListTable | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            builders: Builder table; defaults to the built-in builders.
            encoders_to_try: Try-lists; defaults to the built-in try-lists.
        """
        self._builders = (
            builders if builders is not None else get_default_available_encoders()
        )
        self._encoders_to_try = (
            encoders_to_try
            if encoders_to_try is not None
            else get_default_encoders_to_try()
        )

    def add_encoder_priority(
        self,
        context: TranscodingContext,
        stream_type: StreamType,
        encoder: str,
        priority: int,
    ) -> None:
        """Insert an encoder in a try-list at the given position.

        Lower priority values are tried first. An encoder already present is
        moved rather than duplicated.
        """
        try_list = self._encoders_to_try.setdefault(context, {}).setdefault(
            stream_type, []
        )
        if encoder in try_list:
            try_list.remove(encoder)
        try_list.insert(max(priority, 0), encoder)

    def set_encoders_to_try(
        self,
        context: TranscodingContext,
        stream_type: StreamType,
        encoders: Sequence[str],
    ) -> None:
        """Replace a try-list."""
        self._encoders_to_try.setdefault(context, {})[stream_type] = list(encoders)

    def add_profile(
        self,
        context: TranscodingContext,
        encoder: str,
        profile: str,
        builder: EncoderOptionsBuilder,
    ) -> None:
        """Register a named builder for an encoder."""
        encoders = self._builders.setdefault(context, {})
        encoders.setdefault(encoder, {})[profile] = builder

    def remove_profile(
        self, context: TranscodingContext, encoder: str, profile: str
    ) -> None:
        """Unregister a named builder. The default builder cannot be removed."""
        if profile == DEFAULT_PROFILE:
            raise ValueError("The default profile cannot be removed")
        self._builders.get(context, {}).get(encoder, {}).pop(profile, None)

    def get_encoders_to_try(
        self, context: TranscodingContext, stream_type: StreamType
    ) -> list[str]:
        """Return a copy of the try-list for a context and stream type."""
        return list(self._encoders_to_try.get(context, {}).get(stream_type, []))

    def get_available_profiles(self, context: TranscodingContext) -> list[str]:
        """Return every profile name registered for a context, default first."""
        names = {DEFAULT_PROFILE}
        for profiles in self._builders.get(context, {}).values():
            names.update(profiles)
        return [DEFAULT_PROFILE] + sorted(names - {DEFAULT_PROFILE})

    def get_builder(
        self,
        context: TranscodingContext,
        encoder: str,
        profile: str = DEFAULT_PROFILE,
    ) -> EncoderOptionsBuilder | None:
        """Return the builder for an encoder, falling back to its default."""
        profiles: Mapping[str, EncoderOptionsBuilder] = self._builders.get(
            context, {}
        ).get(encoder, {})
        return profiles.get(profile) or profiles.get(DEFAULT_PROFILE)

    def select_encoder(
        self,
        context: TranscodingContext,
        stream_type: StreamType,
        params: EncoderOptionsBuilderParams,
        available: Iterable[str] | None = None,
        profile: str = DEFAULT_PROFILE,
    ) -> SelectedEncoder:
        """Pick the first encoder of the try-list able to build options.

        Args:
            context: Transcoding context.
            stream_type: Stream to encode.
            params: Builder inputs.
            available: Encoder names the local ffmpeg provides. None means
                every registered encoder is considered available.
            profile: Named profile to use, falling back to the default one.

        Returns:
            SelectedEncoder with the encoder name and its options.

        Raises:
            NoEncoderAvailableError: If no encoder of the try-list qualifies.
        """
        available_set = set(available) if available is not None else None
        try_list = self.get_encoders_to_try(context, stream_type)

        for encoder in try_list:
            if available_set is not None and encoder not in available_set:
                logger.debug("Encoder %s is not available, skipping", encoder)
                continue

            builder = self.get_builder(context, encoder, profile)
            if builder is None:
                logger.debug(
                    "No %s builder for encoder %s, skipping", context.value, encoder
                )
                continue

            try:
                result = builder(params)
            except EncoderBuilderError as e:
                logger.debug("Encoder %s declined: %s", encoder, e)
                continue

            logger.debug(
                "Selected %s encoder %s (copy=%s)",
                stream_type.value,
                encoder,
                result.is_stream_copy,
            )
            return SelectedEncoder(encoder=encoder, result=result)

        raise NoEncoderAvailableError(context.value, stream_type.value, try_list)


def build_registry(config: TranscodingConfig) -> EncoderProfileRegistry:
    """Build a registry with the configured try-lists applied to every context."""
    registry = EncoderProfileRegistry()
    for context in TranscodingContext:
        if config.video_encoders is not None:
            registry.set_encoders_to_try(
                context, StreamType.VIDEO, config.video_encoders
            )
        if config.audio_encoders is not None:
            registry.set_encoders_to_try(
                context, StreamType.AUDIO, config.audio_encoders
            )
    return registry
