"""Tests for the default encoder option builders."""

from __future__ import annotations

import pytest

from transcode_planner.encoding.bitrate import get_target_bitrate
from transcode_planner.encoding.exceptions import EncoderBuilderError
from transcode_planner.encoding.profiles import (
    FORCED_CHANNEL_LAYOUT,
    EncoderOptionsBuilderParams,
    build_stream_suffix,
    default_aac_options_builder,
    default_libfdk_aac_vod_options_builder,
    default_x264_live_options_builder,
    default_x264_vod_options_builder,
    default_x265_vod_options_builder,
    flat_bitrate_aac_options_builder,
    get_h264_rate_multipliers,
    get_hevc_tuning,
)


def make_params(probe, **overrides) -> EncoderOptionsBuilderParams:
    values = {
        "resolution": 1080,
        "fps": 30,
        "input_bitrate": probe.video_bitrate,
        "input_ratio": probe.ratio,
        "probe": probe,
    }
    values.update(overrides)
    return EncoderOptionsBuilderParams(**values)


def option_value(options: tuple[str, ...], name: str) -> str:
    """Return the value of the single-token option starting with name."""
    for option in options:
        key, _, value = option.partition(" ")
        if key == name:
            return value
    raise AssertionError(f"{name} not in {options}")


class TestBuildStreamSuffix:
    """Tests for build_stream_suffix function."""

    def test_without_stream(self) -> None:
        assert build_stream_suffix("-b:v") == "-b:v"

    def test_with_stream(self) -> None:
        assert build_stream_suffix("-b:v", 1) == "-b:v:1"
        assert build_stream_suffix("-b:a", 0) == "-b:a:0"


class TestTuningTables:
    """Tests for the per-resolution tuning lookups."""

    def test_h264_known_resolution(self) -> None:
        rates = get_h264_rate_multipliers(1080)
        assert (rates.max_rate, rates.buf_size) == (2.5, 5)

    def test_h264_custom_resolution_gets_tightest(self) -> None:
        """Resolutions outside the table get the 4K multipliers."""
        rates = get_h264_rate_multipliers(1000)
        assert (rates.max_rate, rates.buf_size) == (1.5, 3)

    def test_hevc_ten_bit_on_top_tiers(self) -> None:
        """Only 1440p and 4K are encoded in 10-bit."""
        assert get_hevc_tuning(2160).pix_fmt == "yuv420p10le"
        assert get_hevc_tuning(1440).pix_fmt == "yuv420p10le"
        assert get_hevc_tuning(1080).pix_fmt == "yuv420p"
        assert get_hevc_tuning(1000).pix_fmt == "yuv420p"


class TestX264VodBuilder:
    """Tests for default_x264_vod_options_builder."""

    def test_base_options(self, make_descriptor) -> None:
        result = default_x264_vod_options_builder(make_params(make_descriptor()))

        assert result.is_stream_copy is False
        assert "-preset veryslow" in result.options
        assert "-crf 20" in result.options
        assert "-pix_fmt yuv420p" in result.options

    def test_gop_is_two_seconds(self, make_descriptor) -> None:
        result = default_x264_vod_options_builder(
            make_params(make_descriptor(), fps=25)
        )
        assert option_value(result.options, "-g") == "50"

    def test_rate_control_follows_target(self, make_descriptor) -> None:
        """maxrate and bufsize are multiples of the target bitrate."""
        probe = make_descriptor(video_bitrate=None)
        result = default_x264_vod_options_builder(make_params(probe))
        target = get_target_bitrate(None, 1080, 30, probe.ratio)

        assert option_value(result.options, "-maxrate:v") == str(round(target * 2.5))
        assert option_value(result.options, "-bufsize:v") == str(round(target * 5))

    def test_unknown_frame_size(self, make_descriptor) -> None:
        """A stream with no width or height still gets rate control options."""
        probe = make_descriptor(width=None, height=None)
        result = default_x264_vod_options_builder(make_params(probe, input_ratio=0))

        assert int(option_value(result.options, "-maxrate:v")) > 0

    def test_options_are_single_tokens(self, make_descriptor) -> None:
        """Every option carries its own value."""
        result = default_x264_vod_options_builder(make_params(make_descriptor()))
        assert all(option.startswith("-") for option in result.options)
        assert all(" " in option for option in result.options)

    def test_declines_audio_resolution(self, make_descriptor) -> None:
        with pytest.raises(EncoderBuilderError):
            default_x264_vod_options_builder(
                make_params(make_descriptor(), resolution=0)
            )


class TestX265VodBuilder:
    """Tests for default_x265_vod_options_builder."""

    def test_four_k_is_ten_bit(self, make_descriptor) -> None:
        probe = make_descriptor(width=3840, height=2160)
        result = default_x265_vod_options_builder(make_params(probe, resolution=2160))

        assert "-pix_fmt yuv420p10le" in result.options
        assert "-tag:v hvc1" in result.options
        assert "-preset slow" in result.options

    def test_low_resolution_is_eight_bit(self, make_descriptor) -> None:
        result = default_x265_vod_options_builder(
            make_params(make_descriptor(), resolution=360)
        )
        assert "-pix_fmt yuv420p" in result.options
        assert "-preset fast" in result.options

    def test_declines_audio_resolution(self, make_descriptor) -> None:
        with pytest.raises(EncoderBuilderError):
            default_x265_vod_options_builder(
                make_params(make_descriptor(), resolution=0)
            )


class TestX264LiveBuilder:
    """Tests for default_x264_live_options_builder."""

    def test_options_with_stream_number(self, make_descriptor) -> None:
        probe = make_descriptor(video_bitrate=None)
        result = default_x264_live_options_builder(
            make_params(probe, resolution=720, stream_num=1)
        )
        target = get_target_bitrate(None, 720, 30, probe.ratio)

        assert result.options == (
            "-preset veryfast",
            f"-maxrate:v:1 {target}",
            f"-bufsize:v:1 {target * 2}",
            "-b_strategy 1",
            "-bf 16",
            "-r:v:1 30",
            f"-b:v:1 {target}",
        )

    def test_without_stream_number(self, make_descriptor) -> None:
        result = default_x264_live_options_builder(
            make_params(make_descriptor(), fps=29.97)
        )
        assert "-r:v 29.97" in result.options

    def test_declines_audio_resolution(self, make_descriptor) -> None:
        with pytest.raises(EncoderBuilderError):
            default_x264_live_options_builder(
                make_params(make_descriptor(), resolution=0)
            )


class TestAacBuilders:
    """Tests for the AAC option builders."""

    def test_copy_when_allowed_and_compliant(self, make_descriptor) -> None:
        result = default_aac_options_builder(
            make_params(make_descriptor(), can_copy_audio=True)
        )
        assert result.is_stream_copy is True
        assert result.options == ()

    def test_no_copy_when_not_allowed(self, make_descriptor) -> None:
        """A compliant AAC input keeps its bitrate but is re-encoded."""
        result = default_aac_options_builder(make_params(make_descriptor()))
        assert result.is_stream_copy is False
        assert result.options == (FORCED_CHANNEL_LAYOUT,)

    def test_no_copy_when_not_compliant(self, make_descriptor) -> None:
        probe = make_descriptor(audio_codec="mp3", audio_bitrate=320_000)
        result = default_aac_options_builder(make_params(probe, can_copy_audio=True))

        assert result.is_stream_copy is False
        assert result.options == (FORCED_CHANNEL_LAYOUT, "-b:a 256k")

    def test_bitrate_with_stream_number(self, make_descriptor) -> None:
        probe = make_descriptor(audio_codec="opus", audio_bitrate=96_000)
        result = default_aac_options_builder(make_params(probe, stream_num=2))
        assert result.options == (FORCED_CHANNEL_LAYOUT, "-b:a:2 128k")

    def test_unknown_bitrate(self, make_descriptor) -> None:
        probe = make_descriptor(audio_codec="mp3", audio_bitrate=None)
        result = default_aac_options_builder(make_params(probe))
        assert result.options == (FORCED_CHANNEL_LAYOUT, "-b:a 256k")

    def test_flat_bitrate(self, make_descriptor) -> None:
        """The flat profile ignores the input measurement."""
        probe = make_descriptor(audio_codec="mp3", audio_bitrate=96_000)
        result = flat_bitrate_aac_options_builder(make_params(probe))
        assert result.options == (FORCED_CHANNEL_LAYOUT, "-b:a 320k")

    def test_flat_bitrate_copies(self, make_descriptor) -> None:
        result = flat_bitrate_aac_options_builder(
            make_params(make_descriptor(), can_copy_audio=True)
        )
        assert result.is_stream_copy is True

    def test_libfdk_quality_mode(self, make_descriptor) -> None:
        result = default_libfdk_aac_vod_options_builder(
            make_params(make_descriptor(), stream_num=1)
        )
        assert result.options == ("-q:a:1 5",)
