"""Tests for codec alias matching and encoder families."""

import pytest

from vsplit.core.codecs import (
    audio_codec_matches,
    encoder_family,
    video_codec_matches,
)


class TestEncoderFamily:
    @pytest.mark.parametrize(
        "encoder,family",
        [
            ("libx264", "h264"),
            ("h264_nvenc", "h264"),
            ("libx265", "hevc"),
            ("aac", "aac"),
            ("libfdk_aac", "aac"),
            ("libopus", "opus"),
            ("LIBX264", "h264"),
        ],
    )
    def test_known_encoders(self, encoder, family):
        assert encoder_family(encoder) == family

    def test_unknown_encoder_is_its_own_family(self):
        assert encoder_family("prores") == "prores"


class TestVideoCodecMatches:
    @pytest.mark.parametrize(
        "codec,target",
        [
            ("h264", "h264"),
            ("H264", "h264"),
            ("avc1", "h264"),
            ("h264", "avc"),
            ("hevc", "h265"),
            ("hvc1", "hevc"),
        ],
    )
    def test_matches(self, codec, target):
        assert video_codec_matches(codec, target) is True

    @pytest.mark.parametrize(
        "codec,target",
        [("hevc", "h264"), ("vp9", "av1"), ("mpeg2video", "h264")],
    )
    def test_does_not_match(self, codec, target):
        assert video_codec_matches(codec, target) is False

    def test_unknown_codec_never_matches(self):
        assert video_codec_matches(None, "h264") is False


class TestAudioCodecMatches:
    def test_aac_variants(self):
        assert audio_codec_matches("aac", "aac") is True
        assert audio_codec_matches("mp4a", "aac") is True

    def test_different_family(self):
        assert audio_codec_matches("ac3", "aac") is False
        assert audio_codec_matches("eac3", "ac3") is False

    def test_unknown_codec_never_matches(self):
        assert audio_codec_matches(None, "aac") is False
