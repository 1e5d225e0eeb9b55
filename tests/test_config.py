import pytest

from seamless_looper.config import LooperConfig
from seamless_looper.exceptions import ConfigError
from seamless_looper.models import AudioFormat, LoopSegment


class TestLooperConfig:
    def test_defaults(self):
        config = LooperConfig()
        assert config.threshold == 0.001
        assert config.chunk_size == 1024
        assert config.degenerate_policy == "full"
        assert config.silence_samples(44100) == 4410

    def test_sample_override_wins(self):
        assert LooperConfig(silence_duration_samples=7).silence_samples(44100) == 7

    @pytest.mark.parametrize("kwargs", [
        {"chunk_size": 0},
        {"sink_blocksize": -1},
        {"silence_duration_sec": -0.1},
        {"silence_duration_samples": -5},
        {"degenerate_policy": "ignore"},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigError):
            LooperConfig(**kwargs)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            LooperConfig(chunk_size=-3)


class TestLoopSegment:
    def test_length(self):
        segment = LoopSegment(2, 5)
        assert (segment.start, segment.end, segment.length) == (2, 5, 3)
        assert not segment.is_degenerate

    def test_zero_segment_is_degenerate(self):
        assert LoopSegment(0, 0).is_degenerate
        assert LoopSegment(7, 7).length == 0

    @pytest.mark.parametrize("start,end", [(-1, 4), (5, 4)])
    def test_invalid_bounds(self, start, end):
        with pytest.raises(ValueError):
            LoopSegment(start, end)

    def test_is_immutable(self):
        segment = LoopSegment(1, 2)
        with pytest.raises(AttributeError):
            segment.start = 0


def test_audio_format_duration():
    assert AudioFormat(samplerate=8000, channels=2, frames=4000).duration_seconds == 0.5
    assert AudioFormat(samplerate=0, channels=2, frames=10).duration_seconds == 0.0
