import numpy as np
import pytest
import soundfile as sf

from seamless_looper.decoder import ArraySampleStream, SoundFileStream, open_audio_file, to_stereo
from seamless_looper.exceptions import AudioLoadError, UnsupportedFormatError
from seamless_looper.models import AudioFormat


@pytest.fixture
def stereo_wav(tmp_path):
    path = tmp_path / "loop.wav"
    data = np.column_stack((np.linspace(-0.5, 0.5, 100), np.linspace(0.5, -0.5, 100)))
    sf.write(str(path), data, 8000, subtype="FLOAT")
    return path, data


class TestOpenAudioFile:
    def test_reads_stereo_wav(self, stereo_wav):
        path, data = stereo_wav
        with open_audio_file(path) as stream:
            assert stream.format == AudioFormat(samplerate=8000, channels=2, frames=100)
            block = stream.read(64)
            assert block.shape == (64, 2)
            np.testing.assert_allclose(block, data[:64], atol=1e-6)
            assert stream.read(64).shape == (36, 2)
            assert stream.read(64).shape == (0, 2)

    def test_seek_restarts_playback(self, stereo_wav):
        path, data = stereo_wav
        with open_audio_file(path) as stream:
            stream.read(100)
            stream.seek(10)
            np.testing.assert_allclose(stream.read(5), data[10:15], atol=1e-6)

    def test_seek_past_end_yields_nothing(self, stereo_wav):
        path, _ = stereo_wav
        with open_audio_file(path) as stream:
            stream.seek(1000000)
            assert len(stream.read(1024)) == 0

    def test_mono_is_duplicated(self, tmp_path):
        path = tmp_path / "mono.flac"
        sf.write(str(path), np.full(50, 0.25), 22050, subtype="PCM_16")
        with open_audio_file(path) as stream:
            assert stream.channels == 1
            block = stream.read(50)
            assert block.shape == (50, 2)
            np.testing.assert_allclose(block[:, 0], block[:, 1])

    def test_extension_is_case_insensitive(self, tmp_path):
        path = tmp_path / "LOUD.WAV"
        sf.write(str(path), np.zeros((10, 2)), 44100)
        with open_audio_file(path) as stream:
            assert stream.frames == 10

    def test_explicit_extension_overrides_suffix(self, tmp_path):
        path = tmp_path / "noext"
        sf.write(str(path), np.zeros((10, 2)), 44100, format="WAV")
        with open_audio_file(path, extension="wav") as stream:
            assert stream.frames == 10

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "song.ogg"
        path.write_bytes(b"OggS")
        with pytest.raises(UnsupportedFormatError, match="Unsupported audio format"):
            open_audio_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(AudioLoadError, match="not found"):
            open_audio_file(tmp_path / "nope.wav")

    def test_garbage_file(self, tmp_path):
        path = tmp_path / "broken.wav"
        path.write_bytes(b"definitely not a riff header")
        with pytest.raises(AudioLoadError):
            SoundFileStream(path)

    def test_close_is_idempotent(self, stereo_wav):
        path, _ = stereo_wav
        stream = open_audio_file(path)
        stream.close()
        stream.close()


class TestArraySampleStream:
    def test_reads_in_order_until_exhausted(self):
        stream = ArraySampleStream(np.arange(20, dtype=float).reshape(10, 2))
        assert stream.read(4).shape == (4, 2)
        assert stream.read(4).shape == (4, 2)
        assert stream.read(4).shape == (2, 2)
        assert stream.read(4).shape == (0, 2)

    def test_seek_clamps_to_end(self):
        stream = ArraySampleStream(np.zeros((10, 2)))
        assert stream.seek(50) == 10
        assert len(stream.read(4)) == 0

    def test_negative_seek_is_rejected(self):
        with pytest.raises(ValueError):
            ArraySampleStream(np.zeros((10, 2))).seek(-1)

    def test_read_after_close_fails(self):
        stream = ArraySampleStream(np.zeros((10, 2)))
        stream.close()
        with pytest.raises(RuntimeError):
            stream.read(1)


def test_to_stereo_keeps_first_two_channels():
    data = np.arange(12, dtype=float).reshape(4, 3)
    np.testing.assert_array_equal(to_stereo(data), data[:, :2])
    assert to_stereo(np.ones(3)).shape == (3, 2)
