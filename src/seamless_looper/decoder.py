#!/usr/bin/env python
import os
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

import numpy as np
import soundfile as sf

from seamless_looper.exceptions import AudioLoadError, UnsupportedFormatError
from seamless_looper.models import AudioFormat

SUPPORTED_EXTENSIONS = (".wav", ".flac", ".mp3")


class SampleStream(Protocol):
    """
    Seekable, pull-based cursor over stereo float samples.

    read() returns an array of shape (k, 2) with k <= frames; k == 0 marks
    the end of the stream.
    """
    samplerate: int
    channels: int
    frames: int

    def read(self, frames: int) -> np.ndarray: ...
    def seek(self, index: int) -> int: ...
    def close(self) -> None: ...


def to_stereo(data: np.ndarray) -> np.ndarray:
    """
    Coerce decoded audio to a (n, 2) float64 array.

    Mono is duplicated onto both channels, anything wider keeps the first two.
    """
    data = np.asarray(data, dtype=np.float64)
    if data.ndim == 1:
        data = data[:, np.newaxis]
    if data.shape[1] == 1:
        return np.repeat(data, 2, axis=1)
    return data[:, :2]


class SoundFileStream:
    """
    Sample stream backed by a libsndfile handle.
    """
    def __init__(self, audio_file: Union[str, Path]) -> None:
        """
        Open an audio file for seekable, chunked reading.

        Args:
            audio_file: Path to a WAV, FLAC or MP3 file

        Raises:
            AudioLoadError: If the file is missing or cannot be decoded
        """
        self.audio_file = str(audio_file)
        if not os.path.exists(self.audio_file):
            raise AudioLoadError(f"Audio file not found: {self.audio_file}")

        try:
            self._sf = sf.SoundFile(self.audio_file, mode="r")
        except (RuntimeError, OSError) as e:
            raise AudioLoadError(f"Error loading audio file: {e}") from e

        self.samplerate: int = self._sf.samplerate
        self.channels: int = self._sf.channels
        self.frames: int = self._sf.frames
        logging.info(
            f"Opened {self.audio_file}: {self.samplerate} Hz, "
            f"{self.channels} channel(s), {self.frames} frames"
        )

    @property
    def format(self) -> AudioFormat:
        return AudioFormat(samplerate=self.samplerate, channels=self.channels, frames=self.frames)

    def read(self, frames: int) -> np.ndarray:
        block = self._sf.read(frames, dtype="float64", always_2d=True)
        return to_stereo(block)

    def seek(self, index: int) -> int:
        """
        Move the cursor to an absolute sample index.

        Indices past the end park the cursor at end-of-stream, so the next
        read yields zero samples.
        """
        if index < 0:
            raise ValueError(f"Cannot seek to negative index {index}")
        return self._sf.seek(min(index, self.frames))

    def close(self) -> None:
        if not self._sf.closed:
            self._sf.close()

    def __enter__(self) -> "SoundFileStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ArraySampleStream:
    """
    Sample stream over an in-memory array, for synthetic sources.
    """
    def __init__(self, samples: np.ndarray, samplerate: int = 44100) -> None:
        self._data = to_stereo(samples)
        self.samplerate = samplerate
        self.channels = 2
        self.frames = len(self._data)
        self._pos = 0
        self.closed = False

    def read(self, frames: int) -> np.ndarray:
        if self.closed:
            raise RuntimeError("I/O operation on closed stream")
        block = self._data[self._pos:self._pos + frames]
        self._pos += len(block)
        return block

    def seek(self, index: int) -> int:
        if index < 0:
            raise ValueError(f"Cannot seek to negative index {index}")
        self._pos = min(index, self.frames)
        return self._pos

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "ArraySampleStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def open_audio_file(file_path: Union[str, Path], extension: Optional[str] = None) -> SoundFileStream:
    """
    Open and decode an audio file, picking the decoder from its extension.

    Args:
        file_path: Path to the audio file
        extension: Format tag such as ".wav", derived from file_path when None

    Returns:
        An open, seekable SoundFileStream

    Raises:
        UnsupportedFormatError: If the extension is not WAV, FLAC or MP3
        AudioLoadError: If the file is missing or cannot be decoded
    """
    ext = (extension or Path(file_path).suffix).lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(f"Unsupported audio format: {ext or Path(file_path).name}")
    return SoundFileStream(file_path)
