#!/usr/bin/env python
import logging
from typing import Optional, Protocol, Union

import numpy as np

from seamless_looper.exceptions import SinkError

PCM16_SCALE = 32767
BIT_DEPTH = 16


class Sink(Protocol):
    """Anything that accepts interleaved 16-bit PCM and blocks until it is taken."""

    def write(self, data: bytes) -> None: ...


def pack_pcm16(block: np.ndarray) -> bytes:
    """
    Convert stereo float samples to interleaved little-endian int16 bytes.

    NaN becomes silence, then each value is clipped to [-1.0, 1.0], scaled
    by 32767 and truncated toward zero.

    Args:
        block: Array of shape (n, 2)

    Returns:
        n * 4 bytes laid out as L0 R0 L1 R1 ...
    """
    samples = np.nan_to_num(np.asarray(block, dtype=np.float64), nan=0.0)
    scaled = np.clip(samples, -1.0, 1.0) * PCM16_SCALE
    return np.ascontiguousarray(scaled.astype("<i2")).tobytes()


class SoundDeviceSink:
    """
    Blocking PortAudio output for 16-bit interleaved PCM.
    """
    def __init__(
        self,
        samplerate: int,
        channels: int = 2,
        blocksize: int = 1024,
        device: Optional[Union[int, str]] = None,
    ) -> None:
        """
        Open the output device.

        Args:
            samplerate: Sample rate in Hz
            channels: Interleaved channel count
            blocksize: Frames per device buffer
            device: sounddevice device index or name, default output when None

        Raises:
            SinkError: If PortAudio is unavailable or the device cannot be opened
        """
        self.samplerate = samplerate
        self.channels = channels
        self.blocksize = blocksize
        self.device = device
        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            raise SinkError(f"Error initializing audio player: {e}") from e
        try:
            self._stream = sd.RawOutputStream(
                samplerate=samplerate,
                blocksize=blocksize,
                device=device,
                channels=channels,
                dtype="int16",
            )
        except (OSError, ValueError, sd.PortAudioError) as e:
            raise SinkError(f"Error initializing audio player: {e}") from e
        logging.info(
            f"Output opened: {samplerate} Hz, {channels} channel(s), "
            f"{BIT_DEPTH}-bit, blocksize {blocksize}"
        )

    def write(self, data: bytes) -> None:
        underflowed = self._stream.write(data)
        if underflowed:
            logging.debug("Output underflow")

    def start(self) -> None:
        self._stream.start()

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.stop()
            self._stream.close()
            logging.info("Output closed")

    def __enter__(self) -> "SoundDeviceSink":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
