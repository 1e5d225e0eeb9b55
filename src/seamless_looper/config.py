#!/usr/bin/env python
from dataclasses import dataclass
from typing import Optional

from seamless_looper.exceptions import ConfigError

DEFAULT_THRESHOLD = 0.001
DEFAULT_SILENCE_DURATION_SEC = 0.1
DEFAULT_CHUNK_SIZE = 1024
DEFAULT_SINK_BLOCKSIZE = 1024

DEGENERATE_POLICIES = ("full", "error")


@dataclass(frozen=True)
class LooperConfig:
    """
    Tunables shared by the loop detector and the seamless player.

    Attributes:
        threshold: Average-of-channels amplitude below which a sample is silent
        silence_duration_sec: Length of a silence run that counts as a boundary
        silence_duration_samples: Absolute run length, overrides silence_duration_sec
        chunk_size: Samples pulled from the stream per read
        sink_blocksize: Frames per output device buffer
        degenerate_policy: "full" loops the whole stream when no segment was
            found, "error" refuses to play
    """
    threshold: float = DEFAULT_THRESHOLD
    silence_duration_sec: float = DEFAULT_SILENCE_DURATION_SEC
    silence_duration_samples: Optional[int] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    sink_blocksize: int = DEFAULT_SINK_BLOCKSIZE
    degenerate_policy: str = "full"

    def __post_init__(self) -> None:
        if self.silence_duration_sec < 0:
            raise ConfigError(f"silence_duration_sec must be >= 0, got {self.silence_duration_sec}")
        if self.silence_duration_samples is not None and self.silence_duration_samples < 0:
            raise ConfigError(f"silence_duration_samples must be >= 0, got {self.silence_duration_samples}")
        if self.chunk_size <= 0:
            raise ConfigError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.sink_blocksize <= 0:
            raise ConfigError(f"sink_blocksize must be positive, got {self.sink_blocksize}")
        if self.degenerate_policy not in DEGENERATE_POLICIES:
            raise ConfigError(
                f"degenerate_policy must be one of {', '.join(DEGENERATE_POLICIES)}, "
                f"got {self.degenerate_policy!r}"
            )

    def silence_samples(self, samplerate: int) -> int:
        """
        Resolve the minimum silence run length in samples.

        Args:
            samplerate: Sample rate of the stream being scanned

        Returns:
            Number of consecutive silent samples a run must exceed
        """
        if self.silence_duration_samples is not None:
            return self.silence_duration_samples
        return int(samplerate * self.silence_duration_sec)
