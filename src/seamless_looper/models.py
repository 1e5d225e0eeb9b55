#!/usr/bin/env python
from dataclasses import dataclass


@dataclass(frozen=True)
class AudioFormat:
    """
    Format metadata reported by a decoder.
    """
    samplerate: int
    channels: int
    frames: int

    @property
    def duration_seconds(self) -> float:
        """Length of the stream in seconds."""
        if self.samplerate <= 0:
            return 0.0
        return self.frames / self.samplerate


@dataclass(frozen=True)
class LoopSegment:
    """
    Half-open range [start, end) of absolute sample indices to replay.
    """
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Loop start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"Loop end ({self.end}) precedes start ({self.start})")

    @property
    def length(self) -> int:
        """
        Calculate segment length in samples.
        """
        return self.end - self.start

    @property
    def is_degenerate(self) -> bool:
        return self.start == self.end
