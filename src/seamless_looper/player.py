#!/usr/bin/env python
import logging
import threading
from typing import Optional

from seamless_looper.config import LooperConfig
from seamless_looper.decoder import SampleStream
from seamless_looper.exceptions import DegenerateSegmentError
from seamless_looper.models import LoopSegment
from seamless_looper.sink import Sink, pack_pcm16


class SeamlessPlayer:
    """
    Replays a loop segment from a seekable stream into a blocking sink.

    play_forever has no natural exit: it only returns when the optional
    stop_event is set or max_passes is reached. Without either, the caller
    ends it by terminating the process.
    """
    def __init__(self, stream: SampleStream, sink: Sink, config: Optional[LooperConfig] = None) -> None:
        self.stream = stream
        self.sink = sink
        self.config = config or LooperConfig()

    def play_segment(self, segment_length: int, stop_event: Optional[threading.Event] = None) -> int:
        """
        Stream up to segment_length samples from the current cursor to the sink.

        Args:
            segment_length: Number of samples to deliver
            stop_event: Checked before every chunk

        Returns:
            Number of samples actually written
        """
        chunk_size = self.config.chunk_size
        samples_played = 0

        while samples_played < segment_length:
            if stop_event is not None and stop_event.is_set():
                break
            try:
                block = self.stream.read(min(chunk_size, segment_length - samples_played))
            except (RuntimeError, OSError) as e:
                logging.warning(f"Read error after {samples_played} samples, restarting loop: {e}")
                break
            n = len(block)
            if n == 0:
                break
            self.sink.write(pack_pcm16(block))
            samples_played += n

        return samples_played

    def play_forever(
        self,
        segment: LoopSegment,
        stop_event: Optional[threading.Event] = None,
        max_passes: Optional[int] = None,
    ) -> int:
        """
        Seek to the segment start and play it, over and over.

        Args:
            segment: Loop segment to replay
            stop_event: Optional cancellation signal
            max_passes: Optional cap on the number of passes

        Returns:
            Number of passes completed, once stopped

        Raises:
            DegenerateSegmentError: If the segment has zero length
        """
        if segment.is_degenerate:
            raise DegenerateSegmentError(
                f"Loop segment {segment.start}-{segment.end} is empty, refusing to spin"
            )

        passes = 0
        logging.info(f"Looping samples {segment.start}-{segment.end} ({segment.length} samples)")
        while stop_event is None or not stop_event.is_set():
            if max_passes is not None and passes >= max_passes:
                break
            try:
                self.stream.seek(segment.start)
            except (RuntimeError, OSError, ValueError) as e:
                logging.warning(f"Seek to {segment.start} failed, playing on: {e}")
            played = self.play_segment(segment.length, stop_event)
            if played < segment.length:
                logging.debug(f"Pass {passes} ended early after {played} samples")
            passes += 1

        logging.info(f"Playback stopped after {passes} passes")
        return passes


def play_forever(
    stream: SampleStream,
    segment: LoopSegment,
    sink: Sink,
    config: Optional[LooperConfig] = None,
    stop_event: Optional[threading.Event] = None,
    max_passes: Optional[int] = None,
) -> int:
    """
    Convenience wrapper around SeamlessPlayer.play_forever.
    """
    return SeamlessPlayer(stream, sink, config).play_forever(segment, stop_event, max_passes)
