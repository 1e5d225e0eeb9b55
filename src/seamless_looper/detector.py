#!/usr/bin/env python
import logging
from typing import Optional

import numpy as np

from seamless_looper.config import LooperConfig
from seamless_looper.decoder import SampleStream
from seamless_looper.models import LoopSegment


class LoopDetector:
    """
    Finds a silence-bounded loop segment with an energy-threshold heuristic.

    Every time a silence run longer than the configured duration ends, the
    previous boundary becomes the loop start and the current position the
    loop end. Only the last two boundaries in the file survive; with fewer
    than two the segment stays at (0, 0) or (0, boundary).
    """
    def __init__(self, config: Optional[LooperConfig] = None) -> None:
        self.config = config or LooperConfig()

    def detect(self, stream: SampleStream) -> LoopSegment:
        """
        Scan the whole stream once and return the detected loop segment.

        The stream is left at end-of-stream; seek back before reusing it.
        A read error ends the scan early with the boundaries found so far.

        Args:
            stream: Sample stream positioned at its beginning

        Returns:
            LoopSegment with the last two silence boundaries
        """
        threshold = self.config.threshold
        chunk_size = self.config.chunk_size
        silence_duration = self.config.silence_samples(stream.samplerate)

        start, end = 0, 0
        silence_count = 0
        consumed = 0

        while True:
            try:
                block = stream.read(chunk_size)
            except (RuntimeError, OSError) as e:
                logging.warning(f"Read error at sample {consumed}, ending scan early: {e}")
                break
            n = len(block)
            if n == 0:
                break

            amp = (block[:, 0] + block[:, 1]) / 2
            # NaN compares false, so it counts as sound
            loud = np.flatnonzero(~(amp < threshold))
            if len(loud):
                previous = np.concatenate(([-1 - silence_count], loud[:-1]))
                runs = loud - previous - 1
                for j in loud[runs > silence_duration]:
                    start, end = end, consumed + int(j)
                    logging.debug(f"Silence boundary at sample {end}")
                silence_count = n - 1 - int(loud[-1])
            else:
                silence_count += n
            consumed += n

        segment = LoopSegment(start=start, end=end)
        logging.info(f"Scanned {consumed} samples, loop segment {segment.start}-{segment.end}")
        return segment


def detect_loop_segment(stream: SampleStream, config: Optional[LooperConfig] = None) -> LoopSegment:
    """
    Convenience wrapper around LoopDetector.detect.
    """
    return LoopDetector(config).detect(stream)
