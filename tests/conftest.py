import logging
import signal
import threading
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pytest

SOUND = 0.5


class RecordingSink:
    """Collects every buffer written, optionally stopping playback after a few writes."""

    def __init__(self, stop_event: Optional[threading.Event] = None, stop_after: Optional[int] = None) -> None:
        self.writes: List[bytes] = []
        self.stop_event = stop_event
        self.stop_after = stop_after

    def write(self, data: bytes) -> None:
        self.writes.append(bytes(data))
        if self.stop_event is not None and self.stop_after is not None and len(self.writes) >= self.stop_after:
            self.stop_event.set()


def build_signal(pattern: Sequence[Tuple[str, int]]) -> np.ndarray:
    """Stack ("sound", n) / ("silence", n) runs into a (frames, 2) array."""
    runs = []
    for kind, length in pattern:
        value = SOUND if kind == "sound" else 0.0
        runs.append(np.full((length, 2), value))
    return np.concatenate(runs) if runs else np.zeros((0, 2))


@pytest.fixture
def make_signal():
    return build_signal


@pytest.fixture
def recording_sink():
    return RecordingSink


@pytest.fixture
def ramp():
    """Ten distinct stereo samples; left rises, right falls."""
    left = np.linspace(0.0, 0.9, 10)
    return np.column_stack((left, -left))


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def restore_sigint():
    previous = signal.getsignal(signal.SIGINT)
    yield
    signal.signal(signal.SIGINT, previous)
