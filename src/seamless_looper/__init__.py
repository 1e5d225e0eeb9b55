"""Silence-bounded loop detection and gapless loop playback."""
from seamless_looper.config import LooperConfig
from seamless_looper.decoder import ArraySampleStream, SoundFileStream, open_audio_file
from seamless_looper.detector import LoopDetector, detect_loop_segment
from seamless_looper.models import AudioFormat, LoopSegment
from seamless_looper.player import SeamlessPlayer, play_forever
from seamless_looper.sink import SoundDeviceSink, pack_pcm16

__all__ = [
    "ArraySampleStream",
    "AudioFormat",
    "LoopDetector",
    "LoopSegment",
    "LooperConfig",
    "SeamlessPlayer",
    "SoundDeviceSink",
    "SoundFileStream",
    "detect_loop_segment",
    "open_audio_file",
    "pack_pcm16",
    "play_forever",
]
