#!/usr/bin/env python


class LooperError(Exception):
    """Base class for all seamless looper errors."""


class AudioLoadError(LooperError):
    """Raised when an audio file cannot be opened or decoded."""


class UnsupportedFormatError(AudioLoadError):
    """Raised when the file extension has no decoder."""


class SinkError(LooperError):
    """Raised when the audio output device cannot be opened."""


class DegenerateSegmentError(LooperError):
    """Raised when a zero-length loop segment is handed to the player."""


class ConfigError(LooperError, ValueError):
    """Raised when a configuration value is out of range."""
