#!/usr/bin/env python
import argparse
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence, Union

import librosa
from rich.console import Console
from rich.table import Table

from seamless_looper.config import DEGENERATE_POLICIES, LooperConfig
from seamless_looper.decoder import SUPPORTED_EXTENSIONS, open_audio_file
from seamless_looper.detector import LoopDetector
from seamless_looper.exceptions import DegenerateSegmentError, LooperError, UnsupportedFormatError
from seamless_looper.fs import FS
from seamless_looper.models import AudioFormat, LoopSegment
from seamless_looper.player import SeamlessPlayer
from seamless_looper.sink import SoundDeviceSink


class SeamlessLoopApp:
    """
    Orchestrates decode, detect and play-forever for one audio file.
    """
    def __init__(self, fs: FS, argv: Optional[Sequence[str]] = None, console: Optional[Console] = None) -> None:
        # Register signal handler for clean exit before anything else
        signal.signal(signal.SIGINT, self._handle_exit)

        self.fs = fs
        self.args = self._parse_arguments(argv)
        self.console = console or Console()
        self.stop_event = threading.Event()
        self.playing = False
        logging.getLogger().setLevel(self.args.log_level)

        logging.info(f"Project root determined as: {self.fs.root}")

        self.audio_file: Optional[str] = self.args.audio
        self.detect_only: bool = self.args.detect_only

    def _handle_exit(self, signum, frame) -> None:
        """
        Handle clean exit on keyboard interrupt.

        During playback the stop event ends the play loop and run() returns
        normally, closing the output and the stream. Anywhere else the
        process exits at once.
        """
        print("\nExiting cleanly. Goodbye!")
        self.stop_event.set()
        if not self.playing:
            sys.exit(0)

    def _parse_arguments(self, argv: Optional[Sequence[str]]) -> argparse.Namespace:
        """
        Parse command line arguments.

        Args:
            argv: Argument list, sys.argv[1:] when None

        Returns:
            Parsed arguments
        """
        defaults = LooperConfig()
        parser = argparse.ArgumentParser(
            prog="seamless-looper",
            description="Find a silence-bounded loop in an audio file and play it seamlessly.",
            epilog=f"Example usage: seamless-looper --audio {self.fs.sound_input_folder / 'theme.wav'}"
        )
        parser.add_argument(
            "--audio",
            type=str,
            default=None,
            help="Path to the input audio file (WAV, FLAC or MP3). Prompts when omitted."
        )
        parser.add_argument(
            "--threshold",
            type=float,
            default=defaults.threshold,
            help=f"Average channel amplitude below which a sample is silent (default: {defaults.threshold})"
        )
        parser.add_argument(
            "--silence-duration",
            type=float,
            default=defaults.silence_duration_sec,
            help=f"Minimum silence run in seconds that marks a boundary (default: {defaults.silence_duration_sec})"
        )
        parser.add_argument(
            "--chunk-size",
            type=int,
            default=defaults.chunk_size,
            help=f"Samples per read (default: {defaults.chunk_size})"
        )
        parser.add_argument(
            "--degenerate-policy",
            choices=DEGENERATE_POLICIES,
            default=defaults.degenerate_policy,
            help="What to do when no loop segment is found: loop the full file or fail (default: full)"
        )
        parser.add_argument(
            "--device",
            type=str,
            default=None,
            help="Output device index or name (default: system default)"
        )
        parser.add_argument(
            "--detect-only",
            action="store_true",
            help="Print the detected loop segment and exit without playing"
        )
        parser.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            default="INFO",
            help="Log file verbosity (default: INFO)"
        )
        return parser.parse_args(argv)

    def build_config(self) -> LooperConfig:
        return LooperConfig(
            threshold=self.args.threshold,
            silence_duration_sec=self.args.silence_duration,
            chunk_size=self.args.chunk_size,
            degenerate_policy=self.args.degenerate_policy,
        )

    @property
    def device(self) -> Optional[Union[int, str]]:
        if self.args.device is None:
            return None
        return int(self.args.device) if self.args.device.isdigit() else self.args.device

    def _interactive_mode(self) -> Optional[str]:
        """
        Ask the user which file to loop.

        Shows the input folder as a table when it holds audio files,
        otherwise asks for a path.

        Returns:
            Chosen path, or None if nothing was entered
        """
        files: List[Path] = self.fs.get_sound_input_files()
        if not files:
            path = self.console.input("[bold green]Enter the audio file path: [/bold green]").strip()
            return path or None

        table = Table(title="Available Audio Files")
        table.add_column("Index", justify="right", style="cyan", no_wrap=True)
        table.add_column("File Name", style="magenta")
        for idx, file in enumerate(files, start=1):
            table.add_row(str(idx), file.name)
        self.console.print(table)

        while True:
            try:
                choice = int(self.console.input("[bold green]Select a file by index: [/bold green]"))
                if 1 <= choice <= len(files):
                    selected_file = files[choice - 1]
                    break
                self.console.print("[bold red]Invalid choice. Try again.[/bold red]")
            except ValueError:
                self.console.print("[bold red]Please enter a valid number.[/bold red]")

        self.console.print(f"[bold blue]You selected:[/bold blue] {selected_file}")
        return str(selected_file)

    def apply_degenerate_policy(self, segment: LoopSegment, frames: int, config: LooperConfig) -> LoopSegment:
        """
        Replace an empty segment according to the configured policy.

        Args:
            segment: Segment returned by the detector
            frames: Total length of the stream
            config: Active configuration

        Returns:
            The segment to play

        Raises:
            DegenerateSegmentError: Under the "error" policy, or when the
                stream itself is empty
        """
        if not segment.is_degenerate:
            return segment
        if config.degenerate_policy == "error":
            raise DegenerateSegmentError(
                f"No loop segment found (start == end == {segment.start})"
            )
        if frames <= 0:
            raise DegenerateSegmentError("No loop segment found and the stream is empty")
        logging.warning(
            f"No loop segment found (start == end == {segment.start}), looping the whole stream"
        )
        self.console.print("[bold yellow]No loop segment found, looping the whole file.[/bold yellow]")
        return LoopSegment(start=0, end=frames)

    def _report(self, segment: LoopSegment, audio_format: AudioFormat) -> None:
        start_sec, end_sec = librosa.samples_to_time([segment.start, segment.end], sr=audio_format.samplerate)
        self.console.print(f"[*] Duration is {audio_format.duration_seconds:.2f} seconds.")
        self.console.print(
            f"[*] Detected loop segment from {segment.start} to {segment.end} "
            f"({start_sec:.2f}s - {end_sec:.2f}s)"
        )

    def run(self) -> int:
        """
        Detect the loop segment and play it until interrupted.

        Returns:
            Process exit status
        """
        if not self.audio_file:
            self.audio_file = self._interactive_mode()
            if not self.audio_file:
                self.console.print("[bold red]No audio file given.[/bold red]")
                return 1

        try:
            config = self.build_config()
            with open_audio_file(self.audio_file) as stream:
                segment = LoopDetector(config).detect(stream)
                self._report(segment, stream.format)
                segment = self.apply_degenerate_policy(segment, stream.frames, config)

                if self.detect_only:
                    return 0

                with SoundDeviceSink(
                    samplerate=stream.samplerate,
                    channels=2,
                    blocksize=config.sink_blocksize,
                    device=self.device,
                ) as sink:
                    player = SeamlessPlayer(stream, sink, config)
                    self.playing = True
                    try:
                        player.play_forever(segment, stop_event=self.stop_event)
                    finally:
                        self.playing = False
        except LooperError as e:
            logging.error(str(e))
            self.console.print(f"[bold red]Error: {e}[/bold red]")
            if isinstance(e, UnsupportedFormatError):
                self.console.print(f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}")
            return 1

        return 0
