#!/usr/bin/env python
"""
Seamless Looper - Main Entry Point

Finds a silence-bounded loop segment in an audio file and plays it
over and over without gaps until the process is interrupted.
"""
import logging
import sys
import traceback
from typing import Optional, Sequence

from seamless_looper.app import SeamlessLoopApp
from seamless_looper.fs import FS
from seamless_looper.logging_manager import LoggingManager


def print_message(message: str, message_type: str) -> None:
    """
    Prints a message with a specific type indicator.

    :param message: The message to print.
    :param message_type: The type of message ('positive', 'negative', 'info').
    """
    color_map = {
        'positive': '\033[92m*',  # Green
        'negative': '\033[91m*',  # Red
        'info': '\033[94m*'       # Blue
    }
    prefix = f"\033[95m[ {color_map.get(message_type, color_map['info'])}"
    print(f"{prefix} {message}\033[0m")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the application.

    Sets up logging, runs the looper and returns its exit status.
    """
    fs = FS()

    log_file = fs.logs_folder / "app.log"
    logging_manager = LoggingManager(log_file)
    logging_manager.setup()

    try:
        app = SeamlessLoopApp(fs, argv)
        return app.run()
    except Exception as e:
        logging.error(f"Unhandled exception: {e}")
        logging.error(traceback.format_exc())
        print_message(f"Error: {e}", "negative")
        return 1
    finally:
        logging_manager.shutdown()


if __name__ == "__main__":
    sys.exit(main())
