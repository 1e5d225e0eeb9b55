#!/usr/bin/env python
import logging
from pathlib import Path
from typing import List, Optional

from seamless_looper.decoder import SUPPORTED_EXTENSIONS


class FS:
    """
    Manages file system operations and directory structure for the application.
    """
    def __init__(self, root: Optional[Path] = None) -> None:
        self.root: Path = Path(root) if root is not None else self.get_project_root()
        self.data_folder: Path = self.root / "data"
        self.logs_folder: Path = self.data_folder / "logs"
        self.sound_folder: Path = self.data_folder / "sound"
        self.sound_input_folder: Path = self.sound_folder / "input"
        self.create_directories()

    def get_project_root(self) -> Path:
        """
        Determines the project root directory.

        Returns:
            The current working directory, where data/ is kept
        """
        return Path.cwd()

    def create_directories(self) -> None:
        """
        Creates all necessary directories for the application if they don't exist.
        """
        required_folders = [
            self.data_folder,
            self.logs_folder,
            self.sound_folder,
            self.sound_input_folder,
        ]

        for folder in required_folders:
            folder.mkdir(parents=True, exist_ok=True)
            logging.info(f"Ensured directory exists: {folder}")

    def get_sound_input_files(self) -> List[Path]:
        """
        Lists every decodable audio file in the input folder.

        Returns:
            Sorted list of WAV, FLAC and MP3 paths
        """
        return sorted(
            path for path in self.sound_input_folder.iterdir()
            if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
        )
