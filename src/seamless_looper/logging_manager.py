#!/usr/bin/env python
import gzip
import shutil
import logging
import logging.handlers
from typing import Optional
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


class CompressingRotatingFileHandler(logging.handlers.RotatingFileHandler):
    """
    A rotating file handler that gzips rolled-over logs.

    app.log rolls to app.log.1.gz, older archives shift up by one, and at
    most backupCount archives are kept.
    """
    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        base = Path(self.baseFilename)
        if self.backupCount > 0:
            for i in range(self.backupCount - 1, 0, -1):
                src = base.with_name(f"{base.name}.{i}.gz")
                if src.exists():
                    src.replace(base.with_name(f"{base.name}.{i + 1}.gz"))
            if base.exists():
                rolled = base.with_name(f"{base.name}.1")
                base.replace(rolled)
                self.compress_log(rolled)

        self.mode = "w"
        self.stream = self._open()
        self.cleanup_old_logs()

    def compress_log(self, file_path: Path) -> Path:
        compressed_path = file_path.with_name(file_path.name + ".gz")
        with open(file_path, "rb") as f_in, gzip.open(compressed_path, "wb") as f_out:
            shutil.copyfileobj(f_in, f_out)
        file_path.unlink()
        return compressed_path

    def cleanup_old_logs(self) -> None:
        base = Path(self.baseFilename)
        archives = sorted(base.parent.glob(f"{base.name}.*.gz"), key=lambda p: p.stat().st_mtime)
        while len(archives) > self.backupCount:
            archives.pop(0).unlink()


class LoggingManager:
    """
    Manages application logging configuration.
    """
    def __init__(self, log_file: Path) -> None:
        self.log_file = log_file
        self.handler: Optional[CompressingRotatingFileHandler] = None

    def setup(self, level: int = logging.INFO, max_bytes: int = 10 * 1024 * 1024, backup_count: int = 10) -> None:
        """
        Route the root logger into a rotating, compressing log file.

        Args:
            level: Logging level
            max_bytes: Maximum log file size before rotation
            backup_count: Number of compressed archives to keep
        """
        self.handler = CompressingRotatingFileHandler(
            filename=str(self.log_file),
            mode="a",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8"
        )
        self.handler.setFormatter(logging.Formatter(LOG_FORMAT))

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        root_logger.addHandler(self.handler)
        logging.info(f"Logging to {self.log_file} at level {logging.getLevelName(level)}")

    def shutdown(self) -> None:
        if self.handler:
            logging.info("Logging system shutdown")
            logging.getLogger().removeHandler(self.handler)
            self.handler.close()
            self.handler = None
