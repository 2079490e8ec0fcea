from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Route the package loggers to ``log_file``.

    The editor owns the terminal, so nothing is written to stderr. Without a
    log file the package loggers are silenced.
    """
    package_logger = logging.getLogger("tabby_inline")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if log_file is None:
        package_logger.addHandler(logging.NullHandler())
        package_logger.propagate = False
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False
