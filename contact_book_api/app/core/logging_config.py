"""
Logging configuration for the Contact Book API.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger, once per process.  Application modules
log through ``logging.getLogger(__name__)``: mutations at INFO, scans
at DEBUG, rejected requests at WARNING and store failures at ERROR.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-request access lines duplicate what the service already logs.
NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    noisy_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to INFO.
    logfile : Optional[str]
        Path of a file to log to in addition to the console.
    noisy_loggers : Iterable[str]
        Loggers raised to WARNING unless ``level`` is DEBUG.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured, e.g. by pytest or a repeated create_app call.
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if numeric_level > logging.DEBUG:
        for name in noisy_loggers:
            logging.getLogger(name).setLevel(logging.WARNING)
