"""Logging setup for the API process.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger. Modules log through
``logging.getLogger(__name__)`` and never configure handlers themselves.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO"), case insensitive.
        logfile: Optional path of a file to also write log records to.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Already configured (uvicorn, pytest or a previous call).
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
