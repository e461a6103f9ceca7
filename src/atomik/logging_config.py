"""
Logging Configuration
=====================
Console (and optional file) logging for the ``atomik`` package.

``app.main()`` calls :func:`setup_logging` once, with the level and log file
taken from ``ATOMIK_LOG_LEVEL`` and ``ATOMIK_LOG_FILE``.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

# requests logs every connection through urllib3 at DEBUG
NOISY_LOGGERS = ("urllib3",)


def setup_logging(level: int = logging.INFO, log_file: str | Path | None = None) -> logging.Logger:
    """
    Configures the 'atomik' logger.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path of a log file; missing parent folders are created.
    """
    logger = logging.getLogger("atomik")
    logger.setLevel(level)
    logger.propagate = False

    # Calling setup twice (tests, re-launch) must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)

    logger.info("Logging initialized at %s%s", logging.getLevelName(level), f" (file: {log_file})" if log_file else "")
    return logger
