"""Logging setup for the command line.

The menu owns the terminal in raw mode, so records go to a file under the
user log directory instead of stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "lambdactl"
LOG_FILENAME = "lambdactl.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"


def default_log_path() -> Path:
    return Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def setup_logging(verbose: bool = False, path: Path | None = None) -> logging.Logger:
    """Attach a single file handler to the package logger.

    Calling it again replaces the previous handler. If the log directory
    cannot be created, records are discarded.
    """
    logger = logging.getLogger(APP_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_path = path if path is not None else default_log_path()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False
    return logger


__all__ = ["LOG_FORMAT", "default_log_path", "setup_logging"]
