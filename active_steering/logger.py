"""
Logging for active steering.

Library modules only ask for a named logger:
    from active_steering.logger import get_logger
    log = get_logger("policy")

The entry point (``main_loop``) calls ``setup_logging()`` once. That attaches a
console handler (INFO) and a per-run file handler (DEBUG) to the root logger.
The log directory is, in order: the ``log_dir`` argument,
``ACTIVE_STEERING_LOG_DIR``, or ~/logs_active_steering. Importing the
package never touches the filesystem.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

_FMT = "%(asctime)s [%(levelname)-5s] %(name)-20s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"

# Handlers this module attached to the root logger, plus the file they write.
_handlers: List[logging.Handler] = []
_log_file: Optional[Path] = None


def get_logger(name: str) -> logging.Logger:
    """Return a named child logger (e.g. ``get_logger('controller')``)."""
    return logging.getLogger(name)


def default_log_dir() -> Path:
    return Path(os.environ.get("ACTIVE_STEERING_LOG_DIR", Path.home() / "logs_active_steering"))


def setup_logging(log_dir=None) -> Path:
    """Attach file + console handlers to the root logger; return the log file.

    Calling it again while set up returns the same file and adds nothing.
    """
    global _log_file
    if _log_file is not None:
        return _log_file

    directory = Path(log_dir) if log_dir else default_log_dir()
    directory.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    log_file = directory / f"{timestamp}.log"

    formatter = logging.Formatter(_FMT, datefmt=_DATE_FMT)

    # File handler: everything, DEBUG and above (per-tick values land here)
    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    # Console handler: INFO and above
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in (file_handler, console_handler):
        root.addHandler(handler)
        _handlers.append(handler)
    _log_file = log_file

    get_logger("active_steering").debug("Logging started -> %s", log_file)
    return log_file


def teardown_logging() -> None:
    """Detach and close the handlers added by ``setup_logging``."""
    global _log_file
    root = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        root.removeHandler(handler)
        handler.close()
    _log_file = None
