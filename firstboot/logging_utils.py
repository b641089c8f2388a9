from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

DEFAULT_LOG_PATH = "/var/log/firstboot.log"
FALLBACK_LOG_NAME = "firstboot.log"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# set on every handler we install so repeat calls can find them
_HANDLER_TAG = "_firstboot_handler"


def _open_log_file(log_path: str) -> logging.FileHandler:
    """Open ``log_path``, or ``./firstboot.log`` if its directory is not writable."""

    try:
        Path(log_path).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path)
    except OSError:
        return logging.FileHandler(str(Path.cwd() / FALLBACK_LOG_NAME))


def _installed(root: logging.Logger) -> List[logging.Handler]:
    return [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]


def configure_logging(
    log_path: Optional[str] = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Attach firstboot's handlers to the root logger, once per process.

    The console handler writes to stderr; stdout is reserved for the
    rendered script. Later calls only adjust the level.

    Returns the log file in use, or None when file logging is off.
    """

    root = logging.getLogger()
    root.setLevel(level)

    existing = _installed(root)
    if existing:
        files = [h for h in existing if isinstance(h, logging.FileHandler)]
        return files[0].baseFilename if files else None

    handlers: List[logging.Handler] = []
    file_handler: Optional[logging.FileHandler] = None
    if log_path:
        file_handler = _open_log_file(log_path)
        handlers.append(file_handler)
    if also_console:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    for h in handlers:
        h.setFormatter(formatter)
        setattr(h, _HANDLER_TAG, True)
        root.addHandler(h)

    if file_handler is None:
        return None
    if file_handler.baseFilename != os.path.abspath(log_path):
        logging.getLogger(__name__).warning("Cannot write %s; logging to %s", log_path, file_handler.baseFilename)
    return file_handler.baseFilename
