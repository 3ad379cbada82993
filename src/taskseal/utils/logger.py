"""Application-wide logger writing to platformdirs user_log_dir.

Everything TaskSeal logs goes through one rotating file under the user's log
directory, tagged with the child logger that produced it:

- ``taskseal.crypto``: WARNING when a field could not be encrypted and was
  stored as plaintext, and when a stored field could not be decrypted.
- ``taskseal.adapter``: WARNING when a shared task has no family group key
  and is stored unencrypted.
- ``taskseal.migration``: INFO for the end-of-run summary and cancellations,
  ERROR for each task that could not be migrated, WARNING when the pending
  check cannot list tasks.

Messages carry task ids and exception text only. Key identifiers, derived
keys and task content are never written to the log.

The logger does not propagate, so nothing reaches the console of a CLI run;
use ``set_level`` (driven by the ``logging.level`` config key) to quieten it.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

_APP_NAME = "taskseal"
_LOG_FILE = "taskseal.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Return the singleton application logger, initialising it on first call."""
    global _logger
    if _logger is not None:
        return _logger

    log_dir = Path(user_log_dir(_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_dir / _LOG_FILE,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger = logging.getLogger(_APP_NAME)
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    return _logger


def set_level(level: str) -> None:
    """Apply a level name such as ``"INFO"`` to the application logger."""
    get_logger().setLevel(getattr(logging, level.upper(), logging.INFO))
