"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from taskseal.adapters.record_adapter import RecordAdapter
from taskseal.adapters.sqlite import SqliteTaskRepository
from taskseal.models.crypto import clear_key_cache


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


def _drop_handlers():
    logger = logging.getLogger("taskseal")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Send log, config and data files to *tmp_path* for every test."""
    import taskseal.config as config_mod
    import taskseal.utils.logger as logger_mod

    logger_mod._logger = None
    _drop_handlers()
    config_mod._config_manager = None

    tmpdir = str(tmp_path)
    with patch("taskseal.utils.logger.user_log_dir", return_value=tmpdir):
        with patch("taskseal.config.user_config_dir", return_value=tmpdir):
            with patch("taskseal.config.user_data_dir", return_value=tmpdir):
                yield tmp_path

    logger_mod._logger = None
    _drop_handlers()
    config_mod._config_manager = None
    clear_key_cache()


# ---------------------------------------------------------------------------
# Store and adapter
# ---------------------------------------------------------------------------


@pytest.fixture()
def repo():
    """SqliteTaskRepository on a throwaway in-memory database."""
    repository = SqliteTaskRepository(":memory:")
    yield repository
    repository.close()


@pytest.fixture()
def adapter():
    return RecordAdapter()


@pytest.fixture()
def captured_logs():
    """Collect records emitted on the (non-propagating) taskseal logger."""
    from taskseal.utils.logger import get_logger

    records: list[logging.LogRecord] = []

    class _Collector(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = _Collector(level=logging.DEBUG)
    logger = get_logger()
    logger.addHandler(handler)
    yield records
    logger.removeHandler(handler)
