# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from lifeplan.logging_setup import LOG_FILE_NAME, _PlannerConsoleFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_levels() -> None:
    f = _PlannerConsoleFilter()

    assert f.filter(_record("lifeplan.tasks.task_store", logging.DEBUG)) is True
    assert f.filter(_record("lifeplan.storage.kv_store", logging.INFO)) is False
    assert f.filter(_record("lifeplan.storage.kv_store", logging.WARNING)) is True
    assert f.filter(_record("py.warnings", logging.WARNING)) is False
    assert f.filter(_record("sqlite", logging.ERROR)) is True


def test_setup_logging_is_repeatable(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        setup_logging(log_dir=tmp_path)
        log_file = setup_logging(log_dir=tmp_path)

        assert log_file == tmp_path / LOG_FILE_NAME
        assert len(root.handlers) == 2
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved:
            root.addHandler(h)
        logging.captureWarnings(False)
