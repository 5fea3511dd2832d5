# src/lifeplan/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "lifeplan.log"


class _PlannerConsoleFilter(logging.Filter):
    """
    Keep the REPL readable while the planner prints its own replies.

    Planner modules pass through, except storage slot writes (WARNING+ only).
    Anything else, captured warnings included, needs ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("lifeplan.storage."):
            return record.levelno >= logging.WARNING
        if record.name.startswith("lifeplan."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/lifeplan",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route logs to stderr (filtered) and to `<log_dir>/lifeplan.log` (everything).

    Store mutations log at DEBUG, so the file is where the history of edits
    ends up. Returns the log file path. Call once from the entrypoint.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Re-running setup (tests, repeated main()) must not stack handlers.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_PlannerConsoleFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
