# src/todolist/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "todolist"


class _ConsoleNoiseFilter(logging.Filter):
    """
    The console shares the terminal with the `todo>` prompt, so only our own
    records go through at the handler level. Everything else (sqlite3, dotenv,
    captured py.warnings) needs at least `foreign_level`.
    """

    def __init__(self, foreign_level: int = logging.ERROR) -> None:
        super().__init__()
        self.foreign_level = foreign_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == APP_LOGGER or record.name.startswith(APP_LOGGER + "."):
            return True
        return record.levelno >= self.foreign_level


def setup_logging(
    *,
    log_dir: str | Path,
    app_name: str = APP_LOGGER,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    foreign_console_level: int = logging.ERROR,
) -> Path:
    """
    Console handler on stderr (filtered) plus a full log in `<log_dir>/<app_name>.log`.

    Replaces any handlers already on the root logger. Returns the log file path.
    Raises OSError if log_dir cannot be created; main() falls back to console-only.
    """
    log_dir = Path(log_dir).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name or APP_LOGGER}.log"

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter(foreign_console_level))
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
