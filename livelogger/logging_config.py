"""Logging setup: Rich console handler plus a per-run log file.

Modules log through ``logging.getLogger(__name__)``; this module only
installs handlers on the ``livelogger`` logger.  Each run gets its own
file ``<log_dir>/livelogger-YYYY-MM-DD-HH-MM-SS.log``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from livelogger.config import LoggerSettings

FILE_FORMAT = "[%(asctime)s] [%(filename)s:%(lineno)d] [%(levelname)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_MARK = "_livelogger_handler"


def log_file_path(log_dir: Path, now: datetime | None = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y-%m-%d-%H-%M-%S")
    return log_dir / f"livelogger-{stamp}.log"


def configure_logging(
    settings: LoggerSettings,
    console: Console | None = None,
    *,
    log_to_file: bool = True,
) -> Path | None:
    """Install the console and file handlers; returns the log file path.

    Calling it again replaces the handlers installed by a previous call.
    """
    root = logging.getLogger("livelogger")
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    level = logging.getLevelName(settings.effective_log_level)
    if not isinstance(level, int):
        level = logging.INFO
    root.setLevel(level)

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=settings.debug_mode,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    setattr(console_handler, _HANDLER_MARK, True)
    root.addHandler(console_handler)

    log_path: Path | None = None
    if log_to_file:
        log_dir = settings.resolved_log_dir
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            log_path = log_file_path(log_dir)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as exc:
            root.warning("Cannot open log file in %s: %s", log_dir, exc)
            log_path = None
        else:
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATE_FORMAT))
            file_handler.setLevel(level)
            setattr(file_handler, _HANDLER_MARK, True)
            root.addHandler(file_handler)

    return log_path
