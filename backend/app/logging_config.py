from __future__ import annotations

import logging
import sys


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ColoredFormatter(logging.Formatter):
    _COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    _RESET = "\033[0m"
    _BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        color = self._COLORS.get(record.levelname, "")
        if not color:
            return super().format(record)
        # Format a copy so other handlers still see the plain level name.
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{self._BOLD}{record.levelname}{self._RESET}"
        return super().format(record)


def setup_logging(level: int | str = logging.INFO) -> None:
    """Send all service logs to stdout, coloured when attached to a terminal."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    formatter = (
        _ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        if sys.stdout.isatty()
        else logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # requests logs every connection at DEBUG through urllib3
    logging.getLogger("urllib3").setLevel(logging.WARNING)
