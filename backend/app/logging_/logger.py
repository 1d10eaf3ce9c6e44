import inspect
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from loguru import logger
from loguru._logger import Logger

from app.core.config import settings


class InterceptHandler(logging.Handler):
    """Route records from the standard logging module into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def dynamic_formatter(record: Any) -> str:
    base = "[{time:HH:mm:ss}] [{level}] {name}:{function}:{line} - {message}"

    extras = record.get("extra", {})
    if extras:
        base += " ("
        for key, value in extras.items():
            base += f"{key}={value}, "
        base += ")\n"
    else:
        base += "\n"

    if record["exception"]:
        base += "{exception}"

    return base


def dynamic_console_formatter(record: Any) -> str:
    base = "[<green>{time:HH:mm:ss}</green>] <level>[{level}]</level> {name}:{function}:<blue>{line}</blue> - {message}\n"

    if record["exception"]:
        base += "{exception}"

    return base


# (level, file name, retention); None keeps files forever.
FILE_SINKS: list[tuple[str, str, str | None]] = [
    ("ERROR", "error.log", "30 days"),
    ("INFO", "info.log", None),
]
DEBUG_FILE_SINK = ("DEBUG", "debug.log", "7 days")


def setup_logger(name: str, log_dir: str | None = None) -> Logger:
    """
    Send application logs to daily folders under log_dir and to stderr.

    Files land in <log_dir>/<UTC date>/<name>/ and rotate at midnight.
    Records emitted through the standard logging module are routed here too.
    """
    log_dir = log_dir or settings.LOG_DIR
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    log_path = os.path.join(log_dir, today, name)
    os.makedirs(log_path, exist_ok=True)

    sinks = list(FILE_SINKS)
    if settings.DEBUG:
        sinks.insert(0, DEBUG_FILE_SINK)

    logger.remove()

    for level, file_name, retention in sinks:
        logger.add(
            os.path.join(log_path, file_name),
            format=dynamic_formatter,
            level=level,
            rotation="00:00",
            compression="zip",
            retention=retention,
            enqueue=True,
            backtrace=True,
            diagnose=True,
        )

    logger.add(
        sys.stderr,
        format=dynamic_console_formatter,
        level="DEBUG" if settings.DEBUG else "INFO",
        enqueue=True,
        backtrace=True,
        diagnose=True,
        colorize=True,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    return logger  # type: ignore
