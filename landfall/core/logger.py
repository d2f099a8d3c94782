"""Logging setup shared by every landfall module."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

from landfall.config import env

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CustomLogger(logging.Logger):
    """Logger with a helper for logging errors together with their traceback."""

    def error_trace(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self.error(msg, *args, **kwargs)


def _file_handler() -> logging.Handler | None:
    if not env.ENABLE_LOGGING:
        return None
    try:
        env.LOG_DIR.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(env.LOG_FILE, maxBytes=10 * 1024 * 1024, backupCount=5)
    except OSError:
        return None


def setup_logger(name: str) -> CustomLogger:
    """Return the logger for `name`, attaching handlers on first use."""
    logging.setLoggerClass(CustomLogger)
    logger = logging.getLogger(name)
    logging.setLoggerClass(logging.Logger)

    if getattr(logger, "_landfall_configured", False):
        return logger  # type: ignore[return-value]

    logger.setLevel(env.LOG_LEVEL)
    formatter = logging.Formatter(_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    file_handler = _file_handler()
    if file_handler is not None:
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger._landfall_configured = True  # type: ignore[attr-defined]
    return logger  # type: ignore[return-value]
