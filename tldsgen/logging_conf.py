"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

import structlog

_LOGGING_INITIALISED = False
_APP_LOGGER = "tldsgen"


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return the application logger.

    The console handler is installed once per process; ``log_file`` may be
    given on any call and adds a JSON file handler if none writes there yet.
    """

    global _LOGGING_INITIALISED
    if not _LOGGING_INITIALISED:
        level = "DEBUG" if verbose else "INFO"
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "json": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "json",
                        "stream": "ext://sys.stderr",
                    },
                },
                "loggers": {
                    _APP_LOGGER: {
                        "handlers": ["console"],
                        "level": level,
                        "propagate": False,
                    },
                },
            }
        )

        # Forward to stdlib; JSON rendering happens in the handler formatter
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    if log_file is not None:
        _attach_file_handler(log_file)
    return structlog.get_logger(_APP_LOGGER)


def _attach_file_handler(log_file: Path) -> logging.FileHandler:
    path = str(log_file.resolve())
    py_logger = logging.getLogger(_APP_LOGGER)
    for handler in py_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
            return handler
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, encoding="utf-8")
    # Reuse the console JSON formatter
    if py_logger.handlers:
        file_handler.setFormatter(py_logger.handlers[0].formatter)
    file_handler.setLevel(logging.DEBUG)
    py_logger.addHandler(file_handler)
    return file_handler


def source_logger(source_name: str) -> structlog.BoundLogger:
    """Return a logger bound to a specific source."""

    return structlog.get_logger(f"tldsgen.source.{source_name}").bind(source=source_name)


__all__ = ["configure_logging", "source_logger"]
