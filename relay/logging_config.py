import logging
import logging.config
import os
import sys
import time
from typing import Optional

import structlog


def configure_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """
    Configure structured logging for the relay.

    Every structlog event is rendered to a single JSON string. The console
    prefixes it with time, logger and level; the optional log file keeps the
    bare JSON, one event per line, rotated at 10MB.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path (LOG_FILE). If None, logs to stdout only.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "console",
            "stream": sys.stdout
        }
    }

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "jsonl",
            "filename": log_file,
            "encoding": "utf-8",
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "jsonl": {"format": "%(message)s"},
        },
        "handlers": handlers,
        "root": {"level": log_level, "handlers": list(handlers)},
    })

    logger = structlog.get_logger("relay")
    logger.info("Logging configured", level=log_level, file=log_file)

    return logger


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class DeliveryContext:
    """Context manager that logs the outcome and duration of one outbound delivery."""

    def __init__(self, destination: str, **context):
        self.destination = destination
        self.context = context
        self.logger = get_logger("relay.delivery")
        self.start_time = None

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.debug("Delivery started", destination=self.destination, **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.monotonic() - self.start_time

        if exc_type is None:
            self.logger.info(
                "Delivery completed",
                destination=self.destination,
                duration_seconds=round(duration, 3),
                status="success",
                **self.context
            )
        else:
            self.logger.error(
                "Delivery failed",
                destination=self.destination,
                duration_seconds=round(duration, 3),
                status="error",
                error_type=exc_type.__name__,
                error_message=str(exc_val),
                **self.context
            )

        return False  # Don't suppress exceptions
