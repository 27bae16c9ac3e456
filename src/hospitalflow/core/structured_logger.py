"""
Structured logging utilities for HospitalFlow
"""

import json
import logging
import sys
from datetime import datetime
from typing import Optional

LOGGER_NAME = "hospitalflow"


class StructuredLogger:
    """
    Structured logger that outputs JSON logs for easy parsing and querying
    """

    def __init__(self, name: str, level: Optional[int] = None):
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)

    def log(self, level: str, message: str, **kwargs):
        """Log with structured data"""
        log_data = {"message": message, **kwargs}
        self.logger.log(
            getattr(logging, level.upper(), logging.INFO),
            json.dumps(log_data, default=str),
        )

    def info(self, message: str, **kwargs):
        self.log("info", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.log("warning", message, **kwargs)

    def error(self, message: str, **kwargs):
        self.log("error", message, **kwargs)

    def debug(self, message: str, **kwargs):
        self.log("debug", message, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


def configure_logging(logging_settings) -> logging.Logger:
    """Install the configured handler on the ``hospitalflow`` logger.

    Safe to call more than once; existing handlers are replaced.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging_settings.level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    if logging_settings.format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if logging_settings.file_path:
        file_handler = logging.FileHandler(logging_settings.file_path)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = False
    return root


def get_logger(name: str = LOGGER_NAME) -> StructuredLogger:
    """Get or create a structured logger"""
    return StructuredLogger(name)
