import logging
from logging.handlers import RotatingFileHandler
import io
import sys
from pathlib import Path
from contextvars import ContextVar
from onebot_bridge.config.settings import Config

# Context variables carried across async boundaries into every log record
correlation_id_var: ContextVar[str] = ContextVar(
    "correlation_id", default="NO Correlation ID"
)
adapter_name_var: ContextVar[str] = ContextVar("adapter", default="-")


class RequestContextFilter(logging.Filter):
    """Logging filter to add correlation ID and adapter name to log records."""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get()
        record.adapter = adapter_name_var.get()
        return True


class SafeFormatter(logging.Formatter):
    """Formatter that ensures the request context fields always exist."""

    def format(self, record):
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "NO Correlation ID"
        if not hasattr(record, "adapter"):
            record.adapter = "-"
        return super().format(record)


def setup_logging(level: str = "INFO", log_file: str | None = None):
    root = logging.getLogger()
    root.setLevel(logging.WARNING)  # Set root to WARNING to avoid too much noise
    logger_handler = logging.StreamHandler(
        io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", line_buffering=True)
    )
    formatter = SafeFormatter(Config.LOG_FORMAT)
    logger_handler.setFormatter(formatter)
    logger_handler.addFilter(RequestContextFilter())
    root.addHandler(logger_handler)

    # Set up file logging if log_file provided with rotation
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(RequestContextFilter())
        root.addHandler(file_handler)

    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger("onebot_bridge").setLevel(log_level)
    # uvicorn logs listener start/stop and access lines
    logging.getLogger("uvicorn").setLevel(log_level)

    logging.getLogger(__name__).info(
        f"Logging is set up: level={level}, log_file={log_file}"
    )
    return root
