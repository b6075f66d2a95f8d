import json
import logging
import traceback
from typing import Optional

from app.core.config import settings


class JsonFormatter(logging.Formatter):
    """
    JSON formatter for structured logging in production environments.
    """
    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id

        if hasattr(record, "http") and isinstance(record.http, dict):
            log_data["http"] = record.http

        return json.dumps(log_data, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds the request id to log records.
    """
    def process(self, msg, kwargs):
        if "extra" not in kwargs:
            kwargs["extra"] = {}

        request_id = self.extra.get("request_id") if self.extra else None
        if request_id:
            kwargs["extra"]["request_id"] = request_id

        return msg, kwargs


def get_logger(name: str, request_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with the request id attached.

    Args:
        name: The name of the logger (usually __name__)
        request_id: Optional request ID for request tracking
    """
    return ContextAdapter(logging.getLogger(name), {"request_id": request_id})


def configure_logging() -> logging.Logger:
    """
    Configure root logging for the application.

    Development gets a human-readable format, production gets one JSON
    object per line.
    """
    log_level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    handler = logging.StreamHandler()
    if settings.is_production:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "%Y-%m-%d %H:%M:%S",
        ))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    # Reduce verbosity of external libraries in production
    if settings.is_production:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

    logger = logging.getLogger("app")
    logger.setLevel(log_level)
    return logger
