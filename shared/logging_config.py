"""
logging_config.py - Centralized JSON Logging Configuration

PURPOSE:
    Provides structured JSON logging for the product service with timezone-aware
    timestamps, request correlation and service-name injection.

JSON LOG FIELDS:
    - timestamp: ISO 8601 format in the configured timezone (UTC by default)
    - level: Log level (INFO, ERROR, WARNING, DEBUG, CRITICAL)
    - logger: Module name where the log originated (e.g., "repository", "middleware")
    - message: The actual log message
    - service_name: Name of the service (injected automatically)
    - correlation_id: Optional request id (X-Request-ID) set by the request logging middleware
    - exception: Full stack trace (only when exc_info is attached)

USAGE:
    from logging_config import setup_logging
    setup_logging("product-service", level="INFO")

    logger = logging.getLogger(__name__)
    logger.info("Created product 12: Mouse")
    logger.info("GET /api/products 200", extra={"correlation_id": request_id})

EXAMPLE JSON OUTPUT:
    {
        "timestamp": "2026-10-19T08:12:01.402113+00:00",
        "level": "INFO",
        "logger": "middleware",
        "message": "GET /api/products 200 3.21ms",
        "service_name": "product-service",
        "correlation_id": "5f0c2a9e8d2b4c61"
    }
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict
from zoneinfo import ZoneInfo


class JsonFormatter(logging.Formatter):
    """Custom formatter that outputs JSON logs with correlation context."""

    def __init__(self, tz: str = "UTC"):
        super().__init__()
        self.tz = ZoneInfo(tz)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, self.tz).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "service_name"):
            log_data["service_name"] = record.service_name
        if hasattr(record, "correlation_id"):
            log_data["correlation_id"] = record.correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ServiceFilter(logging.Filter):
    """Stamp every record with the service name."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


def setup_logging(service_name: str, level: str = "INFO", tz: str = "UTC") -> None:
    """Setup JSON logging for a service.

    Safe to call more than once: the handler installed by a previous call is
    replaced rather than duplicated.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    for existing in list(logger.handlers):
        if getattr(existing, "_json_service_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(tz))
    # Filter on the handler so records from child loggers get the service name too
    handler.addFilter(ServiceFilter(service_name))
    handler._json_service_handler = True
    logger.addHandler(handler)
