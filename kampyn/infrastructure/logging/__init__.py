"""
Logging Infrastructure

Structured logging setup and performance timing helpers.
"""

from .logging_config import (
    ClientJsonFormatter,
    LoggingConfigOptions,
    PerformanceLogger,
    ProductionLogger,
    configure_structlog,
    get_structured_logger,
)

__all__ = [
    "ClientJsonFormatter",
    "LoggingConfigOptions",
    "PerformanceLogger",
    "ProductionLogger",
    "configure_structlog",
    "get_structured_logger",
]
