"""
Logging configuration for the KAMPYN ordering client

Console output for development, rotating JSON files for analysis, and
structlog bound loggers for structured per-request events.
"""

import logging
import logging.handlers
import os
import sys
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from kampyn.infrastructure.configuration.config import get_config
from kampyn.infrastructure.utilities.constants import FileSettings, LoggingSettings


@dataclass
class LoggingConfigOptions:
    """Dataclass for logging configuration options"""
    log_level: str = "INFO"
    log_dir: str = FileSettings.LOGS_DIRECTORY
    enable_console: bool = True
    enable_file: bool = True


class ProductionLogger:
    """Logging setup shared by the CLI entry point and long-running views"""

    @staticmethod
    def options_from_config() -> LoggingConfigOptions:
        config = get_config()
        return LoggingConfigOptions(
            log_level=config.log_level,
            enable_console=True,
            enable_file=config.environment != "test",
        )

    @staticmethod
    def setup_logging(options: Optional[LoggingConfigOptions] = None):
        """
        Setup logging

        Features:
        - Console output
        - Structured JSON logging to a rotating file
        - Error-only log file
        - structlog over the stdlib handlers
        """
        options = options or ProductionLogger.options_from_config()
        level = getattr(logging, options.log_level.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Clear existing handlers
        root_logger.handlers.clear()

        if options.enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            console_handler.setFormatter(console_formatter)
            root_logger.addHandler(console_handler)

        if options.enable_file:
            logs_dir = Path(options.log_dir)
            logs_dir.mkdir(parents=True, exist_ok=True)

            app_handler = logging.handlers.RotatingFileHandler(
                logs_dir / FileSettings.MAIN_LOG_FILE,
                maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
                backupCount=LoggingSettings.MAIN_LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
            app_handler.setFormatter(ClientJsonFormatter())
            app_handler.setLevel(logging.INFO)
            root_logger.addHandler(app_handler)

            error_handler = logging.handlers.RotatingFileHandler(
                logs_dir / FileSettings.ERROR_LOG_FILE,
                maxBytes=LoggingSettings.MAX_LOG_FILE_SIZE,
                backupCount=LoggingSettings.ERROR_LOG_BACKUP_COUNT,
                encoding="utf-8",
            )
            error_handler.setFormatter(ClientJsonFormatter())
            error_handler.setLevel(logging.ERROR)
            root_logger.addHandler(error_handler)

        configure_structlog()
        ProductionLogger._configure_specific_loggers()

        logging.getLogger(__name__).info(
            "Logging configured - Level: %s, Console: %s, File: %s",
            options.log_level,
            options.enable_console,
            options.enable_file,
        )

    @staticmethod
    def _configure_specific_loggers():
        """Quiet the HTTP stack; request events come from our own client"""
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


class ClientJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with request context fields"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["thread_name"] = threading.current_thread().name
        log_record["process_id"] = os.getpid()

        if hasattr(record, "operation_time"):
            log_record["operation_time_ms"] = record.operation_time

        if hasattr(record, "vendor_id"):
            log_record["vendor_id"] = record.vendor_id


def configure_structlog():
    """Configure structlog for structured logging through the stdlib"""
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
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_structured_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


class PerformanceLogger:
    """Context manager for performance logging"""

    def __init__(self, operation_name: str, logger: Optional[logging.Logger] = None, details: Optional[Dict[str, Any]] = None):
        self.operation_name = operation_name
        self.logger = logger or logging.getLogger(__name__)
        self.details = details or {}
        self.start_time = 0.0
        self.duration_ms = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Starting operation: %s",
            self.operation_name,
            extra={"operation": self.operation_name, **self.details},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is None:
            level = (
                logging.WARNING
                if self.duration_ms > LoggingSettings.SLOW_REQUEST_THRESHOLD_SECONDS * 1000
                else logging.DEBUG
            )
            self.logger.log(
                level,
                "Completed operation: %s (%.1fms)",
                self.operation_name,
                self.duration_ms,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": True,
                    **self.details,
                },
            )
        else:
            self.logger.warning(
                "Failed operation: %s (%.1fms)",
                self.operation_name,
                self.duration_ms,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": False,
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val) if exc_val else None,
                    **self.details,
                },
            )
        return False
