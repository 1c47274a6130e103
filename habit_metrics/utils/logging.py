import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import structlog

METRICS_LOGGER_NAME = "habit_metrics.metrics"


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = True,
    logs_dir: Optional[Path] = None,
) -> None:
    """Set up logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files in addition to console
        logs_dir: Directory for log files (defaults to ./logs)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.set_exc_info,
            (
                structlog.processors.JSONRenderer()
                if log_to_file
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Console handler; stderr keeps CLI output on stdout clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if not log_to_file:
        return

    logs_dir = logs_dir or Path("logs")
    logs_dir.mkdir(parents=True, exist_ok=True)

    app_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "app.log", maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
    )
    app_handler.setLevel(logging.INFO)
    app_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
    )
    root_logger.addHandler(app_handler)

    # Error-only log file
    error_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "errors.log", maxBytes=5 * 1024 * 1024, backupCount=10  # 5MB
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
    )
    root_logger.addHandler(error_handler)


def get_metrics_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """Structured logger for metrics computations."""
    return structlog.get_logger(name or METRICS_LOGGER_NAME)


class MetricsLogContext:
    """Context manager logging start, duration and failure of a computation.

    Example:
        with MetricsLogContext("completion_series", range="week", end="2026-10-18"):
            bars = completion_series(...)
    """

    def __init__(self, operation: str, **context: Any):
        self.operation = operation
        self.context: Dict[str, Any] = context
        self.logger = get_metrics_logger()
        self.start_time: Optional[datetime] = None

    def __enter__(self) -> "MetricsLogContext":
        self.start_time = datetime.now()
        self.logger.debug(
            f"Metrics step: {self.operation} - START", step=self.operation, **self.context
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed = (datetime.now() - self.start_time).total_seconds()
        if exc_type is not None:
            self.logger.error(
                "Metrics computation failed",
                operation=self.operation,
                error_type=exc_type.__name__,
                error_message=str(exc_val),
                processing_time_seconds=elapsed,
                exc_info=(exc_type, exc_val, exc_tb),
                **self.context,
            )
            return
        self.logger.info(
            "Metrics computation completed",
            operation=self.operation,
            processing_time_seconds=elapsed,
            **self.context,
        )
