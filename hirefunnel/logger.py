"""
Structured logging for the candidate funnel.

Console and file outputs plus simple counters for monitoring submissions,
scoring and admin activity.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks funnel metrics (records created/updated, assessments scored, failures).
    """

    def __init__(
        self,
        name: str = "hirefunnel",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "records_created": 0,
            "records_updated": 0,
            "records_deleted": 0,
            "assessments_scored": 0,
            "admin_updates": 0,
            "persistence_failures": 0,
            "errors_by_type": {},
            "fit_distribution": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"hirefunnel_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_created(self):
        self.metrics["records_created"] += 1

    def record_updated(self):
        self.metrics["records_updated"] += 1

    def record_deleted(self):
        self.metrics["records_deleted"] += 1

    def record_admin_update(self):
        self.metrics["admin_updates"] += 1

    def record_assessment_scored(self, fit_category: str):
        """Count a scored assessment under its fit category."""
        self.metrics["assessments_scored"] += 1
        dist = self.metrics["fit_distribution"]
        dist[fit_category] = dist.get(fit_category, 0) + 1

    def record_failure(self, error_type: str, persistence: bool = False):
        """Record a failed operation by error class name."""
        if persistence:
            self.metrics["persistence_failures"] += 1
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = dict(self.metrics)
        scored = metrics_copy["assessments_scored"]
        if scored > 0:
            metrics_copy["fit_share"] = {
                category: round(count / scored, 3)
                for category, count in metrics_copy["fit_distribution"].items()
            }
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Funnel Session Metrics ===")
        self.info(
            f"Records: {metrics['records_created']} created, "
            f"{metrics['records_updated']} updated, {metrics['records_deleted']} deleted"
        )
        self.info(f"Admin updates: {metrics['admin_updates']}")
        self.info(f"Assessments scored: {metrics['assessments_scored']}")

        if metrics["fit_distribution"]:
            self.info("Fit distribution:")
            for category, count in metrics["fit_distribution"].items():
                share = metrics["fit_share"][category] * 100
                self.info(f"  {category}: {count} ({share:.1f}%)")

        if metrics["errors_by_type"]:
            self.info(f"Persistence failures: {metrics['persistence_failures']}")
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "hirefunnel",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
