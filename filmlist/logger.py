"""
Structured logging system for filmlist.

Provides centralized logging to the console (and optionally a daily log
file) plus run metrics for lookups, translations and resolution outcomes.
Metric updates are safe to call from concurrent worker threads.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks metrics for monitoring a resolution run.
    """

    def __init__(
        self,
        name: str = "filmlist",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
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
        self.logger.handlers.clear()  # Remove existing handlers
        self.logger.propagate = False

        self._metrics_lock = threading.Lock()
        self.metrics = {
            "lookup_calls": 0,
            "lookup_failures": 0,
            "translation_attempts": 0,
            "translation_failures": 0,
            "outcomes": {"resolved": 0, "unresolved": 0, "ambiguous": 0},
            "task_errors": 0,
            "errors_by_type": {},
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
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

            log_file = log_dir / f"filmlist_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

        if not self.logger.handlers:
            self.logger.addHandler(logging.NullHandler())

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
            message = f"{message} | Context: {json.dumps(context, ensure_ascii=False, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_lookup(self, failed: bool = False):
        """Count one lookup API call."""
        with self._metrics_lock:
            self.metrics["lookup_calls"] += 1
            if failed:
                self.metrics["lookup_failures"] += 1

    def record_translation_attempt(self, failed: bool = False):
        """Count one translation request attempt."""
        with self._metrics_lock:
            self.metrics["translation_attempts"] += 1
            if failed:
                self.metrics["translation_failures"] += 1

    def record_outcome(self, outcome: str):
        """Count a per-title outcome (resolved, unresolved, ambiguous)."""
        with self._metrics_lock:
            outcomes = self.metrics["outcomes"]
            outcomes[outcome] = outcomes.get(outcome, 0) + 1

    def record_task_error(self, error_type: str):
        """Record an unexpected failure inside a per-title task."""
        with self._metrics_lock:
            self.metrics["task_errors"] += 1
            errors = self.metrics["errors_by_type"]
            errors[error_type] = errors.get(error_type, 0) + 1

    def get_metrics(self) -> dict:
        """Return a snapshot of current metrics."""
        with self._metrics_lock:
            snapshot = json.loads(json.dumps(self.metrics))

        calls = snapshot["lookup_calls"]
        snapshot["lookup_failure_rate"] = (
            round(snapshot["lookup_failures"] / calls, 3) if calls else 0.0
        )
        return snapshot

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()
        outcomes = metrics["outcomes"]

        self.info("=== Resolution Run Metrics ===")
        self.info(f"Lookup calls: {metrics['lookup_calls']} ({metrics['lookup_failures']} failed)")
        self.info(
            f"Translation attempts: {metrics['translation_attempts']} "
            f"({metrics['translation_failures']} failed)"
        )
        self.info(
            f"Resolved: {outcomes['resolved']} | Unresolved: {outcomes['unresolved']} "
            f"| Ambiguous: {outcomes['ambiguous']}"
        )

        if metrics["errors_by_type"]:
            self.info("Task error types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "filmlist",
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
