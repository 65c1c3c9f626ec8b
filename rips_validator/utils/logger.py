"""
Centralized logging infrastructure for the RIPS invoice validator.

Provides consistent logging across all modules with proper log levels,
formatting, optional file rotation and masking of patient identifiers.
"""

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any
import json

from ..config.constants import PHI_FIELDS
from ..config.settings import get_settings


CONSOLE_FORMAT = '%(levelname)s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'


class RipsLogger:
    """
    Centralized logger with consistent formatting.

    Features:
    - Structured logging with keyword context appended as JSON
    - File rotation to prevent log files from growing too large
    - Masking of patient document numbers and birth dates
    """

    SENSITIVE_FIELDS = set(PHI_FIELDS)

    def __init__(
        self,
        name: str,
        log_dir: str = "logs",
        log_level: str = "INFO",
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        enable_console: bool = True,
        enable_file: bool = False
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name (usually module name)
            log_dir: Directory for log files
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            max_bytes: Max size of log file before rotation
            backup_count: Number of backup files to keep
            enable_console: Whether to log to console
            enable_file: Whether to log to file
        """
        self.name = name
        self.log_dir = Path(log_dir)
        self.max_bytes = max_bytes
        self.backup_count = backup_count

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        self.logger.handlers = []
        self.logger.propagate = False

        if enable_console:
            console = logging.StreamHandler()
            console.setLevel(logging.INFO)
            console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            self.logger.addHandler(console)

        if enable_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            stamp = f"{datetime.now():%Y%m%d}"
            self.logger.addHandler(self._rotating_handler(f"{name}_{stamp}.log", logging.DEBUG))
            self.logger.addHandler(self._rotating_handler(f"{name}_errors_{stamp}.log", logging.ERROR))

    def _rotating_handler(self, filename: str, level: int) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            filename=str(self.log_dir / filename),
            maxBytes=self.max_bytes,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        return handler

    def _mask_sensitive_data(self, data: Any) -> Any:
        """
        Mask sensitive data in log messages.

        Args:
            data: Data to mask (dict, list, or string)

        Returns:
            Data with sensitive fields masked
        """
        if isinstance(data, dict):
            masked = {}
            for key, value in data.items():
                if key.lower() in self.SENSITIVE_FIELDS:
                    if isinstance(value, str) and len(value) > 4:
                        masked[key] = f"{value[:2]}***{value[-2:]}"
                    else:
                        masked[key] = "***MASKED***"
                else:
                    masked[key] = self._mask_sensitive_data(value)
            return masked
        elif isinstance(data, list):
            return [self._mask_sensitive_data(item) for item in data]
        else:
            return data

    def _format(self, message: str, kwargs: Dict[str, Any]) -> str:
        if kwargs:
            masked_kwargs = self._mask_sensitive_data(kwargs)
            message = f"{message} | {json.dumps(masked_kwargs, default=str, ensure_ascii=False)}"
        return message

    def debug(self, message: str, **kwargs):
        """Log debug message."""
        self.logger.debug(self._format(message, kwargs))

    def info(self, message: str, **kwargs):
        """Log info message."""
        self.logger.info(self._format(message, kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message."""
        self.logger.warning(self._format(message, kwargs))

    def error(self, message: str, exception: Optional[Exception] = None, **kwargs):
        """Log error message with optional exception."""
        message = self._format(message, kwargs)
        if exception:
            message = f"{message} | Exception: {str(exception)}"
        self.logger.error(message, exc_info=exception is not None)

    def critical(self, message: str, exception: Optional[Exception] = None, **kwargs):
        """Log critical message with optional exception."""
        message = self._format(message, kwargs)
        if exception:
            message = f"{message} | Exception: {str(exception)}"
        self.logger.critical(message, exc_info=exception is not None)

    # Specialized logging methods

    def log_invoice(
        self,
        invoice_number: str,
        profile: str,
        patient_count: int,
        finding_count: Optional[int] = None,
        duration_seconds: Optional[float] = None
    ):
        """Log the start (no counts yet) or the end of an invoice validation."""
        if finding_count is None:
            self.info(
                "Invoice validation started",
                invoice=invoice_number,
                profile=profile,
                patients=patient_count
            )
        else:
            self.info(
                "Invoice validation finished",
                invoice=invoice_number,
                profile=profile,
                patients=patient_count,
                findings=finding_count,
                duration_seconds=round(duration_seconds or 0.0, 3)
            )

    def log_patient(self, patient_sequence: int, num_documento: Optional[str], finding_count: int):
        """Log per-patient progress."""
        self.debug(
            "Patient validated",
            consecutivo=patient_sequence,
            num_documento=num_documento,
            findings=finding_count
        )


# Global logger instances for different modules
_loggers: Dict[str, RipsLogger] = {}


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    **kwargs
) -> RipsLogger:
    """
    Get or create a logger instance.

    Args:
        name: Logger name (usually module name)
        log_level: Override default log level
        **kwargs: Additional arguments for RipsLogger

    Returns:
        RipsLogger instance
    """
    if name not in _loggers:
        settings = get_settings()
        if log_level is None:
            log_level = settings.log_level
        kwargs.setdefault("log_dir", settings.log_dir)
        kwargs.setdefault("enable_file", settings.log_to_file)

        _loggers[name] = RipsLogger(name, log_level=log_level, **kwargs)

    return _loggers[name]
