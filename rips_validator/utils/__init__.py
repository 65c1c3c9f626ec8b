"""
Utilities Module

Helper functions and utilities used across the application.

Components:
- error_handler.py: Error codes, result wrapper and error handler
- logger.py: Centralized logging with masking of patient identifiers
- date_utils.py: Attention date resolution and age computation
- reporting.py: Text and JSON rendering of validation reports
"""

from .error_handler import ErrorCode, ErrorLevel, ErrorResult, ErrorHandler, RipsError
from .logger import get_logger
from .date_utils import resolve_attention_date, parse_birth_date, calculate_age
from .reporting import ReportRenderer, get_report_renderer, report_filename

__all__ = [
    "ErrorCode",
    "ErrorLevel",
    "ErrorResult",
    "ErrorHandler",
    "RipsError",
    "get_logger",
    "resolve_attention_date",
    "parse_birth_date",
    "calculate_age",
    "ReportRenderer",
    "get_report_renderer",
    "report_filename",
]
