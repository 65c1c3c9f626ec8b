"""
Standardized error handling for the RIPS invoice validator.

Rule-level problems are never raised past a rule boundary: they are wrapped
in an ErrorResult and turned into findings by the caller. The only error
allowed to escape is a configuration error at startup.
"""

import traceback
from typing import Optional, Any, Dict
from enum import Enum
import logging


class ErrorLevel(Enum):
    """Error severity levels."""
    CRITICAL = "critical"  # System failure, cannot continue
    ERROR = "error"  # Operation failed, but system can continue
    WARNING = "warning"  # Operation succeeded with issues
    INFO = "info"  # Informational message


class ErrorCode(Enum):
    """Standardized error codes for every kind of finding."""

    # Date Errors (1xxx)
    EMPTY_DATE = 1001
    INVALID_DATE_FORMAT = 1002
    INVALID_BIRTH_DATE = 1003

    # Patient Errors (2xxx)
    INVALID_DOCUMENT_TYPE = 2001
    AGE_DOCUMENT_MISMATCH = 2002
    MISSING_SERVICES_SECTION = 2003

    # Service Line Errors (3xxx)
    DUPLICATE_SERVICE_LINE = 3001
    FINALITY_MISMATCH = 3002
    DIAGNOSIS_NOT_IN_REFERENCE_SET = 3003
    LINE_READ_ERROR = 3004

    # Invoice Errors (4xxx)
    MISSING_PATIENT_LIST = 4001
    REPORT_PERSISTENCE_FAILURE = 4002

    # System Errors (5xxx)
    CONFIGURATION_ERROR = 5001


# Findings with these codes belong to the invoice, not to a patient
INVOICE_LEVEL_CODES = {
    ErrorCode.MISSING_PATIENT_LIST,
    ErrorCode.REPORT_PERSISTENCE_FAILURE,
}


class RipsError(Exception):
    """Base exception class for RIPS validation errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        level: ErrorLevel = ErrorLevel.ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize RIPS error.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            level: Severity level from ErrorLevel enum
            details: Additional error details as dictionary
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.level = level
        self.details = details or {}
        self.cause = cause

        if cause:
            self.details['original_error'] = str(cause)
            self.details['traceback'] = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            'message': self.message,
            'code': self.code.name,
            'level': self.level.value,
            'details': self.details
        }


class ErrorResult:
    """
    Result wrapper for operations that may fail.

    Used per service line and per date computation so that a failure is
    carried as a value instead of unwinding the invoice loop.
    """

    def __init__(
        self,
        success: bool,
        value: Optional[Any] = None,
        error: Optional[RipsError] = None
    ):
        self.success = success
        self.value = value
        self.error = error

    @classmethod
    def ok(cls, value: Any) -> 'ErrorResult':
        """Create a successful result."""
        return cls(success=True, value=value, error=None)

    @classmethod
    def fail(cls, error: RipsError) -> 'ErrorResult':
        """Create a failed result."""
        return cls(success=False, value=None, error=error)

    def unwrap(self) -> Any:
        """
        Get the value or raise the error.

        Raises:
            RipsError if failed
        """
        if self.success:
            return self.value
        raise self.error

    def unwrap_or(self, default: Any) -> Any:
        """Get the value or return a default."""
        return self.value if self.success else default


# Logger method used for each severity
_LOG_METHODS = {
    ErrorLevel.CRITICAL: "critical",
    ErrorLevel.ERROR: "error",
    ErrorLevel.WARNING: "warning",
    ErrorLevel.INFO: "info",
}


class ErrorHandler:
    """Centralized error handler with logging."""

    def __init__(self, logger: Optional[Any] = None):
        """
        Initialize error handler.

        Args:
            logger: Logger instance to use (stdlib logger if None)
        """
        self.logger = logger or logging.getLogger(__name__)

    def handle(self, error: RipsError) -> None:
        """Log an error according to its severity level."""
        log_message = f"[{error.code.name}] {error.message}"

        if error.details:
            shown = {k: v for k, v in error.details.items() if k != 'traceback'}
            if shown:
                log_message += f" | Details: {shown}"

        log = getattr(self.logger, _LOG_METHODS.get(error.level, "info"))
        log(log_message)

    def wrap_operation(
        self,
        operation: Any,
        *args,
        fallback_code: ErrorCode = ErrorCode.LINE_READ_ERROR,
        **kwargs
    ) -> ErrorResult:
        """
        Wrap an operation in error handling.

        Args:
            operation: The operation to execute
            *args: Arguments for the operation
            fallback_code: Code given to unexpected exceptions
            **kwargs: Keyword arguments for the operation

        Returns:
            ErrorResult with the operation result or error
        """
        try:
            result = operation(*args, **kwargs)
            return ErrorResult.ok(result)
        except RipsError as e:
            self.handle(e)
            return ErrorResult.fail(e)
        except Exception as e:
            rips_error = RipsError(
                message=str(e) or e.__class__.__name__,
                code=fallback_code,
                level=ErrorLevel.ERROR,
                cause=e
            )
            self.handle(rips_error)
            return ErrorResult.fail(rips_error)


# Convenience functions for common error scenarios

def date_error(code: ErrorCode, value: Optional[str], reason: str) -> RipsError:
    """Create a date parsing error."""
    return RipsError(
        message=reason,
        code=code,
        level=ErrorLevel.WARNING,
        details={'value': value}
    )


def configuration_error(path: str, reason: str, cause: Optional[Exception] = None) -> RipsError:
    """Create a configuration loading error."""
    return RipsError(
        message=f"Invalid reference configuration {path}: {reason}",
        code=ErrorCode.CONFIGURATION_ERROR,
        level=ErrorLevel.CRITICAL,
        details={'path': path},
        cause=cause
    )
