"""
errors.py
=========
Error taxonomy for the itinerary engine and the ErrorHandler that wraps each
pipeline stage.

  ValidationError       input rejected before parsing      → returned to caller
  ParsingError          no segment could be extracted      → returned to caller
  PartialParseWarning   one line failed, others parsed     → attached to result
  ReferenceLookupError  reference data lookup failed       → logged, fallback used
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional

logger = logging.getLogger(__name__)


class ErrorType(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSING_ERROR = "PARSING_ERROR"
    REFERENCE_LOOKUP_ERROR = "REFERENCE_LOOKUP_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


_USER_MESSAGES = {
    ErrorType.VALIDATION_ERROR:
        "Invalid itinerary text. Please review your input and try again.",
    ErrorType.PARSING_ERROR:
        "Unable to process the flight information. Please check the format and try again.",
    ErrorType.REFERENCE_LOOKUP_ERROR:
        "Reference data is temporarily unavailable.",
    ErrorType.UNKNOWN_ERROR:
        "An unexpected error occurred. Please try again.",
}


class GDSError(Exception):
    """Base class for every typed failure raised inside the engine."""

    error_type = ErrorType.UNKNOWN_ERROR

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 user_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})
        self.user_message = user_message or _USER_MESSAGES[self.error_type]

    def to_dict(self) -> dict:
        return {
            "type": self.error_type.value,
            "message": self.message,
            "user_message": self.user_message,
            "context": self.context,
        }


class ValidationError(GDSError):
    error_type = ErrorType.VALIDATION_ERROR

    def __init__(self, message: str, reasons=None, context=None, user_message=None):
        super().__init__(message, context, user_message)
        self.reasons = list(reasons or [])


class ParsingError(GDSError):
    error_type = ErrorType.PARSING_ERROR


class ReferenceLookupError(GDSError):
    error_type = ErrorType.REFERENCE_LOOKUP_ERROR


@dataclass(frozen=True)
class PartialParseWarning:
    """A candidate line that no pattern could turn into a segment."""
    line_number: int
    line: str
    reason: str

    def to_dict(self) -> dict:
        return {"line_number": self.line_number, "line": self.line, "reason": self.reason}


class ErrorHandler:
    """Classifies and reports failures; attaches the operation they happened in."""

    @staticmethod
    @contextmanager
    def stage(operation: str, error_cls=ParsingError, **context) -> Iterator[None]:
        """
        Wrap one pipeline stage.

        Typed errors pass through with `operation` added to their context.
        Anything else is converted to `error_cls` so callers only ever see
        GDSError subclasses.
        """
        try:
            yield
        except GDSError as e:
            e.context.setdefault("operation", operation)
            for key, value in context.items():
                e.context.setdefault(key, value)
            raise
        except Exception as e:
            ctx = {"operation": operation, **context}
            logger.exception("Unexpected failure in %s", operation)
            raise error_cls(f"{operation} failed: {e}", context=ctx) from e

    @staticmethod
    def report(error: Exception, operation: str = "unknown") -> None:
        if isinstance(error, GDSError):
            if ErrorHandler.is_user_facing(error):
                logger.warning("%s in %s: %s %s", error.error_type.value, operation,
                               error.message, error.context or "")
            else:
                logger.info("%s in %s (fallback used): %s", error.error_type.value,
                            operation, error.message)
        else:
            logger.error("Error in %s: %s", operation, error)

    @staticmethod
    def is_user_facing(error: Exception) -> bool:
        return isinstance(error, (ValidationError, ParsingError))

    @staticmethod
    def is_recoverable(error: Exception) -> bool:
        return isinstance(error, ReferenceLookupError)

    @staticmethod
    def user_message(error: Exception) -> str:
        if isinstance(error, GDSError):
            return error.user_message
        return _USER_MESSAGES[ErrorType.UNKNOWN_ERROR]
