# club_nlq/api/errors.py
"""
Error taxonomy for club_nlq.

Provides:
1. Error code constants for consistent error handling
2. Custom exception hierarchy for the external-collaborator boundaries
3. Conversion of exceptions into the typed error values returned to callers
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# ============================================================================
# ERROR CODES
# ============================================================================


class ErrorCode:
    """Standard error codes for club_nlq."""

    # Caller errors
    INVALID_PARAMETER = "INVALID_PARAMETER"
    INVALID_SEASON_WEEK = "INVALID_SEASON_WEEK"

    # Collaborator errors
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    DATA_STORE_ERROR = "DATA_STORE_ERROR"

    INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# EXCEPTION HIERARCHY
# ============================================================================


class ClubNLQError(Exception):
    """Base exception for all club_nlq errors."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for error results."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ExtractionError(ClubNLQError):
    """Raised when the external entity extractor fails."""

    def __init__(self, question: str, reason: str):
        super().__init__(
            message=f"Could not extract entities from question: {reason}",
            code=ErrorCode.EXTRACTION_FAILED,
            details={"question": question, "reason": reason},
        )


class DataStoreError(ClubNLQError):
    """Raised when a data store query fails."""

    def __init__(self, query_name: str, reason: str):
        super().__init__(
            message=f"Data store query '{query_name}' failed: {reason}",
            code=ErrorCode.DATA_STORE_ERROR,
            details={"query_name": query_name, "reason": reason},
        )


class InvalidParameterError(ClubNLQError):
    """Raised when a caller passes an unusable parameter."""

    def __init__(self, param_name: str, param_value: Any, expected: str):
        super().__init__(
            message=f"Invalid parameter '{param_name}': got {param_value}, expected {expected}",
            code=ErrorCode.INVALID_PARAMETER,
            details={
                "param_name": param_name,
                "param_value": str(param_value),
                "expected": expected,
            },
        )


# ============================================================================
# ERROR NORMALISATION
# ============================================================================


def describe_error(error: BaseException) -> Dict[str, Any]:
    """
    Turn any exception into ``{code, message, details}``.

    Library errors keep their own code; anything else is reported as an
    internal error with the exception type in the message.
    """
    if isinstance(error, ClubNLQError):
        return error.to_dict()

    logger.debug(f"Normalising unexpected error: {type(error).__name__}: {error}")
    return {
        "code": ErrorCode.INTERNAL_ERROR,
        "message": f"Unexpected error: {type(error).__name__}: {error}",
        "details": {},
    }
