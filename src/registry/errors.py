"""Standardized error responses for registry operations.

Every registry operation either succeeds or returns exactly one error
dict; nothing is raised for invalid input or failed authorization. The
codes below are stable so callers can switch on them and surface them
verbatim to their own users.

Usage:
    from src.registry.errors import permission_error, ErrorCode

    return permission_error(
        f"Only the owner of content {content_id} can delete it",
        code=ErrorCode.OWNERSHIP_MISMATCH,
        content_id=content_id,
    )
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided bad input
    - PERMISSION: Caller not authorized
    - RESOURCE: Referenced content does not exist
    """

    VALIDATION = "validation"  # Field constraints, bad arguments
    PERMISSION = "permission"  # Wrong owner, no grant
    RESOURCE = "resource"  # Not found


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Field validation
    INVALID_INPUT = "invalid_input"  # title / summary
    SIZE_LIMIT_EXCEEDED = "size_limit_exceeded"
    INVALID_METADATA = "invalid_metadata"  # labels

    # Authorization
    OWNERSHIP_MISMATCH = "ownership_mismatch"  # mutation by non-owner
    ACCESS_FORBIDDEN = "access_forbidden"  # gated read without grant or ownership

    # Resource
    CONTENT_NOT_FOUND = "content_not_found"

    # Dispatch
    MISSING_ARGUMENT = "missing_argument"
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_TYPE = "invalid_type"
    UNKNOWN_METHOD = "unknown_method"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, resource)
    - retriable: Whether the operation should be retried
    - details: Optional additional context
    """

    success: bool = False
    error: str = ""
    code: str = ""
    category: str = ""
    retriable: bool = False  # registry failures are never transient
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


def _error(
    message: str,
    code: ErrorCode,
    category: ErrorCategory,
    details: dict[str, object],
) -> dict[str, object]:
    return ErrorResponse(
        error=message,
        code=code.value,
        category=category.value,
        retriable=False,
        details=details or None,
    ).to_dict()


def validation_error(
    message: str,
    code: ErrorCode = ErrorCode.INVALID_INPUT,
    **details: object,
) -> dict[str, object]:
    """Create a validation error response.

    Use when the caller provided a value that violates a field constraint.

    Args:
        message: Human-readable error message
        code: Specific error code (default: INVALID_INPUT)
        **details: Additional context (e.g., field="title", max_length=64)

    Returns:
        Error response dict with success=False
    """
    return _error(message, code, ErrorCategory.VALIDATION, dict(details))


def permission_error(
    message: str,
    code: ErrorCode = ErrorCode.ACCESS_FORBIDDEN,
    **details: object,
) -> dict[str, object]:
    """Create a permission error response.

    Use when the caller is not the owner (mutations) or holds neither a
    grant nor ownership (gated reads).
    """
    return _error(message, code, ErrorCategory.PERMISSION, dict(details))


def resource_error(
    message: str,
    code: ErrorCode = ErrorCode.CONTENT_NOT_FOUND,
    **details: object,
) -> dict[str, object]:
    """Create a resource error response (content not found)."""
    return _error(message, code, ErrorCategory.RESOURCE, dict(details))


def is_error(result: dict[str, object]) -> bool:
    """True if an operation result is an error response."""
    return result.get("success") is False
