"""Static field validation for content metadata.

Each helper returns an error response dict on failure and None when the
value is acceptable. validate_metadata() runs them in the fixed order
title, size, summary, labels and stops at the first failure.
"""

from __future__ import annotations

from typing import Any

from .constants import (
    MAX_CONTENT_SIZE,
    MAX_LABEL_LENGTH,
    MAX_LABELS,
    MAX_SUMMARY_LENGTH,
    MAX_TITLE_LENGTH,
    MIN_LABELS,
)
from .errors import ErrorCode, validation_error


def _check_text(field: str, value: Any, max_length: int) -> dict[str, object] | None:
    if not isinstance(value, str):
        return validation_error(
            f"{field} must be a string, got {type(value).__name__}",
            code=ErrorCode.INVALID_INPUT,
            field=field,
        )
    if not value:
        return validation_error(
            f"{field} must not be empty",
            code=ErrorCode.INVALID_INPUT,
            field=field,
        )
    if len(value) > max_length:
        return validation_error(
            f"{field} is {len(value)} characters, maximum is {max_length}",
            code=ErrorCode.INVALID_INPUT,
            field=field,
            max_length=max_length,
        )
    return None


def validate_title(title: Any) -> dict[str, object] | None:
    return _check_text("title", title, MAX_TITLE_LENGTH)


def validate_summary(summary: Any) -> dict[str, object] | None:
    return _check_text("summary", summary, MAX_SUMMARY_LENGTH)


def validate_size(size: Any) -> dict[str, object] | None:
    """Size must be an integer with 0 < size < MAX_CONTENT_SIZE.

    bool is rejected even though it subclasses int.
    """
    if not isinstance(size, int) or isinstance(size, bool):
        return validation_error(
            f"size must be an integer, got {type(size).__name__}",
            code=ErrorCode.SIZE_LIMIT_EXCEEDED,
            field="size",
        )
    if size <= 0 or size >= MAX_CONTENT_SIZE:
        return validation_error(
            f"size {size} is outside the permitted range (0, {MAX_CONTENT_SIZE})",
            code=ErrorCode.SIZE_LIMIT_EXCEEDED,
            field="size",
            max_size=MAX_CONTENT_SIZE,
        )
    return None


def validate_labels(labels: Any) -> dict[str, object] | None:
    """Labels: a list of MIN_LABELS..MAX_LABELS non-empty short strings."""
    if not isinstance(labels, (list, tuple)):
        return validation_error(
            f"labels must be a list, got {type(labels).__name__}",
            code=ErrorCode.INVALID_METADATA,
            field="labels",
        )
    if not MIN_LABELS <= len(labels) <= MAX_LABELS:
        return validation_error(
            f"labels must contain {MIN_LABELS} to {MAX_LABELS} entries, got {len(labels)}",
            code=ErrorCode.INVALID_METADATA,
            field="labels",
            count=len(labels),
        )
    for index, label in enumerate(labels):
        if not isinstance(label, str) or not label or len(label) > MAX_LABEL_LENGTH:
            return validation_error(
                f"label {index} must be a non-empty string of at most "
                f"{MAX_LABEL_LENGTH} characters",
                code=ErrorCode.INVALID_METADATA,
                field="labels",
                index=index,
            )
    return None


def validate_metadata(
    title: Any,
    size: Any,
    summary: Any,
    labels: Any,
) -> dict[str, object] | None:
    """Validate all metadata fields, returning the first error found."""
    checks = (
        (validate_title, title),
        (validate_size, size),
        (validate_summary, summary),
        (validate_labels, labels),
    )
    for check, value in checks:
        error = check(value)
        if error is not None:
            return error
    return None
