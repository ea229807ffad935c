"""Interface schemas and argument validation for registry invocations.

Describes each RegistryService method in MCP-compatible form (a "tools"
list with a JSON Schema "inputSchema") and validates invocation
arguments against it:
- Positional args are mapped onto schema property order
- String to integer coercion where the schema expects an integer
- JSON Schema validation via jsonschema

Schemas only check presence and JSON types. Field limits (title length,
size range, label counts) stay with the service so that they report
the registry's own error codes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import jsonschema

from .errors import ErrorCode


_logger = logging.getLogger(__name__)

_CONTENT_ID = {"type": "integer", "description": "Content identifier"}
_METADATA_PROPERTIES: dict[str, Any] = {
    "title": {"type": "string", "description": "Non-empty, at most 64 characters"},
    "size": {"type": "integer", "description": "Declared payload size, 0 < size < 1e9"},
    "summary": {"type": "string", "description": "Non-empty, at most 128 characters"},
    "labels": {
        "type": "array",
        "items": {"type": "string"},
        "description": "1 to 10 labels, each at most 32 characters",
    },
}


def _object(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


REGISTRY_TOOLS: list[dict[str, Any]] = [
    {
        "name": "create_record",
        "description": "Register content metadata owned by the caller. Returns content_id.",
        "inputSchema": _object(dict(_METADATA_PROPERTIES), ["title", "size", "summary", "labels"]),
    },
    {
        "name": "transfer_ownership",
        "description": "Hand a record to a new owner. Caller must be the current owner.",
        "inputSchema": _object(
            {"content_id": _CONTENT_ID, "new_owner": {"type": "string"}},
            ["content_id", "new_owner"],
        ),
    },
    {
        "name": "update_metadata",
        "description": "Replace title, size, summary and labels. Caller must be the owner.",
        "inputSchema": _object(
            {"content_id": _CONTENT_ID, **_METADATA_PROPERTIES},
            ["content_id", "title", "size", "summary", "labels"],
        ),
    },
    {
        "name": "delete_record",
        "description": "Remove a record permanently. Caller must be the owner.",
        "inputSchema": _object({"content_id": _CONTENT_ID}, ["content_id"]),
    },
    {
        "name": "analyze_access",
        "description": "Report grant, ownership and effective access of a user on a record.",
        "inputSchema": _object(
            {"content_id": _CONTENT_ID, "target_user": {"type": "string"}},
            ["content_id", "target_user"],
        ),
    },
    {
        "name": "lookup_owner",
        "description": "Return the current owner of a record.",
        "inputSchema": _object({"content_id": _CONTENT_ID}, ["content_id"]),
    },
    {
        "name": "fetch_details",
        "description": "Return the full record. Caller needs a grant or ownership.",
        "inputSchema": _object({"content_id": _CONTENT_ID}, ["content_id"]),
    },
    {
        "name": "fetch_metrics",
        "description": "Return the sequence counter and the root authority.",
        "inputSchema": _object({}, []),
    },
]


def get_tool(method_name: str) -> dict[str, Any] | None:
    """Find a method's tool entry by name."""
    for tool in REGISTRY_TOOLS:
        if tool["name"] == method_name:
            return tool
    return None


def _param_names(input_schema: dict[str, Any]) -> list[str]:
    """Required fields first (in order), then any other properties."""
    names: list[str] = list(input_schema.get("required", []))
    for prop_name in input_schema.get("properties", {}):
        if prop_name not in names:
            names.append(prop_name)
    return names


@dataclass
class ValidationResult:
    """Result of validating invocation args against a method schema.

    Attributes:
        valid: Whether the arguments matched the schema
        proceed: Whether to proceed with the invocation
        error_message: Description of validation failure (if any)
        code: Error code to report when proceed is False
        args: Named args after positional mapping and type coercion
    """
    valid: bool
    proceed: bool
    error_message: str = ""
    code: ErrorCode | None = None
    args: dict[str, Any] | None = None


def to_named_args(
    input_schema: dict[str, Any],
    args: list[Any] | dict[str, Any] | None,
) -> dict[str, Any] | None:
    """Map positional args onto schema property names.

    Returns None when there are more positional args than properties.
    """
    if args is None:
        return {}
    if isinstance(args, dict):
        return dict(args)
    names = _param_names(input_schema)
    if len(args) > len(names):
        return None
    return dict(zip(names, args))


def coerce_types(args: dict[str, Any], input_schema: dict[str, Any]) -> dict[str, Any]:
    """Convert string representations of integers where the schema expects one."""
    coerced = dict(args)
    for prop_name, prop_schema in input_schema.get("properties", {}).items():
        value = coerced.get(prop_name)
        if prop_schema.get("type") == "integer" and isinstance(value, str):
            try:
                coerced[prop_name] = int(value)
            except ValueError:
                pass  # leave it for schema validation to report
    return coerced


def _reject(message: str, code: ErrorCode) -> ValidationResult:
    return ValidationResult(valid=False, proceed=False, error_message=message, code=code)


def validate_invocation(
    method_name: str,
    args: list[Any] | dict[str, Any] | None,
    validation_mode: str = "strict",
) -> ValidationResult:
    """Validate invocation arguments against a method's input schema.

    Unknown methods, missing arguments and unexpected arguments block in
    every mode since the call could not be made. Type mismatches block in
    'strict', are logged in 'warn', and are ignored in 'none'.

    Args:
        method_name: The registry method being invoked
        args: Positional list or named dict of arguments
        validation_mode: One of 'none', 'warn', or 'strict'

    Returns:
        ValidationResult; args holds the mapped and coerced arguments
        whenever proceed is True.
    """
    tool = get_tool(method_name)
    if tool is None:
        available = [t["name"] for t in REGISTRY_TOOLS]
        return _reject(
            f"Use one of {available} instead. Method '{method_name}' does not exist.",
            ErrorCode.UNKNOWN_METHOD,
        )

    input_schema: dict[str, Any] = tool["inputSchema"]
    expected = _param_names(input_schema)
    if args is not None and not isinstance(args, (list, tuple, dict)):
        return _reject(
            f"{method_name} takes a list or a mapping of arguments {expected}, "
            f"got {type(args).__name__}",
            ErrorCode.INVALID_ARGUMENT,
        )
    named = to_named_args(input_schema, args)
    if named is None:
        return _reject(
            f"{method_name} takes {len(expected)} arguments {expected}, got {len(args or [])}",
            ErrorCode.INVALID_ARGUMENT,
        )
    named = coerce_types(named, input_schema)

    absent = [name for name in input_schema.get("required", []) if name not in named]
    if absent:
        return _reject(
            f"{method_name} is missing {absent}. Expected arguments: {expected}",
            ErrorCode.MISSING_ARGUMENT,
        )
    unknown = [name for name in named if name not in expected]
    if unknown:
        return _reject(
            f"{method_name} got unexpected arguments {unknown}. Expected: {expected}",
            ErrorCode.INVALID_ARGUMENT,
        )

    if validation_mode == "none":
        return ValidationResult(valid=True, proceed=True, args=named)

    try:
        jsonschema.validate(instance=named, schema=input_schema)
    except jsonschema.ValidationError as e:
        error_msg = f"{e.message}. Expected arguments: {expected}"
        if validation_mode == "warn":
            _logger.warning("Interface validation failed for '%s': %s", method_name, error_msg)
            return ValidationResult(valid=False, proceed=True, error_message=error_msg, args=named)
        return _reject(error_msg, ErrorCode.INVALID_TYPE)

    return ValidationResult(valid=True, proceed=True, args=named)
