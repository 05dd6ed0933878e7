"""JSON Schemas for the standard-JSON compiler input and output shapes.

WHY: Malformed input (a source without content, sources given as a list)
would otherwise surface deep inside a backend as a cryptic compiler error,
once per backend. Checking the shape up front gives one clear error. The
output check guards the contract with downstream tooling: whatever the
reconciler returns must still look like a solc output.

HOW: Two schemas validated with jsonschema. Only the parts this package
relies on are constrained; everything else is allowed through.

RULES:
- Input: sources is an object of {content: string, ...} entries
- Output: errors is an array, contracts and sources are objects
- validate_input raises InvalidCompilerInputError (a ValueError)
- validate_output raises jsonschema.ValidationError
"""

from __future__ import annotations

from typing import Any, Dict

import jsonschema

COMPILER_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "language": {"type": "string"},
        "sources": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {"content": {"type": "string"}},
                "required": ["content"],
            },
        },
        "settings": {"type": "object"},
    },
    "required": ["sources"],
}

DIAGNOSTIC_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "severity": {"type": "string"},
        "message": {"type": "string"},
        "formattedMessage": {"type": "string"},
        "sourceLocation": {
            "type": "object",
            "properties": {"file": {"type": "string"}},
        },
    },
}

COMPILER_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "errors": {"type": "array", "items": DIAGNOSTIC_SCHEMA},
        "contracts": {
            "type": "object",
            "additionalProperties": {"type": "object"},
        },
        "sources": {"type": "object"},
    },
    "required": ["errors", "contracts", "sources"],
}


class InvalidCompilerInputError(ValueError):
    """Raised when a compiler input does not have the standard-JSON shape.

    RULES:
    - Message names the offending location (e.g. "sources/A.sol")
    - Raised before any backend is invoked
    """


def validate_input(data: Any) -> None:
    """Validate a raw compiler input dict against COMPILER_INPUT_SCHEMA."""
    try:
        jsonschema.validate(instance=data, schema=COMPILER_INPUT_SCHEMA)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        raise InvalidCompilerInputError(
            "Invalid compiler input at {}: {}".format(location, exc.message)
        ) from exc


def validate_output(data: Any) -> None:
    """Validate a merged compiler output against COMPILER_OUTPUT_SCHEMA."""
    jsonschema.validate(instance=data, schema=COMPILER_OUTPUT_SCHEMA)
