"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: One request model for compilations, one response model mirroring the
standard-JSON output, plus small info models. Enums come from the core so
there is a single source of truth.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- CompilationResponse has exactly the standard-JSON output keys
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from dual_solc.core.ir import MarkerPolicy


class CompilationRequest(BaseModel):
    """A standard-JSON input plus optional marker convention overrides.

    RULES:
    - input is validated against the standard-JSON input schema by the
      pipeline, not by pydantic
    - Omitted overrides fall back to the server's configuration
    """

    input: Dict[str, Any] = Field(
        description="Solidity standard-JSON compiler input (language, sources, settings).",
    )
    policy: Optional[MarkerPolicy] = Field(
        default=None,
        description="Which files the secondary compiler receives.",
    )
    tag: Optional[str] = Field(
        default=None,
        description="Marker tag and artifact suffix, e.g. 'ovm'.",
    )
    demote_marked_errors: Optional[bool] = Field(
        default=None,
        description="Turn secondary errors in files marked unsupported into warnings.",
    )
    demote_unless_opted_in: Optional[bool] = Field(
        default=None,
        description="Turn secondary errors in files without the opt-in marker into warnings.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "input": {
                    "language": "Solidity",
                    "sources": {
                        "A.sol": {"content": "// @unsupported: ovm\ncontract A {}"},
                        "B.sol": {"content": "contract B {}"},
                    },
                    "settings": {"outputSelection": {"*": {"*": ["evm.bytecode"]}}},
                },
                "policy": "opt-out",
                "tag": "ovm",
            }
        ]
    }}


class CompilationResponse(BaseModel):
    """Merged standard-JSON compiler output."""

    errors: List[Dict[str, Any]] = Field(
        description="Secondary diagnostics followed by primary diagnostics.",
    )
    contracts: Dict[str, Dict[str, Any]] = Field(
        description="Primary contracts plus secondary contracts under '<name>.<tag>'.",
    )
    sources: Dict[str, Any] = Field(
        description="Source metadata (ASTs, ids) from the primary compiler.",
    )


class BackendInfo(BaseModel):
    """Description of a registered compiler backend."""

    key: str = Field(description="Backend identifier used in configuration.")
    name: str = Field(description="Human-readable backend name.")
    role: Optional[str] = Field(
        default=None,
        description="'primary' or 'secondary' if the backend is configured for a role.",
    )


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
