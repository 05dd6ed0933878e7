"""FastAPI application exposing the dual compilation pipeline over HTTP.

WHY: Editors, CI jobs and build tools written in other languages need to
run a dual compilation without embedding Python. A small HTTP API lets
them POST a standard-JSON input and receive the merged output.

HOW: POST /compilations validates the request, builds a DualCompiler from
configuration plus request overrides, and awaits it in the request
handler. GET /backends lists registered backends, GET /health is a
liveness probe.

RULES:
- Invalid input or convention overrides → 400
- Fatal backend failures (crash, missing compiler) → 502 with the
  backend's message in detail
- Compiler diagnostics are returned in the body with status 200
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import FastAPI, HTTPException

from dual_solc import __version__, config
from dual_solc.backends import BACKENDS, CompilerBackendError
from dual_solc.orchestrator import DualCompiler
from dual_solc.server.models import (
    BackendInfo,
    CompilationRequest,
    CompilationResponse,
    ErrorResponse,
    HealthResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Dual Solidity Compiler API",
    description=(
        "Compile a Solidity standard-JSON input with a primary and a secondary "
        "compiler and receive one merged output. Secondary artifacts appear "
        "under '<contract>.<tag>'."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_compiler(request: CompilationRequest) -> DualCompiler:
    """Build a DualCompiler from configuration and request overrides."""
    convention = config.load_marker_convention(
        policy=request.policy.value if request.policy is not None else None,
        tag=request.tag,
        demote_marked_errors=request.demote_marked_errors,
        demote_unless_opted_in=request.demote_unless_opted_in,
    )
    return DualCompiler.from_config(convention=convention)


# ---------------------------------------------------------------------------
# Endpoints: Compilations
# ---------------------------------------------------------------------------


@app.post(
    "/compilations",
    response_model=CompilationResponse,
    tags=["compilations"],
    summary="Compile with both backends and merge",
    description=(
        "Splits the input by marker convention, compiles it with the primary "
        "and secondary compilers concurrently, and returns the merged "
        "standard-JSON output."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or convention override"},
        502: {"model": ErrorResponse, "description": "A compiler backend failed"},
    },
)
async def create_compilation(request: CompilationRequest) -> CompilationResponse:
    try:
        compiler = _build_compiler(request)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    try:
        output = await compiler.compile(request.input)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (CompilerBackendError, OSError) as exc:
        logger.exception("Compilation failed")
        raise HTTPException(status_code=502, detail=str(exc))

    return CompilationResponse(**output)


# ---------------------------------------------------------------------------
# Endpoints: Backends
# ---------------------------------------------------------------------------


@app.get(
    "/backends",
    response_model=List[BackendInfo],
    tags=["backends"],
    summary="List available compiler backends",
    description="Returns all registered backends and which role each is configured for.",
)
async def list_backends() -> List[BackendInfo]:
    roles = {config.PRIMARY_BACKEND: "primary", config.SECONDARY_BACKEND: "secondary"}
    if config.PRIMARY_BACKEND == config.SECONDARY_BACKEND:
        roles[config.PRIMARY_BACKEND] = "primary,secondary"
    return [
        BackendInfo(key=key, name=backend_cls().name, role=roles.get(key))
        for key, backend_cls in sorted(BACKENDS.items())
    ]


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the dual-solc-api console script."""
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
