"""Abstract compiler backend, backend errors and subprocess plumbing.

WHY: The orchestrator runs two different compilers but treats them the
same way: hand over a standard-JSON input, get a standard-JSON output
back. This base class fixes that contract so backends can be swapped by
configuration (dependency injection), never by patching.

HOW: BaseBackend is an ABC with a ``name`` property and an async
``compile()`` method. run_process() runs a command with stdin bytes via
asyncio subprocesses and kills the child if the awaiting task is
cancelled. parse_output() turns compiler stdout into a dict.

RULES:
- compile() returns the raw compiler output dict; diagnostics are data
- Fatal failures raise CompilerBackendError (or a subclass)
- A missing executable propagates FileNotFoundError unmodified
- No retries: compilation is deterministic
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class CompilerBackendError(Exception):
    """Raised when a compiler backend fails fatally.

    WHY: Callers need a typed exception to tell a compiler crash apart from
    compilation errors, which are returned as data.

    RULES:
    - stderr holds the compiler's stderr verbatim (may be "")
    - returncode is None when the process never reported one
    """

    def __init__(self, message: str, stderr: str = "", returncode: Optional[int] = None) -> None:
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(message)


class CompilerNotFoundError(CompilerBackendError):
    """Raised when the secondary compiler module cannot be found.

    RULES:
    - Message is fixed and names the dependency that must be installed
    """


class BaseBackend(ABC):
    """Abstract base for all compiler backends.

    To add a new backend:
    1. Create a new file in backends/
    2. Subclass BaseBackend
    3. Implement compile() and name
    4. Register in BACKENDS dict in backends/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name, e.g. 'solc (native)'."""

    @abstractmethod
    async def compile(self, compiler_input: Dict[str, Any]) -> Dict[str, Any]:
        """Compile a standard-JSON input dict and return the output dict."""


async def run_process(
    command: List[str],
    stdin: bytes,
    env: Optional[Mapping[str, str]] = None,
) -> Tuple[int, bytes, bytes]:
    """Run a command, feed it stdin, and return (returncode, stdout, stderr).

    RULES:
    - FileNotFoundError from a missing executable is not caught
    - If the awaiting task is cancelled, the child process is killed
    """
    logger.debug("Running %s", " ".join(command))
    process = await asyncio.create_subprocess_exec(
        *command,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=dict(env) if env is not None else None,
    )
    try:
        stdout, stderr = await process.communicate(stdin)
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
            await process.wait()
        raise
    return process.returncode, stdout, stderr


def parse_output(
    backend_name: str,
    returncode: int,
    stdout: bytes,
    stderr: bytes,
) -> Dict[str, Any]:
    """Parse compiler stdout as a standard-JSON output dict.

    solc exits 0 in standard-JSON mode even when the sources have errors,
    so a non-zero exit or non-JSON stdout means the compiler itself failed.
    """
    stderr_text = stderr.decode("utf-8", errors="replace")
    if returncode != 0:
        raise CompilerBackendError(
            "{} exited with status {}: {}".format(backend_name, returncode, stderr_text.strip()),
            stderr=stderr_text,
            returncode=returncode,
        )
    try:
        output = json.loads(stdout.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CompilerBackendError(
            "{} produced invalid JSON output: {}".format(backend_name, exc),
            stderr=stderr_text,
            returncode=returncode,
        ) from exc
    if not isinstance(output, dict):
        raise CompilerBackendError(
            "{} produced a JSON {} instead of an object".format(
                backend_name, type(output).__name__
            ),
            stderr=stderr_text,
            returncode=returncode,
        )
    return output
