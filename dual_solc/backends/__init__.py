"""Compiler backend registry.

WHY: The CLI, HTTP API and configuration layer pick backends by name. A
central dict makes adding a backend one import and one line.

HOW: BACKENDS maps string keys to backend *classes* (not instances).
Callers instantiate as needed: ``backend = BACKENDS["solc"](executable)``.

RULES:
- Keys are snake_case identifiers (used in config and env vars)
- Values are BaseBackend subclasses whose first constructor argument is
  the executable path or module id
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dual_solc.backends.base import CompilerBackendError, CompilerNotFoundError
from dual_solc.backends.solc import SolcBackend
from dual_solc.backends.solcjs import SolcJsBackend

if TYPE_CHECKING:
    from dual_solc.backends.base import BaseBackend

BACKENDS: dict[str, type[BaseBackend]] = {
    "solc": SolcBackend,
    "solcjs": SolcJsBackend,
}

__all__ = [
    "BACKENDS",
    "CompilerBackendError",
    "CompilerNotFoundError",
    "SolcBackend",
    "SolcJsBackend",
]
