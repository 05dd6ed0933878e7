"""Dual compilation pipeline: split, compile twice, reconcile.

WHY: This is the one entry point callers (CLI, HTTP API, tests) use to get
a merged output. It owns the concurrency policy so nobody else has to
think about it: both compilers run at once, and the first fatal failure
wins.

HOW: DualCompiler is constructed with its two backends and the marker
convention (dependency injection; backends are never swapped after
construction). compile() validates the input, splits it, runs both
backends as asyncio tasks, waits with FIRST_EXCEPTION and reconciles.

RULES:
- The two backends share no mutable state; each gets its own input dict
- On the first fatal backend error the other task is cancelled and the
  error is re-raised unmodified
- Diagnostics returned by compilers are data and never raise
- No retries
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from dual_solc import config
from dual_solc.backends import BACKENDS, SolcJsBackend
from dual_solc.backends.base import BaseBackend
from dual_solc.core.ir import CompilerInput, MarkerConvention
from dual_solc.core.reconciler import reconcile
from dual_solc.core.schema import validate_input
from dual_solc.core.splitter import split_input

logger = logging.getLogger(__name__)


def build_backend(key: str, path: Optional[str] = None, node_path: Optional[str] = None) -> BaseBackend:
    """Instantiate a registered backend by key.

    RULES:
    - Raises ValueError for an unknown key, listing the available ones
    - node_path is only passed to solc-js backends
    """
    if key not in BACKENDS:
        available = ", ".join(sorted(BACKENDS.keys()))
        raise ValueError("Unknown backend '{}'. Available backends: {}".format(key, available))
    backend_cls = BACKENDS[key]
    if issubclass(backend_cls, SolcJsBackend):
        return backend_cls(path, node_path=node_path)
    return backend_cls(path)


class DualCompiler:
    """Compile one input with a primary and a secondary backend and merge the results.

    Use as:
        compiler = DualCompiler(SolcBackend(), SolcJsBackend(), convention)
        output = await compiler.compile(standard_json_input)
    """

    def __init__(
        self,
        primary: BaseBackend,
        secondary: BaseBackend,
        convention: Optional[MarkerConvention] = None,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.convention = convention or MarkerConvention()

    @classmethod
    def from_config(
        cls,
        convention: Optional[MarkerConvention] = None,
        primary_path: Optional[str] = None,
        secondary_path: Optional[str] = None,
        node_path: Optional[str] = None,
    ) -> DualCompiler:
        """Build a DualCompiler from the configured backends.

        Explicit arguments override the values in dual_solc.config.
        """
        return cls(
            primary=build_backend(config.PRIMARY_BACKEND, primary_path, node_path),
            secondary=build_backend(config.SECONDARY_BACKEND, secondary_path, node_path),
            convention=convention or config.load_marker_convention(),
        )

    async def compile(self, compiler_input: Dict[str, Any]) -> Dict[str, Any]:
        """Run the full split → compile → reconcile pipeline.

        Args:
            compiler_input: A standard-JSON compiler input dict.

        Returns:
            The merged standard-JSON output dict.

        Raises:
            InvalidCompilerInputError: If the input has the wrong shape.
            CompilerBackendError: If either backend fails fatally.
        """
        validate_input(compiler_input)
        original = CompilerInput.from_dict(compiler_input)
        primary_input, secondary_input = split_input(original, self.convention)

        logger.info(
            "Compiling %d file(s) with %s and %d file(s) with %s",
            len(primary_input.sources),
            self.primary.name,
            len(secondary_input.sources),
            self.secondary.name,
        )

        primary_output, secondary_output = await self._run_backends(
            primary_input.to_dict(),
            secondary_input.to_dict(),
        )
        return reconcile(primary_output, secondary_output, original, self.convention)

    def compile_sync(self, compiler_input: Dict[str, Any]) -> Dict[str, Any]:
        """Synchronous wrapper around compile() using asyncio.run()."""
        return asyncio.run(self.compile(compiler_input))

    async def _run_backends(
        self,
        primary_input: Dict[str, Any],
        secondary_input: Dict[str, Any],
    ) -> tuple:
        """Run both backends concurrently; fail fast on the first fatal error."""
        primary_task = asyncio.ensure_future(self.primary.compile(primary_input))
        secondary_task = asyncio.ensure_future(self.secondary.compile(secondary_input))
        tasks = [primary_task, secondary_task]

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        failed = [t for t in tasks if t in done and t.exception() is not None]
        if failed:
            for task in pending:
                task.cancel()
            # Let cancelled backends kill their child processes before raising.
            await asyncio.gather(*pending, return_exceptions=True)
            error = failed[0].exception()
            logger.warning("Compilation aborted: %s", error)
            raise error

        return primary_task.result(), secondary_task.result()
