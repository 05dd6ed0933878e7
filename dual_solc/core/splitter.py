"""Partition a compiler input into primary and secondary backend inputs.

WHY: The primary (native) compiler must see every file, but the secondary
compiler only supports a subset. Users choose the subset with an in-source
marker comment, so the split is a pure function of file contents and the
active MarkerConvention.

HOW: Every source entry is copied into the primary input. Each entry is
then checked for the active marker and copied into the secondary input
according to the policy. Settings and language are shared unchanged.

RULES:
- primary.sources always equals input.sources
- opt-out: secondary gets a file unless it contains the opt-out marker
- opt-in: secondary gets a file only if it contains the opt-in marker
- all: secondary gets every file
- An empty sources mapping is legal and is passed to both backends
- Each derived input owns its own sources mapping
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

from dual_solc.core.ir import CompilerInput, MarkerConvention, MarkerPolicy

logger = logging.getLogger(__name__)


def has_marker(source: Dict[str, Any], marker: str) -> bool:
    """Return True if a source entry's content contains the marker text."""
    return marker in (source.get("content") or "")


def _wants_secondary(source: Dict[str, Any], convention: MarkerConvention) -> bool:
    if convention.policy is MarkerPolicy.ALL:
        return True
    marked = has_marker(source, convention.active_marker)
    if convention.policy is MarkerPolicy.OPT_IN:
        return marked
    return not marked


def split_input(
    compiler_input: CompilerInput,
    convention: MarkerConvention,
) -> Tuple[CompilerInput, CompilerInput]:
    """Split one compiler input into (primary, secondary) inputs.

    Args:
        compiler_input: The unified input with every source file.
        convention: The active marker convention.

    Returns:
        Tuple of (primary_input, secondary_input). Both carry the original
        language and settings.
    """
    primary = CompilerInput(
        language=compiler_input.language,
        sources={},
        settings=compiler_input.settings,
    )
    secondary = CompilerInput(
        language=compiler_input.language,
        sources={},
        settings=compiler_input.settings,
    )

    for path, source in compiler_input.sources.items():
        primary.sources[path] = source
        if _wants_secondary(source, convention):
            secondary.sources[path] = source

    logger.debug(
        "Split %d source(s): %d primary, %d secondary (policy=%s)",
        len(compiler_input.sources),
        len(primary.sources),
        len(secondary.sources),
        convention.policy.value,
    )
    return primary, secondary
