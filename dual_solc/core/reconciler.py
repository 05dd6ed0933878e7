"""Merge primary and secondary compiler outputs into one standard-JSON output.

WHY: Downstream tooling (artifact writers, test runners) understands one
solc output. The secondary compiler's artifacts have to live next to the
primary ones without clobbering them, its errors must be recognisable as
secondary errors, and its library link references must not resolve to
primary-compiled libraries.

HOW: Four steps, each a separate function:
  annotate_diagnostics — banner (or demote) secondary errors
  merge_diagnostics    — concatenate, drop the lone empty-input diagnostic
  merge_contracts      — rename link references, insert as "<name>.<tag>"
  reconcile            — run the above and assemble the final dict

RULES:
- Secondary diagnostics come first in the merged list
- "No input sources specified." is removed only when removing every
  occurrence shrinks the list by exactly one
- Secondary contracts under files the primary output lacks are dropped
- Link references are renamed exactly once per reconciliation
- Primary contracts are mutated in place; secondary "sources" are discarded
- Absent keys are treated as empty, never as errors
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from dual_solc.core.ir import (
    NO_INPUT_SOURCES_MESSAGE,
    CompilerInput,
    MarkerConvention,
    MarkerPolicy,
)
from dual_solc.core.splitter import has_marker

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Step 1: Diagnostic annotation
# ---------------------------------------------------------------------------


def _error_banner(convention: MarkerConvention) -> str:
    if convention.policy is MarkerPolicy.OPT_IN:
        hint = 'silence by removing: "{}" from this file'.format(convention.opt_in_marker)
    else:
        hint = 'silence by adding: "{}" to the top of this file'.format(
            convention.opt_out_marker
        )
    return "{} Compiler Error ({}):\n ".format(convention.label, hint)


def _warning_banner(convention: MarkerConvention) -> str:
    return '{} Compiler Warning (silenced by "{}"):\n '.format(
        convention.label, convention.opt_out_marker
    )


def _not_opted_in_banner(convention: MarkerConvention) -> str:
    return (
        "{label} Compiler Error: Unable to compile file with the {label} compiler.\n"
        " You didn't compile with {marker}, so we're not throwing this as an error:\n "
    ).format(label=convention.label, marker=convention.opt_in_marker)


def _source_of(
    diagnostic: Dict[str, Any],
    original_input: CompilerInput,
) -> Optional[Dict[str, Any]]:
    location = diagnostic.get("sourceLocation") or {}
    return original_input.sources.get(location.get("file"))


def _demotion_banner(
    diagnostic: Dict[str, Any],
    original_input: CompilerInput,
    convention: MarkerConvention,
) -> Optional[str]:
    """Return the warning banner if this error should be demoted, else None."""
    source = _source_of(diagnostic, original_input)
    if source is None:
        return None
    if convention.demote_marked_errors and has_marker(source, convention.opt_out_marker):
        return _warning_banner(convention)
    if convention.demote_unless_opted_in and not has_marker(source, convention.opt_in_marker):
        return _not_opted_in_banner(convention)
    return None


def annotate_diagnostics(
    errors: List[Dict[str, Any]],
    original_input: CompilerInput,
    convention: MarkerConvention,
) -> List[Dict[str, Any]]:
    """Prefix secondary errors with an explanatory banner, or demote them.

    WHY: A user reading a failed build must be able to tell that an error
    came from the secondary compiler, and how to stop it from compiling the
    file. When demotion is enabled, files the user never asked the secondary
    compiler to support were compiled anyway and their errors are
    informational only.

    HOW: Each diagnostic with severity "error" gets a banner prepended to
    its formattedMessage. Errors are demoted to warnings, with a warning
    banner, when:
      demote_marked_errors   — the file carries the opt-out marker
      demote_unless_opted_in — the file lacks the opt-in marker

    RULES:
    - Only severity "error" is touched; warnings pass through as-is
    - Severity only ever moves from error to warning, never back
    - Errors without a location in the input are never demoted
    - Missing formattedMessage is treated as ""
    - Diagnostics are updated in place; the same list is returned
    """
    for diagnostic in errors:
        if diagnostic.get("severity") != "error":
            continue
        formatted = diagnostic.get("formattedMessage") or ""
        banner = _demotion_banner(diagnostic, original_input, convention)
        if banner is not None:
            diagnostic["severity"] = "warning"
            diagnostic["formattedMessage"] = banner + formatted
        else:
            diagnostic["formattedMessage"] = _error_banner(convention) + formatted
    return errors


# ---------------------------------------------------------------------------
# Step 2: Diagnostic merge
# ---------------------------------------------------------------------------


def merge_diagnostics(
    secondary_errors: List[Dict[str, Any]],
    primary_errors: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """Concatenate secondary then primary diagnostics.

    solc reports "No input sources specified." whenever it is handed an
    empty input. That is expected when exactly one backend got an empty
    partition, so a single occurrence is dropped. Two occurrences mean both
    backends got nothing, which is worth surfacing, so all are kept.
    """
    errors = list(secondary_errors) + list(primary_errors)
    filtered = [e for e in errors if e.get("message") != NO_INPUT_SOURCES_MESSAGE]
    if len(errors) == len(filtered) + 1:
        return filtered
    return errors


# ---------------------------------------------------------------------------
# Step 3: Contract namespace merge
# ---------------------------------------------------------------------------


def rename_link_references(contract: Dict[str, Any], suffix: str) -> None:
    """Rename every link-reference symbol in a contract's bytecode to <symbol><suffix>.

    WHY: A secondary-compiled contract must be linked against the
    secondary-compiled library, which lives in the merged output as
    "<Library><suffix>". Leaving the original symbol would link it to the
    primary build of the library.

    RULES:
    - Only evm.bytecode.linkReferences is rewritten
    - Missing evm/bytecode/linkReferences tables are a no-op
    - Every symbol is renamed once; no reference positions are lost
    - Symbols already ending in the suffix are left unchanged
    - If "<symbol>" and "<symbol><suffix>" both exist, their positions are
      concatenated under "<symbol><suffix>" and a warning is logged
    """
    bytecode = (contract.get("evm") or {}).get("bytecode") or {}
    link_references = bytecode.get("linkReferences") or {}

    for file_name, symbols in link_references.items():
        renamed = {}
        for symbol, references in symbols.items():
            key = symbol if symbol.endswith(suffix) else symbol + suffix
            if key in renamed:
                logger.warning(
                    "Link reference %s in %s collides with %s; merging positions",
                    symbol, file_name, key,
                )
                renamed[key] = list(renamed[key]) + list(references)
            else:
                renamed[key] = references
        symbols.clear()
        symbols.update(renamed)


def merge_contracts(
    primary_contracts: Dict[str, Dict[str, Any]],
    secondary_contracts: Dict[str, Dict[str, Any]],
    suffix: str,
) -> Dict[str, Dict[str, Any]]:
    """Insert secondary contracts into the primary table as "<name><suffix>".

    Files the primary output does not know are dropped: an artifact has to
    be addressable under a file the primary build recognises. An existing
    key with the composed name is overwritten.

    Returns:
        primary_contracts, mutated in place.
    """
    merged = 0
    for file_name, contracts in secondary_contracts.items():
        if file_name not in primary_contracts:
            logger.debug("Dropping secondary contracts for unknown file %s", file_name)
            continue
        for contract_name, contract in contracts.items():
            rename_link_references(contract, suffix)
            primary_contracts[file_name][contract_name + suffix] = contract
            merged += 1

    logger.debug("Merged %d secondary contract(s)", merged)
    return primary_contracts


# ---------------------------------------------------------------------------
# Step 4: Result assembly
# ---------------------------------------------------------------------------


def reconcile(
    primary_output: Dict[str, Any],
    secondary_output: Dict[str, Any],
    original_input: CompilerInput,
    convention: MarkerConvention,
) -> Dict[str, Any]:
    """Reconcile two raw compiler outputs into one standard-JSON output.

    Args:
        primary_output: Raw output of the primary backend.
        secondary_output: Raw output of the secondary backend.
        original_input: The unified input both partitions came from; used to
                        look up markers for diagnostic demotion.
        convention: The active marker convention.

    Returns:
        Dict with "errors", "contracts" and "sources". contracts is the
        primary output's table with secondary contracts merged in; sources
        is the primary output's source metadata.
    """
    secondary_errors = annotate_diagnostics(
        list(secondary_output.get("errors") or []),
        original_input,
        convention,
    )
    errors = merge_diagnostics(secondary_errors, primary_output.get("errors") or [])

    contracts = primary_output.get("contracts")
    if contracts is None:
        contracts = {}
    merge_contracts(
        contracts,
        secondary_output.get("contracts") or {},
        convention.suffix,
    )

    return {
        "errors": errors,
        "contracts": contracts,
        "sources": primary_output.get("sources") or {},
    }
