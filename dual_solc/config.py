"""Configuration constants, backend defaults, and .env loading.

WHY: Centralizes every configurable value (which executables to run, which
marker convention is active, the tag used for suffixes) so they are easy to
find and override. Nothing here is buried in the splitter or reconciler.

HOW: python-dotenv loads the .env file on import. Defaults are module-level
strings read from the environment. load_marker_convention() turns the
marker settings into a MarkerConvention value for the core.

RULES:
- All defaults can be overridden via environment variables
- The marker policy must be one of "opt-out", "opt-in", "all"
- Resolving or downloading compiler binaries is NOT done here; paths and
  module identifiers are taken as given
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from dual_solc.core.ir import MarkerConvention, MarkerPolicy

# Load .env from the project root (where the command is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Backend defaults
# ---------------------------------------------------------------------------

PRIMARY_BACKEND = os.getenv("DUAL_SOLC_PRIMARY_BACKEND", "solc")
PRIMARY_PATH = os.getenv("DUAL_SOLC_PRIMARY_PATH", "solc")

SECONDARY_BACKEND = os.getenv("DUAL_SOLC_SECONDARY_BACKEND", "solcjs")
SECONDARY_PATH = os.getenv("DUAL_SOLC_SECONDARY_PATH", "@eth-optimism/solc/soljson.js")
"""soljson module for the secondary compiler: a filesystem path or a node module id."""

NODE_PATH = os.getenv("DUAL_SOLC_NODE_PATH", "node")

# ---------------------------------------------------------------------------
# Marker convention defaults
# ---------------------------------------------------------------------------

DEFAULT_MARKER_POLICY = os.getenv("DUAL_SOLC_MARKER_POLICY", MarkerPolicy.OPT_OUT.value)
DEFAULT_TAG = os.getenv("DUAL_SOLC_TAG", "ovm")
DEFAULT_DEMOTE_MARKED_ERRORS = (
    os.getenv("DUAL_SOLC_DEMOTE_MARKED_ERRORS", "false").lower() == "true"
)
DEFAULT_DEMOTE_UNLESS_OPTED_IN = (
    os.getenv("DUAL_SOLC_DEMOTE_UNLESS_OPTED_IN", "false").lower() == "true"
)


def parse_policy(value: str) -> MarkerPolicy:
    """Parse a marker policy name, raising ValueError for unknown names."""
    try:
        return MarkerPolicy(value.strip().lower())
    except ValueError:
        available = ", ".join(p.value for p in MarkerPolicy)
        raise ValueError(
            "Unknown marker policy '{}'. Available policies: {}".format(value, available)
        ) from None


def load_marker_convention(
    policy: str | None = None,
    tag: str | None = None,
    demote_marked_errors: bool | None = None,
    demote_unless_opted_in: bool | None = None,
) -> MarkerConvention:
    """Build the active MarkerConvention from arguments and environment.

    WHY: The CLI, HTTP API and DualCompiler.from_config() all need the same
    convention; explicit arguments (flags, request fields) win over the
    environment defaults.

    RULES:
    - Raises ValueError if the policy name is unknown
    - Raises ValueError if the tag is empty
    - None for any argument means "use the environment default"
    """
    resolved_tag = (tag if tag is not None else DEFAULT_TAG).strip()
    if not resolved_tag:
        raise ValueError("Marker tag must not be empty. Set DUAL_SOLC_TAG in the .env file.")

    return MarkerConvention(
        policy=parse_policy(policy if policy is not None else DEFAULT_MARKER_POLICY),
        tag=resolved_tag,
        demote_marked_errors=(
            DEFAULT_DEMOTE_MARKED_ERRORS
            if demote_marked_errors is None
            else demote_marked_errors
        ),
        demote_unless_opted_in=(
            DEFAULT_DEMOTE_UNLESS_OPTED_IN
            if demote_unless_opted_in is None
            else demote_unless_opted_in
        ),
    )
