"""Data model shared by the splitter, reconciler and orchestrator.

WHY: The splitter and reconciler both need to agree on which marker is
active, what the marker literals look like and which suffix tags secondary
artifacts. Keeping those rules in one value type prevents the two stages
from drifting apart.

HOW: Two small types and one value class:
  MarkerPolicy      — which files the secondary backend receives
  MarkerConvention  — policy + tag, derives the marker literals and suffix
  CompilerInput     — typed view over a standard-JSON compiler input

RULES:
- Compiler outputs stay plain dicts; the merged result must have exactly
  the standard-JSON output shape so existing tooling can consume it
- Source entries are passed through untouched (extra keys such as
  "urls" or "keccak256" survive)
- Markers are detected by substring scan, never by parsing Solidity
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict

SOLIDITY_LANGUAGE = "Solidity"

NO_INPUT_SOURCES_MESSAGE = "No input sources specified."
"""Boilerplate diagnostic solc emits whenever an input has no sources."""


class MarkerPolicy(str, enum.Enum):
    """Which source files are handed to the secondary backend.

    RULES:
    - opt-out: every file unless it carries the opt-out marker
    - opt-in: only files carrying the opt-in marker
    - all: every file, regardless of markers (pair with demotion)
    """

    OPT_OUT = "opt-out"
    OPT_IN = "opt-in"
    ALL = "all"


@dataclass(frozen=True)
class MarkerConvention:
    """The active marker convention, set once per configuration.

    WHY: Two conventions coexisted over the system's history: opting files
    out with ``// @unsupported: <tag>`` and opting them in with
    ``// @supports: <tag>``. Both are valid configurations.

    RULES:
    - tag names the secondary target ("ovm") and builds the suffix ".ovm"
    - demote_marked_errors turns secondary errors in opt-out-marked files
      into warnings instead of annotating them
    - demote_unless_opted_in turns secondary errors in files lacking the
      opt-in marker into warnings (pair with the "all" policy)
    """

    policy: MarkerPolicy = MarkerPolicy.OPT_OUT
    tag: str = "ovm"
    demote_marked_errors: bool = False
    demote_unless_opted_in: bool = False

    @property
    def opt_out_marker(self) -> str:
        return "// @unsupported: {}".format(self.tag)

    @property
    def opt_in_marker(self) -> str:
        return "// @supports: {}".format(self.tag)

    @property
    def active_marker(self) -> str:
        """The marker that controls partitioning under the current policy."""
        if self.policy is MarkerPolicy.OPT_IN:
            return self.opt_in_marker
        return self.opt_out_marker

    @property
    def suffix(self) -> str:
        """Suffix appended to secondary contract and link-reference names."""
        return ".{}".format(self.tag)

    @property
    def label(self) -> str:
        """Upper-case tag used in diagnostic banners, e.g. "OVM"."""
        return self.tag.upper()


@dataclass
class CompilerInput:
    """A standard-JSON compiler input.

    Attributes:
        language: Dialect tag, always "Solidity" for inputs built here.
        sources: Ordered mapping of file path to source entry
                 (``{"content": "..."}`` plus any extra keys).
        settings: Opaque compiler settings, passed through unchanged.
    """

    language: str = SOLIDITY_LANGUAGE
    sources: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    settings: Any = None

    @classmethod
    def from_dict(cls, data: dict) -> CompilerInput:
        """Parse a raw standard-JSON input dict.

        RULES:
        - language defaults to "Solidity"
        - sources defaults to an empty mapping (legal, not an error)
        - settings is kept by reference
        """
        return cls(
            language=data.get("language", SOLIDITY_LANGUAGE),
            sources=dict(data.get("sources") or {}),
            settings=data.get("settings"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the standard-JSON input shape."""
        data = {
            "language": self.language,
            "sources": dict(self.sources),
        }  # type: Dict[str, Any]
        if self.settings is not None:
            data["settings"] = self.settings
        return data
