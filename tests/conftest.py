"""Shared test fixtures for the dual_solc test suite.

WHY: The splitter, reconciler, orchestrator, CLI and API tests all need
the same small project: one file opted out of the secondary compiler, one
file compiled by both, and canned outputs from each compiler.

HOW: Pytest fixtures provide the raw standard-JSON input, the primary and
secondary raw outputs, and a factory for fake backends that return canned
outputs (or raise) without running any compiler.

RULES:
- Every fixture returns fresh dicts; reconciliation mutates in place
- The default convention in tests uses tag "secondary" so suffixes read
  ".secondary"
- Fake backends record the input they were given
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any, Dict, List, Optional

import pytest

from dual_solc.backends.base import BaseBackend
from dual_solc.core.ir import MarkerConvention, MarkerPolicy


# ---------------------------------------------------------------------------
# Sample project
# ---------------------------------------------------------------------------

A_SOL = """// SPDX-License-Identifier: MIT
// @unsupported: secondary
pragma solidity ^0.7.6;

contract Foo {}
"""

B_SOL = """// SPDX-License-Identifier: MIT
pragma solidity ^0.7.6;

import "./Lib.sol";

contract Bar {
    function f() public pure returns (uint256) { return Lib.g(); }
}
"""

SETTINGS = {
    "optimizer": {"enabled": True, "runs": 200},
    "outputSelection": {"*": {"*": ["abi", "evm.bytecode"]}},
}

PRIMARY_OUTPUT: Dict[str, Any] = {
    "errors": [
        {
            "severity": "warning",
            "message": "Unused local variable.",
            "formattedMessage": "Warning: Unused local variable.",
            "sourceLocation": {"file": "B.sol", "start": 10, "end": 20},
        },
    ],
    "contracts": {
        "A.sol": {
            "Foo": {"abi": [], "evm": {"bytecode": {"object": "6080a0", "linkReferences": {}}}},
        },
        "B.sol": {
            "Bar": {
                "abi": [],
                "evm": {
                    "bytecode": {
                        "object": "6080b0",
                        "linkReferences": {"Lib.sol": {"Lib": [{"start": 5, "length": 20}]}},
                    }
                },
            },
        },
    },
    "sources": {"A.sol": {"id": 0}, "B.sol": {"id": 1}},
}

SECONDARY_OUTPUT: Dict[str, Any] = {
    "errors": [],
    "contracts": {
        "B.sol": {
            "Bar": {
                "abi": [],
                "evm": {
                    "bytecode": {
                        "object": "5b5b5b",
                        "linkReferences": {"Lib.sol": {"Lib": [{"start": 7, "length": 20}]}},
                    }
                },
            },
        },
    },
    "sources": {"B.sol": {"id": 0, "ast": {"nodeType": "SourceUnit"}}},
}


@pytest.fixture
def sample_input():
    """Standard-JSON input: A.sol opted out of the secondary compiler, B.sol not."""
    return {
        "language": "Solidity",
        "sources": {
            "A.sol": {"content": A_SOL},
            "B.sol": {"content": B_SOL},
        },
        "settings": copy.deepcopy(SETTINGS),
    }


@pytest.fixture
def primary_output():
    """Raw primary (native) compiler output for the sample project."""
    return copy.deepcopy(PRIMARY_OUTPUT)


@pytest.fixture
def secondary_output():
    """Raw secondary compiler output for the sample project (B.sol only)."""
    return copy.deepcopy(SECONDARY_OUTPUT)


@pytest.fixture
def opt_out_convention():
    return MarkerConvention(policy=MarkerPolicy.OPT_OUT, tag="secondary")


@pytest.fixture
def opt_in_convention():
    return MarkerConvention(policy=MarkerPolicy.OPT_IN, tag="secondary")


# ---------------------------------------------------------------------------
# Fake backends
# ---------------------------------------------------------------------------


class FakeBackend(BaseBackend):
    """Backend returning a canned output (or raising) after an optional delay."""

    def __init__(
        self,
        output: Optional[Dict[str, Any]] = None,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        label: str = "fake",
    ) -> None:
        self.output = output if output is not None else {"errors": [], "contracts": {}, "sources": {}}
        self.error = error
        self.delay = delay
        self.label = label
        self.inputs: List[Dict[str, Any]] = []
        self.cancelled = False

    @property
    def name(self) -> str:
        return self.label

    async def compile(self, compiler_input: Dict[str, Any]) -> Dict[str, Any]:
        self.inputs.append(compiler_input)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.output)


@pytest.fixture
def fake_backend():
    """Factory fixture: ``fake_backend(output=..., error=..., delay=...)``."""
    return FakeBackend
