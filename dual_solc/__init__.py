"""Dual-backend Solidity compiler — one input, two compilers, one output.

WHY: Some deployment targets need contracts compiled by an alternate
compiler (e.g. the OVM fork of solc) alongside the native EVM build.
Artifact writers and test runners only understand a single standard-JSON
output, so both builds must be folded into one without name clashes.

HOW: Three-stage pipeline — split (core.splitter), compile (backends,
run concurrently), reconcile (core.reconciler). DualCompiler in
orchestrator.py wires the stages together. Each stage is independently
testable.

RULES:
- The primary backend always compiles every file
- Secondary artifacts are suffixed with ".<tag>" in the merged output
- The merged output has exactly the standard-JSON output shape
"""

__version__ = "0.1.0"
