"""Core splitting, reconciliation and data-model modules.

WHY: The core holds the only real data-transformation logic in the
package: deciding which backend sees which file, and folding two compiler
outputs into one. It does no I/O, so it is tested without any compiler.

HOW: ir.py defines the marker convention and input value type,
splitter.py partitions inputs, reconciler.py merges outputs, schema.py
checks the standard-JSON shapes.

RULES:
- No subprocesses, network or filesystem access in this package
- Output dicts keep the exact standard-JSON output shape
"""
