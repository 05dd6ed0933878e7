"""Command-line interface for the dual-backend Solidity compiler.

WHY: Build scripts need a way to run a dual compilation without writing
Python: hand over a standard-JSON input file, get the merged standard-JSON
output back, exactly as with ``solc --standard-json``.

HOW: Uses argparse to accept the input path (or "-" for stdin), marker
convention overrides and backend paths. Builds a DualCompiler from config
plus flags and runs it via asyncio.run(). Status messages go to stderr;
the merged output goes to --output or stdout.

RULES:
- Positional argument: standard-JSON input file, "-" reads stdin
- Output JSON is written to --output, or stdout when omitted
- Status output goes to stderr (not stdout)
- Fatal errors (invalid input, backend failures) print "Error: ..." and
  exit 1; compiler diagnostics are part of the output and exit 0
- --verbose enables DEBUG logging for the pipeline modules
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dual_solc import config
from dual_solc.backends import CompilerBackendError
from dual_solc.core.ir import MarkerPolicy
from dual_solc.orchestrator import DualCompiler


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _read_input(source: str) -> Dict[str, Any]:
    """Load the standard-JSON input from a file path or stdin ("-")."""
    if source == "-":
        text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.is_file():
            raise ValueError("File not found: {}".format(path.resolve()))
        text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError("Input is not valid JSON: {}".format(exc)) from exc
    if not isinstance(data, dict):
        raise ValueError("Input must be a JSON object")
    return data


def _write_output(output: Dict[str, Any], destination: Optional[str]) -> None:
    content = json.dumps(output, indent=2)
    if destination:
        Path(destination).write_text(content + "\n", encoding="utf-8")
        _status("Saved: {}".format(destination))
    else:
        sys.stdout.write(content + "\n")
        sys.stdout.flush()


def _summarize(output: Dict[str, Any], suffix: str) -> None:
    """Report diagnostic and contract counts to stderr."""
    severities = [e.get("severity") for e in output.get("errors", [])]
    contracts = [
        name
        for file_contracts in output.get("contracts", {}).values()
        for name in file_contracts
    ]
    secondary = [name for name in contracts if name.endswith(suffix)]
    _status("  {} error(s), {} warning(s)".format(
        severities.count("error"), severities.count("warning"),
    ))
    _status("  {} contract(s), {} from the secondary compiler".format(
        len(contracts), len(secondary),
    ))


async def _run_pipeline(args: argparse.Namespace) -> int:
    """Execute the dual compilation and write the output.

    Returns:
        Process exit code: 0 on success, 1 on a fatal error.
    """
    try:
        compiler_input = _read_input(args.input_file)
        convention = config.load_marker_convention(
            policy=args.policy,
            tag=args.tag,
            demote_marked_errors=args.demote_marked_errors,
            demote_unless_opted_in=args.demote_unless_opted_in,
        )
        compiler = DualCompiler.from_config(
            convention=convention,
            primary_path=args.primary_path,
            secondary_path=args.secondary_path,
            node_path=args.node_path,
        )
    except ValueError as e:
        # Config and input errors (unknown policy, missing file, bad JSON)
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    _status("Compiling {} file(s) with {} and {}...".format(
        len(compiler_input.get("sources") or {}),
        compiler.primary.name,
        compiler.secondary.name,
    ))

    try:
        output = await compiler.compile(compiler_input)
    except (ValueError, CompilerBackendError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    _summarize(output, convention.suffix)
    _write_output(output, args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="dual_solc",
        description="Compile a Solidity standard-JSON input with a primary and a "
                    "secondary compiler and merge the outputs.",
    )

    parser.add_argument(
        "input_file",
        help='Path to the standard-JSON input file, or "-" to read stdin.',
    )

    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="File to write the merged output to (default: stdout).",
    )

    parser.add_argument(
        "--policy",
        choices=[p.value for p in MarkerPolicy],
        default=None,
        help="Which files the secondary compiler receives "
             "(default: {}).".format(config.DEFAULT_MARKER_POLICY),
    )

    parser.add_argument(
        "--tag",
        default=None,
        help="Marker tag and artifact suffix (default: {}).".format(config.DEFAULT_TAG),
    )

    parser.add_argument(
        "--demote-marked-errors",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Turn secondary errors in files marked unsupported into warnings.",
    )

    parser.add_argument(
        "--demote-unless-opted-in",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Turn secondary errors in files without the opt-in marker into warnings.",
    )

    parser.add_argument(
        "--primary-path",
        default=None,
        help="Primary solc executable (default: {}).".format(config.PRIMARY_PATH),
    )

    parser.add_argument(
        "--secondary-path",
        default=None,
        help="Secondary soljson module path or node module id "
             "(default: {}).".format(config.SECONDARY_PATH),
    )

    parser.add_argument(
        "--node-path",
        default=None,
        help="node executable used for solc-js (default: {}).".format(config.NODE_PATH),
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log pipeline details to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    sys.exit(asyncio.run(_run_pipeline(args)))


if __name__ == "__main__":
    main()
