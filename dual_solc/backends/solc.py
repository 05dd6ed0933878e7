"""Native solc backend — runs a solc executable in standard-JSON mode.

WHY: The primary pipeline is the ordinary native compiler. Every file is
always compiled by it, and its output is the skeleton the secondary
artifacts are merged into.

HOW: Serializes the input to JSON, pipes it to ``solc --standard-json``
and parses stdout.

RULES:
- executable defaults to config.PRIMARY_PATH
- Extra command-line arguments (e.g. --allow-paths) are appended as given
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from dual_solc.backends.base import BaseBackend, parse_output, run_process
from dual_solc.config import PRIMARY_PATH


class SolcBackend(BaseBackend):
    """Compile with a native solc binary."""

    def __init__(
        self,
        executable: Optional[str] = None,
        extra_args: Optional[List[str]] = None,
    ) -> None:
        self.executable = executable or PRIMARY_PATH
        self.extra_args = list(extra_args or [])

    @property
    def name(self) -> str:
        return "solc (native)"

    async def compile(self, compiler_input: Dict[str, Any]) -> Dict[str, Any]:
        command = [self.executable, "--standard-json"] + self.extra_args
        returncode, stdout, stderr = await run_process(
            command,
            json.dumps(compiler_input).encode("utf-8"),
        )
        return parse_output(self.name, returncode, stdout, stderr)
