"""solc-js backend — runs a soljson.js compiler module under node.

WHY: The secondary compiler (e.g. the OVM fork of solc) is distributed as
an emscripten soljson.js module rather than a native binary. Node loads
it through solc-js's wrapper and compiles the standard-JSON input.

HOW: A short node loader resolves the configured module (a path or a node
module id) relative to the working directory, wraps it with
``solc/wrapper`` and writes ``compile(stdin)`` to stdout. The module id is
passed through the DUAL_SOLC_SOLJSON environment variable.

RULES:
- module defaults to config.SECONDARY_PATH, node to config.NODE_PATH
- A "Cannot find module" failure becomes CompilerNotFoundError with a fixed
  message naming the package node could not find (the soljson package or
  "solc" for the wrapper)
- Any other failure is raised verbatim as CompilerBackendError
- Finding or downloading the module is the caller's job, not this one's
"""

from __future__ import annotations

import json
import os
import re
from typing import Any, Dict, Optional

from dual_solc.backends.base import (
    BaseBackend,
    CompilerBackendError,
    CompilerNotFoundError,
    parse_output,
    run_process,
)
from dual_solc.config import NODE_PATH, SECONDARY_PATH

_MODULE_NOT_FOUND = "Cannot find module"
_MISSING_MODULE_RE = re.compile(r"Cannot find module '([^']+)'")

_LOADER_SCRIPT = """
const modulePath = require.resolve(process.env.DUAL_SOLC_SOLJSON, { paths: [process.cwd()] });
const solc = require('solc/wrapper')(require(modulePath));
let input = '';
process.stdin.setEncoding('utf8');
process.stdin.on('data', (chunk) => { input += chunk; });
process.stdin.on('end', () => { process.stdout.write(solc.compile(input)); });
"""


def package_name(module_id: str) -> str:
    """Return the npm package that provides a module id.

    RULES:
    - "@scope/name/file.js" → "@scope/name"
    - "name/file.js" → "name"
    - Relative or absolute paths are returned unchanged
    """
    if module_id.startswith((".", "/")) or os.path.isabs(module_id):
        return module_id
    parts = module_id.split("/")
    if module_id.startswith("@") and len(parts) >= 2:
        return "/".join(parts[:2])
    return parts[0]


class SolcJsBackend(BaseBackend):
    """Compile with a soljson.js module under node."""

    def __init__(
        self,
        module: Optional[str] = None,
        node_path: Optional[str] = None,
    ) -> None:
        self.module = module or SECONDARY_PATH
        self.node_path = node_path or NODE_PATH

    @property
    def name(self) -> str:
        return "solc-js ({})".format(package_name(self.module))

    def missing_package(self, stderr: str) -> str:
        """Name the npm package to install for a "Cannot find module" failure.

        RULES:
        - The module id is taken from node's "Cannot find module '<id>'" line
        - A missing soljson module (or an unparseable message) names the
          configured module's package
        - Any other missing module (e.g. "solc/wrapper") names its own package
        """
        match = _MISSING_MODULE_RE.search(stderr)
        if match is None or match.group(1) == self.module:
            return package_name(self.module)
        return package_name(match.group(1))

    async def compile(self, compiler_input: Dict[str, Any]) -> Dict[str, Any]:
        env = dict(os.environ)
        env["DUAL_SOLC_SOLJSON"] = self.module

        returncode, stdout, stderr = await run_process(
            [self.node_path, "-e", _LOADER_SCRIPT],
            json.dumps(compiler_input).encode("utf-8"),
            env=env,
        )
        try:
            return parse_output(self.name, returncode, stdout, stderr)
        except CompilerBackendError as exc:
            if _MODULE_NOT_FOUND in exc.stderr:
                raise CompilerNotFoundError(
                    'dual_solc: Could not find "{}" in your node_modules.'.format(
                        self.missing_package(exc.stderr)
                    ),
                    stderr=exc.stderr,
                    returncode=exc.returncode,
                ) from exc
            raise
