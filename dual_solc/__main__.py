"""Package entry point for ``python -m dual_solc``.

WHY: Users run the compiler as ``python -m dual_solc input.json`` for a
one-shot compile, or ``python -m dual_solc --serve`` to start the HTTP API.

HOW: Checks sys.argv for the ``--serve`` flag. If present, starts the
FastAPI app under uvicorn. Otherwise, delegates to the CLI's main().
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from dual_solc.server.app import run_api
        run_api()
    else:
        from dual_solc.cli import main
        main()
