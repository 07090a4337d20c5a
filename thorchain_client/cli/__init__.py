"""
thorchain_client.cli
====================

Command-line interface for the Thorchain client.

The Typer app lives in :mod:`thorchain_client.cli.main` and is exposed via the
console script `thorchain-client`. Typer is only imported when the CLI is
actually used.

Quick usage
-----------
- From Python:
    >>> from thorchain_client.cli.main import main
    >>> main(["version"])

- From shell (installed as a console script):
    $ thorchain-client --help
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, List, Optional

__all__: List[str] = ["app", "run"]

_SUBMODULE = "thorchain_client.cli.main"


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name == "app":
        return import_module(_SUBMODULE).app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def run(argv: Optional[list[str]] = None) -> int:
    """Run the CLI and return its exit code."""
    return int(import_module(_SUBMODULE).main(argv))
