"""
Version helpers for the Thorchain Python client.
We keep a static __version__ (PEP 440) for the CLI and the HTTP User-Agent.
"""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"


def user_agent() -> str:
    return f"thorchain-client-py/{__version__}"


__all__ = ["__version__", "user_agent"]
