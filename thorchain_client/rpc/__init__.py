"""
thorchain_client.rpc
--------------------

REST helpers for the legacy Cosmos LCD interface.

This package exposes:
- RestClient: async HTTP client with retries for idempotent reads (see .http)
- query:      account, balance and transaction-search calls (see .query)

Import style:

    from thorchain_client.rpc import RestClient, query
    async with RestClient() as rest:
        account = await query.fetch_account(rest, net, "tthor1...")
"""

from __future__ import annotations

from . import query as query
from .http import RestClient, RestResponse

__all__ = ["RestClient", "RestResponse", "query"]
