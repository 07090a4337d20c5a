"""
thorchain_client.tx.send
========================

Submit signed transactions to a node via the legacy REST API.

Primary entry points
--------------------
- broadcast(rest, net, signed_tx, mode="sync") -> BroadcastResult
    POSTs `{"tx": StdTx, "mode": mode}` to `/txs`. Sent exactly once.

- tx_hash(signed_tx) -> str
    Uppercase hex sha256 of the JSON-encoded wire tx. Informational only: the
    node's hash is computed over the amino binary encoding, so trust the
    `tx_hash` it returns in the `BroadcastResult`.

A chain rejection (bad sequence, insufficient funds, ...) is not an exception:
it comes back as a `BroadcastResult` with a non-zero `code` and the reason in
`raw_log`. Only failures to reach the node raise `TransportError`.
"""

from __future__ import annotations

import logging
from typing import Mapping

from ..config import BROADCAST_MODES, NetworkConfig
from ..errors import TransportError
from ..rpc.http import RestClient
from ..types.core import BroadcastResult, SignedTx
from ..utils.hash import sha256_hex
from .encode import broadcast_body, canonical_json, std_tx

log = logging.getLogger(__name__)

__all__ = ["broadcast", "tx_hash"]


def tx_hash(signed_tx: SignedTx) -> str:
    return sha256_hex(canonical_json(std_tx(signed_tx)), upper=True)


async def broadcast(
    rest: RestClient,
    net: NetworkConfig,
    signed_tx: SignedTx,
    mode: str = "sync",
) -> BroadcastResult:
    if mode not in BROADCAST_MODES:
        raise ValueError(f"broadcast mode must be one of {BROADCAST_MODES}, got {mode!r}")

    url = net.rest("/txs")
    resp = await rest.post(url, broadcast_body(signed_tx, mode))

    if not isinstance(resp.data, Mapping):
        raise TransportError(
            f"Unexpected broadcast response (HTTP {resp.status})",
            url=url,
            http_status=resp.status,
            data=resp.text[:256],
        )

    try:
        result = BroadcastResult.from_rest(resp.data)
    except (TypeError, ValueError) as e:
        raise TransportError(
            f"Malformed broadcast response (HTTP {resp.status})",
            url=url,
            http_status=resp.status,
            data=resp.text[:256],
        ) from e
    if not resp.ok:
        # The node refused the request body (e.g. a malformed tx); surface its
        # error through raw_log like any other rejection.
        log.warning("broadcast rejected by REST server (HTTP %d): %s", resp.status, result.raw_log)
        if result.code is None:
            result = BroadcastResult(
                tx_hash=result.tx_hash,
                height=result.height,
                raw_log=result.raw_log,
                gas_wanted=result.gas_wanted,
                gas_used=result.gas_used,
                code=resp.status,
                logs=result.logs,
            )
        return result

    if result.code:
        log.warning("transaction %s rejected by chain (code %s): %s", result.tx_hash, result.code, result.raw_log)
    else:
        log.info("broadcast %s mode=%s height=%d", result.tx_hash, mode, result.height)
    return result
