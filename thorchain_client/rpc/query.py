"""
thorchain_client.rpc.query
==========================

Read-only account and transaction queries against the legacy REST API.

    fetch_account(rest, net, address)          GET /auth/accounts/{address}
    fetch_balance(rest, net, address)          (coins of the above)
    search_transactions(rest, net, filter)     GET /txs?...
    fetch_unsigned_transfer(...)               POST /bank/accounts/{to}/transfers

Heights, account numbers and sequences arrive as decimal strings and are
converted to int here.

Transaction records are reshaped by `reshape_tx_record`. The backend field
names (`txhash`, `raw_log`, ...) are not a documented contract, so the
reshaper carries its own schema version and tolerates missing fields.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..config import NetworkConfig
from ..errors import AccountNotFound, TransportError
from ..types.core import Account, Coin, PaginatedTxs, TxFilter, TxRecord, TxResult
from .http import RestClient, RestResponse

log = logging.getLogger(__name__)

__all__ = [
    "TX_RECORD_SCHEMA_VERSION",
    "fetch_account",
    "fetch_balance",
    "search_transactions",
    "reshape_tx_record",
    "reshape_search_result",
    "fetch_unsigned_transfer",
]

TX_RECORD_SCHEMA_VERSION = 1


def _int(v: Any, default: int = 0) -> int:
    if v is None or v == "":
        return default
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _unwrap_result(data: Any) -> Any:
    # LCD responses are wrapped as {"height": "...", "result": ...}
    if isinstance(data, Mapping) and "result" in data:
        return data["result"]
    return data


def _error_text(resp: RestResponse) -> str:
    if isinstance(resp.data, Mapping) and resp.data.get("error"):
        return str(resp.data["error"])
    return resp.text


async def fetch_account(rest: RestClient, net: NetworkConfig, address: str) -> Account:
    """
    Fresh account state for `address`. Always hits the network; nothing cached.

    Raises
    ------
    AccountNotFound
        HTTP 404, or the node returned an empty account (unused address).
    TransportError
        Network failure after retries, or an unexpected HTTP status.
    """
    url = net.rest(f"/auth/accounts/{address}")
    resp = await rest.get(url)
    if resp.status == 404:
        raise AccountNotFound(address)
    if not resp.ok:
        raise TransportError(_error_text(resp) or f"HTTP {resp.status}", url=url, http_status=resp.status)

    result = _unwrap_result(resp.data)
    if not isinstance(result, Mapping):
        raise TransportError("Malformed account response", url=url, http_status=resp.status, data=resp.data)
    try:
        account = Account.from_rest(result)
    except (KeyError, TypeError, ValueError) as e:
        raise TransportError("Malformed account response", url=url, http_status=resp.status, data=str(e)) from e
    if not account.address:
        raise AccountNotFound(address)
    return account


async def fetch_balance(rest: RestClient, net: NetworkConfig, address: str) -> Tuple[Coin, ...]:
    account = await fetch_account(rest, net, address)
    return account.coins


def reshape_tx_record(raw: Mapping[str, Any]) -> TxRecord:
    """Map a backend tx record onto the local `TxRecord` schema (version 1)."""
    return TxRecord(
        hash=str(raw.get("txhash") or ""),
        height=_int(raw.get("height")),
        raw_tx=raw.get("tx"),
        result=TxResult(
            log=str(raw.get("raw_log") or ""),
            gas_wanted=_int(raw.get("gas_wanted")),
            gas_used=_int(raw.get("gas_used")),
            tags=raw.get("logs"),
        ),
    )


def reshape_search_result(data: Mapping[str, Any]) -> PaginatedTxs:
    # Backend order is preserved as-is.
    raw_txs: Sequence[Mapping[str, Any]] = data.get("txs") or ()
    return PaginatedTxs(
        total_count=_int(data.get("total_count")),
        count=_int(data.get("count")),
        page_number=_int(data.get("page_number")),
        page_total=_int(data.get("page_total")),
        limit=_int(data.get("limit")),
        txs=tuple(reshape_tx_record(t) for t in raw_txs),
    )


async def search_transactions(
    rest: RestClient,
    net: NetworkConfig,
    tx_filter: Optional[TxFilter] = None,
) -> PaginatedTxs:
    url = net.rest("/txs")
    params = (tx_filter or TxFilter()).to_query()
    resp = await rest.get(url, params=params or None)
    if not resp.ok:
        raise TransportError(_error_text(resp) or f"HTTP {resp.status}", url=url, http_status=resp.status)
    if not isinstance(resp.data, Mapping):
        raise TransportError("Malformed search response", url=url, http_status=resp.status, data=resp.data)
    try:
        return reshape_search_result(resp.data)
    except (AttributeError, TypeError) as e:
        raise TransportError("Malformed search response", url=url, http_status=resp.status, data=str(e)) from e


async def fetch_unsigned_transfer(
    rest: RestClient,
    net: NetworkConfig,
    from_address: str,
    to_address: str,
    coins: Sequence[Coin],
    account: Account,
    memo: str = "",
    *,
    gas: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Ask the node to build an unsigned StdTx for a bank transfer.
    Returns the skeleton (`{"msg": [...], "fee": {...}, "memo": ...}`).
    """
    url = net.rest(f"/bank/accounts/{to_address}/transfers")
    base_req: Dict[str, Any] = {
        "from": from_address,
        "memo": memo,
        "chain_id": net.chain_id,
        "account_number": str(account.account_number),
        "sequence": str(account.sequence),
        "simulate": False,
    }
    if gas is not None:
        base_req["gas"] = str(gas)
    body = {"base_req": base_req, "amount": [c.to_dict() for c in coins]}

    resp = await rest.post(url, body)
    if resp.status == 404:
        raise AccountNotFound(from_address)
    if not resp.ok or not isinstance(resp.data, Mapping):
        raise TransportError(
            _error_text(resp) or f"HTTP {resp.status}",
            url=url,
            http_status=resp.status,
            data=resp.data,
        )
    skeleton = resp.data.get("value", resp.data)
    log.debug("server-built transfer skeleton from %s to %s", from_address, to_address)
    return dict(skeleton)
