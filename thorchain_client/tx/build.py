"""
thorchain_client.tx.build
=========================

Builders for Thorchain MsgSend transactions.

The builders return frozen dataclasses from `thorchain_client.types.core`.
Feed the resulting `UnsignedTx` into `wallet.signer.sign` and the `SignedTx`
into `tx.send.broadcast`.

Examples
--------
    from thorchain_client.tx.build import build_send_message, build_unsigned_tx, coins_from_amount

    msg = build_send_message(
        "tthor1...", "tthor1...",
        coins_from_amount("100000000", "rune"),
        prefix="tthor",
    )
    unsigned = build_unsigned_tx(msg, account, memo="SWAP:BNB.BNB", chain_id="thorchain")

Account number and sequence are copied from `account` at call time. The caller
must fetch the account immediately before; a stale sequence is rejected by the
chain, not detected here.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from .. import address as address_codec
from ..config import DEFAULT_GAS
from ..errors import InvalidAddress, InvalidTxParams
from ..types.core import Account, Address, Coin, Fee, SendMessage, UnsignedTx

__all__ = [
    "coins_from_amount",
    "build_send_message",
    "build_unsigned_tx",
    "unsigned_tx_from_skeleton",
]

Amount = Union[str, int, Decimal]


def _normalize_amount(amount: Amount) -> str:
    if isinstance(amount, bool) or isinstance(amount, float):
        raise InvalidTxParams(f"amount must be an integer string, int or Decimal, got {type(amount).__name__}")
    if isinstance(amount, int):
        value = amount
    else:
        try:
            d = Decimal(str(amount).strip())
        except InvalidOperation:
            raise InvalidTxParams(f"amount is not a number: {amount!r}") from None
        if not d.is_finite() or d != d.to_integral_value():
            raise InvalidTxParams(f"amount must be an integral number of base units: {amount!r}")
        value = int(d)
    if value < 0:
        raise InvalidTxParams(f"amount must be non-negative: {amount!r}")
    return str(value)


def coins_from_amount(amount: Amount, asset: str) -> Tuple[Coin, ...]:
    """
    Single-coin list for `amount` of `asset`. Amounts are in base units; a
    fractional value is rejected rather than rounded.
    """
    denom = (asset or "").strip()
    if not denom:
        raise InvalidTxParams("asset (denom) must be a non-empty string")
    return (Coin(denom=denom, amount=_normalize_amount(amount)),)


def _check_coins(coins: Sequence[Coin]) -> Tuple[Coin, ...]:
    if not coins:
        raise InvalidTxParams("coin list must not be empty")
    out = []
    for c in coins:
        if not c.denom:
            raise InvalidTxParams("coin denom must not be empty")
        if not (c.amount.isascii() and c.amount.isdigit()):
            raise InvalidTxParams(f"coin amount must be an integer string: {c.amount!r}")
        out.append(c)
    return tuple(out)


def build_send_message(
    from_address: Address,
    to_address: Address,
    coins: Sequence[Coin],
    prefix: str,
) -> SendMessage:
    if not address_codec.validate(from_address, prefix):
        raise InvalidAddress(from_address, expected_prefix=prefix, field="from")
    if not address_codec.validate(to_address, prefix):
        raise InvalidAddress(to_address, expected_prefix=prefix, field="to")
    return SendMessage(
        from_address=from_address,
        to_address=to_address,
        amount=_check_coins(coins),
    )


def build_unsigned_tx(
    message: SendMessage,
    account: Account,
    memo: Optional[str] = None,
    *,
    chain_id: str,
    fee: Optional[Fee] = None,
) -> UnsignedTx:
    return UnsignedTx(
        messages=(message,),
        fee=fee if fee is not None else Fee(amount=(), gas=DEFAULT_GAS),
        memo=memo or "",
        account_number=account.account_number,
        sequence=account.sequence,
        chain_id=chain_id,
    )


def unsigned_tx_from_skeleton(
    skeleton: Mapping[str, Any],
    account: Account,
    chain_id: str,
    *,
    message: SendMessage,
    memo: Optional[str] = None,
) -> UnsignedTx:
    """
    Adopt a server-built StdTx skeleton, e.g. the `value` of the response from
    `POST /bank/accounts/{to}/transfers`.

    The skeleton must carry exactly one MsgSend equal to `message` (same from,
    to and coins) and the requested `memo`; anything else raises
    InvalidTxParams and nothing is signed. Only the fee is taken from the
    server.
    """
    body = skeleton.get("value", skeleton)
    if not isinstance(body, Mapping):
        raise InvalidTxParams("server-built transaction is not an object")
    msgs = body.get("msg") or []
    if len(msgs) != 1:
        raise InvalidTxParams(f"server-built transaction must carry exactly one message, got {len(msgs)}")
    raw = msgs[0]
    if raw.get("type") not in (None, "thorchain/MsgSend", "cosmos-sdk/MsgSend"):
        raise InvalidTxParams(f"unsupported message type in skeleton: {raw.get('type')!r}")
    try:
        remote = SendMessage.from_amino(raw)
        fee = Fee.from_dict(body.get("fee") or {})
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InvalidTxParams(f"malformed server-built transaction: {e}") from e
    if remote != message:
        raise InvalidTxParams(
            f"server-built transfer {remote.from_address} -> {remote.to_address} "
            f"{[c.to_dict() for c in remote.amount]} does not match the request"
        )
    expected_memo = memo or ""
    remote_memo = str(body.get("memo") or "")
    if remote_memo != expected_memo:
        raise InvalidTxParams(f"server-built memo {remote_memo!r} does not match the request {expected_memo!r}")
    return UnsignedTx(
        messages=(message,),
        fee=fee,
        memo=expected_memo,
        account_number=account.account_number,
        sequence=account.sequence,
        chain_id=chain_id,
    )
