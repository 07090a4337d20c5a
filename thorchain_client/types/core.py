"""
Core data types for the Thorchain client.

All transaction-side objects are frozen dataclasses: an `UnsignedTx` or a
`SignedTx` cannot change after construction. Amounts are base-10 integer
strings; nothing here touches floats.

Nothing here performs network I/O; these are just types and converters
between the REST JSON shapes and local objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

__all__ = [
    "Address",
    "Coin",
    "Account",
    "SendMessage",
    "Fee",
    "UnsignedTx",
    "StdSignature",
    "SignedTx",
    "BroadcastResult",
    "TxFilter",
    "TxResult",
    "TxRecord",
    "PaginatedTxs",
    "VaultTxParams",
    "NormalTxParams",
    "ReadOutcome",
    "MSG_SEND_TYPE",
    "PUBKEY_TYPE",
]

Address = str

MSG_SEND_TYPE = "thorchain/MsgSend"
PUBKEY_TYPE = "tendermint/PubKeySecp256k1"

T = TypeVar("T")


def _int(v: Any, default: int = 0) -> int:
    if v is None or v == "":
        return default
    return int(v)


@dataclass(frozen=True)
class Coin:
    denom: str
    amount: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, str) or not (self.amount.isascii() and self.amount.isdigit()):
            raise ValueError(f"coin amount must be a non-negative integer string, got {self.amount!r}")

    def to_dict(self) -> Dict[str, str]:
        return {"denom": self.denom, "amount": self.amount}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Coin":
        return cls(denom=str(d["denom"]), amount=str(d["amount"]))


def coins_from_list(items: Optional[Sequence[Mapping[str, Any]]]) -> Tuple[Coin, ...]:
    return tuple(Coin.from_dict(c) for c in (items or ()))


@dataclass(frozen=True)
class Account:
    address: Address
    account_number: int
    sequence: int
    coins: Tuple[Coin, ...] = ()

    @classmethod
    def from_rest(cls, d: Mapping[str, Any]) -> "Account":
        """
        Accepts either the bare BaseAccount fields or the amino envelope
        `{"type": "cosmos-sdk/Account", "value": {...}}`.
        """
        if "value" in d and isinstance(d["value"], Mapping):
            d = d["value"]
        return cls(
            address=str(d.get("address") or ""),
            account_number=_int(d.get("account_number")),
            sequence=_int(d.get("sequence")),
            coins=coins_from_list(d.get("coins")),
        )


@dataclass(frozen=True)
class SendMessage:
    from_address: Address
    to_address: Address
    amount: Tuple[Coin, ...]

    def to_amino(self) -> Dict[str, Any]:
        return {
            "type": MSG_SEND_TYPE,
            "value": {
                "from_address": self.from_address,
                "to_address": self.to_address,
                "amount": [c.to_dict() for c in self.amount],
            },
        }

    @classmethod
    def from_amino(cls, d: Mapping[str, Any]) -> "SendMessage":
        v = d.get("value", d)
        return cls(
            from_address=str(v["from_address"]),
            to_address=str(v["to_address"]),
            amount=coins_from_list(v.get("amount")),
        )


@dataclass(frozen=True)
class Fee:
    amount: Tuple[Coin, ...] = ()
    gas: str = "200000"

    def to_dict(self) -> Dict[str, Any]:
        return {"amount": [c.to_dict() for c in self.amount], "gas": str(self.gas)}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Fee":
        return cls(amount=coins_from_list(d.get("amount")), gas=str(d.get("gas") or "200000"))


@dataclass(frozen=True)
class UnsignedTx:
    messages: Tuple[SendMessage, ...]
    fee: Fee
    memo: str
    account_number: int
    sequence: int
    chain_id: str


@dataclass(frozen=True)
class StdSignature:
    pub_key: bytes
    signature: bytes
    account_number: int
    sequence: int


@dataclass(frozen=True)
class SignedTx:
    unsigned: UnsignedTx
    signatures: Tuple[StdSignature, ...]
    # Exact bytes the signer consumed; kept for verification and audit.
    sign_bytes: bytes = field(repr=False, default=b"")


@dataclass(frozen=True)
class BroadcastResult:
    """
    Outcome of submitting a signed tx. A non-zero `code` means the chain
    rejected it (bad sequence, insufficient funds, ...) and `raw_log` says why.
    """

    tx_hash: str
    height: int
    raw_log: str
    gas_wanted: int = 0
    gas_used: int = 0
    code: Optional[int] = None
    logs: Optional[List[Any]] = None

    @property
    def ok(self) -> bool:
        return not self.code

    @classmethod
    def from_rest(cls, d: Mapping[str, Any]) -> "BroadcastResult":
        code = d.get("code")
        return cls(
            tx_hash=str(d.get("txhash") or d.get("hash") or ""),
            height=_int(d.get("height")),
            raw_log=str(d.get("raw_log") or d.get("error") or ""),
            gas_wanted=_int(d.get("gas_wanted")),
            gas_used=_int(d.get("gas_used")),
            code=int(code) if code not in (None, "") else None,
            logs=d.get("logs"),
        )


@dataclass(frozen=True)
class TxFilter:
    """All fields optional; an empty filter is an unconstrained search."""

    action: Optional[str] = None
    sender: Optional[Address] = None
    page: Optional[int] = None
    limit: Optional[int] = None
    min_height: Optional[int] = None
    max_height: Optional[int] = None

    def to_query(self) -> Dict[str, str]:
        pairs = (
            ("message.action", self.action),
            ("message.sender", self.sender),
            ("page", self.page),
            ("limit", self.limit),
            ("tx.minheight", self.min_height),
            ("tx.maxheight", self.max_height),
        )
        return {k: str(v) for k, v in pairs if v is not None}


@dataclass(frozen=True)
class TxResult:
    log: str
    gas_wanted: int
    gas_used: int
    tags: Optional[List[Any]] = None


@dataclass(frozen=True)
class TxRecord:
    hash: str
    height: int
    raw_tx: Optional[Dict[str, Any]]
    result: TxResult


@dataclass(frozen=True)
class PaginatedTxs:
    total_count: int
    count: int
    page_number: int
    page_total: int
    limit: int
    txs: Tuple[TxRecord, ...]


@dataclass(frozen=True)
class VaultTxParams:
    address_to: Address
    amount: Any
    asset: str
    memo: str
    address_from: Optional[Address] = None


@dataclass(frozen=True)
class NormalTxParams:
    address_to: Address
    amount: Any
    asset: str
    address_from: Optional[Address] = None


@dataclass(frozen=True)
class ReadOutcome(Generic[T]):
    """
    Explicit result of a read-path operation. Read paths degrade instead of
    raising: `value` is None and `error` holds the cause.
    """

    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None
