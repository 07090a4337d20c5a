"""
thorchain_client.client
=======================

High-level Thorchain wallet client.

    async with Client(network="testnet", phrase=PHRASE) as client:
        print(await client.get_address())
        print(await client.get_balance())
        result = await client.vault_tx(
            VaultTxParams(address_to=VAULT, amount="100000000", asset="rune", memo="SWAP:BNB.BNB")
        )

Key material follows a small state machine:

    NoPhrase --set_phrase--> PhraseSet --first use--> KeyComputed(phrase_hash, key)

Setting a different phrase goes back to PhraseSet and drops every derived
value; setting the same phrase again is a no-op. Addresses are cached per
(phrase hash, prefix), so switching networks derives a fresh address from the
same key.

Network-dependent values (REST URL, prefix, chain id) are recomputed from the
current `Network` on every read.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, Optional, Tuple, Union

import httpx

from . import address as address_codec
from .config import Network, NetworkConfig, SDKConfig
from .errors import (
    AccountNotFound,
    InvalidAddress,
    InvalidMnemonic,
    InvalidTxParams,
    MissingFromAddress,
    MissingPrivateKey,
    TransportError,
)
from .rpc import query
from .rpc.http import RestClient
from .tx.build import build_send_message, build_unsigned_tx, coins_from_amount, unsigned_tx_from_skeleton
from .tx.send import broadcast
from .types.core import (
    Address,
    BroadcastResult,
    Coin,
    Fee,
    NormalTxParams,
    PaginatedTxs,
    ReadOutcome,
    TxFilter,
    VaultTxParams,
)
from .utils.hash import sha256_hex
from .wallet import mnemonic as bip39
from .wallet.keys import PrivateKey, derive_private_key
from .wallet.signer import sign

log = logging.getLogger(__name__)

__all__ = ["Client", "NoPhrase", "PhraseSet", "KeyComputed"]


# -----------------------------------------------------------------------------
# Key state
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class NoPhrase:
    pass


@dataclass(frozen=True)
class PhraseSet:
    phrase: str = field(repr=False)
    phrase_hash: str


@dataclass(frozen=True)
class KeyComputed:
    phrase_hash: str
    private_key: PrivateKey = field(repr=False)


KeyState = Union[NoPhrase, PhraseSet, KeyComputed]


def _phrase_hash(phrase: str) -> str:
    return sha256_hex(phrase.encode("utf-8"))


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------


class Client:
    """
    Thorchain wallet client bound to one network and at most one phrase.

    `network` defaults to the network in `config` (testnet unless configured
    otherwise). `transport` is handed to httpx and is mainly for tests.
    """

    def __init__(
        self,
        network: Union[Network, str, None] = None,
        phrase: Optional[str] = None,
        config: Optional[SDKConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or SDKConfig()
        self._network = Network.parse(network) if network is not None else self.config.network
        self._state: KeyState = NoPhrase()
        self._addresses: Dict[Tuple[str, str], Address] = {}
        self._locks: Dict[Address, asyncio.Lock] = {}
        self._lock_users: Dict[Address, int] = {}
        if phrase is not None:
            self.set_phrase(phrase)
        self._rest = RestClient(self.config, transport=transport)

    # --- lifecycle -------------------------------------------------------

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        await self._rest.aclose()

    # --- network ---------------------------------------------------------

    def get_network(self) -> Network:
        return self._network

    def set_network(self, network: Union[Network, str]) -> "Client":
        self._network = Network.parse(network)
        return self

    def _net(self) -> NetworkConfig:
        return NetworkConfig.for_network(self._network)

    def get_client_url(self) -> str:
        return self._net().rest_url

    def get_explorer_url(self) -> str:
        return self._net().explorer_url

    def get_explorer_address_url(self, address: Address) -> str:
        return f"{self.get_explorer_url()}address/{address}"

    def get_explorer_tx_url(self, tx_hash: str) -> str:
        return f"{self.get_explorer_url()}txs/{tx_hash}"

    def get_prefix(self) -> str:
        return self._net().prefix

    def get_chain_id(self) -> str:
        return self._net().chain_id

    # --- phrase & keys ---------------------------------------------------

    @staticmethod
    def generate_phrase(num_words: int = 24) -> str:
        return bip39.generate_phrase(num_words)

    @staticmethod
    def validate_phrase(phrase: str) -> bool:
        return bip39.validate_phrase(phrase)

    def set_phrase(self, phrase: str) -> "Client":
        """
        Install a new phrase. Raises InvalidMnemonic and leaves the current
        state untouched if the phrase is not valid BIP-39.
        """
        if not self.validate_phrase(phrase):
            raise InvalidMnemonic()
        normalized = bip39.normalize_phrase(phrase)
        digest = _phrase_hash(normalized)
        if not isinstance(self._state, NoPhrase) and self._state.phrase_hash == digest:
            return self
        self._state = PhraseSet(phrase=normalized, phrase_hash=digest)
        self._addresses.clear()
        return self

    def get_private_key(self) -> Optional[PrivateKey]:
        state = self._state
        if isinstance(state, NoPhrase):
            return None
        if isinstance(state, PhraseSet):
            key = derive_private_key(state.phrase, self.config.hd_path)
            self._state = KeyComputed(phrase_hash=state.phrase_hash, private_key=key)
            return key
        return state.private_key

    async def get_address(self) -> Optional[Address]:
        """Address of the current phrase under the current network prefix, or None without a phrase."""
        key = self.get_private_key()
        if key is None:
            return None
        prefix = self.get_prefix()
        cache_key = (self._state.phrase_hash, prefix)
        addr = self._addresses.get(cache_key)
        if addr is None:
            addr = key.public_key().address(prefix)
            self._addresses[cache_key] = addr
        return addr

    def validate_address(self, address: Address) -> bool:
        return address_codec.validate(address, self.get_prefix())

    # --- reads -----------------------------------------------------------

    async def _read(self, what: str, coro) -> ReadOutcome:  # noqa: ANN001
        try:
            return ReadOutcome(value=await coro)
        except (TransportError, AccountNotFound) as e:
            log.warning("%s failed: %s", what, e)
            return ReadOutcome(error=e)

    async def _resolve_read_address(self, address: Optional[Address]) -> Optional[Address]:
        if address:
            if not self.validate_address(address):
                raise InvalidAddress(address, expected_prefix=self.get_prefix(), field="address")
            return address
        return await self.get_address()

    async def query_balance(self, address: Optional[Address] = None) -> ReadOutcome[Tuple[Coin, ...]]:
        target = await self._resolve_read_address(address)
        if target is None:
            return ReadOutcome(error=MissingFromAddress())
        return await self._read(f"balance of {target}", query.fetch_balance(self._rest, self._net(), target))

    async def get_balance(self, address: Optional[Address] = None) -> Optional[Tuple[Coin, ...]]:
        """Coins held by `address` (default: own address); None if unavailable."""
        return (await self.query_balance(address)).value

    async def query_transactions(self, tx_filter: Optional[TxFilter] = None) -> ReadOutcome[PaginatedTxs]:
        return await self._read(
            "transaction search",
            query.search_transactions(self._rest, self._net(), tx_filter),
        )

    async def get_transactions(self, tx_filter: Optional[TxFilter] = None) -> Optional[PaginatedTxs]:
        return (await self.query_transactions(tx_filter)).value

    # --- transfers -------------------------------------------------------

    async def vault_tx(self, params: VaultTxParams) -> BroadcastResult:
        """Transfer to a vault. A non-empty memo is required."""
        if not isinstance(params.memo, str) or not params.memo.strip():
            raise InvalidTxParams("vault transfers require a non-empty memo")
        return await self._transfer(
            address_from=params.address_from,
            address_to=params.address_to,
            amount=params.amount,
            asset=params.asset,
            memo=params.memo,
        )

    async def normal_tx(self, params: NormalTxParams) -> BroadcastResult:
        return await self._transfer(
            address_from=params.address_from,
            address_to=params.address_to,
            amount=params.amount,
            asset=params.asset,
            memo="",
        )

    @asynccontextmanager
    async def _sender_lock(self, address: Address) -> AsyncIterator[None]:
        # One lock per sender, dropped once nobody holds or waits on it.
        lock = self._locks.get(address)
        if lock is None:
            lock = self._locks[address] = asyncio.Lock()
        self._lock_users[address] = self._lock_users.get(address, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[address] -= 1
            if not self._lock_users[address]:
                del self._lock_users[address]
                del self._locks[address]

    async def _transfer(
        self,
        *,
        address_from: Optional[Address],
        address_to: Address,
        amount,  # noqa: ANN001
        asset: str,
        memo: str,
    ) -> BroadcastResult:
        # Everything up to the lock is local validation; no network I/O.
        sender = address_from or await self.get_address()
        if not sender:
            raise MissingFromAddress()
        private_key = self.get_private_key()
        if private_key is None:
            raise MissingPrivateKey()

        net = self._net()
        coins = coins_from_amount(amount, asset)
        message = build_send_message(sender, address_to, coins, net.prefix)

        own = private_key.public_key().address(net.prefix)
        if sender != own:
            log.warning("address_from %s does not belong to the loaded key (%s); the chain will reject the signature", sender, own)

        async with self._sender_lock(sender):
            account = await query.fetch_account(self._rest, net, sender)
            if self.config.remote_build:
                skeleton = await query.fetch_unsigned_transfer(
                    self._rest, net, sender, address_to, coins, account, memo, gas=self.config.gas
                )
                unsigned = unsigned_tx_from_skeleton(skeleton, account, net.chain_id, message=message, memo=memo)
            else:
                unsigned = build_unsigned_tx(
                    message,
                    account,
                    memo,
                    chain_id=net.chain_id,
                    fee=Fee(amount=(), gas=self.config.gas),
                )
            signed = sign(unsigned, private_key, account.account_number, account.sequence)
            return await broadcast(self._rest, net, signed, mode=self.config.broadcast_mode)
