"""
Shared pytest fixtures:
- A fixed BIP-39 phrase and deterministic addresses
- FakeLcd: in-memory stand-in for the legacy REST API, served through
  httpx.MockTransport and recording every request it sees
- SDKConfig with zero backoff so retry tests do not sleep
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from thorchain_client import address as address_codec
from thorchain_client.config import SDKConfig

PHRASE = "rural bright ball negative already grass good grant nation screen model pizza"
OTHER_PHRASE = (
    "abandon abandon abandon abandon abandon abandon "
    "abandon abandon abandon abandon abandon about"
)


def make_address(fill: int, prefix: str = "tthor") -> str:
    return address_codec.encode(prefix, bytes([fill]) * 20)


class FakeLcd:
    """
    Minimal legacy-LCD stub implementing only the routes the client uses.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Dict[str, str], Optional[Any]]] = []
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.search_response: Dict[str, Any] = {
            "total_count": "0",
            "count": "0",
            "page_number": "1",
            "page_total": "0",
            "limit": "30",
            "txs": [],
        }
        self.broadcast_status = 200
        self.broadcast_response: Dict[str, Any] = {
            "height": "0",
            "txhash": "ABCDEF0123456789",
            "raw_log": "[]",
        }
        self.transfer_skeleton: Optional[Dict[str, Any]] = None
        # Respond 503 to this many requests before behaving normally.
        self.fail_first = 0
        self.not_found = False

    def add_account(
        self,
        address: str,
        *,
        account_number: int = 7,
        sequence: int = 3,
        coins: Optional[List[Dict[str, str]]] = None,
    ) -> None:
        self.accounts[address] = {
            "address": address,
            "coins": coins if coins is not None else [{"denom": "rune", "amount": "5000"}],
            "public_key": None,
            "account_number": str(account_number),
            "sequence": str(sequence),
        }

    def paths(self) -> List[str]:
        return [p for _, p, _, _ in self.calls]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.calls.append((request.method, path, dict(request.url.params), body))

        if self.fail_first > 0:
            self.fail_first -= 1
            return httpx.Response(503, text="unavailable")

        if request.method == "GET" and path.startswith("/auth/accounts/"):
            if self.not_found:
                return httpx.Response(404, json={"error": "not found"})
            addr = path.rsplit("/", 1)[-1]
            value = self.accounts.get(
                addr,
                {"address": "", "coins": [], "public_key": None, "account_number": "0", "sequence": "0"},
            )
            return httpx.Response(
                200,
                json={"height": "100", "result": {"type": "cosmos-sdk/Account", "value": value}},
            )

        if request.method == "GET" and path == "/txs":
            return httpx.Response(200, json=self.search_response)

        if request.method == "POST" and path == "/txs":
            return httpx.Response(self.broadcast_status, json=self.broadcast_response)

        if request.method == "POST" and path.startswith("/bank/accounts/"):
            if self.transfer_skeleton is None:
                return httpx.Response(400, json={"error": "no skeleton configured"})
            return httpx.Response(200, json={"type": "cosmos-sdk/StdTx", "value": self.transfer_skeleton})

        return httpx.Response(404, json={"error": f"no route {request.method} {path}"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def lcd() -> FakeLcd:
    return FakeLcd()


@pytest.fixture()
def config() -> SDKConfig:
    return SDKConfig(
        request_timeout=2.0,
        max_retries=2,
        backoff_base=0.0,
        max_backoff=0.0,
    )
