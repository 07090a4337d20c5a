"""
Client configuration: network constants and transport/retry tuning.

- `NetworkConfig` is a pure value object computed from `Network`; the client
  rebuilds it on every read so nothing network-dependent can go stale.
- `SDKConfig` loads sane defaults and supports overrides via environment
  variables (THOR_*).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .version import user_agent

__all__ = [
    "Network",
    "Prefixes",
    "NetworkConfig",
    "SDKConfig",
    "BROADCAST_MODES",
    "CHAIN_ID",
    "DEFAULT_GAS",
    "DEFAULT_HD_PATH",
    "all_known_prefixes",
]

CHAIN_ID = "thorchain"
DEFAULT_GAS = "200000"
# BIP-44 path with Thorchain's registered coin type.
DEFAULT_HD_PATH = "m/44'/931'/0'/0/0"

BROADCAST_MODES: Tuple[str, ...] = ("sync", "async", "block")

_REST_URLS = {
    "testnet": "http://168.119.22.92:1317",
    "mainnet": "http://13.250.144.124:1317",
}
_EXPLORER_URLS = {
    "testnet": "https://thorchain.net/",
    "mainnet": "https://thorchain.net/",
}
_BASE_PREFIXES = {
    "testnet": "tthor",
    "mainnet": "thor",
}


class Network(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"

    @classmethod
    def parse(cls, value: "Network | str") -> "Network":
        if isinstance(value, Network):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown network: {value!r} (expected 'mainnet' or 'testnet')") from None


@dataclass(frozen=True)
class Prefixes:
    """The bech32 prefix family for one network. Only `account` is used for transfers."""

    account: str

    @property
    def pub(self) -> str:
        return self.account + "pub"

    @property
    def valoper(self) -> str:
        return self.account + "valoper"

    @property
    def valoperpub(self) -> str:
        return self.account + "valoperpub"

    @property
    def valcons(self) -> str:
        return self.account + "valcons"

    @property
    def valconspub(self) -> str:
        return self.account + "valconspub"

    def all(self) -> Tuple[str, ...]:
        return (
            self.account,
            self.pub,
            self.valoper,
            self.valoperpub,
            self.valcons,
            self.valconspub,
        )


@dataclass(frozen=True)
class NetworkConfig:
    network: Network
    rest_url: str
    explorer_url: str
    chain_id: str
    prefixes: Prefixes

    @property
    def prefix(self) -> str:
        return self.prefixes.account

    @classmethod
    def for_network(cls, network: "Network | str") -> "NetworkConfig":
        net = Network.parse(network)
        return cls(
            network=net,
            rest_url=_REST_URLS[net.value],
            explorer_url=_EXPLORER_URLS[net.value],
            chain_id=CHAIN_ID,
            prefixes=Prefixes(_BASE_PREFIXES[net.value]),
        )

    def rest(self, path: str) -> str:
        return self.rest_url.rstrip("/") + "/" + path.lstrip("/")


def all_known_prefixes() -> Tuple[str, ...]:
    out: Tuple[str, ...] = ()
    for net in Network:
        out += NetworkConfig.for_network(net).prefixes.all()
    return out


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _parse_bool(val: Optional[str]) -> bool:
    return str(val or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SDKConfig:
    network: Network = Network.TESTNET
    # HTTP behaviour
    request_timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.2
    max_backoff: float = 3.0
    # Tx defaults
    gas: str = DEFAULT_GAS
    broadcast_mode: str = "sync"
    remote_build: bool = False
    hd_path: str = DEFAULT_HD_PATH
    # Headers / identity
    user_agent: str = field(default_factory=user_agent)

    def __post_init__(self) -> None:
        self.network = Network.parse(self.network)
        if self.broadcast_mode not in BROADCAST_MODES:
            raise ValueError(f"broadcast_mode must be one of {BROADCAST_MODES}, got {self.broadcast_mode!r}")
        if not str(self.gas).isdigit():
            raise ValueError(f"gas must be a decimal integer string, got {self.gas!r}")
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")

    @classmethod
    def from_env(cls, prefix: str = "THOR_") -> "SDKConfig":
        """
        Create config from environment variables:

        THOR_NETWORK          (mainnet|testnet)
        THOR_TIMEOUT          (float seconds, per HTTP request)
        THOR_MAX_RETRIES      (int, transport retries for idempotent reads)
        THOR_BACKOFF          (float seconds, first backoff step)
        THOR_MAX_BACKOFF      (float seconds, backoff cap)
        THOR_GAS              (int string)
        THOR_BROADCAST_MODE   (sync|async|block)
        THOR_REMOTE_BUILD     (bool, let the REST server build unsigned txs)
        THOR_USER_AGENT       (str)
        """
        return cls(
            network=Network.parse(_env(f"{prefix}NETWORK", "testnet") or "testnet"),
            request_timeout=float(_env(f"{prefix}TIMEOUT", "10.0")),
            max_retries=int(_env(f"{prefix}MAX_RETRIES", "3")),
            backoff_base=float(_env(f"{prefix}BACKOFF", "0.2")),
            max_backoff=float(_env(f"{prefix}MAX_BACKOFF", "3.0")),
            gas=_env(f"{prefix}GAS", DEFAULT_GAS) or DEFAULT_GAS,
            broadcast_mode=_env(f"{prefix}BROADCAST_MODE", "sync") or "sync",
            remote_build=_parse_bool(_env(f"{prefix}REMOTE_BUILD", "0")),
            user_agent=_env(f"{prefix}USER_AGENT", None) or user_agent(),
        )

    @classmethod
    def with_overrides(cls, base: Optional["SDKConfig"] = None, **overrides: Any) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        return cls(**data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network,
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_base": float(self.backoff_base),
            "max_backoff": float(self.max_backoff),
            "gas": str(self.gas),
            "broadcast_mode": self.broadcast_mode,
            "remote_build": bool(self.remote_build),
            "hd_path": self.hd_path,
            "user_agent": self.user_agent,
        }
