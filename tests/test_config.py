import pytest

from thorchain_client.config import CHAIN_ID, Network, NetworkConfig, SDKConfig
from thorchain_client.version import __version__, user_agent


def test_network_constants():
    test = NetworkConfig.for_network(Network.TESTNET)
    main = NetworkConfig.for_network("mainnet")

    assert test.rest_url == "http://168.119.22.92:1317"
    assert main.rest_url == "http://13.250.144.124:1317"
    assert test.explorer_url == main.explorer_url == "https://thorchain.net/"
    assert test.prefix == "tthor"
    assert main.prefix == "thor"
    assert test.chain_id == main.chain_id == CHAIN_ID == "thorchain"


def test_rest_joins_paths():
    net = NetworkConfig.for_network("testnet")
    assert net.rest("/txs") == "http://168.119.22.92:1317/txs"
    assert net.rest("auth/accounts/x") == "http://168.119.22.92:1317/auth/accounts/x"


def test_network_parse():
    assert Network.parse(" MainNet ") is Network.MAINNET
    with pytest.raises(ValueError):
        Network.parse("devnet")


def test_from_env(monkeypatch):
    monkeypatch.setenv("THOR_NETWORK", "mainnet")
    monkeypatch.setenv("THOR_TIMEOUT", "3.5")
    monkeypatch.setenv("THOR_MAX_RETRIES", "5")
    monkeypatch.setenv("THOR_GAS", "300000")
    monkeypatch.setenv("THOR_BROADCAST_MODE", "block")
    monkeypatch.setenv("THOR_REMOTE_BUILD", "yes")

    cfg = SDKConfig.from_env()
    assert cfg.network is Network.MAINNET
    assert cfg.request_timeout == 3.5
    assert cfg.max_retries == 5
    assert cfg.gas == "300000"
    assert cfg.broadcast_mode == "block"
    assert cfg.remote_build is True
    assert cfg.user_agent == user_agent()


def test_with_overrides_ignores_none_and_unknown():
    base = SDKConfig(max_retries=1)
    cfg = SDKConfig.with_overrides(base, network="mainnet", max_retries=None, bogus=1)
    assert cfg.network is Network.MAINNET
    assert cfg.max_retries == 1


@pytest.mark.parametrize(
    "kwargs",
    [{"broadcast_mode": "commit"}, {"gas": "lots"}, {"max_retries": -1}, {"network": "devnet"}],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        SDKConfig(**kwargs)


def test_http_headers_carry_user_agent():
    headers = SDKConfig().http_headers()
    assert headers["User-Agent"] == f"thorchain-client-py/{__version__}"
    assert headers["Content-Type"] == "application/json"
