import asyncio
import base64
import hashlib
import logging

import httpx
import pytest
from conftest import OTHER_PHRASE, PHRASE, make_address
from ecdsa import SECP256k1, VerifyingKey
from ecdsa.util import sigdecode_string

from thorchain_client import address as address_codec
from thorchain_client.client import Client, KeyComputed, NoPhrase, PhraseSet
from thorchain_client.config import Network, SDKConfig
from thorchain_client.errors import (
    AccountNotFound,
    InvalidAddress,
    InvalidMnemonic,
    InvalidTxParams,
    MissingFromAddress,
    MissingPrivateKey,
    TransportError,
)
from thorchain_client.tx.encode import canonical_json
from thorchain_client.types.core import Coin, NormalTxParams, TxFilter, VaultTxParams

VAULT = make_address(0x33)


def _client(lcd, config, phrase=PHRASE, network="testnet"):
    return Client(network=network, phrase=phrase, config=config, transport=lcd.transport())


# --- network & phrase state ---------------------------------------------------


@pytest.mark.asyncio
async def test_network_getters(lcd, config):
    async with _client(lcd, config, phrase=None) as client:
        assert client.get_network() is Network.TESTNET
        assert client.get_prefix() == "tthor"
        assert client.get_client_url() == "http://168.119.22.92:1317"
        assert client.get_explorer_url() == "https://thorchain.net/"
        assert client.get_chain_id() == "thorchain"

        client.set_network("mainnet")
        assert client.get_network() is Network.MAINNET
        assert client.get_prefix() == "thor"
        assert client.get_client_url() == "http://13.250.144.124:1317"
        assert client.get_explorer_address_url("thor1x") == "https://thorchain.net/address/thor1x"
        assert client.get_explorer_tx_url("ABC") == "https://thorchain.net/txs/ABC"


def test_network_defaults_to_config():
    client = Client(config=SDKConfig(network="mainnet"))
    assert client.get_network() is Network.MAINNET
    asyncio.run(client.aclose())


def test_constructor_rejects_invalid_phrase(config):
    with pytest.raises(InvalidMnemonic):
        Client(phrase="definitely not valid", config=config)


def test_static_phrase_helpers():
    phrase = Client.generate_phrase()
    assert len(phrase.split()) == 24
    assert Client.validate_phrase(phrase)
    assert not Client.validate_phrase("nope")


@pytest.mark.asyncio
async def test_key_state_transitions(lcd, config):
    async with _client(lcd, config, phrase=None) as client:
        assert isinstance(client._state, NoPhrase)
        assert client.get_private_key() is None
        assert await client.get_address() is None

        client.set_phrase(PHRASE)
        assert isinstance(client._state, PhraseSet)

        key = client.get_private_key()
        assert isinstance(client._state, KeyComputed)
        assert client.get_private_key() is key

        # Same phrase (modulo whitespace) keeps the computed key
        client.set_phrase("  " + PHRASE + " ")
        assert isinstance(client._state, KeyComputed)

        # Invalid phrase leaves state untouched
        with pytest.raises(InvalidMnemonic):
            client.set_phrase("bad phrase")
        assert client.get_private_key() is key


@pytest.mark.asyncio
async def test_new_phrase_invalidates_address(lcd, config):
    async with _client(lcd, config) as client:
        first = await client.get_address()
        client.set_phrase(OTHER_PHRASE)
        second = await client.get_address()
    assert first != second
    assert address_codec.validate(second, "tthor")


@pytest.mark.asyncio
async def test_set_network_changes_address_but_not_key(lcd, config):
    async with _client(lcd, config) as client:
        test_addr = await client.get_address()
        key = client.get_private_key()

        client.set_network(Network.MAINNET)
        main_addr = await client.get_address()

        assert client.get_private_key() is key
        assert test_addr.startswith("tthor1")
        assert main_addr.startswith("thor1")
        assert address_codec.decode(test_addr)[1] == address_codec.decode(main_addr)[1]
        assert client.validate_address(main_addr)
        assert not client.validate_address(test_addr)

        client.set_network(Network.TESTNET)
        assert await client.get_address() == test_addr


# --- reads --------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_balance_defaults_to_own_address(lcd, config):
    async with _client(lcd, config) as client:
        own = await client.get_address()
        lcd.add_account(own)
        assert await client.get_balance() == (Coin("rune", "5000"),)
    assert lcd.paths() == [f"/auth/accounts/{own}"]


@pytest.mark.asyncio
async def test_get_balance_returns_none_on_failures(lcd, config, caplog):
    async with _client(lcd, config) as client:
        # unknown account
        with caplog.at_level(logging.WARNING, logger="thorchain_client.client"):
            assert await client.get_balance(make_address(0x44)) is None
        assert "balance of" in caplog.text

        outcome = await client.query_balance(make_address(0x44))
        assert outcome.value is None
        assert isinstance(outcome.error, AccountNotFound)

        # transport failure
        lcd.fail_first = 100
        outcome = await client.query_balance(make_address(0x44))
        assert isinstance(outcome.error, TransportError)
        assert await client.get_balance(make_address(0x44)) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"coins": [{"denom": "rune", "amount": "1.5"}]},
        {"coins": [{"amount": "10"}]},
        {"account_number": "seven"},
    ],
)
async def test_get_balance_degrades_on_malformed_account(lcd, config, overrides):
    addr = make_address(0x44)
    lcd.add_account(addr)
    lcd.accounts[addr].update(overrides)
    async with _client(lcd, config) as client:
        assert await client.get_balance(addr) is None
        outcome = await client.query_balance(addr)
        assert isinstance(outcome.error, TransportError)


@pytest.mark.asyncio
async def test_get_balance_without_phrase_or_address(lcd, config):
    async with _client(lcd, config, phrase=None) as client:
        assert await client.get_balance() is None
    assert lcd.calls == []


@pytest.mark.asyncio
async def test_get_balance_rejects_foreign_address(lcd, config):
    async with _client(lcd, config) as client:
        with pytest.raises(InvalidAddress):
            await client.get_balance(make_address(0x44, prefix="thor"))
    assert lcd.calls == []


@pytest.mark.asyncio
async def test_get_transactions(lcd, config):
    lcd.search_response["txs"] = [{"height": "3", "txhash": "AA"}]
    async with _client(lcd, config, phrase=None) as client:
        page = await client.get_transactions(TxFilter(limit=5))
        assert [t.hash for t in page.txs] == ["AA"]

        lcd.fail_first = 100
        assert await client.get_transactions() is None
    assert lcd.calls[0][2] == {"limit": "5"}


# --- transfers ----------------------------------------------------------------


@pytest.mark.asyncio
async def test_vault_tx_pipeline(lcd, config):
    lcd.broadcast_response = {"height": "0", "txhash": "FEED", "raw_log": "[]"}
    async with _client(lcd, config) as client:
        own = await client.get_address()
        lcd.add_account(own, account_number=21, sequence=8)
        result = await client.vault_tx(
            VaultTxParams(address_to=VAULT, amount="100000000", asset="rune", memo="SWAP:BNB.BNB")
        )
        pub = client.get_private_key().public_key().to_bytes()

    assert result.tx_hash == "FEED"
    assert result.ok
    assert lcd.paths() == [f"/auth/accounts/{own}", "/txs"]

    body = lcd.calls[-1][3]
    tx = body["tx"]
    assert tx["memo"] == "SWAP:BNB.BNB"
    assert tx["msg"] == [
        {
            "type": "thorchain/MsgSend",
            "value": {
                "from_address": own,
                "to_address": VAULT,
                "amount": [{"denom": "rune", "amount": "100000000"}],
            },
        }
    ]

    # The signature verifies over the sign doc rebuilt from the wire tx plus
    # the account state fetched in the same operation.
    sign_doc = canonical_json(
        {
            "account_number": "21",
            "chain_id": "thorchain",
            "fee": tx["fee"],
            "memo": tx["memo"],
            "msgs": tx["msg"],
            "sequence": "8",
        }
    )
    (sig,) = tx["signatures"]
    assert base64.b64decode(sig["pub_key"]["value"]) == pub
    vk = VerifyingKey.from_string(pub, curve=SECP256k1)
    assert vk.verify(
        base64.b64decode(sig["signature"]),
        sign_doc,
        hashfunc=hashlib.sha256,
        sigdecode=sigdecode_string,
    )


@pytest.mark.asyncio
async def test_normal_tx_has_empty_memo(lcd, config):
    async with _client(lcd, config) as client:
        lcd.add_account(await client.get_address())
        result = await client.normal_tx(NormalTxParams(address_to=VAULT, amount=5, asset="rune"))
    assert result.ok
    assert lcd.calls[-1][3]["tx"]["memo"] == ""


@pytest.mark.asyncio
async def test_chain_rejection_does_not_raise(lcd, config):
    lcd.broadcast_response = {"height": "0", "txhash": "BAD", "code": 5, "raw_log": "insufficient funds"}
    async with _client(lcd, config) as client:
        lcd.add_account(await client.get_address())
        result = await client.normal_tx(NormalTxParams(address_to=VAULT, amount="1", asset="rune"))
    assert result.code == 5
    assert result.raw_log == "insufficient funds"


@pytest.mark.asyncio
async def test_missing_from_address_before_any_request(lcd, config):
    async with _client(lcd, config, phrase=None) as client:
        with pytest.raises(MissingFromAddress):
            await client.vault_tx(VaultTxParams(address_to=VAULT, amount="1", asset="rune", memo="m"))
        with pytest.raises(MissingFromAddress):
            await client.normal_tx(NormalTxParams(address_to=VAULT, amount="1", asset="rune"))
    assert lcd.calls == []


@pytest.mark.asyncio
async def test_missing_private_key_before_any_request(lcd, config):
    async with _client(lcd, config, phrase=None) as client:
        with pytest.raises(MissingPrivateKey):
            await client.normal_tx(
                NormalTxParams(address_to=VAULT, amount="1", asset="rune", address_from=make_address(0x11))
            )
    assert lcd.calls == []


@pytest.mark.parametrize(
    "params,exc",
    [
        (VaultTxParams(address_to=VAULT, amount="1", asset="rune", memo=""), InvalidTxParams),
        (VaultTxParams(address_to=VAULT, amount="1.5", asset="rune", memo="m"), InvalidTxParams),
        (VaultTxParams(address_to=VAULT, amount="1", asset="", memo="m"), InvalidTxParams),
        (VaultTxParams(address_to="tthor1nope", amount="1", asset="rune", memo="m"), InvalidAddress),
        (VaultTxParams(address_to=make_address(0x33, "thor"), amount="1", asset="rune", memo="m"), InvalidAddress),
    ],
)
@pytest.mark.asyncio
async def test_validation_errors_before_any_request(lcd, config, params, exc):
    async with _client(lcd, config) as client:
        with pytest.raises(exc):
            await client.vault_tx(params)
    assert lcd.calls == []


@pytest.mark.asyncio
async def test_unknown_sender_account_raises(lcd, config):
    async with _client(lcd, config) as client:
        with pytest.raises(AccountNotFound):
            await client.normal_tx(NormalTxParams(address_to=VAULT, amount="1", asset="rune"))
    assert lcd.paths()[-1].startswith("/auth/accounts/")


@pytest.mark.asyncio
async def test_foreign_sender_logs_warning(lcd, config, caplog):
    other = make_address(0x55)
    lcd.add_account(other)
    async with _client(lcd, config) as client:
        with caplog.at_level(logging.WARNING, logger="thorchain_client.client"):
            await client.normal_tx(NormalTxParams(address_to=VAULT, amount="1", asset="rune", address_from=other))
    assert "does not belong to the loaded key" in caplog.text


@pytest.mark.asyncio
async def test_remote_build_uses_server_skeleton(lcd):
    config = SDKConfig(backoff_base=0.0, max_backoff=0.0, remote_build=True)
    async with _client(lcd, config) as client:
        own = await client.get_address()
        lcd.add_account(own)
        lcd.transfer_skeleton = {
            "msg": [
                {
                    "type": "thorchain/MsgSend",
                    "value": {
                        "from_address": own,
                        "to_address": VAULT,
                        "amount": [{"denom": "rune", "amount": "9"}],
                    },
                }
            ],
            "fee": {"amount": [], "gas": "210000"},
            "memo": "SWAP:BNB.BNB",
        }
        result = await client.vault_tx(
            VaultTxParams(address_to=VAULT, amount="9", asset="rune", memo="SWAP:BNB.BNB")
        )

    assert result.ok
    assert lcd.paths() == [f"/auth/accounts/{own}", f"/bank/accounts/{VAULT}/transfers", "/txs"]
    assert lcd.calls[-1][3]["tx"]["fee"]["gas"] == "210000"

@pytest.mark.asyncio
async def test_remote_build_rejects_tampered_skeleton(lcd):
    config = SDKConfig(backoff_base=0.0, max_backoff=0.0, remote_build=True)
    attacker = make_address(0x66)
    async with _client(lcd, config) as client:
        own = await client.get_address()
        lcd.add_account(own)
        lcd.transfer_skeleton = {
            "msg": [
                {
                    "type": "thorchain/MsgSend",
                    "value": {
                        "from_address": own,
                        "to_address": attacker,
                        "amount": [{"denom": "rune", "amount": "999999"}],
                    },
                }
            ],
            "fee": {"amount": [], "gas": "210000"},
            "memo": "",
        }
        with pytest.raises(InvalidTxParams):
            await client.vault_tx(VaultTxParams(address_to=VAULT, amount="9", asset="rune", memo="SWAP:BNB.BNB"))

    assert "/txs" not in lcd.paths()


@pytest.mark.asyncio
async def test_remote_build_rejects_dropped_memo(lcd):
    config = SDKConfig(backoff_base=0.0, max_backoff=0.0, remote_build=True)
    async with _client(lcd, config) as client:
        own = await client.get_address()
        lcd.add_account(own)
        lcd.transfer_skeleton = {
            "msg": [
                {
                    "type": "thorchain/MsgSend",
                    "value": {
                        "from_address": own,
                        "to_address": VAULT,
                        "amount": [{"denom": "rune", "amount": "9"}],
                    },
                }
            ],
            "fee": {"amount": [], "gas": "210000"},
        }
        with pytest.raises(InvalidTxParams):
            await client.vault_tx(VaultTxParams(address_to=VAULT, amount="9", asset="rune", memo="SWAP:BNB.BNB"))

    assert "/txs" not in lcd.paths()


@pytest.mark.asyncio
async def test_transfers_from_one_sender_are_serialised(lcd, config):
    async def slow(request):
        # Yield to the loop so unserialised transfers would interleave.
        await asyncio.sleep(0.01)
        return lcd.handler(request)

    client = Client(phrase=PHRASE, config=config, transport=httpx.MockTransport(slow))
    async with client:
        own = await client.get_address()
        lcd.add_account(own)
        params = NormalTxParams(address_to=VAULT, amount="1", asset="rune")
        await asyncio.gather(client.normal_tx(params), client.normal_tx(params))

    # Each fetch-account is followed by its own broadcast before the next fetch.
    assert lcd.paths() == [f"/auth/accounts/{own}", "/txs", f"/auth/accounts/{own}", "/txs"]
    assert client._locks == {} and client._lock_users == {}
