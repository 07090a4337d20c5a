import base64
import dataclasses

import pytest
from conftest import PHRASE, make_address
from ecdsa import SECP256k1

from thorchain_client.errors import SigningInvariantViolation
from thorchain_client.tx import build, encode
from thorchain_client.tx.send import tx_hash
from thorchain_client.types.core import Account
from thorchain_client.wallet import keys, signer

FROM = make_address(0x11)
TO = make_address(0x22)


def _unsigned(sequence=3, memo="SWAP:BNB.BNB"):
    msg = build.build_send_message(FROM, TO, build.coins_from_amount("100", "rune"), prefix="tthor")
    account = Account(address=FROM, account_number=7, sequence=sequence)
    return build.build_unsigned_tx(msg, account, memo, chain_id="thorchain")


@pytest.fixture(scope="module")
def key():
    return keys.derive_private_key(PHRASE)


def test_sign_produces_verifiable_low_s_signature(key):
    unsigned = _unsigned()
    signed = signer.sign(unsigned, key, 7, 3)

    assert signed.unsigned is unsigned
    assert signed.sign_bytes == encode.sign_bytes(unsigned)
    (sig,) = signed.signatures
    assert (sig.account_number, sig.sequence) == (7, 3)
    assert sig.pub_key == key.public_key().to_bytes()
    assert len(sig.signature) == 64

    s = int.from_bytes(sig.signature[32:], "big")
    assert s <= SECP256k1.order // 2

    assert signer.verify(key.public_key(), signed.sign_bytes, sig.signature)
    assert not signer.verify(key.public_key(), signed.sign_bytes + b" ", sig.signature)


def test_signing_is_deterministic(key):
    a = signer.sign(_unsigned(), key, 7, 3)
    b = signer.sign(_unsigned(), key, 7, 3)
    assert a.signatures == b.signatures
    c = signer.sign(_unsigned(sequence=4), key, 7, 4)
    assert c.signatures[0].signature != a.signatures[0].signature


@pytest.mark.parametrize("account_number,sequence", [(8, 3), (7, 2)])
def test_mismatched_account_state_is_rejected(key, account_number, sequence):
    with pytest.raises(SigningInvariantViolation):
        signer.sign(_unsigned(), key, account_number, sequence)


def test_signed_tx_is_immutable(key):
    signed = signer.sign(_unsigned(), key, 7, 3)
    with pytest.raises(dataclasses.FrozenInstanceError):
        signed.signatures = ()


def test_wire_tx_shape(key):
    signed = signer.sign(_unsigned(), key, 7, 3)
    body = encode.broadcast_body(signed, "sync")

    assert body["mode"] == "sync"
    tx = body["tx"]
    assert set(tx) == {"msg", "fee", "signatures", "memo"}
    assert tx["memo"] == "SWAP:BNB.BNB"
    (sig,) = tx["signatures"]
    assert sig["pub_key"]["type"] == "tendermint/PubKeySecp256k1"
    assert base64.b64decode(sig["pub_key"]["value"]) == key.public_key().to_bytes()
    assert len(base64.b64decode(sig["signature"])) == 64


def test_tx_hash_is_uppercase_hex(key):
    signed = signer.sign(_unsigned(), key, 7, 3)
    h = tx_hash(signed)
    assert len(h) == 64
    assert h == h.upper()
    assert h == tx_hash(signer.sign(_unsigned(), key, 7, 3))
