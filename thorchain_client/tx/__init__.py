"""
thorchain_client.tx
===================

Transaction helpers: build, encode, and send.

Submodules
----------
- build : MsgSend / unsigned-tx builders and amount normalisation.
- encode: Canonical amino-JSON sign bytes and the wire StdTx.
- send  : REST broadcast and the informational tx hash.

Typical usage
-------------
    from thorchain_client.tx import build, send
    from thorchain_client.wallet import signer

    msg = build.build_send_message(frm, to, build.coins_from_amount("1000", "rune"), prefix="tthor")
    unsigned = build.build_unsigned_tx(msg, account, memo="", chain_id="thorchain")
    signed = signer.sign(unsigned, private_key, account.account_number, account.sequence)
    result = await send.broadcast(rest, net, signed)
"""

from __future__ import annotations

from . import build as build
from . import encode as encode
from . import send as send

__all__ = ["build", "encode", "send"]
