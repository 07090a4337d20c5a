"""
thorchain_client.cli.main
=========================

`thorchain-client`: command-line wallet for Thorchain: phrases, addresses,
balances, transaction search and transfers.

Examples
--------
    $ thorchain-client version
    $ thorchain-client generate-phrase --words 12
    $ thorchain-client --network mainnet address --phrase "..."
    $ thorchain-client balance tthor1...
    $ thorchain-client txs --sender tthor1... --limit 10
    $ thorchain-client send tthor1vault... 100000000 rune --memo "SWAP:BNB.BNB"

Configuration
-------------
- Network      : `--network` or env `THOR_NETWORK` (default: testnet)
- HTTP Timeout : `--timeout` or env `THOR_TIMEOUT` seconds (default: 10.0)
- Phrase       : `--phrase` or env `THOR_PHRASE`
- Everything else in `SDKConfig.from_env` (THOR_GAS, THOR_BROADCAST_MODE, ...)
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, NoReturn, Optional, TypeVar

import typer

from .. import address as address_codec
from ..client import Client
from ..config import NetworkConfig, SDKConfig
from ..errors import ThorchainClientError
from ..types.core import NormalTxParams, TxFilter, VaultTxParams
from ..version import __version__ as SDK_VERSION

T = TypeVar("T")

app = typer.Typer(
    name="thorchain-client",
    help="Thorchain wallet CLI: phrases, addresses, balances, transfers.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run"]


@dataclass
class Ctx:
    config: SDKConfig
    verbose: bool


def _print_json(obj: Any) -> None:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        obj = dataclasses.asdict(obj)
    typer.echo(json.dumps(obj, indent=2, ensure_ascii=False, default=str))


def _fail(msg: str) -> NoReturn:
    typer.echo(f"error: {msg}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def _root(
    ctx: typer.Context,
    network: Optional[str] = typer.Option(
        None,
        "--network",
        help="mainnet or testnet.",
        envvar="THOR_NETWORK",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
        envvar="THOR_TIMEOUT",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    """
    Resolve the effective configuration for this process.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        config = SDKConfig.with_overrides(
            SDKConfig.from_env(),
            network=network,
            request_timeout=timeout,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    ctx.obj = Ctx(config=config, verbose=verbose)


def _client(ctx: typer.Context, phrase: Optional[str] = None) -> Client:
    c: Ctx = ctx.obj
    return Client(config=c.config, phrase=phrase)


def _run(ctx: typer.Context, phrase: Optional[str], fn: Callable[[Client], Awaitable[T]]) -> T:
    async def _go() -> T:
        async with _client(ctx, phrase) as client:
            return await fn(client)

    try:
        return asyncio.run(_go())
    except ThorchainClientError as e:
        _fail(str(e))


_PHRASE_OPTION = typer.Option(None, "--phrase", help="BIP-39 mnemonic.", envvar="THOR_PHRASE")


# --- Offline commands ---------------------------------------------------------


@app.command("version")
def version() -> None:
    """Print the CLI version."""
    typer.echo(f"thorchain-client {SDK_VERSION}")


@app.command("generate-phrase")
def generate_phrase(
    words: int = typer.Option(24, "--words", "-w", help="12, 15, 18, 21 or 24."),
) -> None:
    """Generate a fresh BIP-39 phrase."""
    try:
        typer.echo(Client.generate_phrase(words))
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.command("validate-phrase")
def validate_phrase(phrase: str = typer.Argument(..., help="Phrase to check (quote it).")) -> None:
    """Exit 0 if the phrase is valid BIP-39, 1 otherwise."""
    if Client.validate_phrase(phrase):
        typer.echo("valid")
        return
    typer.echo("invalid")
    raise typer.Exit(code=1)


@app.command("address")
def address(ctx: typer.Context, phrase: Optional[str] = _PHRASE_OPTION) -> None:
    """Print the address of a phrase on the selected network."""
    if not phrase:
        _fail("a phrase is required (--phrase or THOR_PHRASE)")
    typer.echo(_run(ctx, phrase, lambda client: client.get_address()))


@app.command("validate-address")
def validate_address(
    ctx: typer.Context,
    addr: str = typer.Argument(..., metavar="ADDRESS"),
) -> None:
    """Exit 0 if ADDRESS is valid on the selected network, 1 otherwise."""
    c: Ctx = ctx.obj
    ok = address_codec.validate(addr, NetworkConfig.for_network(c.config.network).prefix)
    typer.echo("valid" if ok else "invalid")
    if not ok:
        raise typer.Exit(code=1)


# --- Network commands ---------------------------------------------------------


@app.command("balance")
def balance(
    ctx: typer.Context,
    addr: Optional[str] = typer.Argument(None, metavar="[ADDRESS]"),
    phrase: Optional[str] = _PHRASE_OPTION,
) -> None:
    """Print the coins held by ADDRESS (default: the phrase's address)."""
    outcome = _run(ctx, phrase, lambda client: client.query_balance(addr))
    if not outcome.ok:
        _fail(str(outcome.error))
    _print_json([dataclasses.asdict(c) for c in outcome.value])


@app.command("txs")
def txs(
    ctx: typer.Context,
    action: Optional[str] = typer.Option(None, "--action", help="message.action filter, e.g. send."),
    sender: Optional[str] = typer.Option(None, "--sender", help="message.sender filter."),
    page: Optional[int] = typer.Option(None, "--page"),
    limit: Optional[int] = typer.Option(None, "--limit"),
    min_height: Optional[int] = typer.Option(None, "--min-height"),
    max_height: Optional[int] = typer.Option(None, "--max-height"),
) -> None:
    """Search transactions."""
    flt = TxFilter(
        action=action,
        sender=sender,
        page=page,
        limit=limit,
        min_height=min_height,
        max_height=max_height,
    )
    outcome = _run(ctx, None, lambda client: client.query_transactions(flt))
    if not outcome.ok:
        _fail(str(outcome.error))
    _print_json(outcome.value)


@app.command("send")
def send(
    ctx: typer.Context,
    to: str = typer.Argument(..., help="Recipient address."),
    amount: str = typer.Argument(..., help="Amount in base units (integer)."),
    asset: str = typer.Argument(..., help="Denom, e.g. rune."),
    memo: Optional[str] = typer.Option(None, "--memo", help="Memo; makes this a vault transfer."),
    sender: Optional[str] = typer.Option(None, "--from", help="Sender address (default: the phrase's)."),
    phrase: Optional[str] = _PHRASE_OPTION,
) -> None:
    """
    Sign and broadcast a transfer. With --memo it is sent as a vault
    transfer. Exits 1 if the chain rejects it.
    """
    if memo:
        params = VaultTxParams(address_to=to, amount=amount, asset=asset, memo=memo, address_from=sender)
        result = _run(ctx, phrase, lambda client: client.vault_tx(params))
    else:
        nparams = NormalTxParams(address_to=to, amount=amount, asset=asset, address_from=sender)
        result = _run(ctx, phrase, lambda client: client.normal_tx(nparams))
    _print_json(result)
    if not result.ok:
        raise typer.Exit(code=1)


# --- Entrypoints --------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        rv = app(prog_name="thorchain-client", standalone_mode=False, args=argv)
        return rv if isinstance(rv, int) else 0
    except typer.Exit as e:  # normal exit
        return int(e.exit_code)
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
