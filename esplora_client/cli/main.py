"""Command-line interface for querying an Esplora server."""

import sys
import json
from typing import Any, Optional
import click
from pydantic import ValidationError

from esplora_client.core.client import EsploraClient
from esplora_client.core.errors import EsploraError
from esplora_client.models.config import EsploraSettings
from esplora_client.utils.logging import setup_logging_from_settings


def _dump(value: Any) -> str:
    if hasattr(value, "model_dump"):
        return json.dumps(value.model_dump(), indent=2)
    return json.dumps(value, indent=2)


def _run(ctx, call):
    """Invoke `call` with a fresh client and print the result as JSON."""
    settings = ctx.obj['settings']

    try:
        with EsploraClient.from_settings(settings) as client:
            click.echo(_dump(call(client)))
    except EsploraError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option('--base-url', '-u', default=None,
              help='Esplora API base URL (default: ESPLORA_BASE_URL or Blockstream mainnet)')
@click.option('--authorization', '-a', default=None,
              help='Authorization header value')
@click.option('--log-level', '-l', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level')
@click.pass_context
def cli(ctx, base_url: Optional[str], authorization: Optional[str], log_level: Optional[str]):
    """Esplora block explorer API client."""
    ctx.ensure_object(dict)

    overrides = {}
    if base_url:
        overrides['base_url'] = base_url
    if authorization:
        overrides['authorization'] = authorization
    if log_level:
        overrides['log_level'] = log_level

    try:
        settings = EsploraSettings(**overrides)
    except ValidationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    setup_logging_from_settings(settings)
    ctx.obj['settings'] = settings


@cli.command()
@click.pass_context
def tip(ctx):
    """Show the height and hash of the chain tip."""
    _run(ctx, lambda client: {
        "height": client.get_blocks_tip_height(),
        "hash": client.get_blocks_tip_hash(),
    })


@cli.command()
@click.argument('block_hash')
@click.pass_context
def block(ctx, block_hash: str):
    """Show a block by hash."""
    _run(ctx, lambda client: client.get_block(block_hash))


@cli.command()
@click.argument('txid')
@click.pass_context
def tx(ctx, txid: str):
    """Show a transaction by txid."""
    _run(ctx, lambda client: client.get_tx(txid))


@cli.command()
@click.pass_context
def fees(ctx):
    """Show fee estimates (sat/vB) by confirmation target."""
    _run(ctx, lambda client: client.get_fee_estimates())


@cli.command()
@click.pass_context
def mempool(ctx):
    """Show mempool backlog statistics."""
    _run(ctx, lambda client: client.get_mempool())


@cli.command()
@click.argument('hex_transaction')
@click.pass_context
def broadcast(ctx, hex_transaction: str):
    """Broadcast a signed raw transaction given as hex."""
    _run(ctx, lambda client: {"txid": client.post_tx(hex_transaction)})


if __name__ == '__main__':
    cli()
