"""
Command line tools for the bid/ask wire protocol.

    bidask-tcp decode "A BINANCE EURUSD B1.55555 A2.55555 50000000 S20230213142225.555"
    bidask-tcp encode --exchange BINANCE --instrument EURUSD --bid 1.5 --ask 1.6 --volume 10
    bidask-tcp listen --host 127.0.0.1 --port 8124
    bidask-tcp config show --format yaml
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Optional, Dict, Any

import click
import yaml
from pydantic import ValidationError

from .config import load_config, BidAskTcpConfig
from .connection import connect_with_retry
from .logging_config import configure_cli_logging, configure_logging
from .models.errors import SerializeError, BidAskTcpError
from .models.message import BidAskMessage
from .models.tick import BidAskTick
from .models.timestamp import BidAskTimestamp, TimestampKind, parse_compact_date
from .serializer import BidAskTcpSerializer

TIMESTAMP_KINDS = {
    'source': TimestampKind.SOURCE,
    'generated': TimestampKind.GENERATED,
    'our': TimestampKind.OUR,
}


def tick_to_dict(tick: BidAskTick) -> Dict[str, Any]:
    """Plain representation of a tick for JSON output."""
    return {
        'exchange_id': tick.exchange_id,
        'instrument_id': tick.instrument_id,
        'bid': tick.bid,
        'ask': tick.ask,
        'volume': tick.volume,
        'timestamp_kind': tick.timestamp.kind.name.lower(),
        'timestamp': tick.timestamp.date.isoformat(),
    }


def message_to_dict(message: BidAskMessage) -> Dict[str, Any]:
    result = {'type': message.kind.value}
    if message.is_bid_ask():
        result.update(tick_to_dict(message.tick))
    return result


def parse_timestamp_option(value: Optional[str]) -> datetime:
    """Accept ISO 8601 or compact YYYYMMDDHHMMSS[.mmm]; default is now."""
    if not value:
        return datetime.now(timezone.utc)
    if value.isdigit() or (value[:14].isdigit() and value[14:15] == '.'):
        return parse_compact_date(value)
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return datetime.fromisoformat(value)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, verbose: bool):
    """Bid/ask TCP wire protocol tools."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    configure_cli_logging(verbose)


@cli.command()
@click.argument('payload')
def decode(payload: str):
    """Decode one message (without the trailing CR LF) and print it as JSON."""
    try:
        message = BidAskMessage.parse(payload.encode('utf-8'))
    except SerializeError as e:
        click.echo(f"Error: {e.kind.value}: {e.message}", err=True)
        sys.exit(1)

    click.echo(json.dumps(message_to_dict(message), indent=2))


@cli.command()
@click.option('--exchange', 'exchange_id', required=True, help='Exchange identifier')
@click.option('--instrument', 'instrument_id', required=True, help='Instrument symbol')
@click.option('--bid', type=float, required=True, help='Bid price')
@click.option('--ask', type=float, required=True, help='Ask price')
@click.option('--volume', type=float, required=True, help='Volume')
@click.option('--timestamp', help='ISO 8601 or YYYYMMDDHHMMSS[.mmm] UTC time (default: now)')
@click.option('--kind', type=click.Choice(list(TIMESTAMP_KINDS)), default='source',
              help='Timestamp provenance')
@click.option('--crlf', is_flag=True, help='Append the CR LF delimiter')
def encode(exchange_id: str, instrument_id: str, bid: float, ask: float, volume: float,
           timestamp: Optional[str], kind: str, crlf: bool):
    """Encode a tick and print its wire form."""
    try:
        date = parse_timestamp_option(timestamp)
        tick = BidAskTick(
            exchange_id=exchange_id,
            instrument_id=instrument_id,
            bid=bid,
            ask=ask,
            volume=volume,
            timestamp=BidAskTimestamp(TIMESTAMP_KINDS[kind], date),
        )
        serializer = BidAskTcpSerializer()
        data = serializer.to_bytes(BidAskMessage.bid_ask(tick))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not crlf:
        data = data[:-2]
    click.echo(data.decode('utf-8'), nl=not crlf)


@cli.command()
@click.option('--host', help='Feed host (default from config)')
@click.option('--port', type=int, help='Feed port (default from config)')
@click.option('--config', 'config_file', type=click.Path(exists=True), help='YAML config file')
@click.option('--env-file', type=click.Path(exists=True), help='.env file')
@click.option('--limit', type=int, default=0, help='Stop after this many ticks (0 = no limit)')
@click.option('--json', 'as_json', is_flag=True, help='Print ticks as JSON lines')
@click.pass_context
def listen(ctx, host: Optional[str], port: Optional[int], config_file: Optional[str],
           env_file: Optional[str], limit: int, as_json: bool):
    """Connect to a feed and print incoming ticks."""
    try:
        config = load_config(env_file=env_file, config_file=config_file, host=host, port=port)
    except (ValidationError, ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Feed logs go to stderr, ticks to stdout
    configure_logging(level=config.log_level, verbose=ctx.obj.get('verbose', False))

    try:
        asyncio.run(_listen(config, limit, as_json))
    except BidAskTcpError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


async def _listen(config: BidAskTcpConfig, limit: int, as_json: bool) -> None:
    def report(kind: str, message: str) -> None:
        click.echo(f"Rejected message: {message}", err=True)

    connection = await connect_with_retry(config, error_callback=report)
    keepalive = asyncio.create_task(connection.keepalive())
    count = 0

    try:
        async for tick in connection.ticks():
            if as_json:
                click.echo(json.dumps(tick_to_dict(tick)))
            else:
                click.echo(connection.serializer.to_bytes(BidAskMessage.bid_ask(tick))[:-2].decode('utf-8'))

            count += 1
            if limit and count >= limit:
                break
    finally:
        keepalive.cancel()
        await asyncio.gather(keepalive, return_exceptions=True)
        await connection.close()


@cli.group()
def config():
    """Configuration commands."""


@config.command()
@click.option('--config', 'config_file', type=click.Path(exists=True), help='YAML config file')
@click.option('--env-file', type=click.Path(exists=True), help='.env file')
@click.option('--format', 'output_format', type=click.Choice(['json', 'yaml', 'env']),
              default='json', help='Output format')
def show(config_file: Optional[str], env_file: Optional[str], output_format: str):
    """Show the effective configuration."""
    try:
        settings = load_config(env_file=env_file, config_file=config_file)
    except (ValidationError, ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    data = settings.model_dump(mode='json')
    if output_format == 'json':
        click.echo(json.dumps(data, indent=2))
    elif output_format == 'yaml':
        click.echo(yaml.safe_dump({'bidask_tcp': data}, sort_keys=False), nl=False)
    else:
        for key, value in settings.to_env_dict().items():
            click.echo(f"{key}={value}")


if __name__ == '__main__':
    cli()
