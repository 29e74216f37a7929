"""Measurement commands: ping, traceroute, dns, mtr.

All commands take positional arguments of the form

    TARGET [from LOCATION...]

where LOCATION is a comma-separated list of location selectors (continent,
country, city, ASN, network, tags...), a measurement id, or a reference to an
earlier measurement of this shell session (first, last, previous, @N, @-N).
"""

import asyncio

import click
from loguru import logger

from gpcli.api import GlobalpingClient
from gpcli.session import SessionEngine, run_until_signal
from gpcli.types import (
    ClientError,
    Config,
    GPCliError,
    MeasurementCreate,
    MeasurementOptions,
)
from gpcli.util import DEFAULT_API_URL, DEFAULT_LOCATION, INFINITE_PACKETS
from gpcli.util.logging import format_error_response
from gpcli.view import ResultsViewer


def parse_target_args(args: tuple[str, ...]) -> tuple[str, str]:
    """Split `TARGET [from LOCATION...]` into (target, from).

    `from` is "" when no from clause was given.

    Raises
    ------
    click.UsageError
        If the second word is not `from`.
    """
    if not args:
        raise click.UsageError("missing target")
    if len(args) > 1 and args[1] != "from":
        raise click.UsageError("invalid command format")
    return args[0], " ".join(args[2:]).strip()


def measurement_options(f):
    """Options shared by every measurement command."""
    options = [
        click.argument("args", nargs=-1, required=True),
        click.option(
            "--from",
            "-F",
            "from_opt",
            default="",
            help='A continent, region (e.g. "eastern europe"), country, US state or city (default "world")',
        ),
        click.option(
            "--limit", "-L", default=1, type=int, help="Limit the number of probes to use"
        ),
        click.option(
            "--json", "-J", "json_output", is_flag=True, help="Output results in JSON format"
        ),
        click.option(
            "--latency", is_flag=True, help="Output only the stats of a measurement"
        ),
        click.option(
            "--ci",
            "ci_mode",
            is_flag=True,
            help="Disable realtime terminal updates (useful in CI/scripts)",
        ),
        click.option(
            "--share", is_flag=True, help="Print a link to the results online"
        ),
        click.option(
            "--api-url",
            envvar="GLOBALPING_API_URL",
            default=DEFAULT_API_URL,
            show_default=True,
            help="Globalping API base URL",
        ),
        click.option(
            "--token",
            "api_token",
            envvar="GLOBALPING_TOKEN",
            default="",
            help="Globalping API token (env: GLOBALPING_TOKEN)",
        ),
        click.option(
            "--session-dir", envvar="GLOBALPING_SESSION_DIR", default="", hidden=True
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def build_config(cmd: str, args: tuple[str, ...], **kwargs) -> Config:
    target, from_ = parse_target_args(args)
    from_opt = kwargs.pop("from_opt", "")
    return Config(
        cmd=cmd,
        target=target,
        from_=from_ or from_opt or DEFAULT_LOCATION,
        **kwargs,
    )


def build_request(config: Config, options: MeasurementOptions) -> MeasurementCreate:
    return MeasurementCreate(
        type=config.cmd,
        target=config.target,
        limit=config.limit,
        in_progress_updates=not config.ci_mode,
        options=options,
    )


def execute(config: Config, opts: MeasurementCreate) -> None:
    """Run the measurement, mapping errors onto click exceptions.

    Usage-format errors show command help (exit 2); everything else prints a
    single `Error:` line (exit 1).
    """
    with GlobalpingClient(config) as client:
        viewer = ResultsViewer(config, client)
        engine = SessionEngine(config, client, viewer)
        try:
            if config.infinite:
                asyncio.run(run_until_signal(engine, opts))
            else:
                engine.run_once(opts)
        except ClientError as e:
            logger.debug(format_error_response())
            if e.show_help:
                raise click.UsageError(str(e))
            raise click.ClickException(str(e))
        except GPCliError as e:
            logger.debug(format_error_response())
            raise click.ClickException(str(e))


# ====================================================================================


@click.command(short_help="Run a ping test")
@measurement_options
@click.option(
    "--packets",
    type=int,
    default=None,
    help="Number of ECHO_REQUEST packets to send (default 3)",
)
@click.option(
    "--infinite",
    is_flag=True,
    help="Keep pinging the target continuously until stopped",
)
def ping(args, packets, infinite, **kwargs):
    """Run a ping test.

    \b
    Examples:
      # Ping google.com from 2 probes in New York
      gpcli ping google.com from New York --limit 2
    \b
      # Ping google.com using probes from the last measurement in session
      gpcli ping google.com from last
    \b
      # Ping google.com using probes from the second to last measurement
      gpcli ping google.com from @-2
    \b
      # Continuously ping google.com from New York
      gpcli ping google.com from New York --infinite
    """
    config = build_config("ping", args, **kwargs)
    config.infinite = infinite
    config.packets = INFINITE_PACKETS if infinite else (packets or 0)
    options = MeasurementOptions(packets=config.packets or None)
    execute(config, build_request(config, options))


@click.command(short_help="Run a traceroute test")
@measurement_options
@click.option(
    "--protocol",
    type=click.Choice(["ICMP", "TCP", "UDP"], case_sensitive=False),
    default=None,
    help="Protocol to use (default ICMP)",
)
@click.option("--port", type=int, default=None, help="Destination port for TCP (default 80)")
def traceroute(args, protocol, port, **kwargs):
    """Run a traceroute test.

    \b
    Examples:
      # Traceroute google.com from 2 probes in New York
      gpcli traceroute google.com from New York --limit 2
    \b
      # Traceroute 1.1.1.1 from a probe in ASN 123 over TCP
      gpcli traceroute 1.1.1.1 from 123 --protocol TCP --port 443
    """
    config = build_config("traceroute", args, **kwargs)
    config.protocol = (protocol or "").upper()
    config.port = port or 0
    options = MeasurementOptions(
        protocol=config.protocol or None, port=config.port or None
    )
    execute(config, build_request(config, options))


@click.command(short_help="Resolve a DNS record")
@measurement_options
@click.option(
    "--type",
    "query_type",
    default=None,
    help="Type of DNS record to query (default A)",
)
@click.option("--resolver", default=None, help="Resolver to use (default: probe's)")
@click.option(
    "--protocol",
    type=click.Choice(["UDP", "TCP"], case_sensitive=False),
    default=None,
    help="Protocol to use for the query (default UDP)",
)
@click.option("--port", type=int, default=None, help="Resolver port (default 53)")
@click.option(
    "--trace", is_flag=True, help="Trace delegation from the root servers"
)
def dns(args, query_type, resolver, protocol, port, trace, **kwargs):
    """Resolve a DNS record, like dig.

    \b
    Examples:
      # Resolve google.com from 2 probes in New York
      gpcli dns google.com from New York --limit 2
    \b
      # Resolve the MX records of jsdelivr.com using Cloudflare's resolver
      gpcli dns jsdelivr.com --type MX --resolver 1.1.1.1
    """
    config = build_config("dns", args, **kwargs)
    config.query_type = (query_type or "").upper()
    config.resolver = resolver or ""
    config.protocol = (protocol or "").upper()
    config.port = port or 0
    config.trace = trace
    options = MeasurementOptions(
        query={"type": config.query_type} if config.query_type else None,
        resolver=config.resolver or None,
        protocol=config.protocol or None,
        port=config.port or None,
        trace=config.trace or None,
    )
    execute(config, build_request(config, options))


@click.command(short_help="Run an MTR test")
@measurement_options
@click.option(
    "--protocol",
    type=click.Choice(["ICMP", "TCP", "UDP"], case_sensitive=False),
    default=None,
    help="Protocol to use (default ICMP)",
)
@click.option("--port", type=int, default=None, help="Destination port for TCP/UDP (default 80)")
@click.option(
    "--packets", type=int, default=None, help="Packets to send to each hop (default 3)"
)
def mtr(args, protocol, port, packets, **kwargs):
    """Run an MTR (combined traceroute and ping) test.

    \b
    Examples:
      # MTR google.com from 2 probes in New York
      gpcli mtr google.com from New York --limit 2
    \b
      # MTR 1.1.1.1 using the probes of the first measurement in session
      gpcli mtr 1.1.1.1 from first --packets 5
    """
    config = build_config("mtr", args, **kwargs)
    config.protocol = (protocol or "").upper()
    config.port = port or 0
    config.packets = packets or 0
    options = MeasurementOptions(
        protocol=config.protocol or None,
        port=config.port or None,
        packets=config.packets or None,
    )
    execute(config, build_request(config, options))
