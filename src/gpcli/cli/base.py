import click

from gpcli._version import __version__
from gpcli.session import SessionStore, cleanup_stale_sessions
from gpcli.util import DEFAULT_LOGLEVEL, shutdown_client_log, start_client_log


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        click.echo(f"{prefix}└── {sub}")
        if isinstance(sub_cmd, click.Group):
            print_tree(sub_cmd, prefix + "    ", ctx)


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


@click.group()
@tree_option
@click.version_option(__version__, prog_name="gpcli")
@click.option(
    "--log-to-file/--no-log-to-file",
    "-ltf/",
    default=False,
    help="Enable/disable logging to file (default: disabled)",
)
@click.option(
    "--log-to-stdout/--no-log-to-stdout",
    "-lts/",
    default=False,
    help="Enable/disable console (stderr) logging (default: disabled)",
)
@click.option(
    "--log-path",
    "-lp",
    default="",
    help="Custom path for log file (default: ~/.gpcli/client.log)",
)
@click.option(
    "--clear-prev-log/--no-clear-prev-log",
    "-c/",
    default=True,
    help="Clear previous log file on startup (default: enabled)",
)
@click.option(
    "--log-level",
    "-ll",
    default=DEFAULT_LOGLEVEL,
    help="Logging level (TRACE, DEBUG, INFO, WARNING, ERROR) (default: INFO)",
)
@click.pass_context
def cli(ctx, log_to_file, log_to_stdout, log_path, clear_prev_log, log_level):
    """gpcli - run network measurements from probes around the world.

    Submits ping, traceroute, DNS and MTR measurements to the Globalping
    probe network and prints the results.

    - Measurements are written as TARGET from LOCATION, e.g.
      "gpcli ping jsdelivr.com from New York,Berlin"

    - Earlier measurements of the same shell session can be reused as the
      location with first, last, previous, @N or @-N

    - "gpcli ping TARGET --infinite" pings continuously until Ctrl+C
    """
    start_client_log(
        log_to_file=log_to_file,
        log_to_stdout=log_to_stdout,
        log_path=log_path,
        clear_prev=clear_prev_log,
        log_level=log_level.upper(),
    )
    ctx.call_on_close(shutdown_client_log)
    cleanup_stale_sessions()


@cli.group()
@tree_option
def session():
    """Manage measurements recorded for this shell session."""
    pass


@session.command(name="list")
@click.option("--session-dir", envvar="GLOBALPING_SESSION_DIR", default="", hidden=True)
def list_session(session_dir: str):
    """List measurement ids recorded in this session, oldest first."""
    ids = SessionStore(session_dir).load_ids()

    if not ids:
        click.echo("No measurements recorded in this session")
        return

    for i, mid in enumerate(ids, start=1):
        click.echo(f"@{i}\t{mid}")


@session.command(name="clear")
@click.option("--session-dir", envvar="GLOBALPING_SESSION_DIR", default="", hidden=True)
def clear_session(session_dir: str):
    """Forget the measurements recorded in this session."""
    if SessionStore(session_dir).clear():
        click.echo("Session cleared")
    else:
        click.echo("No session to clear")
