import sys

import click

from .config import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    MESSAGE_MODE,
    STREAM_MODE,
    Config,
)
from .log_config import LOG_LEVELS, configure_logging
from .server import Server

PROG_VERSION = "0.0.2"


@click.command(context_settings={"help_option_names": ["-H", "--help"]})
@click.option("-p", "--port", type=click.IntRange(0, 0xFFFF), default=DEFAULT_PORT, show_default=True,
              help="Listen on local port <port>.")
@click.option("-b", "--buf", "buffer_size", type=click.IntRange(1, 0xFFFF), default=DEFAULT_BUFFER_SIZE,
              show_default=True, help="Size of receive buffer.")
@click.option("-s", "--seq", is_flag=True, default=False,
              help="Use SOCK_SEQPACKET socket instead of SOCK_STREAM.")
@click.option("-e", "--echo", is_flag=True, default=False, help="Echo the received data back to sender.")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Be more verbose, report stream, ppid and sequence numbers of each message.")
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="Local address to bind to.")
@click.option("--log-level", type=click.Choice(list(LOG_LEVELS.keys())), default=None,
              help="Log level. Defaults to debug with --verbose, info otherwise.")
@click.version_option(PROG_VERSION, prog_name="sctp_server")
def main(port: int, buffer_size: int, seq: bool, echo: bool, verbose: bool, host: str, log_level: str | None) -> None:
    """Simple SCTP server."""
    if log_level is None:
        log_level = "debug" if verbose else "info"
    configure_logging(log_level)
    try:
        config = Config(
            host=host,
            port=port,
            buffer_size=buffer_size,
            mode=MESSAGE_MODE if seq else STREAM_MODE,
            echo=echo,
            verbose=verbose,
        )
    except ValueError as exc:
        click.echo(f"Error while parsing command line: {exc}", err=True)
        sys.exit(1)

    server = Server(config)
    sys.exit(server.run())
