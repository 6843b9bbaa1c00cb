from __future__ import annotations

import logging
from typing import Optional, cast

import click
from click import Command

from . import __version__
from .api import ZuoraAPI
from .command_call import call_cmd
from .command_operations import operations_cmd
from .env_loader import load_env_files
from .exceptions import Fault, MissingCredentialsError
from .logging_config import configure_logging
from .utils import config_from_context, missing_credentials_message, to_json

_logger = logging.getLogger(__name__)

# Load .env very early, so everything else sees env vars
load_env_files()


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="zuora")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.option(
    "--sandbox/--production",
    default=None,
    help="Override ZUORA_SANDBOX for this invocation.",
)
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int], sandbox: Optional[bool]) -> None:
    """Zuora SOAP API CLI. Use subcommands like 'login' or 'query'."""
    configure_logging(loglevel)
    ctx.ensure_object(dict)
    ctx.obj["sandbox"] = sandbox
    _logger.debug("CLI start, version=%s", __version__)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("login")
@click.pass_context
def cmd_login(ctx: click.Context) -> None:
    """Log in to Zuora and show the resulting session.

    Credentials come from ZUORA_USERNAME / ZUORA_PASSWORD (or a .env file).
    """
    api = ZuoraAPI(config_from_context(ctx))
    try:
        session = api.authenticate()
    except MissingCredentialsError as e:
        raise click.ClickException(missing_credentials_message(e)) from e
    except Fault as e:
        raise click.ClickException(f"Login failed: {e.message}") from e

    key = session.key or ""
    click.echo("Logged in to Zuora.")
    click.echo(f"Endpoint   : {api.endpoint}")
    click.echo(f"Server URL : {session.server_url}")
    click.echo(f"Session    : {key[:6]}...{key[-4:]}")


@cli.command("query")
@click.argument("zoql")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
@click.pass_context
def cmd_query(ctx: click.Context, zoql: str, pretty: bool) -> None:
    """Run a ZOQL query and print the result as JSON."""
    api = ZuoraAPI(config_from_context(ctx))
    try:
        result = api.request("query", {"queryString": zoql})
    except MissingCredentialsError as e:
        raise click.ClickException(missing_credentials_message(e)) from e
    except Fault as e:
        raise click.ClickException(f"Query failed: {e.message}") from e
    click.echo(to_json(result, pretty))


# Cast ensures IDE knows of the Command type
cli.add_command(cast(Command, operations_cmd))
cli.add_command(cast(Command, call_cmd))
