from __future__ import annotations

from typing import Tuple

import click

from .api import ZuoraAPI
from .exceptions import Fault, MissingCredentialsError
from .logging_config import redact_password
from .utils import config_from_context, missing_credentials_message, parse_params, to_json


@click.command("call")
@click.argument("operation")
@click.argument("params", nargs=-1)
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
@click.option(
    "--show-request",
    is_flag=True,
    help="Print the XML that was sent (to stderr, password masked) after the call.",
)
@click.pass_context
def call_cmd(
    ctx: click.Context,
    operation: str,
    params: Tuple[str, ...],
    pretty: bool,
    show_request: bool,
) -> None:
    """Call any WSDL OPERATION with KEY=VALUE arguments.

    Example: zuora call queryMore queryLocator=2c92c0f9...
    """
    kwargs = parse_params(params)
    api = ZuoraAPI(config_from_context(ctx))
    try:
        result = api.request(operation, kwargs)
    except MissingCredentialsError as e:
        raise click.ClickException(missing_credentials_message(e)) from e
    except Fault as e:
        raise click.ClickException(f"{operation} failed: {e.message}") from e
    finally:
        if show_request and api.last_request:
            click.echo(redact_password(api.last_request), err=True)

    click.echo(to_json(result, pretty))
