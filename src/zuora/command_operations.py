from __future__ import annotations

import click

from .api import ZuoraAPI
from .utils import config_from_context


@click.command("operations")
@click.pass_context
def operations_cmd(ctx: click.Context) -> None:
    """List the operations offered by the bundled WSDL.

    Does not log in; only the WSDL is read.
    """
    api = ZuoraAPI(config_from_context(ctx))
    for name in api.operations():
        click.echo(name)
