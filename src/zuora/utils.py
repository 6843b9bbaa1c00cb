from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional

import click
from zeep.helpers import serialize_object

from .api import ZuoraConfig
from .exceptions import MissingCredentialsError


def to_json(result: Any, pretty: bool = False) -> str:
    """Render a zeep result as JSON; dates and decimals fall back to str()."""
    return json.dumps(serialize_object(result, dict), indent=2 if pretty else None, default=str)


def parse_params(pairs: Iterable[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` arguments into operation keyword arguments."""
    params: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}")
        params[key] = value
    return params


def config_from_context(ctx: Optional[click.Context]) -> ZuoraConfig:
    """Environment config, with the group's --sandbox/--production applied."""
    try:
        cfg = ZuoraConfig.from_env()
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    root = ctx.find_root() if ctx is not None else None
    sandbox = (root.obj or {}).get("sandbox") if root is not None else None
    if sandbox is not None:
        cfg.sandbox = sandbox
    return cfg


def missing_credentials_message(e: MissingCredentialsError) -> str:
    needed = ", ".join(e.missing)
    return (
        f"Missing Zuora credentials: {needed}\n\n"
        "Set these environment variables (or create a .env file), e.g.:\n"
        "  ZUORA_USERNAME=api-user@example.com\n"
        "  ZUORA_PASSWORD=...\n"
        "  ZUORA_SANDBOX=true           # optional; use apisandbox.zuora.com\n"
        "  ZUORA_LOG=true               # optional; log SOAP traffic (passwords are masked)\n\n"
        "Tip: run `zuora login --help` for more details on configuration."
    )
